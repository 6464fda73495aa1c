import asyncio
import os
from dataclasses import dataclass, field

import httpx
import pytest
import pytest_asyncio

from app.core.config import get_settings
from app.services.ai.common.providers.base import BaseProvider, ProviderResult

BASE_URL = os.getenv("BASE_URL", "http://127.0.0.1:8000")

P3_RAW_TEXT = '{"vendor":"Acme","date":"2024-01-15","amount":250.5,"currency":"usd"}'


@pytest.fixture(autouse=True)
def _reset_settings_cache(monkeypatch):
    # A developer's real key or mode must not leak into tests.
    for name in (
        "GOOGLE_GEMINI_API_KEY",
        "GEMINI_API_KEY",
        "AI_INVOICE_MODE",
        "RATE_LIMIT_API_ENABLED",
        "SECURITY_HEADERS_ENABLED",
        "SECURE_HEADERS_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@dataclass
class RecordingProvider(BaseProvider):
    """Stand-in for the live vision model that records every call."""

    raw_text: str = P3_RAW_TEXT
    error: Exception | None = None
    delay_seconds: float = 0.0
    calls: list[dict] = field(default_factory=list)
    name: str = "gemini"

    async def generate(self, prompt: str, **kwargs) -> ProviderResult:
        self.calls.append({"prompt": prompt, **kwargs})
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return ProviderResult(raw_text=self.raw_text, model=kwargs.get("model") or "test-model", provider=self.name)


@pytest.fixture
def recording_provider(monkeypatch):
    """Route every live provider lookup to a ``RecordingProvider``."""
    provider = RecordingProvider()

    from app.services.ai.common import router as ai_router
    from app.services.ai.common.providers import get_provider as real_get_provider

    def _get_provider(name, settings):
        if name == "gemini":
            real_get_provider(name, settings)  # keeps the credential check
            return provider
        return real_get_provider(name, settings)

    monkeypatch.setattr(ai_router, "get_provider", _get_provider)
    return provider


@pytest.fixture
def live_env(monkeypatch):
    monkeypatch.setenv("AI_INVOICE_MODE", "live")
    monkeypatch.setenv("GOOGLE_GEMINI_API_KEY", "test-gemini-key")
    get_settings.cache_clear()


@pytest.fixture
def demo_env(monkeypatch):
    monkeypatch.setenv("AI_INVOICE_MODE", "demo")
    get_settings.cache_clear()


async def _make_asgi_client():
    """Create an in-process ASGI client."""
    from app.main import app

    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://test")


@pytest_asyncio.fixture
async def client():
    # Set USE_LIVE_SERVER=true to run against a running server at BASE_URL (manual smoke tests).
    use_live_server = os.getenv("USE_LIVE_SERVER", "").strip().lower() in {"1", "true", "yes"}
    if use_live_server:
        async with httpx.AsyncClient(base_url=BASE_URL) as c:
            yield c
        return

    c = await _make_asgi_client()
    async with c:
        yield c
