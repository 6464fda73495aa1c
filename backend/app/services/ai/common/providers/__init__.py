"""Provider factory — returns the provider instance for a resolved strategy."""

from __future__ import annotations

import logging

from app.core.config import Settings

from .base import BaseProvider, ProviderError, ProviderResult
from .demo import DemoProvider

logger = logging.getLogger(__name__)

__all__ = [
    "get_provider",
    "BaseProvider",
    "DemoProvider",
    "ProviderConfigError",
    "ProviderError",
    "ProviderResult",
]


class ProviderConfigError(Exception):
    """The requested provider cannot be built from the current settings."""


def get_provider(provider_name: str, settings: Settings) -> BaseProvider:
    """Return a provider instance for *provider_name*.

    Unlike a silent fallback, a live provider without credentials raises
    ``ProviderConfigError``; demo answers are only served when asked for.
    """
    name = provider_name.lower().strip()

    if name == "demo":
        return DemoProvider()

    if name == "gemini":
        if not settings.has_gemini_credentials:
            logger.warning("GOOGLE_GEMINI_API_KEY not set or placeholder – refusing live provider")
            raise ProviderConfigError("Google Gemini API key not configured")
        from .gemini import GeminiProvider

        return GeminiProvider(api_key=settings.gemini_api_key.strip(), base_url=settings.ai_gemini_base_url)

    raise ProviderConfigError(f"Unknown provider {name!r}")
