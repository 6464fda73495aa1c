"""Demo provider — canned invoice answer, no network I/O."""

from __future__ import annotations

import json
import time

from .base import BaseProvider, ProviderResult

DEMO_INVOICE = {
    "vendor": "Maersk Logistics Ltd.",
    "date": "2024-03-18",
    "amount": "4825.50",
    "currency": "USD",
}


class DemoProvider(BaseProvider):
    name = "demo"

    async def generate(
        self,
        prompt: str,
        *,
        document: bytes | None = None,
        mime_type: str = "",
        model: str = "",
        temperature: float = 0.1,
        max_tokens: int = 1024,
        top_p: float | None = None,
        top_k: int | None = None,
        timeout_seconds: float = 30.0,
    ) -> ProviderResult:
        t0 = time.monotonic()
        text = json.dumps(DEMO_INVOICE)
        elapsed = (time.monotonic() - t0) * 1000
        return ProviderResult(
            raw_text=text,
            model="demo-v1",
            provider=self.name,
            prompt_tokens=len(prompt.split()),
            completion_tokens=len(text.split()),
            latency_ms=round(elapsed, 2),
        )
