"""Google Gemini provider (generateContent REST API with inline document data)."""

from __future__ import annotations

import base64
import logging
import time

import httpx

from .base import BaseProvider, ProviderError, ProviderResult

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiProvider(BaseProvider):
    name = "gemini"

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._transport = transport

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
        model = model or "gemini-1.5-flash"
        t0 = time.monotonic()

        parts: list[dict] = [{"text": prompt}]
        if document is not None:
            parts.append(
                {
                    "inline_data": {
                        "mime_type": mime_type,
                        "data": base64.b64encode(document).decode("ascii"),
                    }
                }
            )

        generation_config: dict[str, float | int] = {
            "temperature": temperature,
            "maxOutputTokens": max_tokens,
        }
        if top_p is not None:
            generation_config["topP"] = top_p
        if top_k is not None:
            generation_config["topK"] = top_k

        try:
            async with httpx.AsyncClient(timeout=timeout_seconds, transport=self._transport) as client:
                resp = await client.post(
                    f"{self._base_url}/{model}:generateContent",
                    headers={
                        "x-goog-api-key": self._api_key,
                        "Content-Type": "application/json",
                    },
                    json={
                        "contents": [{"role": "user", "parts": parts}],
                        "generationConfig": generation_config,
                    },
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning("Gemini returned HTTP %s for model %s", exc.response.status_code, model)
            raise ProviderError(f"gemini http {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            logger.warning("Gemini request failed: %s", type(exc).__name__)
            raise ProviderError("gemini transport error") from exc
        except ValueError as exc:
            raise ProviderError("gemini returned a non-JSON body") from exc

        try:
            candidate_parts = data["candidates"][0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in candidate_parts)
        except (KeyError, IndexError, TypeError) as exc:
            # Blocked prompts come back without candidates.
            block_reason = (data.get("promptFeedback") or {}).get("blockReason") if isinstance(data, dict) else None
            logger.warning("Gemini response had no usable candidate (block_reason=%s)", block_reason)
            raise ProviderError("gemini response missing candidates") from exc

        elapsed = (time.monotonic() - t0) * 1000
        usage = data.get("usageMetadata", {})

        return ProviderResult(
            raw_text=text,
            model=model,
            provider=self.name,
            prompt_tokens=usage.get("promptTokenCount", 0),
            completion_tokens=usage.get("candidatesTokenCount", 0),
            latency_ms=round(elapsed, 2),
        )
