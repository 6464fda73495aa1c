"""AI audit — one structured log line per model run, with hashed prompt and response."""

from __future__ import annotations

import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Any

from app.core.config import Settings

from .providers.base import ProviderResult

logger = logging.getLogger("app.ai.audit")

# Scope-dependent audit actions. Falls back to "AI_RUN" for unknown scopes.
SCOPE_ACTIONS: dict[str, str] = {
    "invoice_extract": "AI_INVOICE_EXTRACTED",
}


def build_ai_run_entry(
    settings: Settings,
    *,
    scope: str,
    provider_result: ProviderResult,
    prompt_text: str,
    parsed_output: dict[str, Any] | None,
    extra_meta: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the audit payload for a model run.

    PII: prompt and response are always hashed; raw text is only included
    when ``AI_DEBUG_STORE_RAW=true``.
    """
    entry: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "action": SCOPE_ACTIONS.get(scope, "AI_RUN"),
        "scope": scope,
        "provider": provider_result.provider,
        "model": provider_result.model,
        "prompt_tokens": provider_result.prompt_tokens,
        "completion_tokens": provider_result.completion_tokens,
        "latency_ms": provider_result.latency_ms,
        "prompt_hash": hashlib.sha256(prompt_text.encode()).hexdigest(),
        "response_hash": hashlib.sha256(provider_result.raw_text.encode()).hexdigest(),
        "output": parsed_output,
    }

    if settings.ai_debug_store_raw:
        entry["prompt_raw"] = prompt_text
        entry["response_raw"] = provider_result.raw_text

    if extra_meta:
        entry.update(extra_meta)
    return entry


def log_ai_run(settings: Settings, **kwargs: Any) -> None:
    """Write an AI run audit entry to the audit logger."""
    entry = build_ai_run_entry(settings, **kwargs)
    logger.info("AUDIT | %s", json.dumps(entry, ensure_ascii=False, default=str))
