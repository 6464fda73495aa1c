"""AI Router — resolves the invoice extraction strategy (live / demo / auto) into a provider."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from app.core.config import Settings

from .providers import BaseProvider, get_provider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedConfig:
    """Final resolved provider + model after strategy selection."""

    provider: BaseProvider
    mode: str
    model: str
    timeout_seconds: float


def resolve_provider_name(settings: Settings) -> str:
    """Map ``AI_INVOICE_MODE`` to a provider name.

    * ``demo`` — always the canned demo provider.
    * ``live`` — always Gemini; missing credentials are a configuration error.
    * ``auto`` — Gemini when a real key is set, demo otherwise.
    """
    mode = settings.ai_invoice_mode
    if mode == "demo":
        return "demo"
    if mode == "auto" and not settings.has_gemini_credentials:
        logger.info("AI_INVOICE_MODE=auto without Gemini credentials, serving demo answers")
        return "demo"
    return "gemini"


def resolve(settings: Settings) -> ResolvedConfig:
    """Resolve provider + model for invoice extraction.

    Raises ``ProviderConfigError`` when the live provider is selected but
    cannot be built. No network I/O happens here.
    """
    provider_name = resolve_provider_name(settings)
    provider = get_provider(provider_name, settings)
    model = settings.ai_invoice_model if provider_name == "gemini" else ""

    return ResolvedConfig(
        provider=provider,
        mode=settings.ai_invoice_mode,
        model=model,
        timeout_seconds=settings.ai_invoice_timeout_seconds,
    )
