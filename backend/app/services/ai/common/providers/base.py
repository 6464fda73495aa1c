"""Abstract base for all AI providers."""

from __future__ import annotations

import abc
from dataclasses import dataclass


@dataclass(frozen=True)
class ProviderResult:
    """Immutable result returned by every provider."""

    raw_text: str
    model: str
    provider: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency_ms: float = 0.0


class ProviderError(Exception):
    """The provider could not produce a response (network, HTTP status, payload shape)."""


class BaseProvider(abc.ABC):
    """Contract that every vision provider must implement."""

    name: str = "base"

    @abc.abstractmethod
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
        """Send *prompt* (and the optional inline *document*) and return a ``ProviderResult``."""
