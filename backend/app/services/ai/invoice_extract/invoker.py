"""Single network boundary of the invoice pipeline."""

from __future__ import annotations

import asyncio
import logging

from ..common.providers.base import ProviderError, ProviderResult
from ..common.router import ResolvedConfig
from .contracts import ModelUnavailableError, UploadedDocument
from .prompt import GENERATION_CONFIG

logger = logging.getLogger(__name__)


async def invoke_model(
    doc: UploadedDocument,
    prompt: str,
    config: ResolvedConfig,
    *,
    budget_seconds: float | None = None,
) -> ProviderResult:
    """Send *doc* and *prompt* to the resolved provider and return its raw answer.

    *budget_seconds* is what is left of the request budget; the call is
    abandoned once it runs out. Every provider failure surfaces as
    ``ModelUnavailableError``. There are no retries.
    """
    budget = config.timeout_seconds if budget_seconds is None else budget_seconds
    if budget <= 0:
        raise ModelUnavailableError("The invoice analysis timed out. Please try again.")

    try:
        return await asyncio.wait_for(
            config.provider.generate(
                prompt,
                document=doc.content,
                mime_type=doc.mime_type,
                model=config.model,
                temperature=GENERATION_CONFIG["temperature"],
                max_tokens=GENERATION_CONFIG["max_tokens"],
                top_p=GENERATION_CONFIG["top_p"],
                top_k=GENERATION_CONFIG["top_k"],
                timeout_seconds=budget,
            ),
            timeout=budget,
        )
    except asyncio.TimeoutError as exc:
        logger.warning("Provider %s exceeded %.1fs budget", config.provider.name, budget)
        raise ModelUnavailableError("The invoice analysis timed out. Please try again.") from exc
    except ProviderError as exc:
        logger.warning("Provider %s failed: %s", config.provider.name, exc)
        raise ModelUnavailableError() from exc
    except Exception as exc:
        logger.exception("AI invoice extraction call failed")
        raise ModelUnavailableError() from exc
