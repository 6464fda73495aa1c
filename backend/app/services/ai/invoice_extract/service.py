"""Invoice extraction service — validate, invoke, normalize, score.

Stages run strictly in order and none is retried. The outcome is either an
``ExtractionResult`` or exactly one ``InvoiceExtractError`` subclass.
"""

from __future__ import annotations

import logging
import time
import uuid

from app.core.config import Settings, get_settings

from ..common import router as ai_router
from ..common.audit import log_ai_run
from ..common.providers import ProviderConfigError
from .contracts import (
    ExtractionResult,
    MisconfiguredError,
    NoDataExtractedError,
    UploadedDocument,
)
from .invoker import invoke_model
from .normalizer import normalize_response
from .prompt import INVOICE_EXTRACT_PROMPT
from .scoring import score_confidence
from .validation import validate_upload

logger = logging.getLogger(__name__)


async def extract_invoice(
    doc: UploadedDocument,
    *,
    settings: Settings | None = None,
    request_id: str | None = None,
) -> ExtractionResult:
    """Extract vendor, date, amount and currency from *doc*.

    Raises ``InvalidInputError``, ``MisconfiguredError``,
    ``ModelUnavailableError`` or ``NoDataExtractedError``.
    """
    settings = settings or get_settings()
    request_id = request_id or uuid.uuid4().hex
    t0 = time.monotonic()

    validate_upload(doc)

    try:
        config = ai_router.resolve(settings)
    except ProviderConfigError as exc:
        logger.error("Invoice extraction misconfigured (request_id=%s): %s", request_id, exc)
        raise MisconfiguredError(str(exc)) from exc

    remaining = settings.ai_invoice_timeout_seconds - (time.monotonic() - t0)
    provider_result = await invoke_model(doc, INVOICE_EXTRACT_PROMPT, config, budget_seconds=remaining)

    record = normalize_response(provider_result.raw_text)
    confidence = score_confidence(record)

    log_ai_run(
        settings,
        scope="invoice_extract",
        provider_result=provider_result,
        prompt_text=INVOICE_EXTRACT_PROMPT,
        parsed_output=record.model_dump(),
        extra_meta={
            "request_id": request_id,
            "mode": config.mode,
            "mime_type": doc.mime_type,
            "size_bytes": doc.size_bytes,
            "confidence": confidence,
        },
    )

    if confidence == 0:
        logger.info("No invoice fields extracted (request_id=%s)", request_id)
        raise NoDataExtractedError()

    total_ms = (time.monotonic() - t0) * 1000
    logger.info(
        "Invoice extracted (request_id=%s, provider=%s, confidence=%d, %.0fms)",
        request_id,
        provider_result.provider,
        confidence,
        total_ms,
    )
    return ExtractionResult(
        record=record,
        confidence=confidence,
        raw_model_text=provider_result.raw_text,
        provider=provider_result.provider,
        model=provider_result.model,
        latency_ms=round(total_ms, 2),
    )
