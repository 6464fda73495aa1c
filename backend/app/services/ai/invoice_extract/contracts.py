"""Invoice extract scope contracts — document, record, result and error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict

INVOICE_FIELDS = ("vendor", "date", "amount", "currency")


@dataclass(frozen=True)
class UploadedDocument:
    """Raw upload as received by the pipeline; lives for a single call."""

    content: bytes = field(repr=False)
    mime_type: str
    size_bytes: int = -1
    filename: str | None = None

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            object.__setattr__(self, "size_bytes", len(self.content))


class ExtractionRecord(BaseModel):
    """The four extracted invoice fields. ``None`` means "not found"."""

    model_config = ConfigDict(frozen=True)

    vendor: str | None = None
    date: str | None = None
    amount: str | None = None
    currency: str | None = None

    def filled_count(self) -> int:
        return sum(1 for name in INVOICE_FIELDS if getattr(self, name) is not None)

    def is_empty(self) -> bool:
        return self.filled_count() == 0


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of one successful extraction."""

    record: ExtractionRecord
    confidence: int
    raw_model_text: str
    provider: str = ""
    model: str = ""
    # Timing varies per run and is not part of the result identity.
    latency_ms: float = field(default=0.0, compare=False)


# ─── Errors ──────────────────────────────────────────


class InvoiceExtractError(Exception):
    """Base for every structured extraction failure."""

    kind = "error"
    status_code = 500
    default_message = "Failed to parse invoice."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(InvoiceExtractError):
    kind = "invalid_input"
    status_code = 400
    default_message = "Invalid upload."

    def __init__(self, reason: str, message: str | None = None) -> None:
        self.reason = reason
        super().__init__(message)


class MisconfiguredError(InvoiceExtractError):
    kind = "misconfigured"
    status_code = 500
    default_message = "Invoice extraction service is not configured"


class ModelUnavailableError(InvoiceExtractError):
    kind = "model_unavailable"
    status_code = 502
    default_message = "The invoice analysis service is unavailable right now. Please try again."


class NoDataExtractedError(InvoiceExtractError):
    kind = "no_data_extracted"
    status_code = 422
    default_message = (
        "Could not extract invoice data. Please ensure the image is clear and contains invoice information."
    )
