"""Upload policy for invoice documents. Runs before any model call."""

from __future__ import annotations

from .contracts import InvalidInputError, UploadedDocument

ALLOWED_MIME_TYPES = frozenset({"image/png", "image/jpeg", "application/pdf"})
MAX_INVOICE_FILE_BYTES = 10 * 1024 * 1024

UNSUPPORTED_TYPE_MESSAGE = "Invalid file type. Please upload PNG, JPG, or PDF files."
FILE_TOO_LARGE_MESSAGE = "File too large. Maximum size is 10MB."
EMPTY_FILE_MESSAGE = "Uploaded file is empty."


def validate_upload(doc: UploadedDocument) -> None:
    """Raise ``InvalidInputError`` if *doc* breaks the upload policy.

    Type is checked before size so callers can tell the two apart.
    """
    if doc.mime_type not in ALLOWED_MIME_TYPES:
        raise InvalidInputError("unsupported_type", UNSUPPORTED_TYPE_MESSAGE)
    if doc.size_bytes > MAX_INVOICE_FILE_BYTES:
        raise InvalidInputError("file_too_large", FILE_TOO_LARGE_MESSAGE)
    if doc.size_bytes == 0:
        raise InvalidInputError("empty_file", EMPTY_FILE_MESSAGE)
