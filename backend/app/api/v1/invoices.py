"""Invoice parsing endpoints — upload → extraction envelope, and spreadsheet export."""

from __future__ import annotations

import logging
import uuid
from typing import Optional

from fastapi import APIRouter, File, Response, UploadFile
from fastapi.responses import JSONResponse

from app.core.config import get_settings
from app.schemas.invoice import InvoiceExportRequest, ParseInvoiceResponse
from app.services.ai.invoice_extract.contracts import InvoiceExtractError, UploadedDocument
from app.services.ai.invoice_extract.service import extract_invoice
from app.services.ai.invoice_extract.validation import MAX_INVOICE_FILE_BYTES
from app.services.invoice_export import export_invoice_xlsx

logger = logging.getLogger(__name__)

router = APIRouter()

NO_FILE_MESSAGE = "No file provided"
UNEXPECTED_ERROR_MESSAGE = "Failed to parse invoice. An unexpected error occurred, please try again."
METHOD_NOT_ALLOWED_MESSAGE = "Method not allowed. Use POST with multipart form data."


def _envelope(status_code: int, body: ParseInvoiceResponse, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.to_envelope(), headers=headers)


async def _read_upload(file: UploadFile) -> bytes:
    # Read one byte past the limit; the validator only needs to know it is too big.
    return await file.read(MAX_INVOICE_FILE_BYTES + 1)


@router.post("/parse", response_model=ParseInvoiceResponse, summary="Extract invoice fields from an upload")
async def parse_invoice(file: Optional[UploadFile] = File(None)):
    if file is None:
        return _envelope(400, ParseInvoiceResponse(success=False, error=NO_FILE_MESSAGE))

    request_id = uuid.uuid4().hex
    try:
        content = await _read_upload(file)
        size = file.size if file.size is not None else len(content)
        doc = UploadedDocument(
            content=content,
            mime_type=(file.content_type or "").split(";")[0].strip().lower(),
            size_bytes=max(size, len(content)),
            filename=file.filename,
        )
        result = await extract_invoice(doc, settings=get_settings(), request_id=request_id)
    except InvoiceExtractError as exc:
        logger.info("Invoice parse rejected (request_id=%s, kind=%s)", request_id, exc.kind)
        return _envelope(exc.status_code, ParseInvoiceResponse(success=False, error=exc.message))
    except Exception:
        logger.exception("Invoice parsing error (request_id=%s)", request_id)
        return _envelope(500, ParseInvoiceResponse(success=False, error=UNEXPECTED_ERROR_MESSAGE))
    finally:
        await file.close()

    return _envelope(
        200,
        ParseInvoiceResponse(success=True, data=result.record),
        headers={"X-Extraction-Confidence": str(result.confidence), "X-Request-ID": request_id},
    )


@router.api_route("/parse", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def parse_invoice_wrong_method():
    return _envelope(
        405,
        ParseInvoiceResponse(success=False, error=METHOD_NOT_ALLOWED_MESSAGE),
        headers={"Allow": "POST"},
    )


@router.post("/invoices/export", summary="Download an extraction record as .xlsx")
def export_invoice(body: InvoiceExportRequest):
    exported = export_invoice_xlsx(body.record, body.base_name)
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
