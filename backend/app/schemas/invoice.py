from typing import Optional

from pydantic import BaseModel, Field

from app.services.ai.invoice_extract.contracts import ExtractionRecord


class ParseInvoiceResponse(BaseModel):
    success: bool
    data: Optional[ExtractionRecord] = None
    error: Optional[str] = None

    def to_envelope(self) -> dict:
        """JSON body without the keys that do not apply."""
        body: dict = {"success": self.success}
        if self.data is not None:
            body["data"] = self.data.model_dump()
        if self.error is not None:
            body["error"] = self.error
        return body


class InvoiceExportRequest(BaseModel):
    record: ExtractionRecord
    base_name: str = Field(default="invoice", max_length=120)
