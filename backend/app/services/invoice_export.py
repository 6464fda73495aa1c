"""Spreadsheet export of an extraction record."""

from __future__ import annotations

import io
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from app.services.ai.invoice_extract.contracts import ExtractionRecord

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_TITLE = "Invoice"
HEADERS = ("Vendor", "Date", "Amount", "Currency")
DEFAULT_BASE_NAME = "invoice"

_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class ExportedFile:
    filename: str
    content: bytes
    media_type: str = XLSX_MEDIA_TYPE


def safe_base_name(base_name: str | None) -> str:
    cleaned = _UNSAFE_NAME_CHARS.sub("_", (base_name or "").strip()).strip("._")
    return cleaned[:80] or DEFAULT_BASE_NAME


def _amount_cell(amount: str | None) -> Decimal | str | None:
    if amount is None:
        return None
    try:
        return Decimal(amount)
    except InvalidOperation:
        return amount


def export_invoice_xlsx(record: ExtractionRecord, base_name: str | None = None) -> ExportedFile:
    """Render *record* as a one-row workbook named after *base_name*."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append(list(HEADERS))
    for cell in ws[1]:
        cell.font = Font(bold=True)
    ws.append([record.vendor, record.date, _amount_cell(record.amount), record.currency])

    for idx, header in enumerate(HEADERS, start=1):
        value = ws.cell(row=2, column=idx).value
        width = max(len(header), len(str(value)) if value is not None else 0)
        ws.column_dimensions[get_column_letter(idx)].width = width + 4

    buf = io.BytesIO()
    wb.save(buf)
    return ExportedFile(filename=f"{safe_base_name(base_name)}.xlsx", content=buf.getvalue())
