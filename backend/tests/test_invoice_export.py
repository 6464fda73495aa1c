"""Tests for the .xlsx export of an extraction record."""

import io
import unittest

import pytest
from openpyxl import load_workbook

from app.services.ai.invoice_extract.contracts import ExtractionRecord
from app.services.invoice_export import XLSX_MEDIA_TYPE, export_invoice_xlsx, safe_base_name


def _rows(content: bytes) -> list[tuple]:
    ws = load_workbook(io.BytesIO(content)).active
    return [tuple(row) for row in ws.iter_rows(values_only=True)]


class InvoiceExportTests(unittest.TestCase):
    def test_full_record(self):
        record = ExtractionRecord(vendor="Acme", date="2024-01-15", amount="250.5", currency="USD")
        exported = export_invoice_xlsx(record, "acme_invoice")

        self.assertEqual(exported.filename, "acme_invoice.xlsx")
        self.assertEqual(exported.media_type, XLSX_MEDIA_TYPE)
        rows = _rows(exported.content)
        self.assertEqual(rows[0], ("Vendor", "Date", "Amount", "Currency"))
        self.assertEqual(rows[1][0], "Acme")
        self.assertEqual(rows[1][1], "2024-01-15")
        self.assertAlmostEqual(float(rows[1][2]), 250.5)
        self.assertEqual(rows[1][3], "USD")

    def test_missing_fields_are_blank(self):
        exported = export_invoice_xlsx(ExtractionRecord(vendor="Acme"), None)
        self.assertEqual(exported.filename, "invoice.xlsx")
        self.assertEqual(_rows(exported.content)[1], ("Acme", None, None, None))

    def test_base_name_sanitised(self):
        self.assertEqual(safe_base_name("../../etc/passwd"), "etc_passwd")
        self.assertEqual(safe_base_name("Q1 freight"), "Q1_freight")
        self.assertEqual(safe_base_name("   "), "invoice")


@pytest.mark.asyncio
async def test_export_endpoint(client):
    r = await client.post(
        "/api/v1/invoices/export",
        json={
            "record": {"vendor": "Acme", "date": "2024-01-15", "amount": "250.5", "currency": "USD"},
            "base_name": "vectralogic_invoice",
        },
    )

    assert r.status_code == 200
    assert r.headers["content-type"] == XLSX_MEDIA_TYPE
    assert 'filename="vectralogic_invoice.xlsx"' in r.headers["content-disposition"]
    assert _rows(r.content)[1][0] == "Acme"
