"""Tests for invoice persistence."""

import unittest
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.models.invoice import Base, Invoice
from app.services.ai.invoice_extract.contracts import ExtractionRecord, ExtractionResult
from app.services.invoice_store import list_user_invoices, save_invoice_record


def _result(vendor: str, amount: str | None = "250.5", confidence: int = 100) -> ExtractionResult:
    record = ExtractionRecord(vendor=vendor, date="2024-01-15", amount=amount, currency="USD")
    return ExtractionResult(record=record, confidence=confidence, raw_model_text="{}")


class InvoiceStoreTests(unittest.TestCase):
    def setUp(self):
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine)
        self.db = self.SessionLocal()

    def tearDown(self):
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def test_save_maps_record_fields(self):
        invoice = save_invoice_record(
            self.db, user_id="user-1", file_url="https://files.example/inv.png", result=_result("Acme")
        )
        self.db.commit()

        stored = self.db.get(Invoice, invoice.id)
        self.assertEqual(stored.vendor, "Acme")
        self.assertEqual(stored.invoice_date, "2024-01-15")
        self.assertEqual(Decimal(stored.amount), Decimal("250.5"))
        self.assertEqual(stored.currency, "USD")
        self.assertEqual(stored.confidence, 100)
        self.assertIsNotNone(stored.created_at)

    def test_null_amount_stored_as_null(self):
        invoice = save_invoice_record(
            self.db, user_id="user-1", file_url="f", result=_result("Acme", amount=None, confidence=75)
        )
        self.db.commit()
        self.assertIsNone(self.db.get(Invoice, invoice.id).amount)
        self.assertIsNone(self.db.get(Invoice, invoice.id).amount_text)

    def test_amount_text_keeps_full_precision(self):
        invoice = save_invoice_record(
            self.db, user_id="user-1", file_url="f", result=_result("Acme", amount="0.0000001")
        )
        self.db.commit()

        stored = self.db.get(Invoice, invoice.id)
        self.assertEqual(stored.amount_text, "0.0000001")

    def test_list_is_per_user_newest_first(self):
        save_invoice_record(self.db, user_id="user-1", file_url="a", result=_result("First"))
        save_invoice_record(self.db, user_id="user-2", file_url="b", result=_result("Other"))
        save_invoice_record(self.db, user_id="user-1", file_url="c", result=_result("Second"))
        self.db.commit()

        vendors = [inv.vendor for inv in list_user_invoices(self.db, "user-1")]
        self.assertEqual(vendors, ["Second", "First"])
        self.assertEqual(list_user_invoices(self.db, "nobody"), [])

    def test_owner_required(self):
        with self.assertRaises(ValueError):
            save_invoice_record(self.db, user_id="", file_url="a", result=_result("Acme"))
