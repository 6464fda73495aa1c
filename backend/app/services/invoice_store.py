"""Persistence of extraction results, keyed by the owning user."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.invoice import Invoice
from app.services.ai.invoice_extract.contracts import ExtractionResult

logger = logging.getLogger(__name__)


def _amount_to_decimal(amount: str | None) -> Decimal | None:
    if amount is None:
        return None
    try:
        return Decimal(amount)
    except InvalidOperation:
        logger.warning("Dropping non-decimal amount %r", amount)
        return None


def save_invoice_record(
    db: Session,
    *,
    user_id: str,
    file_url: str,
    result: ExtractionResult,
) -> Invoice:
    """Insert one invoice row for *result*. The caller owns the commit."""
    if not user_id:
        raise ValueError("user_id is required")
    if not file_url:
        raise ValueError("file_url is required")

    record = result.record
    invoice = Invoice(
        user_id=user_id,
        file_url=file_url,
        vendor=record.vendor,
        invoice_date=record.date,
        amount=_amount_to_decimal(record.amount),
        amount_text=record.amount,
        currency=record.currency,
        confidence=result.confidence,
    )
    db.add(invoice)
    db.flush()
    logger.info("Stored invoice %s for user %s (confidence=%d)", invoice.id, user_id, result.confidence)
    return invoice


def list_user_invoices(db: Session, user_id: str) -> list[Invoice]:
    """Return *user_id*'s invoices, newest first."""
    stmt = (
        select(Invoice)
        .where(Invoice.user_id == user_id)
        .order_by(Invoice.created_at.desc(), Invoice.id.desc())
    )
    return list(db.execute(stmt).scalars().all())
