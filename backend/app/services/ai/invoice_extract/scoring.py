"""Completeness score for an extraction record."""

from __future__ import annotations

from .contracts import INVOICE_FIELDS, ExtractionRecord


def score_confidence(record: ExtractionRecord) -> int:
    """Share of non-null fields as a 0-100 integer.

    This is a completeness proxy, not a calibrated probability.
    """
    return round(record.filled_count() / len(INVOICE_FIELDS) * 100)
