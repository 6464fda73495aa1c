"""Turns free-form model text into a type-pure ``ExtractionRecord``.

Every field has exactly one coercion rule and anything that does not fit the
rule becomes ``None``. ``normalize_response`` never raises: unparseable output
is an expected outcome of a generative model, and the orchestrator decides
whether an all-null record is a failure.
"""

from __future__ import annotations

import logging
import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from ..common.json_tools import extract_json_object
from .contracts import ExtractionRecord

logger = logging.getLogger(__name__)

_AMOUNT_RE = re.compile(r"^-?\d+(\.\d+)?$", re.ASCII)
_GROUPED_AMOUNT_RE = re.compile(r"^-?\d{1,3}(,\d{3})+(\.\d+)?$", re.ASCII)
_CURRENCY_RE = re.compile(r"^[A-Z]{3}$")
_CURRENCY_SYMBOLS = "$€£¥₹₩₽₺₫₱"


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def _as_text(value: Any) -> str | None:
    if _is_blank(value) or not isinstance(value, str):
        return None
    try:
        # Lone surrogates from JSON escapes cannot be rendered in a response body.
        value.encode("utf-8")
    except UnicodeEncodeError:
        return None
    return value


def normalize_vendor(value: Any) -> str | None:
    return _as_text(value)


def normalize_date(value: Any) -> str | None:
    # Calendar correctness is the model's job; the string is passed through.
    return _as_text(value)


def _format_number(value: int | float) -> str | None:
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        return None
    if value.is_integer():
        return str(int(value))
    # repr() gives the shortest round-tripping form; format "f" avoids exponents.
    return format(Decimal(repr(value)), "f")


def normalize_amount(value: Any) -> str | None:
    if _is_blank(value) or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return _format_number(value)
    if not isinstance(value, str):
        return None

    cleaned = value.strip().strip(_CURRENCY_SYMBOLS).strip()
    if "," in cleaned:
        # Only "1,234.56"-style grouping is unambiguous; "12,50" could be a decimal comma.
        if not _GROUPED_AMOUNT_RE.match(cleaned):
            return None
        cleaned = cleaned.replace(",", "")
    if not _AMOUNT_RE.match(cleaned):
        return None
    try:
        Decimal(cleaned)
    except InvalidOperation:
        return None
    return cleaned


def normalize_currency(value: Any) -> str | None:
    if _is_blank(value) or not isinstance(value, str):
        return None
    code = value.strip().upper()
    if not _CURRENCY_RE.match(code):
        return None
    return code


def normalize_fields(payload: dict[str, Any]) -> ExtractionRecord:
    return ExtractionRecord(
        vendor=normalize_vendor(payload.get("vendor")),
        date=normalize_date(payload.get("date")),
        amount=normalize_amount(payload.get("amount")),
        currency=normalize_currency(payload.get("currency")),
    )


def normalize_response(raw_text: str) -> ExtractionRecord:
    """Extract and coerce the invoice fields from *raw_text*."""
    payload = extract_json_object(raw_text or "")
    if payload is None:
        logger.warning("Model response contained no JSON object: %s", (raw_text or "")[:200])
        return ExtractionRecord()
    return normalize_fields(payload)
