"""Best-effort JSON object extraction from LLM responses.

Models are told to answer with JSON only but routinely wrap it in prose or
markdown fences. The heuristic is deliberately simple: the candidate object is
everything from the first ``{`` to the last ``}``. When no such span exists, or
the span does not parse as a JSON object, the result is ``None`` and callers
treat the answer as empty.
"""

from __future__ import annotations

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)


def find_object_span(text: str) -> str:
    """Return the substring from the first ``{`` to the last ``}``, or ``""``."""
    if not text:
        return ""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return ""
    return text[start : end + 1]


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Parse the brace span of *text* as a JSON object.

    Returns ``None`` for no span, invalid JSON, or a top-level value that is
    not an object.
    """
    candidate = find_object_span(text)
    if not candidate:
        return None

    try:
        parsed = json.loads(candidate)
    except (json.JSONDecodeError, ValueError):
        logger.debug("Brace span is not valid JSON (%d chars)", len(candidate))
        return None

    if not isinstance(parsed, dict):
        return None
    return parsed
