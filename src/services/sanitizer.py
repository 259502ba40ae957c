"""Field-level cleanup of extracted invoice rows.

A single bad row is dropped or corrected; it never fails the batch.
"""

import logging
import math
from typing import Any

from src.schemas.invoice import CandidateItem

logger = logging.getLogger(__name__)

NAME_MAX_LENGTH = 150
BRAND_MAX_LENGTH = 100
UNIT_MAX_LENGTH = 50
LOCATION_MAX_LENGTH = 100

DEFAULT_QUANTITY = 1
DEFAULT_UNIT = "pcs"
DEFAULT_LOCATION = "Pantry"
EXTRACTED_STATUS = "Fresh"


def clean_text(value: Any, max_length: int | None = None) -> str | None:
    """Coerce a scalar to a trimmed string, or None when absent or blank."""
    if value is None or isinstance(value, (dict, list, bool)):
        return None
    text = str(value).strip()
    if not text:
        return None
    return text[:max_length] if max_length else text


def coerce_quantity(value: Any) -> int:
    """Coerce a quantity to a whole number of at least 1."""
    if value is None or isinstance(value, bool):
        return DEFAULT_QUANTITY
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return DEFAULT_QUANTITY
    if math.isnan(number) or math.isinf(number) or number <= 0:
        return DEFAULT_QUANTITY
    return max(round(number), DEFAULT_QUANTITY)


def sanitize_candidate(raw: Any) -> CandidateItem | None:
    """Sanitize one extracted row; None means the row is dropped."""
    if not isinstance(raw, dict):
        return None

    name = clean_text(raw.get("name"), NAME_MAX_LENGTH)
    if name is None:
        return None

    return CandidateItem(
        name=name,
        brand=clean_text(raw.get("brand"), BRAND_MAX_LENGTH),
        quantity=coerce_quantity(raw.get("quantity")),
        unit=clean_text(raw.get("unit"), UNIT_MAX_LENGTH) or DEFAULT_UNIT,
        location=clean_text(raw.get("location"), LOCATION_MAX_LENGTH) or DEFAULT_LOCATION,
        category=clean_text(raw.get("category")),
        notes=clean_text(raw.get("notes")),
        status=EXTRACTED_STATUS,
    )


def sanitize_candidates(raw_items: list[Any]) -> list[CandidateItem]:
    """Sanitize a parsed extraction array.

    An empty result is a valid outcome; callers decide whether that is a
    user-facing failure.
    """
    result = []
    dropped = 0
    for index, raw in enumerate(raw_items):
        try:
            candidate = sanitize_candidate(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Dropping extracted row {index}: {e}")
            candidate = None
        if candidate is None:
            dropped += 1
            continue
        result.append(candidate)

    if dropped:
        logger.info(f"Sanitizer kept {len(result)} rows, dropped {dropped}")
    return result
