"""Invoice ingestion: extraction into candidates, and commit of reviewed rows."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from src.config import get_settings
from src.models.category import Category
from src.models.enums import ItemStatus
from src.models.kitchen import Kitchen
from src.schemas.invoice import CandidateItem
from src.services.document import NormalizedDocument
from src.services.exceptions import NotFoundError, ValidationError
from src.services.extraction import ExtractionClient
from src.services.item_service import add_item
from src.services.sanitizer import (
    BRAND_MAX_LENGTH,
    DEFAULT_LOCATION,
    DEFAULT_UNIT,
    LOCATION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    UNIT_MAX_LENGTH,
    clean_text,
    coerce_quantity,
    sanitize_candidates,
)
from src.services.staging import StagedRow

logger = logging.getLogger(__name__)

DEFAULT_INVOICE_NOTE = "Added from invoice"
_VALID_STATUSES = {s.value for s in ItemStatus}


async def extract_invoice_items(
    client: ExtractionClient,
    document: NormalizedDocument,
    categories: list[str] | None = None,
) -> list[CandidateItem]:
    """Run extraction and sanitization for one document.

    May return an empty list; the caller decides how to report that.
    """
    raw_items = await client.extract(document, categories)
    candidates = sanitize_candidates(raw_items)
    logger.info(f"Invoice extraction produced {len(candidates)} of {len(raw_items)} rows")
    return candidates


class InvoiceCommitService:
    """Turns selected review rows into inventory items, one transaction per row."""

    def __init__(self, db: Session, currency: str | None = None):
        self.db = db
        self.currency = currency or get_settings().currency_symbol

    def commit(self, kitchen_id: int, rows: list[StagedRow], user_id: int) -> int:
        """Persist every selected row into the kitchen.

        A failing row is logged and skipped; the rest of the batch still
        goes through.

        Returns:
            Number of items added

        Raises:
            ValidationError: no row is selected
            NotFoundError: the kitchen does not belong to the user
        """
        selected = [row for row in rows if row.selected]
        if not selected:
            raise ValidationError("Please select at least one item to add")

        kitchen = (
            self.db.query(Kitchen)
            .filter(Kitchen.id == kitchen_id, Kitchen.user_id == user_id)
            .first()
        )
        if not kitchen:
            raise NotFoundError("Kitchen not found")

        categories = {c.name: c.id for c in self.db.query(Category).all()}
        added = 0

        for row in selected:
            try:
                fields = self._build_fields(row, categories)
                add_item(self.db, kitchen_id, fields, user_id=user_id)
                self.db.commit()
                added += 1
            except Exception as e:
                self.db.rollback()
                logger.warning(f"Skipping invoice row {row.id} ({row.name!r}): {e}")

        logger.info(f"Committed {added} of {len(selected)} selected rows to kitchen {kitchen_id}")
        return added

    def _resolve_category_id(self, name: Any, categories: dict[str, int]) -> int | None:
        """Exact-name lookup; unknown names resolve to None."""
        category_name = clean_text(name)
        if category_name is None:
            return None
        return categories.get(category_name)

    def _default_note(self, price: Any) -> str:
        # Extraction output carries no price field; only a reviewer-supplied price reaches here
        price_text = clean_text(price)
        if price_text is not None:
            return f"Bought for {self.currency}{price_text}"
        return DEFAULT_INVOICE_NOTE

    def _build_fields(self, row: StagedRow, categories: dict[str, int]) -> dict[str, Any]:
        name = clean_text(row.name, NAME_MAX_LENGTH)
        if name is None:
            raise ValidationError("Item name is required")

        status = clean_text(row.status)
        return {
            "name": name,
            "brand": clean_text(row.brand, BRAND_MAX_LENGTH),
            "quantity": coerce_quantity(row.quantity),
            "unit": clean_text(row.unit, UNIT_MAX_LENGTH) or DEFAULT_UNIT,
            "category_id": self._resolve_category_id(row.category, categories),
            "location": clean_text(row.location, LOCATION_MAX_LENGTH) or DEFAULT_LOCATION,
            "status": status if status in _VALID_STATUSES else ItemStatus.FRESH.value,
            "notes": clean_text(row.notes) or self._default_note(row.price),
        }
