"""Inventory item mutations, each recorded in the item log."""

import logging
from datetime import date
from typing import Any

from sqlalchemy.orm import Session

from src.models.category import Category
from src.models.enums import ItemAction, ItemStatus
from src.models.item import InventoryItem
from src.models.item_log import ItemLog
from src.models.kitchen import Kitchen
from src.services.exceptions import NotFoundError, ValidationError
from src.services.expiry import derive_status

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def _validate_category_id(db: Session, category_id: int | None) -> int | None:
    if not category_id:
        return None
    if not db.query(Category).filter(Category.id == category_id).first():
        raise ValidationError("Category not found")
    return category_id


def _validate_fields(name: str | None, quantity: Any) -> str:
    if not name or not name.strip():
        raise ValidationError("Ingredient name is required")
    if quantity is None or isinstance(quantity, bool) or not isinstance(quantity, int):
        raise ValidationError("Valid quantity is required")
    if quantity < 0:
        raise ValidationError("Quantity cannot be negative")
    return name.strip()


def log_item_action(
    db: Session,
    item: InventoryItem,
    action: ItemAction,
    quantity: int,
    previous_quantity: int | None = None,
    user_id: int | None = None,
) -> ItemLog:
    """Append an entry to the item log (flushed, not committed)."""
    entry = ItemLog(
        item=item,
        action=action.value,
        quantity=quantity,
        previous_quantity=previous_quantity,
        user_id=user_id,
    )
    db.add(entry)
    db.flush()
    return entry


def get_user_item(db: Session, item_id: int, user_id: int) -> InventoryItem:
    """Get an item from one of the user's kitchens."""
    item = (
        db.query(InventoryItem)
        .join(Kitchen, InventoryItem.kitchen_id == Kitchen.id)
        .filter(InventoryItem.id == item_id, Kitchen.user_id == user_id)
        .first()
    )
    if not item:
        raise NotFoundError("Item not found")
    return item


def list_kitchen_items(db: Session, kitchen_id: int) -> list[InventoryItem]:
    """Items of a kitchen, newest first."""
    return (
        db.query(InventoryItem)
        .filter(InventoryItem.kitchen_id == kitchen_id)
        .order_by(InventoryItem.created_at.desc(), InventoryItem.id.desc())
        .all()
    )


def add_item(
    db: Session,
    kitchen_id: int,
    fields: dict[str, Any],
    user_id: int | None = None,
) -> InventoryItem:
    """Insert an item and its ``Added`` log entry without committing.

    Callers own the transaction so that a batch can commit row by row.
    """
    item = InventoryItem(kitchen_id=kitchen_id, **fields)
    db.add(item)
    db.flush()
    log_item_action(db, item, ItemAction.ADDED, item.quantity, user_id=user_id)
    return item


def create_item(
    db: Session,
    user_id: int,
    kitchen_id: int | None,
    name: str | None,
    quantity: Any,
    brand: str | None = None,
    unit: str | None = None,
    category_id: int | None = None,
    location: str | None = None,
    purchase_date: date | None = None,
    expiry_date: date | None = None,
    notes: str | None = None,
    barcode: str | None = None,
    today: date | None = None,
) -> InventoryItem:
    """Create a single item; status is derived from the expiry date."""
    if not kitchen_id:
        raise ValidationError("Valid kitchen ID is required")
    name = _validate_fields(name, quantity)

    kitchen = (
        db.query(Kitchen).filter(Kitchen.id == kitchen_id, Kitchen.user_id == user_id).first()
    )
    if not kitchen:
        raise NotFoundError("Kitchen not found")
    category_id = _validate_category_id(db, category_id)

    item = add_item(
        db,
        kitchen_id,
        {
            "name": name,
            "brand": _clean(brand),
            "quantity": quantity,
            "unit": _clean(unit),
            "category_id": category_id,
            "location": _clean(location),
            "purchase_date": purchase_date,
            "expiry_date": expiry_date,
            "notes": _clean(notes),
            "barcode": _clean(barcode),
            "status": derive_status(expiry_date, today).value,
        },
        user_id=user_id,
    )
    db.commit()
    db.refresh(item)
    logger.info(f"Created item {item.id} '{item.name}' in kitchen {kitchen_id}")
    return item


def set_item_quantity(
    db: Session, item: InventoryItem, quantity: int, user_id: int | None = None
) -> InventoryItem:
    """Change only the quantity; a drop is logged as consumption."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
        raise ValidationError("Valid quantity is required")

    previous = item.quantity
    item.quantity = quantity
    if quantity == 0:
        item.status = ItemStatus.EXPIRED.value
    action = ItemAction.CONSUMED if quantity < previous else ItemAction.UPDATED
    log_item_action(db, item, action, quantity, previous_quantity=previous, user_id=user_id)
    db.commit()
    db.refresh(item)
    return item


def consume_item(db: Session, item: InventoryItem, user_id: int | None = None) -> InventoryItem:
    """Mark an item as fully used up."""
    previous = item.quantity
    item.quantity = 0
    item.status = ItemStatus.EXPIRED.value
    log_item_action(db, item, ItemAction.CONSUMED, 0, previous_quantity=previous, user_id=user_id)
    db.commit()
    db.refresh(item)
    return item


def replace_item(
    db: Session,
    item: InventoryItem,
    fields: dict[str, Any],
    user_id: int | None = None,
    today: date | None = None,
) -> InventoryItem:
    """Replace every editable field and re-derive the status."""
    name = _validate_fields(fields.get("name"), fields.get("quantity"))
    category_id = _validate_category_id(db, fields.get("category_id"))
    previous = item.quantity

    item.name = name
    item.brand = _clean(fields.get("brand"))
    item.quantity = fields["quantity"]
    item.unit = _clean(fields.get("unit"))
    item.category_id = category_id
    item.location = _clean(fields.get("location"))
    item.purchase_date = fields.get("purchase_date")
    item.expiry_date = fields.get("expiry_date")
    item.notes = _clean(fields.get("notes"))
    item.barcode = _clean(fields.get("barcode"))
    if item.quantity == 0:
        item.status = ItemStatus.EXPIRED.value
    else:
        item.status = derive_status(item.expiry_date, today).value

    log_item_action(
        db, item, ItemAction.UPDATED, item.quantity, previous_quantity=previous, user_id=user_id
    )
    db.commit()
    db.refresh(item)
    return item


def delete_item(db: Session, item: InventoryItem, user_id: int | None = None) -> None:
    """Log the removal, then delete the item (its log rows go with it)."""
    log_item_action(db, item, ItemAction.REMOVED, 0, previous_quantity=item.quantity, user_id=user_id)
    logger.info(f"Removing item {item.id} '{item.name}' from kitchen {item.kitchen_id}")
    db.delete(item)
    db.commit()


def get_item_history(db: Session, item_id: int) -> list[ItemLog]:
    return (
        db.query(ItemLog)
        .filter(ItemLog.item_id == item_id)
        .order_by(ItemLog.created_at.desc(), ItemLog.id.desc())
        .all()
    )


def refresh_statuses(db: Session, kitchen_id: int, today: date | None = None) -> int:
    """Re-derive status from expiry date for a kitchen; returns rows changed.

    Items consumed down to zero keep their Expired status.
    """
    updated = 0
    for item in db.query(InventoryItem).filter(InventoryItem.kitchen_id == kitchen_id):
        if item.quantity == 0:
            continue
        status = derive_status(item.expiry_date, today).value
        if item.status != status:
            item.status = status
            updated += 1
    db.commit()
    return updated
