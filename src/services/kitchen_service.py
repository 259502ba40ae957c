"""Kitchen management and the single-default-kitchen rule."""

import logging
from datetime import date, timedelta

from sqlalchemy import case, or_
from sqlalchemy.orm import Session

from src.models.enums import ItemStatus
from src.models.item import InventoryItem
from src.models.kitchen import Kitchen
from src.services.exceptions import NotFoundError, ValidationError
from src.services.expiry import EXPIRING_WINDOW_DAYS

logger = logging.getLogger(__name__)


def _lock_user_kitchens(db: Session, user_id: int) -> list[Kitchen]:
    """Lock the user's kitchen rows for the rest of the transaction.

    Concurrent default changes for the same user queue up behind this lock.
    SQLite ignores FOR UPDATE; its single writer gives the same ordering.
    """
    return (
        db.query(Kitchen)
        .filter(Kitchen.user_id == user_id)
        .order_by(Kitchen.created_at, Kitchen.id)
        .with_for_update()
        .all()
    )


def get_user_kitchen(db: Session, kitchen_id: int, user_id: int) -> Kitchen:
    """Get a kitchen owned by the user."""
    kitchen = (
        db.query(Kitchen).filter(Kitchen.id == kitchen_id, Kitchen.user_id == user_id).first()
    )
    if not kitchen:
        raise NotFoundError("Kitchen not found")
    return kitchen


def list_kitchens(db: Session, user_id: int) -> list[Kitchen]:
    return (
        db.query(Kitchen)
        .filter(Kitchen.user_id == user_id)
        .order_by(Kitchen.created_at, Kitchen.id)
        .all()
    )


def create_kitchen(
    db: Session,
    user_id: int,
    name: str,
    location: str | None = None,
    description: str | None = None,
    is_default: bool = False,
) -> Kitchen:
    """Create a kitchen, clearing any other default in the same transaction."""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Kitchen name is required")

    if is_default:
        _lock_user_kitchens(db, user_id)
        db.query(Kitchen).filter(Kitchen.user_id == user_id, Kitchen.is_default.is_(True)).update(
            {Kitchen.is_default: False}, synchronize_session=False
        )

    kitchen = Kitchen(
        user_id=user_id,
        name=name,
        location=(location or "").strip() or None,
        description=(description or "").strip() or None,
        is_default=is_default,
    )
    db.add(kitchen)
    db.commit()
    db.refresh(kitchen)
    logger.info(f"Created kitchen {kitchen.id} for user {user_id} (default={is_default})")
    return kitchen


def set_default_kitchen(db: Session, kitchen_id: int, user_id: int) -> Kitchen:
    """Make one kitchen the user's default with a single conditional update."""
    kitchens = _lock_user_kitchens(db, user_id)
    if not any(k.id == kitchen_id for k in kitchens):
        db.rollback()
        raise NotFoundError("Kitchen not found or access denied")

    db.query(Kitchen).filter(Kitchen.user_id == user_id).update(
        {Kitchen.is_default: case((Kitchen.id == kitchen_id, True), else_=False)},
        synchronize_session=False,
    )
    db.commit()
    return get_user_kitchen(db, kitchen_id, user_id)


def get_default_kitchen(db: Session, user_id: int) -> Kitchen | None:
    return (
        db.query(Kitchen)
        .filter(Kitchen.user_id == user_id, Kitchen.is_default.is_(True))
        .order_by(Kitchen.created_at, Kitchen.id)
        .first()
    )


def repair_default_kitchens(db: Session, user_id: int) -> Kitchen | None:
    """Restore the one-default rule for a user.

    With several defaults the earliest-created keeps the flag; with none the
    earliest-created kitchen is promoted. Returns the default kitchen, or None
    if the user has no kitchens.
    """
    kitchens = _lock_user_kitchens(db, user_id)
    if not kitchens:
        db.rollback()
        return None

    defaults = [k for k in kitchens if k.is_default]
    if len(defaults) == 1:
        db.rollback()
        return defaults[0]

    keep = defaults[0] if defaults else kitchens[0]
    db.query(Kitchen).filter(Kitchen.user_id == user_id).update(
        {Kitchen.is_default: case((Kitchen.id == keep.id, True), else_=False)},
        synchronize_session=False,
    )
    db.commit()
    if defaults:
        logger.warning(
            f"Fixed {len(defaults)} default kitchens for user {user_id}; kept kitchen {keep.id}"
        )
    else:
        logger.info(f"Set kitchen {keep.id} as default for user {user_id}")
    db.refresh(keep)
    return keep


def get_kitchen_stats(db: Session, kitchen_id: int, today: date | None = None) -> dict[str, int]:
    """Total, expiring-within-a-week and expired item counts for a kitchen."""
    today = today or date.today()
    week_end = today + timedelta(days=EXPIRING_WINDOW_DAYS)
    base = db.query(InventoryItem).filter(InventoryItem.kitchen_id == kitchen_id)

    total = base.count()
    expiring = base.filter(
        InventoryItem.expiry_date >= today,
        InventoryItem.expiry_date <= week_end,
        InventoryItem.status != ItemStatus.EXPIRED.value,
    ).count()
    expired = base.filter(
        or_(
            InventoryItem.status == ItemStatus.EXPIRED.value,
            InventoryItem.expiry_date < today,
        )
    ).count()
    return {"total_items": total, "expiring_count": expiring, "expired_count": expired}
