"""SQLAlchemy models."""

from src.models.category import Category
from src.models.item import InventoryItem
from src.models.item_log import ItemLog
from src.models.kitchen import Kitchen
from src.models.user import User

__all__ = [
    "User",
    "Kitchen",
    "Category",
    "InventoryItem",
    "ItemLog",
]
