"""Enums for model fields."""

from enum import Enum


class ItemStatus(str, Enum):
    """Freshness of an inventory item."""

    FRESH = "Fresh"
    EXPIRING = "Expiring"
    EXPIRED = "Expired"


class ItemAction(str, Enum):
    """Kinds of item-state mutation recorded in the item log."""

    ADDED = "Added"
    UPDATED = "Updated"
    CONSUMED = "Consumed"
    REMOVED = "Removed"


class StorageLocation(str, Enum):
    """Storage locations offered to the extraction service."""

    PANTRY = "Pantry"
    FRIDGE = "Fridge"
    FREEZER = "Freezer"
