"""Category seeding and lookup."""

import logging

from sqlalchemy.orm import Session

from src.models.category import Category

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: list[dict[str, str]] = [
    {
        "name": "Vegetables",
        "description": "Fresh and frozen vegetables",
        "icon": "🥕",
        "color": "#10b981",
    },
    {"name": "Fruits", "description": "Fresh and dried fruits", "icon": "🍎", "color": "#f59e0b"},
    {"name": "Dairy", "description": "Milk, cheese, yogurt, eggs", "icon": "🥛", "color": "#3b82f6"},
    {
        "name": "Meat & Seafood",
        "description": "Fresh and frozen proteins",
        "icon": "🥩",
        "color": "#dc2626",
    },
    {
        "name": "Grains & Pasta",
        "description": "Rice, bread, pasta, cereals",
        "icon": "🌾",
        "color": "#d97706",
    },
    {
        "name": "Pantry",
        "description": "Canned goods, sauces, spices",
        "icon": "🥫",
        "color": "#7c3aed",
    },
    {"name": "Beverages", "description": "Drinks, juices, sodas", "icon": "🥤", "color": "#06b6d4"},
    {"name": "Snacks", "description": "Chips, crackers, nuts", "icon": "🍿", "color": "#84cc16"},
    {
        "name": "Frozen Foods",
        "description": "Frozen meals and ingredients",
        "icon": "🧊",
        "color": "#6366f1",
    },
    {
        "name": "Condiments",
        "description": "Sauces, dressings, seasonings",
        "icon": "🍯",
        "color": "#eab308",
    },
]

DEFAULT_CATEGORY_NAMES = [c["name"] for c in DEFAULT_CATEGORIES]


def list_categories(db: Session) -> list[Category]:
    """All categories ordered by name."""
    return db.query(Category).order_by(Category.name).all()


def seed_default_categories(db: Session) -> tuple[bool, int]:
    """Insert the default categories when the table is empty.

    Returns:
        (created, count) where ``count`` is the number of categories that
        exist afterwards
    """
    existing = db.query(Category).count()
    if existing > 0:
        return False, existing

    for data in DEFAULT_CATEGORIES:
        db.add(Category(**data))
    db.commit()
    logger.info(f"Seeded {len(DEFAULT_CATEGORIES)} default categories")
    return True, len(DEFAULT_CATEGORIES)
