"""Inventory item model."""

from sqlalchemy import Column, Date, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.enums import ItemStatus
from src.models.mixins import TimestampMixin


class InventoryItem(Base, TimestampMixin):
    """An ingredient stocked in a kitchen."""

    __tablename__ = "items"

    id = Column(Integer, primary_key=True, index=True)
    kitchen_id = Column(
        Integer, ForeignKey("kitchens.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(150), nullable=False)
    brand = Column(String(100), nullable=True)
    quantity = Column(Integer, nullable=False, default=1)
    unit = Column(String(50), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    location = Column(String(100), nullable=True)
    purchase_date = Column(Date, nullable=True)
    expiry_date = Column(Date, nullable=True, index=True)
    notes = Column(Text, nullable=True)
    barcode = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default=ItemStatus.FRESH.value)  # Fresh | Expiring | Expired

    # Relationships
    kitchen = relationship("Kitchen", back_populates="items")
    category = relationship("Category", back_populates="items")
    logs = relationship(
        "ItemLog",
        back_populates="item",
        cascade="all, delete-orphan",
    )

    @property
    def category_name(self) -> str | None:
        return self.category.name if self.category else None

    @property
    def category_color(self) -> str | None:
        return self.category.color if self.category else None
