"""Category model."""

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class Category(Base, TimestampMixin):
    """Global ingredient category, shared by every kitchen."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(20), nullable=True)
    color = Column(String(20), nullable=True)

    # Relationships
    items = relationship("InventoryItem", back_populates="category")
