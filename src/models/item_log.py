"""Item log model: append-only audit trail of item mutations."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from src.database import Base


class ItemLog(Base):
    """One item-state mutation. Rows are written once and never updated."""

    __tablename__ = "item_logs"

    id = Column(Integer, primary_key=True, index=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)
    action = Column(String(20), nullable=False)  # Added | Updated | Consumed | Removed
    quantity = Column(Integer, nullable=False, default=0)
    previous_quantity = Column(Integer, nullable=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    item = relationship("InventoryItem", back_populates="logs")
