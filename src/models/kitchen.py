"""Kitchen model."""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin


class Kitchen(Base, TimestampMixin):
    """A named inventory container owned by one user.

    At most one kitchen per user has ``is_default`` set; see
    ``src.services.kitchen_service`` for how that is kept true.
    """

    __tablename__ = "kitchens"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    location = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)

    # Relationships
    user = relationship("User", backref="kitchens")
    items = relationship(
        "InventoryItem",
        back_populates="kitchen",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
