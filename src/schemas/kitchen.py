"""Kitchen schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class KitchenCreate(BaseModel):
    """Create a kitchen."""

    name: str = Field(..., max_length=255)
    location: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=2000)
    is_default: bool = False


class KitchenResponse(BaseModel):
    """Kitchen response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    location: str | None
    description: str | None
    is_default: bool
    created_at: datetime
    updated_at: datetime


class KitchenStatsResponse(BaseModel):
    """Item counts for a kitchen."""

    total_items: int
    expiring_count: int
    expired_count: int


class ExpiryEntry(BaseModel):
    """An item placed in an expiry bucket."""

    id: int
    name: str
    brand: str | None
    quantity: int
    unit: str | None
    location: str | None
    status: str
    expiry_date: date
    days_until_expiry: int


class ExpiryOverviewResponse(BaseModel):
    """Items grouped by how soon they expire."""

    expired: list[ExpiryEntry]
    today: list[ExpiryEntry]
    this_week: list[ExpiryEntry]
    this_month: list[ExpiryEntry]


class StatusRefreshResponse(BaseModel):
    """Result of re-deriving item statuses."""

    updated: int
