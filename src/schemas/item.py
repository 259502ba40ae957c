"""Inventory item schemas."""

from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class ItemCreate(BaseModel):
    """Create an inventory item."""

    kitchen_id: int
    name: str = Field(..., max_length=150)
    brand: str | None = Field(None, max_length=100)
    quantity: int
    unit: str | None = Field(None, max_length=50)
    category_id: int | None = None
    location: str | None = Field(None, max_length=100)
    purchase_date: date | None = None
    expiry_date: date | None = None
    notes: str | None = None
    barcode: str | None = Field(None, max_length=100)


class SetQuantityUpdate(BaseModel):
    """Change only the quantity of an item."""

    action: Literal["set_quantity"]
    quantity: int


class ConsumeUpdate(BaseModel):
    """Mark an item as fully consumed."""

    action: Literal["consume"]


class ReplaceUpdate(BaseModel):
    """Replace every editable field of an item."""

    action: Literal["replace"]
    name: str = Field(..., max_length=150)
    brand: str | None = Field(None, max_length=100)
    quantity: int
    unit: str | None = Field(None, max_length=50)
    category_id: int | None = None
    location: str | None = Field(None, max_length=100)
    purchase_date: date | None = None
    expiry_date: date | None = None
    notes: str | None = None
    barcode: str | None = Field(None, max_length=100)


ItemUpdate = Annotated[
    SetQuantityUpdate | ConsumeUpdate | ReplaceUpdate,
    Field(discriminator="action"),
]


class ItemResponse(BaseModel):
    """Inventory item response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    kitchen_id: int
    name: str
    brand: str | None
    quantity: int
    unit: str | None
    category_id: int | None
    category_name: str | None = None
    category_color: str | None = None
    location: str | None
    purchase_date: date | None
    expiry_date: date | None
    notes: str | None
    barcode: str | None
    status: str
    created_at: datetime
    updated_at: datetime


class ItemLogResponse(BaseModel):
    """Item log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    item_id: int
    action: str
    quantity: int
    previous_quantity: int | None
    user_id: int | None
    created_at: datetime
