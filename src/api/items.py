"""Inventory item API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user
from src.database import get_db
from src.models.user import User
from src.schemas.item import (
    ConsumeUpdate,
    ItemCreate,
    ItemLogResponse,
    ItemResponse,
    ItemUpdate,
    SetQuantityUpdate,
)
from src.services import item_service

router = APIRouter(prefix="/api/v1/items", tags=["items"])


@router.post("", response_model=ItemResponse, status_code=status.HTTP_201_CREATED)
def create_item(
    item_data: ItemCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Add an ingredient to one of the user's kitchens."""
    return item_service.create_item(
        db,
        current_user.id,
        **item_data.model_dump(),
    )


@router.get("/{item_id}", response_model=ItemResponse)
def get_item(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a specific item."""
    return item_service.get_user_item(db, item_id, current_user.id)


@router.put("/{item_id}", response_model=ItemResponse)
def update_item(
    item_id: int,
    update: ItemUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update an item.

    The ``action`` field picks the intent: ``set_quantity`` changes only the
    quantity, ``consume`` sets it to zero, ``replace`` overwrites all fields.
    """
    item = item_service.get_user_item(db, item_id, current_user.id)

    if isinstance(update, SetQuantityUpdate):
        return item_service.set_item_quantity(db, item, update.quantity, user_id=current_user.id)
    if isinstance(update, ConsumeUpdate):
        return item_service.consume_item(db, item, user_id=current_user.id)
    return item_service.replace_item(
        db, item, update.model_dump(exclude={"action"}), user_id=current_user.id
    )


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_item(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Remove an item from its kitchen."""
    item = item_service.get_user_item(db, item_id, current_user.id)
    item_service.delete_item(db, item, user_id=current_user.id)


@router.get("/{item_id}/history", response_model=list[ItemLogResponse])
def get_item_history(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the item's log, newest first."""
    item = item_service.get_user_item(db, item_id, current_user.id)
    return item_service.get_item_history(db, item.id)
