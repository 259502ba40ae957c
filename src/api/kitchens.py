"""Kitchen API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user
from src.database import get_db
from src.models.user import User
from src.schemas.item import ItemResponse
from src.schemas.kitchen import (
    ExpiryEntry,
    ExpiryOverviewResponse,
    KitchenCreate,
    KitchenResponse,
    KitchenStatsResponse,
    StatusRefreshResponse,
)
from src.services import item_service, kitchen_service
from src.services.expiry import days_until_expiry, expiry_bucket

router = APIRouter(prefix="/api/v1/kitchens", tags=["kitchens"])


@router.post("", response_model=KitchenResponse, status_code=status.HTTP_201_CREATED)
def create_kitchen(
    kitchen_data: KitchenCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a kitchen for the current user."""
    return kitchen_service.create_kitchen(
        db,
        current_user.id,
        name=kitchen_data.name,
        location=kitchen_data.location,
        description=kitchen_data.description,
        is_default=kitchen_data.is_default,
    )


@router.get("", response_model=list[KitchenResponse])
def list_kitchens(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """List the user's kitchens, repairing the default flag first."""
    kitchen_service.repair_default_kitchens(db, current_user.id)
    return kitchen_service.list_kitchens(db, current_user.id)


@router.get("/default", response_model=KitchenResponse)
def get_default_kitchen(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the user's default kitchen."""
    kitchen = kitchen_service.repair_default_kitchens(db, current_user.id)
    if not kitchen:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No kitchens found")
    return kitchen


@router.put("/{kitchen_id}/default", response_model=KitchenResponse)
def set_default_kitchen(
    kitchen_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Make a kitchen the user's default."""
    return kitchen_service.set_default_kitchen(db, kitchen_id, current_user.id)


@router.get("/{kitchen_id}/stats", response_model=KitchenStatsResponse)
def get_kitchen_stats(
    kitchen_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Item counts for a kitchen."""
    kitchen_service.get_user_kitchen(db, kitchen_id, current_user.id)
    return kitchen_service.get_kitchen_stats(db, kitchen_id)


@router.get("/{kitchen_id}/items", response_model=list[ItemResponse])
def list_kitchen_items(
    kitchen_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """List a kitchen's items, newest first."""
    kitchen_service.get_user_kitchen(db, kitchen_id, current_user.id)
    return item_service.list_kitchen_items(db, kitchen_id)


@router.get("/{kitchen_id}/expiry", response_model=ExpiryOverviewResponse)
def get_expiry_overview(
    kitchen_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Group a kitchen's dated items by how soon they expire."""
    kitchen_service.get_user_kitchen(db, kitchen_id, current_user.id)

    buckets: dict[str, list[ExpiryEntry]] = {
        "expired": [],
        "today": [],
        "this_week": [],
        "this_month": [],
    }
    items = sorted(
        (i for i in item_service.list_kitchen_items(db, kitchen_id) if i.expiry_date),
        key=lambda i: i.expiry_date,
    )
    for item in items:
        days = days_until_expiry(item.expiry_date)
        bucket = expiry_bucket(days)
        if bucket is None:
            continue
        buckets[bucket].append(
            ExpiryEntry(
                id=item.id,
                name=item.name,
                brand=item.brand,
                quantity=item.quantity,
                unit=item.unit,
                location=item.location,
                status=item.status,
                expiry_date=item.expiry_date,
                days_until_expiry=days,
            )
        )

    return ExpiryOverviewResponse(**buckets)


@router.post("/{kitchen_id}/refresh-statuses", response_model=StatusRefreshResponse)
def refresh_item_statuses(
    kitchen_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Re-derive every item's status from its expiry date."""
    kitchen_service.get_user_kitchen(db, kitchen_id, current_user.id)
    return StatusRefreshResponse(updated=item_service.refresh_statuses(db, kitchen_id))
