"""Category API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user
from src.database import get_db
from src.models.user import User
from src.schemas.category import CategoryResponse, CategorySeedResponse
from src.services.category_service import list_categories, seed_default_categories

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
def get_categories(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get all categories."""
    return list_categories(db)


@router.post("/seed", response_model=CategorySeedResponse)
def seed_categories(
    response: Response,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create the default categories if none exist yet."""
    created, count = seed_default_categories(db)
    if not created:
        return CategorySeedResponse(message="Categories already exist", count=count)
    response.status_code = status.HTTP_201_CREATED
    return CategorySeedResponse(message="Default categories created successfully", count=count)
