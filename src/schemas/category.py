"""Category schemas."""

from pydantic import BaseModel, ConfigDict


class CategoryResponse(BaseModel):
    """Category response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    icon: str | None
    color: str | None


class CategorySeedResponse(BaseModel):
    """Result of seeding the default categories."""

    message: str
    count: int
