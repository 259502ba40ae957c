"""Pydantic schemas for API requests and responses."""

from src.schemas.category import CategoryResponse, CategorySeedResponse
from src.schemas.invoice import (
    CandidateItem,
    InvoiceCommitRequest,
    InvoiceCommitResponse,
    InvoiceTextUpload,
    InvoiceUploadResponse,
    StagedRowPayload,
)
from src.schemas.item import ItemCreate, ItemLogResponse, ItemResponse, ItemUpdate
from src.schemas.kitchen import KitchenCreate, KitchenResponse, KitchenStatsResponse

__all__ = [
    "CategoryResponse",
    "CategorySeedResponse",
    "CandidateItem",
    "InvoiceTextUpload",
    "InvoiceUploadResponse",
    "StagedRowPayload",
    "InvoiceCommitRequest",
    "InvoiceCommitResponse",
    "ItemCreate",
    "ItemUpdate",
    "ItemResponse",
    "ItemLogResponse",
    "KitchenCreate",
    "KitchenResponse",
    "KitchenStatsResponse",
]
