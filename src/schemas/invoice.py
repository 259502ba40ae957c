"""Invoice ingestion schemas."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class CandidateItem(BaseModel):
    """A sanitized row proposed by invoice extraction, pending review."""

    name: str = Field(..., max_length=150)
    brand: str | None = Field(None, max_length=100)
    quantity: int = Field(1, ge=1)
    unit: str = Field("pcs", max_length=50)
    location: str = Field("Pantry", max_length=100)
    category: str | None = None
    notes: str | None = None
    status: Literal["Fresh"] = "Fresh"


class InvoiceTextUpload(BaseModel):
    """JSON body for pasted invoice text."""

    invoice_text: str
    kitchen_id: int


class InvoiceUploadResponse(BaseModel):
    """Extracted rows, returned for review."""

    success: bool = True
    items_found: int
    items: list[CandidateItem]
    message: str | None = None


class StagedRowPayload(BaseModel):
    """A reviewed row as posted back by the client.

    Fields are deliberately loose: edits made during review are only
    validated when the row is committed.
    """

    id: str | None = None
    name: str | None = None
    brand: str | None = None
    quantity: Any = None
    unit: str | None = None
    location: str | None = None
    category: str | None = None
    notes: str | None = None
    status: str | None = None
    price: Any = None
    selected: bool = True


class InvoiceCommitRequest(BaseModel):
    """Confirm reviewed rows into a kitchen."""

    kitchen_id: int
    items: list[StagedRowPayload]


class InvoiceCommitResponse(BaseModel):
    """Result of committing reviewed rows."""

    success: bool = True
    items_added: int
    message: str
