"""Invoice upload and commit endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from src.api.dependencies import get_current_user, get_extraction_client, get_invoice_commit_service
from src.database import get_db
from src.models.user import User
from src.schemas.invoice import (
    InvoiceCommitRequest,
    InvoiceCommitResponse,
    InvoiceTextUpload,
    InvoiceUploadResponse,
)
from src.services.category_service import list_categories
from src.services.document import normalize_document
from src.services.exceptions import NoItemsFound, ValidationError
from src.services.extraction import ExtractionClient
from src.services.invoice_service import InvoiceCommitService, extract_invoice_items
from src.services.kitchen_service import get_user_kitchen
from src.services.staging import ReviewSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/invoices", tags=["invoices"])


def _parse_kitchen_id(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("PDF file and kitchen ID are required") from None


@router.post("/upload", response_model=InvoiceUploadResponse)
async def upload_invoice(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    client: Annotated[ExtractionClient, Depends(get_extraction_client)],
):
    """Extract candidate items from an invoice for review.

    Accepts either ``multipart/form-data`` with ``file`` (PDF) and
    ``kitchen_id``, or a JSON body with ``invoice_text`` and ``kitchen_id``.
    Nothing is stored; the rows are returned for the client to review and
    post back to ``/commit``.

    Note: This endpoint must remain async because form and file reads are async.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("file")
        kitchen_id = form.get("kitchen_id")
        if not isinstance(upload, UploadFile) or not kitchen_id:
            raise ValidationError("PDF file and kitchen ID are required")
        kitchen_id = _parse_kitchen_id(kitchen_id)
        content = await upload.read()
        logger.info(
            f"Invoice upload from user {current_user.id}: "
            f"{upload.filename} ({upload.content_type}, {len(content)} bytes)"
        )
        document = normalize_document(content=content, content_type=upload.content_type)
    else:
        try:
            body = InvoiceTextUpload.model_validate(await request.json())
        except (ValueError, PydanticValidationError):
            raise ValidationError("Invoice text and kitchen ID are required") from None
        kitchen_id = body.kitchen_id
        document = normalize_document(text=body.invoice_text)

    get_user_kitchen(db, kitchen_id, current_user.id)
    category_names = [c.name for c in list_categories(db)] or None

    candidates = await extract_invoice_items(client, document, category_names)
    if not candidates:
        raise NoItemsFound(
            "No items found in the invoice. Please check if it's a valid grocery invoice."
        )

    return InvoiceUploadResponse(
        items_found=len(candidates),
        items=candidates,
        message=f"Successfully extracted {len(candidates)} items",
    )


@router.post(
    "/commit", response_model=InvoiceCommitResponse, status_code=status.HTTP_201_CREATED
)
def commit_invoice(
    commit_request: InvoiceCommitRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[InvoiceCommitService, Depends(get_invoice_commit_service)],
):
    """Add the reviewed, selected rows to a kitchen."""
    session = ReviewSession.from_payload(commit_request.items)
    try:
        added = service.commit(
            commit_request.kitchen_id, session.selected_rows(), user_id=current_user.id
        )
    finally:
        session.close()

    return InvoiceCommitResponse(
        items_added=added,
        message=f"Successfully added {added} items to your kitchen",
    )
