"""FastAPI dependencies for authentication, database and services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.models.user import User
from src.services.auth import decode_access_token, get_or_create_user
from src.services.extraction import ExtractionClient
from src.services.invoice_service import InvoiceCommitService

security = HTTPBearer()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the local user for the identity-provider token in the request."""
    token = credentials.credentials
    payload = decode_access_token(token)

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return get_or_create_user(db, str(subject), payload)


def get_extraction_client() -> ExtractionClient:
    """Get extraction client instance."""
    return ExtractionClient()


def get_invoice_commit_service(
    db: Annotated[Session, Depends(get_db)],
) -> InvoiceCommitService:
    """Get invoice commit service with dependencies."""
    return InvoiceCommitService(db)
