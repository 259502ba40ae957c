"""Verification of identity-provider tokens and local user provisioning."""

import logging

from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.config import get_settings
from src.models.user import User

logger = logging.getLogger(__name__)


def decode_access_token(token: str) -> dict | None:
    """Decode and validate a token issued by the identity provider."""
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[settings.auth_jwt_algorithm],
            options={"verify_aud": False},
        )
        return payload
    except JWTError:
        return None


def get_user_by_external_id(db: Session, external_id: str) -> User | None:
    return db.query(User).filter(User.external_id == external_id).first()


def get_or_create_user(db: Session, external_id: str, claims: dict) -> User:
    """Return the local user for a token subject, creating it on first sight."""
    user = get_user_by_external_id(db, external_id)
    if user:
        return user

    user = User(
        external_id=external_id,
        email=claims.get("email") or "",
        first_name=claims.get("given_name") or claims.get("first_name"),
        last_name=claims.get("family_name") or claims.get("last_name"),
        profile_image=claims.get("picture") or claims.get("image_url"),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request provisioned the same subject first
        db.rollback()
        existing = get_user_by_external_id(db, external_id)
        if existing is None:
            raise
        return existing
    db.refresh(user)
    logger.info(f"Provisioned user {user.id} for subject {external_id}")
    return user
