"""Normalize an uploaded invoice into a payload for the extraction service."""

import base64
import logging
from dataclasses import dataclass

from src.config import get_settings
from src.services.exceptions import ValidationError

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


@dataclass(frozen=True)
class NormalizedDocument:
    """Either a base64-encoded PDF or raw invoice text, never both."""

    text: str | None = None
    data: str | None = None  # base64
    media_type: str | None = None

    @property
    def is_binary(self) -> bool:
        return self.data is not None


def normalize_document(
    content: bytes | None = None,
    content_type: str | None = None,
    text: str | None = None,
    max_bytes: int | None = None,
) -> NormalizedDocument:
    """Turn an uploaded PDF or pasted text into a ``NormalizedDocument``.

    Args:
        content: Raw bytes of the uploaded file, if any
        content_type: MIME type reported for the upload
        text: Pasted invoice text, used when no file is given
        max_bytes: Size bound for ``content``; defaults to the configured limit

    Raises:
        ValidationError: wrong media type, oversized file, or no input at all
    """
    if content is not None:
        limit = max_bytes if max_bytes is not None else get_settings().max_upload_bytes
        if content_type != PDF_MEDIA_TYPE:
            raise ValidationError("Please upload a PDF file")
        if len(content) > limit:
            raise ValidationError(f"File size must be less than {limit // (1024 * 1024)}MB")
        if not content:
            raise ValidationError("Uploaded file is empty")
        logger.info(f"Normalized PDF upload ({len(content)} bytes)")
        return NormalizedDocument(
            data=base64.standard_b64encode(content).decode("utf-8"),
            media_type=PDF_MEDIA_TYPE,
        )

    if text is not None and text.strip():
        return NormalizedDocument(text=text)

    raise ValidationError("A PDF file or invoice text is required")
