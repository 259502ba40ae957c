"""Invoice extraction client backed by Claude.

This module only gets *a* JSON array out of the model. Field-level checks
happen afterwards in ``src.services.sanitizer``.
"""

import json
import logging
import re
from typing import Any

import anthropic

from src.config import get_settings
from src.services.document import NormalizedDocument
from src.services.exceptions import ExtractionServiceError, MalformedExtractionOutput
from src.services.extraction_prompts import get_pdf_extraction_prompt, get_text_extraction_prompt

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r"```[A-Za-z0-9_-]*[ \t]*\n?(.*?)\n?[ \t]*```", re.DOTALL)
_LEADING_FENCE = re.compile(r"^```[A-Za-z0-9_-]*\s*")
_TRAILING_FENCE = re.compile(r"\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence wrapping from a model response.

    Handles ```json ... ```, bare ``` ... ```, a fenced block surrounded by
    prose, and a fence that was opened but never closed.
    """
    cleaned = text.strip()
    match = _FENCED_BLOCK.search(cleaned)
    if match:
        return match.group(1).strip()
    cleaned = _LEADING_FENCE.sub("", cleaned)
    cleaned = _TRAILING_FENCE.sub("", cleaned)
    return cleaned.strip()


def parse_candidate_array(text: str) -> list[Any]:
    """Parse a model response into a JSON array.

    Raises:
        MalformedExtractionOutput: the cleaned text is not a JSON array
    """
    cleaned = strip_code_fences(text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        # Leading or trailing prose around a bare array
        start, end = cleaned.find("["), cleaned.rfind("]")
        if start == -1 or end <= start:
            logger.warning(f"Failed to parse extraction response as JSON: {e}")
            logger.warning(f"Raw response: {text[:500]}")
            raise MalformedExtractionOutput(
                "Could not read the extracted items. Try pasting the invoice text instead.",
                raw_text=text,
            ) from e
        try:
            parsed = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError as inner:
            logger.warning(f"Failed to parse extraction response as JSON: {inner}")
            logger.warning(f"Raw response: {text[:500]}")
            raise MalformedExtractionOutput(
                "Could not read the extracted items. Try pasting the invoice text instead.",
                raw_text=text,
            ) from inner

    if not isinstance(parsed, list):
        logger.warning(f"Extraction response was {type(parsed).__name__}, expected a list")
        raise MalformedExtractionOutput(
            "The extraction service did not return a list of items. "
            "Try pasting the invoice text instead.",
            raw_text=text,
        )
    return parsed


class ExtractionClient:
    """Submits one invoice to Claude and returns the raw candidate array."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        max_tokens: int | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.anthropic_api_key
        self.model = model or settings.extraction_model
        self.timeout = timeout or settings.extraction_timeout_seconds
        self.max_tokens = max_tokens or settings.extraction_max_tokens
        self.currency = settings.currency_symbol
        self._client = client

    @property
    def is_configured(self) -> bool:
        """Check if the Anthropic API is configured."""
        return self._client is not None or bool(self.api_key)

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            # No SDK-level retries: a failed call is surfaced, the caller re-submits
            self._client = anthropic.AsyncAnthropic(
                api_key=self.api_key,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    def build_content(
        self, document: NormalizedDocument, categories: list[str] | None = None
    ) -> list[dict[str, Any]]:
        """Build the user message content blocks for a document."""
        if document.is_binary:
            return [
                {
                    "type": "document",
                    "source": {
                        "type": "base64",
                        "media_type": document.media_type,
                        "data": document.data,
                    },
                },
                {
                    "type": "text",
                    "text": get_pdf_extraction_prompt(categories, currency=self.currency),
                },
            ]
        return [
            {
                "type": "text",
                "text": get_text_extraction_prompt(
                    document.text or "", categories, currency=self.currency
                ),
            }
        ]

    async def extract(
        self, document: NormalizedDocument, categories: list[str] | None = None
    ) -> list[Any]:
        """Extract the candidate rows of an invoice.

        Args:
            document: Normalized PDF or invoice text
            categories: Category vocabulary for the prompt; defaults to the
                built-in list

        Returns:
            The parsed JSON array, unvalidated

        Raises:
            ExtractionServiceError: the API call failed or is not configured
            MalformedExtractionOutput: the response is not a JSON array
        """
        if not self.is_configured:
            raise ExtractionServiceError("Extraction service is not configured")

        kind = "pdf" if document.is_binary else "text"
        logger.info(f"Requesting {kind} invoice extraction from {self.model}")

        try:
            message = await self._get_client().messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=[{"role": "user", "content": self.build_content(document, categories)}],
            )
        except anthropic.APIError as e:
            logger.error(f"Extraction service call failed: {e}")
            raise ExtractionServiceError(
                "Failed to process invoice. Please try again.", cause=e
            ) from e

        response_text = "".join(
            block.text for block in message.content if getattr(block, "type", None) == "text"
        )
        logger.debug(f"Extraction raw response: {response_text[:500]}")
        if not response_text.strip():
            raise MalformedExtractionOutput(
                "The extraction service returned an empty response. "
                "Try pasting the invoice text instead.",
                raw_text=response_text,
            )

        candidates = parse_candidate_array(response_text)
        logger.info(f"Extraction returned {len(candidates)} candidate rows")
        return candidates
