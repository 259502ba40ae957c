"""Service-layer errors.

Every failure here is scoped to one request; the API layer translates them
into HTTP responses in ``src.main``.
"""


class InventoryError(Exception):
    """Base class for service-layer errors."""

    code = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    """Malformed or missing caller input."""

    code = "invalid_input"


class NotFoundError(InventoryError):
    """A kitchen, item or user does not exist or is not owned by the caller."""

    code = "not_found"


class ExtractionServiceError(InventoryError):
    """The call to the extraction service failed outright."""

    code = "service_error"

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class MalformedExtractionOutput(InventoryError):
    """The extraction service answered, but not with a JSON array."""

    code = "malformed_output"

    def __init__(self, message: str, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class NoItemsFound(InventoryError):
    """Extraction worked but no usable rows survived sanitization."""

    code = "no_items_found"
