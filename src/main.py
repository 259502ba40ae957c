"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api import categories, invoices, items, kitchens
from src.config import get_settings
from src.logging_config import configure_logging
from src.services.exceptions import (
    ExtractionServiceError,
    InventoryError,
    MalformedExtractionOutput,
    NoItemsFound,
    NotFoundError,
    ValidationError,
)

settings = get_settings()
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[type[InventoryError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    NoItemsFound: 422,
    MalformedExtractionOutput: status.HTTP_502_BAD_GATEWAY,
    ExtractionServiceError: status.HTTP_502_BAD_GATEWAY,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle application startup and shutdown events."""
    configure_logging(settings.log_level)
    yield


app = FastAPI(
    title="Kitchen Inventory API",
    description="Household kitchen inventory with AI-assisted grocery invoice import",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for development
if settings.is_development:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:3001",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(InventoryError)
async def handle_inventory_error(request: Request, exc: InventoryError) -> JSONResponse:
    """Translate service-layer errors into JSON error responses."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for error_type in type(exc).__mro__:
        if error_type in ERROR_STATUS_CODES:
            status_code = ERROR_STATUS_CODES[error_type]
            break

    if status_code >= 500:
        cause = getattr(exc, "cause", None)
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} (cause: {cause})")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")

    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.code},
    )


@app.exception_handler(RequestValidationError)
async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as invalid input."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    detail = f"{location}: {message}" if location else message
    logger.info(f"{request.method} {request.url.path} rejected: {detail}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": detail, "error": ValidationError.code},
    )


# Register routers
app.include_router(kitchens.router)
app.include_router(items.router)
app.include_router(invoices.router)
app.include_router(categories.router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}
