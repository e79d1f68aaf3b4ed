"""Custom exceptions and error handlers for the REST API."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from planmarkup.application.config import ConfigError
from planmarkup.domain.errors import InvariantViolation, ItemNotFound, MarkupError

logger = logging.getLogger(__name__)


class UnsupportedFormatError(Exception):
    """Raised when requested export format is not supported."""

    def __init__(self, format_name: str, available: list[str]) -> None:
        self.format_name = format_name
        self.available = available
        super().__init__(
            f"Unsupported format: {format_name}. Available: {', '.join(available)}"
        )


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": exc.error_type,
                "details": exc.details or None,
            },
        )

    @app.exception_handler(ItemNotFound)
    async def item_not_found_handler(request: Request, exc: ItemNotFound) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={
                "error": exc.message,
                "error_type": exc.code,
                "details": exc.details or None,
            },
        )

    @app.exception_handler(MarkupError)
    async def markup_error_handler(request: Request, exc: MarkupError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": exc.code,
                "details": exc.details or None,
            },
        )

    @app.exception_handler(InvariantViolation)
    async def invariant_violation_handler(
        request: Request, exc: InvariantViolation
    ) -> JSONResponse:
        logger.error(f"Invariant violation on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal markup state is inconsistent",
                "error_type": "invariant_violation",
                "details": None,
            },
        )

    @app.exception_handler(UnsupportedFormatError)
    async def unsupported_format_handler(
        request: Request, exc: UnsupportedFormatError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": str(exc),
                "error_type": "unsupported_format",
                "details": {"format": exc.format_name, "available": exc.available},
            },
        )
