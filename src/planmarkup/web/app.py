"""FastAPI application factory."""

from collections.abc import Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from planmarkup.web.exceptions import register_exception_handlers
from planmarkup.web.routers import (
    export_router,
    pv_router,
    quantities_router,
    tools_router,
    validate_router,
)

API_PREFIX = "/api/v1"

ROUTERS = (quantities_router, validate_router, tools_router, pv_router, export_router)


def create_app(cors_origins: Sequence[str] = ("*",)) -> FastAPI:
    """Build the markup API.

    Args:
        cors_origins: Origins allowed to call the API from a browser.

    Returns:
        FastAPI application with every router mounted under ``/api/v1``.
    """
    app = FastAPI(
        title="Floor Plan Markup API",
        description="Quantity take-off, document validation and PV array layout "
        "for marked-up floor plans",
        version="0.1.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    @app.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    return app


# ASGI entry point: uvicorn planmarkup.web:app
app = create_app()
