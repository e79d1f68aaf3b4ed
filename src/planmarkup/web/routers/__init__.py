"""API routers for the REST API."""

from planmarkup.web.routers.export import router as export_router
from planmarkup.web.routers.pv import router as pv_router
from planmarkup.web.routers.quantities import router as quantities_router
from planmarkup.web.routers.tools import router as tools_router
from planmarkup.web.routers.validate import router as validate_router

__all__ = [
    "export_router",
    "pv_router",
    "quantities_router",
    "tools_router",
    "validate_router",
]
