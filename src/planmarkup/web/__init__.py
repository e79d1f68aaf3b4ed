"""FastAPI REST API for floor-plan markup.

This module exposes quantity take-off, document validation, the tool
catalog, PV array placement and exports over HTTP.

Usage:
    uvicorn planmarkup.web:app --reload
"""

from planmarkup.web.app import app, create_app

__all__ = ["app", "create_app"]
