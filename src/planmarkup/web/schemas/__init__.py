"""Pydantic schemas for the REST API."""

from planmarkup.web.schemas.common import PanelSchema, PointSchema
from planmarkup.web.schemas.requests import (
    DocumentRequest,
    PlaceArrayRequest,
    QuantitiesRequest,
)
from planmarkup.web.schemas.responses import (
    ArraySummarySchema,
    CableTotalSchema,
    ContainmentTotalSchema,
    ErrorResponseSchema,
    ExportFormatsSchema,
    PanelGridSchema,
    QuantityReportSchema,
    RoofSummarySchema,
    ToolListSchema,
    ToolSchema,
    ValidationResultSchema,
    WalkwayLengthSchema,
    ZoneAreaSchema,
)

__all__ = [
    # Common
    "PanelSchema",
    "PointSchema",
    # Requests
    "DocumentRequest",
    "PlaceArrayRequest",
    "QuantitiesRequest",
    # Responses
    "ArraySummarySchema",
    "CableTotalSchema",
    "ContainmentTotalSchema",
    "ErrorResponseSchema",
    "ExportFormatsSchema",
    "PanelGridSchema",
    "QuantityReportSchema",
    "RoofSummarySchema",
    "ToolListSchema",
    "ToolSchema",
    "ValidationResultSchema",
    "WalkwayLengthSchema",
    "ZoneAreaSchema",
]
