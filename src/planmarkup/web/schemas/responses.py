"""Pydantic response schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field

from planmarkup.web.schemas.common import PanelSchema, PointSchema


class CableTotalSchema(BaseModel):
    """Cable length total for one voltage class."""

    cable_type: str = Field(..., description="Cable voltage class")
    route_count: int = Field(..., description="Number of drawn routes")
    path_length_meters: float = Field(..., description="Drawn path length")
    length_meters: float = Field(..., description="Length including drops and conductors")
    terminations: int = Field(..., description="Termination count")


class ContainmentTotalSchema(BaseModel):
    """Containment length total for one type and size."""

    containment_type: str = Field(..., description="Containment type")
    size: str | None = Field(default=None, description="Size label")
    run_count: int = Field(..., description="Number of drawn runs")
    length_meters: float = Field(..., description="Total length")


class ZoneAreaSchema(BaseModel):
    """Area of one closed zone."""

    zone_id: str
    label: str | None = None
    area_sqm: float


class RoofSummarySchema(BaseModel):
    """Roof area and direction."""

    roof_id: str
    label: str | None = None
    area_sqm: float
    pitch: float | None = None
    azimuth: float | None = None
    array_count: int


class ArraySummarySchema(BaseModel):
    """Panel count and wattage for one placed array."""

    array_id: str
    roof_id: str
    rows: int
    columns: int
    panel_count: int
    wattage: float


class WalkwayLengthSchema(BaseModel):
    """Length and tread area of one PV walkway."""

    walkway_id: str
    label: str | None = None
    length_meters: float
    area_sqm: float


class QuantityReportSchema(BaseModel):
    """Response for a bill of quantities."""

    equipment: dict[str, int] = Field(default_factory=dict, description="Count by type")
    equipment_by_category: dict[str, int] = Field(
        default_factory=dict, description="Count by category"
    )
    cables: list[CableTotalSchema] = Field(default_factory=list)
    containment: list[ContainmentTotalSchema] = Field(default_factory=list)
    zones: list[ZoneAreaSchema] = Field(default_factory=list)
    total_zone_area_sqm: float = 0.0
    roofs: list[RoofSummarySchema] = Field(default_factory=list)
    pv_arrays: list[ArraySummarySchema] = Field(default_factory=list)
    total_panels: int = 0
    total_wattage: float = 0.0
    walkways: list[WalkwayLengthSchema] = Field(default_factory=list)
    total_walkway_length_meters: float = 0.0
    total_walkway_area_sqm: float = 0.0


class ValidationResultSchema(BaseModel):
    """Response for document validation."""

    is_valid: bool = Field(..., description="Whether the document can be opened")
    exit_code: int = Field(..., description="0 clean, 1 errors, 2 warnings only")
    errors: list[dict[str, Any]] = Field(
        default_factory=list, description="Validation errors"
    )
    warnings: list[dict[str, Any]] = Field(
        default_factory=list, description="Validation warnings"
    )


class ToolSchema(BaseModel):
    """One toolbar entry."""

    id: str
    name: str
    icon: str
    category: str
    purposes: list[str]


class ToolListSchema(BaseModel):
    """Response for tool catalog listing."""

    purpose: str = Field(..., description="Design purpose the tools are enabled for")
    tools: list[ToolSchema] = Field(..., description="Enabled tools")


class PanelGridSchema(BaseModel):
    """Response for PV array placement."""

    origin: PointSchema
    rotation: float
    orientation: str
    rows: int
    columns: int
    panel_count: int
    total_wattage: float
    panel_width_px: float = Field(..., description="Panel extent across columns")
    panel_height_px: float = Field(..., description="Panel extent down rows")
    azimuth: float = Field(..., description="Roof up-slope bearing used")
    panels: list[PanelSchema] = Field(default_factory=list)


class ExportFormatsSchema(BaseModel):
    """Response for available export formats."""

    formats: list[str] = Field(..., description="Available export format names")


class ErrorResponseSchema(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error category")
    details: Any = Field(default=None, description="Additional error details")
