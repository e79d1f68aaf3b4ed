"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from planmarkup.application.config.schema import Coordinate, PVConfigSchema
from planmarkup.domain.value_objects import PanelOrientation


class DocumentRequest(BaseModel):
    """Request carrying a full floor-plan document."""

    document: dict[str, Any] = Field(..., description="Floor-plan document JSON")


class QuantitiesRequest(DocumentRequest):
    """Request for a bill of quantities."""

    meters_per_pixel: float | None = Field(
        default=None, gt=0, description="Override the document scale"
    )


class PlaceArrayRequest(BaseModel):
    """Request for fitting a panel grid inside a roof mask.

    The roof direction comes either from ``azimuth`` or from a
    ``high_point``/``low_point`` pair inside the mask.
    """

    mask_points: list[Coordinate] = Field(
        ..., min_length=3, description="Roof mask polygon in pixels"
    )
    meters_per_pixel: float = Field(..., gt=0, description="Plan scale")
    panel: PVConfigSchema = Field(..., description="Panel dimensions and wattage")
    origin: Coordinate = Field(..., description="Grid anchor corner in pixels")
    rotation: float = Field(default=0.0, description="Grid rotation in degrees")
    orientation: PanelOrientation = Field(
        default=PanelOrientation.PORTRAIT, description="Panel orientation"
    )
    pitch: float = Field(default=0.0, ge=0, lt=90, description="Roof pitch in degrees")
    azimuth: float | None = Field(default=None, description="Up-slope compass bearing")
    high_point: Coordinate | None = Field(default=None, description="Roof high point")
    low_point: Coordinate | None = Field(default=None, description="Roof low point")
    max_rows: int | None = Field(default=None, ge=1, description="Row cap")
    max_columns: int | None = Field(default=None, ge=1, description="Column cap")

    @model_validator(mode="after")
    def check_direction_points(self) -> "PlaceArrayRequest":
        if (self.high_point is None) != (self.low_point is None):
            raise ValueError("high_point and low_point must be given together")
        return self
