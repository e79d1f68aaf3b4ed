"""Common Pydantic schemas shared across requests and responses."""

from pydantic import BaseModel, Field


class PointSchema(BaseModel):
    """Pixel-space coordinate on the floor-plan image."""

    x: float = Field(..., description="X in pixels (grows right)")
    y: float = Field(..., description="Y in pixels (grows down)")


class PanelSchema(BaseModel):
    """One placed PV panel."""

    row: int = Field(..., ge=0, description="Row index from the grid origin")
    column: int = Field(..., ge=0, description="Column index from the grid origin")
    corners: list[PointSchema] = Field(
        ..., min_length=4, max_length=4, description="Panel corners in pixel space"
    )
