"""PV layout endpoints."""

import logging

from fastapi import APIRouter

from planmarkup.domain.entities import PVConfig, PVRoof
from planmarkup.domain.services import place_array
from planmarkup.domain.services.pv_layout import infer_direction, with_direction
from planmarkup.domain.value_objects import Scale
from planmarkup.web.schemas.common import PanelSchema, PointSchema
from planmarkup.web.schemas.requests import PlaceArrayRequest
from planmarkup.web.schemas.responses import PanelGridSchema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/pv", tags=["pv"])


@router.post("/place-array", response_model=PanelGridSchema)
async def place_panel_array(request: PlaceArrayRequest) -> PanelGridSchema:
    """Fit the largest panel grid inside a roof mask from an origin.

    Nothing is stored; the response carries every panel's corners so a
    client can preview the grid before committing it.

    Raises:
        PrerequisiteMissing: If no direction is given for the roof.
        NoViablePanelPosition: If not even one panel fits.
        DegenerateGeometry: If the mask or direction points are invalid.
    """
    scale = Scale(request.meters_per_pixel)
    roof = PVRoof.create("preview", request.mask_points, scale)
    if request.high_point is not None and request.low_point is not None:
        roof = infer_direction(roof, request.high_point, request.low_point, request.pitch)
    elif request.azimuth is not None:
        roof = with_direction(roof, request.pitch, request.azimuth)

    config = PVConfig(
        panel_length=request.panel.panel_length,
        panel_width=request.panel.panel_width,
        panel_wattage=request.panel.panel_wattage,
    )
    grid = place_array(
        roof,
        config,
        scale,
        request.origin,
        rotation=request.rotation,
        orientation=request.orientation,
        max_rows=request.max_rows,
        max_columns=request.max_columns,
    )
    logger.debug(f"Previewed {grid.rows}x{grid.columns} grid")

    panels = [
        PanelSchema(
            row=row,
            column=column,
            corners=[PointSchema(x=p.x, y=p.y) for p in grid.panel_corners(row, column)],
        )
        for row in range(grid.rows)
        for column in range(grid.columns)
    ]
    return PanelGridSchema(
        origin=PointSchema(x=grid.origin.x, y=grid.origin.y),
        rotation=grid.rotation,
        orientation=grid.orientation.value,
        rows=grid.rows,
        columns=grid.columns,
        panel_count=grid.panel_count,
        total_wattage=grid.total_wattage,
        panel_width_px=grid.panel_width_px,
        panel_height_px=grid.panel_height_px,
        azimuth=roof.azimuth,
        panels=panels,
    )
