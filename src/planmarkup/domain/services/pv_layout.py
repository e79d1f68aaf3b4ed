"""PV roof direction and array placement.

Panels are tiled on a regular grid along local axes rotated by the array
rotation:

    u = (cos r, sin r)    column direction
    v = (-sin r, cos r)   row direction

Panel (row, col) spans ``origin + [col*w, (col+1)*w]*u + [row*h, (row+1)*h]*v``
in pixel space. A panel is kept only if all four corners lie inside the roof
mask (inclusive boundary), and the returned grid is the largest rectangle of
such panels anchored at cell (0, 0).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from ..entities import PVArray, PVConfig, PVRoof
from ..errors import (
    DegenerateGeometry,
    InvalidItemData,
    NoViablePanelPosition,
    PrerequisiteMissing,
)
from ..geometry import (
    BOUNDARY_TOLERANCE,
    compass_bearing,
    meters_per_pixel,
    normalize_angle,
    point_in_polygon,
)
from ..value_objects import PanelOrientation, Point, PointLike, RoofState, Scale

logger = logging.getLogger(__name__)

__all__ = [
    "PanelGrid",
    "infer_direction",
    "panel_footprint",
    "place_array",
    "roof_state",
    "with_direction",
]

# Slack when converting a projected extent into a whole number of panels
_COUNT_EPSILON = 1e-9


def roof_state(roof: PVRoof | None, arrays: Iterable[PVArray] = ()) -> RoofState:
    """Where a roof stands in the NoMask -> ArraysPlaced progression."""
    if roof is None:
        return RoofState.NO_MASK
    if any(a.roof_id == roof.id for a in arrays):
        return RoofState.ARRAYS_PLACED
    if roof.has_direction:
        return RoofState.DIRECTION_SET
    return RoofState.MASK_DRAWN


def with_direction(roof: PVRoof, pitch: float, azimuth: float) -> PVRoof:
    """Assign pitch and azimuth explicitly, clearing any inferred points."""
    return replace(roof, pitch=pitch, azimuth=azimuth, high_point=None, low_point=None)


def infer_direction(
    roof: PVRoof,
    high_point: PointLike,
    low_point: PointLike,
    pitch: float,
    tolerance: float = BOUNDARY_TOLERANCE,
) -> PVRoof:
    """Set the slope direction from a high/low point pair.

    The azimuth is the compass bearing from the low point to the high point.
    A 2D mask cannot encode slope magnitude, so the pitch is supplied
    separately.

    Raises:
        DegenerateGeometry: If the points coincide or either lies outside
            the roof mask.
    """
    high, low = Point.coerce(high_point), Point.coerce(low_point)
    if high == low:
        raise DegenerateGeometry(
            "High and low points must differ",
            details={"roof_id": roof.id},
        )
    for name, point in (("high_point", high), ("low_point", low)):
        if not point_in_polygon(point, roof.mask_points, tolerance):
            raise DegenerateGeometry(
                f"{name} lies outside roof mask {roof.id}",
                details={"roof_id": roof.id, name: point.as_tuple()},
            )
    return replace(
        roof,
        pitch=pitch,
        azimuth=compass_bearing(low, high),
        high_point=high,
        low_point=low,
    )


def panel_footprint(
    config: PVConfig,
    orientation: PanelOrientation,
    scale: Scale | float,
    pitch: float | None = None,
) -> tuple[float, float]:
    """Panel size in pixels as ``(across_columns, down_rows)``.

    Portrait panels stand with their width across the columns; landscape
    panels lie with their length across. The down-slope dimension is shown
    in plan view, so it shrinks by ``cos(pitch)`` on a pitched roof.
    """
    ratio = meters_per_pixel(scale)
    if orientation == PanelOrientation.PORTRAIT:
        across, down = config.panel_width, config.panel_length
    else:
        across, down = config.panel_length, config.panel_width
    if pitch:
        down *= math.cos(math.radians(pitch))
    return across / ratio, down / ratio


@dataclass(frozen=True)
class PanelGrid:
    """Result of an array placement.

    Attributes:
        roof_id: Roof the grid was fitted to.
        origin: Grid anchor corner in pixel space.
        rotation: Grid rotation in degrees.
        orientation: Panel orientation.
        rows: Number of panel rows (along v).
        columns: Number of panel columns (along u).
        panel_width_px: Panel extent along u in pixels.
        panel_height_px: Panel extent along v in pixels.
        panel_wattage: Rated power of a single panel in watts.
    """

    roof_id: str
    origin: Point
    rotation: float
    orientation: PanelOrientation
    rows: int
    columns: int
    panel_width_px: float
    panel_height_px: float
    panel_wattage: float

    @property
    def panel_count(self) -> int:
        return self.rows * self.columns

    @property
    def total_wattage(self) -> float:
        return self.panel_count * self.panel_wattage

    def _axes(self) -> tuple[tuple[float, float], tuple[float, float]]:
        return _axes(self.rotation)

    def panel_corners(self, row: int, column: int) -> tuple[Point, Point, Point, Point]:
        """Corners of one panel, clockwise on screen from the anchor corner."""
        if not (0 <= row < self.rows and 0 <= column < self.columns):
            raise IndexError(f"Panel ({row}, {column}) is outside the grid")
        u, v = self._axes()
        return _cell_corners(
            self.origin, u, v, self.panel_width_px, self.panel_height_px, row, column
        )

    def panels(self) -> tuple[tuple[Point, Point, Point, Point], ...]:
        """Corners of every panel in row-major order."""
        return tuple(
            self.panel_corners(row, column)
            for row in range(self.rows)
            for column in range(self.columns)
        )

    def to_array(self, array_id: str) -> PVArray:
        return PVArray(
            id=array_id,
            roof_id=self.roof_id,
            rows=self.rows,
            columns=self.columns,
            orientation=self.orientation,
            position=self.origin,
            rotation=self.rotation,
        )


def _axes(rotation: float) -> tuple[tuple[float, float], tuple[float, float]]:
    rad = math.radians(rotation)
    cos_r, sin_r = math.cos(rad), math.sin(rad)
    return (cos_r, sin_r), (-sin_r, cos_r)


def _grid_point(
    origin: Point,
    u: tuple[float, float],
    v: tuple[float, float],
    along_u: float,
    along_v: float,
) -> Point:
    return Point(
        origin.x + along_u * u[0] + along_v * v[0],
        origin.y + along_u * u[1] + along_v * v[1],
    )


def _cell_corners(
    origin: Point,
    u: tuple[float, float],
    v: tuple[float, float],
    width: float,
    height: float,
    row: int,
    column: int,
) -> tuple[Point, Point, Point, Point]:
    u0, u1 = column * width, (column + 1) * width
    v0, v1 = row * height, (row + 1) * height
    return (
        _grid_point(origin, u, v, u0, v0),
        _grid_point(origin, u, v, u1, v0),
        _grid_point(origin, u, v, u1, v1),
        _grid_point(origin, u, v, u0, v1),
    )


def _max_count(
    mask: Sequence[Point],
    origin: Point,
    axis: tuple[float, float],
    step: float,
) -> int:
    """How many whole panels fit between the origin and the mask's far side."""
    reach = max((p.x - origin.x) * axis[0] + (p.y - origin.y) * axis[1] for p in mask)
    if reach <= 0:
        return 0
    return int(math.floor(reach / step + _COUNT_EPSILON))


def place_array(
    roof: PVRoof,
    config: PVConfig,
    scale: Scale | float,
    origin: PointLike,
    rotation: float = 0.0,
    orientation: PanelOrientation = PanelOrientation.PORTRAIT,
    max_rows: int | None = None,
    max_columns: int | None = None,
    tolerance: float = BOUNDARY_TOLERANCE,
) -> PanelGrid:
    """Fit the largest panel grid anchored at ``origin`` inside the roof mask.

    Args:
        roof: Roof to place on; its direction must already be set.
        config: Panel dimensions and wattage.
        scale: Active meters-per-pixel scale.
        origin: Grid anchor corner in pixel space.
        rotation: Grid rotation in degrees.
        orientation: Portrait or landscape panels.
        max_rows: Optional cap on the number of rows.
        max_columns: Optional cap on the number of columns.
        tolerance: Boundary tolerance for the corner containment test.

    Returns:
        The fitted PanelGrid. Among rectangles of equal panel count the one
        with fewer rows wins.

    Raises:
        PrerequisiteMissing: If the roof has no direction yet.
        NoViablePanelPosition: If not a single panel fits at the origin.
    """
    if not roof.has_direction:
        raise PrerequisiteMissing(
            f"Roof {roof.id} needs a direction before arrays can be placed",
            details={"roof_id": roof.id},
        )
    for name, cap in (("max_rows", max_rows), ("max_columns", max_columns)):
        if cap is not None and (isinstance(cap, bool) or not isinstance(cap, int)):
            raise InvalidItemData(f"{name} must be a whole number, got {cap!r}")
    rotation = normalize_angle(rotation)
    anchor = Point.coerce(origin)
    width, height = panel_footprint(config, orientation, scale, roof.pitch)
    u, v = _axes(rotation)

    column_limit = _max_count(roof.mask_points, anchor, u, width)
    row_limit = _max_count(roof.mask_points, anchor, v, height)
    if max_columns is not None:
        column_limit = min(column_limit, max_columns)
    if max_rows is not None:
        row_limit = min(row_limit, max_rows)

    # Corner (i, j) is shared by up to four cells, so test each grid point once
    inside: dict[tuple[int, int], bool] = {}

    def corner_inside(i: int, j: int) -> bool:
        if (i, j) not in inside:
            point = _grid_point(anchor, u, v, j * width, i * height)
            inside[(i, j)] = point_in_polygon(point, roof.mask_points, tolerance)
        return inside[(i, j)]

    def cell_fits(row: int, column: int) -> bool:
        return (
            corner_inside(row, column)
            and corner_inside(row, column + 1)
            and corner_inside(row + 1, column + 1)
            and corner_inside(row + 1, column)
        )

    best_rows = best_columns = 0
    run_limit = column_limit
    for row in range(row_limit):
        run = 0
        while run < run_limit and cell_fits(row, run):
            run += 1
        run_limit = run
        if run_limit == 0:
            break
        if (row + 1) * run_limit > best_rows * best_columns:
            best_rows, best_columns = row + 1, run_limit

    if best_rows == 0:
        logger.warning(
            f"No panel fits on roof {roof.id} at {anchor.as_tuple()} "
            f"rotated {rotation} degrees"
        )
        raise NoViablePanelPosition(
            f"No panel fits inside roof {roof.id} from the chosen origin",
            details={
                "roof_id": roof.id,
                "origin": anchor.as_tuple(),
                "rotation": rotation,
            },
        )

    logger.debug(
        f"Placed {best_rows}x{best_columns} grid on roof {roof.id} "
        f"({len(inside)} corners tested)"
    )
    return PanelGrid(
        roof_id=roof.id,
        origin=anchor,
        rotation=rotation,
        orientation=orientation,
        rows=best_rows,
        columns=best_columns,
        panel_width_px=width,
        panel_height_px=height,
        panel_wattage=config.panel_wattage,
    )
