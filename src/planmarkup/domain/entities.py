"""Domain entities for floor-plan markup.

All entities are frozen dataclasses. Derived measurements (cable lengths,
zone and roof areas) are computed by the ``create`` / ``rescaled``
constructors from the points and an explicit scale, never supplied by hand,
so a stored value can always be reproduced from the geometry.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from .errors import DegenerateGeometry, InvalidItemData
from .geometry import (
    distinct_points,
    normalize_angle,
    polygon_area,
    polyline_length,
    to_points,
)
from .value_objects import (
    CableType,
    ContainmentType,
    EquipmentType,
    ItemRef,
    PanelOrientation,
    Point,
    PointLike,
    Scale,
    TaskStatus,
    finite_number,
)

# Single-core LV general purpose wire is drawn once but pulled per conductor.
GP_WIRE_CONDUCTORS = 3

# PV maintenance walkways are laid as 550 mm wide treads.
WALKWAY_WIDTH_METERS = 0.55


def _read_only(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


def _require_polyline(points: Sequence[Point], what: str) -> None:
    if len(points) < 2:
        raise DegenerateGeometry(
            f"{what} needs at least 2 points, got {len(points)}",
            details={"point_count": len(points)},
        )


def _require_count(value: int, name: str, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise InvalidItemData(
            f"{name} must be a whole number of at least {minimum}, got {value!r}",
            details={name: repr(value)},
        )


def _require_polygon(points: Sequence[Point], what: str) -> None:
    if len(distinct_points(points)) < 3:
        raise DegenerateGeometry(
            f"{what} needs at least 3 distinct points",
            details={"point_count": len(points)},
        )


def _require_non_negative(value: float, name: str) -> None:
    if finite_number(value, name) < 0:
        raise InvalidItemData(f"{name} must be non-negative, got {value}")


def conductor_multiplier(cable_type: CableType, cable_spec: str | None) -> int:
    """Number of times the drawn path is counted for a cable.

    Only LV runs specified as GP wire are multiplied; MV and DC cables are
    multi-core and counted once whatever their specification says.
    """
    if cable_type == CableType.LV and cable_spec and "GP" in cable_spec.upper():
        return GP_WIRE_CONDUCTORS
    return 1


def cable_lengths(
    points: Sequence[PointLike],
    scale: Scale | float,
    cable_type: CableType,
    start_height: float = 0.0,
    end_height: float = 0.0,
    cable_spec: str | None = None,
) -> tuple[float, float]:
    """Compute ``(path_length, total_length)`` in meters for a cable route.

    The total adds vertical risers at both ends to the plan path, multiplied
    by the conductor count for LV GP wire.
    """
    _require_non_negative(start_height, "start_height")
    _require_non_negative(end_height, "end_height")
    path = polyline_length(points, scale)
    total = path * conductor_multiplier(cable_type, cable_spec) + start_height + end_height
    return path, total


@dataclass(frozen=True)
class EquipmentItem:
    """A placed equipment symbol.

    Attributes:
        id: Unique identifier within the project.
        type: Catalog key of the symbol.
        position: Insertion point in pixel space.
        rotation: Rotation in degrees, normalized to [0, 360).
        label: Optional user label (e.g. "DB-1").
        properties: Read-only map of attributes the catalog does not model.
    """

    id: str
    type: EquipmentType
    position: Point
    rotation: float = 0.0
    label: str | None = None
    properties: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "rotation", normalize_angle(self.rotation))
        object.__setattr__(self, "properties", _read_only(self.properties))


@dataclass(frozen=True)
class CableRoute:
    """A cable drawn as a polyline, with derived lengths in meters."""

    id: str
    cable_type: CableType
    points: tuple[Point, ...]
    path_length_meters: float
    length_meters: float
    from_label: str | None = None
    to_label: str | None = None
    cable_spec: str | None = None
    termination_count: int = 0
    start_height: float = 0.0
    end_height: float = 0.0
    label: str | None = None

    def __post_init__(self) -> None:
        _require_polyline(self.points, "Cable route")
        _require_non_negative(self.start_height, "start_height")
        _require_non_negative(self.end_height, "end_height")
        _require_count(self.termination_count, "termination_count", 0)

    @classmethod
    def create(
        cls,
        id: str,
        cable_type: CableType,
        points: Sequence[PointLike],
        scale: Scale | float,
        **details: Any,
    ) -> "CableRoute":
        pts = to_points(points)
        _require_polyline(pts, "Cable route")
        path, total = cable_lengths(
            pts,
            scale,
            cable_type,
            details.get("start_height", 0.0),
            details.get("end_height", 0.0),
            details.get("cable_spec"),
        )
        return cls(
            id=id,
            cable_type=cable_type,
            points=pts,
            path_length_meters=path,
            length_meters=total,
            **details,
        )

    def rescaled(self, scale: Scale | float, **changes: Any) -> "CableRoute":
        """Copy with optional changes and lengths recomputed for ``scale``."""
        updated = replace(self, **changes)
        path, total = cable_lengths(
            updated.points,
            scale,
            updated.cable_type,
            updated.start_height,
            updated.end_height,
            updated.cable_spec,
        )
        return replace(updated, path_length_meters=path, length_meters=total)


@dataclass(frozen=True)
class ContainmentItem:
    """Cable tray, basket, trunking, sleeve or conduit run."""

    id: str
    containment_type: ContainmentType
    size: str
    points: tuple[Point, ...]
    length_meters: float

    def __post_init__(self) -> None:
        _require_polyline(self.points, "Containment")
        if not self.size:
            raise InvalidItemData("Containment size must not be empty")

    @classmethod
    def create(
        cls,
        id: str,
        containment_type: ContainmentType,
        size: str,
        points: Sequence[PointLike],
        scale: Scale | float,
    ) -> "ContainmentItem":
        pts = to_points(points)
        _require_polyline(pts, "Containment")
        return cls(
            id=id,
            containment_type=containment_type,
            size=size,
            points=pts,
            length_meters=polyline_length(pts, scale),
        )

    def rescaled(self, scale: Scale | float) -> "ContainmentItem":
        return replace(self, length_meters=polyline_length(self.points, scale))


@dataclass(frozen=True)
class Zone:
    """Closed polygon area (the closing edge is implicit)."""

    id: str
    points: tuple[Point, ...]
    area_sqm: float
    label: str | None = None
    color: str | None = None

    def __post_init__(self) -> None:
        _require_polygon(self.points, "Zone")

    @classmethod
    def create(
        cls,
        id: str,
        points: Sequence[PointLike],
        scale: Scale | float,
        label: str | None = None,
        color: str | None = None,
    ) -> "Zone":
        pts = to_points(points)
        _require_polygon(pts, "Zone")
        return cls(
            id=id,
            points=pts,
            area_sqm=polygon_area(pts, scale),
            label=label,
            color=color,
        )

    def rescaled(self, scale: Scale | float, **changes: Any) -> "Zone":
        updated = replace(self, **changes)
        return replace(updated, area_sqm=polygon_area(updated.points, scale))


@dataclass(frozen=True)
class PVConfig:
    """Panel dimensions (meters) and rated power (watts) shared by all arrays."""

    panel_length: float
    panel_width: float
    panel_wattage: float

    def __post_init__(self) -> None:
        for name in ("panel_length", "panel_width", "panel_wattage"):
            value = getattr(self, name)
            if finite_number(value, name) <= 0:
                raise InvalidItemData(f"{name} must be positive, got {value}")


@dataclass(frozen=True)
class PVRoof:
    """Roof mask polygon with optional slope definition.

    Attributes:
        pitch: Degrees from horizontal, 0 <= pitch < 90.
        azimuth: Compass bearing (degrees) of the up-slope direction.
        high_point: Point the direction was inferred towards, if any.
        low_point: Point the direction was inferred from, if any.
    """

    id: str
    mask_points: tuple[Point, ...]
    area_sqm: float
    pitch: float | None = None
    azimuth: float | None = None
    high_point: Point | None = None
    low_point: Point | None = None
    label: str | None = None

    def __post_init__(self) -> None:
        _require_polygon(self.mask_points, "Roof mask")
        if self.pitch is not None and not (0 <= finite_number(self.pitch, "pitch") < 90):
            raise InvalidItemData(f"Roof pitch must be in [0, 90), got {self.pitch}")
        if self.azimuth is not None:
            object.__setattr__(self, "azimuth", normalize_angle(self.azimuth))

    @classmethod
    def create(
        cls,
        id: str,
        mask_points: Sequence[PointLike],
        scale: Scale | float,
        label: str | None = None,
    ) -> "PVRoof":
        pts = to_points(mask_points)
        _require_polygon(pts, "Roof mask")
        return cls(id=id, mask_points=pts, area_sqm=polygon_area(pts, scale), label=label)

    @property
    def has_direction(self) -> bool:
        return self.azimuth is not None

    def rescaled(self, scale: Scale | float, **changes: Any) -> "PVRoof":
        updated = replace(self, **changes)
        return replace(updated, area_sqm=polygon_area(updated.mask_points, scale))


@dataclass(frozen=True)
class PVArray:
    """A rows x columns block of panels anchored at a grid corner."""

    id: str
    roof_id: str
    rows: int
    columns: int
    orientation: PanelOrientation
    position: Point
    rotation: float = 0.0

    def __post_init__(self) -> None:
        _require_count(self.rows, "rows", 1)
        _require_count(self.columns, "columns", 1)
        object.__setattr__(self, "rotation", normalize_angle(self.rotation))

    @property
    def panel_count(self) -> int:
        return self.rows * self.columns


@dataclass(frozen=True)
class Walkway:
    """Maintenance walkway between PV arrays, drawn as a polyline.

    The tread width is fixed, so the covered area follows from the length.
    """

    id: str
    points: tuple[Point, ...]
    length_meters: float
    label: str | None = None

    def __post_init__(self) -> None:
        _require_polyline(self.points, "Walkway")

    @classmethod
    def create(
        cls,
        id: str,
        points: Sequence[PointLike],
        scale: Scale | float,
        label: str | None = None,
    ) -> "Walkway":
        pts = to_points(points)
        _require_polyline(pts, "Walkway")
        return cls(id=id, points=pts, length_meters=polyline_length(pts, scale), label=label)

    @property
    def width_meters(self) -> float:
        return WALKWAY_WIDTH_METERS

    @property
    def area_sqm(self) -> float:
        return self.length_meters * WALKWAY_WIDTH_METERS

    def rescaled(self, scale: Scale | float, **changes: Any) -> "Walkway":
        updated = replace(self, **changes)
        return replace(updated, length_meters=polyline_length(updated.points, scale))


@dataclass(frozen=True)
class Task:
    """Work item optionally pointing at a markup item by lookup key."""

    id: str
    title: str
    status: TaskStatus = TaskStatus.TODO
    item_ref: ItemRef | None = None
    description: str | None = None
    assigned_to: str | None = None

    def __post_init__(self) -> None:
        if not self.title.strip():
            raise InvalidItemData("Task title must not be empty")
