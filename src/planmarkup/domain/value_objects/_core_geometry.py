"""Core coordinate, scale and viewport value objects."""

from __future__ import annotations

import math
import numbers
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from ..errors import InvalidItemData, InvalidScaleInput, MarkupError

MIN_ZOOM = 0.05
MAX_ZOOM = 40.0


def finite_number(
    value: Any, name: str, error: type[MarkupError] = InvalidItemData
) -> float:
    """Return ``value`` as a float, or raise ``error`` if it is not a finite number.

    Booleans and numeric strings are rejected.
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise error(
            f"{name} must be a finite number, got {value!r}", details={name: repr(value)}
        )
    return float(value)


@dataclass(frozen=True)
class Point:
    """Pixel-space coordinate on the loaded floor-plan image.

    Image conventions apply: x grows to the right, y grows downwards.
    """

    x: float
    y: float

    @classmethod
    def coerce(cls, value: "Point | Sequence[float]") -> "Point":
        """Accept a Point or an ``(x, y)`` pair."""
        if isinstance(value, Point):
            return value
        try:
            if isinstance(value, str) or len(value) != 2:
                raise TypeError(value)
            x, y = float(value[0]), float(value[1])
        except (TypeError, ValueError):
            raise InvalidItemData(
                f"Expected an (x, y) pair, got {value!r}", details={"point": repr(value)}
            ) from None
        if not (math.isfinite(x) and math.isfinite(y)):
            raise InvalidItemData(
                f"Point coordinates must be finite, got {value!r}",
                details={"point": repr(value)},
            )
        return cls(x, y)

    def offset(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


PointLike = Point | Sequence[float]


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box in pixel space."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    def __post_init__(self) -> None:
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError("Bounding box minimum must not exceed maximum")

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Point:
        return Point((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)

    def contains(self, point: Point) -> bool:
        """Check whether a point lies inside or on the box."""
        return (
            self.min_x <= point.x <= self.max_x
            and self.min_y <= point.y <= self.max_y
        )


@dataclass(frozen=True)
class Scale:
    """Conversion from image pixels to real-world meters.

    Attributes:
        meters_per_pixel: The single scalar applied to every pixel distance.
        pixel_distance: Length of the calibration line in pixels, if known.
        real_distance: Real length of the calibration line in meters, if known.
    """

    meters_per_pixel: float
    pixel_distance: float | None = None
    real_distance: float | None = None

    def __post_init__(self) -> None:
        if not math.isfinite(self.meters_per_pixel) or self.meters_per_pixel <= 0:
            raise InvalidScaleInput(
                "Scale must be a positive, finite number of meters per pixel",
                details={"meters_per_pixel": self.meters_per_pixel},
            )

    def __float__(self) -> float:
        return self.meters_per_pixel

    @property
    def pixels_per_meter(self) -> float:
        return 1.0 / self.meters_per_pixel


@dataclass(frozen=True)
class CanvasTransform:
    """Presentational pan/zoom map from model pixel-space to screen-space.

    ``screen = model * scale + (x, y)``. This is only a view concern and is
    never used to compute physical quantities.
    """

    x: float = 0.0
    y: float = 0.0
    scale: float = 1.0

    def __post_init__(self) -> None:
        finite_number(self.x, "x")
        finite_number(self.y, "y")
        if finite_number(self.scale, "zoom") <= 0:
            raise InvalidItemData("Canvas zoom must be positive", details={"zoom": self.scale})

    @classmethod
    def identity(cls) -> "CanvasTransform":
        return cls()

    def to_screen(self, point: PointLike) -> Point:
        p = Point.coerce(point)
        return Point(p.x * self.scale + self.x, p.y * self.scale + self.y)

    def to_model(self, point: PointLike) -> Point:
        p = Point.coerce(point)
        return Point((p.x - self.x) / self.scale, (p.y - self.y) / self.scale)

    def panned(self, dx: float, dy: float) -> "CanvasTransform":
        return CanvasTransform(
            self.x + finite_number(dx, "dx"), self.y + finite_number(dy, "dy"), self.scale
        )

    def zoomed(self, factor: float, anchor: PointLike | None = None) -> "CanvasTransform":
        """Zoom by ``factor`` keeping ``anchor`` (screen space) fixed on screen.

        The resulting zoom is clamped to [MIN_ZOOM, MAX_ZOOM].
        """
        if finite_number(factor, "factor") <= 0:
            raise InvalidItemData(
                f"Zoom factor must be a positive finite number, got {factor}",
                details={"factor": factor},
            )
        new_scale = min(max(self.scale * factor, MIN_ZOOM), MAX_ZOOM)
        screen_anchor = Point.coerce(anchor) if anchor is not None else Point(0.0, 0.0)
        model_anchor = self.to_model(screen_anchor)
        return CanvasTransform(
            x=screen_anchor.x - model_anchor.x * new_scale,
            y=screen_anchor.y - model_anchor.y * new_scale,
            scale=new_scale,
        )
