"""Scale calibration: mapping pixel distances on the plan to meters."""

from __future__ import annotations

from .errors import InvalidScaleInput
from .value_objects import PointLike, Scale, finite_number
from .geometry import distance, meters_per_pixel

__all__ = [
    "scale_from_points",
    "set_scale",
    "to_meters",
    "to_pixels",
]


def set_scale(pixel_distance: float, real_distance: float) -> Scale:
    """Build a scale from a measured pixel distance and its real length.

    Args:
        pixel_distance: Length of the calibration line on the image, in pixels.
        real_distance: Real-world length of the same line, in meters.

    Returns:
        Scale with ``meters_per_pixel = real_distance / pixel_distance``.

    Raises:
        InvalidScaleInput: If either distance is not a positive finite number.
    """
    for name, value in (("pixel_distance", pixel_distance), ("real_distance", real_distance)):
        if finite_number(value, name, InvalidScaleInput) <= 0:
            raise InvalidScaleInput(
                f"{name} must be greater than zero, got {value}",
                details={name: value},
            )
    return Scale(
        meters_per_pixel=real_distance / pixel_distance,
        pixel_distance=float(pixel_distance),
        real_distance=float(real_distance),
    )


def scale_from_points(start: PointLike, end: PointLike, real_distance: float) -> Scale:
    """Build a scale from a calibration line drawn between two plan points."""
    return set_scale(distance(start, end), real_distance)


def to_meters(pixels: float, scale: Scale | float) -> float:
    """Convert a pixel distance to meters."""
    return pixels * meters_per_pixel(scale)


def to_pixels(meters: float, scale: Scale | float) -> float:
    """Convert a distance in meters to pixels on the plan."""
    return meters / meters_per_pixel(scale)
