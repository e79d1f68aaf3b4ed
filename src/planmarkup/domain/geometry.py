"""Geometry primitives over pixel-space points.

Every function here is pure: it reads only its arguments and never touches
store or global state. Functions that return physical quantities take the
scale explicitly, either as a ``Scale`` or as a plain meters-per-pixel float.

Self-intersecting polygons are accepted by ``polygon_area`` and yield the
plain shoelace result; no simplicity check is performed.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

from .errors import DegenerateGeometry, InvalidScaleInput
from .value_objects import BoundingBox, Point, PointLike, Scale, finite_number

__all__ = [
    "BOUNDARY_TOLERANCE",
    "bounding_box",
    "centroid",
    "compass_bearing",
    "distance",
    "distinct_points",
    "meters_per_pixel",
    "normalize_angle",
    "point_in_polygon",
    "point_on_segment",
    "polygon_area",
    "polygon_pixel_area",
    "polyline_length",
    "polyline_pixel_length",
    "rotate_point",
    "signed_area",
    "to_points",
]

# Absolute distance (pixels) within which a point counts as lying on an edge.
BOUNDARY_TOLERANCE = 1e-7


def to_points(points: Iterable[PointLike]) -> tuple[Point, ...]:
    """Normalize a sequence of Points or (x, y) pairs to a tuple of Points."""
    return tuple(Point.coerce(p) for p in points)


def meters_per_pixel(scale: Scale | float) -> float:
    """Extract a validated meters-per-pixel ratio from a scale argument."""
    ratio = float(scale)
    if not math.isfinite(ratio) or ratio <= 0:
        raise InvalidScaleInput(
            "Scale must be a positive, finite number of meters per pixel",
            details={"meters_per_pixel": ratio},
        )
    return ratio


def distance(a: PointLike, b: PointLike) -> float:
    """Euclidean distance between two points in pixels."""
    pa, pb = Point.coerce(a), Point.coerce(b)
    return math.hypot(pb.x - pa.x, pb.y - pa.y)


def polyline_pixel_length(points: Sequence[PointLike]) -> float:
    """Sum of segment lengths of an open polyline, in pixels.

    Raises:
        DegenerateGeometry: If fewer than 2 points are given.
    """
    pts = to_points(points)
    if len(pts) < 2:
        raise DegenerateGeometry(
            f"A polyline needs at least 2 points, got {len(pts)}",
            details={"point_count": len(pts)},
        )
    return sum(distance(pts[i], pts[i + 1]) for i in range(len(pts) - 1))


def polyline_length(points: Sequence[PointLike], scale: Scale | float) -> float:
    """Real-world length of an open polyline in meters."""
    ratio = meters_per_pixel(scale)
    return polyline_pixel_length(points) * ratio


def signed_area(points: Sequence[PointLike]) -> float:
    """Half the shoelace sum, in square pixels.

    The sign depends on winding order; the closing edge from the last point
    back to the first is implicit.
    """
    pts = to_points(points)
    n = len(pts)
    total = 0.0
    for i in range(n):
        j = (i + 1) % n
        total += pts[i].x * pts[j].y - pts[j].x * pts[i].y
    return total / 2.0


def polygon_pixel_area(points: Sequence[PointLike]) -> float:
    """Unsigned polygon area in square pixels.

    Raises:
        DegenerateGeometry: If fewer than 3 points are given.
    """
    pts = to_points(points)
    if len(pts) < 3:
        raise DegenerateGeometry(
            f"A polygon needs at least 3 points, got {len(pts)}",
            details={"point_count": len(pts)},
        )
    return abs(signed_area(pts))


def polygon_area(points: Sequence[PointLike], scale: Scale | float) -> float:
    """Real-world polygon area in square meters (shoelace, scaled by scale²)."""
    ratio = meters_per_pixel(scale)
    return polygon_pixel_area(points) * ratio * ratio


def centroid(points: Sequence[PointLike]) -> Point:
    """Area centroid of a polygon.

    Falls back to the vertex mean when the polygon has (near) zero area,
    which also covers two-point inputs.
    """
    pts = to_points(points)
    if not pts:
        raise DegenerateGeometry("Cannot take the centroid of an empty point list")
    area = signed_area(pts) if len(pts) >= 3 else 0.0
    if abs(area) < 1e-12:
        return Point(
            sum(p.x for p in pts) / len(pts),
            sum(p.y for p in pts) / len(pts),
        )
    cx = cy = 0.0
    n = len(pts)
    for i in range(n):
        j = (i + 1) % n
        cross = pts[i].x * pts[j].y - pts[j].x * pts[i].y
        cx += (pts[i].x + pts[j].x) * cross
        cy += (pts[i].y + pts[j].y) * cross
    return Point(cx / (6.0 * area), cy / (6.0 * area))


def bounding_box(points: Sequence[PointLike]) -> BoundingBox:
    """Axis-aligned bounding box of a point set."""
    pts = to_points(points)
    if not pts:
        raise DegenerateGeometry("Cannot bound an empty point list")
    return BoundingBox(
        min_x=min(p.x for p in pts),
        min_y=min(p.y for p in pts),
        max_x=max(p.x for p in pts),
        max_y=max(p.y for p in pts),
    )


def point_on_segment(
    point: PointLike,
    a: PointLike,
    b: PointLike,
    tolerance: float = BOUNDARY_TOLERANCE,
) -> bool:
    """Check whether ``point`` lies on segment ``a``-``b`` within ``tolerance``."""
    p, pa, pb = Point.coerce(point), Point.coerce(a), Point.coerce(b)
    seg_x, seg_y = pb.x - pa.x, pb.y - pa.y
    seg_len = math.hypot(seg_x, seg_y)
    if seg_len <= tolerance:
        return distance(p, pa) <= tolerance
    cross = seg_x * (p.y - pa.y) - seg_y * (p.x - pa.x)
    if abs(cross) / seg_len > tolerance:
        return False
    # Projection must fall within the segment (allowing tolerance at the ends)
    t = ((p.x - pa.x) * seg_x + (p.y - pa.y) * seg_y) / seg_len
    return -tolerance <= t <= seg_len + tolerance


def point_in_polygon(
    point: PointLike,
    polygon: Sequence[PointLike],
    tolerance: float = BOUNDARY_TOLERANCE,
) -> bool:
    """Ray-casting containment test with an inclusive boundary.

    Points lying on an edge or vertex (within ``tolerance``) are inside.
    Polygons with fewer than 3 points contain nothing.
    """
    p = Point.coerce(point)
    pts = to_points(polygon)
    n = len(pts)
    if n < 3:
        return False

    for i in range(n):
        if point_on_segment(p, pts[i], pts[(i + 1) % n], tolerance):
            return True

    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = pts[i].x, pts[i].y
        xj, yj = pts[j].x, pts[j].y
        if (yi > p.y) != (yj > p.y):
            x_cross = (xj - xi) * (p.y - yi) / (yj - yi) + xi
            if p.x < x_cross:
                inside = not inside
        j = i
    return inside


def rotate_point(point: PointLike, origin: PointLike, degrees: float) -> Point:
    """Rotate ``point`` about ``origin`` by ``degrees``.

    Positive angles turn clockwise on screen because image y grows downwards.
    """
    p, o = Point.coerce(point), Point.coerce(origin)
    rad = math.radians(degrees)
    cos_r, sin_r = math.cos(rad), math.sin(rad)
    dx, dy = p.x - o.x, p.y - o.y
    return Point(o.x + dx * cos_r - dy * sin_r, o.y + dx * sin_r + dy * cos_r)


def normalize_angle(degrees: float) -> float:
    """Normalize an angle in degrees to the range [0, 360).

    Raises:
        InvalidItemData: If ``degrees`` is not a finite number.
    """
    result = finite_number(degrees, "angle") % 360.0
    if result >= 360.0:
        # -1e-15 % 360 rounds to 360.0
        result = 0.0
    return result + 0.0


def compass_bearing(start: PointLike, end: PointLike) -> float:
    """Compass bearing from ``start`` to ``end`` on the image.

    0 is straight up the image (north), 90 is to the right (east), measured
    clockwise in degrees.
    """
    a, b = Point.coerce(start), Point.coerce(end)
    dx, dy = b.x - a.x, b.y - a.y
    if dx == 0 and dy == 0:
        raise DegenerateGeometry("Bearing is undefined for coincident points")
    return normalize_angle(math.degrees(math.atan2(dy, dx)) + 90.0)


def distinct_points(points: Sequence[PointLike]) -> tuple[Point, ...]:
    """Unique points in first-seen order."""
    seen: dict[Point, None] = {}
    for p in to_points(points):
        seen.setdefault(p, None)
    return tuple(seen)
