"""Value objects for the markup domain.

Re-exports the coordinate/scale objects and the classification enums so
callers can import everything from ``planmarkup.domain.value_objects``.
"""

from ._core_geometry import (
    MAX_ZOOM,
    MIN_ZOOM,
    BoundingBox,
    CanvasTransform,
    Point,
    PointLike,
    Scale,
    finite_number,
)
from ._markup import (
    CableType,
    ContainmentType,
    DesignPurpose,
    EquipmentCategory,
    EquipmentType,
    ItemRef,
    ItemType,
    PanelOrientation,
    RoofState,
    TaskStatus,
    ToolCategory,
)

__all__ = [
    "MAX_ZOOM",
    "MIN_ZOOM",
    "BoundingBox",
    "CableType",
    "CanvasTransform",
    "ContainmentType",
    "DesignPurpose",
    "EquipmentCategory",
    "EquipmentType",
    "ItemRef",
    "ItemType",
    "PanelOrientation",
    "Point",
    "PointLike",
    "RoofState",
    "Scale",
    "TaskStatus",
    "ToolCategory",
    "finite_number",
]
