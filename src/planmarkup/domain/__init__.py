"""Domain layer - geometry, markup entities and the markup store."""

from .entities import (
    CableRoute,
    ContainmentItem,
    EquipmentItem,
    PVArray,
    PVConfig,
    PVRoof,
    Task,
    Zone,
)
from .errors import (
    CascadeDeleteConflict,
    DegenerateGeometry,
    InvalidItemData,
    InvalidScaleInput,
    InvariantViolation,
    ItemNotFound,
    MarkupError,
    NoViablePanelPosition,
    PrerequisiteMissing,
    ToolUnavailable,
)
from .scale import scale_from_points, set_scale
from .services import PanelGrid, QuantityCalculator, QuantityReport, place_array
from .state import FloorPlanState, MarkupSnapshot, PlanReference, ViewState
from .store import MarkupStore
from .value_objects import (
    CableType,
    CanvasTransform,
    ContainmentType,
    DesignPurpose,
    EquipmentType,
    ItemRef,
    ItemType,
    PanelOrientation,
    Point,
    Scale,
    TaskStatus,
)

__all__ = [
    "CableRoute",
    "CableType",
    "CanvasTransform",
    "CascadeDeleteConflict",
    "ContainmentItem",
    "ContainmentType",
    "DegenerateGeometry",
    "DesignPurpose",
    "EquipmentItem",
    "EquipmentType",
    "FloorPlanState",
    "InvalidItemData",
    "InvalidScaleInput",
    "InvariantViolation",
    "ItemNotFound",
    "ItemRef",
    "ItemType",
    "MarkupError",
    "MarkupSnapshot",
    "MarkupStore",
    "NoViablePanelPosition",
    "PVArray",
    "PVConfig",
    "PVRoof",
    "PanelGrid",
    "PanelOrientation",
    "PlanReference",
    "Point",
    "PrerequisiteMissing",
    "QuantityCalculator",
    "QuantityReport",
    "Scale",
    "Task",
    "TaskStatus",
    "ToolUnavailable",
    "ViewState",
    "Zone",
    "place_array",
    "scale_from_points",
    "set_scale",
]
