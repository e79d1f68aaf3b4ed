"""Snapshots and the floor-plan aggregate root.

A ``MarkupSnapshot`` is the unit of undo history. It is a frozen dataclass
whose collections are tuples, so a snapshot handed out by the store cannot be
mutated by its receiver.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .entities import (
    CableRoute,
    ContainmentItem,
    EquipmentItem,
    PVArray,
    PVConfig,
    PVRoof,
    Task,
    Walkway,
    Zone,
)
from .value_objects import CanvasTransform, DesignPurpose, ItemRef, ItemType, Scale

_COLLECTIONS: dict[ItemType, str] = {
    ItemType.EQUIPMENT: "equipment",
    ItemType.CABLE: "cables",
    ItemType.CONTAINMENT: "containment",
    ItemType.ZONE: "zones",
    ItemType.ROOF: "roofs",
    ItemType.PV_ARRAY: "arrays",
    ItemType.WALKWAY: "walkways",
    ItemType.TASK: "tasks",
}

MarkupItem = (
    EquipmentItem | CableRoute | ContainmentItem | Zone | PVRoof | PVArray | Walkway | Task
)


def collection_name(item_type: ItemType) -> str:
    """Snapshot attribute holding items of ``item_type``."""
    return _COLLECTIONS[item_type]


@dataclass(frozen=True)
class MarkupSnapshot:
    """Immutable state of every markup collection at one point in history."""

    scale: Scale | None = None
    pv_config: PVConfig | None = None
    equipment: tuple[EquipmentItem, ...] = ()
    cables: tuple[CableRoute, ...] = ()
    containment: tuple[ContainmentItem, ...] = ()
    zones: tuple[Zone, ...] = ()
    roofs: tuple[PVRoof, ...] = ()
    arrays: tuple[PVArray, ...] = ()
    walkways: tuple[Walkway, ...] = ()
    tasks: tuple[Task, ...] = ()

    def items(self, item_type: ItemType) -> tuple[MarkupItem, ...]:
        return getattr(self, collection_name(item_type))

    def find(self, ref: ItemRef) -> MarkupItem | None:
        """Resolve a reference, returning None if the item no longer exists."""
        for item in self.items(ref.item_type):
            if item.id == ref.item_id:
                return item
        return None

    def arrays_on(self, roof_id: str) -> tuple[PVArray, ...]:
        return tuple(a for a in self.arrays if a.roof_id == roof_id)

    @property
    def item_count(self) -> int:
        return sum(len(self.items(t)) for t in ItemType)


@dataclass(frozen=True)
class PlanReference:
    """The loaded floor-plan image (owned by the file-upload collaborator)."""

    uri: str
    width_px: int | None = None
    height_px: int | None = None

    def __post_init__(self) -> None:
        if not self.uri:
            raise ValueError("Plan reference needs a uri")


@dataclass(frozen=True)
class ViewState:
    """Transient UI state: active tool, selection and viewport."""

    active_tool: str | None = None
    selection: ItemRef | None = None
    transform: CanvasTransform = field(default_factory=CanvasTransform.identity)


@dataclass(frozen=True)
class FloorPlanState:
    """Aggregate root serialized wholesale for persistence."""

    plan: PlanReference | None
    purpose: DesignPurpose
    snapshot: MarkupSnapshot = field(default_factory=MarkupSnapshot)
    view: ViewState = field(default_factory=ViewState)

    @property
    def scale(self) -> Scale | None:
        return self.snapshot.scale
