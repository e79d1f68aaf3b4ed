"""The markup store: authoritative in-memory state with undo history.

All mutation goes through the command methods of ``MarkupStore``. Each
command validates its input, builds a new ``MarkupSnapshot`` and pushes it
onto a linear history. Snapshots are never modified once pushed, so undo and
redo only move a cursor.
"""

from __future__ import annotations

import logging
import uuid
from collections import Counter
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import replace
from enum import Enum
from typing import Any, TypeVar

from . import catalog
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
from .errors import (
    CascadeDeleteConflict,
    InvalidItemData,
    ItemNotFound,
    PrerequisiteMissing,
)
from .geometry import BOUNDARY_TOLERANCE, to_points
from .services.pv_layout import infer_direction, place_array, with_direction
from .state import MarkupItem, MarkupSnapshot, collection_name
from .value_objects import (
    CableType,
    ContainmentType,
    EquipmentType,
    ItemRef,
    ItemType,
    PanelOrientation,
    Point,
    PointLike,
    Scale,
    TaskStatus,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)

DEFAULT_HISTORY_LIMIT = 200

CABLE_DETAIL_FIELDS = frozenset(
    {
        "from_label",
        "to_label",
        "cable_spec",
        "termination_count",
        "start_height",
        "end_height",
        "label",
        "cable_type",
    }
)

_ID_PREFIXES: dict[ItemType, str] = {
    ItemType.EQUIPMENT: "eq",
    ItemType.CABLE: "cable",
    ItemType.CONTAINMENT: "cont",
    ItemType.ZONE: "zone",
    ItemType.ROOF: "roof",
    ItemType.PV_ARRAY: "array",
    ItemType.WALKWAY: "walkway",
    ItemType.TASK: "task",
}


def _member(enum_type: type[E], value: Any, field_name: str) -> E:
    """Coerce ``value`` to an enum member, raising InvalidItemData if unknown."""
    try:
        return enum_type(value)
    except ValueError:
        valid = [member.value for member in enum_type]
        raise InvalidItemData(
            f"Invalid {field_name} {value!r}; expected one of {', '.join(valid)}",
            details={field_name: repr(value), "valid": valid},
        ) from None


class MarkupStore:
    """Command API over a linear history of immutable snapshots.

    Example:
        >>> store = MarkupStore()
        >>> _ = store.set_scale(Scale(0.05))
        >>> cable = store.add_cable_route(CableType.LV, [(0, 0), (100, 0)])
        >>> cable.length_meters
        5.0
    """

    def __init__(
        self,
        snapshot: MarkupSnapshot | None = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        boundary_tolerance: float = BOUNDARY_TOLERANCE,
    ) -> None:
        if history_limit < 1:
            raise ValueError("history_limit must be at least 1")
        self._history: list[MarkupSnapshot] = [snapshot or MarkupSnapshot()]
        self._cursor = 0
        self._held: Counter[ItemRef] = Counter()
        self.history_limit = history_limit
        self.boundary_tolerance = boundary_tolerance

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    @property
    def snapshot(self) -> MarkupSnapshot:
        """The current snapshot (read-only)."""
        return self._history[self._cursor]

    @property
    def history_size(self) -> int:
        return len(self._history)

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._history) - 1

    def undo(self) -> bool:
        """Step back one snapshot. Returns False if there is nothing to undo."""
        if not self.can_undo():
            return False
        self._cursor -= 1
        logger.debug(f"Undo to history position {self._cursor}")
        return True

    def redo(self) -> bool:
        """Step forward one snapshot. Returns False if there is nothing to redo."""
        if not self.can_redo():
            return False
        self._cursor += 1
        logger.debug(f"Redo to history position {self._cursor}")
        return True

    def _commit(self, snapshot: MarkupSnapshot, action: str) -> bool:
        if snapshot == self.snapshot:
            logger.debug(f"{action}: no change, nothing recorded")
            return False
        del self._history[self._cursor + 1 :]
        self._history.append(snapshot)
        if len(self._history) > self.history_limit:
            del self._history[0]
        self._cursor = len(self._history) - 1
        logger.debug(f"{action}: history position {self._cursor}")
        return True

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def find(self, ref: ItemRef) -> MarkupItem | None:
        return self.snapshot.find(ref)

    def _get(self, item_type: ItemType, item_id: str) -> Any:
        item = self.snapshot.find(ItemRef(item_type, item_id))
        if item is None:
            raise ItemNotFound(
                f"No {item_type.value} with id {item_id!r}",
                details={"item_type": item_type.value, "item_id": item_id},
            )
        return item

    def _new_id(self, item_type: ItemType, item_id: str | None) -> str:
        if item_id is None:
            return f"{_ID_PREFIXES[item_type]}-{uuid.uuid4().hex[:8]}"
        if self.snapshot.find(ItemRef(item_type, item_id)) is not None:
            raise InvalidItemData(
                f"Duplicate {item_type.value} id {item_id!r}",
                details={"item_id": item_id},
            )
        return item_id

    def _with_item(self, item_type: ItemType, item: Any) -> MarkupSnapshot:
        """Snapshot with ``item`` replacing the one with the same id, or appended."""
        name = collection_name(item_type)
        items = getattr(self.snapshot, name)
        if any(existing.id == item.id for existing in items):
            updated = tuple(item if existing.id == item.id else existing for existing in items)
        else:
            updated = items + (item,)
        return replace(self.snapshot, **{name: updated})

    def _require_scale(self, action: str) -> Scale:
        if self.snapshot.scale is None:
            raise PrerequisiteMissing(
                f"Set a scale before {action}",
                details={"missing": "scale"},
            )
        return self.snapshot.scale

    def _require_pv_config(self) -> PVConfig:
        if self.snapshot.pv_config is None:
            raise PrerequisiteMissing(
                "Set the PV panel configuration before placing arrays",
                details={"missing": "pv_config"},
            )
        return self.snapshot.pv_config

    # ------------------------------------------------------------------
    # Scale and configuration
    # ------------------------------------------------------------------

    def set_scale(self, scale: Scale) -> Scale:
        """Replace the scale and recompute every stored length and area."""
        current = self.snapshot
        updated = replace(
            current,
            scale=scale,
            cables=tuple(c.rescaled(scale) for c in current.cables),
            containment=tuple(c.rescaled(scale) for c in current.containment),
            zones=tuple(z.rescaled(scale) for z in current.zones),
            roofs=tuple(r.rescaled(scale) for r in current.roofs),
            walkways=tuple(w.rescaled(scale) for w in current.walkways),
        )
        self._commit(updated, f"set_scale {scale.meters_per_pixel} m/px")
        return scale

    def set_pv_config(self, config: PVConfig) -> PVConfig:
        self._commit(replace(self.snapshot, pv_config=config), "set_pv_config")
        return config

    # ------------------------------------------------------------------
    # Equipment
    # ------------------------------------------------------------------

    def add_equipment(
        self,
        equipment_type: EquipmentType | str,
        position: PointLike,
        rotation: float = 0.0,
        label: str | None = None,
        properties: Mapping[str, Any] | None = None,
        item_id: str | None = None,
    ) -> EquipmentItem:
        item = EquipmentItem(
            id=self._new_id(ItemType.EQUIPMENT, item_id),
            type=_member(EquipmentType, equipment_type, "equipment_type"),
            position=Point.coerce(position),
            rotation=rotation,
            label=label,
            properties=properties or {},
        )
        self._commit(self._with_item(ItemType.EQUIPMENT, item), f"add_equipment {item.id}")
        return item

    def move_equipment(self, item_id: str, position: PointLike) -> EquipmentItem:
        item = replace(self._get(ItemType.EQUIPMENT, item_id), position=Point.coerce(position))
        self._commit(self._with_item(ItemType.EQUIPMENT, item), f"move_equipment {item_id}")
        return item

    def rotate_equipment(self, item_id: str, rotation: float) -> EquipmentItem:
        """Set the absolute rotation of an equipment item in degrees."""
        item = replace(self._get(ItemType.EQUIPMENT, item_id), rotation=rotation)
        self._commit(self._with_item(ItemType.EQUIPMENT, item), f"rotate_equipment {item_id}")
        return item

    def update_equipment(
        self,
        item_id: str,
        label: str | None = None,
        properties: Mapping[str, Any] | None = None,
    ) -> EquipmentItem:
        """Change label and/or properties; None leaves a field untouched."""
        item = self._get(ItemType.EQUIPMENT, item_id)
        changes: dict[str, Any] = {}
        if label is not None:
            changes["label"] = label
        if properties is not None:
            changes["properties"] = properties
        item = replace(item, **changes)
        self._commit(self._with_item(ItemType.EQUIPMENT, item), f"update_equipment {item_id}")
        return item

    # ------------------------------------------------------------------
    # Cables and containment
    # ------------------------------------------------------------------

    def add_cable_route(
        self,
        cable_type: CableType | str,
        points: Sequence[PointLike],
        item_id: str | None = None,
        **details: Any,
    ) -> CableRoute:
        """Add a cable route; lengths are derived from the points and scale.

        Raises:
            PrerequisiteMissing: If no scale has been set.
            DegenerateGeometry: If fewer than 2 points are given.
            InvalidItemData: If an unknown detail field is passed.
        """
        scale = self._require_scale("drawing cables")
        self._check_cable_details(details, CABLE_DETAIL_FIELDS - {"cable_type"})
        cable = CableRoute.create(
            self._new_id(ItemType.CABLE, item_id),
            _member(CableType, cable_type, "cable_type"),
            points,
            scale,
            **details,
        )
        self._commit(self._with_item(ItemType.CABLE, cable), f"add_cable_route {cable.id}")
        return cable

    def append_cable_point(self, item_id: str, point: PointLike) -> CableRoute:
        scale = self._require_scale("editing cables")
        cable = self._get(ItemType.CABLE, item_id)
        cable = cable.rescaled(scale, points=cable.points + (Point.coerce(point),))
        self._commit(self._with_item(ItemType.CABLE, cable), f"append_cable_point {item_id}")
        return cable

    def update_cable_details(self, item_id: str, **details: Any) -> CableRoute:
        """Update endpoint labels, spec, terminations or riser heights."""
        scale = self._require_scale("editing cables")
        self._check_cable_details(details, CABLE_DETAIL_FIELDS)
        if "cable_type" in details:
            details["cable_type"] = _member(CableType, details["cable_type"], "cable_type")
        cable = self._get(ItemType.CABLE, item_id).rescaled(scale, **details)
        self._commit(self._with_item(ItemType.CABLE, cable), f"update_cable_details {item_id}")
        return cable

    @staticmethod
    def _check_cable_details(details: Mapping[str, Any], allowed: frozenset[str]) -> None:
        unknown = set(details) - allowed
        if unknown:
            raise InvalidItemData(
                f"Unknown cable fields: {', '.join(sorted(unknown))}",
                details={"fields": sorted(unknown)},
            )

    def add_containment(
        self,
        containment_type: ContainmentType | str,
        points: Sequence[PointLike],
        size: str | None = None,
        item_id: str | None = None,
    ) -> ContainmentItem:
        """Add a containment run.

        Baskets and trays need a size from the catalog; other types default
        to their own fixed size.
        """
        scale = self._require_scale("drawing containment")
        containment_type = _member(ContainmentType, containment_type, "containment_type")
        valid_sizes = catalog.containment_sizes(containment_type)
        if size is None:
            size = catalog.default_containment_size(containment_type)
        if size not in valid_sizes:
            raise InvalidItemData(
                f"Invalid size {size!r} for {containment_type.value}; "
                f"expected one of {', '.join(valid_sizes)}",
                details={"size": size, "valid_sizes": list(valid_sizes)},
            )
        item = ContainmentItem.create(
            self._new_id(ItemType.CONTAINMENT, item_id),
            containment_type,
            size,
            points,
            scale,
        )
        self._commit(self._with_item(ItemType.CONTAINMENT, item), f"add_containment {item.id}")
        return item

    # ------------------------------------------------------------------
    # Zones
    # ------------------------------------------------------------------

    def close_zone(
        self,
        points: Sequence[PointLike],
        label: str | None = None,
        color: str | None = None,
        item_id: str | None = None,
    ) -> Zone:
        """Close a polygon into a zone with a derived area."""
        scale = self._require_scale("drawing zones")
        zone = Zone.create(
            self._new_id(ItemType.ZONE, item_id),
            points,
            scale,
            label=label,
            color=color or catalog.zone_color(len(self.snapshot.zones)),
        )
        self._commit(self._with_item(ItemType.ZONE, zone), f"close_zone {zone.id}")
        return zone

    def move_zone_vertex(self, item_id: str, index: int, point: PointLike) -> Zone:
        scale = self._require_scale("editing zones")
        zone = self._get(ItemType.ZONE, item_id)
        if not isinstance(index, int) or not 0 <= index < len(zone.points):
            raise InvalidItemData(
                f"Zone {item_id} has no vertex {index}",
                details={"index": index, "vertex_count": len(zone.points)},
            )
        points = list(zone.points)
        points[index] = Point.coerce(point)
        zone = zone.rescaled(scale, points=tuple(points))
        self._commit(self._with_item(ItemType.ZONE, zone), f"move_zone_vertex {item_id}")
        return zone

    def rename_zone(self, item_id: str, label: str | None) -> Zone:
        zone = replace(self._get(ItemType.ZONE, item_id), label=label)
        self._commit(self._with_item(ItemType.ZONE, zone), f"rename_zone {item_id}")
        return zone

    # ------------------------------------------------------------------
    # PV roofs and arrays
    # ------------------------------------------------------------------

    def add_roof(
        self,
        mask_points: Sequence[PointLike],
        label: str | None = None,
        item_id: str | None = None,
    ) -> PVRoof:
        scale = self._require_scale("drawing roof masks")
        roof = PVRoof.create(self._new_id(ItemType.ROOF, item_id), mask_points, scale, label)
        self._commit(self._with_item(ItemType.ROOF, roof), f"add_roof {roof.id}")
        return roof

    def set_roof_direction(self, roof_id: str, pitch: float, azimuth: float) -> PVRoof:
        roof = with_direction(self._get(ItemType.ROOF, roof_id), pitch, azimuth)
        self._commit(self._with_item(ItemType.ROOF, roof), f"set_roof_direction {roof_id}")
        return roof

    def infer_roof_direction(
        self,
        roof_id: str,
        high_point: PointLike,
        low_point: PointLike,
        pitch: float,
    ) -> PVRoof:
        roof = infer_direction(
            self._get(ItemType.ROOF, roof_id),
            high_point,
            low_point,
            pitch,
            self.boundary_tolerance,
        )
        self._commit(self._with_item(ItemType.ROOF, roof), f"infer_roof_direction {roof_id}")
        return roof

    def update_roof_mask(self, roof_id: str, mask_points: Sequence[PointLike]) -> PVRoof:
        """Redraw a roof mask. Existing arrays keep their anchor and rotation."""
        scale = self._require_scale("editing roof masks")
        roof = self._get(ItemType.ROOF, roof_id).rescaled(
            scale, mask_points=to_points(mask_points)
        )
        self._commit(self._with_item(ItemType.ROOF, roof), f"update_roof_mask {roof_id}")
        return roof

    def place_pv_array(
        self,
        roof_id: str,
        origin: PointLike,
        rotation: float = 0.0,
        orientation: PanelOrientation | str = PanelOrientation.PORTRAIT,
        max_rows: int | None = None,
        max_columns: int | None = None,
        item_id: str | None = None,
    ) -> PVArray:
        """Fit a panel grid on a roof and store it as a new array.

        Raises:
            PrerequisiteMissing: If scale, PV config or roof direction is missing.
            NoViablePanelPosition: If no panel fits at the origin.
        """
        scale = self._require_scale("placing arrays")
        config = self._require_pv_config()
        roof = self._get(ItemType.ROOF, roof_id)
        grid = place_array(
            roof,
            config,
            scale,
            origin,
            rotation,
            _member(PanelOrientation, orientation, "orientation"),
            max_rows=max_rows,
            max_columns=max_columns,
            tolerance=self.boundary_tolerance,
        )
        array = grid.to_array(self._new_id(ItemType.PV_ARRAY, item_id))
        self._commit(self._with_item(ItemType.PV_ARRAY, array), f"place_pv_array {array.id}")
        return array

    def add_pv_array(
        self,
        roof_id: str,
        rows: int,
        columns: int,
        position: PointLike,
        orientation: PanelOrientation | str = PanelOrientation.PORTRAIT,
        rotation: float = 0.0,
        item_id: str | None = None,
    ) -> PVArray:
        """Store an array with an explicit shape (e.g. restored from a document)."""
        self._require_pv_config()
        self._get(ItemType.ROOF, roof_id)
        array = PVArray(
            id=self._new_id(ItemType.PV_ARRAY, item_id),
            roof_id=roof_id,
            rows=rows,
            columns=columns,
            orientation=_member(PanelOrientation, orientation, "orientation"),
            position=Point.coerce(position),
            rotation=rotation,
        )
        self._commit(self._with_item(ItemType.PV_ARRAY, array), f"add_pv_array {array.id}")
        return array

    def add_walkway(
        self,
        points: Sequence[PointLike],
        label: str | None = None,
        item_id: str | None = None,
    ) -> Walkway:
        """Add a maintenance walkway; its length is derived from the points and scale."""
        scale = self._require_scale("drawing walkways")
        walkway = Walkway.create(self._new_id(ItemType.WALKWAY, item_id), points, scale, label)
        self._commit(self._with_item(ItemType.WALKWAY, walkway), f"add_walkway {walkway.id}")
        return walkway

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def add_task(
        self,
        title: str,
        item_ref: ItemRef | None = None,
        description: str | None = None,
        assigned_to: str | None = None,
        status: TaskStatus | str = TaskStatus.TODO,
        item_id: str | None = None,
    ) -> Task:
        """Add a task, optionally linked to an existing markup item."""
        if item_ref is not None and self.find(item_ref) is None:
            raise ItemNotFound(
                f"Task target {item_ref} does not exist",
                details={"item_ref": str(item_ref)},
            )
        task = Task(
            id=self._new_id(ItemType.TASK, item_id),
            title=title,
            status=_member(TaskStatus, status, "status"),
            item_ref=item_ref,
            description=description,
            assigned_to=assigned_to,
        )
        self._commit(self._with_item(ItemType.TASK, task), f"add_task {task.id}")
        return task

    def set_task_status(self, task_id: str, status: TaskStatus | str) -> Task:
        status = _member(TaskStatus, status, "status")
        task = replace(self._get(ItemType.TASK, task_id), status=status)
        self._commit(self._with_item(ItemType.TASK, task), f"set_task_status {task_id}")
        return task

    def resolve_task_item(self, task: Task | str) -> MarkupItem | None:
        """Item a task points at, or None if unlinked or deleted."""
        if isinstance(task, str):
            task = self._get(ItemType.TASK, task)
        if task.item_ref is None:
            return None
        return self.find(task.item_ref)

    def dangling_tasks(self) -> tuple[Task, ...]:
        """Tasks whose linked item no longer exists."""
        return tuple(
            task
            for task in self.snapshot.tasks
            if task.item_ref is not None and self.find(task.item_ref) is None
        )

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    @contextmanager
    def hold(self, ref: ItemRef) -> Iterator[MarkupItem]:
        """Mark an item as in use by an outside collaborator.

        While held, a roof (or the roof owning a held array) cannot be
        deleted.
        """
        item = self.find(ref)
        if item is None:
            raise ItemNotFound(f"Cannot hold missing item {ref}", details={"item_ref": str(ref)})
        self._held[ref] += 1
        try:
            yield item
        finally:
            self._held[ref] -= 1
            if self._held[ref] <= 0:
                del self._held[ref]

    def is_held(self, ref: ItemRef) -> bool:
        return self._held[ref] > 0

    def delete_item(self, ref: ItemRef) -> tuple[ItemRef, ...]:
        """Delete an item and return the references of everything removed.

        Deleting a roof removes its arrays in the same snapshot. Tasks that
        reference deleted items are kept and become dangling.

        Raises:
            ItemNotFound: If the reference does not resolve.
            CascadeDeleteConflict: If a roof or one of its arrays is held.
        """
        self._get(ref.item_type, ref.item_id)
        removed = [ref]
        if ref.item_type == ItemType.ROOF:
            removed.extend(
                ItemRef(ItemType.PV_ARRAY, a.id) for a in self.snapshot.arrays_on(ref.item_id)
            )
            held = [r for r in removed if self.is_held(r)]
            if held:
                logger.warning(f"Refusing to delete roof {ref.item_id}: {len(held)} held")
                raise CascadeDeleteConflict(
                    f"Roof {ref.item_id} cannot be deleted while referenced",
                    details={"held": [str(r) for r in held]},
                )

        current = self.snapshot
        changes: dict[str, tuple[Any, ...]] = {}
        for item_type in {r.item_type for r in removed}:
            ids = {r.item_id for r in removed if r.item_type == item_type}
            name = collection_name(item_type)
            changes[name] = tuple(i for i in getattr(current, name) if i.id not in ids)
        self._commit(replace(current, **changes), f"delete_item {ref}")
        return tuple(removed)
