"""Tool and interaction state machine.

Sequences user gestures (screen-space clicks, tool changes, pan and zoom)
into markup store commands. Recoverable domain errors are caught here and
returned as typed failures so the canvas always stays in a consistent state;
``InvariantViolation`` is not caught.

States:
    Idle          no gesture in progress
    Drawing       points collected for the active drawing tool
    Selected      one item selected
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from planmarkup.domain import catalog
from planmarkup.domain.errors import (
    DegenerateGeometry,
    ItemNotFound,
    MarkupError,
    PrerequisiteMissing,
    ToolUnavailable,
)
from planmarkup.domain.geometry import point_in_polygon
from planmarkup.domain.scale import scale_from_points
from planmarkup.domain.state import ViewState
from planmarkup.domain.store import MarkupStore
from planmarkup.domain.value_objects import (
    CanvasTransform,
    DesignPurpose,
    ItemRef,
    ItemType,
    Point,
    PointLike,
)

logger = logging.getLogger(__name__)

DRAWING_TOOLS = frozenset(
    {
        catalog.SCALE,
        catalog.ZONE,
        catalog.ROOF_MASK,
        catalog.ROOF_DIRECTION,
        catalog.WALKWAY,
        *catalog.LINE_TOOL_CABLE_TYPES,
        *catalog.CONTAINMENT_TOOLS,
    }
)
PLACEMENT_TOOLS = frozenset({catalog.PV_ARRAY, *catalog.EQUIPMENT_TOOLS})


class EventKind(str, Enum):
    TOOL_SELECTED = "tool_selected"
    POINT_ADDED = "point_added"
    DRAWING_CANCELLED = "drawing_cancelled"
    ITEM_COMMITTED = "item_committed"
    ITEM_DELETED = "item_deleted"
    SCALE_SET = "scale_set"
    SELECTION_CHANGED = "selection_changed"
    VIEW_CHANGED = "view_changed"
    HISTORY_CHANGED = "history_changed"


@dataclass(frozen=True)
class InteractionEvent:
    """Something the canvas should react to."""

    kind: EventKind
    tool_id: str | None = None
    item_ref: ItemRef | None = None
    points: tuple[Point, ...] = ()


@dataclass(frozen=True)
class InteractionFailure:
    """A domain error converted into data."""

    code: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_error(cls, error: MarkupError) -> "InteractionFailure":
        return cls(code=error.code, message=error.message, details=dict(error.details))


@dataclass(frozen=True)
class InteractionResult:
    """Outcome of one gesture: emitted events and an optional failure."""

    events: tuple[InteractionEvent, ...] = ()
    error: InteractionFailure | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def has(self, kind: EventKind) -> bool:
        return any(event.kind == kind for event in self.events)

    @property
    def committed(self) -> ItemRef | None:
        """Reference of the item committed by this gesture, if any."""
        for event in self.events:
            if event.kind == EventKind.ITEM_COMMITTED:
                return event.item_ref
        return None


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Drawing:
    tool_id: str
    points: tuple[Point, ...] = ()


@dataclass(frozen=True)
class Selected:
    item_ref: ItemRef


InteractionState = Idle | Drawing | Selected


class ToolStateMachine:
    """Tracks the active tool, in-progress drawing, selection and viewport.

    Only one drawing may be in progress. Switching tools mid-drawing discards
    the uncommitted points and reports a ``DRAWING_CANCELLED`` event.
    """

    def __init__(
        self,
        store: MarkupStore,
        purpose: DesignPurpose = DesignPurpose.BUDGET_MARKUP,
        transform: CanvasTransform | None = None,
    ) -> None:
        self.store = store
        self.purpose = DesignPurpose(purpose)
        self.transform = transform or CanvasTransform.identity()
        self.active_tool: str | None = catalog.SELECT
        self.state: InteractionState = Idle()
        self._last_roof_id: str | None = None

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _run(self, action: str, step: Callable[[list[InteractionEvent]], None]) -> InteractionResult:
        events: list[InteractionEvent] = []
        try:
            step(events)
        except MarkupError as exc:
            logger.warning(f"{action} rejected: [{exc.code}] {exc.message}")
            return InteractionResult(tuple(events), InteractionFailure.from_error(exc))
        return InteractionResult(tuple(events))

    def _cancel_drawing(self, events: list[InteractionEvent]) -> None:
        if isinstance(self.state, Drawing):
            logger.debug(
                f"Discarding {len(self.state.points)} uncommitted points "
                f"from {self.state.tool_id}"
            )
            events.append(
                InteractionEvent(
                    EventKind.DRAWING_CANCELLED,
                    tool_id=self.state.tool_id,
                    points=self.state.points,
                )
            )
            self.state = Idle()

    def _set_selection(self, ref: ItemRef | None, events: list[InteractionEvent]) -> None:
        previous = self.selection
        self.state = Selected(ref) if ref is not None else Idle()
        if previous != ref:
            events.append(InteractionEvent(EventKind.SELECTION_CHANGED, item_ref=ref))

    @property
    def selection(self) -> ItemRef | None:
        return self.state.item_ref if isinstance(self.state, Selected) else None

    def view_state(self) -> ViewState:
        return ViewState(
            active_tool=self.active_tool,
            selection=self.selection,
            transform=self.transform,
        )

    def _require_tool(self, tool_id: str) -> None:
        tool = catalog.get_tool(tool_id)
        if tool is None:
            raise ToolUnavailable(f"Unknown tool {tool_id!r}", details={"tool_id": tool_id})
        if self.purpose not in tool.purposes:
            raise ToolUnavailable(
                f"Tool {tool_id!r} is not available for {self.purpose.value}",
                details={"tool_id": tool_id, "purpose": self.purpose.value},
            )

    # ------------------------------------------------------------------
    # Tools and drawing
    # ------------------------------------------------------------------

    def select_tool(self, tool_id: str) -> InteractionResult:
        def step(events: list[InteractionEvent]) -> None:
            self._require_tool(tool_id)
            self._cancel_drawing(events)
            if tool_id != catalog.SELECT:
                self._set_selection(None, events)
            self.active_tool = tool_id
            events.append(InteractionEvent(EventKind.TOOL_SELECTED, tool_id=tool_id))

        return self._run("select_tool", step)

    def add_point(self, screen_point: PointLike) -> InteractionResult:
        """Add a screen-space click to the drawing in progress."""

        def step(events: list[InteractionEvent]) -> None:
            tool_id = self.active_tool
            if tool_id not in DRAWING_TOOLS:
                raise ToolUnavailable(
                    f"Tool {tool_id!r} does not draw",
                    details={"tool_id": tool_id},
                )
            point = self.transform.to_model(screen_point)
            if isinstance(self.state, Drawing):
                points = self.state.points + (point,)
            else:
                self._set_selection(None, events)
                points = (point,)
            self.state = Drawing(tool_id, points)
            events.append(InteractionEvent(EventKind.POINT_ADDED, tool_id=tool_id, points=points))

        return self._run("add_point", step)

    def finish(self, **params: Any) -> InteractionResult:
        """Commit the drawing in progress.

        On failure the drawing stays open so the user can add points or
        cancel.
        """

        def step(events: list[InteractionEvent]) -> None:
            if not isinstance(self.state, Drawing):
                raise DegenerateGeometry("Nothing is being drawn")
            drawing = self.state
            ref = self._commit_drawing(drawing, params)
            self.state = Idle()
            if ref is None:
                events.append(InteractionEvent(EventKind.SCALE_SET, tool_id=drawing.tool_id))
            else:
                events.append(
                    InteractionEvent(
                        EventKind.ITEM_COMMITTED,
                        tool_id=drawing.tool_id,
                        item_ref=ref,
                        points=drawing.points,
                    )
                )

        return self._run("finish", step)

    def _commit_drawing(self, drawing: Drawing, params: dict[str, Any]) -> ItemRef | None:
        tool_id, points = drawing.tool_id, drawing.points
        if tool_id == catalog.SCALE:
            if len(points) != 2:
                raise DegenerateGeometry(
                    "A scale line needs exactly 2 points",
                    details={"point_count": len(points)},
                )
            if "real_distance" not in params:
                raise PrerequisiteMissing("Enter the real length of the scale line")
            self.store.set_scale(scale_from_points(points[0], points[1], params["real_distance"]))
            return None
        if tool_id in catalog.LINE_TOOL_CABLE_TYPES:
            cable = self.store.add_cable_route(
                catalog.LINE_TOOL_CABLE_TYPES[tool_id], points, **params
            )
            return ItemRef(ItemType.CABLE, cable.id)
        if tool_id in catalog.CONTAINMENT_TOOLS:
            item = self.store.add_containment(
                catalog.CONTAINMENT_TOOLS[tool_id], points, size=params.get("size")
            )
            return ItemRef(ItemType.CONTAINMENT, item.id)
        if tool_id == catalog.ZONE:
            zone = self.store.close_zone(
                points, label=params.get("label"), color=params.get("color")
            )
            return ItemRef(ItemType.ZONE, zone.id)
        if tool_id == catalog.ROOF_MASK:
            roof = self.store.add_roof(points, label=params.get("label"))
            self._last_roof_id = roof.id
            return ItemRef(ItemType.ROOF, roof.id)
        if tool_id == catalog.WALKWAY:
            walkway = self.store.add_walkway(points, label=params.get("label"))
            return ItemRef(ItemType.WALKWAY, walkway.id)
        # roof_direction: high point first, then low point
        if len(points) != 2:
            raise DegenerateGeometry(
                "Roof direction needs a high point and a low point",
                details={"point_count": len(points)},
            )
        if "pitch" not in params:
            raise PrerequisiteMissing("Enter the roof pitch")
        roof_id = self._target_roof_id()
        self.store.infer_roof_direction(roof_id, points[0], points[1], params["pitch"])
        return ItemRef(ItemType.ROOF, roof_id)

    def _target_roof_id(self, point: Point | None = None) -> str:
        """Roof under ``point``, else the selected roof, else the last drawn one."""
        if point is not None:
            for roof in reversed(self.store.snapshot.roofs):
                if point_in_polygon(point, roof.mask_points, self.store.boundary_tolerance):
                    return roof.id
        selection = self.selection
        if selection is not None and selection.item_type == ItemType.ROOF:
            return selection.item_id
        if self._last_roof_id and self.store.find(ItemRef(ItemType.ROOF, self._last_roof_id)):
            return self._last_roof_id
        raise PrerequisiteMissing("Draw or select a roof first", details={"missing": "roof"})

    def cancel(self) -> InteractionResult:
        """Abandon the drawing in progress or clear the selection."""

        def step(events: list[InteractionEvent]) -> None:
            if isinstance(self.state, Drawing):
                self._cancel_drawing(events)
            else:
                self._set_selection(None, events)

        return self._run("cancel", step)

    def place(self, screen_point: PointLike, **params: Any) -> InteractionResult:
        """Single-click placement for equipment tools and the PV array tool."""

        def step(events: list[InteractionEvent]) -> None:
            tool_id = self.active_tool
            if tool_id not in PLACEMENT_TOOLS:
                raise ToolUnavailable(
                    f"Tool {tool_id!r} does not place items",
                    details={"tool_id": tool_id},
                )
            point = self.transform.to_model(screen_point)
            if tool_id == catalog.PV_ARRAY:
                array = self.store.place_pv_array(self._target_roof_id(point), point, **params)
                ref = ItemRef(ItemType.PV_ARRAY, array.id)
            else:
                item = self.store.add_equipment(catalog.EQUIPMENT_TOOLS[tool_id], point, **params)
                ref = ItemRef(ItemType.EQUIPMENT, item.id)
            events.append(
                InteractionEvent(
                    EventKind.ITEM_COMMITTED, tool_id=tool_id, item_ref=ref, points=(point,)
                )
            )

        return self._run("place", step)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def select_item(self, ref: ItemRef) -> InteractionResult:
        def step(events: list[InteractionEvent]) -> None:
            if self.store.find(ref) is None:
                raise ItemNotFound(f"Cannot select missing item {ref}")
            self._cancel_drawing(events)
            self._set_selection(ref, events)

        return self._run("select_item", step)

    def clear_selection(self) -> InteractionResult:
        return self._run("clear_selection", lambda events: self._set_selection(None, events))

    def delete_selected(self) -> InteractionResult:
        def step(events: list[InteractionEvent]) -> None:
            ref = self.selection
            if ref is None:
                raise ItemNotFound("Nothing is selected")
            removed = self.store.delete_item(ref)
            self._set_selection(None, events)
            events.extend(InteractionEvent(EventKind.ITEM_DELETED, item_ref=r) for r in removed)

        return self._run("delete_selected", step)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def undo(self) -> InteractionResult:
        return self._run("undo", lambda events: self._move_history(self.store.undo, events))

    def redo(self) -> InteractionResult:
        return self._run("redo", lambda events: self._move_history(self.store.redo, events))

    def _move_history(self, move: Callable[[], bool], events: list[InteractionEvent]) -> None:
        self._cancel_drawing(events)
        if not move():
            return
        events.append(InteractionEvent(EventKind.HISTORY_CHANGED))
        selection = self.selection
        if selection is not None and self.store.find(selection) is None:
            self._set_selection(None, events)

    # ------------------------------------------------------------------
    # Viewport
    # ------------------------------------------------------------------

    def pan(self, dx: float, dy: float) -> InteractionResult:
        return self._run(
            "pan", lambda events: self._set_transform(self.transform.panned(dx, dy), events)
        )

    def zoom(self, factor: float, anchor: PointLike | None = None) -> InteractionResult:
        """Zoom about a screen-space anchor; the anchor stays put on screen.

        A factor that is not a positive finite number fails with
        ``invalid_item_data`` and leaves the view unchanged.
        """

        def step(events: list[InteractionEvent]) -> None:
            self._set_transform(self.transform.zoomed(factor, anchor), events)

        return self._run("zoom", step)

    def reset_view(self) -> InteractionResult:
        return self._run(
            "reset_view",
            lambda events: self._set_transform(CanvasTransform.identity(), events),
        )

    def _set_transform(self, transform: CanvasTransform, events: list[InteractionEvent]) -> None:
        if transform == self.transform:
            return
        self.transform = transform
        events.append(InteractionEvent(EventKind.VIEW_CHANGED))
