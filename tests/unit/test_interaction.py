"""Unit tests for the tool and interaction state machine.

These tests verify:
- Drawing tools collect screen clicks and commit through the store
- Switching tools mid-drawing discards uncommitted points
- Domain errors come back as failures without corrupting state
- Viewport changes never affect measurements
"""

import pytest

from planmarkup.application.interaction import (
    Drawing,
    EventKind,
    Idle,
    Selected,
    ToolStateMachine,
)
from planmarkup.domain import catalog
from planmarkup.domain.store import MarkupStore
from planmarkup.domain.value_objects import (
    CableType,
    CanvasTransform,
    ContainmentType,
    DesignPurpose,
    EquipmentType,
    ItemRef,
    ItemType,
    Point,
)


@pytest.fixture
def machine(store: MarkupStore) -> ToolStateMachine:
    return ToolStateMachine(store)


@pytest.fixture
def pv_machine(pv_store: MarkupStore) -> ToolStateMachine:
    return ToolStateMachine(pv_store, DesignPurpose.PV_DESIGN)


def draw(machine: ToolStateMachine, tool_id: str, points, **params):
    machine.select_tool(tool_id)
    for point in points:
        machine.add_point(point)
    return machine.finish(**params)


class TestToolSelection:
    """Tests for switching tools."""

    def test_default_tool_is_select(self, machine: ToolStateMachine) -> None:
        assert machine.active_tool == catalog.SELECT
        assert isinstance(machine.state, Idle)

    def test_switching_tools_cancels_drawing(self, machine: ToolStateMachine) -> None:
        committed = draw(machine, catalog.LINE_LV, [(0, 100), (100, 100)]).committed
        before = machine.store.snapshot
        machine.select_tool(catalog.LINE_LV)
        machine.add_point((0, 0))
        machine.add_point((50, 0))

        result = machine.select_tool(catalog.ZONE)

        assert result.ok
        assert result.has(EventKind.DRAWING_CANCELLED)
        assert result.events[0].points == (Point(0, 0), Point(50, 0))
        assert isinstance(machine.state, Idle)
        assert machine.active_tool == catalog.ZONE
        assert machine.store.snapshot is before
        assert [c.id for c in machine.store.snapshot.cables] == [committed.item_id]
        assert machine.store.find(committed).length_meters == pytest.approx(5.0)

    def test_tool_not_enabled_for_purpose(self, machine: ToolStateMachine) -> None:
        result = machine.select_tool(catalog.ROOF_MASK)
        assert result.error is not None
        assert result.error.code == "tool_unavailable"
        assert machine.active_tool == catalog.SELECT

    def test_unknown_tool(self, machine: ToolStateMachine) -> None:
        assert machine.select_tool("lasso").error.code == "tool_unavailable"

    def test_failed_switch_keeps_drawing(self, machine: ToolStateMachine) -> None:
        machine.select_tool(catalog.LINE_LV)
        machine.add_point((0, 0))
        machine.select_tool(catalog.PV_ARRAY)
        assert isinstance(machine.state, Drawing)


class TestDrawing:
    """Tests for drawing and committing items."""

    def test_line_commits_cable(self, machine: ToolStateMachine) -> None:
        result = draw(machine, catalog.LINE_LV, [(0, 0), (100, 0)], to_label="SOC-1")
        assert result.ok
        ref = result.committed
        assert ref is not None and ref.item_type == ItemType.CABLE
        cable = machine.store.find(ref)
        assert cable.cable_type == CableType.LV
        assert cable.length_meters == pytest.approx(5.0)
        assert cable.to_label == "SOC-1"
        assert isinstance(machine.state, Idle)

    def test_zoom_does_not_change_measurements(self, store: MarkupStore) -> None:
        machine = ToolStateMachine(store, transform=CanvasTransform(x=10, y=0, scale=2.0))
        result = draw(machine, catalog.LINE_MV, [(10, 0), (210, 0)])
        assert machine.store.find(result.committed).length_meters == pytest.approx(5.0)

    def test_scale_tool(self) -> None:
        machine = ToolStateMachine(MarkupStore())
        result = draw(machine, catalog.SCALE, [(0, 0), (200, 0)], real_distance=10)
        assert result.has(EventKind.SCALE_SET)
        assert machine.store.snapshot.scale.meters_per_pixel == pytest.approx(0.05)

    def test_scale_tool_needs_distance(self, machine: ToolStateMachine) -> None:
        result = draw(machine, catalog.SCALE, [(0, 0), (200, 0)])
        assert result.error.code == "prerequisite_missing"
        assert isinstance(machine.state, Drawing)

    def test_failed_finish_keeps_points(self, machine: ToolStateMachine) -> None:
        result = draw(machine, catalog.ZONE, [(0, 0), (10, 0)])
        assert result.error.code == "degenerate_geometry"
        machine.add_point((10, 10))
        assert machine.finish(label="Shop 3").ok
        assert machine.store.snapshot.zones[0].label == "Shop 3"

    def test_containment_with_size(self, machine: ToolStateMachine) -> None:
        tool_id = catalog.containment_tool_id(ContainmentType.CABLE_TRAY)
        result = draw(machine, tool_id, [(0, 0), (40, 0)], size="200mm")
        assert machine.store.find(result.committed).size == "200mm"

    def test_finish_without_drawing(self, machine: ToolStateMachine) -> None:
        assert machine.finish().error.code == "degenerate_geometry"

    def test_select_tool_does_not_draw(self, machine: ToolStateMachine) -> None:
        assert machine.add_point((0, 0)).error.code == "tool_unavailable"

    def test_cancel_drawing(self, machine: ToolStateMachine) -> None:
        machine.select_tool(catalog.LINE_LV)
        machine.add_point((0, 0))
        assert machine.cancel().has(EventKind.DRAWING_CANCELLED)
        assert isinstance(machine.state, Idle)


class TestPlacementAndSelection:
    """Tests for single-click placement, selection and deletion."""

    def test_place_equipment(self, machine: ToolStateMachine) -> None:
        machine.select_tool(catalog.equipment_tool_id(EquipmentType.RMU))
        result = machine.place((5, 5), label="RMU-1")
        item = machine.store.find(result.committed)
        assert item.label == "RMU-1"
        assert item.position == Point(5, 5)

    def test_select_and_delete(self, machine: ToolStateMachine) -> None:
        item = machine.store.add_equipment(EquipmentType.RMU, (0, 0))
        ref = ItemRef(ItemType.EQUIPMENT, item.id)

        assert machine.select_item(ref).has(EventKind.SELECTION_CHANGED)
        assert machine.state == Selected(ref)

        result = machine.delete_selected()
        assert result.has(EventKind.ITEM_DELETED)
        assert machine.selection is None
        assert machine.store.snapshot.equipment == ()

    def test_select_missing_item(self, machine: ToolStateMachine) -> None:
        result = machine.select_item(ItemRef(ItemType.ZONE, "zone-x"))
        assert result.error.code == "item_not_found"

    def test_undo_clears_stale_selection(self, machine: ToolStateMachine) -> None:
        machine.select_tool(catalog.equipment_tool_id(EquipmentType.RMU))
        ref = machine.place((0, 0)).committed
        machine.select_item(ref)

        result = machine.undo()

        assert result.has(EventKind.HISTORY_CHANGED)
        assert machine.selection is None
        assert machine.redo().has(EventKind.HISTORY_CHANGED)


class TestPVWorkflow:
    """Roof mask, direction and array placement through the tools."""

    def test_full_pv_flow(self, pv_machine: ToolStateMachine) -> None:
        roof_ref = draw(
            pv_machine, catalog.ROOF_MASK, [(0, 0), (20, 0), (20, 10), (0, 10)]
        ).committed
        direction = draw(pv_machine, catalog.ROOF_DIRECTION, [(10, 1), (10, 9)], pitch=0)
        assert direction.committed == roof_ref
        assert pv_machine.store.find(roof_ref).azimuth == pytest.approx(0.0)

        pv_machine.select_tool(catalog.PV_ARRAY)
        result = pv_machine.place((0, 0), orientation="landscape")

        array = pv_machine.store.find(result.committed)
        assert array.roof_id == roof_ref.item_id
        assert array.panel_count == 20

    def test_walkway_tool(self, pv_machine: ToolStateMachine) -> None:
        result = draw(pv_machine, catalog.WALKWAY, [(0, 12), (20, 12)], label="Access")
        assert result.committed.item_type == ItemType.WALKWAY
        walkway = pv_machine.store.find(result.committed)
        assert walkway.length_meters == pytest.approx(20.0)
        assert walkway.label == "Access"

    def test_walkway_tool_is_pv_only(self, machine: ToolStateMachine) -> None:
        assert machine.select_tool(catalog.WALKWAY).error.code == "tool_unavailable"

    def test_array_before_direction(self, pv_machine: ToolStateMachine) -> None:
        draw(pv_machine, catalog.ROOF_MASK, [(0, 0), (20, 0), (20, 10), (0, 10)])
        pv_machine.select_tool(catalog.PV_ARRAY)
        assert pv_machine.place((1, 1)).error.code == "prerequisite_missing"

    def test_direction_without_roof(self, pv_machine: ToolStateMachine) -> None:
        result = draw(pv_machine, catalog.ROOF_DIRECTION, [(10, 1), (10, 9)], pitch=10)
        assert result.error.code == "prerequisite_missing"


class TestViewport:
    def test_pan(self, machine: ToolStateMachine) -> None:
        assert machine.pan(5, -5).has(EventKind.VIEW_CHANGED)
        assert (machine.transform.x, machine.transform.y) == (5, -5)

    @pytest.mark.parametrize("factor", [0, -2, float("nan"), float("inf"), "2"])
    def test_zoom_rejects_bad_factor(self, machine: ToolStateMachine, factor) -> None:
        result = machine.zoom(factor)
        assert result.error.code == "invalid_item_data"
        assert result.events == ()
        assert machine.transform == CanvasTransform.identity()

    def test_pan_rejects_non_finite_delta(self, machine: ToolStateMachine) -> None:
        result = machine.pan(float("nan"), 0)
        assert result.error.code == "invalid_item_data"
        assert machine.transform == CanvasTransform.identity()

    def test_unchanged_view_emits_nothing(self, machine: ToolStateMachine) -> None:
        result = machine.reset_view()
        assert result.ok
        assert result.events == ()

    def test_reset_view(self, machine: ToolStateMachine) -> None:
        machine.zoom(2.0, (100, 100))
        assert machine.reset_view().has(EventKind.VIEW_CHANGED)
        assert machine.transform == CanvasTransform.identity()

    def test_view_state(self, machine: ToolStateMachine) -> None:
        machine.select_tool(catalog.ZONE)
        assert machine.view_state().active_tool == catalog.ZONE


class TestInvalidInput:
    """Malformed parameters come back as typed failures, never as exceptions."""

    def test_unknown_panel_orientation(self, pv_machine: ToolStateMachine) -> None:
        draw(pv_machine, catalog.ROOF_MASK, [(0, 0), (20, 0), (20, 10), (0, 10)])
        draw(pv_machine, catalog.ROOF_DIRECTION, [(10, 1), (10, 9)], pitch=0)
        pv_machine.select_tool(catalog.PV_ARRAY)

        result = pv_machine.place((0, 0), orientation="diagonal")

        assert result.error.code == "invalid_item_data"
        assert "portrait" in result.error.message
        assert pv_machine.store.snapshot.arrays == ()

    @pytest.mark.parametrize("rotation", [float("nan"), float("inf"), "ninety"])
    def test_bad_equipment_rotation(self, machine: ToolStateMachine, rotation) -> None:
        machine.select_tool(catalog.equipment_tool_id(EquipmentType.RMU))
        result = machine.place((5, 5), rotation=rotation)
        assert result.error.code == "invalid_item_data"
        assert machine.store.snapshot.equipment == ()

    @pytest.mark.parametrize("real_distance", ["5", None, float("nan"), -5])
    def test_bad_scale_distance(self, real_distance) -> None:
        machine = ToolStateMachine(MarkupStore())
        result = draw(machine, catalog.SCALE, [(0, 0), (200, 0)], real_distance=real_distance)
        assert result.error.code == "invalid_scale_input"
        assert isinstance(machine.state, Drawing)
        assert machine.store.snapshot.scale is None

    def test_bad_riser_height(self, machine: ToolStateMachine) -> None:
        result = draw(machine, catalog.LINE_LV, [(0, 0), (100, 0)], start_height="tall")
        assert result.error.code == "invalid_item_data"
        assert machine.store.snapshot.cables == ()

    def test_bad_roof_pitch(self, pv_machine: ToolStateMachine) -> None:
        draw(pv_machine, catalog.ROOF_MASK, [(0, 0), (20, 0), (20, 10), (0, 10)])
        result = draw(pv_machine, catalog.ROOF_DIRECTION, [(10, 1), (10, 9)], pitch="steep")
        assert result.error.code == "invalid_item_data"

    def test_malformed_click(self, machine: ToolStateMachine) -> None:
        machine.select_tool(catalog.LINE_LV)
        assert machine.add_point((1, 2, 3)).error.code == "invalid_item_data"
        assert machine.add_point("12").error.code == "invalid_item_data"
        assert isinstance(machine.state, Idle)
