"""Unit tests for markup entities and value objects."""

import pytest

from planmarkup.domain.entities import (
    WALKWAY_WIDTH_METERS,
    CableRoute,
    ContainmentItem,
    EquipmentItem,
    PVArray,
    PVConfig,
    PVRoof,
    Task,
    Walkway,
    Zone,
    cable_lengths,
    conductor_multiplier,
)
from planmarkup.domain.errors import DegenerateGeometry, InvalidItemData
from planmarkup.domain.value_objects import (
    CableType,
    CanvasTransform,
    ContainmentType,
    EquipmentType,
    ItemRef,
    ItemType,
    PanelOrientation,
    Point,
)


class TestPoint:
    def test_coerce_pair(self) -> None:
        assert Point.coerce((1, 2)) == Point(1.0, 2.0)

    def test_coerce_rejects_triples(self) -> None:
        with pytest.raises(ValueError):
            Point.coerce((1, 2, 3))

    @pytest.mark.parametrize("value", ["12", (1, "y"), (float("nan"), 0), 5, None])
    def test_coerce_rejects_malformed_values(self, value) -> None:
        with pytest.raises(InvalidItemData):
            Point.coerce(value)

    def test_offset(self) -> None:
        assert Point(1, 1).offset(2, -1) == Point(3, 0)


class TestCanvasTransform:
    """Tests for the presentational pan/zoom transform."""

    def test_round_trip(self) -> None:
        transform = CanvasTransform(x=40, y=-20, scale=2.5)
        model = transform.to_model(transform.to_screen((12, 7)))
        assert model.x == pytest.approx(12)
        assert model.y == pytest.approx(7)

    def test_zoom_keeps_anchor_fixed(self) -> None:
        transform = CanvasTransform(x=10, y=10, scale=1.0)
        anchor = (200, 150)
        before = transform.to_model(anchor)
        zoomed = transform.zoomed(2.0, anchor)
        after = zoomed.to_screen(before)
        assert after.x == pytest.approx(200)
        assert after.y == pytest.approx(150)
        assert zoomed.scale == 2.0

    def test_zoom_is_clamped(self) -> None:
        assert CanvasTransform().zoomed(1000).scale == 40.0
        assert CanvasTransform().zoomed(0.0001).scale == 0.05

    def test_rejects_non_positive_zoom(self) -> None:
        with pytest.raises(ValueError):
            CanvasTransform(scale=0)

    @pytest.mark.parametrize("factor", [0, -1, float("nan"), float("inf")])
    def test_zoomed_rejects_bad_factor(self, factor: float) -> None:
        with pytest.raises(InvalidItemData):
            CanvasTransform().zoomed(factor)

    def test_panned_rejects_non_finite_delta(self) -> None:
        with pytest.raises(InvalidItemData):
            CanvasTransform().panned(0, float("inf"))


class TestItemRef:
    def test_str(self) -> None:
        assert str(ItemRef(ItemType.ZONE, "zone-1")) == "zone:zone-1"

    def test_requires_id(self) -> None:
        with pytest.raises(ValueError):
            ItemRef(ItemType.ZONE, "")


class TestCableRoute:
    """Tests for cable route construction and derived lengths."""

    def test_create_derives_lengths(self) -> None:
        cable = CableRoute.create("c1", CableType.LV, [(0, 0), (100, 0), (100, 100)], 0.05)
        assert cable.path_length_meters == pytest.approx(10.0)
        assert cable.length_meters == pytest.approx(10.0)

    def test_risers_are_added_to_total(self) -> None:
        cable = CableRoute.create(
            "c1", CableType.MV, [(0, 0), (0, 200)], 0.05, start_height=1.5, end_height=0.5
        )
        assert cable.path_length_meters == pytest.approx(10.0)
        assert cable.length_meters == pytest.approx(12.0)

    def test_gp_wire_counts_each_conductor(self) -> None:
        assert conductor_multiplier(CableType.LV, "2.5mm GP wire") == 3
        assert conductor_multiplier(CableType.LV, "4mm 3C SWA") == 1
        assert conductor_multiplier(CableType.LV, None) == 1
        _, total = cable_lengths([(0, 0), (10, 0)], 1.0, CableType.LV, 1.0, 1.0, "gp 1.5mm")
        assert total == pytest.approx(32.0)

    @pytest.mark.parametrize("cable_type", [CableType.MV, CableType.DC])
    def test_gp_multiplier_is_lv_only(self, cable_type: CableType) -> None:
        assert conductor_multiplier(cable_type, "GP wire") == 1
        cable = CableRoute.create(
            "c1", cable_type, [(0, 0), (100, 0)], 0.05, cable_spec="2.5mm GP", end_height=1.0
        )
        assert cable.length_meters == pytest.approx(6.0)

    def test_retyping_to_lv_applies_gp_multiplier(self) -> None:
        cable = CableRoute.create(
            "c1", CableType.MV, [(0, 0), (100, 0)], 0.05, cable_spec="2.5mm GP"
        )
        assert cable.rescaled(0.05, cable_type=CableType.LV).length_meters == pytest.approx(15.0)

    def test_rescaled_recomputes_lengths(self) -> None:
        cable = CableRoute.create("c1", CableType.LV, [(0, 0), (100, 0)], 0.05)
        rescaled = cable.rescaled(0.1)
        assert rescaled.length_meters == pytest.approx(10.0)

    def test_rescaled_applies_changes(self) -> None:
        cable = CableRoute.create("c1", CableType.LV, [(0, 0), (100, 0)], 0.05)
        updated = cable.rescaled(0.05, end_height=2.0)
        assert updated.length_meters == pytest.approx(7.0)

    def test_single_point_is_rejected(self) -> None:
        with pytest.raises(DegenerateGeometry):
            CableRoute.create("c1", CableType.LV, [(0, 0)], 0.05)

    def test_negative_height_is_rejected(self) -> None:
        with pytest.raises(InvalidItemData):
            CableRoute.create("c1", CableType.LV, [(0, 0), (1, 0)], 1.0, start_height=-1)


class TestWalkway:
    def test_area_uses_fixed_width(self) -> None:
        walkway = Walkway.create("w1", [(0, 0), (200, 0)], 0.05)
        assert walkway.length_meters == pytest.approx(10.0)
        assert walkway.area_sqm == pytest.approx(10.0 * WALKWAY_WIDTH_METERS)

    def test_rescaled(self) -> None:
        walkway = Walkway.create("w1", [(0, 0), (200, 0)], 0.05, label="A")
        updated = walkway.rescaled(0.1, label="B")
        assert updated.length_meters == pytest.approx(20.0)
        assert updated.label == "B"


class TestOtherEntities:
    """Tests for equipment, containment, zones, roofs, arrays and tasks."""

    def test_equipment_rotation_normalized(self) -> None:
        item = EquipmentItem("e1", EquipmentType.RMU, Point(0, 0), rotation=-90)
        assert item.rotation == 270

    def test_equipment_properties_are_read_only(self) -> None:
        item = EquipmentItem(
            "e1", EquipmentType.RMU, Point(0, 0), properties={"rating": "11kV"}
        )
        with pytest.raises(TypeError):
            item.properties["rating"] = "22kV"  # type: ignore[index]

    def test_containment_length(self) -> None:
        item = ContainmentItem.create(
            "t1", ContainmentType.CABLE_TRAY, "300mm", [(0, 0), (200, 0)], 0.05
        )
        assert item.length_meters == pytest.approx(10.0)

    def test_containment_needs_size(self) -> None:
        with pytest.raises(InvalidItemData):
            ContainmentItem.create("t1", ContainmentType.CABLE_TRAY, "", [(0, 0), (1, 0)], 1)

    def test_zone_area(self) -> None:
        zone = Zone.create("z1", [(0, 0), (100, 0), (100, 100), (0, 100)], 0.05)
        assert zone.area_sqm == pytest.approx(25.0)

    def test_zone_with_repeated_points_is_degenerate(self) -> None:
        with pytest.raises(DegenerateGeometry):
            Zone.create("z1", [(0, 0), (10, 0), (0, 0), (10, 0)], 1.0)

    def test_roof_pitch_bounds(self) -> None:
        roof = PVRoof.create("r1", [(0, 0), (10, 0), (10, 10)], 1.0)
        assert not roof.has_direction
        with pytest.raises(InvalidItemData):
            roof.rescaled(1.0, pitch=90)

    def test_roof_azimuth_normalized(self) -> None:
        roof = PVRoof.create("r1", [(0, 0), (10, 0), (10, 10)], 1.0)
        assert roof.rescaled(1.0, pitch=10, azimuth=-45).azimuth == 315

    def test_array_needs_a_panel(self) -> None:
        with pytest.raises(InvalidItemData):
            PVArray("a1", "r1", 0, 3, PanelOrientation.PORTRAIT, Point(0, 0))

    def test_array_panel_count(self) -> None:
        array = PVArray("a1", "r1", 3, 4, PanelOrientation.PORTRAIT, Point(0, 0))
        assert array.panel_count == 12

    @pytest.mark.parametrize("field", ["panel_length", "panel_width", "panel_wattage"])
    def test_pv_config_must_be_positive(self, field: str) -> None:
        values = {"panel_length": 2.0, "panel_width": 1.0, "panel_wattage": 400.0}
        values[field] = 0
        with pytest.raises(InvalidItemData):
            PVConfig(**values)

    def test_task_needs_title(self) -> None:
        with pytest.raises(InvalidItemData):
            Task("t1", "   ")
