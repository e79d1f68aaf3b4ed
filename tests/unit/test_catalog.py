"""Unit tests for the static tool and equipment catalogs."""

import pytest

from planmarkup.domain import catalog
from planmarkup.domain.value_objects import (
    ContainmentType,
    DesignPurpose,
    EquipmentType,
    ToolCategory,
)


class TestToolCatalog:
    """Tests for filtering tools by purpose and category."""

    def test_tool_ids_are_unique(self) -> None:
        ids = [tool.id for tool in catalog.TOOL_CATALOG]
        assert len(ids) == len(set(ids))

    def test_every_equipment_type_has_a_tool(self) -> None:
        for equipment_type in EquipmentType:
            assert catalog.get_tool(catalog.equipment_tool_id(equipment_type)) is not None

    def test_general_tools_everywhere(self) -> None:
        for purpose in DesignPurpose:
            ids = {tool.id for tool in catalog.tools_for(purpose, ToolCategory.GENERAL)}
            assert ids == {catalog.SELECT, catalog.PAN, catalog.SCALE}

    def test_pv_tools_only_for_pv_design(self) -> None:
        assert catalog.tools_for(DesignPurpose.BUDGET_MARKUP, ToolCategory.PV) == ()
        pv_ids = {t.id for t in catalog.tools_for(DesignPurpose.PV_DESIGN, ToolCategory.PV)}
        assert pv_ids == {
            catalog.ROOF_MASK,
            catalog.ROOF_DIRECTION,
            catalog.PV_ARRAY,
            catalog.WALKWAY,
        }

    def test_pv_design_has_dc_line_but_no_mv_line(self) -> None:
        ids = {t.id for t in catalog.tools_for(DesignPurpose.PV_DESIGN)}
        assert catalog.LINE_DC in ids
        assert catalog.LINE_MV not in ids
        assert catalog.LINE_LV in ids

    def test_pv_equipment_enabled_for_pv_design(self) -> None:
        ids = {t.id for t in catalog.tools_for(DesignPurpose.PV_DESIGN, ToolCategory.EQUIPMENT)}
        assert ids == {catalog.equipment_tool_id(t) for t in catalog.PV_EQUIPMENT}

    def test_catalog_order_preserved(self) -> None:
        tools = catalog.tools_for(DesignPurpose.BUDGET_MARKUP)
        assert tools[0].id == catalog.SELECT

    def test_unknown_tool(self) -> None:
        assert catalog.get_tool("laser_cannon") is None


class TestContainmentSizes:
    def test_tray_sizes(self) -> None:
        assert "450mm" in catalog.containment_sizes(ContainmentType.CABLE_TRAY)
        assert catalog.default_containment_size(ContainmentType.CABLE_TRAY) is None

    def test_fixed_size_types(self) -> None:
        assert catalog.containment_sizes(ContainmentType.CONDUIT_25MM) == ("conduit_25mm",)
        assert catalog.default_containment_size(ContainmentType.SLEEVES) == "sleeves"


class TestZoneColors:
    @pytest.mark.parametrize("index", [0, 3, 7])
    def test_palette_cycles(self, index: int) -> None:
        assert catalog.zone_color(index) == catalog.zone_color(index + len(catalog.ZONE_COLORS))

    def test_every_equipment_type_categorized(self) -> None:
        assert set(catalog.EQUIPMENT_CATEGORIES) == set(EquipmentType)
