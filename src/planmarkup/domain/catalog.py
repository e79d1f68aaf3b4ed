"""Static catalogs: tools, equipment categories and containment sizes.

The tool catalog is a pure lookup table. Nothing in here talks to the store
or the interaction layer; the toolbar (or any other client) filters it by
design purpose and category.
"""

from __future__ import annotations

from dataclasses import dataclass

from .value_objects import (
    CableType,
    ContainmentType,
    DesignPurpose,
    EquipmentCategory,
    EquipmentType,
    ToolCategory,
)

ALL_PURPOSES = frozenset(DesignPurpose)
MARKUP_PURPOSES = frozenset(
    {DesignPurpose.BUDGET_MARKUP, DesignPurpose.LINE_SHOP_MEASUREMENTS}
)
PV = frozenset({DesignPurpose.PV_DESIGN})

# Tool ids for the non-equipment tools
SELECT = "select"
PAN = "pan"
SCALE = "scale"
LINE_MV = "line_mv"
LINE_LV = "line_lv"
LINE_DC = "line_dc"
ZONE = "zone"
ROOF_MASK = "roof_mask"
ROOF_DIRECTION = "roof_direction"
PV_ARRAY = "pv_array"
WALKWAY = "walkway"


@dataclass(frozen=True)
class ToolDefinition:
    """One toolbar entry.

    Attributes:
        id: Stable tool identifier.
        name: Display name.
        icon: Icon key understood by the client.
        category: Toolbar group.
        purposes: Design purposes in which the tool is enabled.
    """

    id: str
    name: str
    icon: str
    category: ToolCategory
    purposes: frozenset[DesignPurpose]


EQUIPMENT_CATEGORIES: dict[EquipmentType, EquipmentCategory] = {
    EquipmentType.RMU: EquipmentCategory.EQUIPMENT,
    EquipmentType.SUBSTATION: EquipmentCategory.EQUIPMENT,
    EquipmentType.MAIN_BOARD: EquipmentCategory.EQUIPMENT,
    EquipmentType.SUB_BOARD: EquipmentCategory.EQUIPMENT,
    EquipmentType.DISTRIBUTION_BOARD: EquipmentCategory.EQUIPMENT,
    EquipmentType.GENERATOR: EquipmentCategory.EQUIPMENT,
    EquipmentType.INVERTER: EquipmentCategory.EQUIPMENT,
    EquipmentType.DC_COMBINER: EquipmentCategory.EQUIPMENT,
    EquipmentType.AC_DISCONNECT: EquipmentCategory.EQUIPMENT,
    EquipmentType.GENERAL_LIGHT_SWITCH: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.DIMMER_SWITCH: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.TWO_WAY_LIGHT_SWITCH: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.MOTION_SENSOR: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.CEILING_LIGHT: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.LED_STRIP_LIGHT: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.RECESSED_LIGHT_600: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.RECESSED_LIGHT_1200: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.FLOODLIGHT: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.POLE_LIGHT: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.SOCKET_16A: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.SOCKET_DOUBLE: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.EMERGENCY_SOCKET: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.UPS_SOCKET: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.DATA_SOCKET: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.THREE_PHASE_OUTLET: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.GEYSER_OUTLET: EquipmentCategory.LIGHTING_SOCKETS,
    EquipmentType.MANHOLE: EquipmentCategory.OTHER_EQUIPMENT,
    EquipmentType.TELEPHONE_BOARD: EquipmentCategory.OTHER_EQUIPMENT,
    EquipmentType.BREAK_GLASS_UNIT: EquipmentCategory.OTHER_EQUIPMENT,
    EquipmentType.DRAWBOX_50: EquipmentCategory.OTHER_EQUIPMENT,
    EquipmentType.CCTV_CAMERA: EquipmentCategory.OTHER_EQUIPMENT,
}

# Equipment only offered while designing PV systems
PV_EQUIPMENT = frozenset(
    {EquipmentType.INVERTER, EquipmentType.DC_COMBINER, EquipmentType.AC_DISCONNECT}
)

# Baskets and trays take a size from this list; every other containment type
# has its size fixed by the type itself.
SIZED_CONTAINMENT: dict[ContainmentType, tuple[str, ...]] = {
    ContainmentType.TELKOM_BASKET: ("50mm", "100mm", "200mm", "300mm"),
    ContainmentType.SECURITY_BASKET: ("50mm", "100mm", "200mm", "300mm"),
    ContainmentType.CABLE_TRAY: (
        "100mm",
        "150mm",
        "200mm",
        "300mm",
        "450mm",
        "600mm",
    ),
}

LINE_TOOL_CABLE_TYPES: dict[str, CableType] = {
    LINE_MV: CableType.MV,
    LINE_LV: CableType.LV,
    LINE_DC: CableType.DC,
}

ZONE_COLORS = (
    "#EF4444",
    "#F97316",
    "#EAB308",
    "#22C55E",
    "#06B6D4",
    "#6366F1",
    "#A855F7",
    "#EC4899",
)


def containment_sizes(containment_type: ContainmentType) -> tuple[str, ...]:
    """Valid size values for a containment type."""
    return SIZED_CONTAINMENT.get(containment_type, (containment_type.value,))


def default_containment_size(containment_type: ContainmentType) -> str | None:
    """Size to use when none is given, or None if the user must choose."""
    if containment_type in SIZED_CONTAINMENT:
        return None
    return containment_type.value


def zone_color(index: int) -> str:
    return ZONE_COLORS[index % len(ZONE_COLORS)]


def containment_tool_id(containment_type: ContainmentType) -> str:
    return containment_type.value


def equipment_tool_id(equipment_type: EquipmentType) -> str:
    return f"place_{equipment_type.value}"


def _title(value: str) -> str:
    return value.replace("_", " ").title()


def _build_catalog() -> tuple[ToolDefinition, ...]:
    tools = [
        ToolDefinition(SELECT, "Select", "mouse-pointer", ToolCategory.GENERAL, ALL_PURPOSES),
        ToolDefinition(PAN, "Pan", "hand", ToolCategory.GENERAL, ALL_PURPOSES),
        ToolDefinition(SCALE, "Set Scale", "ruler", ToolCategory.GENERAL, ALL_PURPOSES),
        ToolDefinition(LINE_MV, "MV Line", "route", ToolCategory.DRAWING, MARKUP_PURPOSES),
        ToolDefinition(LINE_LV, "LV/AC Line", "route", ToolCategory.DRAWING, ALL_PURPOSES),
        ToolDefinition(LINE_DC, "DC Line", "route", ToolCategory.DRAWING, PV),
        ToolDefinition(ZONE, "Zone", "layers", ToolCategory.DRAWING, MARKUP_PURPOSES),
        ToolDefinition(ROOF_MASK, "Roof Mask", "square", ToolCategory.PV, PV),
        ToolDefinition(ROOF_DIRECTION, "Roof Direction", "compass", ToolCategory.PV, PV),
        ToolDefinition(PV_ARRAY, "PV Array", "layout-grid", ToolCategory.PV, PV),
        ToolDefinition(WALKWAY, "Walkway", "footprints", ToolCategory.PV, PV),
    ]
    for containment_type in ContainmentType:
        tools.append(
            ToolDefinition(
                containment_tool_id(containment_type),
                _title(containment_type.value),
                "server" if containment_type in SIZED_CONTAINMENT else "route",
                ToolCategory.CONTAINMENT,
                MARKUP_PURPOSES,
            )
        )
    for equipment_type, category in EQUIPMENT_CATEGORIES.items():
        purposes = ALL_PURPOSES if equipment_type in PV_EQUIPMENT else MARKUP_PURPOSES
        tools.append(
            ToolDefinition(
                equipment_tool_id(equipment_type),
                _title(equipment_type.value),
                equipment_type.value,
                ToolCategory(category.value),
                purposes,
            )
        )
    return tuple(tools)


TOOL_CATALOG: tuple[ToolDefinition, ...] = _build_catalog()

_TOOLS_BY_ID = {tool.id: tool for tool in TOOL_CATALOG}
CONTAINMENT_TOOLS = {containment_tool_id(t): t for t in ContainmentType}
EQUIPMENT_TOOLS = {equipment_tool_id(t): t for t in EquipmentType}


def get_tool(tool_id: str) -> ToolDefinition | None:
    """Look up a tool by id."""
    return _TOOLS_BY_ID.get(tool_id)


def tools_for(
    purpose: DesignPurpose,
    category: ToolCategory | None = None,
) -> tuple[ToolDefinition, ...]:
    """Tools enabled for a design purpose, optionally limited to one category.

    Catalog order is preserved.
    """
    return tuple(
        tool
        for tool in TOOL_CATALOG
        if purpose in tool.purposes and (category is None or tool.category == category)
    )
