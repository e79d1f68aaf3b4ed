"""Markup classification enums and item references."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CableType(str, Enum):
    """Voltage class of a drawn cable route."""

    MV = "mv"
    LV = "lv"
    DC = "dc"


class ContainmentType(str, Enum):
    """Physical cable-support systems drawn as polylines."""

    TELKOM_BASKET = "telkom_basket"
    SECURITY_BASKET = "security_basket"
    CABLE_TRAY = "cable_tray"
    SLEEVES = "sleeves"
    POWERSKIRTING = "powerskirting"
    P2000_TRUNKING = "p2000_trunking"
    P8000_TRUNKING = "p8000_trunking"
    P9000_TRUNKING = "p9000_trunking"
    CONDUIT_20MM = "conduit_20mm"
    CONDUIT_25MM = "conduit_25mm"
    CONDUIT_32MM = "conduit_32mm"
    CONDUIT_40MM = "conduit_40mm"
    CONDUIT_50MM = "conduit_50mm"


class EquipmentCategory(str, Enum):
    """Grouping of equipment types used by the toolbar and the BOQ."""

    EQUIPMENT = "equipment"
    LIGHTING_SOCKETS = "lighting_sockets"
    OTHER_EQUIPMENT = "other_equipment"


class EquipmentType(str, Enum):
    """Catalog keys for placeable equipment symbols."""

    RMU = "rmu"
    SUBSTATION = "substation"
    MAIN_BOARD = "main_board"
    SUB_BOARD = "sub_board"
    DISTRIBUTION_BOARD = "distribution_board"
    GENERATOR = "generator"
    INVERTER = "inverter"
    DC_COMBINER = "dc_combiner"
    AC_DISCONNECT = "ac_disconnect"
    GENERAL_LIGHT_SWITCH = "general_light_switch"
    DIMMER_SWITCH = "dimmer_switch"
    TWO_WAY_LIGHT_SWITCH = "two_way_light_switch"
    MOTION_SENSOR = "motion_sensor"
    CEILING_LIGHT = "ceiling_light"
    LED_STRIP_LIGHT = "led_strip_light"
    RECESSED_LIGHT_600 = "recessed_light_600"
    RECESSED_LIGHT_1200 = "recessed_light_1200"
    FLOODLIGHT = "floodlight"
    POLE_LIGHT = "pole_light"
    SOCKET_16A = "socket_16a"
    SOCKET_DOUBLE = "socket_double"
    EMERGENCY_SOCKET = "emergency_socket"
    UPS_SOCKET = "ups_socket"
    DATA_SOCKET = "data_socket"
    THREE_PHASE_OUTLET = "three_phase_outlet"
    GEYSER_OUTLET = "geyser_outlet"
    MANHOLE = "manhole"
    TELEPHONE_BOARD = "telephone_board"
    BREAK_GLASS_UNIT = "break_glass_unit"
    DRAWBOX_50 = "drawbox_50"
    CCTV_CAMERA = "cctv_camera"


class DesignPurpose(str, Enum):
    """What a markup session is for; selects the enabled tools."""

    BUDGET_MARKUP = "budget_markup"
    LINE_SHOP_MEASUREMENTS = "line_shop_measurements"
    PV_DESIGN = "pv_design"


class ToolCategory(str, Enum):
    """Toolbar grouping of tools."""

    GENERAL = "general"
    DRAWING = "drawing"
    EQUIPMENT = "equipment"
    CONTAINMENT = "containment"
    LIGHTING_SOCKETS = "lighting_sockets"
    OTHER_EQUIPMENT = "other_equipment"
    PV = "pv"


class PanelOrientation(str, Enum):
    """Orientation of PV panels within an array.

    Attributes:
        PORTRAIT: Panel width runs across columns, length down rows.
        LANDSCAPE: Panel length runs across columns, width down rows.
    """

    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class RoofState(str, Enum):
    """Progress of a roof through PV design."""

    NO_MASK = "no_mask"
    MASK_DRAWN = "mask_drawn"
    DIRECTION_SET = "direction_set"
    ARRAYS_PLACED = "arrays_placed"


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class ItemType(str, Enum):
    """Kinds of items addressable through an ItemRef."""

    EQUIPMENT = "equipment"
    CABLE = "cable"
    CONTAINMENT = "containment"
    ZONE = "zone"
    ROOF = "roof"
    PV_ARRAY = "pv_array"
    WALKWAY = "walkway"
    TASK = "task"


@dataclass(frozen=True)
class ItemRef:
    """Lookup key into the store's indexed collections.

    This is a weak reference: it holds no pointer to the item, so a deleted
    item simply stops resolving.
    """

    item_type: ItemType
    item_id: str

    def __post_init__(self) -> None:
        if not self.item_id:
            raise ValueError("item_id must not be empty")

    def __str__(self) -> str:
        return f"{self.item_type.value}:{self.item_id}"
