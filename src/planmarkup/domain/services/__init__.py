"""Domain services for PV layout and quantity calculation."""

from .pv_layout import (
    PanelGrid,
    infer_direction,
    panel_footprint,
    place_array,
    roof_state,
    with_direction,
)
from .quantities import (
    ArraySummary,
    CableTotal,
    ContainmentTotal,
    QuantityCalculator,
    QuantityReport,
    RoofSummary,
    ZoneArea,
)

__all__ = [
    "ArraySummary",
    "CableTotal",
    "ContainmentTotal",
    "PanelGrid",
    "QuantityCalculator",
    "QuantityReport",
    "RoofSummary",
    "ZoneArea",
    "infer_direction",
    "panel_footprint",
    "place_array",
    "roof_state",
    "with_direction",
]
