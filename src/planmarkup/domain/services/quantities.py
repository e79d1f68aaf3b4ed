"""Quantity calculation for bills of quantities."""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..catalog import EQUIPMENT_CATEGORIES
from ..entities import WALKWAY_WIDTH_METERS, cable_lengths
from ..errors import DegenerateGeometry, InvariantViolation, PrerequisiteMissing
from ..geometry import polygon_area, polyline_length
from ..state import MarkupSnapshot
from ..value_objects import (
    CableType,
    ContainmentType,
    EquipmentCategory,
    EquipmentType,
    Scale,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ArraySummary",
    "CableTotal",
    "ContainmentTotal",
    "QuantityCalculator",
    "QuantityReport",
    "RoofSummary",
    "WalkwayLength",
    "ZoneArea",
]


@dataclass(frozen=True)
class CableTotal:
    """Aggregated length of all routes of one cable type."""

    cable_type: CableType
    route_count: int
    path_length_meters: float
    length_meters: float
    terminations: int


@dataclass(frozen=True)
class ContainmentTotal:
    containment_type: ContainmentType
    size: str
    run_count: int
    length_meters: float


@dataclass(frozen=True)
class ZoneArea:
    zone_id: str
    label: str | None
    area_sqm: float


@dataclass(frozen=True)
class RoofSummary:
    roof_id: str
    label: str | None
    area_sqm: float
    pitch: float | None
    azimuth: float | None
    array_count: int


@dataclass(frozen=True)
class ArraySummary:
    array_id: str
    roof_id: str
    rows: int
    columns: int
    panel_count: int
    wattage: float


@dataclass(frozen=True)
class WalkwayLength:
    walkway_id: str
    label: str | None
    length_meters: float
    area_sqm: float


@dataclass(frozen=True)
class QuantityReport:
    """Everything the BOQ needs from one snapshot.

    All sequences are sorted, so two reports computed from the same snapshot
    and scale compare equal.
    """

    equipment_counts: tuple[tuple[EquipmentType, int], ...]
    category_counts: tuple[tuple[EquipmentCategory, int], ...]
    cables: tuple[CableTotal, ...]
    containment: tuple[ContainmentTotal, ...]
    zones: tuple[ZoneArea, ...]
    total_zone_area_sqm: float
    roofs: tuple[RoofSummary, ...]
    arrays: tuple[ArraySummary, ...]
    total_panels: int
    total_wattage: float
    walkways: tuple[WalkwayLength, ...] = ()
    total_walkway_length_meters: float = 0.0
    total_walkway_area_sqm: float = 0.0

    @property
    def total_equipment(self) -> int:
        return sum(count for _, count in self.equipment_counts)

    def cable_length(self, cable_type: CableType) -> float:
        """Total length in meters for one cable type (0 if none drawn)."""
        for total in self.cables:
            if total.cable_type == cable_type:
                return total.length_meters
        return 0.0

    def to_dict(self) -> dict[str, Any]:
        """Plain JSON-compatible representation."""
        return {
            "equipment": {t.value: n for t, n in self.equipment_counts},
            "equipment_by_category": {c.value: n for c, n in self.category_counts},
            "cables": [
                {
                    "cable_type": c.cable_type.value,
                    "route_count": c.route_count,
                    "path_length_meters": c.path_length_meters,
                    "length_meters": c.length_meters,
                    "terminations": c.terminations,
                }
                for c in self.cables
            ],
            "containment": [
                {
                    "containment_type": c.containment_type.value,
                    "size": c.size,
                    "run_count": c.run_count,
                    "length_meters": c.length_meters,
                }
                for c in self.containment
            ],
            "zones": [
                {"zone_id": z.zone_id, "label": z.label, "area_sqm": z.area_sqm}
                for z in self.zones
            ],
            "total_zone_area_sqm": self.total_zone_area_sqm,
            "roofs": [
                {
                    "roof_id": r.roof_id,
                    "label": r.label,
                    "area_sqm": r.area_sqm,
                    "pitch": r.pitch,
                    "azimuth": r.azimuth,
                    "array_count": r.array_count,
                }
                for r in self.roofs
            ],
            "pv_arrays": [
                {
                    "array_id": a.array_id,
                    "roof_id": a.roof_id,
                    "rows": a.rows,
                    "columns": a.columns,
                    "panel_count": a.panel_count,
                    "wattage": a.wattage,
                }
                for a in self.arrays
            ],
            "total_panels": self.total_panels,
            "total_wattage": self.total_wattage,
            "walkways": [
                {
                    "walkway_id": w.walkway_id,
                    "label": w.label,
                    "length_meters": w.length_meters,
                    "area_sqm": w.area_sqm,
                }
                for w in self.walkways
            ],
            "total_walkway_length_meters": self.total_walkway_length_meters,
            "total_walkway_area_sqm": self.total_walkway_area_sqm,
        }


def _checked(measure: Callable[..., Any], what: str, item_id: str, *args: Any) -> Any:
    # Stored items were validated on the way in; bad geometry here is a store bug
    try:
        return measure(*args)
    except DegenerateGeometry as exc:
        raise InvariantViolation(f"Stored {what} {item_id} is degenerate: {exc}") from exc


class QuantityCalculator:
    """Derives lengths, areas, counts and wattage from a markup snapshot.

    The calculation is a pure function of its inputs. Lengths and areas are
    recomputed from the stored points and the given scale rather than read
    from the cached values on the entities.
    """

    def calculate(
        self,
        snapshot: MarkupSnapshot,
        scale: Scale | float | None = None,
    ) -> QuantityReport:
        """Build a quantity report.

        Args:
            snapshot: Markup state to aggregate.
            scale: Scale to measure with. Defaults to the snapshot's scale.

        Returns:
            QuantityReport with deterministic ordering.

        Raises:
            PrerequisiteMissing: If measured items exist but no scale is known.
            InvariantViolation: If stored geometry is degenerate.
        """
        scale = scale if scale is not None else snapshot.scale
        measured = (
            snapshot.cables
            or snapshot.containment
            or snapshot.zones
            or snapshot.roofs
            or snapshot.walkways
        )
        if scale is None and measured:
            raise PrerequisiteMissing("A scale is required to compute quantities")

        logger.debug(f"Calculating quantities for {snapshot.item_count} items")
        equipment_counts = Counter(item.type for item in snapshot.equipment)
        category_counts = Counter(EQUIPMENT_CATEGORIES[item.type] for item in snapshot.equipment)

        zones = tuple(
            ZoneArea(
                zone_id=zone.id,
                label=zone.label,
                area_sqm=_checked(polygon_area, "zone", zone.id, zone.points, scale),
            )
            for zone in sorted(snapshot.zones, key=lambda z: z.id)
        )
        arrays = self._arrays(snapshot)
        walkways = self._walkways(snapshot, scale)

        return QuantityReport(
            equipment_counts=tuple(
                sorted(equipment_counts.items(), key=lambda kv: kv[0].value)
            ),
            category_counts=tuple(
                sorted(category_counts.items(), key=lambda kv: kv[0].value)
            ),
            cables=self._cables(snapshot, scale),
            containment=self._containment(snapshot, scale),
            zones=zones,
            total_zone_area_sqm=sum(z.area_sqm for z in zones),
            roofs=self._roofs(snapshot, scale),
            arrays=arrays,
            total_panels=sum(a.panel_count for a in arrays),
            total_wattage=sum(a.wattage for a in arrays),
            walkways=walkways,
            total_walkway_length_meters=sum(w.length_meters for w in walkways),
            total_walkway_area_sqm=sum(w.area_sqm for w in walkways),
        )

    def _cables(
        self, snapshot: MarkupSnapshot, scale: Scale | float | None
    ) -> tuple[CableTotal, ...]:
        grouped: dict[CableType, list[tuple[float, float, int]]] = defaultdict(list)
        for cable in sorted(snapshot.cables, key=lambda c: c.id):
            path, total = _checked(
                cable_lengths,
                "cable",
                cable.id,
                cable.points,
                scale,
                cable.cable_type,
                cable.start_height,
                cable.end_height,
                cable.cable_spec,
            )
            grouped[cable.cable_type].append((path, total, cable.termination_count))
        return tuple(
            CableTotal(
                cable_type=cable_type,
                route_count=len(rows),
                path_length_meters=sum(r[0] for r in rows),
                length_meters=sum(r[1] for r in rows),
                terminations=sum(r[2] for r in rows),
            )
            for cable_type, rows in sorted(grouped.items(), key=lambda kv: kv[0].value)
        )

    def _containment(
        self, snapshot: MarkupSnapshot, scale: Scale | float | None
    ) -> tuple[ContainmentTotal, ...]:
        grouped: dict[tuple[ContainmentType, str], list[float]] = defaultdict(list)
        for item in sorted(snapshot.containment, key=lambda c: c.id):
            length = _checked(polyline_length, "containment", item.id, item.points, scale)
            grouped[(item.containment_type, item.size)].append(length)
        return tuple(
            ContainmentTotal(
                containment_type=key[0],
                size=key[1],
                run_count=len(lengths),
                length_meters=sum(lengths),
            )
            for key, lengths in sorted(
                grouped.items(), key=lambda kv: (kv[0][0].value, kv[0][1])
            )
        )

    def _roofs(
        self, snapshot: MarkupSnapshot, scale: Scale | float | None
    ) -> tuple[RoofSummary, ...]:
        return tuple(
            RoofSummary(
                roof_id=roof.id,
                label=roof.label,
                area_sqm=_checked(polygon_area, "roof", roof.id, roof.mask_points, scale),
                pitch=roof.pitch,
                azimuth=roof.azimuth,
                array_count=len(snapshot.arrays_on(roof.id)),
            )
            for roof in sorted(snapshot.roofs, key=lambda r: r.id)
        )

    def _walkways(
        self, snapshot: MarkupSnapshot, scale: Scale | float | None
    ) -> tuple[WalkwayLength, ...]:
        summaries = []
        for walkway in sorted(snapshot.walkways, key=lambda w: w.id):
            length = _checked(polyline_length, "walkway", walkway.id, walkway.points, scale)
            summaries.append(
                WalkwayLength(
                    walkway_id=walkway.id,
                    label=walkway.label,
                    length_meters=length,
                    area_sqm=length * WALKWAY_WIDTH_METERS,
                )
            )
        return tuple(summaries)

    def _arrays(self, snapshot: MarkupSnapshot) -> tuple[ArraySummary, ...]:
        roof_ids = {roof.id for roof in snapshot.roofs}
        wattage = snapshot.pv_config.panel_wattage if snapshot.pv_config else 0.0
        summaries = []
        for array in sorted(snapshot.arrays, key=lambda a: a.id):
            if array.roof_id not in roof_ids:
                raise InvariantViolation(
                    f"PV array {array.id} references missing roof {array.roof_id}"
                )
            summaries.append(
                ArraySummary(
                    array_id=array.id,
                    roof_id=array.roof_id,
                    rows=array.rows,
                    columns=array.columns,
                    panel_count=array.panel_count,
                    wattage=array.panel_count * wattage,
                )
            )
        return tuple(summaries)
