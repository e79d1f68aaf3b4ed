"""Text formatters for quantity reports and the tool catalog."""

from __future__ import annotations

from collections.abc import Sequence

from planmarkup.domain.catalog import ToolDefinition
from planmarkup.domain.entities import PVArray, PVConfig
from planmarkup.domain.services.quantities import QuantityReport


class QuantityReportFormatter:
    """Formats a quantity report as plain-text tables."""

    def format(self, report: QuantityReport) -> str:
        sections = [
            self._format_equipment(report),
            self._format_cables(report),
            self._format_containment(report),
            self._format_zones(report),
            self._format_pv(report),
        ]
        return "\n\n".join(s for s in sections if s)

    def _format_equipment(self, report: QuantityReport) -> str:
        if not report.equipment_counts:
            return ""
        lines = [
            "EQUIPMENT",
            "=" * 50,
            f"{'Type':<36}{'Qty':>14}",
            "-" * 50,
        ]
        for equipment_type, count in report.equipment_counts:
            lines.append(f"{equipment_type.value:<36}{count:>14}")
        lines.append("-" * 50)
        lines.append(f"{'Total':<36}{report.total_equipment:>14}")
        return "\n".join(lines)

    def _format_cables(self, report: QuantityReport) -> str:
        if not report.cables:
            return ""
        lines = [
            "CABLES",
            "=" * 50,
            f"{'Type':<8}{'Routes':>8}{'Path (m)':>12}{'Total (m)':>12}{'Terms':>10}",
            "-" * 50,
        ]
        for c in report.cables:
            lines.append(
                f"{c.cable_type.value.upper():<8}{c.route_count:>8}"
                f"{c.path_length_meters:>12.2f}{c.length_meters:>12.2f}{c.terminations:>10}"
            )
        return "\n".join(lines)

    def _format_containment(self, report: QuantityReport) -> str:
        if not report.containment:
            return ""
        lines = [
            "CONTAINMENT",
            "=" * 50,
            f"{'Type':<20}{'Size':<14}{'Runs':>6}{'Length (m)':>10}",
            "-" * 50,
        ]
        for c in report.containment:
            lines.append(
                f"{c.containment_type.value:<20}{c.size:<14}{c.run_count:>6}{c.length_meters:>10.2f}"
            )
        return "\n".join(lines)

    def _format_zones(self, report: QuantityReport) -> str:
        if not report.zones:
            return ""
        lines = [
            "ZONES",
            "=" * 50,
            f"{'Zone':<36}{'Area (m2)':>14}",
            "-" * 50,
        ]
        for z in report.zones:
            lines.append(f"{(z.label or z.zone_id):<36}{z.area_sqm:>14.2f}")
        lines.append("-" * 50)
        lines.append(f"{'Total':<36}{report.total_zone_area_sqm:>14.2f}")
        return "\n".join(lines)

    def _format_pv(self, report: QuantityReport) -> str:
        if not report.roofs and not report.walkways:
            return ""
        lines = [
            "PV SYSTEM",
            "=" * 50,
        ]
        for roof in report.roofs:
            direction = (
                f"pitch {roof.pitch or 0:g} deg, azimuth {roof.azimuth:g} deg"
                if roof.azimuth is not None
                else "no direction"
            )
            lines.append(f"Roof {roof.label or roof.roof_id}: {roof.area_sqm:.2f} m2, {direction}")
        for a in report.arrays:
            lines.append(
                f"  Array {a.array_id} on {a.roof_id}: {a.rows} x {a.columns} = "
                f"{a.panel_count} panels, {a.wattage:.0f} W"
            )
        lines.append("-" * 50)
        lines.append(f"Total: {report.total_panels} panels, {report.total_wattage:.0f} W")
        for w in report.walkways:
            lines.append(
                f"  Walkway {w.label or w.walkway_id}: "
                f"{w.length_meters:.2f} m, {w.area_sqm:.2f} m2"
            )
        if report.walkways:
            lines.append(
                f"Walkways: {report.total_walkway_length_meters:.2f} m, "
                f"{report.total_walkway_area_sqm:.2f} m2"
            )
        return "\n".join(lines)


class PVArrayFormatter:
    """Short summary of a placed PV array."""

    def format(self, array: PVArray, config: PVConfig) -> str:
        return "\n".join(
            [
                f"Array: {array.id} on roof {array.roof_id}",
                f"Grid: {array.rows} rows x {array.columns} columns ({array.orientation.value})",
                f"Panels: {array.panel_count}",
                f"Wattage: {array.panel_count * config.panel_wattage:.0f} W",
            ]
        )


class ToolCatalogFormatter:
    """Formats tool definitions as a table."""

    def format(self, tools: Sequence[ToolDefinition]) -> str:
        if not tools:
            return "No tools available."
        lines = [
            f"{'Id':<28}{'Name':<28}{'Category':<18}",
            "-" * 74,
        ]
        for tool in tools:
            lines.append(f"{tool.id:<28}{tool.name:<28}{tool.category.value:<18}")
        return "\n".join(lines)
