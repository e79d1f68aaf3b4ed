"""Bill of Quantities (BOQ) exporter for marked-up floor plans.

Output formats: text, csv, json.
"""

from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from planmarkup.domain.entities import WALKWAY_WIDTH_METERS
from planmarkup.domain.services.quantities import QuantityCalculator, QuantityReport
from planmarkup.infrastructure.exporters.base import ExporterRegistry
from planmarkup.infrastructure.formatters import QuantityReportFormatter

if TYPE_CHECKING:
    from planmarkup.domain.state import FloorPlanState


logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("text", "csv", "json")

CSV_HEADER = ["Section", "Item", "Size", "Quantity", "Unit"]


@ExporterRegistry.register("boq")  # type: ignore[arg-type]
class BoqExporter:
    """Writes the quantity report of a floor plan.

    Attributes:
        output_format: One of "text", "csv" or "json".
        precision: Decimal places for lengths and areas in CSV output.
    """

    format_name: ClassVar[str] = "boq"

    def __init__(self, output_format: str = "text", precision: int = 2) -> None:
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown BOQ format '{output_format}'. "
                f"Expected one of: {', '.join(OUTPUT_FORMATS)}"
            )
        self.output_format = output_format
        self.precision = precision
        self._calculator = QuantityCalculator()

    @property
    def file_extension(self) -> str:
        return {"text": "txt", "csv": "csv", "json": "json"}[self.output_format]

    def generate(self, state: FloorPlanState) -> QuantityReport:
        return self._calculator.calculate(state.snapshot)

    def export(self, state: FloorPlanState, path: Path) -> None:
        content = self.export_string(state)
        path.write_text(content, encoding="utf-8")
        logger.info(f"Exported BOQ to {path}")

    def export_string(self, state: FloorPlanState) -> str:
        return self.format_report(self.generate(state))

    def format_report(self, report: QuantityReport) -> str:
        """Format an already computed report in the configured format."""
        if self.output_format == "csv":
            return self.format_csv(report)
        elif self.output_format == "json":
            return self.format_json(report)
        else:
            return self.format_text(report)

    def format_text(self, report: QuantityReport) -> str:
        return QuantityReportFormatter().format(report) or "No quantities."

    def format_json(self, report: QuantityReport) -> str:
        return json.dumps(report.to_dict(), indent=2)

    def format_csv(self, report: QuantityReport) -> str:
        """Format the report as one CSV row per BOQ line."""
        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(CSV_HEADER)

        def amount(value: float) -> str:
            return f"{value:.{self.precision}f}"

        for equipment_type, count in report.equipment_counts:
            writer.writerow(["equipment", equipment_type.value, "", count, "ea"])
        for cable in report.cables:
            writer.writerow(
                ["cable", cable.cable_type.value, "", amount(cable.length_meters), "m"]
            )
            if cable.terminations:
                writer.writerow(
                    ["terminations", cable.cable_type.value, "", cable.terminations, "ea"]
                )
        for item in report.containment:
            writer.writerow(
                [
                    "containment",
                    item.containment_type.value,
                    item.size,
                    amount(item.length_meters),
                    "m",
                ]
            )
        for zone in report.zones:
            writer.writerow(["zone", zone.label or zone.zone_id, "", amount(zone.area_sqm), "m2"])
        for array in report.arrays:
            writer.writerow(
                [
                    "pv_array",
                    array.array_id,
                    f"{array.rows}x{array.columns}",
                    array.panel_count,
                    "panels",
                ]
            )
        if report.arrays:
            writer.writerow(["pv_total", "wattage", "", amount(report.total_wattage), "W"])
        for walkway in report.walkways:
            writer.writerow(
                [
                    "walkway",
                    walkway.label or walkway.walkway_id,
                    f"{WALKWAY_WIDTH_METERS * 1000:.0f}mm",
                    amount(walkway.length_meters),
                    "m",
                ]
            )
        if report.walkways:
            writer.writerow(
                ["walkway_total", "area", "", amount(report.total_walkway_area_sqm), "m2"]
            )

        return output.getvalue()
