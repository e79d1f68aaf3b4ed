"""JSON exporter for the full floor-plan document."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

from planmarkup.application.config.adapter import state_to_document
from planmarkup.infrastructure.exporters.base import ExporterRegistry

if TYPE_CHECKING:
    from planmarkup.application.config.schema import EngineSettings
    from planmarkup.domain.state import FloorPlanState


logger = logging.getLogger(__name__)


@ExporterRegistry.register("json")  # type: ignore[arg-type]
class JsonStateExporter:
    """Serializes a FloorPlanState as a versioned FloorPlanDocument.

    The output can be loaded back with ``load_document``.
    """

    format_name: ClassVar[str] = "json"
    file_extension: ClassVar[str] = "json"

    def __init__(self, settings: EngineSettings | None = None, indent: int = 2) -> None:
        self.settings = settings
        self.indent = indent

    def export(self, state: FloorPlanState, path: Path) -> None:
        path.write_text(self.export_string(state), encoding="utf-8")
        logger.info(f"Exported floor plan to {path}")

    def export_string(self, state: FloorPlanState) -> str:
        document = state_to_document(state, settings=self.settings)
        return document.model_dump_json(indent=self.indent)
