"""Exporter protocol, format registry and batch export to a directory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

if TYPE_CHECKING:
    from planmarkup.domain.state import FloorPlanState


logger = logging.getLogger(__name__)


@runtime_checkable
class Exporter(Protocol):
    """Anything that can render a FloorPlanState to a file.

    Attributes:
        format_name: Key the exporter is registered under (e.g. "boq").
        file_extension: Extension used by ExportManager, without the dot.
    """

    format_name: ClassVar[str]

    @property
    def file_extension(self) -> str: ...

    def export(self, state: FloorPlanState, path: Path) -> None: ...

    def export_string(self, state: FloorPlanState) -> str: ...


class ExporterRegistry:
    """Format name to exporter class lookup.

    Exporter modules register on import:

        @ExporterRegistry.register("boq")
        class BoqExporter:
            ...
    """

    _formats: ClassVar[dict[str, type[Exporter]]] = {}

    @classmethod
    def register(cls, format_name: str) -> Any:
        def decorator(exporter_class: type[Exporter]) -> type[Exporter]:
            previous = cls._formats.get(format_name)
            if previous is not None and previous is not exporter_class:
                logger.warning(
                    f"{exporter_class.__name__} replaces {previous.__name__} "
                    f"for format '{format_name}'"
                )
            cls._formats[format_name] = exporter_class
            logger.debug(f"Format '{format_name}' -> {exporter_class.__name__}")
            return exporter_class

        return decorator

    @classmethod
    def get(cls, format_name: str) -> type[Exporter]:
        """Exporter class for ``format_name``.

        Raises:
            KeyError: If nothing is registered under that name.
        """
        try:
            return cls._formats[format_name]
        except KeyError:
            known = ", ".join(cls.available_formats()) or "none"
            raise KeyError(
                f"Unknown export format '{format_name}'. Available formats: {known}"
            ) from None

    @classmethod
    def create(cls, format_name: str, **options: Any) -> Exporter:
        """Instantiate the exporter for ``format_name`` with ``options``."""
        return cls.get(format_name)(**options)

    @classmethod
    def available_formats(cls) -> list[str]:
        return sorted(cls._formats)

    @classmethod
    def is_registered(cls, format_name: str) -> bool:
        return format_name in cls._formats


class ExportManager:
    """Writes one file per requested format into ``output_dir``.

    Files are named ``{project_name}_{format}.{extension}``.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    def target_path(self, exporter: Exporter, project_name: str) -> Path:
        return self.output_dir / f"{project_name}_{exporter.format_name}.{exporter.file_extension}"

    def export_all(
        self,
        formats: list[str],
        state: FloorPlanState,
        project_name: str = "floorplan",
        options: dict[str, dict[str, Any]] | None = None,
    ) -> dict[str, Path]:
        """Export ``state`` once per format.

        Args:
            formats: Registered format names, written in the given order.
            state: Floor plan to export.
            project_name: Prefix for every file name.
            options: Constructor keyword arguments keyed by format name.

        Returns:
            Format name to written path.

        Raises:
            KeyError: If a format is unknown. Nothing is written in that case.
            OSError: If the directory or a file cannot be written.
        """
        options = options or {}
        exporters = [
            ExporterRegistry.create(name, **options.get(name, {})) for name in formats
        ]
        self.output_dir.mkdir(parents=True, exist_ok=True)

        written: dict[str, Path] = {}
        for exporter in exporters:
            path = self.target_path(exporter, project_name)
            exporter.export(state, path)
            logger.info(f"Wrote {exporter.format_name} export to {path}")
            written[exporter.format_name] = path
        return written
