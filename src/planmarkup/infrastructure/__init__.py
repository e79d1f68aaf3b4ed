"""Infrastructure layer - formatters and exporters."""

from .exporters import (
    BoqExporter,
    ExportManager,
    ExporterRegistry,
    JsonStateExporter,
)
from .formatters import PVArrayFormatter, QuantityReportFormatter, ToolCatalogFormatter

__all__ = [
    "BoqExporter",
    "ExportManager",
    "ExporterRegistry",
    "JsonStateExporter",
    "PVArrayFormatter",
    "QuantityReportFormatter",
    "ToolCatalogFormatter",
]
