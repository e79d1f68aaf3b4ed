"""Exporter framework for marked-up floor plans.

Registered exporters:
- boq: Bill of Quantities as text, CSV or JSON
- json: Full floor-plan document (loadable with ``load_document``)

Usage:
    from planmarkup.infrastructure.exporters import ExporterRegistry

    boq_exporter = ExporterRegistry.create("boq", output_format="csv")
    print(boq_exporter.export_string(session.state()))
"""

from planmarkup.infrastructure.exporters.base import (
    ExportManager,
    Exporter,
    ExporterRegistry,
)
from planmarkup.infrastructure.exporters.boq import BoqExporter
from planmarkup.infrastructure.exporters.json_state import JsonStateExporter

__all__ = [
    "BoqExporter",
    "ExportManager",
    "Exporter",
    "ExporterRegistry",
    "JsonStateExporter",
]
