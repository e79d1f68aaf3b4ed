"""Pytest configuration and shared fixtures for markup tests."""

from __future__ import annotations

from typing import Any

import pytest

from planmarkup.domain.entities import PVConfig
from planmarkup.domain.store import MarkupStore
from planmarkup.domain.value_objects import Scale


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: tests that exercise the CLI or REST API end to end"
    )


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def store() -> MarkupStore:
    """Empty store with a 0.05 m/px scale (100 px = 5 m)."""
    store = MarkupStore()
    store.set_scale(Scale(0.05))
    return store


@pytest.fixture
def pv_store() -> MarkupStore:
    """Store at 1 m/px with a 5 m x 2 m, 400 W panel configuration."""
    store = MarkupStore()
    store.set_scale(Scale(1.0))
    store.set_pv_config(PVConfig(panel_length=5.0, panel_width=2.0, panel_wattage=400.0))
    return store


@pytest.fixture
def document_data() -> dict[str, Any]:
    """A complete, valid floor-plan document as parsed JSON."""
    return {
        "schema_version": "1.0",
        "plan": {"uri": "uploads/site-plan.png", "width_px": 2000, "height_px": 1400},
        "purpose": "budget_markup",
        "scale": {"meters_per_pixel": 0.05, "pixel_distance": 100, "real_distance": 5},
        "equipment": [
            {"id": "eq-1", "type": "distribution_board", "position": [10, 10], "label": "DB-1"},
            {"id": "eq-2", "type": "socket_double", "position": [40, 10]},
            {"id": "eq-3", "type": "socket_double", "position": [60, 10]},
        ],
        "cables": [
            {
                "id": "cable-1",
                "cable_type": "lv",
                "points": [[0, 0], [100, 0]],
                "from_label": "DB-1",
                "to_label": "SOC-1",
                "termination_count": 2,
            },
            {
                "id": "cable-2",
                "cable_type": "mv",
                "points": [[0, 0], [0, 200]],
                "start_height": 1.5,
                "end_height": 0.5,
            },
        ],
        "containment": [
            {
                "id": "cont-1",
                "containment_type": "cable_tray",
                "size": "300mm",
                "points": [[0, 0], [200, 0]],
            },
            {"id": "cont-2", "containment_type": "conduit_20mm", "points": [[0, 0], [0, 40]]},
        ],
        "zones": [
            {"id": "zone-1", "points": [[0, 0], [100, 0], [100, 100], [0, 100]], "label": "Shop 1"}
        ],
        "tasks": [
            {
                "id": "task-1",
                "title": "Confirm DB position",
                "item": {"item_type": "equipment", "item_id": "eq-1"},
            }
        ],
        "view": {"active_tool": "select", "transform": {"x": 0, "y": 0, "scale": 1}},
    }


@pytest.fixture
def pv_document_data() -> dict[str, Any]:
    """A PV design document with one roof, one placed array and a walkway."""
    return {
        "schema_version": "1.0",
        "purpose": "pv_design",
        "scale": {"meters_per_pixel": 1.0},
        "pv_config": {"panel_length": 5.0, "panel_width": 2.0, "panel_wattage": 400.0},
        "roofs": [
            {
                "id": "roof-1",
                "mask_points": [[0, 0], [20, 0], [20, 10], [0, 10]],
                "pitch": 0,
                "azimuth": 180,
                "label": "Main roof",
            }
        ],
        "pv_arrays": [
            {
                "id": "array-1",
                "roof_id": "roof-1",
                "rows": 5,
                "columns": 4,
                "orientation": "landscape",
                "position": [0, 0],
            }
        ],
        "walkways": [{"id": "walkway-1", "points": [[0, 12], [20, 12]], "label": "Access"}],
    }
