"""Unit tests for MarkupSession."""

from typing import Any

import pytest

from planmarkup.application import MarkupSession
from planmarkup.application.config import load_document_from_dict
from planmarkup.domain.value_objects import CableType, DesignPurpose, ItemRef, ItemType


def _session(data: dict[str, Any]) -> MarkupSession:
    return MarkupSession.from_document(load_document_from_dict(data))


class TestOpenSession:
    def test_from_document(self, document_data: dict[str, Any]) -> None:
        session = _session(document_data)
        assert session.purpose == DesignPurpose.BUDGET_MARKUP
        assert session.plan is not None
        assert session.plan.uri == "uploads/site-plan.png"
        assert len(session.store.snapshot.equipment) == 3
        assert session.tools.active_tool == "select"

    def test_settings_applied(self, document_data: dict[str, Any]) -> None:
        document_data["settings"] = {"history_limit": 5}
        session = _session(document_data)
        assert session.store.history_limit == 5

    def test_restores_selection(self, document_data: dict[str, Any]) -> None:
        document_data["view"]["selection"] = {"item_type": "cable", "item_id": "cable-2"}
        session = _session(document_data)
        assert session.tools.selection == ItemRef(ItemType.CABLE, "cable-2")

    def test_missing_selection_dropped(self, document_data: dict[str, Any]) -> None:
        document_data["view"]["selection"] = {"item_type": "cable", "item_id": "gone"}
        assert _session(document_data).tools.selection is None

    def test_unavailable_tool_not_restored(self, document_data: dict[str, Any]) -> None:
        document_data["view"]["active_tool"] = "pv_array"
        assert _session(document_data).tools.active_tool == "select"


class TestSessionState:
    def test_state_round_trip(self, document_data: dict[str, Any]) -> None:
        session = _session(document_data)
        reopened = MarkupSession.from_state(session.state())
        assert reopened.state() == session.state()

    def test_to_document_reflects_edits(self, document_data: dict[str, Any]) -> None:
        session = _session(document_data)
        session.store.add_cable_route(CableType.LV, [(0, 0), (0, 20)])
        document = session.to_document()
        assert len(document.cables) == 3
        assert document.cables[-1].length_meters == pytest.approx(1.0)

    def test_quantities(self, document_data: dict[str, Any]) -> None:
        session = _session(document_data)
        report = session.quantities()
        assert report.total_equipment == 3
        assert report.cable_length(CableType.LV) == pytest.approx(5.0)
        assert session.quantities(scale=0.1).cable_length(CableType.LV) == pytest.approx(10.0)

    def test_available_tools(self, pv_document_data: dict[str, Any]) -> None:
        session = _session(pv_document_data)
        tool_ids = {tool.id for tool in session.available_tools()}
        assert {"roof_mask", "roof_direction", "pv_array"} <= tool_ids

    def test_empty_session(self) -> None:
        session = MarkupSession()
        assert session.state().plan is None
        assert session.quantities().total_equipment == 0
