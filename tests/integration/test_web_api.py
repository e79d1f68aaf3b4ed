"""Integration tests for the REST API."""

from typing import Any

import pytest
from fastapi.testclient import TestClient

from planmarkup.web import create_app

pytestmark = pytest.mark.integration

PANEL = {"panel_length": 5.0, "panel_width": 2.0, "panel_wattage": 400.0}
RECT_MASK = [[0, 0], [20, 0], [20, 10], [0, 10]]


@pytest.fixture
def client() -> TestClient:
    return TestClient(create_app())


def _place_request(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "mask_points": RECT_MASK,
        "meters_per_pixel": 1.0,
        "panel": PANEL,
        "origin": [0, 0],
        "orientation": "landscape",
        "azimuth": 180,
    }
    body.update(overrides)
    return body


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}


class TestQuantitiesEndpoint:
    def test_report(self, client: TestClient, document_data: dict[str, Any]) -> None:
        response = client.post("/api/v1/quantities", json={"document": document_data})
        assert response.status_code == 200
        data = response.json()
        assert data["equipment"] == {"distribution_board": 1, "socket_double": 2}
        assert data["total_zone_area_sqm"] == pytest.approx(25.0)

    def test_pv_report_lists_walkways(
        self, client: TestClient, pv_document_data: dict[str, Any]
    ) -> None:
        response = client.post("/api/v1/quantities", json={"document": pv_document_data})
        assert response.status_code == 200
        data = response.json()
        assert data["walkways"][0]["label"] == "Access"
        assert data["total_walkway_length_meters"] == pytest.approx(20.0)
        assert data["total_walkway_area_sqm"] == pytest.approx(11.0)

    def test_scale_override(self, client: TestClient, document_data: dict[str, Any]) -> None:
        response = client.post(
            "/api/v1/quantities",
            json={"document": document_data, "meters_per_pixel": 0.1},
        )
        lv = next(c for c in response.json()["cables"] if c["cable_type"] == "lv")
        assert lv["length_meters"] == pytest.approx(10.0)

    def test_invalid_document(self, client: TestClient, document_data: dict[str, Any]) -> None:
        document_data["cables"][0]["cable_type"] = "hv"
        response = client.post("/api/v1/quantities", json={"document": document_data})
        assert response.status_code == 422
        assert response.json()["error_type"] == "validation"

    def test_missing_scale(self, client: TestClient, document_data: dict[str, Any]) -> None:
        del document_data["scale"]
        response = client.post("/api/v1/quantities", json={"document": document_data})
        assert response.status_code == 422
        assert response.json()["error_type"] == "invalid_state"


class TestValidateEndpoint:
    def test_valid(self, client: TestClient, document_data: dict[str, Any]) -> None:
        response = client.post("/api/v1/validate", json={"document": document_data})
        assert response.status_code == 200
        assert response.json()["is_valid"] is True
        assert response.json()["exit_code"] == 0

    def test_warnings(self, client: TestClient, pv_document_data: dict[str, Any]) -> None:
        pv_document_data["view"] = {"active_tool": "zone"}
        response = client.post("/api/v1/validate", json={"document": pv_document_data})
        data = response.json()
        assert data["is_valid"] is True
        assert data["exit_code"] == 2
        assert data["warnings"][0]["path"] == "view.active_tool"

    def test_schema_errors_in_body(
        self, client: TestClient, document_data: dict[str, Any]
    ) -> None:
        document_data["schema_version"] = "9.0"
        response = client.post("/api/v1/validate", json={"document": document_data})
        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is False
        assert data["exit_code"] == 1
        assert data["errors"][0]["path"] == "schema_version"


class TestToolsEndpoint:
    def test_default_purpose(self, client: TestClient) -> None:
        response = client.get("/api/v1/tools")
        data = response.json()
        assert data["purpose"] == "budget_markup"
        assert "roof_mask" not in {tool["id"] for tool in data["tools"]}

    def test_pv_category(self, client: TestClient) -> None:
        response = client.get("/api/v1/tools", params={"purpose": "pv_design", "category": "pv"})
        assert response.status_code == 200
        ids = [tool["id"] for tool in response.json()["tools"]]
        assert ids == ["roof_mask", "roof_direction", "pv_array", "walkway"]

    def test_unknown_purpose(self, client: TestClient) -> None:
        response = client.get("/api/v1/tools", params={"purpose": "gardening"})
        assert response.status_code == 422


class TestPlaceArrayEndpoint:
    def test_landscape_grid(self, client: TestClient) -> None:
        response = client.post("/api/v1/pv/place-array", json=_place_request())
        assert response.status_code == 200
        data = response.json()
        assert (data["rows"], data["columns"]) == (5, 4)
        assert data["panel_count"] == 20
        assert data["total_wattage"] == pytest.approx(8000.0)
        assert len(data["panels"]) == 20
        assert len(data["panels"][0]["corners"]) == 4

    def test_direction_from_points(self, client: TestClient) -> None:
        body = _place_request(azimuth=None, high_point=[10, 1], low_point=[10, 9])
        response = client.post("/api/v1/pv/place-array", json=body)
        assert response.status_code == 200
        assert response.json()["azimuth"] == pytest.approx(0.0)

    def test_row_cap(self, client: TestClient) -> None:
        response = client.post("/api/v1/pv/place-array", json=_place_request(max_rows=2))
        assert response.json()["panel_count"] == 8

    def test_requires_direction(self, client: TestClient) -> None:
        response = client.post("/api/v1/pv/place-array", json=_place_request(azimuth=None))
        assert response.status_code == 422
        assert response.json()["error_type"] == "prerequisite_missing"

    def test_no_panel_fits(self, client: TestClient) -> None:
        response = client.post("/api/v1/pv/place-array", json=_place_request(origin=[50, 50]))
        assert response.status_code == 422
        assert response.json()["error_type"] == "no_viable_panel_position"

    def test_half_direction_pair_rejected(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/pv/place-array", json=_place_request(azimuth=None, high_point=[10, 1])
        )
        assert response.status_code == 422


class TestExportEndpoints:
    def test_formats(self, client: TestClient) -> None:
        response = client.get("/api/v1/export/formats")
        assert response.json() == {"formats": ["boq", "json"]}

    def test_boq(self, client: TestClient, document_data: dict[str, Any]) -> None:
        response = client.post("/api/v1/export/boq", json={"document": document_data})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "EQUIPMENT" in response.text

    def test_json(self, client: TestClient, pv_document_data: dict[str, Any]) -> None:
        response = client.post("/api/v1/export/json", json={"document": pv_document_data})
        assert response.status_code == 200
        data = response.json()
        assert data["schema_version"] == "1.0"
        assert data["pv_arrays"][0]["id"] == "array-1"

    def test_unknown_format(self, client: TestClient, document_data: dict[str, Any]) -> None:
        response = client.post("/api/v1/export/pdf", json={"document": document_data})
        assert response.status_code == 400
        assert response.json()["details"]["available"] == ["boq", "json"]
