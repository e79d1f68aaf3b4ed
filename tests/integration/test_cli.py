"""Integration tests for the planmarkup CLI.

These tests verify the commands work end-to-end against documents on disk,
including:
- validate exit codes (0 clean, 1 errors, 2 warnings)
- quantities in text, CSV and JSON
- tool listing per design purpose
- PV array placement with saving
- multi-format export
"""

import json
from pathlib import Path
from typing import Any, Callable

import pytest
from typer.testing import CliRunner

from planmarkup.application.config import load_document
from planmarkup.cli.main import app

pytestmark = pytest.mark.integration

WriteDocument = Callable[[dict[str, Any]], Path]


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def write_document(tmp_path: Path) -> WriteDocument:
    def write(data: dict[str, Any]) -> Path:
        path = tmp_path / "plan.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return write


class TestValidateCommand:
    """Tests for the validate command."""

    def test_valid_document(
        self, runner: CliRunner, write_document: WriteDocument, document_data: dict[str, Any]
    ) -> None:
        result = runner.invoke(app, ["validate", str(write_document(document_data))])
        assert result.exit_code == 0
        assert "Validation passed. Document is valid." in result.output

    def test_warnings_exit_code(
        self, runner: CliRunner, write_document: WriteDocument, document_data: dict[str, Any]
    ) -> None:
        """A task pointing at a deleted item is a warning, not an error."""
        document_data["tasks"][0]["item"]["item_id"] = "eq-gone"
        result = runner.invoke(app, ["validate", str(write_document(document_data))])
        assert result.exit_code == 2
        assert "tasks[0].item" in result.output
        assert "Validation passed with 1 warning(s)" in result.output

    def test_file_not_found(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["validate", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_invalid_json_syntax(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 1
        assert "Invalid JSON syntax" in result.output
        assert "Validation failed" in result.output

    def test_schema_error_shows_path(
        self, runner: CliRunner, write_document: WriteDocument, document_data: dict[str, Any]
    ) -> None:
        document_data["zones"][0]["points"] = [[0, 0], [1, 1]]
        result = runner.invoke(app, ["validate", str(write_document(document_data))])
        assert result.exit_code == 1
        assert "zones[0].points" in result.output

    def test_invalid_state_is_error(
        self, runner: CliRunner, write_document: WriteDocument, document_data: dict[str, Any]
    ) -> None:
        del document_data["scale"]
        result = runner.invoke(app, ["validate", str(write_document(document_data))])
        assert result.exit_code == 1
        assert "Validation failed: 1 error(s)" in result.output


class TestQuantitiesCommand:
    def test_text_report(
        self, runner: CliRunner, write_document: WriteDocument, document_data: dict[str, Any]
    ) -> None:
        result = runner.invoke(app, ["quantities", str(write_document(document_data))])
        assert result.exit_code == 0
        assert "EQUIPMENT" in result.output
        assert "Shop 1" in result.output

    def test_csv_report(
        self, runner: CliRunner, write_document: WriteDocument, document_data: dict[str, Any]
    ) -> None:
        path = write_document(document_data)
        result = runner.invoke(app, ["quantities", str(path), "--format", "csv"])
        assert result.exit_code == 0
        assert result.output.startswith("Section,Item,Size,Quantity,Unit")

    def test_json_report(
        self, runner: CliRunner, write_document: WriteDocument, pv_document_data: dict[str, Any]
    ) -> None:
        path = write_document(pv_document_data)
        result = runner.invoke(app, ["quantities", str(path), "-f", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["total_panels"] == 20
        assert data["total_wattage"] == pytest.approx(8000.0)
        assert data["total_walkway_length_meters"] == pytest.approx(20.0)
        assert data["total_walkway_area_sqm"] == pytest.approx(11.0)

    def test_output_file(
        self,
        runner: CliRunner,
        write_document: WriteDocument,
        document_data: dict[str, Any],
        tmp_path: Path,
    ) -> None:
        output = tmp_path / "boq.csv"
        path = write_document(document_data)
        result = runner.invoke(app, ["quantities", str(path), "-f", "csv", "-o", str(output)])
        assert result.exit_code == 0
        assert "cable_tray" in output.read_text(encoding="utf-8")

    def test_unknown_format(
        self, runner: CliRunner, write_document: WriteDocument, document_data: dict[str, Any]
    ) -> None:
        path = write_document(document_data)
        result = runner.invoke(app, ["quantities", str(path), "--format", "xlsx"])
        assert result.exit_code == 1
        assert "Unknown BOQ format" in result.output

    def test_missing_document(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(app, ["quantities", str(tmp_path / "missing.json")])
        assert result.exit_code == 1
        assert "Document not found" in result.output


class TestToolsCommand:
    def test_budget_tools(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["tools"])
        assert result.exit_code == 0
        assert "select" in result.output
        assert "roof_mask" not in result.output

    def test_pv_category(self, runner: CliRunner) -> None:
        result = runner.invoke(app, ["tools", "--purpose", "pv_design", "--category", "pv"])
        assert result.exit_code == 0
        assert "roof_mask" in result.output
        assert "pv_array" in result.output


class TestPlaceArrayCommand:
    def test_place_and_save(
        self,
        runner: CliRunner,
        write_document: WriteDocument,
        pv_document_data: dict[str, Any],
        tmp_path: Path,
    ) -> None:
        path = write_document(pv_document_data)
        output = tmp_path / "placed.json"
        result = runner.invoke(
            app,
            [
                "place-array",
                str(path),
                "--roof",
                "roof-1",
                "--x",
                "0",
                "--y",
                "0",
                "--orientation",
                "landscape",
                "-o",
                str(output),
            ],
        )
        assert result.exit_code == 0
        assert "Grid: 5 rows x 4 columns (landscape)" in result.output
        assert "Wattage: 8000 W" in result.output
        assert len(load_document(output).pv_arrays) == 2

    def test_unknown_roof(
        self, runner: CliRunner, write_document: WriteDocument, pv_document_data: dict[str, Any]
    ) -> None:
        path = write_document(pv_document_data)
        result = runner.invoke(
            app, ["place-array", str(path), "--roof", "roof-9", "--x", "0", "--y", "0"]
        )
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_roof_without_direction(
        self, runner: CliRunner, write_document: WriteDocument, pv_document_data: dict[str, Any]
    ) -> None:
        del pv_document_data["roofs"][0]["azimuth"]
        path = write_document(pv_document_data)
        result = runner.invoke(
            app, ["place-array", str(path), "--roof", "roof-1", "--x", "0", "--y", "0"]
        )
        assert result.exit_code == 1
        assert "needs a direction" in result.output


class TestExportCommand:
    def test_export_all(
        self,
        runner: CliRunner,
        write_document: WriteDocument,
        document_data: dict[str, Any],
        tmp_path: Path,
    ) -> None:
        out_dir = tmp_path / "out"
        path = write_document(document_data)
        result = runner.invoke(
            app,
            ["export", str(path), "--output-dir", str(out_dir), "--project-name", "site"],
        )
        assert result.exit_code == 0
        assert (out_dir / "site_boq.txt").exists()
        assert (out_dir / "site_json.json").exists()
        assert "boq:" in result.output

    def test_boq_format_option(
        self,
        runner: CliRunner,
        write_document: WriteDocument,
        document_data: dict[str, Any],
        tmp_path: Path,
    ) -> None:
        out_dir = tmp_path / "out"
        path = write_document(document_data)
        result = runner.invoke(
            app,
            [
                "export",
                str(path),
                "--formats",
                "boq",
                "--output-dir",
                str(out_dir),
                "--boq-format",
                "csv",
            ],
        )
        assert result.exit_code == 0
        assert (out_dir / "floorplan_boq.csv").exists()

    def test_unknown_format(
        self, runner: CliRunner, write_document: WriteDocument, document_data: dict[str, Any]
    ) -> None:
        path = write_document(document_data)
        result = runner.invoke(app, ["export", str(path), "--formats", "boq,pdf"])
        assert result.exit_code == 1
        assert "Unknown formats: pdf" in result.output
