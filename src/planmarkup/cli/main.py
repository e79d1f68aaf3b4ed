"""Typer CLI for floor-plan markup quantities and PV layout."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from planmarkup.application import MarkupSession
from planmarkup.application.config import ConfigError, load_document
from planmarkup.cli.commands import validate_command
from planmarkup.domain import catalog
from planmarkup.domain.errors import MarkupError
from planmarkup.domain.value_objects import DesignPurpose, PanelOrientation, ToolCategory
from planmarkup.infrastructure import (
    BoqExporter,
    ExporterRegistry,
    ExportManager,
    JsonStateExporter,
    PVArrayFormatter,
    ToolCatalogFormatter,
)

app = typer.Typer(
    name="planmarkup",
    help="Measure floor-plan markup and lay out PV arrays.",
)

# Register validate command
app.command(name="validate")(validate_command)


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Floor-plan markup engine."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )


def _open_session(document_file: Path) -> MarkupSession:
    """Load a document and open a session, exiting with code 1 on failure."""
    try:
        return MarkupSession.from_document(load_document(document_file))
    except ConfigError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)


@app.command()
def quantities(
    document_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON floor-plan document"),
    ],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text, csv, json"),
    ] = "text",
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the report to a file"),
    ] = None,
) -> None:
    """Show the bill of quantities for a floor plan.

    Example:
        planmarkup quantities site-plan.json --format csv -o boq.csv
    """
    try:
        exporter = BoqExporter(output_format=output_format.lower())
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    session = _open_session(document_file)
    try:
        content = exporter.format_report(session.quantities())
    except MarkupError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)

    if output_file is not None:
        output_file.write_text(content, encoding="utf-8")
        typer.echo(f"Quantities written to {output_file}")
    else:
        typer.echo(content)


@app.command()
def tools(
    purpose: Annotated[
        DesignPurpose,
        typer.Option("--purpose", "-p", help="Design purpose"),
    ] = DesignPurpose.BUDGET_MARKUP,
    category: Annotated[
        ToolCategory | None,
        typer.Option("--category", "-c", help="Only show one toolbar category"),
    ] = None,
) -> None:
    """List the tools enabled for a design purpose."""
    typer.echo(ToolCatalogFormatter().format(catalog.tools_for(purpose, category)))


@app.command(name="place-array")
def place_array(
    document_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON floor-plan document"),
    ],
    roof_id: Annotated[str, typer.Option("--roof", "-r", help="Roof id to place on")],
    x: Annotated[float, typer.Option("--x", help="Grid origin x (pixels)")],
    y: Annotated[float, typer.Option("--y", help="Grid origin y (pixels)")],
    rotation: Annotated[
        float, typer.Option("--rotation", help="Grid rotation in degrees")
    ] = 0.0,
    orientation: Annotated[
        PanelOrientation,
        typer.Option("--orientation", help="Panel orientation"),
    ] = PanelOrientation.PORTRAIT,
    max_rows: Annotated[
        int | None, typer.Option("--max-rows", min=1, help="Cap the number of rows")
    ] = None,
    max_columns: Annotated[
        int | None, typer.Option("--max-columns", min=1, help="Cap the number of columns")
    ] = None,
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Save the updated document to this path"),
    ] = None,
) -> None:
    """Fit a PV array on a roof from a grid origin.

    Example:
        planmarkup place-array site-plan.json --roof roof-1 --x 120 --y 80 \\
            --orientation landscape -o site-plan.json
    """
    session = _open_session(document_file)
    try:
        array = session.store.place_pv_array(
            roof_id,
            (x, y),
            rotation=rotation,
            orientation=orientation,
            max_rows=max_rows,
            max_columns=max_columns,
        )
    except MarkupError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)

    config = session.store.snapshot.pv_config
    typer.echo(PVArrayFormatter().format(array, config))

    if output_file is not None:
        JsonStateExporter(settings=session.settings).export(session.state(), output_file)
        typer.echo(f"Saved to {output_file}")


@app.command()
def export(
    document_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON floor-plan document"),
    ],
    output_formats: Annotated[
        str,
        typer.Option("--formats", help="Comma-separated export formats (or 'all')"),
    ] = "all",
    output_dir: Annotated[
        Path,
        typer.Option("--output-dir", help="Directory for exported files"),
    ] = Path("."),
    project_name: Annotated[
        str,
        typer.Option("--project-name", help="Base name for exported files"),
    ] = "floorplan",
    boq_format: Annotated[
        str,
        typer.Option("--boq-format", help="BOQ file format: text, csv, json"),
    ] = "text",
) -> None:
    """Export a floor plan to one or more registered formats.

    Example:
        planmarkup export site-plan.json --formats boq,json --boq-format csv
    """
    if output_formats.lower() == "all":
        formats = ExporterRegistry.available_formats()
    else:
        formats = [f.strip().lower() for f in output_formats.split(",")]

    available = ExporterRegistry.available_formats()
    invalid = [f for f in formats if f not in available]
    if invalid:
        typer.echo(f"Unknown formats: {', '.join(invalid)}", err=True)
        typer.echo(f"Available formats: {', '.join(available)}", err=True)
        raise typer.Exit(code=1)

    session = _open_session(document_file)
    try:
        results = ExportManager(output_dir).export_all(
            formats,
            session.state(),
            project_name,
            options={"boq": {"output_format": boq_format.lower()}},
        )
    except MarkupError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    for format_name, path in results.items():
        typer.echo(f"  {format_name}: {path}")


if __name__ == "__main__":
    app()
