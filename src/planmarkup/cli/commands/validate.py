"""The ``validate`` command.

Checks a floor-plan document in three passes: JSON syntax, schema, and the
rebuilt markup state. Problems that stop the document from opening are
errors; weak references and unfinished PV roofs are warnings.
"""

from pathlib import Path
from typing import Annotated

import typer

from planmarkup.application.config import (
    ConfigError,
    ValidationResult,
    load_document,
    result_from_error,
    validate_document,
)


def _check(document_file: Path) -> ValidationResult:
    try:
        document = load_document(document_file)
    except ConfigError as e:
        return result_from_error(e)
    return validate_document(document)


def _report(result: ValidationResult) -> None:
    if result.errors:
        typer.echo("Errors:", err=True)
        for problem in result.errors:
            typer.echo(f"  {problem.path}: {problem.message}", err=True)
            # Whole objects and lists are too noisy to echo back
            if problem.value is not None and not isinstance(problem.value, (dict, list)):
                typer.echo(f"    Value: {problem.value!r}", err=True)
        typer.echo()

    if result.warnings:
        typer.echo("Warnings:")
        for concern in result.warnings:
            typer.echo(f"  {concern.path}: {concern.message}")
            if concern.suggestion:
                typer.echo(f"    Suggestion: {concern.suggestion}")
        typer.echo()

    counts = f"{len(result.errors)} error(s), {len(result.warnings)} warning(s)"
    if not result.is_valid:
        typer.echo(f"Validation failed: {counts}", err=True)
    elif result.has_warnings:
        typer.echo(f"Validation passed with {len(result.warnings)} warning(s)")
    else:
        typer.echo("Validation passed. Document is valid.")


def validate_command(
    document_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON floor-plan document to validate"),
    ],
) -> None:
    """Validate a floor-plan document.

    Exit codes:
        0 - Document is valid with no warnings
        1 - Document has errors (cannot be opened)
        2 - Document is valid but has warnings

    Example:
        planmarkup validate site-plan.json
    """
    typer.echo(f"Validating {document_file}...")
    typer.echo()

    result = _check(document_file)
    _report(result)
    raise typer.Exit(code=result.exit_code)
