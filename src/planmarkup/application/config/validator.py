"""Validation results and advisory checks for floor-plan documents.

Schema validation happens in the loader. This module adds the checks that
need the rebuilt markup state: items that fail domain validation (errors)
and weak references or unfinished PV roofs (warnings).
"""

from dataclasses import dataclass, field
from typing import Any

from planmarkup.application.config.adapter import document_to_snapshot
from planmarkup.application.config.loader import ConfigError
from planmarkup.application.config.schema import FloorPlanDocument
from planmarkup.domain import catalog


@dataclass
class ValidationError:
    """A blocking problem: the document cannot be opened.

    Attributes:
        path: JSON path to the invalid field (e.g., "cables[0].points")
        message: Human-readable description of the error
        value: The invalid value that caused the error
    """

    path: str
    message: str
    value: Any = None


@dataclass
class ValidationWarning:
    """A non-blocking concern about an otherwise valid document."""

    path: str
    message: str
    suggestion: str | None = None


@dataclass
class ValidationResult:
    """Container for validation errors and warnings."""

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def exit_code(self) -> int:
        """CLI exit code: 0 clean, 1 errors, 2 warnings only."""
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0

    def add_error(self, path: str, message: str, value: Any = None) -> "ValidationResult":
        self.errors.append(ValidationError(path=path, message=message, value=value))
        return self

    def add_warning(
        self, path: str, message: str, suggestion: str | None = None
    ) -> "ValidationResult":
        self.warnings.append(
            ValidationWarning(path=path, message=message, suggestion=suggestion)
        )
        return self


def result_from_error(error: ConfigError) -> ValidationResult:
    """Express a loading or state failure as a result holding only errors."""
    result = ValidationResult()
    if error.error_type == "file_not_found":
        result.add_error(str(error.path), "File not found")
    elif error.error_type == "json_parse":
        for detail in error.details:
            result.add_error(
                f"line {detail.get('line', '?')}, column {detail.get('column', '?')}",
                f"Invalid JSON syntax: {detail.get('message', error.message)}",
            )
    else:
        for detail in error.details:
            result.add_error(
                detail.get("path", "(document)"),
                detail.get("message", error.message),
                detail.get("value"),
            )
    if not result.errors:
        result.add_error("(document)", error.message)
    return result


def validate_document(document: FloorPlanDocument) -> ValidationResult:
    """Run state-level checks on a schema-valid document.

    Errors:
        - items that violate domain invariants (e.g. a zone whose points
          collapse to fewer than 3 distinct vertices)
        - measured items without a scale, arrays without a PV config

    Warnings:
        - tasks pointing at items that do not exist
        - roofs with arrays but no direction
        - a saved active tool that is not available for the design purpose
    """
    try:
        snapshot = document_to_snapshot(document)
    except ConfigError as e:
        return result_from_error(e)

    result = ValidationResult()

    for i, task in enumerate(snapshot.tasks):
        if task.item_ref is not None and snapshot.find(task.item_ref) is None:
            result.add_warning(
                f"tasks[{i}].item",
                f"Task '{task.title}' points at missing item {task.item_ref}",
                suggestion="Relink or close the task",
            )

    for i, roof in enumerate(snapshot.roofs):
        if snapshot.arrays_on(roof.id) and not roof.has_direction:
            result.add_warning(
                f"roofs[{i}]",
                f"Roof {roof.id} has arrays but no pitch/azimuth",
                suggestion="Set the roof direction",
            )

    active_tool = document.view.active_tool
    if active_tool is not None:
        tool = catalog.get_tool(active_tool)
        if tool is None or document.purpose not in tool.purposes:
            result.add_warning(
                "view.active_tool",
                f"Tool '{active_tool}' is not available for {document.purpose.value}",
            )

    return result
