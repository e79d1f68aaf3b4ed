"""Reading floor-plan documents from JSON.

Every failure on the way from a path to a ``FloorPlanDocument`` surfaces as a
``ConfigError`` whose ``error_type`` says which stage failed and whose
``details`` point at the offending location (line/column for syntax errors,
a JSON path such as ``cables[0].points`` for schema errors).
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from planmarkup.application.config.schema import (
    SUPPORTED_VERSIONS,
    FloorPlanDocument,
    is_supported_version,
)

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """A document could not be read, parsed, validated or opened.

    Attributes:
        message: Human-readable summary.
        error_type: Failing stage: file_not_found, permission_denied,
            file_read_error, json_parse, unsupported_version, validation or
            invalid_state.
        path: Source file, when loading from disk.
        details: One dict per problem (``path``/``message``/``value`` for
            schema and state errors, ``line``/``column``/``message`` for
            JSON syntax errors).
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = list(details or [])

    def __str__(self) -> str:
        return self.message


def json_path(loc: tuple[str | int, ...]) -> str:
    """Render a pydantic error location as a JSON path.

    Examples:
        >>> json_path(("cables", 0, "points"))
        'cables[0].points'
        >>> json_path(("view", "transform", "scale"))
        'view.transform.scale'
    """
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
        else:
            path += f".{segment}" if path else str(segment)
    return path


def _schema_problems(error: PydanticValidationError) -> list[dict[str, Any]]:
    return [
        {
            "path": json_path(problem["loc"]) or "(document)",
            "message": problem["msg"],
            "value": problem.get("input"),
            "error_type": problem["type"],
        }
        for problem in error.errors()
    ]


def _summarize(problems: list[dict[str, Any]]) -> str:
    lines = [f"Document failed validation ({len(problems)} problem(s)):"]
    for problem in problems:
        line = f"  - {problem['path']}: {problem['message']}"
        value = problem.get("value")
        # Whole objects and lists make the summary unreadable
        if value is not None and not isinstance(value, (dict, list)):
            line += f" (got: {value!r})"
        lines.append(line)
    return "\n".join(lines)


def _reject_unsupported_version(data: Any, path: Path | None) -> None:
    if not isinstance(data, dict):
        return
    version = data.get("schema_version")
    if isinstance(version, str) and not is_supported_version(version):
        raise ConfigError(
            message=(
                f"Unsupported schema version '{version}'. "
                f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
            ),
            error_type="unsupported_version",
            path=path,
            details=[{"path": "schema_version", "value": version}],
        )


def _parse(data: Any, path: Path | None) -> FloorPlanDocument:
    _reject_unsupported_version(data, path)
    try:
        return FloorPlanDocument.model_validate(data)
    except PydanticValidationError as e:
        problems = _schema_problems(e)
        raise ConfigError(
            message=_summarize(problems),
            error_type="validation",
            path=path,
            details=problems,
        ) from e


def _read_text(path: Path) -> str:
    if not path.exists():
        raise ConfigError(
            message=f"Document not found: {path}",
            error_type="file_not_found",
            path=path,
        )
    try:
        return path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigError(
            message=f"Permission denied reading document: {path}",
            error_type="permission_denied",
            path=path,
        ) from e
    except OSError as e:
        raise ConfigError(
            message=f"Could not read document {path}: {e}",
            error_type="file_read_error",
            path=path,
        ) from e


def load_document(path: Path) -> FloorPlanDocument:
    """Load and validate a floor-plan document from a JSON file.

    Raises:
        ConfigError: If the file cannot be read, is not valid JSON, declares
            an unsupported schema version or fails schema validation.

    Example:
        >>> document = load_document(Path("site-plan.json"))  # doctest: +SKIP
        >>> len(document.cables)  # doctest: +SKIP
        12
    """
    text = _read_text(path)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=f"Invalid JSON in {path} at line {e.lineno}, column {e.colno}: {e.msg}",
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e

    document = _parse(data, path)
    logger.debug(f"Loaded {path} (schema {document.schema_version})")
    return document


def load_document_from_dict(data: dict[str, Any]) -> FloorPlanDocument:
    """Validate an already parsed document, e.g. an API request body.

    Raises:
        ConfigError: If the data declares an unsupported version or fails
            schema validation.
    """
    return _parse(data, None)
