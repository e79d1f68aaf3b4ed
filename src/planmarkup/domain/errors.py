"""Domain error taxonomy for markup, geometry and PV layout operations.

Every recoverable failure raised by the domain derives from ``MarkupError``
and carries a stable ``code`` so outer layers (interaction state machine,
CLI, REST API) can report it without string matching. ``InvariantViolation``
is deliberately outside that hierarchy: it signals a bug in the store and
must abort the computation instead of being converted into a user message.
"""

from __future__ import annotations

from typing import Any, ClassVar


class MarkupError(Exception):
    """Base class for recoverable markup errors.

    Attributes:
        message: Human-readable description of the failure.
        details: Optional structured context (ids, offending values).
    """

    code: ClassVar[str] = "markup_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class InvalidScaleInput(MarkupError, ValueError):
    """Raised when a scale calibration uses a non-positive distance."""

    code: ClassVar[str] = "invalid_scale_input"


class DegenerateGeometry(MarkupError, ValueError):
    """Raised when a shape has too few or invalid points."""

    code: ClassVar[str] = "degenerate_geometry"


class NoViablePanelPosition(MarkupError):
    """Raised when no panel fits inside a roof mask from the given origin."""

    code: ClassVar[str] = "no_viable_panel_position"


class CascadeDeleteConflict(MarkupError):
    """Raised when a roof is deleted while one of its items is still held."""

    code: ClassVar[str] = "cascade_delete_conflict"


class PrerequisiteMissing(MarkupError):
    """Raised when an operation needs a scale, PV config or roof direction first."""

    code: ClassVar[str] = "prerequisite_missing"


class ItemNotFound(MarkupError):
    """Raised when an item reference does not resolve in the store."""

    code: ClassVar[str] = "item_not_found"


class InvalidItemData(MarkupError, ValueError):
    """Raised when non-geometric item attributes fail validation."""

    code: ClassVar[str] = "invalid_item_data"


class ToolUnavailable(MarkupError):
    """Raised when a tool is unknown or not enabled for the design purpose."""

    code: ClassVar[str] = "tool_unavailable"


class InvariantViolation(RuntimeError):
    """Internal consistency failure (e.g. a stored cable with one point)."""

    pass
