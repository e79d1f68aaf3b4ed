"""Application layer - interaction, sessions and document handling."""

from .interaction import (
    EventKind,
    InteractionEvent,
    InteractionFailure,
    InteractionResult,
    ToolStateMachine,
)
from .session import MarkupSession

__all__ = [
    "EventKind",
    "InteractionEvent",
    "InteractionFailure",
    "InteractionResult",
    "MarkupSession",
    "ToolStateMachine",
]
