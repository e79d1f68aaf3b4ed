"""Markup session: one open floor plan and everything attached to it."""

from __future__ import annotations

import logging

from planmarkup.application.config.adapter import document_to_state, state_to_document
from planmarkup.application.config.schema import EngineSettings, FloorPlanDocument
from planmarkup.application.interaction import ToolStateMachine
from planmarkup.domain import catalog
from planmarkup.domain.catalog import ToolDefinition
from planmarkup.domain.services.quantities import QuantityCalculator, QuantityReport
from planmarkup.domain.state import (
    FloorPlanState,
    MarkupSnapshot,
    PlanReference,
    ViewState,
)
from planmarkup.domain.store import MarkupStore
from planmarkup.domain.value_objects import DesignPurpose, Scale, ToolCategory

logger = logging.getLogger(__name__)


class MarkupSession:
    """Wires a MarkupStore to a ToolStateMachine for one floor plan.

    The session owns the plan reference and design purpose and assembles the
    ``FloorPlanState`` aggregate on demand.

    Args:
        purpose: Design purpose selecting the enabled tools.
        plan: Reference to the floor-plan image, if loaded.
        snapshot: Initial markup state (empty if omitted).
        settings: Engine tunables (history limit, boundary tolerance).
        view: Initial view state to restore.
    """

    def __init__(
        self,
        purpose: DesignPurpose = DesignPurpose.BUDGET_MARKUP,
        plan: PlanReference | None = None,
        snapshot: MarkupSnapshot | None = None,
        settings: EngineSettings | None = None,
        view: ViewState | None = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.plan = plan
        self.store = MarkupStore(
            snapshot,
            history_limit=self.settings.history_limit,
            boundary_tolerance=self.settings.boundary_tolerance,
        )
        self.tools = ToolStateMachine(
            self.store,
            purpose,
            transform=view.transform if view is not None else None,
        )
        self._quantities = QuantityCalculator()
        if view is not None:
            self._restore_view(view)

    def _restore_view(self, view: ViewState) -> None:
        if view.active_tool:
            result = self.tools.select_tool(view.active_tool)
            if not result.ok:
                logger.warning(f"Saved tool {view.active_tool!r} not restored")
        if view.selection is not None:
            result = self.tools.select_item(view.selection)
            if not result.ok:
                logger.warning(f"Saved selection {view.selection} no longer exists")

    @classmethod
    def from_state(
        cls, state: FloorPlanState, settings: EngineSettings | None = None
    ) -> "MarkupSession":
        return cls(
            purpose=state.purpose,
            plan=state.plan,
            snapshot=state.snapshot,
            settings=settings,
            view=state.view,
        )

    @classmethod
    def from_document(cls, document: FloorPlanDocument) -> "MarkupSession":
        """Open a session from a validated document.

        Raises:
            ConfigError: If the document describes an invalid markup state.
        """
        return cls.from_state(document_to_state(document), settings=document.settings)

    @property
    def purpose(self) -> DesignPurpose:
        return self.tools.purpose

    def state(self) -> FloorPlanState:
        """Assemble the current FloorPlanState aggregate."""
        return FloorPlanState(
            plan=self.plan,
            purpose=self.purpose,
            snapshot=self.store.snapshot,
            view=self.tools.view_state(),
        )

    def to_document(self) -> FloorPlanDocument:
        return state_to_document(self.state(), settings=self.settings)

    def quantities(self, scale: Scale | float | None = None) -> QuantityReport:
        """Quantity report for the current snapshot."""
        return self._quantities.calculate(self.store.snapshot, scale)

    def available_tools(self, category: ToolCategory | None = None) -> tuple[ToolDefinition, ...]:
        return catalog.tools_for(self.purpose, category)
