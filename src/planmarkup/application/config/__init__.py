"""Floor-plan document schema and loading.

This package provides JSON-based loading and validation of floor-plan
documents. It includes Pydantic models for schema validation, a loader with
comprehensive error handling, and an adapter to and from the domain
``FloorPlanState``.

Public API:
    - FloorPlanDocument: Root document model
    - EngineSettings: Optional engine tunables block
    - load_document: Load a document from a JSON file
    - load_document_from_dict: Load a document from a dictionary
    - ConfigError: Exception for document errors
    - document_to_state: Convert a document to the domain aggregate
    - state_to_document: Convert the domain aggregate to a document
    - validate_document: State-level checks returning errors and warnings
    - result_from_error: Express a ConfigError as a ValidationResult

Example:
    >>> from pathlib import Path
    >>> from planmarkup.application.config import load_document, ConfigError
    >>>
    >>> try:
    ...     document = load_document(Path("site-plan.json"))
    ...     print(f"{len(document.cables)} cable routes")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from planmarkup.application.config.adapter import (
    document_to_snapshot,
    document_to_state,
    state_to_document,
)
from planmarkup.application.config.loader import (
    ConfigError,
    load_document,
    load_document_from_dict,
)
from planmarkup.application.config.schema import (
    CURRENT_VERSION,
    SUPPORTED_VERSIONS,
    CableConfig,
    ContainmentConfig,
    EngineSettings,
    EquipmentConfig,
    FloorPlanDocument,
    ItemRefConfig,
    PlanConfig,
    PVArrayConfig,
    PVConfigSchema,
    RoofConfig,
    ScaleConfig,
    TaskConfig,
    TransformConfig,
    ViewConfig,
    WalkwayConfig,
    ZoneConfig,
)
from planmarkup.application.config.validator import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    result_from_error,
    validate_document,
)

__all__ = [
    "CURRENT_VERSION",
    "SUPPORTED_VERSIONS",
    "CableConfig",
    "ConfigError",
    "ContainmentConfig",
    "EngineSettings",
    "EquipmentConfig",
    "FloorPlanDocument",
    "ItemRefConfig",
    "PVArrayConfig",
    "PVConfigSchema",
    "PlanConfig",
    "RoofConfig",
    "ScaleConfig",
    "TaskConfig",
    "TransformConfig",
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "ViewConfig",
    "WalkwayConfig",
    "ZoneConfig",
    "document_to_snapshot",
    "document_to_state",
    "load_document",
    "load_document_from_dict",
    "result_from_error",
    "state_to_document",
    "validate_document",
]
