"""Pydantic models for serialized floor-plan documents.

A ``FloorPlanDocument`` is the JSON form of a ``FloorPlanState``: the plan
reference, design purpose, scale, PV configuration, every markup collection,
tasks and the transient view state. Derived values (lengths and areas) are
written out for downstream consumers but are recomputed when a document is
loaded.
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from planmarkup.domain.value_objects import (
    CableType,
    ContainmentType,
    DesignPurpose,
    EquipmentType,
    ItemType,
    PanelOrientation,
    TaskStatus,
)

# Supported schema versions for floor-plan documents
# Version 1.0: Markup, PV layout, tasks and view state
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})

CURRENT_VERSION = "1.0"

Coordinate = tuple[float, float]


def is_supported_version(version: str) -> bool:
    """Accept listed versions and newer minor versions of a supported major."""
    if version in SUPPORTED_VERSIONS:
        return True
    try:
        major = int(version.split(".")[0])
    except ValueError:
        return False
    return major in {int(v.split(".")[0]) for v in SUPPORTED_VERSIONS}


class PlanConfig(BaseModel):
    """Reference to the floor-plan image owned by the upload collaborator."""

    model_config = ConfigDict(extra="forbid")

    uri: str = Field(..., min_length=1)
    width_px: int | None = Field(default=None, gt=0)
    height_px: int | None = Field(default=None, gt=0)


class ScaleConfig(BaseModel):
    """Calibrated scale.

    Attributes:
        meters_per_pixel: Conversion factor applied to every pixel distance.
        pixel_distance: Length of the calibration line in pixels (optional).
        real_distance: Real length of the calibration line in meters (optional).
    """

    model_config = ConfigDict(extra="forbid")

    meters_per_pixel: float = Field(..., gt=0)
    pixel_distance: float | None = Field(default=None, gt=0)
    real_distance: float | None = Field(default=None, gt=0)


class PVConfigSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    panel_length: float = Field(..., gt=0, description="Panel length in meters")
    panel_width: float = Field(..., gt=0, description="Panel width in meters")
    panel_wattage: float = Field(..., gt=0, description="Rated power in watts")


class EquipmentConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    type: EquipmentType
    position: Coordinate
    rotation: float = 0.0
    label: str | None = None
    properties: dict[str, Any] = Field(default_factory=dict)


class CableConfig(BaseModel):
    """Cable route. ``length_meters`` is output only and ignored on load."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    cable_type: CableType
    points: list[Coordinate] = Field(..., min_length=2)
    from_label: str | None = None
    to_label: str | None = None
    cable_spec: str | None = None
    termination_count: int = Field(default=0, ge=0)
    start_height: float = Field(default=0.0, ge=0)
    end_height: float = Field(default=0.0, ge=0)
    label: str | None = None
    path_length_meters: float | None = None
    length_meters: float | None = None


class ContainmentConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    containment_type: ContainmentType
    size: str | None = None
    points: list[Coordinate] = Field(..., min_length=2)
    length_meters: float | None = None


class ZoneConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    points: list[Coordinate] = Field(..., min_length=3)
    label: str | None = None
    color: str | None = None
    area_sqm: float | None = None


class RoofConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    mask_points: list[Coordinate] = Field(..., min_length=3)
    pitch: float | None = Field(default=None, ge=0, lt=90)
    azimuth: float | None = None
    high_point: Coordinate | None = None
    low_point: Coordinate | None = None
    label: str | None = None
    area_sqm: float | None = None


class PVArrayConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    roof_id: str = Field(..., min_length=1)
    rows: int = Field(..., ge=1)
    columns: int = Field(..., ge=1)
    orientation: PanelOrientation = PanelOrientation.PORTRAIT
    position: Coordinate
    rotation: float = 0.0


class WalkwayConfig(BaseModel):
    """PV walkway. Length and area are output only and ignored on load."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    points: list[Coordinate] = Field(..., min_length=2)
    label: str | None = None
    length_meters: float | None = None
    area_sqm: float | None = None


class ItemRefConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    item_type: ItemType
    item_id: str = Field(..., min_length=1)


class TaskConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    status: TaskStatus = TaskStatus.TODO
    item: ItemRefConfig | None = None
    description: str | None = None
    assigned_to: str | None = None


class TransformConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    x: float = 0.0
    y: float = 0.0
    scale: float = Field(default=1.0, gt=0)


class ViewConfig(BaseModel):
    """Transient UI state saved alongside the markup."""

    model_config = ConfigDict(extra="forbid")

    active_tool: str | None = None
    selection: ItemRefConfig | None = None
    transform: TransformConfig = Field(default_factory=TransformConfig)


class EngineSettings(BaseModel):
    """Tunables for the markup engine.

    Attributes:
        history_limit: Maximum number of snapshots kept for undo (1 to 10000).
        boundary_tolerance: Pixel distance within which a point counts as on
            a polygon edge.
    """

    model_config = ConfigDict(extra="forbid")

    history_limit: int = Field(default=200, ge=1, le=10_000)
    boundary_tolerance: float = Field(default=1e-7, gt=0, le=1.0)


class FloorPlanDocument(BaseModel):
    """Root model of a serialized floor plan.

    Example:
        >>> doc = FloorPlanDocument(
        ...     schema_version="1.0",
        ...     scale=ScaleConfig(meters_per_pixel=0.05),
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    plan: PlanConfig | None = None
    purpose: DesignPurpose = DesignPurpose.BUDGET_MARKUP
    scale: ScaleConfig | None = None
    pv_config: PVConfigSchema | None = None
    equipment: list[EquipmentConfig] = Field(default_factory=list)
    cables: list[CableConfig] = Field(default_factory=list)
    containment: list[ContainmentConfig] = Field(default_factory=list)
    zones: list[ZoneConfig] = Field(default_factory=list)
    roofs: list[RoofConfig] = Field(default_factory=list)
    pv_arrays: list[PVArrayConfig] = Field(default_factory=list)
    walkways: list[WalkwayConfig] = Field(default_factory=list)
    tasks: list[TaskConfig] = Field(default_factory=list)
    view: ViewConfig = Field(default_factory=ViewConfig)
    settings: EngineSettings = Field(default_factory=EngineSettings)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Validate that the schema version is supported."""
        if is_supported_version(v):
            return v
        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "FloorPlanDocument":
        """Ids must be unique within each collection."""
        collections = {
            "equipment": self.equipment,
            "cables": self.cables,
            "containment": self.containment,
            "zones": self.zones,
            "roofs": self.roofs,
            "pv_arrays": self.pv_arrays,
            "walkways": self.walkways,
            "tasks": self.tasks,
        }
        for name, items in collections.items():
            seen: set[str] = set()
            for item in items:
                if item.id in seen:
                    raise ValueError(f"Duplicate id '{item.id}' in {name}")
                seen.add(item.id)
        return self

    @model_validator(mode="after")
    def validate_array_roofs(self) -> "FloorPlanDocument":
        """Every PV array must sit on a roof in the same document."""
        roof_ids = {roof.id for roof in self.roofs}
        for array in self.pv_arrays:
            if array.roof_id not in roof_ids:
                raise ValueError(
                    f"PV array '{array.id}' references unknown roof '{array.roof_id}'"
                )
        return self
