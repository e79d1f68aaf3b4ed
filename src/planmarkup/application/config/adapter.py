"""Adapter between FloorPlanDocument and the FloorPlanState aggregate.

Loading rebuilds every entity through its ``create`` constructor, so stored
lengths and areas are recomputed from the points and the document scale
rather than trusted. Domain validation failures are reported as
``ConfigError`` with ``error_type="invalid_state"``.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from planmarkup.application.config.loader import ConfigError
from planmarkup.application.config.schema import (
    CURRENT_VERSION,
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
from planmarkup.domain import catalog
from planmarkup.domain.entities import (
    CableRoute,
    ContainmentItem,
    EquipmentItem,
    PVArray,
    PVConfig,
    PVRoof,
    Task,
    Walkway,
    Zone,
)
from planmarkup.domain.errors import MarkupError
from planmarkup.domain.state import (
    FloorPlanState,
    MarkupSnapshot,
    PlanReference,
    ViewState,
)
from planmarkup.domain.value_objects import (
    CanvasTransform,
    ItemRef,
    Point,
    Scale,
)


@contextmanager
def _invalid_state(where: str) -> Iterator[None]:
    try:
        yield
    except MarkupError as e:
        raise ConfigError(
            message=f"Invalid {where}: {e.message}",
            error_type="invalid_state",
            details=[{"path": where, "message": e.message, "error_type": e.code}],
        ) from e


def _point(value: tuple[float, float] | None) -> Point | None:
    return Point.coerce(value) if value is not None else None


def _ref(value: ItemRefConfig | None) -> ItemRef | None:
    return ItemRef(value.item_type, value.item_id) if value is not None else None


def document_to_snapshot(document: FloorPlanDocument) -> MarkupSnapshot:
    """Rebuild the markup snapshot described by a document.

    Raises:
        ConfigError: If measured items exist without a scale, arrays exist
            without a PV config, or any item fails domain validation.
    """
    scale = None
    if document.scale is not None:
        scale = Scale(
            meters_per_pixel=document.scale.meters_per_pixel,
            pixel_distance=document.scale.pixel_distance,
            real_distance=document.scale.real_distance,
        )
    measured = (
        document.cables
        or document.containment
        or document.zones
        or document.roofs
        or document.walkways
    )
    if scale is None and measured:
        raise ConfigError(
            message="Document has measured items but no scale",
            error_type="invalid_state",
            details=[{"path": "scale", "message": "required when items are drawn"}],
        )
    if document.pv_arrays and document.pv_config is None:
        raise ConfigError(
            message="Document has PV arrays but no pv_config",
            error_type="invalid_state",
            details=[{"path": "pv_config", "message": "required when arrays are placed"}],
        )

    pv_config = None
    if document.pv_config is not None:
        pv_config = PVConfig(**document.pv_config.model_dump())

    equipment = []
    for i, e in enumerate(document.equipment):
        with _invalid_state(f"equipment[{i}]"):
            equipment.append(
                EquipmentItem(
                    id=e.id,
                    type=e.type,
                    position=Point.coerce(e.position),
                    rotation=e.rotation,
                    label=e.label,
                    properties=e.properties,
                )
            )

    cables = []
    for i, c in enumerate(document.cables):
        with _invalid_state(f"cables[{i}]"):
            cables.append(
                CableRoute.create(
                    c.id,
                    c.cable_type,
                    c.points,
                    scale,
                    from_label=c.from_label,
                    to_label=c.to_label,
                    cable_spec=c.cable_spec,
                    termination_count=c.termination_count,
                    start_height=c.start_height,
                    end_height=c.end_height,
                    label=c.label,
                )
            )

    containment = []
    for i, c in enumerate(document.containment):
        size = c.size or catalog.default_containment_size(c.containment_type)
        if size not in catalog.containment_sizes(c.containment_type):
            raise ConfigError(
                message=f"Invalid size {size!r} for {c.containment_type.value}",
                error_type="invalid_state",
                details=[{"path": f"containment[{i}].size", "value": size}],
            )
        with _invalid_state(f"containment[{i}]"):
            containment.append(
                ContainmentItem.create(c.id, c.containment_type, size, c.points, scale)
            )

    zones = []
    for i, z in enumerate(document.zones):
        with _invalid_state(f"zones[{i}]"):
            zones.append(Zone.create(z.id, z.points, scale, label=z.label, color=z.color))

    roofs = []
    for i, r in enumerate(document.roofs):
        with _invalid_state(f"roofs[{i}]"):
            roof = PVRoof.create(r.id, r.mask_points, scale, label=r.label)
            roofs.append(
                roof.rescaled(
                    scale,
                    pitch=r.pitch,
                    azimuth=r.azimuth,
                    high_point=_point(r.high_point),
                    low_point=_point(r.low_point),
                )
            )

    arrays = []
    for i, a in enumerate(document.pv_arrays):
        with _invalid_state(f"pv_arrays[{i}]"):
            arrays.append(
                PVArray(
                    id=a.id,
                    roof_id=a.roof_id,
                    rows=a.rows,
                    columns=a.columns,
                    orientation=a.orientation,
                    position=Point.coerce(a.position),
                    rotation=a.rotation,
                )
            )

    walkways = []
    for i, w in enumerate(document.walkways):
        with _invalid_state(f"walkways[{i}]"):
            walkways.append(Walkway.create(w.id, w.points, scale, label=w.label))

    tasks = []
    for i, t in enumerate(document.tasks):
        with _invalid_state(f"tasks[{i}]"):
            tasks.append(
                Task(
                    id=t.id,
                    title=t.title,
                    status=t.status,
                    item_ref=_ref(t.item),
                    description=t.description,
                    assigned_to=t.assigned_to,
                )
            )

    return MarkupSnapshot(
        scale=scale,
        pv_config=pv_config,
        equipment=tuple(equipment),
        cables=tuple(cables),
        containment=tuple(containment),
        zones=tuple(zones),
        roofs=tuple(roofs),
        arrays=tuple(arrays),
        walkways=tuple(walkways),
        tasks=tuple(tasks),
    )


def document_to_state(document: FloorPlanDocument) -> FloorPlanState:
    """Convert a validated document into the FloorPlanState aggregate."""
    plan = None
    if document.plan is not None:
        plan = PlanReference(
            uri=document.plan.uri,
            width_px=document.plan.width_px,
            height_px=document.plan.height_px,
        )
    transform = document.view.transform
    view = ViewState(
        active_tool=document.view.active_tool,
        selection=_ref(document.view.selection),
        transform=CanvasTransform(x=transform.x, y=transform.y, scale=transform.scale),
    )
    return FloorPlanState(
        plan=plan,
        purpose=document.purpose,
        snapshot=document_to_snapshot(document),
        view=view,
    )


def _coord(point: Point) -> tuple[float, float]:
    return point.as_tuple()


def _ref_config(ref: ItemRef | None) -> ItemRefConfig | None:
    if ref is None:
        return None
    return ItemRefConfig(item_type=ref.item_type, item_id=ref.item_id)


def state_to_document(
    state: FloorPlanState,
    settings: EngineSettings | None = None,
) -> FloorPlanDocument:
    """Serialize a FloorPlanState, including derived lengths and areas."""
    snapshot = state.snapshot
    scale = None
    if snapshot.scale is not None:
        scale = ScaleConfig(
            meters_per_pixel=snapshot.scale.meters_per_pixel,
            pixel_distance=snapshot.scale.pixel_distance,
            real_distance=snapshot.scale.real_distance,
        )
    pv_config = None
    if snapshot.pv_config is not None:
        pv_config = PVConfigSchema(
            panel_length=snapshot.pv_config.panel_length,
            panel_width=snapshot.pv_config.panel_width,
            panel_wattage=snapshot.pv_config.panel_wattage,
        )
    plan = None
    if state.plan is not None:
        plan = PlanConfig(
            uri=state.plan.uri,
            width_px=state.plan.width_px,
            height_px=state.plan.height_px,
        )
    transform = state.view.transform

    return FloorPlanDocument(
        schema_version=CURRENT_VERSION,
        plan=plan,
        purpose=state.purpose,
        scale=scale,
        pv_config=pv_config,
        equipment=[
            EquipmentConfig(
                id=e.id,
                type=e.type,
                position=_coord(e.position),
                rotation=e.rotation,
                label=e.label,
                properties=dict(e.properties),
            )
            for e in snapshot.equipment
        ],
        cables=[
            CableConfig(
                id=c.id,
                cable_type=c.cable_type,
                points=[_coord(p) for p in c.points],
                from_label=c.from_label,
                to_label=c.to_label,
                cable_spec=c.cable_spec,
                termination_count=c.termination_count,
                start_height=c.start_height,
                end_height=c.end_height,
                label=c.label,
                path_length_meters=c.path_length_meters,
                length_meters=c.length_meters,
            )
            for c in snapshot.cables
        ],
        containment=[
            ContainmentConfig(
                id=c.id,
                containment_type=c.containment_type,
                size=c.size,
                points=[_coord(p) for p in c.points],
                length_meters=c.length_meters,
            )
            for c in snapshot.containment
        ],
        zones=[
            ZoneConfig(
                id=z.id,
                points=[_coord(p) for p in z.points],
                label=z.label,
                color=z.color,
                area_sqm=z.area_sqm,
            )
            for z in snapshot.zones
        ],
        roofs=[
            RoofConfig(
                id=r.id,
                mask_points=[_coord(p) for p in r.mask_points],
                pitch=r.pitch,
                azimuth=r.azimuth,
                high_point=_coord(r.high_point) if r.high_point else None,
                low_point=_coord(r.low_point) if r.low_point else None,
                label=r.label,
                area_sqm=r.area_sqm,
            )
            for r in snapshot.roofs
        ],
        pv_arrays=[
            PVArrayConfig(
                id=a.id,
                roof_id=a.roof_id,
                rows=a.rows,
                columns=a.columns,
                orientation=a.orientation,
                position=_coord(a.position),
                rotation=a.rotation,
            )
            for a in snapshot.arrays
        ],
        walkways=[
            WalkwayConfig(
                id=w.id,
                points=[_coord(p) for p in w.points],
                label=w.label,
                length_meters=w.length_meters,
                area_sqm=w.area_sqm,
            )
            for w in snapshot.walkways
        ],
        tasks=[
            TaskConfig(
                id=t.id,
                title=t.title,
                status=t.status,
                item=_ref_config(t.item_ref),
                description=t.description,
                assigned_to=t.assigned_to,
            )
            for t in snapshot.tasks
        ],
        view=ViewConfig(
            active_tool=state.view.active_tool,
            selection=_ref_config(state.view.selection),
            transform=TransformConfig(x=transform.x, y=transform.y, scale=transform.scale),
        ),
        settings=settings or EngineSettings(),
    )
