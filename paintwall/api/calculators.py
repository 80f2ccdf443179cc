# paintwall/api/calculators.py
"""
Stateless estimate calculators. Nothing here touches the database.
"""

from typing import List

from fastapi import APIRouter, HTTPException

from paintwall.core.config import get_settings
from paintwall.estimating import drywall, labor, paint
from paintwall.estimating.measurement import (
    MeasurementUnit,
    calculate_area,
    calculate_perimeter,
    convert_measurement,
    convert_to_feet,
    format_measurement,
    parse_dimensions,
)
from paintwall.models.calculators import (
    ConvertIn,
    ConvertOut,
    CostSummaryOut,
    DrywallIn,
    DrywallOut,
    GallonsIn,
    GallonsOut,
    LaborRoomIn,
    LaborTaskIn,
    PaintingHoursIn,
    PaintingHoursOut,
    ProjectLaborIn,
    RoomDimensionsIn,
    RoomDimensionsOut,
    TaskSelectionIn,
)

router = APIRouter(prefix="/calculators", tags=["calculators"])


def _task(task: LaborTaskIn) -> labor.LaborTask:
    return labor.LaborTask(
        name=task.name,
        hours=task.hours,
        rate=task.rate,
        description=task.description,
        materials=[labor.LaborMaterial(m.quantity, m.unit, m.price, m.name) for m in task.materials],
    )


def _room(room: LaborRoomIn) -> labor.Room:
    return labor.Room(
        name=room.name,
        include_material_costs=room.include_material_costs,
        features={
            feature_type: [
                labor.RoomFeature(
                    type=feature_type,
                    dimensions=f.dimensions,
                    name=f.name,
                    include_material_costs=f.include_material_costs,
                    labor=[_task(t) for t in f.labor],
                )
                for f in features
            ]
            for feature_type, features in room.features.items()
        },
    )


def _summary(summary: labor.CostSummary) -> CostSummaryOut:
    return CostSummaryOut(
        total_cost=summary.total_cost,
        total_labor_cost=summary.total_labor_cost,
        total_material_cost=summary.total_material_cost,
        task_breakdown=[vars(t) for t in summary.task_breakdown],
    )


@router.post("/room", response_model=RoomDimensionsOut)
def room_calculator(payload: RoomDimensionsIn) -> RoomDimensionsOut:
    dims = parse_dimensions(payload.dimensions)
    if dims is None:
        raise HTTPException(status_code=400, detail='dimensions must look like "12 x 14"')
    floor_area = calculate_area(payload.dimensions)
    wall_area = calculate_perimeter(payload.dimensions, payload.room_height)
    return RoomDimensionsOut(
        length=dims[0],
        width=dims[1],
        floor_area=round(floor_area, 2),
        wall_area=round(wall_area, 2),
        unit=payload.unit,
        floor_area_sqft=round(convert_to_feet(floor_area, payload.unit, is_area=True), 2),
        wall_area_sqft=round(convert_to_feet(wall_area, payload.unit, is_area=True), 2),
    )


@router.post("/gallons", response_model=GallonsOut)
def gallons_calculator(payload: GallonsIn) -> GallonsOut:
    sections = {
        key: [paint.PaintSurface(s.surface, s.coats, s.paint_base) for s in surfaces]
        for key, surfaces in payload.sections.items()
    }
    try:
        summary = paint.gallons_summary(sections, payload.unit)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return GallonsOut(
        total_gallons=summary.total_gallons,
        gallons_by_section=summary.gallons_by_section,
        surface_by_paint_base={
            key: [{"paint_base": base, "surface": total} for base, total in totals]
            for key, totals in summary.surface_by_paint_base.items()
        },
        total_hours=summary.total_hours,
        total_days=summary.total_days,
        section_names=summary.section_names,
    )


@router.post("/painting-hours", response_model=PaintingHoursOut)
def painting_hours_calculator(payload: PaintingHoursIn) -> PaintingHoursOut:
    values = payload.model_dump()
    hours_per_day = values.pop("hours_per_day")
    hours = paint.estimate_painting_hours(**values)
    return PaintingHoursOut(hours=hours, days=paint.convert_hours_to_days(hours, hours_per_day))


@router.post("/labor", response_model=CostSummaryOut)
def labor_calculator(payload: TaskSelectionIn) -> CostSummaryOut:
    """Cost of the tasks picked from a catalog, with optional hour overrides."""
    summary = labor.selected_tasks_cost(
        [_task(t) for t in payload.catalog],
        payload.selected,
        payload.hours_override,
        payload.include_materials,
    )
    return _summary(summary)


@router.post("/project-labor", response_model=CostSummaryOut)
def project_labor_calculator(payload: ProjectLaborIn) -> CostSummaryOut:
    try:
        summary = labor.project_cost(_room(r) for r in payload.rooms)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _summary(summary)


@router.get("/drywall/catalog")
def drywall_catalog() -> dict:
    return drywall.catalog()


@router.post("/drywall", response_model=DrywallOut)
def drywall_calculator(payload: DrywallIn) -> DrywallOut:
    values = payload.model_dump()
    tax_rate_bps = values.pop("tax_rate_bps")
    if tax_rate_bps is None:
        tax_rate_bps = get_settings().default_tax_rate_bps
    selection = drywall.DrywallSelection(**values)
    try:
        estimate = drywall.compute_estimate(selection, tax_rate_bps)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    bundle_title, bundle_steps = drywall.STEP_BUNDLES[estimate.bundle_id]
    return DrywallOut(
        sku=estimate.sku,
        sku_labels=drywall.sku_labels(estimate.sku),
        bundle_id=estimate.bundle_id,
        bundle_title=bundle_title,
        bundle_steps=bundle_steps,
        labor_subtotal=estimate.labor_subtotal,
        modifiers_total=estimate.modifiers_total,
        subtotal=estimate.subtotal,
        tax=estimate.tax,
        total=estimate.total,
        items=[vars(item) for item in estimate.items],
    )


@router.post("/convert", response_model=ConvertOut)
def convert_calculator(payload: ConvertIn) -> ConvertOut:
    value = convert_measurement(payload.value, payload.from_unit, payload.to_unit, payload.is_area)
    return ConvertOut(
        value=round(value, 4),
        unit=payload.to_unit,
        display=format_measurement(value, payload.to_unit, decimals=2),
    )


@router.get("/units", response_model=List[MeasurementUnit])
def measurement_units() -> List[MeasurementUnit]:
    return list(MeasurementUnit)
