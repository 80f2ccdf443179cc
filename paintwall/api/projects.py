# paintwall/api/projects.py

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy import func, select

from paintwall.api.crud import delete_row, get_row, insert_row, list_rows, require_row, search, to_row, update_row
from paintwall.core.config import get_settings
from paintwall.db.engine import get_engine
from paintwall.db.operations import ensure_estimate, recalc_project_cost, recalc_project_estimate
from paintwall.db.schema import (
    clients,
    company_production_rates,
    production_rate_templates,
    project_estimate_lines,
    project_estimates,
    projects,
    properties,
    property_rooms,
)
from paintwall.estimating.production import RoomGeometry, lines_from_rooms, pick_rate
from paintwall.models.common import Page
from paintwall.models.enums import ProjectStatus, ProjectType
from paintwall.models.projects import (
    EstimateFull,
    EstimateLineIn,
    EstimateOut,
    EstimateStatusIn,
    ProjectCreate,
    ProjectOut,
    ProjectStatusIn,
    ProjectUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=Page[ProjectOut])
def list_projects(
    company_id: Optional[int] = Query(default=None),
    client_id: Optional[int] = Query(default=None),
    property_id: Optional[int] = Query(default=None),
    status: Optional[ProjectStatus] = Query(default=None),
    project_type: Optional[ProjectType] = Query(default=None),
    q: Optional[str] = Query(default=None, description="Searches name and scope notes"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> Page[ProjectOut]:
    conditions = []
    if company_id is not None:
        conditions.append(projects.c.company_id == company_id)
    if client_id is not None:
        conditions.append(projects.c.client_id == client_id)
    if property_id is not None:
        conditions.append(projects.c.property_id == property_id)
    if status is not None:
        conditions.append(projects.c.status == status.value)
    if project_type is not None:
        conditions.append(projects.c.project_type == project_type.value)
    if q and q.strip():
        conditions.append(search(q, projects.c.name, projects.c.scope_notes))

    engine = get_engine()
    with engine.connect() as conn:
        rows, total = list_rows(
            conn, projects, conditions, [projects.c.created_at.desc(), projects.c.id.desc()], limit, offset
        )
    return Page[ProjectOut](items=rows, total=total, limit=limit, offset=offset)


@router.post("", response_model=ProjectOut, status_code=201)
def create_project(payload: ProjectCreate) -> ProjectOut:
    values = payload.model_dump()
    if values["tax_rate_bps"] is None:
        values["tax_rate_bps"] = get_settings().default_tax_rate_bps
    if payload.start_date and payload.end_date and payload.end_date < payload.start_date:
        raise HTTPException(status_code=400, detail="end_date is before start_date")

    engine = get_engine()
    with engine.begin() as conn:
        client = require_row(conn, clients, payload.client_id, "Client")
        prop = require_row(conn, properties, payload.property_id, "Property")
        if prop["client_id"] != client["id"]:
            raise HTTPException(status_code=400, detail="Property belongs to a different client")
        values["company_id"] = client["company_id"]
        row = insert_row(conn, projects, values, "Project")
        row = recalc_project_cost(conn, row["id"])
    logger.info("Created project %s (%s) for client %s", row["id"], row["name"], row["client_id"])
    return ProjectOut.model_validate(row)


@router.get("/{project_id}", response_model=ProjectOut)
def get_project(project_id: int) -> ProjectOut:
    engine = get_engine()
    with engine.connect() as conn:
        row = get_row(conn, projects, project_id, "Project")
    return ProjectOut.model_validate(row)


@router.patch("/{project_id}", response_model=ProjectOut)
def update_project(project_id: int, payload: ProjectUpdate) -> ProjectOut:
    values = payload.model_dump(exclude_unset=True)
    engine = get_engine()
    with engine.begin() as conn:
        current = get_row(conn, projects, project_id, "Project")
        start = values.get("start_date", current["start_date"])
        end = values.get("end_date", current["end_date"])
        if start and end and end < start:
            raise HTTPException(status_code=400, detail="end_date is before start_date")
        update_row(conn, projects, project_id, values, "Project")
        row = recalc_project_cost(conn, project_id)
    return ProjectOut.model_validate(row)


@router.post("/{project_id}/status", response_model=ProjectOut)
def set_project_status(project_id: int, payload: ProjectStatusIn) -> ProjectOut:
    engine = get_engine()
    with engine.begin() as conn:
        current = get_row(conn, projects, project_id, "Project")
        row = update_row(conn, projects, project_id, {"status": payload.status}, "Project")
    logger.info("Project %s status %s -> %s", project_id, current["status"], row["status"])
    return ProjectOut.model_validate(row)


@router.delete("/{project_id}", status_code=204)
def delete_project(project_id: int) -> None:
    engine = get_engine()
    with engine.begin() as conn:
        delete_row(conn, projects, project_id, "Project")
    logger.info("Deleted project %s", project_id)


# ---- Estimate ----

def _rate_tables(conn, company_id: int):
    company_rates = {
        (r.service, r.unit): r.units_per_hour
        for r in conn.execute(
            select(
                company_production_rates.c.service,
                company_production_rates.c.unit,
                company_production_rates.c.units_per_hour,
            ).where(company_production_rates.c.company_id == company_id)
        )
    }
    template_rates = {}
    for r in conn.execute(
        select(
            production_rate_templates.c.service,
            production_rate_templates.c.unit,
            production_rate_templates.c.units_per_hour,
        ).order_by(production_rate_templates.c.id)
    ):
        template_rates.setdefault((r.service, r.unit), r.units_per_hour)
    return company_rates, template_rates


def _resolve_rate(rate_tables, service: str, unit: str, override: Optional[float]) -> float:
    if override is not None:
        return override
    rate = pick_rate(service, unit, *rate_tables)
    if rate is None:
        raise HTTPException(
            status_code=400,
            detail=f"No production rate for {service} / {unit}; set a company rate or pass units_per_hour",
        )
    return rate


def _next_sort_order(conn, estimate_id: int) -> int:
    current = conn.execute(
        select(func.max(project_estimate_lines.c.sort_order)).where(
            project_estimate_lines.c.estimate_id == estimate_id
        )
    ).scalar()
    return 0 if current is None else current + 1


def _estimate_full(conn, project_id: int) -> EstimateFull:
    estimate = conn.execute(
        select(project_estimates).where(project_estimates.c.project_id == project_id)
    ).mappings().first()
    if estimate is None:
        return EstimateFull(estimate=None, lines=[])
    lines = conn.execute(
        select(project_estimate_lines)
        .where(project_estimate_lines.c.estimate_id == estimate["id"])
        .order_by(project_estimate_lines.c.sort_order, project_estimate_lines.c.id)
    ).mappings().all()
    return EstimateFull(
        estimate=EstimateOut.model_validate(dict(estimate)),
        lines=[dict(line) for line in lines],
    )


@router.get("/{project_id}/estimate", response_model=EstimateFull)
def get_project_estimate(project_id: int) -> EstimateFull:
    engine = get_engine()
    with engine.connect() as conn:
        get_row(conn, projects, project_id, "Project")
        return _estimate_full(conn, project_id)


@router.post("/{project_id}/estimate/lines", response_model=EstimateFull, status_code=201)
def add_estimate_line(project_id: int, payload: EstimateLineIn) -> EstimateFull:
    engine = get_engine()
    with engine.begin() as conn:
        project = get_row(conn, projects, project_id, "Project")
        room = require_row(conn, property_rooms, payload.room_id, "Room")
        if room is not None and room["property_id"] != project["property_id"]:
            raise HTTPException(status_code=400, detail="Room is not on the project's property")

        values = to_row(payload.model_dump())
        values["units_per_hour"] = _resolve_rate(
            _rate_tables(conn, project["company_id"]), values["service"], values["unit"], payload.units_per_hour
        )
        estimate = ensure_estimate(conn, project)
        conn.execute(
            project_estimate_lines.insert().values(
                **values,
                company_id=project["company_id"],
                estimate_id=estimate["id"],
                sort_order=_next_sort_order(conn, estimate["id"]),
            )
        )
        recalc_project_estimate(conn, project_id)
        return _estimate_full(conn, project_id)


@router.post("/{project_id}/estimate/lines/from-rooms", response_model=EstimateFull)
def estimate_lines_from_rooms(project_id: int) -> EstimateFull:
    """
    Rebuild the room-derived lines from the rooms assigned to this project.
    Lines entered by hand (no room) are kept.
    """
    engine = get_engine()
    with engine.begin() as conn:
        project = get_row(conn, projects, project_id, "Project")
        rooms = conn.execute(
            select(property_rooms)
            .where(property_rooms.c.project_id == project_id)
            .order_by(property_rooms.c.level, property_rooms.c.sort_order, property_rooms.c.id)
        ).mappings().all()
        geometry = [
            RoomGeometry(
                id=r["id"],
                wall_area_sqft=r["wall_area_sqft"],
                wall_perimeter_ft=r["wall_perimeter_ft"],
                room_height_ft=r["room_height_ft"],
                openings_area_sqft=r["openings_area_sqft"],
                ceiling_area_sqft=r["ceiling_area_sqft"],
                floor_area_sqft=r["floor_area_sqft"],
                paint_walls=r["paint_walls"],
                paint_ceiling=r["paint_ceiling"],
                paint_trim=r["paint_trim"],
                paint_doors=r["paint_doors"],
            )
            for r in rooms
        ]
        specs = lines_from_rooms(geometry)
        rate_tables = _rate_tables(conn, project["company_id"])
        rates = [_resolve_rate(rate_tables, s.service.value, s.unit.value, None) for s in specs]

        estimate = ensure_estimate(conn, project)
        conn.execute(
            project_estimate_lines.delete().where(
                project_estimate_lines.c.estimate_id == estimate["id"],
                project_estimate_lines.c.room_id.isnot(None),
            )
        )
        sort_order = _next_sort_order(conn, estimate["id"])
        for offset, (spec, rate) in enumerate(zip(specs, rates)):
            conn.execute(
                project_estimate_lines.insert().values(
                    company_id=project["company_id"],
                    estimate_id=estimate["id"],
                    room_id=spec.room_id,
                    service=spec.service.value,
                    unit=spec.unit.value,
                    quantity=spec.quantity,
                    units_per_hour=rate,
                    sort_order=sort_order + offset,
                )
            )
        recalc_project_estimate(conn, project_id)
        logger.info("Project %s: %s estimate lines from %s rooms", project_id, len(specs), len(rooms))
        return _estimate_full(conn, project_id)


@router.delete("/{project_id}/estimate/lines/{line_id}", response_model=EstimateFull)
def delete_estimate_line(project_id: int, line_id: int) -> EstimateFull:
    engine = get_engine()
    with engine.begin() as conn:
        project = get_row(conn, projects, project_id, "Project")
        estimate = ensure_estimate(conn, project)
        line = get_row(conn, project_estimate_lines, line_id, "Estimate line")
        if line["estimate_id"] != estimate["id"]:
            raise HTTPException(status_code=404, detail="Estimate line not found")
        conn.execute(project_estimate_lines.delete().where(project_estimate_lines.c.id == line_id))
        recalc_project_estimate(conn, project_id)
        return _estimate_full(conn, project_id)


@router.post("/{project_id}/estimate/recalc", response_model=EstimateOut)
def recalc_estimate(project_id: int) -> EstimateOut:
    engine = get_engine()
    with engine.begin() as conn:
        get_row(conn, projects, project_id, "Project")
        row = recalc_project_estimate(conn, project_id)
    return EstimateOut.model_validate(row)


@router.post("/{project_id}/estimate/status", response_model=EstimateOut)
def set_estimate_status(project_id: int, payload: EstimateStatusIn) -> EstimateOut:
    engine = get_engine()
    with engine.begin() as conn:
        project = get_row(conn, projects, project_id, "Project")
        estimate = ensure_estimate(conn, project)
        row = update_row(conn, project_estimates, estimate["id"], {"status": payload.status}, "Estimate")
    return EstimateOut.model_validate(row)
