# paintwall/api/rooms.py

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from paintwall.api.crud import delete_row, get_row, insert_row, list_rows, require_row, update_row
from paintwall.db.engine import get_engine
from paintwall.db.schema import projects, properties, property_rooms
from paintwall.estimating.measurement import parse_dimensions
from paintwall.models.clients import RoomAssignIn, RoomCreate, RoomOut, RoomUpdate
from paintwall.models.common import Page

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rooms", tags=["rooms"])


def derive_geometry(values: dict, current: Optional[dict] = None) -> dict:
    """
    Fill floor / ceiling area, perimeter and wall area from a ``"12 x 14"``
    floor plan, and keep wall area in step when the height or perimeter
    changes. Figures sent explicitly in the same request win.
    """
    current = current or {}
    dimensions = values.pop("dimensions", None)
    if dimensions:
        dims = parse_dimensions(dimensions)
        if dims is None:
            raise HTTPException(status_code=400, detail=f"Cannot read room dimensions {dimensions!r}")
        length, width = dims

        floor_area = round(length * width, 2)
        values.setdefault("floor_area_sqft", floor_area)
        values.setdefault("ceiling_area_sqft", floor_area)
        values.setdefault("wall_perimeter_ft", round(2 * (length + width), 2))

    if "wall_area_sqft" in values:
        return values
    if "wall_perimeter_ft" not in values and "room_height_ft" not in values:
        return values

    perimeter = values.get("wall_perimeter_ft", current.get("wall_perimeter_ft"))
    height = values.get("room_height_ft", current.get("room_height_ft"))
    if perimeter and height:
        values["wall_area_sqft"] = round(perimeter * height, 2)
    return values


def _check_project(conn, project_id: Optional[int], property_id: int) -> None:
    project = require_row(conn, projects, project_id, "Project")
    if project is not None and project["property_id"] != property_id:
        raise HTTPException(status_code=400, detail="Project belongs to a different property")


@router.get("", response_model=Page[RoomOut])
def list_rooms(
    property_id: Optional[int] = Query(default=None),
    project_id: Optional[int] = Query(default=None),
    level: Optional[int] = Query(default=None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> Page[RoomOut]:
    conditions = []
    if property_id is not None:
        conditions.append(property_rooms.c.property_id == property_id)
    if project_id is not None:
        conditions.append(property_rooms.c.project_id == project_id)
    if level is not None:
        conditions.append(property_rooms.c.level == level)

    order = [property_rooms.c.level, property_rooms.c.sort_order, property_rooms.c.id]
    engine = get_engine()
    with engine.connect() as conn:
        rows, total = list_rows(conn, property_rooms, conditions, order, limit, offset)
    return Page[RoomOut](items=rows, total=total, limit=limit, offset=offset)


@router.post("", response_model=RoomOut, status_code=201)
def create_room(payload: RoomCreate) -> RoomOut:
    # unset flags fall back to the column defaults
    values = derive_geometry(payload.model_dump(exclude_none=True))
    engine = get_engine()
    with engine.begin() as conn:
        prop = require_row(conn, properties, payload.property_id, "Property")
        _check_project(conn, payload.project_id, prop["id"])
        values["company_id"] = prop["company_id"]
        row = insert_row(conn, property_rooms, values, "Room")
    logger.info("Created room %s on property %s", row["id"], row["property_id"])
    return RoomOut.model_validate(row)


@router.get("/{room_id}", response_model=RoomOut)
def get_room(room_id: int) -> RoomOut:
    engine = get_engine()
    with engine.connect() as conn:
        row = get_row(conn, property_rooms, room_id, "Room")
    return RoomOut.model_validate(row)


@router.patch("/{room_id}", response_model=RoomOut)
def update_room(room_id: int, payload: RoomUpdate) -> RoomOut:
    values = payload.model_dump(exclude_unset=True)
    for flag in ("name", "level", "sort_order", "paint_walls", "paint_ceiling", "paint_trim", "paint_doors"):
        if flag in values and values[flag] is None:
            raise HTTPException(status_code=400, detail=f"{flag} cannot be null")

    engine = get_engine()
    with engine.begin() as conn:
        current = get_row(conn, property_rooms, room_id, "Room")
        row = update_row(conn, property_rooms, room_id, derive_geometry(values, current), "Room")
    return RoomOut.model_validate(row)


@router.post("/{room_id}/assign", response_model=RoomOut)
def assign_room(room_id: int, payload: RoomAssignIn) -> RoomOut:
    engine = get_engine()
    with engine.begin() as conn:
        room = get_row(conn, property_rooms, room_id, "Room")
        _check_project(conn, payload.project_id, room["property_id"])
        row = update_row(conn, property_rooms, room_id, {"project_id": payload.project_id}, "Room")
    return RoomOut.model_validate(row)


@router.post("/{room_id}/unassign", response_model=RoomOut)
def unassign_room(room_id: int) -> RoomOut:
    engine = get_engine()
    with engine.begin() as conn:
        get_row(conn, property_rooms, room_id, "Room")
        row = update_row(conn, property_rooms, room_id, {"project_id": None}, "Room")
    return RoomOut.model_validate(row)


@router.delete("/{room_id}", status_code=204)
def delete_room(room_id: int) -> None:
    engine = get_engine()
    with engine.begin() as conn:
        delete_row(conn, property_rooms, room_id, "Room")
