# paintwall/api/properties.py

import logging
from typing import Optional

from fastapi import APIRouter, Query

from paintwall.api.crud import delete_row, get_row, insert_row, list_rows, require_row, search, update_row
from paintwall.db.engine import get_engine
from paintwall.db.schema import clients, properties
from paintwall.models.clients import PropertyCreate, PropertyOut, PropertyUpdate
from paintwall.models.common import Page
from paintwall.models.enums import PropertyType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("", response_model=Page[PropertyOut])
def list_properties(
    company_id: Optional[int] = Query(default=None),
    client_id: Optional[int] = Query(default=None),
    property_type: Optional[PropertyType] = Query(default=None),
    q: Optional[str] = Query(default=None, description="Searches name and address fields"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> Page[PropertyOut]:
    conditions = []
    if company_id is not None:
        conditions.append(properties.c.company_id == company_id)
    if client_id is not None:
        conditions.append(properties.c.client_id == client_id)
    if property_type is not None:
        conditions.append(properties.c.property_type == property_type.value)
    if q and q.strip():
        conditions.append(
            search(
                q,
                properties.c.name,
                properties.c.address_line1,
                properties.c.address_line2,
                properties.c.city,
                properties.c.state,
                properties.c.zip,
            )
        )

    engine = get_engine()
    with engine.connect() as conn:
        rows, total = list_rows(conn, properties, conditions, [properties.c.id], limit, offset)
    return Page[PropertyOut](items=rows, total=total, limit=limit, offset=offset)


@router.post("", response_model=PropertyOut, status_code=201)
def create_property(payload: PropertyCreate) -> PropertyOut:
    engine = get_engine()
    with engine.begin() as conn:
        client = require_row(conn, clients, payload.client_id, "Client")
        values = dict(payload.model_dump(), company_id=client["company_id"])
        row = insert_row(conn, properties, values, "Property")
    logger.info("Created property %s for client %s", row["id"], row["client_id"])
    return PropertyOut.model_validate(row)


@router.get("/{property_id}", response_model=PropertyOut)
def get_property(property_id: int) -> PropertyOut:
    engine = get_engine()
    with engine.connect() as conn:
        row = get_row(conn, properties, property_id, "Property")
    return PropertyOut.model_validate(row)


@router.patch("/{property_id}", response_model=PropertyOut)
def update_property(property_id: int, payload: PropertyUpdate) -> PropertyOut:
    engine = get_engine()
    with engine.begin() as conn:
        get_row(conn, properties, property_id, "Property")
        row = update_row(conn, properties, property_id, payload.model_dump(exclude_unset=True), "Property")
    return PropertyOut.model_validate(row)


@router.delete("/{property_id}", status_code=204)
def delete_property(property_id: int) -> None:
    engine = get_engine()
    with engine.begin() as conn:
        delete_row(conn, properties, property_id, "Property")
    logger.info("Deleted property %s", property_id)
