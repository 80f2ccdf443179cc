# paintwall/api/clients.py

import logging
import re
from typing import List, Optional

from fastapi import APIRouter, Query
from sqlalchemy import or_, select

from paintwall.api.crud import delete_row, get_row, insert_row, list_rows, require_row, search, update_row
from paintwall.db.engine import get_engine
from paintwall.db.schema import clients, companies, projects, properties
from paintwall.models.clients import ClientCreate, ClientDetail, ClientOut, ClientUpdate
from paintwall.models.common import Page
from paintwall.models.enums import ClientStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/clients", tags=["clients"])


def normalize_email(email: Optional[str]) -> Optional[str]:
    if email is None or not email.strip():
        return None
    return email.strip().lower()


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    if phone is None:
        return None
    digits = re.sub(r"[^0-9]", "", phone)
    return digits or None


def with_normalized(values: dict) -> dict:
    """Keep the normalized contact columns in step with the raw ones."""
    if "primary_email" in values:
        values["normalized_email"] = normalize_email(values["primary_email"])
    if "primary_phone" in values:
        values["normalized_phone"] = normalize_phone(values["primary_phone"])
    return values


def find_duplicates(conn, company_id: int, email: Optional[str], phone: Optional[str], limit: int = 10):
    norm_email = normalize_email(email)
    norm_phone = normalize_phone(phone)
    if not norm_email and not norm_phone:
        return []

    keys = []
    if norm_email:
        keys.append(clients.c.normalized_email == norm_email)
    if norm_phone:
        keys.append(clients.c.normalized_phone == norm_phone)

    stmt = (
        select(clients)
        .where(clients.c.company_id == company_id, or_(*keys))
        .order_by(clients.c.id)
        .limit(limit)
    )
    return [dict(r) for r in conn.execute(stmt).mappings()]


@router.get("", response_model=Page[ClientOut])
def list_clients(
    company_id: Optional[int] = Query(default=None),
    status: Optional[ClientStatus] = Query(default=None),
    q: Optional[str] = Query(default=None, description="Searches name, email and phone"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> Page[ClientOut]:
    conditions = []
    if company_id is not None:
        conditions.append(clients.c.company_id == company_id)
    if status is not None:
        conditions.append(clients.c.status == status.value)
    if q and q.strip():
        conditions.append(search(q, clients.c.display_name, clients.c.primary_email, clients.c.primary_phone))

    engine = get_engine()
    with engine.connect() as conn:
        rows, total = list_rows(
            conn, clients, conditions, [clients.c.created_at.desc(), clients.c.id.desc()], limit, offset
        )
    return Page[ClientOut](items=rows, total=total, limit=limit, offset=offset)


@router.get("/duplicates", response_model=List[ClientOut])
def list_duplicate_clients(
    company_id: int = Query(...),
    email: Optional[str] = Query(default=None),
    phone: Optional[str] = Query(default=None),
) -> List[ClientOut]:
    """
    Possible duplicates within a company, matched on normalized email or
    digits-only phone.
    """
    engine = get_engine()
    with engine.connect() as conn:
        rows = find_duplicates(conn, company_id, email, phone)
    return [ClientOut.model_validate(r) for r in rows]


@router.post("", response_model=ClientOut, status_code=201)
def create_client(payload: ClientCreate) -> ClientOut:
    values = with_normalized(payload.model_dump())
    engine = get_engine()
    with engine.begin() as conn:
        require_row(conn, companies, payload.company_id, "Company")
        row = insert_row(conn, clients, values, "Client")
    logger.info("Created client %s (%s)", row["id"], row["display_name"])
    return ClientOut.model_validate(row)


@router.get("/{client_id}", response_model=ClientDetail)
def get_client(client_id: int) -> ClientDetail:
    """
    A client with its properties, each carrying its projects.
    """
    engine = get_engine()
    with engine.connect() as conn:
        client = get_row(conn, clients, client_id, "Client")
        property_rows = conn.execute(
            select(properties).where(properties.c.client_id == client_id).order_by(properties.c.id)
        ).mappings().all()
        project_rows = conn.execute(
            select(projects).where(projects.c.client_id == client_id).order_by(projects.c.id)
        ).mappings().all()

    projects_by_property = {}
    for project in project_rows:
        projects_by_property.setdefault(project["property_id"], []).append(dict(project))

    client["properties"] = [
        dict(p, projects=projects_by_property.get(p["id"], [])) for p in property_rows
    ]
    return ClientDetail.model_validate(client)


@router.patch("/{client_id}", response_model=ClientOut)
def update_client(client_id: int, payload: ClientUpdate) -> ClientOut:
    values = with_normalized(payload.model_dump(exclude_unset=True))
    engine = get_engine()
    with engine.begin() as conn:
        get_row(conn, clients, client_id, "Client")
        row = update_row(conn, clients, client_id, values, "Client")
    return ClientOut.model_validate(row)


@router.delete("/{client_id}", status_code=204)
def delete_client(client_id: int) -> None:
    engine = get_engine()
    with engine.begin() as conn:
        delete_row(conn, clients, client_id, "Client")
    logger.info("Deleted client %s", client_id)
