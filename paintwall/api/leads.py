# paintwall/api/leads.py
"""
Public booking / contact form capture.

A submission becomes a client with status ``lead`` unless the company
already has a client with the same normalized email or phone, in which
case the request is noted on that client instead.
"""

import logging

from fastapi import APIRouter, Response

from paintwall.api.clients import find_duplicates, with_normalized
from paintwall.api.crud import insert_row, require_row, update_row
from paintwall.db.engine import get_engine
from paintwall.db.schema import clients, companies
from paintwall.models.clients import ClientOut, LeadIn, LeadOut
from paintwall.models.enums import ClientStatus, ClientType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leads", tags=["leads"])


def _lead_note(payload: LeadIn) -> str:
    parts = []
    if payload.service:
        parts.append(f"Service: {payload.service}")
    if payload.preferred_date:
        parts.append(f"Preferred date: {payload.preferred_date}")
    if payload.message:
        parts.append(payload.message.strip())
    return "\n".join(parts)


@router.post("", response_model=LeadOut, status_code=201)
def capture_lead(payload: LeadIn, response: Response) -> LeadOut:
    note = _lead_note(payload)
    engine = get_engine()
    with engine.begin() as conn:
        require_row(conn, companies, payload.company_id, "Company")
        matches = find_duplicates(conn, payload.company_id, payload.email, payload.phone, limit=1)

        if matches:
            existing = matches[0]
            notes = "\n\n".join(n for n in (existing["notes"], note) if n)
            row = update_row(conn, clients, existing["id"], {"notes": notes or None}, "Client")
            response.status_code = 200
            logger.info("Lead matched existing client %s", row["id"])
            return LeadOut(client=ClientOut.model_validate(row), created=False)

        values = with_normalized(
            {
                "company_id": payload.company_id,
                "display_name": payload.name.strip(),
                "client_type": ClientType.person,
                "status": ClientStatus.lead,
                "primary_email": payload.email,
                "primary_phone": payload.phone,
                "notes": note or None,
            }
        )
        row = insert_row(conn, clients, values, "Client")
    logger.info("Captured lead as client %s", row["id"])
    return LeadOut(client=ClientOut.model_validate(row), created=True)
