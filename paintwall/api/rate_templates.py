# paintwall/api/rate_templates.py

from typing import List, Optional

from fastapi import APIRouter, Query
from sqlalchemy import select

from paintwall.api.crud import delete_row, insert_row
from paintwall.db.engine import get_engine
from paintwall.db.schema import production_rate_templates
from paintwall.models.companies import RateTemplateIn, RateTemplateOut
from paintwall.models.enums import ServiceType

router = APIRouter(prefix="/production-rate-templates", tags=["production-rates"])


@router.get("", response_model=List[RateTemplateOut])
def list_rate_templates(service: Optional[ServiceType] = Query(default=None)) -> List[RateTemplateOut]:
    stmt = select(production_rate_templates).order_by(
        production_rate_templates.c.service, production_rate_templates.c.unit, production_rate_templates.c.id
    )
    if service is not None:
        stmt = stmt.where(production_rate_templates.c.service == service.value)

    engine = get_engine()
    with engine.connect() as conn:
        rows = conn.execute(stmt).mappings().all()
    return [RateTemplateOut.model_validate(r) for r in rows]


@router.post("", response_model=RateTemplateOut, status_code=201)
def create_rate_template(payload: RateTemplateIn) -> RateTemplateOut:
    engine = get_engine()
    with engine.begin() as conn:
        row = insert_row(conn, production_rate_templates, payload.model_dump(), "Rate template")
    return RateTemplateOut.model_validate(row)


@router.delete("/{template_id}", status_code=204)
def delete_rate_template(template_id: int) -> None:
    engine = get_engine()
    with engine.begin() as conn:
        delete_row(conn, production_rate_templates, template_id, "Rate template")
