# paintwall/api/companies.py

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy import select

from paintwall.api.crud import delete_row, get_row, insert_row, list_rows, search, to_row, update_row
from paintwall.db.engine import get_engine
from paintwall.db.operations import recalc_company_gpp_rates
from paintwall.db.schema import companies, company_financial_profiles, company_production_rates
from paintwall.models.common import Page
from paintwall.models.companies import (
    CompanyCreate,
    CompanyOut,
    CompanyUpdate,
    FinancialProfileIn,
    FinancialProfileOut,
    ProductionRateIn,
    ProductionRateOut,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("", response_model=Page[CompanyOut])
def list_companies(
    q: Optional[str] = Query(default=None, description="Name contains (case-insensitive)"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> Page[CompanyOut]:
    conditions = [search(q, companies.c.name)] if q else []
    engine = get_engine()
    with engine.connect() as conn:
        rows, total = list_rows(conn, companies, conditions, [companies.c.name], limit, offset)
    return Page[CompanyOut](items=rows, total=total, limit=limit, offset=offset)


@router.post("", response_model=CompanyOut, status_code=201)
def create_company(payload: CompanyCreate) -> CompanyOut:
    engine = get_engine()
    with engine.begin() as conn:
        row = insert_row(conn, companies, payload.model_dump(), "Company")
    logger.info("Created company %s (%s)", row["id"], row["name"])
    return CompanyOut.model_validate(row)


@router.get("/{company_id}", response_model=CompanyOut)
def get_company(company_id: int) -> CompanyOut:
    engine = get_engine()
    with engine.connect() as conn:
        row = get_row(conn, companies, company_id, "Company")
    return CompanyOut.model_validate(row)


@router.patch("/{company_id}", response_model=CompanyOut)
def update_company(company_id: int, payload: CompanyUpdate) -> CompanyOut:
    engine = get_engine()
    with engine.begin() as conn:
        get_row(conn, companies, company_id, "Company")
        row = update_row(conn, companies, company_id, payload.model_dump(exclude_unset=True), "Company")
    return CompanyOut.model_validate(row)


@router.delete("/{company_id}", status_code=204)
def delete_company(company_id: int) -> None:
    engine = get_engine()
    with engine.begin() as conn:
        delete_row(conn, companies, company_id, "Company")
    logger.info("Deleted company %s", company_id)


# ---- Financial profile (GPP) ----

@router.get("/{company_id}/financial-profile", response_model=FinancialProfileOut)
def get_financial_profile(company_id: int) -> FinancialProfileOut:
    engine = get_engine()
    with engine.connect() as conn:
        get_row(conn, companies, company_id, "Company")
        row = conn.execute(
            select(company_financial_profiles).where(company_financial_profiles.c.company_id == company_id)
        ).mappings().first()
    if row is None:
        raise HTTPException(status_code=404, detail="Financial profile not set")
    return FinancialProfileOut.model_validate(row)


@router.put("/{company_id}/financial-profile", response_model=FinancialProfileOut)
def put_financial_profile(company_id: int, payload: FinancialProfileIn) -> FinancialProfileOut:
    """
    Save the profile inputs and recompute the derived hourly rates.
    """
    values = to_row(payload.model_dump())
    engine = get_engine()
    with engine.begin() as conn:
        get_row(conn, companies, company_id, "Company")
        exists = conn.execute(
            select(company_financial_profiles.c.company_id).where(
                company_financial_profiles.c.company_id == company_id
            )
        ).first()
        if exists:
            conn.execute(
                company_financial_profiles.update()
                .where(company_financial_profiles.c.company_id == company_id)
                .values(**values)
            )
        else:
            conn.execute(company_financial_profiles.insert().values(company_id=company_id, **values))
        row = recalc_company_gpp_rates(conn, company_id)
    return FinancialProfileOut.model_validate(row)


@router.post("/{company_id}/financial-profile/recalc", response_model=FinancialProfileOut)
def recalc_financial_profile(company_id: int) -> FinancialProfileOut:
    engine = get_engine()
    with engine.begin() as conn:
        get_row(conn, companies, company_id, "Company")
        exists = conn.execute(
            select(company_financial_profiles.c.company_id).where(
                company_financial_profiles.c.company_id == company_id
            )
        ).first()
        if not exists:
            raise HTTPException(status_code=404, detail="Financial profile not set")
        row = recalc_company_gpp_rates(conn, company_id)
    return FinancialProfileOut.model_validate(row)


# ---- Production rates ----

@router.get("/{company_id}/production-rates", response_model=List[ProductionRateOut])
def list_production_rates(company_id: int) -> List[ProductionRateOut]:
    engine = get_engine()
    with engine.connect() as conn:
        get_row(conn, companies, company_id, "Company")
        rows = conn.execute(
            select(company_production_rates)
            .where(company_production_rates.c.company_id == company_id)
            .order_by(company_production_rates.c.service, company_production_rates.c.unit)
        ).mappings().all()
    return [ProductionRateOut.model_validate(r) for r in rows]


@router.put("/{company_id}/production-rates", response_model=ProductionRateOut)
def upsert_production_rate(company_id: int, payload: ProductionRateIn) -> ProductionRateOut:
    """
    Insert or replace the company's rate for one (service, unit) pair.
    """
    values = to_row(payload.model_dump())
    engine = get_engine()
    with engine.begin() as conn:
        get_row(conn, companies, company_id, "Company")
        existing_id = conn.execute(
            select(company_production_rates.c.id).where(
                company_production_rates.c.company_id == company_id,
                company_production_rates.c.service == values["service"],
                company_production_rates.c.unit == values["unit"],
            )
        ).scalar()
        if existing_id is None:
            row = insert_row(
                conn, company_production_rates, dict(values, company_id=company_id), "Production rate"
            )
        else:
            row = update_row(conn, company_production_rates, existing_id, values, "Production rate")
    return ProductionRateOut.model_validate(row)


@router.delete("/{company_id}/production-rates/{rate_id}", status_code=204)
def delete_production_rate(company_id: int, rate_id: int) -> None:
    engine = get_engine()
    with engine.begin() as conn:
        row = get_row(conn, company_production_rates, rate_id, "Production rate")
        if row["company_id"] != company_id:
            raise HTTPException(status_code=404, detail="Production rate not found")
        conn.execute(company_production_rates.delete().where(company_production_rates.c.id == rate_id))
