# paintwall/api/assets.py

from typing import Optional

from fastapi import APIRouter, Query

from paintwall.api.crud import (
    delete_row,
    get_row,
    insert_row,
    list_rows,
    require_owned,
    require_row,
    search,
    update_row,
)
from paintwall.db.engine import get_engine
from paintwall.db.schema import assets, companies, financial_transactions, vendors
from paintwall.models.common import Page
from paintwall.models.enums import AssetStatus
from paintwall.models.finance import AssetCreate, AssetOut, AssetUpdate

router = APIRouter(prefix="/assets", tags=["assets"])


@router.get("", response_model=Page[AssetOut])
def list_assets(
    company_id: Optional[int] = Query(default=None),
    status: Optional[AssetStatus] = Query(default=None),
    category: Optional[str] = Query(default=None),
    q: Optional[str] = Query(default=None, description="Searches name, category and notes"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> Page[AssetOut]:
    conditions = []
    if company_id is not None:
        conditions.append(assets.c.company_id == company_id)
    if status is not None:
        conditions.append(assets.c.status == status.value)
    if category:
        conditions.append(assets.c.category == category)
    if q and q.strip():
        conditions.append(search(q, assets.c.name, assets.c.category, assets.c.notes))

    order = [assets.c.purchase_date.desc(), assets.c.id.desc()]
    engine = get_engine()
    with engine.connect() as conn:
        rows, total = list_rows(conn, assets, conditions, order, limit, offset)
    return Page[AssetOut](items=rows, total=total, limit=limit, offset=offset)


@router.post("", response_model=AssetOut, status_code=201)
def create_asset(payload: AssetCreate) -> AssetOut:
    engine = get_engine()
    with engine.begin() as conn:
        require_row(conn, companies, payload.company_id, "Company")
        require_owned(conn, vendors, payload.vendor_id, payload.company_id, "Vendor")
        require_owned(conn, financial_transactions, payload.transaction_id, payload.company_id, "Transaction")
        row = insert_row(conn, assets, payload.model_dump(), "Asset")
    return AssetOut.model_validate(row)


@router.get("/{asset_id}", response_model=AssetOut)
def get_asset(asset_id: int) -> AssetOut:
    engine = get_engine()
    with engine.connect() as conn:
        row = get_row(conn, assets, asset_id, "Asset")
    return AssetOut.model_validate(row)


@router.patch("/{asset_id}", response_model=AssetOut)
def update_asset(asset_id: int, payload: AssetUpdate) -> AssetOut:
    values = payload.model_dump(exclude_unset=True)
    engine = get_engine()
    with engine.begin() as conn:
        current = get_row(conn, assets, asset_id, "Asset")
        require_owned(conn, vendors, values.get("vendor_id"), current["company_id"], "Vendor")
        require_owned(conn, financial_transactions, values.get("transaction_id"), current["company_id"], "Transaction")
        row = update_row(conn, assets, asset_id, values, "Asset")
    return AssetOut.model_validate(row)


@router.delete("/{asset_id}", status_code=204)
def delete_asset(asset_id: int) -> None:
    engine = get_engine()
    with engine.begin() as conn:
        delete_row(conn, assets, asset_id, "Asset")
