# paintwall/api/accounts.py
"""
Chart of accounts. Every financial transaction posts to one account, and the
account's type decides where it lands in the profit & loss summary.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

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
from paintwall.db.schema import accounts, companies
from paintwall.models.common import Page
from paintwall.models.enums import AccountType
from paintwall.models.finance import AccountCreate, AccountOut, AccountUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("", response_model=Page[AccountOut])
def list_accounts(
    company_id: Optional[int] = Query(default=None),
    type: Optional[AccountType] = Query(default=None),
    is_active: Optional[bool] = Query(default=None),
    q: Optional[str] = Query(default=None, description="Searches name, code and description"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> Page[AccountOut]:
    conditions = []
    if company_id is not None:
        conditions.append(accounts.c.company_id == company_id)
    if type is not None:
        conditions.append(accounts.c.type == type.value)
    if is_active is not None:
        conditions.append(accounts.c.is_active.is_(is_active))
    if q and q.strip():
        conditions.append(search(q, accounts.c.name, accounts.c.code, accounts.c.description))

    order = [accounts.c.type, accounts.c.code, accounts.c.name, accounts.c.id]
    engine = get_engine()
    with engine.connect() as conn:
        rows, total = list_rows(conn, accounts, conditions, order, limit, offset)
    return Page[AccountOut](items=rows, total=total, limit=limit, offset=offset)


@router.post("", response_model=AccountOut, status_code=201)
def create_account(payload: AccountCreate) -> AccountOut:
    engine = get_engine()
    with engine.begin() as conn:
        require_row(conn, companies, payload.company_id, "Company")
        require_owned(conn, accounts, payload.parent_account_id, payload.company_id, "Parent account")
        row = insert_row(conn, accounts, payload.model_dump(), "Account")
    logger.info("Created %s account %s (%s)", row["type"], row["id"], row["name"])
    return AccountOut.model_validate(row)


@router.get("/{account_id}", response_model=AccountOut)
def get_account(account_id: int) -> AccountOut:
    engine = get_engine()
    with engine.connect() as conn:
        row = get_row(conn, accounts, account_id, "Account")
    return AccountOut.model_validate(row)


@router.patch("/{account_id}", response_model=AccountOut)
def update_account(account_id: int, payload: AccountUpdate) -> AccountOut:
    values = payload.model_dump(exclude_unset=True)
    for column in ("name", "type", "is_active"):
        if column in values and values[column] is None:
            raise HTTPException(status_code=400, detail=f"{column} cannot be null")
    if values.get("parent_account_id") == account_id:
        raise HTTPException(status_code=400, detail="An account cannot be its own parent")

    engine = get_engine()
    with engine.begin() as conn:
        current = get_row(conn, accounts, account_id, "Account")
        require_owned(conn, accounts, values.get("parent_account_id"), current["company_id"], "Parent account")
        row = update_row(conn, accounts, account_id, values, "Account")
    return AccountOut.model_validate(row)


@router.delete("/{account_id}", status_code=204)
def delete_account(account_id: int) -> None:
    """Accounts with transactions cannot be deleted (409); deactivate them instead."""
    engine = get_engine()
    with engine.begin() as conn:
        delete_row(conn, accounts, account_id, "Account")
