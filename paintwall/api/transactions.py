# paintwall/api/transactions.py

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy import select

from paintwall.accounting.ledger import LedgerRow, expense_breakdown, financial_summary, owner_activity
from paintwall.api.crud import get_row, insert_row, list_rows, require_owned, require_row, search, update_row
from paintwall.core.config import get_settings
from paintwall.db.engine import get_engine
from paintwall.db.schema import (
    accounts,
    clients,
    companies,
    financial_documents,
    financial_transactions,
    invoices,
    projects,
    vendors,
)
from paintwall.models.common import Page
from paintwall.models.enums import TransactionSource
from paintwall.models.finance import (
    FinancialSummaryOut,
    TransactionCreate,
    TransactionOut,
    TransactionUpdate,
    TransactionWithDocuments,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/transactions", tags=["transactions"])

# written by receipt posting / refund / void; edited only through the receipt
_SYSTEM_SOURCES = {
    TransactionSource.receipt_posted.value,
    TransactionSource.receipt_refunded.value,
    TransactionSource.receipt_voided.value,
}


def _check_references(conn, values: dict, company_id: int) -> None:
    require_owned(conn, accounts, values.get("account_id"), company_id, "Account")
    require_owned(conn, vendors, values.get("vendor_id"), company_id, "Vendor")
    require_owned(conn, clients, values.get("client_id"), company_id, "Client")
    require_owned(conn, projects, values.get("project_id"), company_id, "Project")
    require_owned(conn, invoices, values.get("invoice_id"), company_id, "Invoice")


def _date_range(column, date_from: Optional[date], date_to: Optional[date]):
    if date_from and date_to and date_to < date_from:
        raise HTTPException(status_code=400, detail="date_to is before date_from")
    conditions = []
    if date_from is not None:
        conditions.append(column >= date_from)
    if date_to is not None:
        conditions.append(column <= date_to)
    return conditions


@router.get("", response_model=Page[TransactionOut])
def list_transactions(
    company_id: Optional[int] = Query(default=None),
    account_id: Optional[int] = Query(default=None),
    vendor_id: Optional[int] = Query(default=None),
    client_id: Optional[int] = Query(default=None),
    project_id: Optional[int] = Query(default=None),
    source: Optional[TransactionSource] = Query(default=None),
    date_from: Optional[date] = Query(default=None),
    date_to: Optional[date] = Query(default=None),
    q: Optional[str] = Query(default=None, description="Searches description, memo and reference"),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
) -> Page[TransactionOut]:
    t = financial_transactions
    conditions = _date_range(t.c.transaction_date, date_from, date_to)
    for column, value in (
        (t.c.company_id, company_id),
        (t.c.account_id, account_id),
        (t.c.vendor_id, vendor_id),
        (t.c.client_id, client_id),
        (t.c.project_id, project_id),
    ):
        if value is not None:
            conditions.append(column == value)
    if source is not None:
        conditions.append(t.c.source == source.value)
    if q and q.strip():
        conditions.append(search(q, t.c.description, t.c.memo, t.c.reference_number))

    order = [t.c.transaction_date.desc(), t.c.id.desc()]
    engine = get_engine()
    with engine.connect() as conn:
        rows, total = list_rows(conn, t, conditions, order, limit, offset)
    return Page[TransactionOut](items=rows, total=total, limit=limit, offset=offset)


@router.get("/summary", response_model=FinancialSummaryOut)
def transactions_summary(
    company_id: int = Query(...),
    date_from: Optional[date] = Query(default=None),
    date_to: Optional[date] = Query(default=None),
) -> FinancialSummaryOut:
    """
    Profit & loss over a date range: revenue, cost of goods, operating
    expenses by account, and owner contributions / draws.
    """
    t = financial_transactions
    conditions = [t.c.company_id == company_id] + _date_range(t.c.transaction_date, date_from, date_to)

    engine = get_engine()
    with engine.connect() as conn:
        require_row(conn, companies, company_id, "Company")
        stmt = (
            select(t.c.amount_cents, accounts.c.type, accounts.c.name)
            .select_from(t.join(accounts, t.c.account_id == accounts.c.id))
            .where(*conditions)
        )
        rows = [LedgerRow(r.amount_cents, r.type, r.name) for r in conn.execute(stmt)]

    summary = financial_summary(rows)
    owners = owner_activity(rows)
    return FinancialSummaryOut(
        date_from=date_from,
        date_to=date_to,
        **vars(summary),
        operating_expenses=[vars(b) for b in expense_breakdown(rows)],
        owner_contributions=[vars(b) for b in owners["contributions"]],
        owner_draws=[vars(b) for b in owners["draws"]],
    )


@router.post("", response_model=TransactionOut, status_code=201)
def create_transaction(payload: TransactionCreate) -> TransactionOut:
    values = payload.model_dump()
    values["currency"] = (values["currency"] or get_settings().default_currency).upper()
    values["source"] = TransactionSource.manual

    engine = get_engine()
    with engine.begin() as conn:
        require_row(conn, companies, payload.company_id, "Company")
        _check_references(conn, values, payload.company_id)
        row = insert_row(conn, financial_transactions, values, "Transaction")
    logger.info("Recorded transaction %s: %s cents", row["id"], row["amount_cents"])
    return TransactionOut.model_validate(row)


@router.get("/{transaction_id}", response_model=TransactionWithDocuments)
def get_transaction(transaction_id: int) -> TransactionWithDocuments:
    engine = get_engine()
    with engine.connect() as conn:
        row = get_row(conn, financial_transactions, transaction_id, "Transaction")
        documents = conn.execute(
            select(financial_documents)
            .where(financial_documents.c.transaction_id == transaction_id)
            .order_by(financial_documents.c.id)
        ).mappings().all()
    return TransactionWithDocuments.model_validate(dict(row, documents=[dict(d) for d in documents]))


def _manual(conn, transaction_id: int) -> dict:
    row = get_row(conn, financial_transactions, transaction_id, "Transaction")
    if row["source"] in _SYSTEM_SOURCES:
        raise HTTPException(status_code=409, detail="Receipt transactions change only through their receipt")
    return row


@router.patch("/{transaction_id}", response_model=TransactionOut)
def update_transaction(transaction_id: int, payload: TransactionUpdate) -> TransactionOut:
    values = payload.model_dump(exclude_unset=True)
    for column in ("account_id", "transaction_date", "amount_cents", "description"):
        if column in values and values[column] is None:
            raise HTTPException(status_code=400, detail=f"{column} cannot be null")

    engine = get_engine()
    with engine.begin() as conn:
        current = _manual(conn, transaction_id)
        _check_references(conn, values, current["company_id"])
        row = update_row(conn, financial_transactions, transaction_id, values, "Transaction")
    return TransactionOut.model_validate(row)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(transaction_id: int) -> None:
    engine = get_engine()
    with engine.begin() as conn:
        _manual(conn, transaction_id)
        conn.execute(financial_transactions.delete().where(financial_transactions.c.id == transaction_id))
    logger.info("Deleted transaction %s", transaction_id)
