# paintwall/api/invoices.py

import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy import and_, func, select

from paintwall.accounting.invoicing import generate_invoice_number
from paintwall.api.crud import get_row, list_rows, require_row, search, to_row, update_row
from paintwall.core.config import business_today, get_settings, year_bounds
from paintwall.db.engine import get_engine
from paintwall.db.operations import recalc_invoice_totals
from paintwall.db.schema import clients, invoice_items, invoices, projects, properties
from paintwall.models.common import Page, ReorderIn
from paintwall.models.enums import InvoiceStatus
from paintwall.models.invoices import (
    InvoiceCreate,
    InvoiceFull,
    InvoiceItemIn,
    InvoiceItemUpdate,
    InvoiceOut,
    InvoiceUpdate,
    InvoiceVoidIn,
    InvoiceWithItems,
    PastDueInvoiceItem,
    PastDueResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["invoices"])


def _items(conn, invoice_id: int) -> List[dict]:
    rows = conn.execute(
        select(invoice_items)
        .where(invoice_items.c.invoice_id == invoice_id)
        .order_by(invoice_items.c.sort_order, invoice_items.c.id)
    ).mappings()
    return [dict(r) for r in rows]


def _with_items(conn, invoice_id: int) -> InvoiceWithItems:
    invoice = get_row(conn, invoices, invoice_id, "Invoice")
    return InvoiceWithItems.model_validate(dict(invoice, items=_items(conn, invoice_id)))


def _editable(conn, invoice_id: int) -> dict:
    invoice = get_row(conn, invoices, invoice_id, "Invoice")
    if invoice["status"] == InvoiceStatus.void.value:
        raise HTTPException(status_code=409, detail="Invoice is void")
    return invoice


def _check_links(conn, client_id: int, project_id: Optional[int], property_id: Optional[int]) -> None:
    project = require_row(conn, projects, project_id, "Project")
    if project is not None and project["client_id"] != client_id:
        raise HTTPException(status_code=400, detail="Project belongs to a different client")
    prop = require_row(conn, properties, property_id, "Property")
    if prop is not None and prop["client_id"] != client_id:
        raise HTTPException(status_code=400, detail="Property belongs to a different client")


def _insert_item(conn, invoice: dict, item: InvoiceItemIn, sort_order: int) -> None:
    values = item.model_dump()
    if values["sort_order"] is None:
        values["sort_order"] = sort_order
    conn.execute(
        invoice_items.insert().values(**values, company_id=invoice["company_id"], invoice_id=invoice["id"])
    )


@router.get("", response_model=Page[InvoiceOut])
def list_invoices(
    company_id: Optional[int] = Query(default=None),
    client_id: Optional[int] = Query(default=None),
    project_id: Optional[int] = Query(default=None),
    status: Optional[InvoiceStatus] = Query(default=None),
    year: Optional[int] = Query(default=None, ge=1900, le=9999, description="Issued in this year"),
    q: Optional[str] = Query(default=None, description="Searches invoice number and notes"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> Page[InvoiceOut]:
    conditions = []
    if company_id is not None:
        conditions.append(invoices.c.company_id == company_id)
    if client_id is not None:
        conditions.append(invoices.c.client_id == client_id)
    if project_id is not None:
        conditions.append(invoices.c.project_id == project_id)
    if status is not None:
        conditions.append(invoices.c.status == status.value)
    if year is not None:
        first, last = year_bounds(year)
        conditions.append(invoices.c.issued_date.between(first, last))
    if q and q.strip():
        conditions.append(search(q, invoices.c.invoice_number, invoices.c.notes))

    order = [invoices.c.issued_date.desc(), invoices.c.id.desc()]
    engine = get_engine()
    with engine.connect() as conn:
        rows, total = list_rows(conn, invoices, conditions, order, limit, offset)
    return Page[InvoiceOut](items=rows, total=total, limit=limit, offset=offset)


@router.get("/past-due", response_model=PastDueResponse)
def list_past_due_invoices(
    as_of: Optional[date] = Query(
        default=None,
        description="ISO date (YYYY-MM-DD); defaults to today in the business timezone",
    ),
    company_id: Optional[int] = Query(default=None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    sort: Optional[str] = Query(
        default="due_date.asc",
        description="due_date.asc | due_date.desc",
    ),
) -> PastDueResponse:
    """
    Invoices with an outstanding balance whose due date is before as_of.
    Drafts and void invoices are never past due.
    """
    if as_of is None:
        as_of = business_today()

    if sort == "due_date.desc":
        order_clause = invoices.c.due_date.desc()
    else:
        order_clause = invoices.c.due_date.asc()

    conditions = [
        invoices.c.balance_cents > 0,
        invoices.c.due_date < as_of,
        invoices.c.status.notin_([InvoiceStatus.draft.value, InvoiceStatus.void.value]),
    ]
    if company_id is not None:
        conditions.append(invoices.c.company_id == company_id)
    base_where = and_(*conditions)

    engine = get_engine()
    with engine.connect() as conn:
        total = conn.execute(select(func.count()).where(base_where)).scalar_one()

        stmt = (
            select(
                invoices.c.id,
                invoices.c.invoice_number,
                invoices.c.client_id,
                clients.c.display_name.label("client_name"),
                invoices.c.issued_date,
                invoices.c.due_date,
                invoices.c.total_cents,
                invoices.c.paid_cents,
                invoices.c.balance_cents,
                invoices.c.currency,
                invoices.c.status,
            )
            .select_from(invoices.join(clients))
            .where(base_where)
            .order_by(order_clause, invoices.c.id)
            .limit(limit)
            .offset(offset)
        )
        rows = conn.execute(stmt).mappings().all()

    items = [
        PastDueInvoiceItem(**row, days_past_due=(as_of - row["due_date"]).days)
        for row in rows
    ]
    return PastDueResponse(as_of=as_of, items=items, total=total, limit=limit, offset=offset)


@router.post("", response_model=InvoiceWithItems, status_code=201)
def create_invoice(payload: InvoiceCreate) -> InvoiceWithItems:
    settings = get_settings()
    values = to_row(payload.model_dump(exclude={"items"}))
    values["invoice_number"] = values["invoice_number"] or generate_invoice_number(settings.invoice_number_prefix)
    values["issued_date"] = values["issued_date"] or business_today()
    values["currency"] = (values["currency"] or settings.default_currency).upper()
    if values["tax_rate_bps"] is None:
        values["tax_rate_bps"] = settings.default_tax_rate_bps
    if values["status"] == InvoiceStatus.void.value:
        raise HTTPException(status_code=400, detail="An invoice cannot be created void")
    if values["due_date"] and values["due_date"] < values["issued_date"]:
        raise HTTPException(status_code=400, detail="due_date is before issued_date")

    engine = get_engine()
    with engine.begin() as conn:
        client = require_row(conn, clients, payload.client_id, "Client")
        _check_links(conn, client["id"], payload.project_id, payload.property_id)
        values["company_id"] = client["company_id"]

        result = conn.execute(invoices.insert().values(**values))
        invoice = get_row(conn, invoices, result.inserted_primary_key[0], "Invoice")
        for position, item in enumerate(payload.items):
            _insert_item(conn, invoice, item, position)
        recalc_invoice_totals(conn, invoice["id"])
        out = _with_items(conn, invoice["id"])
    logger.info("Created invoice %s (%s) total %s", out.id, out.invoice_number, out.total_cents)
    return out


@router.get("/{invoice_id}", response_model=InvoiceWithItems)
def get_invoice(invoice_id: int) -> InvoiceWithItems:
    engine = get_engine()
    with engine.connect() as conn:
        return _with_items(conn, invoice_id)


@router.get("/{invoice_id}/full", response_model=InvoiceFull)
def get_invoice_full(invoice_id: int) -> InvoiceFull:
    """
    The invoice with its items, client, property and project in one response.
    """
    engine = get_engine()
    with engine.connect() as conn:
        invoice = get_row(conn, invoices, invoice_id, "Invoice")
        client = get_row(conn, clients, invoice["client_id"], "Client")
        prop = get_row(conn, properties, invoice["property_id"], "Property") if invoice["property_id"] else None
        project = get_row(conn, projects, invoice["project_id"], "Project") if invoice["project_id"] else None
        items = _items(conn, invoice_id)
    return InvoiceFull.model_validate(dict(invoice, items=items, client=client, property=prop, project=project))


@router.patch("/{invoice_id}", response_model=InvoiceWithItems)
def update_invoice(invoice_id: int, payload: InvoiceUpdate) -> InvoiceWithItems:
    values = payload.model_dump(exclude_unset=True)
    if values.get("status") == InvoiceStatus.void:
        raise HTTPException(status_code=400, detail="Use POST /invoices/{id}/void to void an invoice")
    for column in ("status", "tax_rate_bps"):
        if column in values and values[column] is None:
            raise HTTPException(status_code=400, detail=f"{column} cannot be null")

    engine = get_engine()
    with engine.begin() as conn:
        invoice = _editable(conn, invoice_id)
        _check_links(
            conn,
            invoice["client_id"],
            values.get("project_id"),
            values.get("property_id"),
        )
        issued = values.get("issued_date") or invoice["issued_date"]
        due = values.get("due_date", invoice["due_date"])
        if due and due < issued:
            raise HTTPException(status_code=400, detail="due_date is before issued_date")
        update_row(conn, invoices, invoice_id, values, "Invoice")
        recalc_invoice_totals(conn, invoice_id)
        return _with_items(conn, invoice_id)


@router.delete("/{invoice_id}", status_code=204)
def delete_invoice(invoice_id: int) -> None:
    engine = get_engine()
    with engine.begin() as conn:
        invoice = get_row(conn, invoices, invoice_id, "Invoice")
        if invoice["status"] != InvoiceStatus.draft.value:
            raise HTTPException(status_code=409, detail="Only draft invoices can be deleted; void it instead")
        conn.execute(invoices.delete().where(invoices.c.id == invoice_id))
    logger.info("Deleted draft invoice %s", invoice_id)


@router.post("/{invoice_id}/void", response_model=InvoiceWithItems)
def void_invoice(invoice_id: int, payload: Optional[InvoiceVoidIn] = None) -> InvoiceWithItems:
    engine = get_engine()
    with engine.begin() as conn:
        invoice = _editable(conn, invoice_id)
        values = {"status": InvoiceStatus.void, "balance_cents": 0}
        if payload is not None and payload.reason:
            values["notes"] = "\n".join(n for n in (invoice["notes"], f"Void: {payload.reason}") if n)
        update_row(conn, invoices, invoice_id, values, "Invoice")
        out = _with_items(conn, invoice_id)
    logger.info("Voided invoice %s", invoice_id)
    return out


@router.post("/{invoice_id}/recalc", response_model=InvoiceWithItems)
def recalc_invoice(invoice_id: int) -> InvoiceWithItems:
    engine = get_engine()
    with engine.begin() as conn:
        get_row(conn, invoices, invoice_id, "Invoice")
        recalc_invoice_totals(conn, invoice_id)
        return _with_items(conn, invoice_id)


# ---- Items ----

@router.post("/{invoice_id}/items", response_model=InvoiceWithItems, status_code=201)
def add_invoice_item(invoice_id: int, payload: InvoiceItemIn) -> InvoiceWithItems:
    engine = get_engine()
    with engine.begin() as conn:
        invoice = _editable(conn, invoice_id)
        next_order = conn.execute(
            select(func.coalesce(func.max(invoice_items.c.sort_order) + 1, 0)).where(
                invoice_items.c.invoice_id == invoice_id
            )
        ).scalar_one()
        _insert_item(conn, invoice, payload, next_order)
        recalc_invoice_totals(conn, invoice_id)
        return _with_items(conn, invoice_id)


def _item_of(conn, invoice_id: int, item_id: int) -> dict:
    item = get_row(conn, invoice_items, item_id, "Invoice item")
    if item["invoice_id"] != invoice_id:
        raise HTTPException(status_code=404, detail="Invoice item not found")
    return item


@router.patch("/{invoice_id}/items/{item_id}", response_model=InvoiceWithItems)
def update_invoice_item(invoice_id: int, item_id: int, payload: InvoiceItemUpdate) -> InvoiceWithItems:
    values = payload.model_dump(exclude_unset=True)
    for column in ("name", "quantity", "unit_price_cents", "sort_order"):
        if column in values and values[column] is None:
            raise HTTPException(status_code=400, detail=f"{column} cannot be null")

    engine = get_engine()
    with engine.begin() as conn:
        _editable(conn, invoice_id)
        _item_of(conn, invoice_id, item_id)
        update_row(conn, invoice_items, item_id, values, "Invoice item")
        recalc_invoice_totals(conn, invoice_id)
        return _with_items(conn, invoice_id)


@router.delete("/{invoice_id}/items/{item_id}", response_model=InvoiceWithItems)
def delete_invoice_item(invoice_id: int, item_id: int) -> InvoiceWithItems:
    engine = get_engine()
    with engine.begin() as conn:
        _editable(conn, invoice_id)
        _item_of(conn, invoice_id, item_id)
        conn.execute(invoice_items.delete().where(invoice_items.c.id == item_id))
        recalc_invoice_totals(conn, invoice_id)
        return _with_items(conn, invoice_id)


@router.post("/{invoice_id}/items/reorder", response_model=InvoiceWithItems)
def reorder_invoice_items(invoice_id: int, payload: ReorderIn) -> InvoiceWithItems:
    """
    Rewrite sort_order from the given id order. The list must name every
    item of the invoice exactly once.
    """
    engine = get_engine()
    with engine.begin() as conn:
        _editable(conn, invoice_id)
        current = {item["id"] for item in _items(conn, invoice_id)}
        if len(payload.ids) != len(set(payload.ids)) or set(payload.ids) != current:
            raise HTTPException(status_code=400, detail="ids must list every item of the invoice exactly once")
        for position, item_id in enumerate(payload.ids):
            conn.execute(
                invoice_items.update().where(invoice_items.c.id == item_id).values(sort_order=position)
            )
        return _with_items(conn, invoice_id)
