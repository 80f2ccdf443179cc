# paintwall/api/receipts.py

import logging
from datetime import datetime, time
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy import func, select

from paintwall.api.crud import get_row, insert_row, list_rows, require_row, to_row, update_row
from paintwall.core.config import end_of_day, get_settings, year_bounds
from paintwall.db.engine import get_engine
from paintwall.db.operations import recalc_invoice_paid, record_receipt_transaction
from paintwall.db.schema import clients, invoices, projects, receipts
from paintwall.models.common import Page
from paintwall.models.enums import InvoiceStatus, ReceiptStatus
from paintwall.models.invoices import ReceiptCreate, ReceiptNoteIn, ReceiptOut, ReceiptRefundIn, ReceiptUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/receipts", tags=["receipts"])


def _now() -> datetime:
    """Wall-clock time in the business timezone, stored naive."""
    return datetime.now(ZoneInfo(get_settings().timezone)).replace(tzinfo=None, microsecond=0)


def _append_note(notes: Optional[str], note: Optional[str]) -> Optional[str]:
    return "\n".join(n for n in (notes, note) if n) or None


def _refunded_so_far(conn, receipt_id: int) -> int:
    return conn.execute(
        select(func.coalesce(func.sum(receipts.c.amount_cents), 0)).where(
            receipts.c.refund_of_receipt_id == receipt_id,
            receipts.c.status == ReceiptStatus.refunded.value,
        )
    ).scalar_one()


def _after_change(conn, receipt: dict, event: ReceiptStatus) -> None:
    record_receipt_transaction(conn, receipt, event)
    if receipt["invoice_id"] is not None:
        recalc_invoice_paid(conn, receipt["invoice_id"])


@router.get("", response_model=Page[ReceiptOut])
def list_receipts(
    company_id: Optional[int] = Query(default=None),
    client_id: Optional[int] = Query(default=None),
    project_id: Optional[int] = Query(default=None),
    invoice_id: Optional[int] = Query(default=None),
    status: Optional[ReceiptStatus] = Query(default=None),
    year: Optional[int] = Query(default=None, ge=1900, le=9999, description="Paid in this year"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> Page[ReceiptOut]:
    conditions = []
    if company_id is not None:
        conditions.append(receipts.c.company_id == company_id)
    if client_id is not None:
        conditions.append(receipts.c.client_id == client_id)
    if project_id is not None:
        conditions.append(receipts.c.project_id == project_id)
    if invoice_id is not None:
        conditions.append(receipts.c.invoice_id == invoice_id)
    if status is not None:
        conditions.append(receipts.c.status == status.value)
    if year is not None:
        first, last = year_bounds(year)
        conditions.append(receipts.c.paid_at.between(datetime.combine(first, time.min), end_of_day(last)))

    order = [receipts.c.paid_at.desc(), receipts.c.id.desc()]
    engine = get_engine()
    with engine.connect() as conn:
        rows, total = list_rows(conn, receipts, conditions, order, limit, offset)
    return Page[ReceiptOut](items=rows, total=total, limit=limit, offset=offset)


@router.post("", response_model=ReceiptOut, status_code=201)
def create_receipt(payload: ReceiptCreate) -> ReceiptOut:
    """
    Post a payment. When it is applied to an invoice the invoice's paid
    amount, balance and status are rolled up in the same transaction.
    """
    values = to_row(payload.model_dump())
    values["paid_at"] = values["paid_at"] or _now()
    values["status"] = ReceiptStatus.posted.value

    engine = get_engine()
    with engine.begin() as conn:
        client = require_row(conn, clients, payload.client_id, "Client")
        invoice = require_row(conn, invoices, payload.invoice_id, "Invoice")
        if invoice is not None:
            if invoice["client_id"] != client["id"]:
                raise HTTPException(status_code=400, detail="Invoice belongs to a different client")
            if invoice["status"] == InvoiceStatus.void.value:
                raise HTTPException(status_code=409, detail="Cannot post a payment to a void invoice")
        project = require_row(conn, projects, payload.project_id, "Project")
        if project is not None and project["client_id"] != client["id"]:
            raise HTTPException(status_code=400, detail="Project belongs to a different client")

        if invoice is not None:
            values["project_id"] = values["project_id"] or invoice["project_id"]
            values["currency"] = values["currency"] or invoice["currency"]
        values["currency"] = (values["currency"] or get_settings().default_currency).upper()
        values["company_id"] = client["company_id"]

        row = insert_row(conn, receipts, values, "Receipt")
        _after_change(conn, row, ReceiptStatus.posted)
    logger.info("Posted receipt %s: %s cents from client %s", row["id"], row["amount_cents"], row["client_id"])
    return ReceiptOut.model_validate(row)


@router.get("/{receipt_id}", response_model=ReceiptOut)
def get_receipt(receipt_id: int) -> ReceiptOut:
    engine = get_engine()
    with engine.connect() as conn:
        row = get_row(conn, receipts, receipt_id, "Receipt")
    return ReceiptOut.model_validate(row)


@router.patch("/{receipt_id}", response_model=ReceiptOut)
def update_receipt(receipt_id: int, payload: ReceiptUpdate) -> ReceiptOut:
    """
    Payment details only; the amount and invoice of a receipt are fixed once
    posted. Void it and post a new one to change them.
    """
    values = payload.model_dump(exclude_unset=True)
    for column in ("payment_method", "paid_at"):
        if column in values and values[column] is None:
            raise HTTPException(status_code=400, detail=f"{column} cannot be null")

    engine = get_engine()
    with engine.begin() as conn:
        current = get_row(conn, receipts, receipt_id, "Receipt")
        if current["status"] == ReceiptStatus.voided.value:
            raise HTTPException(status_code=409, detail="Receipt is voided")
        row = update_row(conn, receipts, receipt_id, values, "Receipt")
    return ReceiptOut.model_validate(row)


@router.post("/{receipt_id}/void", response_model=ReceiptOut)
def void_receipt(receipt_id: int, payload: Optional[ReceiptNoteIn] = None) -> ReceiptOut:
    note = payload.note if payload is not None else None
    engine = get_engine()
    with engine.begin() as conn:
        current = get_row(conn, receipts, receipt_id, "Receipt")
        if current["status"] == ReceiptStatus.voided.value:
            raise HTTPException(status_code=409, detail="Receipt is already voided")
        if current["refund_of_receipt_id"] is None and _refunded_so_far(conn, receipt_id):
            raise HTTPException(status_code=409, detail="Void the refunds of this receipt first")

        row = update_row(
            conn,
            receipts,
            receipt_id,
            {"status": ReceiptStatus.voided, "notes": _append_note(current["notes"], note)},
            "Receipt",
        )
        _after_change(conn, row, ReceiptStatus.voided)
    logger.info("Voided receipt %s", receipt_id)
    return ReceiptOut.model_validate(row)


@router.post("/{receipt_id}/refund", response_model=ReceiptOut, status_code=201)
def refund_receipt(receipt_id: int, payload: Optional[ReceiptRefundIn] = None) -> ReceiptOut:
    """
    Return money against a posted receipt. The refund is its own receipt row
    with status ``refunded``; the response is that row.
    """
    payload = payload or ReceiptRefundIn()
    engine = get_engine()
    with engine.begin() as conn:
        original = get_row(conn, receipts, receipt_id, "Receipt")
        if original["status"] != ReceiptStatus.posted.value or original["refund_of_receipt_id"] is not None:
            raise HTTPException(status_code=409, detail="Only posted payments can be refunded")

        remaining = original["amount_cents"] - _refunded_so_far(conn, receipt_id)
        amount = payload.amount_cents or remaining
        if amount <= 0 or amount > remaining:
            raise HTTPException(
                status_code=400,
                detail=f"Refund must be between 1 and {remaining} cents",
            )

        row = insert_row(
            conn,
            receipts,
            {
                "company_id": original["company_id"],
                "client_id": original["client_id"],
                "project_id": original["project_id"],
                "invoice_id": original["invoice_id"],
                "refund_of_receipt_id": receipt_id,
                "amount_cents": amount,
                "currency": original["currency"],
                "paid_at": _now(),
                "payment_method": original["payment_method"],
                "status": ReceiptStatus.refunded,
                "notes": _append_note(f"Refund of receipt #{receipt_id}", payload.note),
            },
            "Receipt",
        )
        _after_change(conn, row, ReceiptStatus.refunded)
    logger.info("Refunded %s cents of receipt %s", amount, receipt_id)
    return ReceiptOut.model_validate(row)
