# paintwall/accounting/invoicing.py
"""
Invoice arithmetic: line totals, invoice roll-ups, paid amounts and status.
"""

import secrets
import string
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from paintwall.core.money import apply_bps, round_half_up
from paintwall.models.enums import InvoiceStatus, ReceiptStatus

# Status the system assigns from payments; anything else was set by a person.
_PAYMENT_STATUSES = {InvoiceStatus.paid, InvoiceStatus.partially_paid, InvoiceStatus.overdue}

_NUMBER_ALPHABET = string.ascii_uppercase + string.digits


@dataclass
class LineAmounts:
    subtotal_cents: int
    tax_cents: int
    total_cents: int


@dataclass
class InvoiceTotals:
    subtotal_cents: int
    tax_cents: int
    total_cents: int


def line_amounts(quantity: float, unit_price_cents: int, tax_rate_bps: int) -> LineAmounts:
    if quantity < 0:
        raise ValueError("quantity must not be negative")
    subtotal = round_half_up(quantity * unit_price_cents)
    tax = apply_bps(subtotal, tax_rate_bps)
    return LineAmounts(subtotal, tax, subtotal + tax)


def effective_rate(item_rate_bps: Optional[int], invoice_rate_bps: int) -> int:
    return invoice_rate_bps if item_rate_bps is None else item_rate_bps


def invoice_totals(lines: Iterable[LineAmounts]) -> InvoiceTotals:
    subtotal = tax = 0
    for line in lines:
        subtotal += line.subtotal_cents
        tax += line.tax_cents
    return InvoiceTotals(subtotal, tax, subtotal + tax)


def paid_amount(receipts: Iterable[tuple]) -> int:
    """
    Net amount paid from ``(status, amount_cents)`` pairs: posted receipts
    count, refunded ones are taken back, voided ones never happened.
    """
    paid = 0
    for status, amount in receipts:
        status = ReceiptStatus(status)
        if status is ReceiptStatus.posted:
            paid += amount
        elif status is ReceiptStatus.refunded:
            paid -= amount
    return paid


def derive_status(
    current: str,
    total_cents: int,
    paid_cents: int,
    due_date: Optional[date],
    today: date,
) -> InvoiceStatus:
    current = InvoiceStatus(current)
    if current is InvoiceStatus.void:
        return current
    if total_cents > 0 and paid_cents >= total_cents:
        return InvoiceStatus.paid
    if paid_cents > 0:
        return InvoiceStatus.partially_paid
    if current in (InvoiceStatus.sent, InvoiceStatus.overdue) and due_date is not None and due_date < today:
        return InvoiceStatus.overdue
    if current in _PAYMENT_STATUSES:
        # payments were refunded or voided away
        return InvoiceStatus.sent
    return current


def generate_invoice_number(prefix: str = "INV", now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    suffix = "".join(secrets.choice(_NUMBER_ALPHABET) for _ in range(6))
    return f"{prefix}-{now:%y%m%d}-{suffix}"
