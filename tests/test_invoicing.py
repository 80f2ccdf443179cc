# tests/test_invoicing.py

import re
from datetime import date, datetime

import pytest

from paintwall.accounting.invoicing import (
    LineAmounts,
    derive_status,
    effective_rate,
    generate_invoice_number,
    invoice_totals,
    line_amounts,
    paid_amount,
)
from paintwall.models.enums import InvoiceStatus

TODAY = date(2026, 3, 15)


def test_line_amounts():
    assert line_amounts(2, 1500, 825) == LineAmounts(3000, 248, 3248)
    assert line_amounts(1.5, 999, 0) == LineAmounts(1499, 0, 1499)
    with pytest.raises(ValueError):
        line_amounts(-1, 100, 0)


def test_item_rate_overrides_invoice_rate():
    assert effective_rate(None, 825) == 825
    assert effective_rate(0, 825) == 0


def test_invoice_totals():
    totals = invoice_totals([LineAmounts(100000, 8250, 108250), LineAmounts(10000, 0, 10000)])
    assert (totals.subtotal_cents, totals.tax_cents, totals.total_cents) == (110000, 8250, 118250)


def test_paid_amount_nets_refunds_and_ignores_voids():
    assert paid_amount([("posted", 10000), ("refunded", 2500), ("voided", 5000)]) == 7500
    assert paid_amount([]) == 0


@pytest.mark.parametrize(
    "current, total, paid, due, expected",
    [
        ("void", 10000, 10000, None, InvoiceStatus.void),
        ("sent", 10000, 10000, None, InvoiceStatus.paid),
        ("sent", 10000, 12000, None, InvoiceStatus.paid),
        ("sent", 10000, 5000, date(2026, 1, 1), InvoiceStatus.partially_paid),
        ("sent", 10000, 0, date(2026, 3, 14), InvoiceStatus.overdue),
        ("sent", 10000, 0, date(2026, 3, 15), InvoiceStatus.sent),
        ("draft", 10000, 0, date(2026, 1, 1), InvoiceStatus.draft),
        ("partially_paid", 10000, 0, None, InvoiceStatus.sent),
        ("overdue", 10000, 0, date(2026, 4, 1), InvoiceStatus.sent),
        ("draft", 0, 0, None, InvoiceStatus.draft),
    ],
)
def test_derive_status(current, total, paid, due, expected):
    assert derive_status(current, total, paid, due, TODAY) is expected


def test_generate_invoice_number():
    number = generate_invoice_number("INV", datetime(2026, 3, 5, 9, 30))
    assert re.fullmatch(r"INV-260305-[A-Z0-9]{6}", number)
