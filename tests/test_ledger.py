# tests/test_ledger.py

from paintwall.accounting.ledger import LedgerRow, expense_breakdown, financial_summary, owner_activity

ROWS = [
    LedgerRow(100000, "revenue", "Sales"),
    LedgerRow(-30000, "cogs", "Materials"),
    LedgerRow(-10000, "expense", "Fuel"),
    LedgerRow(-5000, "expense", "Fuel"),
    LedgerRow(-5000, "expense", None),
    LedgerRow(20000, "equity", "Owner"),
    LedgerRow(-8000, "equity", "Owner"),
]


def test_financial_summary():
    summary = financial_summary(ROWS)
    assert summary.total_revenue_cents == 100000
    assert summary.total_cogs_cents == -30000
    assert summary.total_operating_expenses_cents == -20000
    assert summary.net_profit_cents == 50000
    assert summary.owner_contributions_cents == 20000
    assert summary.owner_draws_cents == -8000
    assert summary.uncategorized_total_cents == 5000
    assert summary.transaction_count == 7


def test_expense_breakdown_sorted_with_percentages():
    breakdown = expense_breakdown(ROWS)
    assert [(b.category, b.total_cents, b.count, b.percentage) for b in breakdown] == [
        ("Fuel", 15000, 2, 75.0),
        ("Uncategorized", 5000, 1, 25.0),
    ]


def test_owner_activity():
    activity = owner_activity(ROWS)
    assert [(b.category, b.total_cents) for b in activity["contributions"]] == [("Owner", 20000)]
    assert [(b.category, b.total_cents) for b in activity["draws"]] == [("Owner", 8000)]


def test_empty_ledger():
    summary = financial_summary([])
    assert summary.net_profit_cents == 0
    assert expense_breakdown([]) == []
