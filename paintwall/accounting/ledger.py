# paintwall/accounting/ledger.py
"""
Profit & loss views over financial transactions.

Amounts are signed cents (income positive, spending negative), so net profit
is the plain sum of revenue, cost of goods sold and operating expenses.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from paintwall.models.enums import AccountType

UNCATEGORIZED = "Uncategorized"


@dataclass
class LedgerRow:
    amount_cents: int
    account_type: str
    category: Optional[str] = None


@dataclass
class FinancialSummary:
    total_revenue_cents: int
    total_cogs_cents: int
    total_operating_expenses_cents: int
    net_profit_cents: int
    owner_contributions_cents: int
    owner_draws_cents: int
    uncategorized_total_cents: int
    transaction_count: int


@dataclass
class CategoryBreakdown:
    category: str
    total_cents: int
    count: int
    percentage: float


def financial_summary(rows: Iterable[LedgerRow]) -> FinancialSummary:
    revenue = cogs = expenses = contributions = draws = uncategorized = 0
    count = 0
    for row in rows:
        count += 1
        if not row.category or row.category.lower() == UNCATEGORIZED.lower():
            uncategorized += abs(row.amount_cents)

        kind = AccountType(row.account_type)
        if kind is AccountType.revenue:
            revenue += row.amount_cents
        elif kind is AccountType.cogs:
            cogs += row.amount_cents
        elif kind is AccountType.expense:
            expenses += row.amount_cents
        elif kind is AccountType.equity:
            if row.amount_cents < 0:
                draws += row.amount_cents
            else:
                contributions += row.amount_cents

    return FinancialSummary(
        total_revenue_cents=revenue,
        total_cogs_cents=cogs,
        total_operating_expenses_cents=expenses,
        net_profit_cents=revenue + cogs + expenses,
        owner_contributions_cents=contributions,
        owner_draws_cents=draws,
        uncategorized_total_cents=uncategorized,
        transaction_count=count,
    )


def _group(rows: Iterable[LedgerRow]) -> Dict[str, List[int]]:
    groups: Dict[str, List[int]] = {}
    for row in rows:
        groups.setdefault(row.category or UNCATEGORIZED, []).append(abs(row.amount_cents))
    return groups


def _breakdown(groups: Dict[str, List[int]], with_percentage: bool) -> List[CategoryBreakdown]:
    grand_total = sum(sum(v) for v in groups.values())
    out = [
        CategoryBreakdown(
            category=category,
            total_cents=sum(amounts),
            count=len(amounts),
            percentage=round(sum(amounts) / grand_total * 100, 2) if with_percentage and grand_total else 0.0,
        )
        for category, amounts in groups.items()
    ]
    out.sort(key=lambda b: b.total_cents, reverse=True)
    return out


def expense_breakdown(rows: Iterable[LedgerRow]) -> List[CategoryBreakdown]:
    expenses = [r for r in rows if AccountType(r.account_type) is AccountType.expense]
    return _breakdown(_group(expenses), with_percentage=True)


def owner_activity(rows: Iterable[LedgerRow]) -> Dict[str, List[CategoryBreakdown]]:
    equity = [r for r in rows if AccountType(r.account_type) is AccountType.equity]
    return {
        "contributions": _breakdown(_group(r for r in equity if r.amount_cents > 0), with_percentage=False),
        "draws": _breakdown(_group(r for r in equity if r.amount_cents < 0), with_percentage=False),
    }
