# paintwall/db/operations.py
"""
Stored-figure recalculations shared by several routers.

Each function takes an open connection (inside the caller's transaction)
and the id of a row the caller has already checked exists.
"""

import dataclasses
import logging
from datetime import date, datetime
from typing import Optional, Tuple

from sqlalchemy import case, func, select

from paintwall.accounting.invoicing import (
    derive_status,
    effective_rate,
    invoice_totals,
    line_amounts,
    paid_amount,
)
from paintwall.core.config import business_today, end_of_day, year_bounds
from paintwall.core.money import round_half_up
from paintwall.db.schema import (
    accounts,
    company_financial_profiles,
    financial_transactions,
    invoice_items,
    invoices,
    project_estimate_lines,
    project_estimates,
    projects,
    receipts,
)
from paintwall.estimating.production import (
    FinancialProfile,
    ProfileRates,
    estimate_line,
    estimate_totals,
    project_cost,
    recalc_financial_profile,
)
from paintwall.models.enums import (
    AccountType,
    InvoiceStatus,
    ProjectStatus,
    ReceiptStatus,
    TransactionSource,
)

logger = logging.getLogger(__name__)

_PROFILE_FIELDS = [f.name for f in dataclasses.fields(FinancialProfile)]

PENDING_STATUSES = (ProjectStatus.scheduled, ProjectStatus.in_progress, ProjectStatus.on_hold)


def _one(conn, table, key_column, key):
    return dict(conn.execute(select(table).where(key_column == key)).mappings().one())


# ---- GPP ----

def company_profile(conn, company_id: int) -> Tuple[FinancialProfile, ProfileRates]:
    """The company's saved profile and rates, or the defaults when none is saved."""
    row = conn.execute(
        select(company_financial_profiles).where(company_financial_profiles.c.company_id == company_id)
    ).mappings().first()
    if row is None:
        profile = FinancialProfile()
    else:
        profile = FinancialProfile(**{name: row[name] for name in _PROFILE_FIELDS})
    return profile, recalc_financial_profile(profile)


def recalc_company_gpp_rates(conn, company_id: int):
    profile, rates = company_profile(conn, company_id)
    conn.execute(
        company_financial_profiles.update()
        .where(company_financial_profiles.c.company_id == company_id)
        .values(**dataclasses.asdict(rates))
    )
    logger.info(
        "Company %s GPP rates: billable %s c/h over %.0f sellable hours",
        company_id,
        rates.billable_rate_per_hour_cents,
        rates.sellable_man_hours,
    )
    return _one(conn, company_financial_profiles, company_financial_profiles.c.company_id, company_id)


# ---- Invoices ----

def recalc_invoice_paid(conn, invoice_id: int, today: Optional[date] = None):
    today = today or business_today()
    invoice = _one(conn, invoices, invoices.c.id, invoice_id)

    rows = conn.execute(
        select(receipts.c.status, receipts.c.amount_cents).where(receipts.c.invoice_id == invoice_id)
    ).all()
    paid = paid_amount((r.status, r.amount_cents) for r in rows)
    status = derive_status(invoice["status"], invoice["total_cents"], paid, invoice["due_date"], today)
    # A void invoice owes nothing whatever its receipts say.
    balance = 0 if status is InvoiceStatus.void else max(invoice["total_cents"] - paid, 0)

    conn.execute(
        invoices.update()
        .where(invoices.c.id == invoice_id)
        .values(
            paid_cents=paid,
            balance_cents=balance,
            status=status.value,
        )
    )
    if status.value != invoice["status"]:
        logger.info("Invoice %s status %s -> %s", invoice_id, invoice["status"], status.value)
    return _one(conn, invoices, invoices.c.id, invoice_id)


def recalc_invoice_totals(conn, invoice_id: int, today: Optional[date] = None):
    """Refresh every line's amounts and the invoice totals, then the paid roll-up."""
    invoice = _one(conn, invoices, invoices.c.id, invoice_id)
    items = conn.execute(
        select(invoice_items).where(invoice_items.c.invoice_id == invoice_id)
    ).mappings().all()

    lines = []
    for item in items:
        rate = effective_rate(item["tax_rate_bps"], invoice["tax_rate_bps"])
        amounts = line_amounts(item["quantity"], item["unit_price_cents"], rate)
        conn.execute(
            invoice_items.update()
            .where(invoice_items.c.id == item["id"])
            .values(
                line_subtotal_cents=amounts.subtotal_cents,
                line_tax_cents=amounts.tax_cents,
                line_total_cents=amounts.total_cents,
            )
        )
        lines.append(amounts)

    totals = invoice_totals(lines)
    conn.execute(
        invoices.update()
        .where(invoices.c.id == invoice_id)
        .values(
            subtotal_cents=totals.subtotal_cents,
            tax_cents=totals.tax_cents,
            total_cents=totals.total_cents,
        )
    )
    logger.info("Invoice %s totals: %s items, total %s", invoice_id, len(lines), totals.total_cents)
    return recalc_invoice_paid(conn, invoice_id, today)


# ---- Estimates ----

def recalc_project_cost(conn, project_id: int):
    """Write the project's sales tax and invoice total from its stored costs."""
    project = _one(conn, projects, projects.c.id, project_id)
    cost = project_cost(
        project["labor_cost_cents"],
        project["material_cost_cents"],
        project["company_fee_cents"],
        project["markup_bps"],
        project["tax_rate_bps"],
    )
    conn.execute(
        projects.update()
        .where(projects.c.id == project_id)
        .values(tax_amount_cents=cost.tax_cents, invoice_total_cents=cost.total_cents)
    )
    logger.info("Project %s cost: subtotal %s, tax %s", project_id, cost.subtotal_cents, cost.tax_cents)
    return _one(conn, projects, projects.c.id, project_id)


def ensure_estimate(conn, project):
    row = conn.execute(
        select(project_estimates).where(project_estimates.c.project_id == project["id"])
    ).mappings().first()
    if row is not None:
        return row
    conn.execute(
        project_estimates.insert().values(company_id=project["company_id"], project_id=project["id"])
    )
    return _one(conn, project_estimates, project_estimates.c.project_id, project["id"])


def recalc_project_estimate(conn, project_id: int):
    project = _one(conn, projects, projects.c.id, project_id)
    estimate = ensure_estimate(conn, project)
    profile, rates = company_profile(conn, project["company_id"])

    lines = conn.execute(
        select(project_estimate_lines)
        .where(project_estimate_lines.c.estimate_id == estimate["id"])
        .order_by(project_estimate_lines.c.sort_order, project_estimate_lines.c.id)
    ).mappings().all()

    prices = []
    for line in lines:
        price = estimate_line(line["quantity"], line["units_per_hour"], rates.billable_rate_per_hour_cents)
        conn.execute(
            project_estimate_lines.update()
            .where(project_estimate_lines.c.id == line["id"])
            .values(man_hours=price.man_hours, labor_price_cents=price.labor_price_cents)
        )
        prices.append(price)

    totals = estimate_totals(
        prices,
        material_cost_cents=project["material_cost_cents"],
        material_margin_bps=profile.material_profit_margin_bps,
        tax_rate_bps=project["tax_rate_bps"],
    )
    conn.execute(
        project_estimates.update()
        .where(project_estimates.c.id == estimate["id"])
        .values(
            **dataclasses.asdict(totals),
            snapshot_billable_rate_per_hour_cents=rates.billable_rate_per_hour_cents,
            snapshot_direct_labor_cost_per_hour_cents=rates.direct_labor_cost_per_hour_cents,
            snapshot_overhead_per_hour_cents=rates.overhead_per_hour_cents,
            snapshot_true_cost_per_hour_cents=rates.true_cost_per_hour_cents,
            snapshot_labor_margin_bps=profile.target_profit_margin_bps,
            snapshot_material_margin_bps=profile.material_profit_margin_bps,
        )
    )
    logger.info(
        "Project %s estimate: %s lines, %.2f man hours, total %s",
        project_id,
        len(prices),
        totals.estimated_man_hours,
        totals.total_cents,
    )
    return _one(conn, project_estimates, project_estimates.c.id, estimate["id"])


# ---- Dashboard ----

def get_project_metrics_by_year_json(conn, year: int, company_id: Optional[int] = None) -> dict:
    start, end = year_bounds(year)

    def scoped(table, *conditions):
        if company_id is not None:
            conditions += (table.c.company_id == company_id,)
        return conditions

    completed = scoped(
        projects,
        projects.c.status == ProjectStatus.completed.value,
        projects.c.end_date >= start,
        projects.c.end_date <= end,
    )
    jobs_completed, labor = conn.execute(
        select(func.count(), func.coalesce(func.sum(projects.c.labor_cost_cents), 0)).where(*completed)
    ).one()

    signed_amount = case(
        (receipts.c.status == ReceiptStatus.posted.value, receipts.c.amount_cents),
        (receipts.c.status == ReceiptStatus.refunded.value, -receipts.c.amount_cents),
        else_=0,
    )
    earned = conn.execute(
        select(func.coalesce(func.sum(signed_amount), 0)).where(
            *scoped(
                receipts,
                receipts.c.paid_at >= datetime(year, 1, 1),
                receipts.c.paid_at <= end_of_day(end),
            )
        )
    ).scalar_one()

    active = scoped(
        projects,
        projects.c.status != ProjectStatus.canceled.value,
        projects.c.start_date <= end,
        (projects.c.end_date.is_(None)) | (projects.c.end_date >= start),
    )
    customers = conn.execute(
        select(func.count(func.distinct(projects.c.client_id))).where(*active)
    ).scalar_one()

    pending = conn.execute(
        select(func.count()).where(
            *scoped(projects, projects.c.status.in_([s.value for s in PENDING_STATUSES]))
        )
    ).scalar_one()

    taxes = conn.execute(
        select(func.coalesce(func.sum(invoices.c.tax_cents), 0)).where(
            *scoped(
                invoices,
                invoices.c.status != InvoiceStatus.void.value,
                invoices.c.issued_date >= start,
                invoices.c.issued_date <= end,
            )
        )
    ).scalar_one()

    return {
        "year": year,
        "jobs_completed": jobs_completed,
        "amount_earned_cents": earned,
        "number_of_customers": customers,
        "pending_work": pending,
        "labor_cost_cents": labor,
        "taxes_cents": taxes,
        "average_amount_spent_by_client_cents": round_half_up(earned / customers) if customers else 0,
    }


# ---- Ledger ----

_RECEIPT_SOURCES = {
    ReceiptStatus.posted: TransactionSource.receipt_posted,
    ReceiptStatus.refunded: TransactionSource.receipt_refunded,
    ReceiptStatus.voided: TransactionSource.receipt_voided,
}


def _recorded_for_receipt(conn, receipt_id: int) -> Tuple[Optional[int], int]:
    """The account and net amount the ledger already holds for one receipt row."""
    row = conn.execute(
        select(
            func.min(financial_transactions.c.account_id).label("account_id"),
            func.coalesce(func.sum(financial_transactions.c.amount_cents), 0).label("net"),
        ).where(financial_transactions.c.receipt_id == receipt_id)
    ).one()
    return row.account_id, int(row.net)


def record_receipt_transaction(conn, receipt, status: ReceiptStatus, today: Optional[date] = None):
    """
    Mirror a receipt event into the ledger against the company's first active
    revenue account. A posted receipt adds its amount and a refund row takes
    its amount back; voiding a row reverses whatever that row had recorded,
    on the account it was recorded against.
    Returns the transaction id, or None when nothing was written.
    """
    if status is ReceiptStatus.voided:
        account_id, recorded = _recorded_for_receipt(conn, receipt["id"])
        if recorded == 0:
            logger.info("Receipt %s has nothing in the ledger to reverse", receipt["id"])
            return None
        amount = -recorded
        when = today or business_today()
    else:
        account_id = conn.execute(
            select(accounts.c.id)
            .where(
                accounts.c.company_id == receipt["company_id"],
                accounts.c.type == AccountType.revenue.value,
                accounts.c.is_active.is_(True),
            )
            .order_by(accounts.c.id)
            .limit(1)
        ).scalar()
        if account_id is None:
            logger.info("Company %s has no active revenue account; receipt %s not in ledger",
                        receipt["company_id"], receipt["id"])
            return None
        sign = -1 if receipt["refund_of_receipt_id"] else 1
        amount = sign * receipt["amount_cents"]
        when = receipt["paid_at"].date()

    source = _RECEIPT_SOURCES[status]
    result = conn.execute(
        financial_transactions.insert().values(
            company_id=receipt["company_id"],
            account_id=account_id,
            client_id=receipt["client_id"],
            project_id=receipt["project_id"],
            invoice_id=receipt["invoice_id"],
            receipt_id=receipt["id"],
            transaction_date=when,
            amount_cents=amount,
            currency=receipt["currency"],
            description=f"Receipt #{receipt['id']} {status.value}",
            reference_number=receipt["reference_number"],
            source=source.value,
        )
    )
    return result.inserted_primary_key[0]
