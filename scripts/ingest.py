# scripts/ingest.py
"""
Import a bank CSV export into financial_transactions.

Expected columns: Date, Description, Amount, Reference, Memo. Amounts are
signed dollars ("-45.10", "(45.10)", "$1,200.00"). Re-running the same file
is safe: rows are upserted by (company_id, external_id), where external_id is
the bank reference or, without one, a hash of date + amount + description.

The upsert is SQLite's ``INSERT ... ON CONFLICT DO UPDATE``, so the
database behind ``PAINTWALL_DATABASE_URL`` must be SQLite when importing.
"""

import argparse
import csv
import hashlib
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from paintwall.core.log import configure_logging
from paintwall.core.money import to_cents
from paintwall.db.engine import get_engine
from paintwall.db.schema import accounts, financial_transactions
from paintwall.models.enums import TransactionSource

logger = logging.getLogger(__name__)

FILE_PATH = "data/bank_export.csv"

DATE_FORMATS = ("%m/%d/%Y", "%m/%d/%y", "%Y-%m-%d")


# ---- Helpers ----

def parse_amount(value: str) -> int:
    """Signed dollars to cents. Parentheses mean negative."""
    value = (value or "").strip().replace("$", "").replace(",", "")
    if value == "":
        raise ValueError("missing amount")
    negative = value.startswith("(") and value.endswith(")")
    if negative:
        value = value[1:-1]
    try:
        cents = to_cents(Decimal(value))
    except InvalidOperation:
        raise ValueError(f"bad amount {value!r}") from None
    return -cents if negative else cents


def parse_date(value: str):
    value = (value or "").strip()
    if not value:
        raise ValueError("missing date")
    value = value.split()[0]
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise ValueError(f"unrecognized date {value!r}")


def _clean(value):
    if value is None:
        return None
    value = value.strip()
    return value or None


def external_id_for(reference, transaction_date, amount_cents: int, description: str) -> str:
    if reference:
        return f"ref:{reference}"
    digest = hashlib.sha256(
        f"{transaction_date.isoformat()}|{amount_cents}|{description.lower()}".encode("utf-8")
    ).hexdigest()
    return f"hash:{digest[:24]}"


def upsert_transaction(conn, row: dict) -> None:
    """
    Insert or update an imported transaction by (company_id, external_id).
    Rows that were edited into another source are left alone.
    """
    stmt = sqlite_insert(financial_transactions).values(**row)

    update_cols = {
        "account_id": stmt.excluded.account_id,
        "transaction_date": stmt.excluded.transaction_date,
        "amount_cents": stmt.excluded.amount_cents,
        "description": stmt.excluded.description,
        "memo": stmt.excluded.memo,
        "reference_number": stmt.excluded.reference_number,
    }

    stmt = stmt.on_conflict_do_update(
        index_elements=[financial_transactions.c.company_id, financial_transactions.c.external_id],
        set_=update_cols,
        where=financial_transactions.c.source == TransactionSource.import_.value,
    )

    conn.execute(stmt)


def parse_bank_csv(file_path: str = FILE_PATH):
    transactions_list = []

    n_rows = 0
    n_errors = 0
    error_examples = []

    seen_external_ids = set()
    duplicate_examples = []
    duplicate_count = 0

    with open(file_path, newline="", encoding="utf-8-sig") as f:
        reader = csv.DictReader(f)

        for row in reader:
            n_rows += 1

            try:
                transaction_date = parse_date(row["Date"])
                amount_cents = parse_amount(row["Amount"])
                description = _clean(row["Description"])
                if description is None:
                    raise ValueError("missing description")
                reference = _clean(row.get("Reference"))

                external_id = external_id_for(reference, transaction_date, amount_cents, description)

                if external_id in seen_external_ids:
                    duplicate_count += 1
                    if len(duplicate_examples) < 5:
                        duplicate_examples.append(f"Duplicate {external_id!r} at CSV row {n_rows}")
                    continue
                seen_external_ids.add(external_id)

                transactions_list.append(
                    {
                        "transaction_date": transaction_date,
                        "amount_cents": amount_cents,
                        "description": description,
                        "memo": _clean(row.get("Memo")),
                        "reference_number": reference,
                        "external_id": external_id,
                    }
                )

            except (KeyError, ValueError) as e:
                n_errors += 1
                if len(error_examples) < 5:
                    error_examples.append(
                        {
                            "row_number": n_rows,
                            "row": dict(row),
                            "error": repr(e),
                        }
                    )

    stats = {
        "n_rows": n_rows,
        "n_transactions": len(transactions_list),
        "n_errors": n_errors,
        "error_examples": error_examples,
        "n_duplicates": duplicate_count,
        "duplicate_examples": duplicate_examples,
    }
    return transactions_list, stats


def load_into_db(transactions_list, company_id: int, account_id: int, currency: str = "USD") -> int:
    engine = get_engine()
    with engine.begin() as conn:
        owner = conn.execute(select(accounts.c.company_id).where(accounts.c.id == account_id)).scalar()
        if owner != company_id:
            raise ValueError(f"Account {account_id} does not belong to company {company_id}")

        for tx in transactions_list:
            upsert_transaction(
                conn,
                dict(
                    tx,
                    company_id=company_id,
                    account_id=account_id,
                    currency=currency,
                    source=TransactionSource.import_.value,
                ),
            )
    return len(transactions_list)


def log_stats(stats: dict) -> None:
    logger.info("Total CSV rows read:   %s", stats["n_rows"])
    logger.info("Transactions parsed:   %s", stats["n_transactions"])
    logger.info("Rows with errors:      %s", stats["n_errors"])
    logger.info("Duplicate rows:        %s", stats["n_duplicates"])
    for example in stats["duplicate_examples"]:
        logger.warning("Duplicate example: %s", example)

    if stats["error_examples"]:
        logger.warning("Example errors:")
        for ex in stats["error_examples"]:
            logger.warning("Row %s: %s", ex["row_number"], ex["error"])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import a bank CSV export as transactions.")
    parser.add_argument("file", nargs="?", default=FILE_PATH)
    parser.add_argument("--company-id", type=int, required=True)
    parser.add_argument("--account-id", type=int, required=True, help="Account the rows post to")
    parser.add_argument("--currency", default="USD")
    return parser


def main(argv=None):
    configure_logging()
    args = build_parser().parse_args(argv)

    transactions_list, stats = parse_bank_csv(args.file)
    load_into_db(transactions_list, args.company_id, args.account_id, args.currency.upper())
    log_stats(stats)


if __name__ == "__main__":
    main()
