# tests/test_ingest.py

from datetime import date

import pytest
from sqlalchemy import func, insert, select

from paintwall.db.engine import get_engine
from paintwall.db.schema import accounts, companies, financial_transactions
from scripts.ingest import external_id_for, load_into_db, parse_amount, parse_bank_csv, parse_date

CSV = """Date,Description,Amount,Reference,Memo
03/01/2026,Sherwin-Williams #1234,(245.10),,paint for Elm St
03/02/2026,Client deposit,"$1,200.00",CHK-1001,
03/02/2026,Client deposit,"$1,200.00",CHK-1001,
not a date,Broken row,10.00,,
2026-03-05,Fuel,-45.5,,
"""


@pytest.fixture
def bank_csv(tmp_path):
    path = tmp_path / "bank.csv"
    path.write_text(CSV, encoding="utf-8")
    return str(path)


@pytest.fixture
def ledger_account():
    with get_engine().begin() as conn:
        company_id = conn.execute(insert(companies).values(name="Acme")).inserted_primary_key[0]
        account_id = conn.execute(
            insert(accounts).values(company_id=company_id, name="Checking", type="asset")
        ).inserted_primary_key[0]
    return company_id, account_id


def test_parse_amount():
    assert parse_amount("$1,200.00") == 120000
    assert parse_amount("(245.10)") == -24510
    assert parse_amount("-45.5") == -4550
    with pytest.raises(ValueError):
        parse_amount("")
    with pytest.raises(ValueError):
        parse_amount("abc")


def test_parse_date():
    assert parse_date("03/01/2026") == date(2026, 3, 1)
    assert parse_date("3/1/26") == date(2026, 3, 1)
    assert parse_date("2026-03-05 00:00") == date(2026, 3, 5)
    with pytest.raises(ValueError):
        parse_date("yesterday")


def test_external_id_prefers_reference():
    assert external_id_for("CHK-1", date(2026, 1, 1), 100, "x") == "ref:CHK-1"
    hashed = external_id_for(None, date(2026, 1, 1), 100, "Fuel")
    assert hashed.startswith("hash:") and len(hashed) == 29
    assert hashed == external_id_for(None, date(2026, 1, 1), 100, "FUEL")


def test_parse_bank_csv(bank_csv):
    rows, stats = parse_bank_csv(bank_csv)
    assert stats["n_rows"] == 5
    assert stats["n_transactions"] == 3
    assert stats["n_errors"] == 1
    assert stats["n_duplicates"] == 1
    assert [r["amount_cents"] for r in rows] == [-24510, 120000, -4550]
    assert rows[0]["memo"] == "paint for Elm St"
    assert rows[1]["external_id"] == "ref:CHK-1001"


def test_load_is_idempotent(bank_csv, ledger_account):
    company_id, account_id = ledger_account
    rows, _ = parse_bank_csv(bank_csv)

    load_into_db(rows, company_id, account_id)
    load_into_db(rows, company_id, account_id)

    with get_engine().connect() as conn:
        count = conn.execute(select(func.count()).select_from(financial_transactions)).scalar_one()
        sources = set(conn.execute(select(financial_transactions.c.source)).scalars())
    assert count == 3
    assert sources == {"import"}


def test_load_rejects_foreign_account(bank_csv, ledger_account):
    company_id, account_id = ledger_account
    rows, _ = parse_bank_csv(bank_csv)
    with pytest.raises(ValueError):
        load_into_db(rows, company_id + 1, account_id)


def test_parse_data_report(bank_csv, monkeypatch, capsys):
    import parse_data

    monkeypatch.setattr("sys.argv", ["parse_data.py", bank_csv])
    parse_data.main()
    out = capsys.readouterr().out
    assert "Transactions parsed:   3" in out
    assert "Money in:              $1,200.00" in out
    assert "Money out:             -$290.60" in out
