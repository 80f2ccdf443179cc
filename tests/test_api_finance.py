# tests/test_api_finance.py

import os

import pytest

from paintwall.core.config import get_settings


@pytest.fixture
def chart(client, company):
    def account(name, kind):
        response = client.post("/accounts", json={"company_id": company["id"], "name": name, "type": kind})
        assert response.status_code == 201
        return response.json()["id"]

    return {
        "sales": account("Sales", "revenue"),
        "materials": account("Materials", "cogs"),
        "fuel": account("Fuel", "expense"),
        "owner": account("Owner", "equity"),
    }


def _post(client, company, account_id, amount, day="2026-02-10", **extra):
    response = client.post(
        "/transactions",
        json=dict(
            company_id=company["id"],
            account_id=account_id,
            transaction_date=day,
            amount_cents=amount,
            description=f"entry {amount}",
            **extra,
        ),
    )
    assert response.status_code == 201, response.text
    return response.json()


def test_summary(client, company, chart):
    _post(client, company, chart["sales"], 100000)
    _post(client, company, chart["materials"], -30000)
    _post(client, company, chart["fuel"], -15000)
    _post(client, company, chart["owner"], 20000)
    _post(client, company, chart["owner"], -8000)
    _post(client, company, chart["sales"], 99999, day="2025-12-31")

    response = client.get(
        "/transactions/summary",
        params={"company_id": company["id"], "date_from": "2026-01-01", "date_to": "2026-12-31"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total_revenue_cents"] == 100000
    assert body["total_cogs_cents"] == -30000
    assert body["total_operating_expenses_cents"] == -15000
    assert body["net_profit_cents"] == 55000
    assert body["owner_contributions_cents"] == 20000
    assert body["owner_draws_cents"] == -8000
    assert body["transaction_count"] == 5
    assert body["operating_expenses"] == [
        {"category": "Fuel", "total_cents": 15000, "count": 1, "percentage": 100.0}
    ]
    assert [d["total_cents"] for d in body["owner_draws"]] == [8000]


def test_summary_rejects_backwards_range(client, company):
    response = client.get(
        "/transactions/summary",
        params={"company_id": company["id"], "date_from": "2026-02-01", "date_to": "2026-01-01"},
    )
    assert response.status_code == 400


def test_transaction_defaults_and_edits(client, company, chart):
    tx = _post(client, company, chart["fuel"], -4550)
    assert tx["source"] == "manual"
    assert tx["currency"] == "USD"

    response = client.patch(f"/transactions/{tx['id']}", json={"memo": "truck"})
    assert response.json()["memo"] == "truck"
    assert client.patch(f"/transactions/{tx['id']}", json={"amount_cents": None}).status_code == 400

    assert client.delete(f"/transactions/{tx['id']}").status_code == 204
    assert client.get(f"/transactions/{tx['id']}").status_code == 404


def test_references_must_share_company(client, company, chart):
    other = client.post("/companies", json={"name": "Rival Painting"}).json()
    foreign = client.post("/accounts", json={"company_id": other["id"], "name": "Sales", "type": "revenue"}).json()

    response = client.post(
        "/transactions",
        json={
            "company_id": company["id"],
            "account_id": foreign["id"],
            "transaction_date": "2026-01-05",
            "amount_cents": 100,
            "description": "misfiled",
        },
    )
    assert response.status_code == 400

    response = client.post(
        "/accounts",
        json={"company_id": company["id"], "name": "Sub", "type": "revenue", "parent_account_id": foreign["id"]},
    )
    assert response.status_code == 400


def test_receipt_transactions_are_read_only(client, customer, chart):
    receipt = client.post("/receipts", json={"client_id": customer["id"], "amount_cents": 5000}).json()
    tx = client.get("/transactions", params={"source": "receipt_posted"}).json()["items"][0]
    assert tx["receipt_id"] == receipt["id"]
    assert tx["account_id"] == chart["sales"]

    assert client.patch(f"/transactions/{tx['id']}", json={"memo": "x"}).status_code == 409
    assert client.delete(f"/transactions/{tx['id']}").status_code == 409


def test_account_rules(client, company, chart):
    url = f"/accounts/{chart['fuel']}"
    assert client.patch(url, json={"parent_account_id": chart["fuel"]}).status_code == 400
    assert client.patch(url, json={"is_active": False}).json()["is_active"] is False
    active = client.get("/accounts", params={"company_id": company["id"], "is_active": True}).json()
    assert active["total"] == 3

    _post(client, company, chart["sales"], 100)
    assert client.delete(f"/accounts/{chart['sales']}").status_code == 409


def test_document_upload_and_download(client, company, chart):
    tx = _post(client, company, chart["fuel"], -4550)
    response = client.post(
        "/documents",
        data={"company_id": str(company["id"]), "document_type": "expense_receipt", "transaction_id": str(tx["id"])},
        files={"file": ("gas receipt.pdf", b"%PDF-1.4 fuel", "application/pdf")},
    )
    assert response.status_code == 201, response.text
    doc = response.json()
    assert doc["file_name"] == "gas receipt.pdf"
    assert doc["size_bytes"] == 13

    stored = os.listdir(os.path.join(get_settings().upload_dir, str(company["id"])))
    assert len(stored) == 1 and stored[0].endswith("_gas_receipt.pdf")

    download = client.get(f"/documents/{doc['id']}/download")
    assert download.status_code == 200
    assert download.content == b"%PDF-1.4 fuel"

    attached = client.get(f"/transactions/{tx['id']}").json()["documents"]
    assert [d["id"] for d in attached] == [doc["id"]]

    assert client.delete(f"/documents/{doc['id']}").status_code == 204
    assert os.listdir(os.path.join(get_settings().upload_dir, str(company["id"]))) == []


def test_vendors_and_assets(client, company):
    vendor = client.post(
        "/vendors", json={"company_id": company["id"], "name": "Sherwin-Williams", "tax_id_last4": "1234"}
    )
    assert vendor.status_code == 201
    vendor = vendor.json()
    assert vendor["type"] == "supplier"
    assert client.post("/vendors", json={"company_id": company["id"], "name": "X", "tax_id_last4": "12"}).status_code == 422

    asset = client.post(
        "/assets",
        json={
            "company_id": company["id"],
            "name": "Airless sprayer",
            "purchase_date": "2026-01-15",
            "purchase_price_cents": 189900,
            "vendor_id": vendor["id"],
        },
    ).json()
    assert asset["status"] == "active"
    assert client.patch(f"/assets/{asset['id']}", json={"status": "sold"}).json()["status"] == "sold"
    assert client.get("/assets", params={"company_id": company["id"]}).json()["total"] == 1
