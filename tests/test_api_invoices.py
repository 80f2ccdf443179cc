# tests/test_api_invoices.py

import pytest


@pytest.fixture
def revenue_account(client, company):
    response = client.post(
        "/accounts", json={"company_id": company["id"], "name": "Painting income", "type": "revenue"}
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def invoice(client, customer, project):
    response = client.post(
        "/invoices",
        json={
            "client_id": customer["id"],
            "project_id": project["id"],
            "status": "sent",
            "issued_date": "2026-03-01",
            "due_date": "2099-12-31",
            "tax_rate_bps": 825,
            "items": [
                {"name": "Interior painting", "unit_price_cents": 100000},
                {"name": "Disposal", "unit_price_cents": 10000, "tax_rate_bps": 0},
            ],
        },
    )
    assert response.status_code == 201
    return response.json()


def _pay(client, customer, invoice, amount):
    response = client.post(
        "/receipts",
        json={
            "client_id": customer["id"],
            "invoice_id": invoice["id"],
            "amount_cents": amount,
            "paid_at": "2026-03-02T10:00:00",
            "payment_method": "zelle",
        },
    )
    assert response.status_code == 201
    return response.json()


def test_invoice_totals(invoice, company, project):
    assert invoice["company_id"] == company["id"]
    assert invoice["invoice_number"].startswith("INV-")
    assert invoice["currency"] == "USD"
    assert [i["line_total_cents"] for i in invoice["items"]] == [108250, 10000]
    assert (invoice["subtotal_cents"], invoice["tax_cents"], invoice["total_cents"]) == (110000, 8250, 118250)
    assert invoice["balance_cents"] == 118250
    assert invoice["status"] == "sent"


def test_item_edits_recalculate(client, invoice):
    item_id = invoice["items"][1]["id"]
    body = client.patch(f"/invoices/{invoice['id']}/items/{item_id}", json={"quantity": 2}).json()
    assert body["total_cents"] == 128250

    body = client.delete(f"/invoices/{invoice['id']}/items/{item_id}").json()
    assert body["total_cents"] == 108250
    assert len(body["items"]) == 1


def test_reorder_items(client, invoice):
    first, second = [i["id"] for i in invoice["items"]]
    url = f"/invoices/{invoice['id']}/items/reorder"

    body = client.post(url, json={"ids": [second, first]}).json()
    assert [i["id"] for i in body["items"]] == [second, first]

    assert client.post(url, json={"ids": [second]}).status_code == 400
    assert client.post(url, json={"ids": [second, second, first]}).status_code == 400


def test_payments_roll_up(client, customer, invoice, project, revenue_account):
    receipt = _pay(client, customer, invoice, 50000)
    assert receipt["project_id"] == project["id"]
    assert receipt["currency"] == "USD"

    current = client.get(f"/invoices/{invoice['id']}").json()
    assert (current["paid_cents"], current["balance_cents"], current["status"]) == (50000, 68250, "partially_paid")

    second = _pay(client, customer, invoice, 68250)
    current = client.get(f"/invoices/{invoice['id']}").json()
    assert (current["balance_cents"], current["status"]) == (0, "paid")

    response = client.post(f"/receipts/{second['id']}/refund", json={"amount_cents": 18250, "note": "touch-up waived"})
    assert response.status_code == 201
    refund = response.json()
    assert refund["status"] == "refunded"
    assert refund["refund_of_receipt_id"] == second["id"]
    assert refund["amount_cents"] == 18250

    current = client.get(f"/invoices/{invoice['id']}").json()
    assert (current["paid_cents"], current["balance_cents"], current["status"]) == (100000, 18250, "partially_paid")

    # the original stays posted; it cannot be voided while a refund stands
    assert client.get(f"/receipts/{second['id']}").json()["status"] == "posted"
    assert client.post(f"/receipts/{second['id']}/void").status_code == 409

    ledger = client.get("/transactions", params={"company_id": invoice["company_id"]}).json()
    amounts = sorted((t["source"], t["amount_cents"]) for t in ledger["items"])
    assert amounts == [("receipt_posted", 50000), ("receipt_posted", 68250), ("receipt_refunded", -18250)]
    assert {t["account_id"] for t in ledger["items"]} == {revenue_account["id"]}


def test_refund_limits(client, customer, invoice):
    receipt = _pay(client, customer, invoice, 10000)
    url = f"/receipts/{receipt['id']}/refund"

    assert client.post(url, json={"amount_cents": 10001}).status_code == 400
    refund = client.post(url, json={"amount_cents": 4000}).json()
    # without an amount the rest is refunded
    assert client.post(url).json()["amount_cents"] == 6000
    assert client.post(url).status_code == 400
    assert client.post(f"/receipts/{refund['id']}/refund").status_code == 409


def test_void_receipt(client, customer, invoice, revenue_account):
    receipt = _pay(client, customer, invoice, 50000)

    voided = client.post(f"/receipts/{receipt['id']}/void", json={"note": "bounced"})
    assert voided.status_code == 200
    assert voided.json()["status"] == "voided"
    assert voided.json()["notes"] == "bounced"
    assert client.post(f"/receipts/{receipt['id']}/void").status_code == 409
    assert client.patch(f"/receipts/{receipt['id']}", json={"notes": "x"}).status_code == 409

    current = client.get(f"/invoices/{invoice['id']}").json()
    assert (current["paid_cents"], current["status"]) == (0, "sent")

    ledger = client.get("/transactions", params={"company_id": invoice["company_id"]}).json()
    assert sum(t["amount_cents"] for t in ledger["items"]) == 0


def test_receipt_without_revenue_account_skips_ledger(client, customer, invoice):
    _pay(client, customer, invoice, 1000)
    assert client.get("/transactions").json()["total"] == 0


def test_receipt_invoice_must_match_client(client, company, invoice):
    other = client.post("/clients", json={"company_id": company["id"], "display_name": "Other"}).json()
    response = client.post(
        "/receipts", json={"client_id": other["id"], "invoice_id": invoice["id"], "amount_cents": 100}
    )
    assert response.status_code == 400


def test_void_invoice_rules(client, customer, invoice):
    assert client.patch(f"/invoices/{invoice['id']}", json={"status": "void"}).status_code == 400
    assert client.delete(f"/invoices/{invoice['id']}").status_code == 409

    response = client.post(f"/invoices/{invoice['id']}/void", json={"reason": "duplicate"})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "void"
    assert body["balance_cents"] == 0
    assert body["notes"] == "Void: duplicate"

    assert client.patch(f"/invoices/{invoice['id']}", json={"notes": "x"}).status_code == 409
    assert client.post(f"/invoices/{invoice['id']}/void").status_code == 409
    response = client.post(
        "/receipts", json={"client_id": customer["id"], "invoice_id": invoice["id"], "amount_cents": 100}
    )
    assert response.status_code == 409


def test_draft_invoice_can_be_deleted(client, customer):
    draft = client.post("/invoices", json={"client_id": customer["id"]}).json()
    assert draft["status"] == "draft"
    assert draft["tax_rate_bps"] == 825
    assert client.delete(f"/invoices/{draft['id']}").status_code == 204
    assert client.get(f"/invoices/{draft['id']}").status_code == 404


def test_invoice_full(client, invoice, customer, project):
    body = client.get(f"/invoices/{invoice['id']}/full").json()
    assert body["client"]["id"] == customer["id"]
    assert body["project"]["id"] == project["id"]
    assert body["property"] is None
    assert len(body["items"]) == 2


def test_past_due(client, customer):
    overdue = client.post(
        "/invoices",
        json={
            "client_id": customer["id"],
            "status": "sent",
            "issued_date": "2020-01-01",
            "due_date": "2020-01-01",
            "items": [{"name": "Patch", "unit_price_cents": 20000, "tax_rate_bps": 0}],
        },
    ).json()
    assert overdue["status"] == "overdue"
    client.post(
        "/invoices",
        json={
            "client_id": customer["id"],
            "issued_date": "2020-01-01",
            "due_date": "2020-01-01",
            "items": [{"name": "Draft work", "unit_price_cents": 5000}],
        },
    )

    body = client.get("/invoices/past-due", params={"as_of": "2020-01-11"}).json()
    assert body["total"] == 1
    item = body["items"][0]
    assert item["id"] == overdue["id"]
    assert item["days_past_due"] == 10
    assert item["client_name"] == "Jane Homeowner"
    assert item["balance_cents"] == 20000


def test_list_invoices_by_year(client, invoice):
    assert client.get("/invoices", params={"year": 2026}).json()["total"] == 1
    assert client.get("/invoices", params={"year": 2025}).json()["total"] == 0


def test_void_before_revenue_account_writes_no_reversal(client, company, customer, invoice):
    receipt = _pay(client, customer, invoice, 5000)
    client.post("/accounts", json={"company_id": company["id"], "name": "Painting income", "type": "revenue"})

    assert client.post(f"/receipts/{receipt['id']}/void").status_code == 200

    ledger = client.get("/transactions", params={"company_id": company["id"]}).json()
    assert ledger["total"] == 0


def test_void_refund_restores_ledger(client, customer, invoice, revenue_account):
    receipt = _pay(client, customer, invoice, 20000)
    refund = client.post(f"/receipts/{receipt['id']}/refund", json={"amount_cents": 5000}).json()

    assert client.post(f"/receipts/{refund['id']}/void").status_code == 200

    ledger = client.get("/transactions", params={"company_id": invoice["company_id"]}).json()
    voided = [t for t in ledger["items"] if t["source"] == "receipt_voided"]
    assert [(t["amount_cents"], t["account_id"]) for t in voided] == [(5000, revenue_account["id"])]
    assert sum(t["amount_cents"] for t in ledger["items"]) == 20000


def test_void_invoice_balance_stays_zero(client, customer, invoice):
    receipt = _pay(client, customer, invoice, 10000)
    client.post(f"/invoices/{invoice['id']}/void")

    body = client.post(f"/invoices/{invoice['id']}/recalc").json()
    assert (body["status"], body["balance_cents"]) == ("void", 0)

    client.post(f"/receipts/{receipt['id']}/void")
    current = client.get(f"/invoices/{invoice['id']}").json()
    assert (current["status"], current["paid_cents"], current["balance_cents"]) == ("void", 0, 0)


def test_list_by_last_allowed_year(client, invoice):
    assert client.get("/invoices", params={"year": 9999}).json()["total"] == 0
    assert client.get("/receipts", params={"year": 9999}).json()["total"] == 0
    assert client.get("/invoices", params={"year": 10000}).status_code == 422
