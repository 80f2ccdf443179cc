# tests/test_api_dashboard.py


def _client_with_property(client, company, name):
    person = client.post("/clients", json={"company_id": company["id"], "display_name": name}).json()
    prop = client.post(
        "/properties",
        json={
            "client_id": person["id"],
            "name": "Home",
            "address_line1": "1 Main St",
            "city": "Plano",
            "state": "TX",
            "zip": "75074",
        },
    ).json()
    return person, prop


def _project(client, person, prop, **fields):
    response = client.post(
        "/projects", json=dict(client_id=person["id"], property_id=prop["id"], name="Job", **fields)
    )
    assert response.status_code == 201
    return response.json()


def test_year_metrics(client, company, customer, house):
    other, other_house = _client_with_property(client, company, "Bob")

    _project(
        client, customer, house,
        status="completed", start_date="2025-03-01", end_date="2025-03-20", labor_cost_cents=40000,
    )
    _project(client, other, other_house, status="in_progress", start_date="2025-06-01")
    _project(client, customer, house, status="scheduled", start_date="2026-02-01")
    _project(client, other, other_house, status="canceled", start_date="2025-01-01")

    invoice = client.post(
        "/invoices",
        json={
            "client_id": customer["id"],
            "status": "sent",
            "issued_date": "2025-03-20",
            "tax_rate_bps": 825,
            "items": [{"name": "Repaint", "unit_price_cents": 100000}],
        },
    ).json()
    voided = client.post(
        "/invoices",
        json={
            "client_id": other["id"],
            "status": "sent",
            "issued_date": "2025-04-01",
            "tax_rate_bps": 825,
            "items": [{"name": "Mistake", "unit_price_cents": 50000}],
        },
    ).json()
    client.post(f"/invoices/{voided['id']}/void")

    for amount, paid_at in ((60000, "2025-03-21T09:00:00"), (40000, "2025-04-02T09:00:00")):
        client.post(
            "/receipts",
            json={"client_id": customer["id"], "invoice_id": invoice["id"], "amount_cents": amount, "paid_at": paid_at},
        )
    bounced = client.post(
        "/receipts",
        json={"client_id": other["id"], "amount_cents": 5000, "paid_at": "2025-05-01T09:00:00"},
    ).json()
    client.post(f"/receipts/{bounced['id']}/void")

    body = client.get("/dashboard/metrics", params={"year": 2025, "company_id": company["id"]}).json()
    assert body == {
        "year": 2025,
        "jobs_completed": 1,
        "amount_earned_cents": 100000,
        "number_of_customers": 2,
        "pending_work": 2,
        "labor_cost_cents": 40000,
        "taxes_cents": 8250,
        "average_amount_spent_by_client_cents": 50000,
    }


def test_empty_year(client, company):
    body = client.get("/dashboard/metrics", params={"year": 2030, "company_id": company["id"]}).json()
    assert body["jobs_completed"] == 0
    assert body["amount_earned_cents"] == 0
    assert body["average_amount_spent_by_client_cents"] == 0


def test_year_edges(client, company, customer, house):
    _project(
        client, customer, house,
        status="completed", start_date="2025-12-01", end_date="2025-12-31", labor_cost_cents=12000,
    )
    client.post(
        "/receipts",
        json={"client_id": customer["id"], "amount_cents": 7000, "paid_at": "2025-12-31T23:30:00"},
    )

    body = client.get("/dashboard/metrics", params={"year": 2025, "company_id": company["id"]}).json()
    assert (body["jobs_completed"], body["labor_cost_cents"], body["amount_earned_cents"]) == (1, 12000, 7000)
    body = client.get("/dashboard/metrics", params={"year": 2026, "company_id": company["id"]}).json()
    assert (body["jobs_completed"], body["amount_earned_cents"]) == (0, 0)

    response = client.get("/dashboard/metrics", params={"year": 9999})
    assert response.status_code == 200
    assert response.json()["jobs_completed"] == 0
