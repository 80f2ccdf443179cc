# tests/test_api_projects.py

import pytest

PROFILE = {
    "annual_overhead_cents": 9_600_000,
    "field_employee_count": 2,
    "weeks_per_year": 50,
    "hours_per_week": 40,
    "avg_wage_cents": 2500,
    "labor_burden_bps": 2000,
    "target_profit_margin_bps": 2500,
    "material_profit_margin_bps": 1500,
}


@pytest.fixture
def profile(client, company):
    response = client.put(f"/companies/{company['id']}/financial-profile", json=PROFILE)
    assert response.status_code == 200
    return response.json()


def test_financial_profile_rates(client, company, profile):
    assert profile["sellable_man_hours"] == 4000
    assert profile["overhead_per_hour_cents"] == 2400
    assert profile["true_cost_per_hour_cents"] == 5400
    assert profile["billable_rate_per_hour_cents"] == 6750

    changed = dict(PROFILE, target_profit_margin_bps=0)
    response = client.put(f"/companies/{company['id']}/financial-profile", json=changed)
    assert response.json()["billable_rate_per_hour_cents"] == 5400


def test_project_cost_rollup(client, project):
    assert (project["tax_amount_cents"], project["invoice_total_cents"]) == (825, 10825)

    body = client.patch(
        f"/projects/{project['id']}",
        json={"labor_cost_cents": 40000, "company_fee_cents": 20000, "markup_bps": 2000},
    ).json()
    assert (body["tax_amount_cents"], body["invoice_total_cents"]) == (6600, 86600)

    body = client.patch(f"/projects/{project['id']}", json={"tax_rate_bps": 0}).json()
    assert (body["tax_amount_cents"], body["invoice_total_cents"]) == (0, 80000)


def test_profile_not_set_is_404(client, company):
    assert client.get(f"/companies/{company['id']}/financial-profile").status_code == 404
    assert client.post(f"/companies/{company['id']}/financial-profile/recalc").status_code == 404


def test_production_rate_upsert(client, company):
    url = f"/companies/{company['id']}/production-rates"
    first = client.put(url, json={"service": "interior_paint", "unit": "sqft_wall", "units_per_hour": 150}).json()
    second = client.put(url, json={"service": "interior_paint", "unit": "sqft_wall", "units_per_hour": 175}).json()
    assert first["id"] == second["id"]
    assert [r["units_per_hour"] for r in client.get(url).json()] == [175]

    assert client.delete(f"{url}/{first['id']}").status_code == 204
    assert client.get(url).json() == []


def test_project_defaults_and_validation(client, customer, house, project, company):
    assert project["company_id"] == company["id"]
    assert project["status"] == "draft"

    response = client.post(
        "/projects",
        json={
            "client_id": customer["id"],
            "property_id": house["id"],
            "name": "Backwards",
            "start_date": "2026-05-10",
            "end_date": "2026-05-01",
        },
    )
    assert response.status_code == 400

    response = client.post(f"/projects/{project['id']}/status", json={"status": "scheduled"})
    assert response.json()["status"] == "scheduled"


def test_manual_estimate_lines(client, project, profile):
    url = f"/projects/{project['id']}/estimate/lines"
    client.post(url, json={"service": "interior_paint", "unit": "sqft_wall", "quantity": 300, "units_per_hour": 150})
    response = client.post(
        url, json={"service": "interior_paint", "unit": "sqft_wall", "quantity": 75, "units_per_hour": 150}
    )
    assert response.status_code == 201
    body = response.json()

    assert [(l["man_hours"], l["labor_price_cents"]) for l in body["lines"]] == [(2.0, 13500), (0.5, 3375)]
    estimate = body["estimate"]
    assert estimate["estimated_man_hours"] == 2.5
    assert estimate["labor_price_cents"] == 16875
    assert estimate["material_price_cents"] == 11500
    assert estimate["tax_cents"] == 949
    assert estimate["total_cents"] == 29324
    assert estimate["snapshot_billable_rate_per_hour_cents"] == 6750

    line_id = body["lines"][0]["id"]
    after = client.delete(f"{url}/{line_id}").json()
    assert after["estimate"]["labor_price_cents"] == 3375


def test_estimate_line_needs_a_rate(client, project):
    response = client.post(
        f"/projects/{project['id']}/estimate/lines",
        json={"service": "interior_paint", "unit": "sqft_wall", "quantity": 100},
    )
    assert response.status_code == 400


def test_estimate_lines_from_rooms(client, company, house, project, profile):
    rates = f"/companies/{company['id']}/production-rates"
    client.put(rates, json={"service": "interior_paint", "unit": "sqft_wall", "units_per_hour": 160})
    client.put(rates, json={"service": "trim_paint", "unit": "linear_ft_trim", "units_per_hour": 26})
    client.put(rates, json={"service": "door_paint", "unit": "each_door", "units_per_hour": 0.5})
    client.post(
        "/production-rate-templates",
        json={"label": "Ceilings", "service": "interior_paint", "unit": "sqft_ceiling", "units_per_hour": 120},
    )
    client.post(
        "/rooms",
        json={
            "property_id": house["id"],
            "project_id": project["id"],
            "name": "Living",
            "dimensions": "12 x 14",
            "room_height_ft": 8,
            "paint_ceiling": True,
            "paint_trim": True,
            "paint_doors": True,
        },
    )

    url = f"/projects/{project['id']}/estimate/lines/from-rooms"
    body = client.post(url).json()
    assert [(l["unit"], l["quantity"], l["man_hours"]) for l in body["lines"]] == [
        ("sqft_wall", 416, 2.6),
        ("sqft_ceiling", 168, 1.4),
        ("linear_ft_trim", 52, 2.0),
        ("each_door", 1, 2.0),
    ]
    assert body["estimate"]["labor_price_cents"] == 17550 + 9450 + 13500 + 13500

    # rebuilding replaces the room lines instead of adding to them
    again = client.post(url).json()
    assert len(again["lines"]) == 4


def test_estimate_status(client, project):
    response = client.post(f"/projects/{project['id']}/estimate/status", json={"status": "final"})
    assert response.status_code == 200
    assert response.json()["status"] == "final"
    assert client.get(f"/projects/{project['id']}/estimate").json()["estimate"]["status"] == "final"
