# tests/conftest.py

import pytest
from fastapi.testclient import TestClient

from paintwall.core.config import get_settings
from paintwall.db.engine import get_engine, reset_engines
from paintwall.db.schema import metadata


@pytest.fixture(autouse=True)
def _database(tmp_path, monkeypatch):
    """A fresh SQLite file (and upload dir) per test."""
    monkeypatch.setenv("PAINTWALL_DATABASE_URL", f"sqlite:///{tmp_path / 'test.sqlite'}")
    monkeypatch.setenv("PAINTWALL_UPLOAD_DIR", str(tmp_path / "uploads"))
    get_settings.cache_clear()
    reset_engines()
    metadata.create_all(get_engine())
    yield
    reset_engines()
    get_settings.cache_clear()


@pytest.fixture
def client():
    from paintwall.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def company(client):
    response = client.post("/companies", json={"name": "Paint & Wall LLC", "phone": "214-555-0199"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def customer(client, company):
    response = client.post(
        "/clients",
        json={
            "company_id": company["id"],
            "display_name": "Jane Homeowner",
            "primary_email": "Jane@Example.com",
            "primary_phone": "(214) 555-0100",
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def house(client, customer):
    response = client.post(
        "/properties",
        json={
            "client_id": customer["id"],
            "name": "Main house",
            "address_line1": "12 Elm St",
            "city": "Garland",
            "state": "TX",
            "zip": "75040",
        },
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def project(client, customer, house):
    response = client.post(
        "/projects",
        json={
            "client_id": customer["id"],
            "property_id": house["id"],
            "name": "Living room repaint",
            "material_cost_cents": 10000,
            "tax_rate_bps": 825,
        },
    )
    assert response.status_code == 201
    return response.json()
