"""
Tests for the FastAPI endpoints in main.py.
"""
import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture
def client():
    return TestClient(app)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["endpoints"]["extract"] == "/api/extract"


def test_list_modes(client):
    response = client.get("/api/modes")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert [m["name"] for m in data["modes"]] == ["settlement", "migration", "population"]


def test_extract_migration(client, migration_grid):
    response = client.post("/api/extract", json={
        "mode": "migration",
        "fiscal_year": 2022,
        "source": "migration_FY2022.xlsx",
        "sheets": {"目次": [["目次"]], "都道府県別": migration_grid},
    })

    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    hokkaido = data["records"][0]
    assert hokkaido["prefecture"] == "北海道"
    assert hokkaido["domestic_in"] == 50000
    assert hokkaido["domestic_out"] == 40000
    assert hokkaido["source"] == "migration_FY2022.xlsx"


def test_extract_settlement_with_nulls(client, tokyo_settlement_grid):
    tokyo_settlement_grid[5][0] = None
    response = client.post("/api/extract", json={
        "mode": "settlement",
        "fiscal_year": 2022,
        "sheets": {"東京都": tokyo_settlement_grid},
    })

    assert response.status_code == 200
    record = response.json()["records"][0]
    assert record["total_revenue"] == 1234567
    assert record["real_balance"] is None
    assert record["source"] == "request"


def test_population_floor_override(client, make_grid):
    grid = make_grid(6, 6, {(1, 0): "住民基本台帳人口", (1, 2): 500})
    body = {"mode": "settlement", "fiscal_year": 2022, "sheets": {"鳥取県": grid}}

    assert client.post("/api/extract", json=body).json()["count"] == 0

    body["population_floor"] = 100
    data = client.post("/api/extract", json=body).json()
    assert data["records"][0]["population"] == 500


def test_unknown_mode(client):
    response = client.post("/api/extract", json={
        "mode": "census",
        "fiscal_year": 2022,
        "sheets": {},
    })
    assert response.status_code == 400
