"""Tests for the HTTP API: routers, error mapping and startup wiring."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from helpers import make_session
from smartpark.config import settings
from smartpark.exceptions import DuplicateVehicle
from smartpark.main import app
from smartpark.routers import parking, reports
from smartpark.schemas.vehicle import VehicleEntryIn


@pytest.fixture
def client(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DATA_DIR", str(tmp_path / "data"))
    with TestClient(app) as c:
        yield c


def park(client, license, category="standard", owner="Owner"):
    return client.post("/api/v1/parking/entry",
                       json={"category": category, "license": license, "owner": owner})


class TestParkingEndpoints:
    def test_entry_created(self, client):
        resp = park(client, "KA-01", "heavy")
        assert resp.status_code == 201
        body = resp.json()
        assert body["vehicle"]["floor"] == 0 and body["vehicle"]["spot"] == 0
        assert body["vehicle"]["display_floor"] == 1
        assert body["vehicle"]["category"] == "Heavy"
        assert body["warnings"] == []

    def test_entry_errors_map_to_status_codes(self, client):
        park(client, "KA-01")
        assert park(client, "KA-01").status_code == 409
        assert park(client, "KA-02", category="bus").status_code == 400
        assert park(client, "").status_code == 400

    def test_entry_accepts_integer_category_code(self, client):
        resp = client.post("/api/v1/parking/entry",
                           json={"category": 2, "license": "KA-09", "owner": "Depot"})
        assert resp.status_code == 201
        assert resp.json()["vehicle"]["category"] == "Heavy"
        assert client.post("/api/v1/parking/entry",
                           json={"category": 7, "license": "KA-10", "owner": "X"}).status_code == 400

    def test_exit_receipt(self, client):
        park(client, "KA-01", "two-wheeler")
        resp = client.post("/api/v1/parking/exit/KA-01")
        assert resp.status_code == 200
        tx = resp.json()["transaction"]
        assert tx["duration_min"] == 1
        assert tx["fee"] == 20.0
        assert client.post("/api/v1/parking/exit/KA-01").status_code == 404

    def test_search_miss_is_not_an_error(self, client):
        resp = client.get("/api/v1/parking/vehicles/NOPE")
        assert resp.status_code == 200
        assert resp.json() == {"license": "NOPE", "found": False, "vehicle": None}

    def test_list_and_search(self, client):
        park(client, "A")
        park(client, "B")
        assert [v["license"] for v in client.get("/api/v1/parking/vehicles").json()] == ["A", "B"]
        found = client.get("/api/v1/parking/vehicles/B").json()
        assert found["found"] and found["vehicle"]["spot"] == 1

    def test_transactions_newest_first(self, client):
        for plate in ("A", "B", "C"):
            park(client, plate)
            client.post(f"/api/v1/parking/exit/{plate}")
        txs = client.get("/api/v1/transactions", params={"limit": 2}).json()
        assert [t["license"] for t in txs] == ["C", "B"]


class TestReportEndpoints:
    def test_occupancy(self, client):
        park(client, "A")
        body = client.get("/api/v1/reports/occupancy").json()
        assert body["floors"][0] == {"floor": 1, "occupied": 1, "capacity": 20,
                                     "occupancy_percent": 5.0, "is_full": False}
        assert body["occupied"] == 1 and body["capacity"] == 100

    def test_revenue_empty(self, client):
        body = client.get("/api/v1/reports/revenue").json()
        assert body["has_transactions"] is False
        assert body["total"] == 0.0

    def test_revenue_after_exit_counts_today(self, client):
        park(client, "A", "heavy")
        client.post("/api/v1/parking/exit/A")
        body = client.get("/api/v1/reports/revenue").json()
        assert body["total"] == 60.0 and body["today"] == 60.0

    def test_peak_hour_no_data(self, client):
        body = client.get("/api/v1/reports/peak-hour").json()
        assert body["has_data"] is False and body["label"] is None
        assert len(body["histogram"]) == 24


class TestHealthAndLifecycle:
    def test_health(self, client):
        body = client.get("/api/v1/health").json()
        assert body["status"] == "ok"
        assert body["storage"] == "ok"
        assert body["capacity"] == 100

    def test_shutdown_persists_and_startup_restores(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "DATA_DIR", str(tmp_path / "data"))
        with TestClient(app) as c:
            park(c, "KA-01")
        assert "KA-01" in (tmp_path / "data" / "parking_state.csv").read_text()
        with TestClient(app) as c:
            assert c.get("/api/v1/parking/vehicles/KA-01").json()["found"] is True


class TestHandlersDirectly:
    @pytest.mark.asyncio
    async def test_park_handler(self, tmp_path):
        session = make_session(tmp_path)
        out = await parking.park_vehicle(VehicleEntryIn(category="1", license="KA-01", owner="A"), session)
        assert out.vehicle.license == "KA-01"
        with pytest.raises(DuplicateVehicle):
            await parking.park_vehicle(VehicleEntryIn(category="1", license="KA-01", owner="B"), session)

    @pytest.mark.asyncio
    async def test_peak_hour_label(self, tmp_path):
        session = make_session(tmp_path)
        session.park_vehicle("standard", "KA-01", "A")
        out = await reports.get_peak_hour(session)
        assert out.label == "09:00-10:00"
        assert out.count == 1
