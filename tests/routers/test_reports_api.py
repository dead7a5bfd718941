"""
HTTP tests for the reporting router.

The snapshot travels in the request body, so every call is self-contained.
"""
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from properly.main import app

NOW = "2024-03-15T12:00:00"


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def body(snapshot):
    return snapshot.model_dump(mode="json")


def _money(value) -> Decimal:
    return Decimal(str(value))


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}
        assert resp.headers["X-Content-Type-Options"] == "nosniff"


class TestRentRoll:
    def test_rent_roll(self, client, body):
        resp = client.post("/api/v1/reports/rent-roll", params={"now": NOW}, json=body)
        assert resp.status_code == 200
        data = resp.json()
        assert [i["status"] for i in data["rent_roll"]["items"]] == ["Paid", "Overdue", "Upcoming"]
        assert _money(data["summary"]["total_rent"]) == Decimal("2900")
        assert _money(data["summary"]["collected_percentage"]) == Decimal("62.07")
        assert [i["lease_id"] for i in data["due"]] == ["L2", "L3"]
        assert [e["lease_id"] for e in data["expiring_leases"]] == ["L1"]

    def test_computed_status_in_payload_is_rejected(self, client, body):
        body["payments"][0]["status"] = "Overdue"
        resp = client.post("/api/v1/reports/rent-roll", params={"now": NOW}, json=body)
        assert resp.status_code == 422


class TestPortfolio:
    def test_properties(self, client, body):
        resp = client.post("/api/v1/reports/properties", json=body)
        assert resp.status_code == 200
        data = resp.json()
        assert data["portfolio"]["total_units"] == 3
        assert _money(data["portfolio"]["occupancy_percentage"]) == Decimal("66.67")
        assert [v["unit_id"] for v in data["vacant_units"]] == ["U2"]
        assert _money(data["rent_split_mismatches"][0]["difference"]) == Decimal("100")


class TestFinancials:
    def test_year_overview(self, client, body):
        resp = client.post("/api/v1/reports/financials", params={"year": 2024}, json=body)
        assert resp.status_code == 200
        data = resp.json()
        assert _money(data["summary"]["noi"]) == Decimal("1350")
        assert len(data["monthly"]) == 12

    def test_year_out_of_range(self, client, body):
        resp = client.post("/api/v1/reports/financials", params={"year": 1800}, json=body)
        assert resp.status_code == 400


class TestPreview:
    def test_preview_with_filters(self, client, snapshot):
        payload = {
            "snapshot": snapshot.model_dump(mode="json"),
            "filters": {"property_name": "Oak Plaza"},
        }
        resp = client.post("/api/v1/reports/preview/tenant_directory", params={"now": NOW}, json=payload)
        assert resp.status_code == 200
        data = resp.json()
        assert data["title"] == "Tenant Directory"
        assert [row["Name"] for row in data["rows"]] == ["Bob Smith", "Carol White"]

    def test_preview_limit_keeps_total(self, client, body):
        resp = client.post(
            "/api/v1/reports/preview/rent_roll",
            params={"now": NOW, "limit": 1},
            json={"snapshot": body},
        )
        data = resp.json()
        assert len(data["rows"]) == 1
        assert data["total_rows"] == 3

    def test_unknown_report(self, client, body):
        resp = client.post("/api/v1/reports/preview/balance_sheet", json={"snapshot": body})
        assert resp.status_code == 404

    def test_csv_download(self, client, body):
        resp = client.post("/api/v1/reports/preview/vacancy/csv", json={"snapshot": body})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "vacancy.csv" in resp.headers["content-disposition"]
        assert resp.text == "Property,Unit,Market Rent,Beds,Baths\r\nMaple Court,Unit 2B,1500.00,1,1.00\r\n"

    def test_properties_csv_download(self, client, body):
        resp = client.post("/api/v1/reports/properties/csv", json=body)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "properties.csv" in resp.headers["content-disposition"]
        lines = resp.text.split("\r\n")
        assert lines[0] == "Name,Address,Owner,Total Units,Occupied,Vacant,Monthly Revenue"
        assert lines[1] == 'Maple Court,"12 Maple Ave, Springfield",owner-1,2,1,1,1800.00'
        assert lines[2] == "Oak Plaza,400 Oak St,owner-2,1,1,0,1200.00"

    def test_preview_reports_skipped_records(self, client, body):
        body["payments"].append({"id": "ORPHAN", "lease_id": "NOPE", "tenant_id": "T1",
                                 "amount": "100", "due_date": "2024-03-01"})
        resp = client.post("/api/v1/reports/preview/rent_roll", params={"now": NOW}, json={"snapshot": body})
        assert resp.status_code == 200
        assert resp.json()["skipped"] == 1
