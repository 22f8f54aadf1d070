# =============================================================================
# tests/test_equipment_api.py - Equipment Endpoint Tests
# =============================================================================
# End-to-end through the FastAPI app with Supabase replaced by the in-memory
# fake from conftest.
#
# Run with: pytest tests/test_equipment_api.py -v
# =============================================================================

import re

import pytest

EQ_ID = re.compile(r"^eq_\d{13}_[a-z0-9]{8}$")


@pytest.fixture
def create(client, fake_supabase, sample_equipment_payload):
    """POST an equipment item, with optional overrides."""
    def _create(**overrides):
        body = {**sample_equipment_payload, **overrides}
        return client.post("/api/equipment", json=body)
    return _create


class TestCreateEquipment:

    def test_created_with_defaults(self, create, fake_supabase):
        response = create()

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        data = body["data"]
        assert EQ_ID.match(data["id"])
        assert data["status"] == "available"
        assert data["condition"] == "excellent"
        assert data["daily_rate"] == 450
        assert data["images"] == []
        assert data["created_at"] == data["updated_at"]
        assert len(fake_supabase.tables["equipment"]) == 1

    def test_string_rates_are_accepted(self, create):
        response = create(daily_rate="125.50")

        assert response.status_code == 201
        assert response.json()["data"]["daily_rate"] == 125.5

    def test_missing_daily_rate_rejected_and_nothing_stored(
        self, client, fake_supabase, sample_equipment_payload
    ):
        body = {k: v for k, v in sample_equipment_payload.items() if k != "daily_rate"}

        response = client.post("/api/equipment", json=body)

        assert response.status_code == 400
        error = response.json()
        assert error["success"] is False
        assert error["code"] == "VALIDATION_ERROR"
        assert "daily_rate" in error["error"]
        assert fake_supabase.tables["equipment"] == []

        listing = client.get("/api/equipment", params={"business_id": "biz_1"}).json()
        assert listing["data"] == []
        assert listing["pagination"]["total"] == 0

    @pytest.mark.parametrize("field", ["business_id", "name", "category"])
    def test_other_required_fields(self, client, fake_supabase, sample_equipment_payload, field):
        body = {k: v for k, v in sample_equipment_payload.items() if k != field}

        response = client.post("/api/equipment", json=body)

        assert response.status_code == 400
        assert field in response.json()["error"]
        assert fake_supabase.tables["equipment"] == []

    def test_zero_daily_rate_rejected(self, create, fake_supabase):
        response = create(daily_rate=0)

        assert response.status_code == 400
        assert fake_supabase.tables["equipment"] == []


class TestListEquipment:

    def test_business_id_required(self, client, fake_supabase):
        response = client.get("/api/equipment")

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Business ID is required",
            "code": "VALIDATION_ERROR",
        }

    def test_filters_and_scoping(self, client, create):
        create(name="Excavator A", category="Excavators")
        create(name="Scissor Lift", category="Lifts")
        create(name="Other biz excavator", business_id="biz_2")

        body = client.get(
            "/api/equipment", params={"business_id": "biz_1", "category": "Lifts"}
        ).json()

        assert [e["name"] for e in body["data"]] == ["Scissor Lift"]

    def test_status_filter(self, client, create):
        create(name="In yard")
        create(name="In shop", status="maintenance")

        body = client.get(
            "/api/equipment", params={"business_id": "biz_1", "status": "maintenance"}
        ).json()

        assert [e["name"] for e in body["data"]] == ["In shop"]

    def test_search(self, client, create):
        create(name="CAT 320 Excavator", description="hydraulic")
        create(name="Genie Boom Lift", category="Lifts", description="articulating")

        body = client.get(
            "/api/equipment", params={"business_id": "biz_1", "search": "boom"}
        ).json()

        assert [e["name"] for e in body["data"]] == ["Genie Boom Lift"]

    def test_pagination(self, client, fake_supabase):
        fake_supabase.tables["equipment"].extend(
            {
                "id": f"eq_{i}",
                "business_id": "biz_1",
                "name": f"Item {i}",
                "category": "Tools",
                "daily_rate": 10,
                "created_at": f"2025-01-01T00:00:{i:02d}+00:00",
            }
            for i in range(5)
        )

        body = client.get(
            "/api/equipment", params={"business_id": "biz_1", "page": 2, "limit": 2}
        ).json()

        assert [e["id"] for e in body["data"]] == ["eq_2", "eq_1"]
        assert body["pagination"] == {"page": 2, "limit": 2, "total": 5, "totalPages": 3}


class TestSingleEquipment:

    def test_get(self, client, create):
        equipment_id = create().json()["data"]["id"]

        response = client.get(f"/api/equipment/{equipment_id}")

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "CAT 320 Excavator"

    def test_get_missing(self, client, fake_supabase):
        response = client.get("/api/equipment/eq_missing")

        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_partial_update(self, client, create):
        created = create().json()["data"]

        response = client.put(
            f"/api/equipment/{created['id']}",
            json={"daily_rate": 500, "status": "rented"},
        )

        data = response.json()["data"]
        assert response.status_code == 200
        assert data["daily_rate"] == 500
        assert data["status"] == "rented"
        assert data["name"] == created["name"]
        assert data["weekly_rate"] == created["weekly_rate"]

    def test_update_missing(self, client, fake_supabase):
        response = client.put("/api/equipment/eq_missing", json={"name": "X"})

        assert response.status_code == 404

    def test_delete(self, client, create, fake_supabase):
        equipment_id = create().json()["data"]["id"]

        response = client.delete(f"/api/equipment/{equipment_id}")

        assert response.status_code == 200
        assert fake_supabase.tables["equipment"] == []

    def test_delete_refused_with_open_rental(self, client, create, fake_supabase):
        equipment_id = create().json()["data"]["id"]
        fake_supabase.tables["rentals"].append(
            {"id": "r1", "equipment_id": equipment_id, "status": "reserved"}
        )

        response = client.delete(f"/api/equipment/{equipment_id}")

        assert response.status_code == 400
        assert response.json()["error"] == "Cannot delete equipment with active rentals"
        assert len(fake_supabase.tables["equipment"]) == 1

    def test_delete_allowed_after_rentals_close(self, client, create, fake_supabase):
        equipment_id = create().json()["data"]["id"]
        fake_supabase.tables["rentals"].append(
            {"id": "r1", "equipment_id": equipment_id, "status": "completed"}
        )

        assert client.delete(f"/api/equipment/{equipment_id}").status_code == 200


class TestDatabaseFailure:

    def test_upstream_error_is_generic(self, client, monkeypatch):
        from lib.supabase_client import SupabaseClient

        class BrokenClient:
            def table(self, name):
                raise RuntimeError("connection refused to db.internal:5432")

        monkeypatch.setattr(SupabaseClient, "_instance", BrokenClient())

        response = client.get("/api/equipment", params={"business_id": "biz_1"})

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Failed to fetch equipment",
            "code": "UPSTREAM_ERROR",
        }
