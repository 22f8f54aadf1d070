# =============================================================================
# tests/test_business_store.py - Business Record Store Tests
# =============================================================================
# Exercises both backends against the same contract: insert, ordering,
# lookup, status updates and aggregate stats.
#
# Run with: pytest tests/test_business_store.py -v
# =============================================================================

import re
from datetime import datetime, timezone

import pytest

from core.models.business import BusinessStatus
from core.services.business_store import (
    REVENUE_PER_BUSINESS,
    InMemoryBusinessStore,
    SupabaseBusinessStore,
    build_business_record,
    summarize_businesses,
)
from tests.conftest import SteppingClock

ID_PATTERN = re.compile(r"^biz_\d{13}_[a-z0-9]{9}$")


@pytest.fixture(params=["memory", "supabase"])
def store(request, fake_supabase):
    """Each contract test runs once per backend."""
    if request.param == "memory":
        return InMemoryBusinessStore(seed_demo=False, clock=SteppingClock())
    return SupabaseBusinessStore(clock=SteppingClock())


def _payload(name: str, reputation: float | None = None, **extra) -> dict:
    data = {"name": name, "type": "tool_rental", **extra}
    if reputation is not None:
        data["webIntelligence"] = {"reputationScore": reputation}
    return data


# =============================================================================
# Contract (both backends)
# =============================================================================

class TestStoreContract:

    def test_insert_assigns_id_and_setup_status(self, store, sample_business_payload):
        business_id = store.insert(sample_business_payload)

        record = store.get_by_id(business_id)
        assert ID_PATTERN.match(business_id)
        assert record.name == "Summit Heavy Rentals"
        assert record.status == BusinessStatus.SETUP
        assert record.reputation_score == 82
        assert record.branding.primary_color == "#FF6600"
        assert record.created_at == record.updated_at

    def test_insert_accepts_loosely_typed_payload(self, store):
        business_id = store.insert({
            "name": 1234,
            "phone": 5551234567,
            "features": ["Delivery", 24, None],
            "branding": "orange",
            "businessDetails": ["not", "a", "dict"],
            "webIntelligence": "unknown",
        })

        record = store.get_by_id(business_id)
        assert record.name == "1234"
        assert record.phone == "5551234567"
        assert record.features == ["Delivery", "24"]
        assert record.branding.primary_color is None
        assert record.business_details == {}
        assert record.web_intelligence == {}
        assert record.reputation_score == 0

    def test_ids_are_unique(self, store):
        ids = {store.insert(_payload(f"Biz {i}")) for i in range(20)}

        assert len(ids) == 20

    def test_get_all_newest_first(self, store):
        first = store.insert(_payload("First"))
        second = store.insert(_payload("Second"))
        third = store.insert(_payload("Third"))

        assert [r.id for r in store.get_all()] == [third, second, first]

    def test_get_by_id_unknown_returns_none(self, store):
        assert store.get_by_id("biz_missing") is None

    def test_update_status_refreshes_updated_at(self, store):
        business_id = store.insert(_payload("Acme"))
        before = store.get_by_id(business_id)
        created_at, updated_at = before.created_at, before.updated_at

        store.update_status(business_id, BusinessStatus.ACTIVE)

        after = store.get_by_id(business_id)
        assert after.status == BusinessStatus.ACTIVE
        assert after.updated_at > updated_at
        assert after.created_at == created_at

    def test_update_status_unknown_id_is_noop(self, store):
        store.insert(_payload("Acme"))

        store.update_status("biz_missing", BusinessStatus.ACTIVE)

        assert [r.status for r in store.get_all()] == [BusinessStatus.SETUP]

    def test_stats(self, store):
        a = store.insert(_payload("A", reputation=80))
        store.insert(_payload("B", reputation=90))
        store.insert(_payload("C", reputation=70))
        store.update_status(a, BusinessStatus.ACTIVE)

        stats = store.get_stats()

        assert stats.total == 3
        assert stats.active == 1
        assert stats.active <= stats.total
        assert stats.total_revenue == 3 * REVENUE_PER_BUSINESS
        assert stats.avg_reputation == pytest.approx(80)


# =============================================================================
# In-memory specifics
# =============================================================================

class TestInMemoryStore:

    def test_empty_store_seeds_demo_business(self):
        store = InMemoryBusinessStore(seed_demo=True)

        businesses = store.get_all()

        assert [b.id for b in businesses] == ["demo_biz_001"]
        assert businesses[0].status == BusinessStatus.ACTIVE
        assert businesses[0].reputation_score == 78

    def test_seeding_happens_once(self):
        store = InMemoryBusinessStore(seed_demo=True)

        store.get_all()
        store.get_all()

        assert len(store) == 1

    def test_no_seed_when_store_has_records(self):
        store = InMemoryBusinessStore(seed_demo=True)
        store.insert(_payload("Acme"))

        assert [b.name for b in store.get_all()] == ["Acme"]

    def test_seeding_disabled(self):
        store = InMemoryBusinessStore(seed_demo=False)

        assert store.get_all() == []
        assert store.get_stats().avg_reputation is None

    def test_demo_business_sorts_behind_new_inserts(self):
        store = InMemoryBusinessStore(seed_demo=True)
        store.get_all()

        new_id = store.insert(_payload("Fresh"))

        assert store.get_all()[0].id == new_id


# =============================================================================
# Supabase specifics
# =============================================================================

class TestSupabaseStore:

    def test_row_uses_snake_case_columns(self, fake_supabase, sample_business_payload):
        store = SupabaseBusinessStore()

        business_id = store.insert(sample_business_payload)

        row = fake_supabase.tables["businesses"][0]
        assert row["id"] == business_id
        assert row["reputation_score"] == 82
        assert row["business_details"] == {"serviceAreas": ["Denver", "Golden"]}
        assert row["branding"] == {"primaryColor": "#FF6600", "secondaryColor": "#003366"}
        assert row["status"] == "setup"

    def test_never_seeds_demo(self, fake_supabase):
        assert SupabaseBusinessStore().get_all() == []


# =============================================================================
# Helpers
# =============================================================================

class TestBuildBusinessRecord:

    NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_defaults_for_sparse_payload(self):
        record = build_business_record({"name": "Sparse"}, "biz_1", self.NOW)

        assert record.type == "custom"
        assert record.website == ""
        assert record.features == []
        assert record.confidence == 50
        assert record.reputation_score == 0
        assert record.web_intelligence == {}

    def test_string_numbers_from_ai_are_coerced(self):
        record = build_business_record(
            {"name": "AI", "confidence": "92", "webIntelligence": {"reputationScore": "77"}},
            "biz_1",
            self.NOW,
        )

        assert record.confidence == 92
        assert record.reputation_score == 77

    def test_single_string_feature_is_not_split(self):
        record = build_business_record({"features": "GPS Tracking"}, "biz_1", self.NOW)

        assert record.features == ["GPS Tracking"]

    def test_to_api_is_camel_case(self, sample_business_payload):
        body = build_business_record(sample_business_payload, "biz_1", self.NOW).to_api()

        assert body["reputationScore"] == 82
        assert body["webIntelligence"]["overallSentiment"] == "positive"
        assert body["createdAt"].startswith("2025-01-01T00:00:00")
        assert "reputation_score" not in body


class TestSummarizeBusinesses:

    def test_empty_collection(self):
        stats = summarize_businesses([])

        assert (stats.total, stats.active, stats.total_revenue) == (0, 0, 0)
        assert stats.avg_reputation is None
