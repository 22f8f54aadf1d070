# =============================================================================
# core/services/business_store.py - Business Record Store
# =============================================================================
# Holds business profiles and answers the read/aggregate queries the
# dashboard needs. Two backends share one contract:
#
# - InMemoryBusinessStore: process-local list with linear scans. Shared by
#   all requests in the process without locking, so concurrent writes are
#   not atomic with respect to each other. Used for development and tests.
# - SupabaseBusinessStore: the `businesses` table.
#
# Contract:
# - insert() assigns a fresh id, stamps created/updated times, starts the
#   record in `setup`, and never validates the payload.
# - get_all() returns newest first.
# - get_by_id() returns None for unknown ids, never raises for "not found".
# - update_status() is a silent no-op for unknown ids.
# - get_stats() derives totals from the full collection.
# =============================================================================

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable

from core.models.business import (
    Branding,
    BusinessRecord,
    BusinessStats,
    BusinessStatus,
    BusinessType,
)
from lib.supabase_client import SupabaseClient
from lib.utils import generate_id, utc_now

logger = logging.getLogger(__name__)

# Placeholder revenue figure per business used by the dashboard summary
REVENUE_PER_BUSINESS = 45000


def _as_number(value: Any, default: float) -> float:
    """Coerce loosely-typed numeric input (e.g. "85" from an AI response)."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _as_text(value: Any) -> str | None:
    return None if value is None else str(value)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_text_list(value: Any) -> list[str]:
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item is not None]
    if isinstance(value, str) and value:
        return [value]
    return []


def build_business_record(
    data: dict[str, Any],
    business_id: str,
    now: datetime,
) -> BusinessRecord:
    """
    Map an ingestion payload onto a new BusinessRecord.

    Accepts camelCase keys as produced by the analysis step. The payload is
    not trusted to be well typed: scalars are coerced to text, numbers are
    parsed leniently, and anything that isn't the expected container is
    replaced by an empty one, so building a record never fails. Missing
    optional fields get empty defaults; reputationScore is lifted out of
    webIntelligence.
    """
    web_intelligence = _as_dict(data.get("webIntelligence"))
    branding = _as_dict(data.get("branding"))

    return BusinessRecord(
        id=business_id,
        name=_as_text(data.get("name")),
        type=str(data.get("type") or BusinessType.CUSTOM.value),
        industry=_as_text(data.get("industry")),
        website=_as_text(data.get("website")) or "",
        email=_as_text(data.get("email")),
        phone=_as_text(data.get("phone")),
        address=_as_text(data.get("address")),
        description=_as_text(data.get("description")),
        features=_as_text_list(data.get("features")),
        branding=Branding(
            primary_color=_as_text(branding.get("primaryColor", branding.get("primary_color"))),
            secondary_color=_as_text(branding.get("secondaryColor", branding.get("secondary_color"))),
            logo_url=_as_text(branding.get("logoUrl", branding.get("logo_url"))),
        ),
        confidence=_as_number(data.get("confidence"), 50) or 50,
        business_details=_as_dict(data.get("businessDetails")),
        reputation_score=_as_number(web_intelligence.get("reputationScore"), 0),
        web_intelligence=web_intelligence,
        status=BusinessStatus.SETUP,
        created_at=now,
        updated_at=now,
    )


def summarize_businesses(records: list[BusinessRecord]) -> BusinessStats:
    """
    Compute dashboard totals for a collection of businesses.

    avg_reputation is None for an empty collection.
    """
    total = len(records)
    active = sum(1 for r in records if r.status == BusinessStatus.ACTIVE)
    avg_reputation = (
        sum(r.reputation_score for r in records) / total if total else None
    )
    return BusinessStats(
        total=total,
        active=active,
        total_revenue=total * REVENUE_PER_BUSINESS,
        avg_reputation=avg_reputation,
    )


def demo_business() -> BusinessRecord:
    """The fixed demo business used to seed an empty in-memory store."""
    return BusinessRecord.model_validate({
        "id": "demo_biz_001",
        "name": "Demo Heavy Equipment",
        "type": BusinessType.HEAVY_EQUIPMENT.value,
        "industry": "Construction Equipment Rental",
        "website": "https://example.com",
        "email": "demo@example.com",
        "phone": "+1-555-DEMO-01",
        "address": "123 Demo St, Demo City",
        "description": "Demo heavy equipment rental business",
        "features": ["GPS Tracking", "Delivery Services"],
        "branding": {"primaryColor": "#FF6600", "secondaryColor": "#003366"},
        "confidence": 85,
        "businessDetails": {"specialties": ["Excavators", "Bulldozers"]},
        "reputationScore": 78,
        "webIntelligence": {
            "googleReviews": {"rating": 4.2, "reviewCount": 89},
            "socialMedia": {"facebook": {"followers": 1234}},
            "overallSentiment": "positive",
        },
        "status": BusinessStatus.ACTIVE.value,
        "createdAt": "2024-01-15T10:00:00Z",
        "updatedAt": "2024-01-15T10:00:00Z",
    })


class BusinessStore(ABC):
    """Read/write contract shared by every business store backend."""

    @abstractmethod
    def insert(self, data: dict[str, Any]) -> str:
        """Store a new business and return its id."""

    @abstractmethod
    def get_all(self) -> list[BusinessRecord]:
        """All businesses, newest first."""

    @abstractmethod
    def get_by_id(self, business_id: str) -> BusinessRecord | None:
        """One business, or None when the id is unknown."""

    @abstractmethod
    def update_status(self, business_id: str, status: BusinessStatus) -> None:
        """Change lifecycle status; unknown ids are ignored."""

    def get_stats(self) -> BusinessStats:
        """Totals over the full current collection."""
        return summarize_businesses(self.get_all())


class InMemoryBusinessStore(BusinessStore):
    """
    Process-local business store.

    Args:
        seed_demo: Seed the demo business whenever get_all() finds the
            store empty
        clock: Source of "now" for timestamps (injectable for tests)
    """

    def __init__(
        self,
        seed_demo: bool = True,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.seed_demo = seed_demo
        self._clock = clock
        self._records: list[BusinessRecord] = []

    def insert(self, data: dict[str, Any]) -> str:
        business_id = generate_id("biz")
        while self.get_by_id(business_id) is not None:
            business_id = generate_id("biz")

        record = build_business_record(data, business_id, self._clock())
        self._records.append(record)

        logger.info(f"Stored business: {record.name} with ID: {business_id}")
        return business_id

    def get_all(self) -> list[BusinessRecord]:
        if not self._records and self.seed_demo:
            self._records.append(demo_business())
            logger.debug("Seeded empty business store with demo record")

        return sorted(self._records, key=lambda r: r.created_at, reverse=True)

    def get_by_id(self, business_id: str) -> BusinessRecord | None:
        for record in self._records:
            if record.id == business_id:
                return record
        return None

    def update_status(self, business_id: str, status: BusinessStatus) -> None:
        record = self.get_by_id(business_id)
        if record is None:
            return

        record.status = status
        record.updated_at = self._clock()
        logger.info(f"Business {business_id} status -> {status.value}")

    def __len__(self) -> int:
        return len(self._records)


class SupabaseBusinessStore(BusinessStore):
    """Business store backed by the Supabase `businesses` table."""

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._clock = clock

    def insert(self, data: dict[str, Any]) -> str:
        record = build_business_record(data, generate_id("biz"), self._clock())
        SupabaseClient.insert_business(record.to_row())

        logger.info(f"Stored business in Supabase: {record.name} with ID: {record.id}")
        return record.id

    def get_all(self) -> list[BusinessRecord]:
        rows = SupabaseClient.list_businesses()
        return [BusinessRecord.model_validate(row) for row in rows]

    def get_by_id(self, business_id: str) -> BusinessRecord | None:
        row = SupabaseClient.fetch_business(business_id)
        return BusinessRecord.model_validate(row) if row else None

    def update_status(self, business_id: str, status: BusinessStatus) -> None:
        updated = SupabaseClient.update_business(
            business_id,
            {"status": status.value, "updated_at": self._clock().isoformat()},
        )
        if updated:
            logger.info(f"Business {business_id} status -> {status.value}")
