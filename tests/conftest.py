# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - In-memory stand-in for the Supabase query builder
# - Fake SMS transport, fake clock, and a TestClient with dependencies
#   overridden
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("TWILIO_ACCOUNT_SID", "ACtest")
os.environ.setdefault("TWILIO_AUTH_TOKEN", "test-auth-token")
os.environ.setdefault("TWILIO_PHONE_NUMBER", "+15550000000")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_123")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_secret")
os.environ.setdefault("BUSINESS_STORE_BACKEND", "memory")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.dependencies import (
    get_business_store,
    get_payment_gateway,
    get_send_gate,
    get_sms_transport,
)
from app.main import app
from core.services.business_store import InMemoryBusinessStore
from lib.rate_gate import FixedIntervalGate
from lib.sms_client import SentMessage, SMSTransportError
from lib.stripe_client import StripePaymentGateway
from lib.supabase_client import SupabaseClient


# =============================================================================
# Fake Supabase
# =============================================================================

class FakeResponse:
    """Mimics postgrest's APIResponse (data + count)."""

    def __init__(self, data: Any, count: int | None = None):
        self.data = data
        self.count = count


class FakeQuery:
    """
    Chainable query over a list of dict rows.

    Supports the subset of the postgrest builder the app uses.
    """

    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = rows
        self._op = "select"
        self._payload: Any = None
        self._filters: list = []
        self._count = False
        self._order: tuple[str, bool] | None = None
        self._range: tuple[int, int] | None = None
        self._limit: int | None = None
        self._single = False

    # Operations
    def select(self, columns: str = "*", count: str | None = None):
        self._op = "select"
        self._count = count is not None
        return self

    def insert(self, payload):
        self._op = "insert"
        self._payload = payload if isinstance(payload, list) else [payload]
        return self

    def update(self, changes):
        self._op = "update"
        self._payload = changes
        return self

    def delete(self):
        self._op = "delete"
        return self

    # Filters
    def eq(self, column, value):
        self._filters.append(lambda r: r.get(column) == value)
        return self

    def neq(self, column, value):
        self._filters.append(lambda r: r.get(column) != value)
        return self

    def in_(self, column, values):
        self._filters.append(lambda r: r.get(column) in values)
        return self

    def gte(self, column, value):
        self._filters.append(lambda r: r.get(column) is not None and r.get(column) >= value)
        return self

    def lte(self, column, value):
        self._filters.append(lambda r: r.get(column) is not None and r.get(column) <= value)
        return self

    def or_(self, filters: str):
        # Only "column.ilike.%term%" clauses, comma separated
        clauses = []
        for clause in filters.split(","):
            column, _, pattern = clause.strip().split(".", 2)
            clauses.append((column, pattern.strip("%").lower()))

        def matches(row):
            return any(term in str(row.get(column) or "").lower() for column, term in clauses)

        self._filters.append(matches)
        return self

    def text_search(self, column, query):
        words = query.lower().split()

        def matches(row):
            text = " ".join(str(v) for v in row.values() if isinstance(v, str)).lower()
            return all(w in text for w in words)

        self._filters.append(matches)
        return self

    # Modifiers
    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def limit(self, n):
        self._limit = n
        return self

    def single(self):
        self._single = True
        return self

    def execute(self) -> FakeResponse:
        if self._op == "insert":
            new_rows = [dict(r) for r in self._payload]
            self._rows.extend(new_rows)
            return FakeResponse([dict(r) for r in new_rows])

        matched = [r for r in self._rows if all(f(r) for f in self._filters)]

        if self._op == "update":
            for row in matched:
                row.update(self._payload)
            return FakeResponse([dict(r) for r in matched])

        if self._op == "delete":
            for row in matched:
                self._rows.remove(row)
            return FakeResponse([dict(r) for r in matched])

        count = len(matched) if self._count else None
        if self._order:
            column, desc = self._order
            matched = sorted(matched, key=lambda r: r.get(column) or "", reverse=desc)
        if self._range:
            start, end = self._range
            matched = matched[start:end + 1]
        if self._limit is not None:
            matched = matched[:self._limit]

        if self._single:
            if len(matched) != 1:
                raise Exception(
                    '{"code": "PGRST116", "message": "JSON object requested, '
                    'multiple (or no) rows returned"}'
                )
            return FakeResponse(dict(matched[0]), count)

        return FakeResponse([dict(r) for r in matched], count)


class FakeSupabase:
    """Minimal Supabase client: table name -> list of rows."""

    def __init__(self):
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self.tables[name])


# =============================================================================
# Fakes for vendor transports
# =============================================================================

class FakeSMSTransport:
    """Records sends; numbers in `fail_for` raise like a provider error."""

    def __init__(self, fail_for: set[str] | None = None):
        self.fail_for = fail_for or set()
        self.sent: list[tuple[str, str]] = []
        self.attempts: list[str] = []

    def send(self, to: str, body: str) -> SentMessage:
        self.attempts.append(to)
        if to in self.fail_for:
            raise SMSTransportError(f"The 'To' number {to} is not a valid phone number.")
        self.sent.append((to, body))
        return SentMessage(sid=f"SM{len(self.sent):04d}", status="queued", to=to)


class FakeClock:
    """Monotonic clock whose sleep() just advances time."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SteppingClock:
    """UTC datetime source that moves forward one minute per call."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(minutes=1)
        return self.current


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_supabase(monkeypatch):
    """Route every SupabaseClient call to an in-memory fake."""
    fake = FakeSupabase()
    monkeypatch.setattr(SupabaseClient, "_instance", fake)
    return fake


@pytest.fixture
def memory_store():
    """Empty in-memory business store without demo seeding."""
    return InMemoryBusinessStore(seed_demo=False, clock=SteppingClock())


@pytest.fixture
def sms_transport():
    return FakeSMSTransport()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def send_gate(fake_clock):
    """100ms gate that never really sleeps."""
    return FixedIntervalGate(0.1, clock=fake_clock, sleep=fake_clock.sleep)


@pytest.fixture
def payment_gateway():
    return StripePaymentGateway(api_key="sk_test_123", webhook_secret="whsec_test_secret")


@pytest.fixture
def client(memory_store, sms_transport, send_gate, payment_gateway):
    """TestClient with every vendor-facing dependency replaced."""
    app.dependency_overrides[get_business_store] = lambda: memory_store
    app.dependency_overrides[get_sms_transport] = lambda: sms_transport
    app.dependency_overrides[get_send_gate] = lambda: send_gate
    app.dependency_overrides[get_payment_gateway] = lambda: payment_gateway

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def sample_business_payload():
    """Analysis output for a heavy-equipment business."""
    return {
        "name": "Summit Heavy Rentals",
        "type": "heavy_equipment",
        "industry": "Construction Equipment Rental",
        "website": "https://summit-rentals.example",
        "email": "info@summit-rentals.example",
        "phone": "(303) 555-0142",
        "address": "4100 Quarry Rd, Golden, CO",
        "description": "Excavators and loaders for contractors.",
        "features": ["Delivery Services", "Operator Training"],
        "branding": {"primaryColor": "#FF6600", "secondaryColor": "#003366"},
        "confidence": 88,
        "businessDetails": {"serviceAreas": ["Denver", "Golden"]},
        "webIntelligence": {"reputationScore": 82, "overallSentiment": "positive"},
    }


@pytest.fixture
def sample_equipment_payload():
    return {
        "business_id": "biz_1",
        "name": "CAT 320 Excavator",
        "category": "Excavators",
        "daily_rate": 450,
        "weekly_rate": 2200,
        "condition": "excellent",
        "description": "20-ton hydraulic excavator",
    }


@pytest.fixture
def sample_customer_payload():
    return {
        "business_id": "biz_1",
        "name": "Dana Ortiz",
        "email": "dana@ortizbuilds.example",
        "phone": "303-555-0199",
        "company": "Ortiz Builds",
    }


@pytest.fixture
def sample_rental_payload():
    return {
        "business_id": "biz_1",
        "customer_id": "cust_1",
        "equipment_id": "eq_1",
        "start_date": "2024-03-01",
        "end_date": "2024-03-04",
        "daily_rate": 450,
        "deposit": 500,
    }
