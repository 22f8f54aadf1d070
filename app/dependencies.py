# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends(); tests swap them
# out through app.dependency_overrides.
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header

from app.config import settings
from app.exceptions import ServiceNotConfiguredError, WebhookSignatureError
from core.services.analysis_service import BusinessAnalyzer
from core.services.business_store import (
    BusinessStore,
    InMemoryBusinessStore,
    SupabaseBusinessStore,
)
from lib.anthropic_client import get_anthropic_client
from lib.rate_gate import FixedIntervalGate
from lib.sms_client import SMSTransport, get_sms_client
from lib.stripe_client import StripePaymentGateway
from lib.stripe_client import get_payment_gateway as _get_stripe_gateway


@lru_cache
def _build_business_store(backend: str, seed_demo: bool) -> BusinessStore:
    if backend == "memory":
        return InMemoryBusinessStore(seed_demo=seed_demo)
    return SupabaseBusinessStore()


def get_business_store() -> BusinessStore:
    """
    Get the business store selected by BUSINESS_STORE_BACKEND.

    One store per backend per process, so the in-memory backend keeps its
    records between requests.
    """
    return _build_business_store(settings.BUSINESS_STORE_BACKEND, settings.SEED_DEMO_BUSINESS)


def get_sms_transport() -> SMSTransport:
    """
    Get the SMS transport.

    Raises:
        ServiceNotConfiguredError: If Twilio credentials are missing
    """
    client = get_sms_client()
    if client is None:
        raise ServiceNotConfiguredError("sms", "SMS service not configured")
    return client


def get_send_gate() -> FixedIntervalGate:
    """A fresh pacing gate for one bulk dispatch."""
    return FixedIntervalGate(settings.sms_send_interval_seconds)


def get_payment_gateway() -> StripePaymentGateway:
    """
    Get the Stripe gateway.

    Raises:
        ServiceNotConfiguredError: If STRIPE_SECRET_KEY is missing
    """
    gateway = _get_stripe_gateway()
    if not gateway.api_key:
        raise ServiceNotConfiguredError("payments", "Payment service not configured")
    return gateway


def require_stripe_signature(
    stripe_signature: Annotated[str | None, Header()] = None,
) -> str:
    """
    The `stripe-signature` header of a webhook request.

    Declared ahead of the gateway on the webhook route, so an unsigned
    request is rejected even when payments aren't configured.

    Raises:
        WebhookSignatureError: If the header is missing or empty
    """
    if not stripe_signature:
        raise WebhookSignatureError("No signature")
    return stripe_signature


def get_business_analyzer() -> BusinessAnalyzer:
    """Get a website analyzer; AI extraction is enabled when ANTHROPIC_API_KEY is set."""
    return BusinessAnalyzer(
        anthropic_client=get_anthropic_client(),
        model=settings.ANTHROPIC_MODEL,
        max_tokens=settings.ANTHROPIC_MAX_TOKENS,
        fetch_timeout=settings.WEBSITE_FETCH_TIMEOUT,
    )


# Type aliases for dependency injection
BusinessStoreDep = Annotated[BusinessStore, Depends(get_business_store)]
SMSTransportDep = Annotated[SMSTransport, Depends(get_sms_transport)]
SendGateDep = Annotated[FixedIntervalGate, Depends(get_send_gate)]
PaymentGatewayDep = Annotated[StripePaymentGateway, Depends(get_payment_gateway)]
StripeSignatureDep = Annotated[str, Depends(require_stripe_signature)]
BusinessAnalyzerDep = Annotated[BusinessAnalyzer, Depends(get_business_analyzer)]
