# =============================================================================
# lib/stripe_client.py - Stripe Payment Gateway
# =============================================================================
# Wraps the two Stripe operations the API needs:
# - creating a PaymentIntent for a rental payment
# - verifying and parsing webhook events
#
# Usage:
#   from lib.stripe_client import get_payment_gateway
#   gateway = get_payment_gateway()
#   intent = gateway.create_payment_intent(45000, "usd", {"rentalId": "rent_1"})
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

import stripe

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class PaymentGatewayError(ApplicationError):
    """Raised when Stripe fails to create or look up a payment."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message,
            code="PAYMENT_GATEWAY_ERROR",
            suggestion="Check STRIPE_SECRET_KEY and the Stripe dashboard logs",
            details=details,
        )


class InvalidWebhookError(ApplicationError):
    """Raised when a webhook payload or its signature doesn't verify."""

    def __init__(self, message: str):
        super().__init__(
            message,
            code="INVALID_WEBHOOK",
            suggestion="Check STRIPE_WEBHOOK_SECRET matches the endpoint's signing secret",
        )


@dataclass
class CreatedPaymentIntent:
    """The parts of a PaymentIntent the client needs to confirm payment."""
    id: str
    client_secret: str
    status: str


class StripePaymentGateway:
    """Stripe-backed payment operations."""

    def __init__(self, api_key: str | None, webhook_secret: str | None):
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_payment_intent(
        self,
        amount_cents: int,
        currency: str,
        metadata: dict[str, str],
    ) -> CreatedPaymentIntent:
        """
        Create a PaymentIntent with automatic payment methods enabled.

        Args:
            amount_cents: Amount in the currency's smallest unit
            currency: ISO currency code, lower-case
            metadata: Free-form string metadata stored on the intent

        Raises:
            PaymentGatewayError: If Stripe rejects the request
        """
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_cents,
                currency=currency,
                metadata=metadata,
                automatic_payment_methods={"enabled": True},
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            raise PaymentGatewayError(
                f"PaymentIntent creation failed: {e}",
                details={"amount_cents": amount_cents, "currency": currency},
            ) from e

        logger.info(f"Created PaymentIntent {intent.id} for {amount_cents} {currency}")
        return CreatedPaymentIntent(
            id=intent.id,
            client_secret=intent.client_secret,
            status=intent.status,
        )

    def construct_event(self, payload: bytes | str, signature: str) -> dict[str, Any]:
        """
        Verify a webhook signature and return the parsed event.

        Raises:
            InvalidWebhookError: If the payload or signature is invalid
        """
        if not self.webhook_secret:
            raise InvalidWebhookError("Webhook secret is not configured")

        try:
            return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except ValueError as e:
            raise InvalidWebhookError(f"Invalid webhook payload: {e}") from e
        except stripe.SignatureVerificationError as e:
            raise InvalidWebhookError(f"Invalid webhook signature: {e}") from e


@lru_cache
def get_payment_gateway() -> StripePaymentGateway:
    """Get the shared Stripe gateway built from settings."""
    if not settings.STRIPE_SECRET_KEY:
        logger.warning("STRIPE_SECRET_KEY not configured - payment calls will fail")
    return StripePaymentGateway(
        api_key=settings.STRIPE_SECRET_KEY,
        webhook_secret=settings.STRIPE_WEBHOOK_SECRET,
    )
