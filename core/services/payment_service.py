# =============================================================================
# core/services/payment_service.py - Payment Intent and Webhook Logic
# =============================================================================
# Creates Stripe PaymentIntents for rentals and applies Stripe webhook events
# to the `payments` table.
#
# Handled webhook events:
# - payment_intent.succeeded      -> payment status "succeeded"
# - payment_intent.payment_failed -> payment status "failed" + failure reason
# Everything else is acknowledged and logged.
# =============================================================================

import logging
from typing import Any

from core.models.payment import PaymentIntentRequest
from lib.stripe_client import CreatedPaymentIntent, StripePaymentGateway
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"


def _field(obj: Any, name: str, default: Any = None) -> Any:
    # Stripe objects are dict subclasses; tests pass plain dicts
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


class PaymentService:
    """Service for payment operations."""

    @staticmethod
    def create_intent(
        gateway: StripePaymentGateway,
        request: PaymentIntentRequest,
    ) -> CreatedPaymentIntent:
        """
        Create a PaymentIntent for a rental payment.

        The amount is converted to integer cents and the customer, rental
        and business ids are stored as intent metadata.

        Raises:
            PaymentGatewayError: If Stripe rejects the request
        """
        return gateway.create_payment_intent(
            amount_cents=request.amount_cents,
            currency=request.currency,
            metadata=request.stripe_metadata(),
        )

    @staticmethod
    def handle_webhook(
        gateway: StripePaymentGateway,
        payload: bytes,
        signature: str,
    ) -> str:
        """
        Verify a webhook delivery and apply it.

        Returns:
            The event type

        Raises:
            InvalidWebhookError: If the signature or payload is invalid
            SupabaseClientError: If recording the payment status fails
        """
        event = gateway.construct_event(payload, signature)
        PaymentService.apply_event(event)
        return _field(event, "type", "")

    @staticmethod
    def apply_event(event: Any) -> None:
        """Dispatch a verified Stripe event by type."""
        event_type = _field(event, "type", "")
        intent = _field(_field(event, "data", {}), "object", {})
        intent_id = _field(intent, "id")

        if event_type == PAYMENT_SUCCEEDED:
            logger.info(f"Payment succeeded: {intent_id}")
            SupabaseClient.update_payment_status(intent_id, "succeeded")

        elif event_type == PAYMENT_FAILED:
            last_error = _field(intent, "last_payment_error") or {}
            reason = _field(last_error, "message")
            logger.info(f"Payment failed: {intent_id} ({reason})")
            SupabaseClient.update_payment_status(intent_id, "failed", failure_reason=reason)

        else:
            logger.info(f"Unhandled Stripe event type: {event_type}")
