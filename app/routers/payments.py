# =============================================================================
# app/routers/payments.py - Stripe Payment Endpoints
# =============================================================================
# POST /api/payments/create-intent  - create a PaymentIntent
# PUT  /api/payments/create-intent  - Stripe webhook receiver
# =============================================================================

import logging

from fastapi import APIRouter, Request
from fastapi.concurrency import run_in_threadpool

from app.dependencies import PaymentGatewayDep, StripeSignatureDep
from app.exceptions import UpstreamServiceError, WebhookSignatureError
from core.models.payment import PaymentIntentRequest
from core.services.payment_service import PaymentService
from lib.stripe_client import InvalidWebhookError
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/create-intent")
def create_payment_intent(request: PaymentIntentRequest, gateway: PaymentGatewayDep):
    """
    Create a PaymentIntent.

    `amount` is in dollars and is sent to Stripe in cents. Customer, rental
    and business IDs are stored as intent metadata.
    """
    try:
        intent = PaymentService.create_intent(gateway, request)
    except ApplicationError as e:
        raise UpstreamServiceError("Payment setup failed", cause=e)

    return {
        "success": True,
        "clientSecret": intent.client_secret,
        "paymentIntentId": intent.id,
    }


@router.put("/create-intent")
async def payment_webhook(
    request: Request,
    signature: StripeSignatureDep,
    gateway: PaymentGatewayDep,
):
    """
    Receive a Stripe webhook.

    The raw body is verified against the `stripe-signature` header before
    anything is applied.
    """
    payload = await request.body()

    try:
        event_type = await run_in_threadpool(
            PaymentService.handle_webhook, gateway, payload, signature
        )
    except InvalidWebhookError as e:
        logger.warning(f"Webhook rejected: {e.message}")
        raise WebhookSignatureError("Webhook verification failed")
    except ApplicationError as e:
        raise UpstreamServiceError("Webhook processing failed", cause=e)

    logger.debug(f"Processed webhook {event_type}")
    return {"received": True}
