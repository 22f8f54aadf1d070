# =============================================================================
# core/services/notification_service.py - SMS Notification Logic
# =============================================================================
# Handles single and bulk SMS sends on top of an SMS transport.
#
# Bulk dispatch rules:
# - Recipients are processed one at a time, in input order
# - Every recipient gets exactly one outcome; a failed send is recorded and
#   the loop moves on
# - A FixedIntervalGate spaces consecutive attempts (success or failure)
# - No retries, no cancellation, no per-send timeout
# =============================================================================

import logging
from typing import Callable, Sequence

from core.models.notification import (
    BulkDispatchResult,
    RecipientOutcome,
    SMSRequest,
)
from lib.phone import normalize_phone
from lib.rate_gate import FixedIntervalGate
from lib.sms_client import SentMessage, SMSTransport
from lib.sms_templates import is_template_kind, render_template
from lib.utils import ApplicationError, utc_now_iso

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def _error_text(exc: Exception) -> str:
    """Provider error message without our code/suggestion decoration."""
    if isinstance(exc, ApplicationError):
        return exc.message
    return str(exc)


class NotificationService:
    """
    Service for SMS notification operations.

    Provides a clean interface between API routes, Celery tasks and the
    SMS transport.
    """

    @staticmethod
    def resolve_message(request: SMSRequest) -> str:
        """
        Work out the body to send for a single SMS request.

        The explicit `message` wins. Otherwise, when `type` is a built-in
        template kind and `templateArgs` were supplied, the template is
        rendered. Returns "" when neither produces text.
        """
        if request.message:
            return request.message

        if request.template_args and is_template_kind(request.type):
            return render_template(request.type, request.template_args)

        return ""

    @staticmethod
    def send_single(
        transport: SMSTransport,
        request: SMSRequest,
        body: str,
    ) -> SentMessage:
        """
        Send one SMS and log the notification.

        Args:
            transport: SMS transport
            request: The validated request (destination, attribution)
            body: Resolved message text

        Returns:
            SentMessage receipt

        Raises:
            SMSTransportError: If the provider fails the send
        """
        destination = normalize_phone(request.to or "")
        sent = transport.send(destination, body)

        notification_log = {
            "id": sent.sid,
            "businessId": request.business_id,
            "rentalId": request.rental_id,
            "type": request.type,
            "to": destination,
            "message": body[:100],
            "status": sent.status,
            "sentAt": utc_now_iso(),
        }
        logger.info(f"Notification logged: {notification_log}")

        return sent

    @staticmethod
    def dispatch_bulk(
        transport: SMSTransport,
        recipients: Sequence[str],
        message: str,
        business_id: str | None = None,
        gate: FixedIntervalGate | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> BulkDispatchResult:
        """
        Send one message to many recipients, sequentially.

        Args:
            transport: SMS transport
            recipients: Raw phone numbers, in the order to send
            message: Message body for every recipient
            business_id: Business the batch is attributed to (logging only)
            gate: Pacing gate; None sends back-to-back
            on_progress: Called as on_progress(done, total) after each recipient

        Returns:
            BulkDispatchResult with one outcome per recipient, input order

        Example:
            result = NotificationService.dispatch_bulk(
                transport, ["555-123-4567", "bad"], "Yard closed Monday",
                gate=FixedIntervalGate(0.1),
            )
            result.successful + result.failed == result.total == 2
        """
        total = len(recipients)
        results: list[RecipientOutcome] = []

        logger.info(f"Bulk SMS for business {business_id}: {total} recipients")

        for index, raw_phone in enumerate(recipients):
            if gate is not None:
                gate.wait()

            formatted = normalize_phone(raw_phone)
            try:
                sent = transport.send(formatted, message)
                results.append(RecipientOutcome(
                    phone=formatted,
                    success=True,
                    message_id=sent.sid,
                ))
            except Exception as e:
                logger.warning(f"Bulk SMS to {formatted} failed: {e}")
                results.append(RecipientOutcome(
                    phone=raw_phone,
                    success=False,
                    error=_error_text(e),
                ))
            finally:
                if gate is not None:
                    gate.mark()

            if on_progress is not None:
                on_progress(index + 1, total)

        successful = sum(1 for r in results if r.success)

        logger.info(
            f"Bulk SMS for business {business_id} done: "
            f"{successful}/{total} sent, {total - successful} failed"
        )

        return BulkDispatchResult(
            total=total,
            successful=successful,
            failed=total - successful,
            results=results,
        )
