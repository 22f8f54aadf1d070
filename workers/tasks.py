# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks for notification delivery.
#
# Tasks:
# - send_bulk_sms: Paced, sequential bulk SMS with per-recipient results
# =============================================================================

import logging
from typing import Any

from celery import current_task, shared_task

logger = logging.getLogger(__name__)


# =============================================================================
# Task State Updates
# =============================================================================

def update_progress(current: int, total: int, message: str = "Processing..."):
    """
    Update task progress for polling.

    Args:
        current: Recipients processed so far
        total: Total recipients
        message: Status message
    """
    if current_task:
        current_task.update_state(
            state="PROGRESS",
            meta={
                "current": current,
                "total": total,
                "percent": int((current / total) * 100) if total else 100,
                "message": message,
            }
        )


# =============================================================================
# Bulk SMS Task
# =============================================================================

@shared_task(bind=True, name="workers.tasks.send_bulk_sms", max_retries=0)
def send_bulk_sms_task(
    self,
    recipients: list[str],
    message: str,
    business_id: str | None = None,
) -> dict[str, Any]:
    """
    Send one message to many recipients in the background.

    Same rules as the synchronous bulk endpoint: sequential, paced by
    SMS_SEND_INTERVAL_MS, one outcome per recipient, no retries.

    Returns:
        Dict with success, total, successful, failed, results

    Raises:
        ServiceNotConfiguredError: If Twilio credentials are missing
    """
    from app.dependencies import get_send_gate, get_sms_transport
    from core.services.notification_service import NotificationService

    logger.info(f"Bulk SMS task for business {business_id}: {len(recipients)} recipients")

    transport = get_sms_transport()

    result = NotificationService.dispatch_bulk(
        transport,
        recipients,
        message,
        business_id=business_id,
        gate=get_send_gate(),
        on_progress=lambda done, total: update_progress(done, total, f"Sent {done} of {total}"),
    )

    return {"success": True, **result.to_api()}
