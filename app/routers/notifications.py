# =============================================================================
# app/routers/notifications.py - SMS Notification Endpoints
# =============================================================================
# POST /api/notifications/sms            - send one SMS
# PUT  /api/notifications/sms            - send one message to many recipients
# POST /api/notifications/sms/bulk-jobs  - same, queued on a Celery worker
#
# Handlers that talk to Twilio are plain `def` so FastAPI runs them in its
# threadpool; a bulk send blocks for roughly interval * recipients.
# =============================================================================

import logging

from fastapi import APIRouter

from app.config import settings
from app.dependencies import SendGateDep, SMSTransportDep
from app.exceptions import (
    MissingFieldsError,
    ServiceNotConfiguredError,
    UpstreamServiceError,
)
from core.models.notification import BulkSMSRequest, SMSRequest
from core.services.notification_service import NotificationService
from lib.sms_client import SMSTransportError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/sms")
def send_sms(request: SMSRequest, transport: SMSTransportDep):
    """
    Send a single SMS.

    The destination is normalized to +1 E.164 form. When `message` is empty
    and `type` is a template kind, the body is rendered from `templateArgs`.
    """
    body = NotificationService.resolve_message(request)
    if not request.to or not body:
        raise MissingFieldsError(
            "Phone number and message are required",
            fields=[name for name, value in (("to", request.to), ("message", body)) if not value],
        )

    try:
        sent = NotificationService.send_single(transport, request, body)
    except SMSTransportError as e:
        raise UpstreamServiceError("Failed to send SMS", cause=e)

    logger.info(f"SMS sent to {sent.to}: {sent.sid}")

    return {
        "success": True,
        "messageId": sent.sid,
        "status": sent.status,
    }


@router.put("/sms")
def send_bulk_sms(
    request: BulkSMSRequest,
    transport: SMSTransportDep,
    gate: SendGateDep,
):
    """
    Send one message to every recipient, in order.

    Always 200 once the batch runs; per-recipient failures are reported in
    `results` and never stop the batch.
    """
    result = NotificationService.dispatch_bulk(
        transport,
        request.recipients,
        request.message,
        business_id=request.business_id,
        gate=gate,
    )

    return {"success": True, **result.to_api()}


@router.post("/sms/bulk-jobs", status_code=202)
def queue_bulk_sms(request: BulkSMSRequest):
    """
    Queue a bulk send on the background worker.

    Returns a task ID; poll GET /api/tasks/{task_id} for progress and the
    final per-recipient results.
    """
    if not settings.sms_configured:
        raise ServiceNotConfiguredError("sms", "SMS service not configured")

    try:
        from workers.tasks import send_bulk_sms_task

        task = send_bulk_sms_task.delay(
            request.recipients,
            request.message,
            request.business_id,
        )
    except Exception as e:
        raise UpstreamServiceError("Failed to queue bulk SMS", cause=e)

    logger.info(f"Queued bulk SMS task {task.id}: {len(request.recipients)} recipients")

    return {
        "success": True,
        "taskId": task.id,
        "status": "PENDING",
    }
