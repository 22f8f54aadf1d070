# =============================================================================
# core/models/notification.py - SMS Notification Schemas
# =============================================================================
# These models define the API contract for SMS notifications:
# - SMSRequest: Single send (POST /api/notifications/sms)
# - BulkSMSRequest: Batch send (PUT /api/notifications/sms)
# - RecipientOutcome: Per-recipient result of a batch
# - BulkDispatchResult: Aggregated batch result
# =============================================================================

from typing import Any

from pydantic import Field

from core.models.business import CamelModel


class SMSRequest(CamelModel):
    """
    Single SMS send request.

    `to` and `message` are checked by the route so a missing value gets the
    dedicated "Phone number and message are required" error. When `message`
    is empty and `type` names a built-in template, the message is rendered
    from `templateArgs` instead.

    Example:
        {
            "to": "(555) 123-4567",
            "message": "Your excavator is on its way",
            "type": "custom",
            "businessId": "biz_1705312800000_k3j9x0a1q"
        }
    """

    to: str | None = None
    message: str | None = None
    type: str = "custom"
    business_id: str | None = None
    rental_id: str | None = None
    template_args: list[str] | None = None


class BulkSMSRequest(CamelModel):
    """Batch send of one message to many recipients."""

    recipients: list[str] = Field(..., description="Raw phone numbers, any formatting")
    message: str = Field(..., min_length=1)
    business_id: str | None = None


class RecipientOutcome(CamelModel):
    """
    Result for one recipient of a batch.

    On success `message_id` is set; on failure `error` carries the
    provider's error message.
    """

    phone: str
    success: bool
    message_id: str | None = None
    error: str | None = None

    def to_api(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class BulkDispatchResult(CamelModel):
    """Aggregated outcome of a batch; total == successful + failed."""

    total: int = 0
    successful: int = 0
    failed: int = 0
    results: list[RecipientOutcome] = Field(default_factory=list)

    def to_api(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "results": [r.to_api() for r in self.results],
        }
