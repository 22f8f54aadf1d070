# =============================================================================
# lib/sms_client.py - Twilio SMS Transport
# =============================================================================
# Thin wrapper around the Twilio REST client.
#
# The rest of the code only relies on a `send(to, body) -> SentMessage`
# method, so tests can hand the notification service any object with that
# shape instead of a real Twilio client.
#
# Usage:
#   from lib.sms_client import get_sms_client
#   client = get_sms_client()
#   if client is None:
#       ...  # SMS not configured
#   sent = client.send("+15551234567", "Hello")
# =============================================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Protocol

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from app.config import settings
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)


class SMSTransportError(ApplicationError):
    """Raised when the SMS provider rejects or fails a send."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(
            message,
            code="SMS_SEND_FAILED",
            suggestion="Check the destination number and the Twilio account status",
            details=details,
        )


@dataclass
class SentMessage:
    """Provider receipt for one sent SMS."""
    sid: str
    status: str
    to: str


class SMSTransport(Protocol):
    """Anything that can deliver one SMS."""

    def send(self, to: str, body: str) -> SentMessage:
        ...


class TwilioSMSClient:
    """SMS transport backed by Twilio's Messages API."""

    def __init__(self, account_sid: str, auth_token: str, from_number: str):
        self.from_number = from_number
        self._client = Client(account_sid, auth_token)

    def send(self, to: str, body: str) -> SentMessage:
        """
        Send one SMS.

        Args:
            to: Destination in E.164 form
            body: Message text

        Returns:
            SentMessage with Twilio's message SID and status

        Raises:
            SMSTransportError: If Twilio rejects the request
        """
        try:
            message = self._client.messages.create(
                body=body,
                from_=self.from_number,
                to=to,
            )
        except TwilioException as e:
            raise SMSTransportError(str(e), details={"to": to}) from e

        logger.info(f"SMS sent to {to}: {message.sid}")
        return SentMessage(sid=message.sid, status=message.status, to=to)


@lru_cache
def get_sms_client() -> TwilioSMSClient | None:
    """
    Get the shared Twilio transport.

    Returns:
        The client, or None when Twilio credentials are not configured
    """
    if not settings.sms_configured:
        logger.warning("Twilio credentials not configured - SMS features are disabled")
        return None

    return TwilioSMSClient(
        account_sid=settings.TWILIO_ACCOUNT_SID,
        auth_token=settings.TWILIO_AUTH_TOKEN,
        from_number=settings.TWILIO_PHONE_NUMBER,
    )
