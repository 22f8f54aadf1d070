# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Every error leaves the API in the same envelope:
#   {"success": false, "error": "<message>", "code": "<ErrorKind>"}
#
# `code` lets clients tell validation problems from upstream failures without
# parsing the message. Upstream failures (database, SMS, payments, AI) only
# ever expose a generic message; the underlying detail goes to the log.
# =============================================================================

import logging
from enum import Enum
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Machine-readable error categories returned in the `code` field."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


def error_envelope(message: str, kind: ErrorKind) -> dict[str, Any]:
    """Build the standard error body."""
    return {"success": False, "error": message, "code": kind.value}


class RentalPlatformException(Exception):
    """
    Base exception for the Rental Platform API.

    All API-facing exceptions inherit from this class; the handler below
    turns them into the error envelope with the right status code.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.INTERNAL_ERROR,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        return error_envelope(self.message, self.kind)


# =============================================================================
# Client Errors (400 / 404)
# =============================================================================

class MissingFieldsError(RentalPlatformException):
    """Raised when required request parameters are absent."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(
            message=message,
            kind=ErrorKind.VALIDATION_ERROR,
            status_code=400,
            details={"fields": fields or []},
        )


class BusinessNotFoundError(RentalPlatformException):
    """Raised when a business ID doesn't exist."""

    def __init__(self, business_id: str):
        super().__init__(
            message="Business not found",
            kind=ErrorKind.NOT_FOUND,
            status_code=404,
            details={"business_id": business_id},
        )


class EquipmentNotFoundError(RentalPlatformException):
    """Raised when an equipment ID doesn't exist."""

    def __init__(self, equipment_id: str):
        super().__init__(
            message="Equipment not found",
            kind=ErrorKind.NOT_FOUND,
            status_code=404,
            details={"equipment_id": equipment_id},
        )


class EquipmentInUseError(RentalPlatformException):
    """Raised when deleting equipment that still has open rentals."""

    def __init__(self, equipment_id: str):
        super().__init__(
            message="Cannot delete equipment with active rentals",
            kind=ErrorKind.VALIDATION_ERROR,
            status_code=400,
            details={"equipment_id": equipment_id},
        )


class CustomerNotFoundError(RentalPlatformException):
    """Raised when a customer ID doesn't exist."""

    def __init__(self, customer_id: str):
        super().__init__(
            message="Customer not found",
            kind=ErrorKind.NOT_FOUND,
            status_code=404,
            details={"customer_id": customer_id},
        )


class DuplicateCustomerError(RentalPlatformException):
    """Raised when a business already has a customer with the same email."""

    def __init__(self, email: str, message: str = "Customer with this email already exists"):
        super().__init__(
            message=message,
            kind=ErrorKind.VALIDATION_ERROR,
            status_code=400,
            details={"email": email},
        )


class CustomerInUseError(RentalPlatformException):
    """Raised when deleting a customer that still has open rentals."""

    def __init__(self, customer_id: str):
        super().__init__(
            message="Cannot delete customer with active rentals",
            kind=ErrorKind.VALIDATION_ERROR,
            status_code=400,
            details={"customer_id": customer_id},
        )


class RentalNotFoundError(RentalPlatformException):
    """Raised when a rental ID doesn't exist."""

    def __init__(self, rental_id: str):
        super().__init__(
            message="Rental not found",
            kind=ErrorKind.NOT_FOUND,
            status_code=404,
            details={"rental_id": rental_id},
        )


class EquipmentUnavailableError(RentalPlatformException):
    """Raised when a booking overlaps an open rental of the same equipment."""

    def __init__(self, equipment_id: str):
        super().__init__(
            message="Equipment is not available for the selected dates",
            kind=ErrorKind.VALIDATION_ERROR,
            status_code=400,
            details={"equipment_id": equipment_id},
        )


class InvalidRentalDatesError(RentalPlatformException):
    """Raised when a rental would end before it starts."""

    def __init__(self, start_date: str, end_date: str):
        super().__init__(
            message="End date must not be before start date",
            kind=ErrorKind.VALIDATION_ERROR,
            status_code=400,
            details={"start_date": start_date, "end_date": end_date},
        )


class ActiveRentalError(RentalPlatformException):
    """Raised when deleting a rental that is currently out."""

    def __init__(self, rental_id: str):
        super().__init__(
            message="Cannot delete active rental",
            kind=ErrorKind.VALIDATION_ERROR,
            status_code=400,
            details={"rental_id": rental_id},
        )


class WebhookSignatureError(RentalPlatformException):
    """Raised when a payment webhook is unsigned or fails verification."""

    def __init__(self, message: str = "Webhook error"):
        super().__init__(
            message=message,
            kind=ErrorKind.VALIDATION_ERROR,
            status_code=400,
        )


# =============================================================================
# Server Errors (500)
# =============================================================================

class ServiceNotConfiguredError(RentalPlatformException):
    """Raised when an endpoint needs vendor credentials that aren't set."""

    def __init__(self, service: str, message: str):
        super().__init__(
            message=message,
            kind=ErrorKind.CONFIGURATION_ERROR,
            status_code=500,
            details={"service": service},
        )


class UpstreamServiceError(RentalPlatformException):
    """
    Raised when a database or vendor call fails.

    `message` is the generic text shown to the client; `cause` is logged
    with full detail and never returned.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(
            message=message,
            kind=ErrorKind.UPSTREAM_ERROR,
            status_code=500,
        )
        if cause is not None:
            logger.error(f"{message}: {cause}")


# =============================================================================
# Exception Handlers
# =============================================================================

async def rental_platform_exception_handler(
    request: Request,
    exc: RentalPlatformException
) -> JSONResponse:
    """Convert RentalPlatformException to the error envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def _describe_validation_errors(exc: RequestValidationError) -> str:
    """Summarize pydantic errors as a single readable sentence."""
    missing: list[str] = []
    invalid: list[str] = []

    for error in exc.errors():
        # loc looks like ("body", "daily_rate") or ("query", "business_id")
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        name = ".".join(loc) or "body"
        if error.get("type") == "missing":
            missing.append(name)
        else:
            invalid.append(name)

    parts = []
    if missing:
        parts.append(f"Missing required fields: {', '.join(missing)}")
    if invalid:
        parts.append(f"Invalid fields: {', '.join(invalid)}")
    return "; ".join(parts) or "Invalid request"


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Missing or malformed input is a client error, reported as 400 in the
    standard envelope.
    """
    message = _describe_validation_errors(exc)
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=400,
        content=error_envelope(message, ErrorKind.VALIDATION_ERROR)
    )
