# =============================================================================
# lib/utils.py - Shared Utilities
# =============================================================================
# Common utilities used across the application:
# - Record ID generation (biz_..., eq_...)
# - UTC timestamps in ISO-8601 form
# - ApplicationError, the base class for vendor/client wrapper errors
# =============================================================================

import secrets
import string
import time
from datetime import datetime, timezone
from typing import Any


# =============================================================================
# ID / Timestamp Utilities
# =============================================================================

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id(prefix: str, random_length: int = 9) -> str:
    """
    Generate a prefixed record ID.

    Format is `<prefix>_<epoch milliseconds>_<random base36 chars>`, which
    keeps IDs roughly sortable by creation time while staying opaque.

    Args:
        prefix: Short record type marker, e.g. "biz" or "eq"
        random_length: Number of random characters in the suffix

    Returns:
        The new ID string

    Example:
        generate_id("biz")  # "biz_1705312800000_k3j9x0a1q"
    """
    suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(random_length))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return utc_now().isoformat()


# =============================================================================
# Base Error Class
# =============================================================================

class ApplicationError(Exception):
    """
    Base error class for application-specific errors.

    Provides actionable error messages following the principle:
    "Errors should tell HOW to fix, not just WHAT failed."

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        suggestion: Actionable suggestion for fixing the error
        details: Additional context for debugging

    Example:
        class MyServiceError(ApplicationError):
            def __init__(self, message: str, **kwargs):
                super().__init__(message, code="MY_SERVICE_ERROR", **kwargs)
    """

    def __init__(
        self,
        message: str,
        code: str = "APPLICATION_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f"\n  Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "code": self.code,
            "message": self.message,
            "suggestion": self.suggestion,
            "details": self.details,
        }
