# =============================================================================
# lib/phone.py - Phone Number Formatting
# =============================================================================
# Formats free-form phone input as an E.164 destination for the SMS provider.
#
# Only North-American numbering is handled: anything that doesn't already
# start with the country code 1 gets "+1" prepended. Numbers from other
# regions come out wrong; that is a known limitation.
# =============================================================================

import re

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(raw: str) -> str:
    """
    Normalize a phone number to "+<digits>".

    Args:
        raw: Phone number in any formatting, e.g. "(555) 123-4567"

    Returns:
        "+1" + digits, or "+" + digits when they already start with 1

    Example:
        normalize_phone("(555) 123-4567")   # "+15551234567"
        normalize_phone("1-555-123-4567")   # "+15551234567"
    """
    digits = _NON_DIGITS.sub("", raw or "")
    if digits.startswith("1"):
        return f"+{digits}"
    return f"+1{digits}"
