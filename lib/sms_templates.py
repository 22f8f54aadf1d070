# =============================================================================
# lib/sms_templates.py - SMS Message Templates
# =============================================================================
# Renders the fixed set of customer-facing SMS notifications.
#
# Every template takes ordered string arguments; the first one is always the
# business name. Rendering never raises: an unknown kind or a wrong number of
# arguments produces an empty string, which callers treat as
# "no message produced".
#
# Usage:
#   from lib.sms_templates import render_template
#   body = render_template("payment_due", ["Acme Rentals", "$450.00", "Jan 31"])
# =============================================================================

import logging
from enum import Enum
from typing import Sequence

logger = logging.getLogger(__name__)


class TemplateKind(str, Enum):
    """Notification kinds that have a built-in SMS template."""
    RENTAL_CONFIRMATION = "rental_confirmation"
    DELIVERY_REMINDER = "delivery_reminder"
    PICKUP_REMINDER = "pickup_reminder"
    PAYMENT_DUE = "payment_due"


# {0} is the business name; {1} and {2} are template-specific.
SMS_TEMPLATES: dict[TemplateKind, str] = {
    TemplateKind.RENTAL_CONFIRMATION: (
        "🏗️ {0}: Your rental of {1} is confirmed for {2}. "
        "We'll send delivery updates soon!"
    ),
    TemplateKind.DELIVERY_REMINDER: (
        "🚚 {0}: Your {1} will be delivered today between {2}. "
        "Please ensure someone is available on-site."
    ),
    TemplateKind.PICKUP_REMINDER: (
        "📦 {0}: Pickup scheduled for {1} on {2}. "
        "Please have equipment ready and accessible."
    ),
    TemplateKind.PAYMENT_DUE: (
        "💳 {0}: Payment of {1} is due by {2}. "
        "Pay online at [link] or call us."
    ),
}

TEMPLATE_ARG_COUNT = 3


def is_template_kind(kind: str | None) -> bool:
    """Check whether `kind` names a built-in template."""
    return kind in {k.value for k in TemplateKind}


def render_template(kind: str | TemplateKind, args: Sequence[str]) -> str:
    """
    Render an SMS template.

    Args:
        kind: Template kind (enum member or its string value)
        args: Ordered arguments, business name first

    Returns:
        The interpolated message, or "" when the kind is unknown or the
        argument count doesn't match the template.

    Example:
        render_template("pickup_reminder", ["Acme", "Mini Excavator", "Friday"])
        # "📦 Acme: Pickup scheduled for Mini Excavator on Friday. ..."
    """
    try:
        template_kind = TemplateKind(kind)
    except ValueError:
        return ""

    if len(args) != TEMPLATE_ARG_COUNT:
        logger.error(
            f"Template {template_kind.value} expects {TEMPLATE_ARG_COUNT} args, got {len(args)}"
        )
        return ""

    return SMS_TEMPLATES[template_kind].format(*(str(a) for a in args))
