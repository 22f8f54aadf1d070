# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities and vendor client wrappers:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - sms_client.py: Twilio SMS transport
# - stripe_client.py: Stripe PaymentIntents and webhook verification
# - anthropic_client.py: Anthropic client factory
# - sms_templates.py: SMS template renderer
# - phone.py: North-American phone normalization
# - rate_gate.py: Fixed-interval pacing gate for bulk sends
# - utils.py: Shared utilities (IDs, timestamps, base error)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.phone import normalize_phone
from lib.rate_gate import FixedIntervalGate
from lib.sms_templates import TemplateKind, render_template
from lib.utils import ApplicationError, generate_id, utc_now_iso

__all__ = [
    "normalize_phone",
    "FixedIntervalGate",
    "TemplateKind",
    "render_template",
    "ApplicationError",
    "generate_id",
    "utc_now_iso",
]
