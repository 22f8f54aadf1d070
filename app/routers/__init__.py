# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - businesses.py: Business listing, detail and status endpoints
# - equipment.py: Equipment inventory endpoints
# - customers.py: Customer endpoints
# - rentals.py: Rental booking endpoints
# - notifications.py: Single, bulk and queued SMS endpoints
# - payments.py: Stripe payment intent and webhook endpoints
# - analysis.py: Website analysis for onboarding
# - tasks.py: Background task status endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import businesses
from . import equipment
from . import customers
from . import rentals
from . import notifications
from . import payments
from . import analysis
from . import tasks

__all__ = [
    "health",
    "businesses",
    "equipment",
    "customers",
    "rentals",
    "notifications",
    "payments",
    "analysis",
    "tasks",
]
