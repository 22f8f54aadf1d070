# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - business.py: Business profiles, lifecycle status, aggregate stats
# - equipment.py: Equipment inventory create/update schemas
# - customer.py: Customer create/update schemas
# - rental.py: Rental bookings and lifecycle status
# - notification.py: SMS send requests and bulk dispatch results
# - payment.py: Payment intent requests
# - analysis.py: Website analysis input and extracted content
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Business Models
# -----------------------------------------------------------------------------
from .business import (
    Branding,
    BusinessRecord,
    BusinessStats,
    BusinessStatus,
    BusinessStatusUpdate,
    BusinessType,
    CamelModel,
)

# -----------------------------------------------------------------------------
# Equipment Models
# -----------------------------------------------------------------------------
from .equipment import (
    EquipmentCondition,
    EquipmentCreate,
    EquipmentStatus,
    EquipmentUpdate,
)

# -----------------------------------------------------------------------------
# Customer / Rental Models
# -----------------------------------------------------------------------------
from .customer import CustomerCreate, CustomerStatus, CustomerUpdate
from .rental import RentalCreate, RentalStatus, RentalUpdate

# -----------------------------------------------------------------------------
# Notification Models
# -----------------------------------------------------------------------------
from .notification import (
    BulkDispatchResult,
    BulkSMSRequest,
    RecipientOutcome,
    SMSRequest,
)

# -----------------------------------------------------------------------------
# Payment / Analysis Models
# -----------------------------------------------------------------------------
from .payment import PaymentIntentRequest
from .analysis import AnalyzeBusinessRequest, WebsiteContent

__all__ = [
    # Business
    "Branding",
    "BusinessRecord",
    "BusinessStats",
    "BusinessStatus",
    "BusinessStatusUpdate",
    "BusinessType",
    "CamelModel",
    # Equipment
    "EquipmentCondition",
    "EquipmentCreate",
    "EquipmentStatus",
    "EquipmentUpdate",
    # Customers / Rentals
    "CustomerCreate",
    "CustomerStatus",
    "CustomerUpdate",
    "RentalCreate",
    "RentalStatus",
    "RentalUpdate",
    # Notifications
    "BulkDispatchResult",
    "BulkSMSRequest",
    "RecipientOutcome",
    "SMSRequest",
    # Payments / Analysis
    "PaymentIntentRequest",
    "AnalyzeBusinessRequest",
    "WebsiteContent",
]
