# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .business_store import (
    BusinessStore,
    InMemoryBusinessStore,
    SupabaseBusinessStore,
)
from .notification_service import NotificationService
from .equipment_service import EquipmentService
from .customer_service import CustomerService
from .rental_service import RentalService
from .payment_service import PaymentService
from .analysis_service import AnalysisError, BusinessAnalyzer

__all__ = [
    "BusinessStore",
    "InMemoryBusinessStore",
    "SupabaseBusinessStore",
    "NotificationService",
    "EquipmentService",
    "CustomerService",
    "RentalService",
    "PaymentService",
    "AnalysisError",
    "BusinessAnalyzer",
]
