# =============================================================================
# core/models/rental.py - Rental Schemas
# =============================================================================
# These models define the API contract for rental operations:
# - RentalCreate: Input for POST /api/rentals (always starts `reserved`)
# - RentalUpdate: Partial input for PUT /api/rentals/{id}
# - RentalStatus: Lifecycle of a booking
#
# Pricing (days, subtotal, tax, total) is computed server-side and is not
# accepted from clients.
# =============================================================================

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class RentalStatus(str, Enum):
    """Lifecycle of a rental booking."""
    RESERVED = "reserved"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def holds_equipment(self) -> bool:
        """Whether equipment on a rental in this state is unavailable."""
        return self in (RentalStatus.RESERVED, RentalStatus.ACTIVE)


class RentalCreate(BaseModel):
    """
    Schema for booking equipment.

    Example:
        {
            "business_id": "biz_1705312800000_k3j9x0a1q",
            "customer_id": "cust_1705312800000_ab12cd34",
            "equipment_id": "eq_1705312800000_ef56gh78",
            "start_date": "2024-03-01",
            "end_date": "2024-03-04",
            "daily_rate": 450
        }
    """

    business_id: str = Field(..., min_length=1)
    customer_id: str = Field(..., min_length=1)
    equipment_id: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    daily_rate: float = Field(..., gt=0)

    deposit: float = Field(default=0, ge=0)
    delivery_required: bool = False
    delivery_address: str | None = None
    delivery_fee: float = Field(default=0, ge=0)
    pickup_required: bool = False
    pickup_fee: float = Field(default=0, ge=0)
    notes: str | None = None
    terms_accepted: bool = False

    @model_validator(mode="after")
    def check_dates(self) -> "RentalCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class RentalUpdate(BaseModel):
    """
    Schema for changing a rental.

    New dates trigger a price recalculation; a new status moves the
    equipment between `rented` and `available`.
    """

    start_date: date | None = None
    end_date: date | None = None
    actual_return_date: date | None = None
    status: RentalStatus | None = None
    delivery_required: bool | None = None
    delivery_address: str | None = None
    delivery_fee: float | None = Field(default=None, ge=0)
    pickup_required: bool | None = None
    pickup_fee: float | None = Field(default=None, ge=0)
    notes: str | None = None
    signature_data: dict[str, Any] | None = None

    def changes(self) -> dict[str, Any]:
        """
        Fields the client actually sent, JSON-ready.

        Dates and status can't be cleared, so an explicit null for them is
        ignored.
        """
        changes = self.model_dump(exclude_unset=True, mode="json")
        for field in ("start_date", "end_date", "status"):
            if changes.get(field, "") is None:
                del changes[field]
        return changes
