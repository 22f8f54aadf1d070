# =============================================================================
# core/models/customer.py - Customer Schemas
# =============================================================================
# These models define the API contract for customer operations:
# - CustomerCreate: Input for POST /api/customers
# - CustomerUpdate: Partial input for PUT /api/customers/{id}
#
# Like equipment, customers keep snake_case keys matching the table columns.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class CustomerStatus(str, Enum):
    """Account standing of a customer."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"


class CustomerCreate(BaseModel):
    """
    Schema for creating a customer.

    business_id, name and email are required. Emails are unique within a
    business, which the service checks before inserting.

    Example:
        {
            "business_id": "biz_1705312800000_k3j9x0a1q",
            "name": "Dana Ortiz",
            "email": "dana@ortizbuilds.example",
            "company": "Ortiz Builds"
        }
    """

    business_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")

    phone: str | None = None
    address: str | None = None
    company: str | None = None
    tax_id: str | None = None
    driver_license: str | None = None
    emergency_contact: dict[str, Any] = Field(default_factory=dict)
    billing_address: str | None = None
    payment_methods: list[Any] = Field(default_factory=list)
    credit_limit: float = Field(default=0, ge=0)
    status: CustomerStatus = CustomerStatus.ACTIVE
    notes: str | None = None
    custom_fields: dict[str, Any] = Field(default_factory=dict)


class CustomerUpdate(BaseModel):
    """Schema for updating a customer. Only fields present are written."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    email: str | None = Field(default=None, min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: str | None = None
    address: str | None = None
    company: str | None = None
    tax_id: str | None = None
    driver_license: str | None = None
    emergency_contact: dict[str, Any] | None = None
    billing_address: str | None = None
    payment_methods: list[Any] | None = None
    credit_limit: float | None = Field(default=None, ge=0)
    status: CustomerStatus | None = None
    notes: str | None = None
    custom_fields: dict[str, Any] | None = None

    def changes(self) -> dict[str, Any]:
        """Fields the client actually sent, JSON-ready."""
        return self.model_dump(exclude_unset=True, mode="json")
