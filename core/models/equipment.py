# =============================================================================
# core/models/equipment.py - Equipment Inventory Schemas
# =============================================================================
# These models define the API contract for equipment operations:
# - EquipmentCreate: Input for POST /api/equipment
# - EquipmentUpdate: Partial input for PUT /api/equipment/{id}
# - EquipmentStatus / EquipmentCondition: Enumerations
#
# Equipment keeps snake_case keys on the wire, matching the table columns.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EquipmentStatus(str, Enum):
    """Availability of a piece of equipment."""
    AVAILABLE = "available"
    RENTED = "rented"
    MAINTENANCE = "maintenance"
    RETIRED = "retired"


class EquipmentCondition(str, Enum):
    """Physical condition grade."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class EquipmentCreate(BaseModel):
    """
    Schema for creating an equipment item.

    business_id, name, category and daily_rate are required. Rates arrive
    from forms as strings just as often as numbers; both are accepted.

    Example:
        {
            "business_id": "biz_1705312800000_k3j9x0a1q",
            "name": "CAT 320 Excavator",
            "category": "Excavators",
            "daily_rate": 450
        }
    """

    business_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=255)
    category: str = Field(..., min_length=1)
    daily_rate: float = Field(..., gt=0, description="Price per day")

    model: str | None = None
    make: str | None = None
    year: int | None = None
    description: str | None = None
    condition: EquipmentCondition = EquipmentCondition.GOOD
    status: EquipmentStatus = EquipmentStatus.AVAILABLE
    location: str | None = None
    weekly_rate: float | None = Field(default=None, ge=0)
    monthly_rate: float | None = Field(default=None, ge=0)
    deposit_amount: float | None = Field(default=None, ge=0)
    images: list[str] = Field(default_factory=list)
    specifications: dict[str, Any] = Field(default_factory=dict)
    custom_fields: dict[str, Any] = Field(default_factory=dict)


class EquipmentUpdate(BaseModel):
    """
    Schema for updating an equipment item.

    Only fields present in the request body are written.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    category: str | None = None
    model: str | None = None
    make: str | None = None
    year: int | None = None
    description: str | None = None
    condition: EquipmentCondition | None = None
    status: EquipmentStatus | None = None
    location: str | None = None
    daily_rate: float | None = Field(default=None, gt=0)
    weekly_rate: float | None = Field(default=None, ge=0)
    monthly_rate: float | None = Field(default=None, ge=0)
    deposit_amount: float | None = Field(default=None, ge=0)
    images: list[str] | None = None
    specifications: dict[str, Any] | None = None
    custom_fields: dict[str, Any] | None = None

    def changes(self) -> dict[str, Any]:
        """Fields the client actually sent, JSON-ready."""
        return self.model_dump(exclude_unset=True, mode="json")
