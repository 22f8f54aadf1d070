# =============================================================================
# core/models/business.py - Business Profile Schemas
# =============================================================================
# These models define the API contract for business profiles:
# - BusinessType / BusinessStatus: Enumerations for category and lifecycle
# - Branding: Colors and optional logo
# - BusinessRecord: A stored business profile
# - BusinessStats: Aggregate figures across all stored businesses
# - BusinessStatusUpdate: Input for the administrative status change
#
# Attributes are snake_case in Python and in Supabase columns; the JSON wire
# format is camelCase (createdAt, reputationScore, ...).
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BusinessType(str, Enum):
    """Rental business categories."""
    HEAVY_EQUIPMENT = "heavy_equipment"
    PARTY_RENTAL = "party_rental"
    CAR_RENTAL = "car_rental"
    TOOL_RENTAL = "tool_rental"
    CUSTOM = "custom"


class BusinessStatus(str, Enum):
    """
    Lifecycle states for a business.

    - setup: Just ingested, not yet reviewed
    - active: Live on the platform
    - inactive: Switched off by an administrator

    Flow: setup -> active <-> inactive (only via an explicit status update)
    """
    ACTIVE = "active"
    SETUP = "setup"
    INACTIVE = "inactive"


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Branding(CamelModel):
    """Brand colors extracted from (or assigned to) a business."""
    primary_color: str | None = None
    secondary_color: str | None = None
    logo_url: str | None = None


class BusinessRecord(CamelModel):
    """
    A stored business profile.

    Example (wire format):
        {
            "id": "biz_1705312800000_k3j9x0a1q",
            "name": "Acme Heavy Equipment",
            "type": "heavy_equipment",
            "status": "setup",
            "reputationScore": 82,
            "createdAt": "2024-01-15T10:00:00Z",
            ...
        }
    """

    id: str = Field(..., description="Opaque unique identifier, assigned at creation")
    name: str | None = None

    # Kept as a plain string: ingestion doesn't validate the category
    type: str = Field(default=BusinessType.CUSTOM.value)

    industry: str | None = None
    website: str = ""
    email: str | None = None
    phone: str | None = None
    address: str | None = None
    description: str | None = None
    features: list[str] = Field(default_factory=list)
    branding: Branding = Field(default_factory=Branding)
    confidence: float = Field(default=50)
    business_details: dict[str, Any] = Field(default_factory=dict)
    reputation_score: float = Field(default=0)
    web_intelligence: dict[str, Any] = Field(default_factory=dict)
    status: BusinessStatus = Field(default=BusinessStatus.SETUP)
    created_at: datetime
    updated_at: datetime

    def to_api(self) -> dict[str, Any]:
        """Serialize with camelCase keys for API responses."""
        return self.model_dump(by_alias=True, mode="json")

    def to_row(self) -> dict[str, Any]:
        """Serialize with snake_case keys for the businesses table."""
        row = self.model_dump(mode="json")
        row["branding"] = self.branding.model_dump(by_alias=True, exclude_none=True, mode="json")
        return row


class BusinessStats(CamelModel):
    """
    Aggregate figures over every stored business.

    total_revenue is a placeholder metric (a fixed amount per business).
    avg_reputation is None when there are no businesses.
    """

    total: int = Field(default=0, ge=0)
    active: int = Field(default=0, ge=0)
    total_revenue: float = Field(default=0, ge=0)
    avg_reputation: float | None = None


class BusinessStatusUpdate(BaseModel):
    """Request body for PATCH /api/business/{id}/status."""
    status: BusinessStatus = Field(..., description="New lifecycle status")
