# =============================================================================
# app/routers/businesses.py - Business Endpoints
# =============================================================================
# GET   /api/businesses              - all businesses + dashboard stats
# GET   /api/business/{id}           - one business + inventory stats
# PATCH /api/business/{id}/status    - administrative status change
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path

from app.dependencies import BusinessStoreDep
from app.exceptions import BusinessNotFoundError, UpstreamServiceError
from core.models.business import BusinessStatusUpdate
from lib.supabase_client import SupabaseClient
from lib.utils import ApplicationError, utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/businesses")
def list_businesses(store: BusinessStoreDep):
    """
    List every business, newest first, with dashboard totals.

    `avgReputation` is null when there are no businesses.
    """
    try:
        businesses = store.get_all()
        stats = store.get_stats()
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to fetch businesses", cause=e)

    return {
        "success": True,
        "data": {
            "businesses": [b.to_api() for b in businesses],
            "stats": stats.model_dump(by_alias=True),
        },
    }


@router.get("/business/{business_id}")
def get_business(
    business_id: Annotated[str, Path(description="Business ID")],
    store: BusinessStoreDep,
):
    """
    Get one business with its inventory summary.

    Stats: totalEquipment, totalCustomers, activeRentals, totalRevenue,
    availableEquipment, maintenanceEquipment.
    """
    logger.info(f"Fetching business data for ID: {business_id}")

    try:
        business = store.get_by_id(business_id)
        if business is None:
            raise BusinessNotFoundError(business_id)
        stats = SupabaseClient.fetch_business_inventory_stats(business_id)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to fetch business data", cause=e)

    logger.info(
        f"Stats for {business.name}: {stats['totalEquipment']} equipment, "
        f"{stats['totalCustomers']} customers, {stats['activeRentals']} rentals"
    )

    return {
        "success": True,
        "data": {
            "business": business.to_api(),
            "stats": stats,
            "lastUpdated": utc_now_iso(),
        },
    }


@router.patch("/business/{business_id}/status")
def update_business_status(
    business_id: Annotated[str, Path(description="Business ID")],
    request: BusinessStatusUpdate,
    store: BusinessStoreDep,
):
    """Move a business between setup, active and inactive."""
    try:
        if store.get_by_id(business_id) is None:
            raise BusinessNotFoundError(business_id)
        store.update_status(business_id, request.status)
        business = store.get_by_id(business_id)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to update business status", cause=e)

    return {
        "success": True,
        "data": business.to_api() if business else None,
    }
