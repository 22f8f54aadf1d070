# =============================================================================
# app/routers/rentals.py - Rental Booking Endpoints
# =============================================================================
# GET    /api/rentals          - list with filters + pagination
# POST   /api/rentals          - book equipment (checks availability)
# GET    /api/rentals/{id}     - fetch one with customer/equipment/payments
# PUT    /api/rentals/{id}     - update dates, status, delivery details
# DELETE /api/rentals/{id}     - delete (refused while active)
# =============================================================================

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.exceptions import MissingFieldsError, UpstreamServiceError
from core.models.rental import RentalCreate, RentalStatus, RentalUpdate
from core.services.rental_service import DEFAULT_PAGE_SIZE, RentalService
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def list_rentals(
    business_id: Annotated[str | None, Query(description="Owning business (required)")] = None,
    customer_id: Annotated[str | None, Query(description="Filter by customer")] = None,
    equipment_id: Annotated[str | None, Query(description="Filter by equipment")] = None,
    status: Annotated[RentalStatus | None, Query(description="Filter by status")] = None,
    start_date: Annotated[date | None, Query(description="Starting on or after")] = None,
    end_date: Annotated[date | None, Query(description="Ending on or before")] = None,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=200, description="Items per page")] = DEFAULT_PAGE_SIZE,
):
    """List a business's rentals, newest first."""
    if not business_id:
        raise MissingFieldsError("Business ID is required", fields=["business_id"])

    try:
        rows, pagination = RentalService.list_rentals(
            business_id=business_id,
            customer_id=customer_id,
            equipment_id=equipment_id,
            status=status.value if status else None,
            start_date=start_date.isoformat() if start_date else None,
            end_date=end_date.isoformat() if end_date else None,
            page=page,
            limit=limit,
        )
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to fetch rentals", cause=e)

    return {
        "success": True,
        "data": rows,
        "pagination": pagination,
    }


@router.post("", status_code=201)
def create_rental(request: RentalCreate):
    """
    Book equipment for a customer.

    The booking starts `reserved` and the equipment is marked `rented`.
    Dates that overlap another open rental of the same equipment get 400.
    """
    try:
        rental = RentalService.create_rental(request)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to create rental", cause=e)

    return {"success": True, "data": rental}


@router.get("/{rental_id}")
def get_rental(rental_id: Annotated[str, Path(description="Rental ID")]):
    """Get one rental."""
    try:
        rental = RentalService.get_rental(rental_id)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to fetch rental", cause=e)

    return {"success": True, "data": rental}


@router.put("/{rental_id}")
def update_rental(
    rental_id: Annotated[str, Path(description="Rental ID")],
    request: RentalUpdate,
):
    """Update the fields present in the body."""
    try:
        rental = RentalService.update_rental(rental_id, request)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to update rental", cause=e)

    return {"success": True, "data": rental}


@router.delete("/{rental_id}")
def delete_rental(rental_id: Annotated[str, Path(description="Rental ID")]):
    """Delete a rental that isn't active."""
    try:
        RentalService.delete_rental(rental_id)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to delete rental", cause=e)

    return {"success": True, "message": "Rental deleted successfully"}
