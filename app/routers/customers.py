# =============================================================================
# app/routers/customers.py - Customer Endpoints
# =============================================================================
# GET    /api/customers          - list with filters + pagination
# POST   /api/customers          - create (email unique per business)
# GET    /api/customers/{id}     - fetch one with rental history
# PUT    /api/customers/{id}     - partial update
# DELETE /api/customers/{id}     - delete (refused while rentals are open)
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.exceptions import MissingFieldsError, UpstreamServiceError
from core.models.customer import CustomerCreate, CustomerStatus, CustomerUpdate
from core.services.customer_service import DEFAULT_PAGE_SIZE, CustomerService
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def list_customers(
    business_id: Annotated[str | None, Query(description="Owning business (required)")] = None,
    status: Annotated[CustomerStatus | None, Query(description="Filter by status")] = None,
    search: Annotated[str | None, Query(description="Match name, email or company")] = None,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=200, description="Items per page")] = DEFAULT_PAGE_SIZE,
):
    """List a business's customers, newest first."""
    if not business_id:
        raise MissingFieldsError("Business ID is required", fields=["business_id"])

    try:
        rows, pagination = CustomerService.list_customers(
            business_id=business_id,
            status=status.value if status else None,
            search=search,
            page=page,
            limit=limit,
        )
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to fetch customers", cause=e)

    return {
        "success": True,
        "data": rows,
        "pagination": pagination,
    }


@router.post("", status_code=201)
def create_customer(request: CustomerCreate):
    """Add a customer. business_id, name and email are required."""
    try:
        customer = CustomerService.create_customer(request)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to create customer", cause=e)

    return {"success": True, "data": customer}


@router.get("/{customer_id}")
def get_customer(customer_id: Annotated[str, Path(description="Customer ID")]):
    """Get one customer with their rentals."""
    try:
        customer = CustomerService.get_customer(customer_id)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to fetch customer", cause=e)

    return {"success": True, "data": customer}


@router.put("/{customer_id}")
def update_customer(
    customer_id: Annotated[str, Path(description="Customer ID")],
    request: CustomerUpdate,
):
    """Update the fields present in the body."""
    try:
        customer = CustomerService.update_customer(customer_id, request)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to update customer", cause=e)

    return {"success": True, "data": customer}


@router.delete("/{customer_id}")
def delete_customer(customer_id: Annotated[str, Path(description="Customer ID")]):
    """Delete a customer who has no active or reserved rentals."""
    try:
        CustomerService.delete_customer(customer_id)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to delete customer", cause=e)

    return {"success": True, "message": "Customer deleted successfully"}
