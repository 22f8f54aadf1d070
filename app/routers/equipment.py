# =============================================================================
# app/routers/equipment.py - Equipment Inventory Endpoints
# =============================================================================
# GET    /api/equipment          - list with filters + pagination
# POST   /api/equipment          - create
# GET    /api/equipment/{id}     - fetch one
# PUT    /api/equipment/{id}     - partial update
# DELETE /api/equipment/{id}     - delete (refused while rentals are open)
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Path, Query

from app.exceptions import MissingFieldsError, UpstreamServiceError
from core.models.equipment import EquipmentCreate, EquipmentStatus, EquipmentUpdate
from core.services.equipment_service import DEFAULT_PAGE_SIZE, EquipmentService
from lib.utils import ApplicationError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
def list_equipment(
    business_id: Annotated[str | None, Query(description="Owning business (required)")] = None,
    category: Annotated[str | None, Query(description="Exact category")] = None,
    status: Annotated[EquipmentStatus | None, Query(description="Filter by status")] = None,
    search: Annotated[str | None, Query(description="Full-text search")] = None,
    page: Annotated[int, Query(ge=1, description="Page number")] = 1,
    limit: Annotated[int, Query(ge=1, le=200, description="Items per page")] = DEFAULT_PAGE_SIZE,
):
    """List a business's equipment, newest first."""
    if not business_id:
        raise MissingFieldsError("Business ID is required", fields=["business_id"])

    try:
        rows, pagination = EquipmentService.list_equipment(
            business_id=business_id,
            category=category,
            status=status.value if status else None,
            search=search,
            page=page,
            limit=limit,
        )
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to fetch equipment", cause=e)

    return {
        "success": True,
        "data": rows,
        "pagination": pagination,
    }


@router.post("", status_code=201)
def create_equipment(request: EquipmentCreate):
    """
    Add an equipment item.

    business_id, name, category and a positive daily_rate are required;
    anything missing is rejected with 400 before the database is touched.
    """
    try:
        equipment = EquipmentService.create_equipment(request)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to create equipment", cause=e)

    return {"success": True, "data": equipment}


@router.get("/{equipment_id}")
def get_equipment(equipment_id: Annotated[str, Path(description="Equipment ID")]):
    """Get one equipment item."""
    try:
        equipment = EquipmentService.get_equipment(equipment_id)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to fetch equipment", cause=e)

    return {"success": True, "data": equipment}


@router.put("/{equipment_id}")
def update_equipment(
    equipment_id: Annotated[str, Path(description="Equipment ID")],
    request: EquipmentUpdate,
):
    """Update the fields present in the body."""
    try:
        equipment = EquipmentService.update_equipment(equipment_id, request)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to update equipment", cause=e)

    return {"success": True, "data": equipment}


@router.delete("/{equipment_id}")
def delete_equipment(equipment_id: Annotated[str, Path(description="Equipment ID")]):
    """Delete an equipment item that has no active or reserved rentals."""
    try:
        EquipmentService.delete_equipment(equipment_id)
    except ApplicationError as e:
        raise UpstreamServiceError("Failed to delete equipment", cause=e)

    return {"success": True, "message": "Equipment deleted successfully"}
