# =============================================================================
# core/services/equipment_service.py - Equipment Inventory Logic
# =============================================================================
# Handles equipment CRUD on top of the Supabase `equipment` table.
# Separates HTTP concerns from database logic.
# =============================================================================

import logging
import math
from typing import Any

from app.exceptions import EquipmentInUseError, EquipmentNotFoundError
from core.models.equipment import EquipmentCreate, EquipmentUpdate
from lib.supabase_client import SupabaseClient
from lib.utils import generate_id, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50


class EquipmentService:
    """
    Service for equipment inventory operations.

    Provides a clean interface between API routes and database.
    """

    @staticmethod
    def list_equipment(
        business_id: str,
        category: str | None = None,
        status: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[list[dict[str, Any]], dict[str, int]]:
        """
        List a business's equipment, newest first.

        Returns:
            Tuple of (rows, pagination) where pagination carries
            page, limit, total and totalPages
        """
        rows, total = SupabaseClient.list_equipment(
            business_id=business_id,
            category=category,
            status=status,
            search=search,
            page=page,
            limit=limit,
        )

        pagination = {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit) if limit else 0,
        }
        return rows, pagination

    @staticmethod
    def get_equipment(equipment_id: str) -> dict[str, Any]:
        """
        Get one equipment item.

        Raises:
            EquipmentNotFoundError: If the item doesn't exist
        """
        equipment = SupabaseClient.fetch_equipment(equipment_id)
        if not equipment:
            raise EquipmentNotFoundError(equipment_id)
        return equipment

    @staticmethod
    def create_equipment(request: EquipmentCreate) -> dict[str, Any]:
        """
        Create an equipment item.

        The request has already been validated, so required fields are
        present and daily_rate is positive.

        Returns:
            The stored row
        """
        now = utc_now_iso()
        row = request.model_dump(mode="json")
        row.update({
            "id": generate_id("eq", random_length=8),
            "created_at": now,
            "updated_at": now,
        })

        equipment = SupabaseClient.insert_equipment(row)
        logger.info(f"Created equipment {equipment.get('id')} for business {request.business_id}")
        return equipment

    @staticmethod
    def update_equipment(equipment_id: str, request: EquipmentUpdate) -> dict[str, Any]:
        """
        Apply the fields present in `request` to an equipment item.

        Raises:
            EquipmentNotFoundError: If the item doesn't exist
        """
        changes = request.changes()
        changes["updated_at"] = utc_now_iso()

        equipment = SupabaseClient.update_equipment(equipment_id, changes)
        if equipment is None:
            raise EquipmentNotFoundError(equipment_id)

        logger.info(f"Updated equipment {equipment_id}: {sorted(changes)}")
        return equipment

    @staticmethod
    def delete_equipment(equipment_id: str) -> None:
        """
        Delete an equipment item.

        Raises:
            EquipmentInUseError: If active or reserved rentals reference it
        """
        if SupabaseClient.count_open_rentals_for_equipment(equipment_id) > 0:
            raise EquipmentInUseError(equipment_id)

        SupabaseClient.delete_equipment(equipment_id)
        logger.info(f"Deleted equipment {equipment_id}")
