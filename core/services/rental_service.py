# =============================================================================
# core/services/rental_service.py - Rental Booking Logic
# =============================================================================
# Handles rental CRUD on top of the Supabase `rentals` table and keeps the
# booked equipment's status in step:
#
# - create: refuses dates that overlap an open (reserved/active) rental of
#   the same equipment, prices the booking, starts it `reserved` and marks
#   the equipment `rented`.
# - update: reprices when dates or fees change; a status change moves the
#   equipment to `rented` (reserved/active) or `available` (otherwise).
# - delete: refused while the rental is active; deleting a reservation frees
#   the equipment.
# =============================================================================

import logging
import math
from datetime import date
from typing import Any

from app.exceptions import (
    ActiveRentalError,
    EquipmentUnavailableError,
    InvalidRentalDatesError,
    RentalNotFoundError,
)
from core.models.equipment import EquipmentStatus
from core.models.rental import RentalCreate, RentalStatus, RentalUpdate
from lib.supabase_client import SupabaseClient
from lib.utils import generate_id, utc_now, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50

# Sales tax applied to the rental subtotal (fees are untaxed)
TAX_RATE = 0.08

PRICING_FIELDS = ("start_date", "end_date", "delivery_fee", "pickup_fee")


def price_rental(
    start_date: date,
    end_date: date,
    daily_rate: float,
    delivery_fee: float = 0,
    pickup_fee: float = 0,
) -> dict[str, Any]:
    """
    Price a booking.

    Returns:
        Dict with total_days, subtotal, tax_amount and total_amount,
        money rounded to cents
    """
    total_days = (end_date - start_date).days
    subtotal = round(total_days * daily_rate, 2)
    tax_amount = round(subtotal * TAX_RATE, 2)
    return {
        "total_days": total_days,
        "subtotal": subtotal,
        "tax_amount": tax_amount,
        "total_amount": round(subtotal + tax_amount + delivery_fee + pickup_fee, 2),
    }


def rental_number() -> str:
    """Short human-facing booking reference, e.g. R312800."""
    return f"R{int(utc_now().timestamp() * 1000) % 1_000_000:06d}"


def _as_date(value: Any) -> date:
    # Rows may carry a plain date or a full timestamp
    return date.fromisoformat(str(value)[:10])


def _equipment_status_for(status: RentalStatus) -> EquipmentStatus:
    return EquipmentStatus.RENTED if status.holds_equipment else EquipmentStatus.AVAILABLE


def _set_equipment_status(equipment_id: str, status: EquipmentStatus) -> None:
    SupabaseClient.update_equipment(
        equipment_id, {"status": status.value, "updated_at": utc_now_iso()}
    )
    logger.info(f"Equipment {equipment_id} is now {status.value}")


class RentalService:
    """Service for rental bookings."""

    @staticmethod
    def list_rentals(
        business_id: str,
        customer_id: str | None = None,
        equipment_id: str | None = None,
        status: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[list[dict[str, Any]], dict[str, int]]:
        """List a business's rentals, newest first, with pagination info."""
        rows, total = SupabaseClient.list_rentals(
            business_id=business_id,
            customer_id=customer_id,
            equipment_id=equipment_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
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
    def get_rental(rental_id: str) -> dict[str, Any]:
        """
        Get one rental with customer, equipment and payments embedded.

        Raises:
            RentalNotFoundError: If the rental doesn't exist
        """
        rental = SupabaseClient.fetch_rental(rental_id, with_relations=True)
        if not rental:
            raise RentalNotFoundError(rental_id)
        return rental

    @staticmethod
    def create_rental(request: RentalCreate) -> dict[str, Any]:
        """
        Book equipment for a customer.

        Raises:
            EquipmentUnavailableError: If an open rental overlaps the dates
        """
        start, end = request.start_date.isoformat(), request.end_date.isoformat()
        if SupabaseClient.find_overlapping_rentals(request.equipment_id, start, end):
            raise EquipmentUnavailableError(request.equipment_id)

        now = utc_now_iso()
        row = request.model_dump(mode="json")
        row.update(price_rental(
            request.start_date,
            request.end_date,
            request.daily_rate,
            request.delivery_fee,
            request.pickup_fee,
        ))
        row.update({
            "id": generate_id("rent", random_length=8),
            "rental_number": rental_number(),
            "status": RentalStatus.RESERVED.value,
            "created_at": now,
            "updated_at": now,
        })

        rental = SupabaseClient.insert_rental(row)
        _set_equipment_status(request.equipment_id, EquipmentStatus.RENTED)

        logger.info(
            f"Created rental {rental.get('id')} for equipment {request.equipment_id} "
            f"({start} to {end})"
        )
        return rental

    @staticmethod
    def update_rental(rental_id: str, request: RentalUpdate) -> dict[str, Any]:
        """
        Apply the fields present in `request` to a rental.

        Raises:
            RentalNotFoundError: If the rental doesn't exist
            InvalidRentalDatesError: If the new dates are reversed
            EquipmentUnavailableError: If new dates overlap another open rental
        """
        current = SupabaseClient.fetch_rental(rental_id)
        if not current:
            raise RentalNotFoundError(rental_id)

        changes = request.changes()

        if any(field in changes for field in PRICING_FIELDS):
            start = _as_date(changes.get("start_date", current["start_date"]))
            end = _as_date(changes.get("end_date", current["end_date"]))
            if end < start:
                raise InvalidRentalDatesError(start.isoformat(), end.isoformat())

            dates_changed = "start_date" in changes or "end_date" in changes
            if dates_changed and SupabaseClient.find_overlapping_rentals(
                current["equipment_id"], start.isoformat(), end.isoformat(), exclude_id=rental_id
            ):
                raise EquipmentUnavailableError(current["equipment_id"])

            changes.update(price_rental(
                start,
                end,
                float(current["daily_rate"]),
                float(changes.get("delivery_fee", current.get("delivery_fee")) or 0),
                float(changes.get("pickup_fee", current.get("pickup_fee")) or 0),
            ))

        new_status = request.status
        if new_status is not None and new_status.value != current.get("status"):
            _set_equipment_status(current["equipment_id"], _equipment_status_for(new_status))

        changes["updated_at"] = utc_now_iso()
        rental = SupabaseClient.update_rental(rental_id, changes)
        if rental is None:
            raise RentalNotFoundError(rental_id)

        logger.info(f"Updated rental {rental_id}: {sorted(changes)}")
        return rental

    @staticmethod
    def delete_rental(rental_id: str) -> None:
        """
        Delete a rental that isn't currently out.

        Raises:
            RentalNotFoundError: If the rental doesn't exist
            ActiveRentalError: If the rental is active
        """
        rental = SupabaseClient.fetch_rental(rental_id)
        if not rental:
            raise RentalNotFoundError(rental_id)

        if rental.get("status") == RentalStatus.ACTIVE.value:
            raise ActiveRentalError(rental_id)

        SupabaseClient.delete_rental(rental_id)

        if rental.get("status") == RentalStatus.RESERVED.value:
            _set_equipment_status(rental["equipment_id"], EquipmentStatus.AVAILABLE)

        logger.info(f"Deleted rental {rental_id}")
