# =============================================================================
# core/services/customer_service.py - Customer Logic
# =============================================================================
# Handles customer CRUD on top of the Supabase `customers` table.
# Emails are unique per business; a customer with open rentals can't be
# deleted.
# =============================================================================

import logging
import math
from typing import Any

from app.exceptions import CustomerInUseError, CustomerNotFoundError, DuplicateCustomerError
from core.models.customer import CustomerCreate, CustomerUpdate
from lib.supabase_client import SupabaseClient
from lib.utils import generate_id, utc_now_iso

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50


class CustomerService:
    """Service for customer operations."""

    @staticmethod
    def list_customers(
        business_id: str,
        status: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> tuple[list[dict[str, Any]], dict[str, int]]:
        """List a business's customers, newest first, with pagination info."""
        rows, total = SupabaseClient.list_customers(
            business_id=business_id,
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
    def get_customer(customer_id: str) -> dict[str, Any]:
        """
        Get one customer with their rental history embedded.

        Raises:
            CustomerNotFoundError: If the customer doesn't exist
        """
        customer = SupabaseClient.fetch_customer(customer_id, with_rentals=True)
        if not customer:
            raise CustomerNotFoundError(customer_id)
        return customer

    @staticmethod
    def create_customer(request: CustomerCreate) -> dict[str, Any]:
        """
        Create a customer.

        Raises:
            DuplicateCustomerError: If the business already has this email
        """
        if SupabaseClient.find_customer_by_email(request.business_id, request.email):
            raise DuplicateCustomerError(request.email)

        now = utc_now_iso()
        row = request.model_dump(mode="json")
        row.update({
            "id": generate_id("cust", random_length=8),
            "created_at": now,
            "updated_at": now,
        })

        customer = SupabaseClient.insert_customer(row)
        logger.info(f"Created customer {customer.get('id')} for business {request.business_id}")
        return customer

    @staticmethod
    def update_customer(customer_id: str, request: CustomerUpdate) -> dict[str, Any]:
        """
        Apply the fields present in `request` to a customer.

        Raises:
            CustomerNotFoundError: If the customer doesn't exist
            DuplicateCustomerError: If the new email belongs to another
                customer of the same business
        """
        current = SupabaseClient.fetch_customer(customer_id)
        if not current:
            raise CustomerNotFoundError(customer_id)

        changes = request.changes()
        email = changes.get("email")
        if email and SupabaseClient.find_customer_by_email(
            current["business_id"], email, exclude_id=customer_id
        ):
            raise DuplicateCustomerError(
                email, message="Customer with this email already exists in this business"
            )

        changes["updated_at"] = utc_now_iso()
        customer = SupabaseClient.update_customer(customer_id, changes)
        if customer is None:
            raise CustomerNotFoundError(customer_id)

        logger.info(f"Updated customer {customer_id}: {sorted(changes)}")
        return customer

    @staticmethod
    def delete_customer(customer_id: str) -> None:
        """
        Delete a customer.

        Raises:
            CustomerInUseError: If active or reserved rentals reference them
        """
        if SupabaseClient.count_open_rentals_for_customer(customer_id) > 0:
            raise CustomerInUseError(customer_id)

        SupabaseClient.delete_customer(customer_id)
        logger.info(f"Deleted customer {customer_id}")
