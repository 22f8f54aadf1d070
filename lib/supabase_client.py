# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides specialized methods for:
# - Business profiles (businesses table)
# - Equipment inventory (equipment table)
# - Customers and rental bookings (customers, rentals tables)
# - Per-business inventory statistics (equipment/customers/rentals)
# - Payment status updates driven by Stripe webhooks (payments table)
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   rows, total = SupabaseClient.list_equipment("biz_123", page=1, limit=50)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings
from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"

ACTIVE_RENTAL_STATUSES = ["active", "reserved"]


class SupabaseClientError(ApplicationError):
    """Error during Supabase operations."""

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code=code, suggestion=suggestion, details=details)


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        equipment = SupabaseClient.fetch_equipment("eq_1705312800000_ab12cd34")
        if equipment is None:
            ...  # not found
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        This is appropriate for server-side operations.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _fetch_single(
        cls,
        table: str,
        record_id: str,
        error_code: str,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """Fetch one row by id, returning None when it doesn't exist."""
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .select(columns)
                .eq("id", record_id)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch {table} row: {e}",
                code=error_code,
                details={"table": table, "id": record_id}
            )

    # -------------------------------------------------------------------------
    # Businesses
    # -------------------------------------------------------------------------

    @classmethod
    def insert_business(cls, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a business profile row.

        Returns:
            The inserted row as stored

        Raises:
            SupabaseClientError: If insert fails
        """
        return cls._insert_row("businesses", row, "INSERT_BUSINESS_FAILED")

    @classmethod
    def fetch_business(cls, business_id: str) -> dict[str, Any] | None:
        """Fetch a business by ID, or None if not found."""
        return cls._fetch_single("businesses", business_id, "FETCH_BUSINESS_FAILED")

    @classmethod
    def list_businesses(cls) -> list[dict[str, Any]]:
        """
        Fetch every business profile, newest first.

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table("businesses")
                .select("*")
                .order("created_at", desc=True)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list businesses: {e}",
                code="LIST_BUSINESSES_FAILED",
                suggestion="Check that the businesses table exists and is readable"
            )

    @classmethod
    def update_business(cls, business_id: str, changes: dict[str, Any]) -> list[dict[str, Any]]:
        """
        Apply `changes` to a business row.

        Returns:
            Updated rows (empty when the id matched nothing)
        """
        client = cls.get_client()

        try:
            response = (
                client.table("businesses")
                .update(changes)
                .eq("id", business_id)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update business: {e}",
                code="UPDATE_BUSINESS_FAILED",
                details={"business_id": business_id}
            )

    @classmethod
    def fetch_business_inventory_stats(cls, business_id: str) -> dict[str, Any]:
        """
        Summarize one business's inventory, customers and rentals.

        Returns:
            Dict with totalEquipment, totalCustomers, activeRentals,
            totalRevenue (sum of active/reserved rental totals),
            availableEquipment, maintenanceEquipment

        Raises:
            SupabaseClientError: If any query fails
        """
        client = cls.get_client()

        try:
            equipment = (
                client.table("equipment")
                .select("id, status", count="exact")
                .eq("business_id", business_id)
                .execute()
            )
            customers = (
                client.table("customers")
                .select("id", count="exact")
                .eq("business_id", business_id)
                .execute()
            )
            rentals = (
                client.table("rentals")
                .select("id", count="exact")
                .eq("business_id", business_id)
                .execute()
            )
            open_rentals = (
                client.table("rentals")
                .select("total_amount")
                .eq("business_id", business_id)
                .in_("status", ACTIVE_RENTAL_STATUSES)
                .execute()
            )

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch business stats: {e}",
                code="FETCH_STATS_FAILED",
                details={"business_id": business_id}
            )

        equipment_rows = equipment.data or []
        total_revenue = sum(
            (row.get("total_amount") or 0) for row in (open_rentals.data or [])
        )

        return {
            "totalEquipment": equipment.count or 0,
            "totalCustomers": customers.count or 0,
            "activeRentals": rentals.count or 0,
            "totalRevenue": total_revenue,
            "availableEquipment": sum(1 for e in equipment_rows if e.get("status") == "available"),
            "maintenanceEquipment": sum(1 for e in equipment_rows if e.get("status") == "maintenance"),
        }

    # -------------------------------------------------------------------------
    # Equipment
    # -------------------------------------------------------------------------

    @classmethod
    def list_equipment(
        cls,
        business_id: str,
        category: str | None = None,
        status: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List a business's equipment with filters and pagination.

        Args:
            business_id: Owning business
            category: Exact category filter
            status: Exact status filter
            search: Full-text query against the `fts` column
            page: Page number (1-indexed)
            limit: Items per page

        Returns:
            Tuple of (rows, total matching count)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        offset = (page - 1) * limit

        try:
            query = (
                client.table("equipment")
                .select("*", count="exact")
                .eq("business_id", business_id)
            )

            if category:
                query = query.eq("category", category)
            if status:
                query = query.eq("status", status)
            if search:
                query = query.text_search("fts", search)

            query = query.order("created_at", desc=True).range(offset, offset + limit - 1)
            response = query.execute()
            return response.data or [], response.count or 0

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list equipment: {e}",
                code="LIST_EQUIPMENT_FAILED",
                details={"business_id": business_id, "page": page, "limit": limit}
            )

    @classmethod
    def fetch_equipment(cls, equipment_id: str) -> dict[str, Any] | None:
        """Fetch one equipment item, or None if not found."""
        return cls._fetch_single("equipment", equipment_id, "FETCH_EQUIPMENT_FAILED")

    @classmethod
    def insert_equipment(cls, row: dict[str, Any]) -> dict[str, Any]:
        """
        Insert an equipment row.

        Raises:
            SupabaseClientError: If insert fails or returns nothing
        """
        return cls._insert_row("equipment", row, "INSERT_EQUIPMENT_FAILED")

    @classmethod
    def update_equipment(cls, equipment_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        """
        Apply `changes` to an equipment row.

        Returns:
            Updated row, or None when the id matched nothing
        """
        return cls._update_row("equipment", equipment_id, changes, "UPDATE_EQUIPMENT_FAILED")

    @classmethod
    def delete_equipment(cls, equipment_id: str) -> None:
        """Delete an equipment row."""
        cls._delete_row("equipment", equipment_id, "DELETE_EQUIPMENT_FAILED")

    @classmethod
    def count_open_rentals_for_equipment(cls, equipment_id: str) -> int:
        """Count active or reserved rentals that reference an equipment item."""
        return cls._count_open_rentals("equipment_id", equipment_id)

    # -------------------------------------------------------------------------
    # Customers
    # -------------------------------------------------------------------------

    @classmethod
    def list_customers(
        cls,
        business_id: str,
        status: str | None = None,
        search: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List a business's customers with filters and pagination.

        Args:
            business_id: Owning business
            status: Exact status filter
            search: Case-insensitive match on name, email or company
            page: Page number (1-indexed)
            limit: Items per page

        Returns:
            Tuple of (rows, total matching count)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        offset = (page - 1) * limit

        try:
            query = (
                client.table("customers")
                .select("*", count="exact")
                .eq("business_id", business_id)
            )

            if status:
                query = query.eq("status", status)
            if search:
                query = query.or_(
                    f"name.ilike.%{search}%,email.ilike.%{search}%,company.ilike.%{search}%"
                )

            query = query.order("created_at", desc=True).range(offset, offset + limit - 1)
            response = query.execute()
            return response.data or [], response.count or 0

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list customers: {e}",
                code="LIST_CUSTOMERS_FAILED",
                details={"business_id": business_id, "page": page, "limit": limit}
            )

    @classmethod
    def fetch_customer(cls, customer_id: str, with_rentals: bool = False) -> dict[str, Any] | None:
        """
        Fetch one customer, or None if not found.

        With `with_rentals`, the customer's rentals (and the equipment on
        each) are embedded under `rentals`.
        """
        columns = (
            "*, rentals(id, start_date, end_date, status, total_amount, equipment(name, category))"
            if with_rentals else "*"
        )
        return cls._fetch_single("customers", customer_id, "FETCH_CUSTOMER_FAILED", columns)

    @classmethod
    def find_customer_by_email(
        cls,
        business_id: str,
        email: str,
        exclude_id: str | None = None,
    ) -> dict[str, Any] | None:
        """Find a business's customer by email, optionally ignoring one id."""
        client = cls.get_client()

        try:
            query = (
                client.table("customers")
                .select("id, business_id")
                .eq("business_id", business_id)
                .eq("email", email)
            )
            if exclude_id:
                query = query.neq("id", exclude_id)

            response = query.limit(1).execute()
            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to look up customer email: {e}",
                code="FETCH_CUSTOMER_FAILED",
                details={"business_id": business_id}
            )

    @classmethod
    def insert_customer(cls, row: dict[str, Any]) -> dict[str, Any]:
        """Insert a customer row."""
        return cls._insert_row("customers", row, "INSERT_CUSTOMER_FAILED")

    @classmethod
    def update_customer(cls, customer_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        """Apply `changes` to a customer row; None when the id matched nothing."""
        return cls._update_row("customers", customer_id, changes, "UPDATE_CUSTOMER_FAILED")

    @classmethod
    def delete_customer(cls, customer_id: str) -> None:
        """Delete a customer row."""
        cls._delete_row("customers", customer_id, "DELETE_CUSTOMER_FAILED")

    @classmethod
    def count_open_rentals_for_customer(cls, customer_id: str) -> int:
        """Count active or reserved rentals booked by a customer."""
        return cls._count_open_rentals("customer_id", customer_id)

    # -------------------------------------------------------------------------
    # Rentals
    # -------------------------------------------------------------------------

    @classmethod
    def list_rentals(
        cls,
        business_id: str,
        customer_id: str | None = None,
        equipment_id: str | None = None,
        status: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        page: int = 1,
        limit: int = 50,
    ) -> tuple[list[dict[str, Any]], int]:
        """
        List a business's rentals with customer and equipment summaries.

        `start_date` keeps rentals starting on or after it; `end_date` keeps
        rentals ending on or before it.

        Returns:
            Tuple of (rows, total matching count)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        offset = (page - 1) * limit

        try:
            query = (
                client.table("rentals")
                .select(
                    "*, customer:customers(id, name, email, company), "
                    "equipment:equipment(id, name, category, daily_rate)",
                    count="exact",
                )
                .eq("business_id", business_id)
            )

            if customer_id:
                query = query.eq("customer_id", customer_id)
            if equipment_id:
                query = query.eq("equipment_id", equipment_id)
            if status:
                query = query.eq("status", status)
            if start_date:
                query = query.gte("start_date", start_date)
            if end_date:
                query = query.lte("end_date", end_date)

            query = query.order("created_at", desc=True).range(offset, offset + limit - 1)
            response = query.execute()
            return response.data or [], response.count or 0

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list rentals: {e}",
                code="LIST_RENTALS_FAILED",
                details={"business_id": business_id, "page": page, "limit": limit}
            )

    @classmethod
    def fetch_rental(cls, rental_id: str, with_relations: bool = False) -> dict[str, Any] | None:
        """
        Fetch one rental, or None if not found.

        With `with_relations`, the customer, equipment and payments are
        embedded.
        """
        columns = (
            "*, customer:customers(*), equipment:equipment(*), payments(*)"
            if with_relations else "*"
        )
        return cls._fetch_single("rentals", rental_id, "FETCH_RENTAL_FAILED", columns)

    @classmethod
    def find_overlapping_rentals(
        cls,
        equipment_id: str,
        start_date: str,
        end_date: str,
        exclude_id: str | None = None,
    ) -> list[dict[str, Any]]:
        """Open rentals of an equipment item whose dates overlap the range."""
        client = cls.get_client()

        try:
            query = (
                client.table("rentals")
                .select("id")
                .eq("equipment_id", equipment_id)
                .in_("status", ACTIVE_RENTAL_STATUSES)
                .lte("start_date", end_date)
                .gte("end_date", start_date)
            )
            if exclude_id:
                query = query.neq("id", exclude_id)

            return query.execute().data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to check availability: {e}",
                code="FETCH_RENTALS_FAILED",
                details={"equipment_id": equipment_id}
            )

    @classmethod
    def insert_rental(cls, row: dict[str, Any]) -> dict[str, Any]:
        """Insert a rental row."""
        return cls._insert_row("rentals", row, "INSERT_RENTAL_FAILED")

    @classmethod
    def update_rental(cls, rental_id: str, changes: dict[str, Any]) -> dict[str, Any] | None:
        """Apply `changes` to a rental row; None when the id matched nothing."""
        return cls._update_row("rentals", rental_id, changes, "UPDATE_RENTAL_FAILED")

    @classmethod
    def delete_rental(cls, rental_id: str) -> None:
        """Delete a rental row."""
        cls._delete_row("rentals", rental_id, "DELETE_RENTAL_FAILED")

    # -------------------------------------------------------------------------
    # Shared row helpers
    # -------------------------------------------------------------------------

    @classmethod
    def _insert_row(cls, table: str, row: dict[str, Any], error_code: str) -> dict[str, Any]:
        """Insert one row and return it as stored."""
        client = cls.get_client()

        try:
            response = client.table(table).insert(row).execute()

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code=error_code,
                details={"table": table, "business_id": row.get("business_id")}
            )

    @classmethod
    def _update_row(
        cls,
        table: str,
        record_id: str,
        changes: dict[str, Any],
        error_code: str,
    ) -> dict[str, Any] | None:
        """Update one row by id; None when the id matched nothing."""
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .update(changes)
                .eq("id", record_id)
                .execute()
            )
            return response.data[0] if response.data else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table} row: {e}",
                code=error_code,
                details={"table": table, "id": record_id}
            )

    @classmethod
    def _delete_row(cls, table: str, record_id: str, error_code: str) -> None:
        """Delete one row by id."""
        client = cls.get_client()

        try:
            client.table(table).delete().eq("id", record_id).execute()

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete {table} row: {e}",
                code=error_code,
                details={"table": table, "id": record_id}
            )

    @classmethod
    def _count_open_rentals(cls, column: str, value: str) -> int:
        """Count active or reserved rentals where `column` equals `value`."""
        client = cls.get_client()

        try:
            response = (
                client.table("rentals")
                .select("id")
                .eq(column, value)
                .in_("status", ACTIVE_RENTAL_STATUSES)
                .execute()
            )
            return len(response.data or [])

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to check rentals: {e}",
                code="FETCH_RENTALS_FAILED",
                details={column: value}
            )

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    @classmethod
    def update_payment_status(
        cls,
        payment_intent_id: str,
        status: str,
        failure_reason: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        Update the payment row that belongs to a Stripe PaymentIntent.

        Returns:
            Updated rows (empty when no payment references the intent)
        """
        client = cls.get_client()

        changes: dict[str, Any] = {"status": status}
        if failure_reason is not None:
            changes["failure_reason"] = failure_reason

        try:
            response = (
                client.table("payments")
                .update(changes)
                .eq("stripe_payment_intent_id", payment_intent_id)
                .execute()
            )
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update payment status: {e}",
                code="UPDATE_PAYMENT_FAILED",
                details={"payment_intent_id": payment_intent_id, "status": status}
            )
