# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides small generic helpers that every service uses:
# - fetch_one / fetch_many for reads with equality filters
# - insert_row / update_rows / delete_rows for writes
#
# Rows go in and come out snake_case. Callers may pass camelCase keys; they
# are normalized with lib.casing before hitting PostgREST.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   shoot = SupabaseClient.fetch_one("shoots", {"id": shoot_id, "team_id": team_id})
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings
from lib.casing import snake_keys

# Set up logging for this module
logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        shoots = SupabaseClient.fetch_many(
            "shoots",
            {"team_id": team_id},
            order_by="created_at",
            desc=True,
        )
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Team scoping is therefore enforced by the services, never by RLS.

        Returns:
            Client: Supabase client instance

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
    def _normalize_value(cls, value: Any) -> Any:
        """Convert UUIDs to strings for queries."""
        return str(value) if isinstance(value, UUID) else value

    @classmethod
    def _apply_filters(cls, query, filters: dict[str, Any] | None):
        for column, value in (filters or {}).items():
            query = query.eq(column, cls._normalize_value(value))
        return query

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_one(
        cls,
        table: str,
        filters: dict[str, Any],
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch the first row matching all equality filters.

        Args:
            table: Table name
            filters: Column -> value equality filters
            columns: PostgREST select expression

        Returns:
            Row dict, or None if no row matches

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        try:
            query = cls._apply_filters(client.table(table).select(columns), filters)
            response = query.limit(1).execute()
            rows = response.data or []
            return rows[0] if rows else None

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code="FETCH_FAILED",
                suggestion=f"Check that the {table} table exists and is accessible",
                details={"table": table, "filters": {k: str(v) for k, v in filters.items()}}
            )

    @classmethod
    def fetch_many(
        cls,
        table: str,
        filters: dict[str, Any] | None = None,
        columns: str = "*",
        order_by: str | None = None,
        desc: bool = False,
        in_filter: tuple[str, list[Any]] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch all rows matching the equality filters.

        Args:
            table: Table name
            filters: Column -> value equality filters
            columns: PostgREST select expression
            order_by: Optional column to sort by
            desc: Sort descending (newest first for created_at)
            in_filter: Optional (column, values) membership filter

        Returns:
            List of row dicts (possibly empty)

        Raises:
            SupabaseClientError: If query fails
        """
        client = cls.get_client()

        if in_filter is not None and not in_filter[1]:
            # PostgREST rejects an empty IN list; nothing can match anyway
            return []

        try:
            query = cls._apply_filters(client.table(table).select(columns), filters)
            if in_filter is not None:
                column, values = in_filter
                query = query.in_(column, [cls._normalize_value(v) for v in values])
            if order_by:
                query = query.order(order_by, desc=desc)

            response = query.execute()
            rows = response.data or []

            logger.debug(f"Fetched {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list {table}: {e}",
                code="LIST_FAILED",
                details={"table": table}
            )

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @classmethod
    def insert_row(cls, table: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a row and return it with generated id and timestamps.

        Raises:
            SupabaseClientError: If insert fails or returns nothing
        """
        client = cls.get_client()
        payload = {k: cls._normalize_value(v) for k, v in snake_keys(data).items()}

        try:
            response = client.table(table).insert(payload).execute()

            if response.data:
                return response.data[0]
            raise SupabaseClientError(
                message=f"Insert into {table} returned no data",
                code="INSERT_NO_DATA"
            )

        except SupabaseClientError:
            raise
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert into {table}: {e}",
                code="INSERT_FAILED",
                suggestion="Check required columns and foreign keys",
                details={"table": table}
            )

    @classmethod
    def update_rows(
        cls,
        table: str,
        data: dict[str, Any],
        filters: dict[str, Any],
    ) -> list[dict[str, Any]]:
        """
        Update all rows matching the filters.

        Returns:
            The updated rows (empty list if nothing matched)

        Raises:
            SupabaseClientError: If update fails
        """
        client = cls.get_client()
        payload = {k: cls._normalize_value(v) for k, v in snake_keys(data).items()}

        try:
            query = cls._apply_filters(client.table(table).update(payload), filters)
            response = query.execute()
            return response.data or []

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update {table}: {e}",
                code="UPDATE_FAILED",
                details={"table": table}
            )

    @classmethod
    def delete_rows(cls, table: str, filters: dict[str, Any]) -> list[dict[str, Any]]:
        """
        Delete all rows matching the filters.

        Returns:
            The deleted rows (empty list if nothing matched)

        Raises:
            SupabaseClientError: If delete fails
        """
        if not filters:
            raise SupabaseClientError(
                message=f"Refusing to delete from {table} without filters",
                code="UNFILTERED_DELETE",
            )

        client = cls.get_client()

        try:
            query = cls._apply_filters(client.table(table).delete(), filters)
            response = query.execute()
            deleted = response.data or []
            logger.debug(f"Deleted {len(deleted)} rows from {table}")
            return deleted

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete from {table}: {e}",
                code="DELETE_FAILED",
                details={"table": table}
            )
