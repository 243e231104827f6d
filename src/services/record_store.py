"""Record store gateway over the Supabase tables backing the tracker."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from src.core.supabase import get_supabase_client

logger = logging.getLogger(__name__)

INVITATIONS_TABLE = "invitations"
SALES_REPS_TABLE = "sales_reps"
COHORTS_TABLE = "cohorts"


@dataclass
class StoreResult:
    """Outcome of a single store call.

    Store failures are reported through ``error`` instead of being raised.
    """

    data: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Check if the call succeeded."""
        return self.error is None


class RecordStore:
    """Generic CRUD access to the invitations, sales_reps and cohorts tables.

    Every call is single-shot: no retries, no pagination, no timeout. The
    Supabase client is synchronous, so each request runs in a worker thread
    and concurrent calls overlap instead of blocking the event loop.
    """

    def __init__(self) -> None:
        """Initialize record store with Supabase client."""
        self.client = get_supabase_client()

    async def fetch_all(
        self,
        table: str,
        order_field: str,
        descending: bool = False,
    ) -> StoreResult:
        """Select every row of a table ordered by one field.

        Args:
            table: Table name.
            order_field: Column to order by.
            descending: Order descending instead of ascending.

        Returns:
            StoreResult: Rows on success, error message otherwise.
        """
        try:
            query = self.client.table(table).select("*").order(order_field, desc=descending)
            response = await asyncio.to_thread(query.execute)
        except Exception as e:
            logger.warning("Failed to fetch %s: %s", table, e)
            return StoreResult(error=str(e))

        return StoreResult(data=response.data or [])

    async def insert(self, table: str, record: dict[str, Any]) -> StoreResult:
        """Insert a single row.

        Args:
            table: Table name.
            record: Column values for the new row.

        Returns:
            StoreResult: Inserted row(s) on success, error message otherwise.
        """
        try:
            query = self.client.table(table).insert(record)
            response = await asyncio.to_thread(query.execute)
        except Exception as e:
            logger.warning("Failed to insert into %s: %s", table, e)
            return StoreResult(error=str(e))

        return StoreResult(data=response.data or [])

    async def update_field(
        self,
        table: str,
        record_id: Any,
        field_name: str,
        value: Any,
    ) -> StoreResult:
        """Set one column of the row with the given id."""
        try:
            query = self.client.table(table).update({field_name: value}).eq("id", record_id)
            response = await asyncio.to_thread(query.execute)
        except Exception as e:
            logger.warning("Failed to update %s.%s for id %s: %s", table, field_name, record_id, e)
            return StoreResult(error=str(e))

        return StoreResult(data=response.data or [])

    async def delete(self, table: str, record_id: Any) -> StoreResult:
        """Delete the row with the given id."""
        try:
            query = self.client.table(table).delete().eq("id", record_id)
            response = await asyncio.to_thread(query.execute)
        except Exception as e:
            logger.warning("Failed to delete id %s from %s: %s", record_id, table, e)
            return StoreResult(error=str(e))

        return StoreResult(data=response.data or [])
