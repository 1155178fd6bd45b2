"""In-memory row store used for local runs and tests."""

import asyncio
import copy
import logging
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ...domain.errors import StoreError
from ...domain.ports.row_store import Filters, Row, RowStore

logger = logging.getLogger(__name__)


def _matches(row: Row, filters: Optional[Filters]) -> bool:
    return all(row.get(column) == value for column, value in (filters or {}).items())


class InMemoryRowStore(RowStore):
    """Dictionary-backed tables with store-assigned ids and timestamps.

    Rows are copied on the way in and on the way out so callers never share
    state with the store.
    """

    def __init__(self, tables: Optional[Dict[str, List[Row]]] = None):
        self._tables: Dict[str, List[Row]] = {
            name: [copy.deepcopy(row) for row in rows]
            for name, rows in (tables or {}).items()
        }
        self._lock = asyncio.Lock()

    def _table(self, table: str) -> List[Row]:
        return self._tables.setdefault(table, [])

    async def get(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        rows = [copy.deepcopy(row) for row in self._table(table) if _matches(row, filters)]
        if order_by:
            present = [row for row in rows if row.get(order_by) is not None]
            missing = [row for row in rows if row.get(order_by) is None]
            present.sort(key=lambda row: row[order_by], reverse=descending)
            # Nulls sort last in both directions
            rows = present + missing
        return rows

    async def insert(self, table: str, rows: List[Row]) -> List[Row]:
        if any(not isinstance(row, dict) for row in rows):
            raise StoreError(f"Cannot insert non-object rows into {table}")

        async with self._lock:
            now = datetime.now(timezone.utc).isoformat()
            prepared = []
            for row in rows:
                record = copy.deepcopy(row)
                record.setdefault("id", str(uuid.uuid4()))
                record.setdefault("created_at", now)
                prepared.append(record)

            existing_ids = {row.get("id") for row in self._table(table)}
            new_ids = [record["id"] for record in prepared]
            if len(set(new_ids)) != len(new_ids) or existing_ids.intersection(new_ids):
                raise StoreError(f"Duplicate id on insert into {table}")

            self._table(table).extend(prepared)

        logger.debug(f"Inserted {len(prepared)} rows into {table}")
        return [copy.deepcopy(record) for record in prepared]

    async def update(self, table: str, filters: Filters, patch: Row) -> List[Row]:
        updated = []
        async with self._lock:
            for row in self._table(table):
                if _matches(row, filters):
                    row.update(copy.deepcopy(patch))
                    updated.append(copy.deepcopy(row))
        return updated

    @property
    def store_name(self) -> str:
        return "memory"
