"""Port interface for the row-oriented persistence store."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

Row = Dict[str, Any]
Filters = Dict[str, Any]

INFLUENCERS_TABLE = "influencers"
CLAIMS_TABLE = "claims"


class RowStore(ABC):
    """Abstract interface for table/filter based persistence.

    Filters are equality matches on columns. Every operation either
    succeeds completely or raises StoreError; an insert never leaves part
    of its rows behind.
    """

    async def initialize(self) -> None:
        """Prepare connections or other resources."""
        pass

    async def shutdown(self) -> None:
        """Release connections or other resources."""
        pass

    @abstractmethod
    async def get(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        """Read all rows of a table matching the filters.

        Args:
            table: Table name
            filters: Column equality filters
            order_by: Optional column to sort by
            descending: Sort direction

        Returns:
            Matching rows
        """
        pass

    @abstractmethod
    async def insert(self, table: str, rows: List[Row]) -> List[Row]:
        """Insert rows atomically.

        Returns:
            Inserted rows including store-assigned columns (id, created_at)
        """
        pass

    @abstractmethod
    async def update(self, table: str, filters: Filters, patch: Row) -> List[Row]:
        """Apply a patch to every row matching the filters.

        Returns:
            Updated rows
        """
        pass

    async def get_one(self, table: str, filters: Filters) -> Optional[Row]:
        """Read the first row matching the filters, if any."""
        rows = await self.get(table, filters)
        return rows[0] if rows else None

    @property
    @abstractmethod
    def store_name(self) -> str:
        """Get the store name."""
        pass
