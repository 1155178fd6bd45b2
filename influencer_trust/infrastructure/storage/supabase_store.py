"""Supabase (PostgREST) implementation of the row store port."""

import logging
import os
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, Field

from ...domain.errors import StoreError
from ...domain.ports.row_store import Filters, Row, RowStore

logger = logging.getLogger(__name__)


class SupabaseConfig(BaseModel):
    """Configuration for Supabase row store."""

    url: str = Field(..., description="Supabase project URL")
    key: str = Field(..., description="Supabase service or anon key")
    timeout: float = Field(default=30.0, description="Request timeout in seconds")

    @classmethod
    def from_env(cls) -> "SupabaseConfig":
        """Create configuration from environment variables."""
        url = os.getenv("SUPABASE_URL", "")
        key = os.getenv("SUPABASE_KEY", "")
        if not url or not key:
            logger.warning("⚠️ SUPABASE_URL or SUPABASE_KEY not found in environment variables")
        return cls(
            url=url,
            key=key,
            timeout=float(os.getenv("SUPABASE_TIMEOUT", "30")),
        )


def _filter_value(value: Any) -> str:
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class SupabaseRowStore(RowStore):
    """Row store talking to the PostgREST endpoint of a Supabase project."""

    def __init__(self, config: SupabaseConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        """Initialize the store.

        Args:
            config: Supabase connection settings
            transport: Optional httpx transport, mainly for tests
        """
        self._config = config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def initialize(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=f"{self._config.url.rstrip('/')}/rest/v1",
                timeout=self._config.timeout,
                transport=self._transport,
                headers={
                    "apikey": self._config.key,
                    "Authorization": f"Bearer {self._config.key}",
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
            logger.info(f"✅ Supabase store connected to {self._config.url}")

    async def shutdown(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, str]] = None,
        json: Any = None,
        representation: bool = False,
    ) -> List[Row]:
        if not self._client:
            raise StoreError("Supabase store not initialized")

        headers = {"Prefer": "return=representation"} if representation else None
        try:
            response = await self._client.request(
                method, f"/{table}", params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            raise StoreError(f"Supabase request failed: {type(e).__name__}: {e}") from e

        if not response.is_success:
            raise StoreError(
                f"Supabase {method} {table} returned {response.status_code}: {response.text[:500]}"
            )
        if not response.content:
            return []
        try:
            return response.json()
        except ValueError as e:
            raise StoreError(f"Supabase returned invalid JSON for {table}") from e

    async def get(
        self,
        table: str,
        filters: Optional[Filters] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        params = {"select": "*"}
        params.update({column: _filter_value(value) for column, value in (filters or {}).items()})
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        return await self._request("GET", table, params=params)

    async def insert(self, table: str, rows: List[Row]) -> List[Row]:
        if not rows:
            return []
        # PostgREST runs a bulk insert in one transaction
        return await self._request("POST", table, json=rows, representation=True)

    async def update(self, table: str, filters: Filters, patch: Row) -> List[Row]:
        params = {column: _filter_value(value) for column, value in filters.items()}
        return await self._request("PATCH", table, params=params, json=patch, representation=True)

    @property
    def store_name(self) -> str:
        return "supabase"
