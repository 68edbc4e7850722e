"""
Thin async client for the Supabase PostgREST API.

Each Supabase project (inventory, sales, appointments) gets its own
SupabaseClient instance. Filters use PostgREST operator syntax, e.g.
``{"product_id": eq(5), "stock": eq(10)}`` or ``{"service_id": in_([1, 2])}``.
"""

import logging
from typing import Any, Iterable, Optional

import httpx

from .config import SUPABASE_TIMEOUT
from .exceptions import UpstreamUnavailable

logger = logging.getLogger(__name__)


def eq(value: Any) -> str:
    return f"eq.{value}"


def in_(values: Iterable[Any]) -> str:
    return f"in.({','.join(str(v) for v in values)})"


class SupabaseClient:
    """PostgREST client for a single Supabase project"""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        name: str = "supabase",
        timeout: float = SUPABASE_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self.name = name
        self.timeout = timeout
        self._transport = transport

    def _headers(self, prefer: Optional[str] = None) -> dict[str, str]:
        headers = {
            "apikey": self.api_key or "",
            "Authorization": f"Bearer {self.api_key or ''}",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(
        self,
        method: str,
        table: str,
        params: Optional[list[tuple[str, str]]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        url = f"{self.base_url}/rest/v1/{table}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(
                    method, url, params=params, json=json, headers=self._headers(prefer)
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ {self.name} {method} {table} failed: {e}")
            raise UpstreamUnavailable(f"{self.name} request failed: {e}") from e

        if response.status_code >= 400:
            logger.error(
                f"❌ {self.name} {method} {table} returned {response.status_code}: {response.text[:200]}"
            )
            raise UpstreamUnavailable(
                f"{self.name} request failed: {response.status_code} {response.reason_phrase}"
            )

        if not response.content:
            return []
        data = response.json()
        return data if isinstance(data, list) else [data]

    @staticmethod
    def _params(
        filters: Optional[dict[str, str]] = None,
        select: Optional[str] = None,
        order: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[tuple[str, str]]:
        params = []
        if select:
            params.append(("select", select))
        for column, condition in (filters or {}).items():
            params.append((column, condition))
        if order:
            params.append(("order", order))
        if limit is not None:
            params.append(("limit", str(limit)))
        return params

    async def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[dict[str, str]] = None,
        order: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        """GET rows matching filters"""
        return await self._request("GET", table, params=self._params(filters, columns, order, limit))

    async def update(
        self, table: str, values: dict[str, Any], filters: dict[str, str]
    ) -> list[dict[str, Any]]:
        """PATCH rows matching filters and return the updated rows.

        An empty list means no row matched the filters.
        """
        if not filters:
            raise ValueError("Refusing to update without filters")
        return await self._request(
            "PATCH",
            table,
            params=self._params(filters),
            json=values,
            prefer="return=representation",
        )

    async def insert(self, table: str, values: dict[str, Any]) -> list[dict[str, Any]]:
        """POST a row and return what was written"""
        return await self._request("POST", table, json=values, prefer="return=representation")
