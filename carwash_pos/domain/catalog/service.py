"""Catalog service - product and service listings with availability"""

import logging
from typing import Any, Optional

from ...config import RETAIL_CATEGORY_ID
from ...exceptions import ProductNotFound, ServiceNotFound
from ...supabase import SupabaseClient
from .repository import CatalogRepository
from .schemas import Product, ServiceProductLink, ServiceResponse

logger = logging.getLogger(__name__)

UNAVAILABLE_SUFFIX = " (Unavailable)"
_DERIVED_FIELDS = ("service_name", "services_category", "category_name", "active")


class CatalogService:
    """Service layer for catalog reads"""

    def __init__(self, db: SupabaseClient, retail_category_id: Optional[int] = RETAIL_CATEGORY_ID):
        self.db = db
        self.repo = CatalogRepository()
        self.retail_category_id = retail_category_id

    async def list_products(self) -> list[Product]:
        return await self.repo.list_products(self.db, self.retail_category_id)

    async def get_product(self, product_id: int) -> Product:
        product = await self.repo.fetch_product(self.db, product_id)
        if not product:
            raise ProductNotFound(product_id)
        return product

    async def list_services(self) -> list[ServiceResponse]:
        rows = await self.repo.list_service_rows(self.db)
        return await self._with_availability(rows)

    async def get_service(self, service_id: int) -> ServiceResponse:
        rows = await self.repo.list_service_rows(self.db, service_id)
        if not rows:
            raise ServiceNotFound(service_id)
        return (await self._with_availability(rows))[0]

    async def _with_availability(self, rows: list[dict[str, Any]]) -> list[ServiceResponse]:
        """
        Mark services whose linked products cannot cover one service unit.

        Unavailable services keep their row but get active=False and an
        "(Unavailable)" suffix on the name.
        """
        links = await self.repo.fetch_service_links(self.db, [r["service_id"] for r in rows])
        products = await self.repo.fetch_products(self.db, [link.product_id for link in links])

        links_by_service: dict[int, list[ServiceProductLink]] = {}
        for link in links:
            links_by_service.setdefault(link.service_id, []).append(link)

        result = []
        for row in rows:
            service_links = links_by_service.get(int(row["service_id"]), [])
            has_stock = all(
                link.product_id in products and products[link.product_id].stock >= link.quantity
                for link in service_links
            )
            category = row.get("services_category") or {}
            name = row["service_name"]
            if not has_stock:
                logger.info(f"Service {row['service_id']} marked unavailable (insufficient stock)")
                name = f"{name}{UNAVAILABLE_SUFFIX}"
            fields = {k: v for k, v in row.items() if k not in _DERIVED_FIELDS}
            result.append(
                ServiceResponse(
                    **fields,
                    service_name=name,
                    category_name=category.get("category_name") if isinstance(category, dict) else None,
                    active=has_stock,
                )
            )
        return result
