"""Catalog repository - PostgREST operations on the inventory project"""

import logging
from typing import Any, Iterable, Optional

from ...supabase import SupabaseClient, eq, in_
from .schemas import Product, Service, ServiceProductLink

logger = logging.getLogger(__name__)


def _unique_ids(ids: Iterable[Any]) -> list[int]:
    return sorted({int(i) for i in ids})


class CatalogRepository:
    """Repository for products, services and service-product links"""

    @staticmethod
    async def fetch_products(db: SupabaseClient, ids: Iterable[Any]) -> dict[int, Product]:
        """Batch fetch products; ids that do not exist are simply absent"""
        unique = _unique_ids(ids)
        if not unique:
            return {}
        rows = await db.select("products", filters={"product_id": in_(unique)})
        return {int(r["product_id"]): Product.model_validate(r) for r in rows}

    @staticmethod
    async def fetch_product(db: SupabaseClient, product_id: Any) -> Optional[Product]:
        rows = await db.select("products", filters={"product_id": eq(int(product_id))})
        return Product.model_validate(rows[0]) if rows else None

    @staticmethod
    async def list_products(db: SupabaseClient, category_id: Optional[int] = None) -> list[Product]:
        filters = {"category_id": eq(category_id)} if category_id is not None else None
        rows = await db.select("products", filters=filters, order="product_id.asc")
        return [Product.model_validate(r) for r in rows]

    @staticmethod
    async def fetch_services(db: SupabaseClient, ids: Iterable[Any]) -> dict[int, Service]:
        """Batch fetch services; ids that do not exist are simply absent"""
        unique = _unique_ids(ids)
        if not unique:
            return {}
        rows = await db.select("services", filters={"service_id": in_(unique)})
        return {int(r["service_id"]): Service.model_validate(r) for r in rows}

    @staticmethod
    async def fetch_service(db: SupabaseClient, service_id: Any) -> Optional[Service]:
        rows = await db.select("services", filters={"service_id": eq(int(service_id))})
        return Service.model_validate(rows[0]) if rows else None

    @staticmethod
    async def list_service_rows(
        db: SupabaseClient, service_id: Optional[int] = None
    ) -> list[dict[str, Any]]:
        """Raw service rows including the category name"""
        filters = {"service_id": eq(service_id)} if service_id is not None else None
        return await db.select(
            "services",
            columns="*,services_category(category_name)",
            filters=filters,
            order="service_id.asc",
        )

    @staticmethod
    async def fetch_service_links(
        db: SupabaseClient, service_ids: Iterable[Any], variant_id: Optional[int] = None
    ) -> list[ServiceProductLink]:
        unique = _unique_ids(service_ids)
        if not unique:
            return []
        filters = {"service_id": in_(unique)}
        if variant_id is not None:
            filters["variant_id"] = eq(variant_id)
        rows = await db.select(
            "service_products",
            columns="service_id,product_id,quantity,variant_id",
            filters=filters,
        )
        return [ServiceProductLink.model_validate(r) for r in rows]

    @staticmethod
    async def compare_and_set_stock(
        db: SupabaseClient, product_id: int, expected: int, new_stock: int
    ) -> Optional[Product]:
        """
        Set stock only if it still equals `expected`.

        Returns the updated product, or None when another writer changed the
        stock first (no row matched the conditional filter).
        """
        rows = await db.update(
            "products",
            {"stock": new_stock},
            filters={"product_id": eq(product_id), "stock": eq(expected)},
        )
        if not rows:
            logger.warning(
                f"⚠️ Stock for product {product_id} changed before update (expected {expected})"
            )
            return None
        return Product.model_validate(rows[0])
