"""
Stock validation and deduction for checkout and appointment completion.

StockValidator checks the whole request before anything is written and turns
it into a StockPlan: one aggregated deduction per product, covering product
lines and the products consumed by service lines. StockDeductor then applies
the plan with conditional updates (stock=eq.<observed>), re-reading and
re-validating a product whenever another writer got there first.

Deductions are applied one product at a time. If a later deduction fails, the
earlier ones stay committed; they are logged at ERROR level for operators.
"""

import logging

from pydantic import BaseModel

from ...config import STOCK_CAS_ATTEMPTS
from ...exceptions import (
    InsufficientStock,
    InvalidSize,
    NoProductConfiguration,
    ProductNotFound,
    ServiceNotFound,
    StockConflict,
)
from ...supabase import SupabaseClient
from ..cart.schemas import CartLine, ItemType
from ..catalog.repository import CatalogRepository
from ..catalog.schemas import Product, Service

logger = logging.getLogger(__name__)


class Deduction(BaseModel):
    product_id: int
    name: str
    required: int
    observed_stock: int


class StockPlan(BaseModel):
    """Validated catalog data plus the deductions to apply"""

    products: dict[int, Product] = {}
    services: dict[int, Service] = {}
    deductions: list[Deduction] = []

    def unit_price(self, line: CartLine) -> float:
        if line.type == ItemType.PRODUCT:
            return self.products[line.id].price
        return self.services[line.id].price_for(line.size) or 0.0

    def display_name(self, line: CartLine) -> str:
        if line.type == ItemType.PRODUCT:
            return self.products[line.id].name
        return self.services[line.id].service_name


class StockValidator:
    """All-or-nothing stock pre-check for a list of lines"""

    def __init__(self, db: SupabaseClient, require_service_price: bool = True):
        self.db = db
        self.repo = CatalogRepository()
        self.require_service_price = require_service_price

    async def validate(self, lines: list[CartLine]) -> StockPlan:
        product_ids = [line.id for line in lines if line.type == ItemType.PRODUCT]
        service_ids = [line.id for line in lines if line.type == ItemType.SERVICE]

        products = await self.repo.fetch_products(self.db, product_ids)
        services = await self.repo.fetch_services(self.db, service_ids)

        required: dict[int, int] = {}

        for line in lines:
            if line.type == ItemType.PRODUCT:
                product = products.get(line.id)
                if not product:
                    raise ProductNotFound(line.id)
                if product.stock < line.quantity:
                    raise InsufficientStock(product.name)
                required[line.id] = required.get(line.id, 0) + line.quantity
            else:
                service = services.get(line.id)
                if not service:
                    raise ServiceNotFound(line.id)
                if line.size is None or (
                    self.require_service_price and service.price_for(line.size) is None
                ):
                    raise InvalidSize(f"Invalid size for service {service.service_name}")

        await self._add_linked_products(lines, services, products, required)

        deductions = []
        for product_id, quantity in required.items():
            product = products[product_id]
            if product.stock < quantity:
                raise InsufficientStock(product.name)
            deductions.append(
                Deduction(
                    product_id=product_id,
                    name=product.name,
                    required=quantity,
                    observed_stock=product.stock,
                )
            )

        logger.info(
            f"✅ Stock validated for {len(lines)} line(s), {len(deductions)} product(s) to deduct"
        )
        return StockPlan(products=products, services=services, deductions=deductions)

    async def _add_linked_products(
        self,
        lines: list[CartLine],
        services: dict[int, Service],
        products: dict[int, Product],
        required: dict[int, int],
    ) -> None:
        """Resolve service-linked products into `required` and `products`"""
        service_lines = [line for line in lines if line.type == ItemType.SERVICE]
        if not service_lines:
            return

        links = await self.repo.fetch_service_links(self.db, [line.id for line in service_lines])

        for line in service_lines:
            matching = [
                link
                for link in links
                if link.service_id == line.id and link.variant_id == line.size.variant_id
            ]
            if not matching:
                raise NoProductConfiguration(
                    f"No product configuration for {services[line.id].service_name} "
                    f"({line.size.value} size)"
                )
            for link in matching:
                required[link.product_id] = (
                    required.get(link.product_id, 0) + link.quantity * line.quantity
                )

        missing = [pid for pid in required if pid not in products]
        if missing:
            products.update(await self.repo.fetch_products(self.db, missing))
        for pid in missing:
            if pid not in products:
                raise ProductNotFound(pid)


class StockDeductor:
    """Applies a StockPlan with compare-and-swap stock writes"""

    def __init__(self, db: SupabaseClient, attempts: int = STOCK_CAS_ATTEMPTS):
        self.db = db
        self.repo = CatalogRepository()
        self.attempts = max(1, attempts)

    async def apply(self, plan: StockPlan) -> list[Product]:
        updated: list[Product] = []
        try:
            for deduction in plan.deductions:
                updated.append(await self._deduct(deduction))
        except Exception:
            if updated:
                committed = ", ".join(f"{p.product_id} (now {p.stock})" for p in updated)
                logger.error(
                    f"❌ Stock deduction stopped partway; already committed for products: {committed}"
                )
            raise
        logger.info(f"📦 Deducted stock for {len(updated)} product(s)")
        return updated

    async def _deduct(self, deduction: Deduction) -> Product:
        expected = deduction.observed_stock
        for attempt in range(1, self.attempts + 1):
            if expected < deduction.required:
                raise InsufficientStock(deduction.name)

            product = await self.repo.compare_and_set_stock(
                self.db, deduction.product_id, expected, expected - deduction.required
            )
            if product:
                logger.info(
                    f"📉 Product {deduction.product_id} stock {expected} -> {product.stock}"
                )
                return product

            current = await self.repo.fetch_product(self.db, deduction.product_id)
            if not current:
                raise ProductNotFound(deduction.product_id)
            logger.info(
                f"🔁 Retrying stock update for product {deduction.product_id} "
                f"(attempt {attempt}/{self.attempts}, stock now {current.stock})"
            )
            expected = current.stock

        if expected < deduction.required:
            raise InsufficientStock(deduction.name)
        raise StockConflict(f"Stock for {deduction.name} changed concurrently, please retry")
