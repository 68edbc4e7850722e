"""Cart service - Business logic for building up a pending order"""

import logging
from typing import Optional

from ...exceptions import (
    InsufficientStock,
    InvalidInput,
    InvalidSize,
    NoValidSize,
    ProductNotFound,
    ServiceNotFound,
)
from ...supabase import SupabaseClient
from ..catalog.repository import CatalogRepository
from ..catalog.schemas import SizeTier
from .schemas import AddToCartRequest, CartLine, ItemType, RemoveOneRequest
from .store import CartStore

logger = logging.getLogger(__name__)


def parse_item_type(value) -> ItemType:
    try:
        return ItemType(str(value).strip().lower())
    except ValueError:
        raise InvalidInput("Invalid type. Must be 'product' or 'service'.") from None


def parse_item_id(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid id: {value}") from None


def parse_size(value: Optional[str]) -> Optional[SizeTier]:
    if value in (None, ""):
        return None
    size = SizeTier.parse(value)
    if size is None:
        raise InvalidSize(f"Invalid size '{value}'")
    return size


class CartService:
    """Service layer for one session's cart"""

    def __init__(self, store: CartStore, db: SupabaseClient, session_id: str):
        self.store = store
        self.db = db
        self.session_id = session_id
        self.repo = CatalogRepository()

    def snapshot(self) -> list[CartLine]:
        return self.store.snapshot(self.session_id)

    def describe(self) -> list[str]:
        """Human-readable cart lines, e.g. '2x Wax [service - large]'"""
        return [line.describe() for line in self.snapshot()]

    def clear(self) -> None:
        self.store.clear(self.session_id)
        logger.info(f"🧹 Cart cleared for session {self.session_id}")

    async def add(self, data: AddToCartRequest) -> CartLine:
        """Add a product or service line, merging with an identical line"""
        if data.id in (None, "") or not data.type:
            raise InvalidInput("Missing id or type")

        item_type = parse_item_type(data.type)
        item_id = parse_item_id(data.id)
        quantity = 1 if data.quantity is None else data.quantity
        if quantity <= 0:
            raise InvalidInput("Quantity must be a positive integer")

        if item_type == ItemType.PRODUCT:
            line = await self._product_line(item_id, quantity, data)
        else:
            line = await self._service_line(item_id, quantity, parse_size(data.size))

        added = self.store.add(self.session_id, line)
        logger.info(
            f"🛒 Added {quantity}x {line.name} ({item_type.value} {item_id}) "
            f"to cart for session {self.session_id}"
        )
        return added

    async def _product_line(self, item_id: int, quantity: int, data: AddToCartRequest) -> CartLine:
        if data.name and data.price is not None:
            return CartLine(
                id=item_id, type=ItemType.PRODUCT, name=data.name, price=data.price, quantity=quantity
            )

        product = (await self.repo.fetch_products(self.db, [item_id])).get(item_id)
        if not product:
            raise ProductNotFound(item_id)

        in_cart = sum(
            line.quantity for line in self.snapshot() if line.matches(item_id, ItemType.PRODUCT)
        )
        if product.stock < in_cart + quantity:
            raise InsufficientStock(product.name)

        return CartLine(
            id=item_id,
            type=ItemType.PRODUCT,
            name=product.name,
            price=product.price,
            quantity=quantity,
        )

    async def _service_line(
        self, item_id: int, quantity: int, size: Optional[SizeTier]
    ) -> CartLine:
        service = (await self.repo.fetch_services(self.db, [item_id])).get(item_id)
        if not service:
            raise ServiceNotFound(item_id)

        if size is None:
            size = service.first_priced_size()
            if size is None:
                raise NoValidSize(f"No valid sizes found for service {service.service_name}")

        price = service.price_for(size)
        if price is None:
            raise InvalidSize(f"Invalid size '{size.value}' for service {service.service_name}")

        return CartLine(
            id=item_id,
            type=ItemType.SERVICE,
            name=service.service_name,
            price=price,
            quantity=quantity,
            size=size,
        )

    def remove_one(self, data: RemoveOneRequest) -> Optional[CartLine]:
        """Remove one unit of a line; the line disappears at zero"""
        if data.id in (None, "") or not data.type:
            raise InvalidInput("Missing id or type")

        item_type = parse_item_type(data.type)
        size = parse_size(data.size) if item_type == ItemType.SERVICE else None
        remaining = self.store.remove_one(self.session_id, data.id, item_type, size)
        logger.info(f"➖ Removed one {data.type} {data.id} from cart for session {self.session_id}")
        return remaining
