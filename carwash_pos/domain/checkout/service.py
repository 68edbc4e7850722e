"""Checkout service - turns a cart into a persisted order"""

import logging
from typing import Any, Optional

from ...exceptions import InvalidInput
from ...storage import BlobStore
from ...supabase import SupabaseClient
from ..cart.schemas import CartLine, ItemType
from ..cart.service import parse_item_id, parse_item_type, parse_size
from ..cart.store import CartStore
from ..orders.schemas import OrderItemDetail
from ..orders.service import OrderWriter
from .payment_proof import PaymentProofUploader, parse_payment_proof
from .schemas import CheckoutItem, CheckoutRequest
from .stock import StockDeductor, StockPlan, StockValidator

logger = logging.getLogger(__name__)


def line_from_item(item: CheckoutItem) -> CartLine:
    """Normalize a body item; names and prices are re-read from the catalog"""
    if item.id in (None, "") or not item.type:
        raise InvalidInput("Missing id or type")
    quantity = 1 if item.quantity is None else item.quantity
    if quantity <= 0:
        raise InvalidInput("Quantity must be a positive integer")

    item_type = parse_item_type(item.type)
    item_id = parse_item_id(item.id)
    return CartLine(
        id=item_id,
        type=item_type,
        name=item.name or f"{item_type.value} {item_id}",
        price=item.price or 0.0,
        quantity=quantity,
        size=parse_size(item.size) if item_type == ItemType.SERVICE else None,
    )


def order_items(lines: list[CartLine], plan: StockPlan) -> list[OrderItemDetail]:
    return [
        OrderItemDetail(
            id=line.id,
            type=line.type.value,
            name=plan.display_name(line),
            price=plan.unit_price(line),
            quantity=line.quantity,
            size=line.size.value if line.size else None,
        )
        for line in lines
    ]


class CheckoutService:
    """
    Checkout orchestration.

    Order of steps: read lines, parse payment proof, validate stock for the
    whole order, deduct stock, upload the proof, insert the order, clear the
    session cart. Nothing is written before validation has passed.
    """

    def __init__(
        self,
        inventory_db: SupabaseClient,
        sales_db: SupabaseClient,
        cart_store: CartStore,
        blob_store: BlobStore,
        session_id: str,
    ):
        self.inventory_db = inventory_db
        self.sales_db = sales_db
        self.cart_store = cart_store
        self.session_id = session_id
        self.validator = StockValidator(inventory_db)
        self.deductor = StockDeductor(inventory_db)
        self.uploader = PaymentProofUploader(blob_store)
        self.writer = OrderWriter(sales_db)

    def _lines(self, items: Optional[list[CheckoutItem]]) -> list[CartLine]:
        if items:
            return [line_from_item(item) for item in items]
        lines = self.cart_store.snapshot(self.session_id)
        if not lines:
            raise InvalidInput("Cart is empty")
        return lines

    async def checkout(self, data: CheckoutRequest) -> dict[str, Any]:
        lines = self._lines(data.items)
        proof = parse_payment_proof(data.payment_proof)

        logger.info(f"💳 Checkout started for session {self.session_id} ({len(lines)} line(s))")

        plan = await self.validator.validate(lines)
        await self.deductor.apply(plan)

        proof_url = await self.uploader.upload(proof)
        order = await self.writer.write(
            order_items(lines, plan),
            payment_method=data.payment_method,
            payment_proof_url=proof_url,
            reference_number=data.reference_number,
        )

        self.cart_store.clear(self.session_id)
        logger.info(f"🎉 Checkout completed for session {self.session_id}")
        return order
