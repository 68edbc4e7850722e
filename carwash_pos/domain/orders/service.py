"""Order service - order totals, persistence and read access"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from ...exceptions import OrderNotFound
from ...supabase import SupabaseClient
from .repository import OrderRepository
from .schemas import OrderItemDetail

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_METHOD = "cash"
CURRENCY_SYMBOL = "₱"


def _format_price(price: float) -> str:
    return str(int(price)) if float(price).is_integer() else f"{price:.2f}"


def summarize_items(items: list[OrderItemDetail]) -> str:
    """Text summary stored in the orders.items column, one line per item"""
    lines = []
    for item in items:
        price = f"{CURRENCY_SYMBOL}{_format_price(item.price)}"
        if item.type == "product":
            lines.append(f"Product: {item.name} x{item.quantity} @ {price}")
        else:
            lines.append(f"Service: {item.name} ({item.size}) x{item.quantity} @ {price}")
    return "\n".join(lines)


def order_totals(items: list[OrderItemDetail]) -> tuple[float, int]:
    """(total_amount, total_quantity)"""
    total_amount = round(sum(item.price * item.quantity for item in items), 2)
    total_quantity = sum(item.quantity for item in items)
    return total_amount, total_quantity


class OrderWriter:
    """Builds and inserts the final order row"""

    def __init__(self, db: SupabaseClient):
        self.db = db
        self.repo = OrderRepository()

    def build_row(
        self,
        items: list[OrderItemDetail],
        payment_method: Optional[str] = None,
        payment_proof_url: Optional[str] = None,
        reference_number: Optional[str] = None,
    ) -> dict[str, Any]:
        total_amount, total_quantity = order_totals(items)
        return {
            "reference_number": reference_number,
            "order_date": datetime.now(timezone.utc).isoformat(),
            "total_quantity": total_quantity,
            "total_amount": total_amount,
            "items": summarize_items(items),
            "item_details": [item.model_dump() for item in items],
            "payment_method": payment_method or DEFAULT_PAYMENT_METHOD,
            "payment_proof": payment_proof_url,
        }

    async def write(
        self,
        items: list[OrderItemDetail],
        payment_method: Optional[str] = None,
        payment_proof_url: Optional[str] = None,
        reference_number: Optional[str] = None,
    ) -> dict[str, Any]:
        row = self.build_row(items, payment_method, payment_proof_url, reference_number)
        order = await self.repo.insert_order(self.db, row)
        logger.info(
            f"🧾 Order {order.get('order_id')} saved: {row['total_quantity']} item(s), "
            f"total {row['total_amount']}"
        )
        return order


class OrderService:
    def __init__(self, db: SupabaseClient):
        self.db = db
        self.repo = OrderRepository()

    async def list_orders(self) -> list[dict[str, Any]]:
        return await self.repo.list_orders(self.db)

    async def get_order(self, order_id: int) -> dict[str, Any]:
        order = await self.repo.get_order(self.db, order_id)
        if not order:
            raise OrderNotFound(order_id)
        return order
