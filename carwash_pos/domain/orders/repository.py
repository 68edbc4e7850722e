"""Order repository - PostgREST operations on the sales project"""

from typing import Any, Optional

from ...config import ORDERS_TABLE
from ...exceptions import UpstreamUnavailable
from ...supabase import SupabaseClient, eq

ORDER_COLUMNS = (
    "order_id,order_date,reference_number,total_quantity,total_amount,"
    "items,item_details,payment_method,payment_proof"
)


class OrderRepository:
    """Repository for order rows"""

    @staticmethod
    async def insert_order(db: SupabaseClient, row: dict[str, Any]) -> dict[str, Any]:
        """Insert one order and return the stored row"""
        rows = await db.insert(ORDERS_TABLE, row)
        if not rows:
            raise UpstreamUnavailable("Order insert returned no row")
        return rows[0]

    @staticmethod
    async def list_orders(db: SupabaseClient) -> list[dict[str, Any]]:
        return await db.select(ORDERS_TABLE, columns=ORDER_COLUMNS, order="order_date.desc")

    @staticmethod
    async def get_order(db: SupabaseClient, order_id: Any) -> Optional[dict[str, Any]]:
        rows = await db.select(
            ORDERS_TABLE, columns=ORDER_COLUMNS, filters={"order_id": eq(order_id)}
        )
        return rows[0] if rows else None
