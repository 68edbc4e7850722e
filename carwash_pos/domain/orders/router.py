"""Order router - read access to placed orders"""

from fastapi import APIRouter, Depends

from ...database import get_sales_db
from ...supabase import SupabaseClient
from .schemas import OrderResponse
from .service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])


def get_order_service(db: SupabaseClient = Depends(get_sales_db)) -> OrderService:
    """Dependency injection for OrderService"""
    return OrderService(db)


@router.get("", response_model=list[OrderResponse])
async def list_orders(service: OrderService = Depends(get_order_service)):
    """All orders, newest first"""
    return await service.list_orders()


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, service: OrderService = Depends(get_order_service)):
    return await service.get_order(order_id)
