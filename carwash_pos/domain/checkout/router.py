"""Checkout router"""

from fastapi import APIRouter, Depends

from ...database import get_inventory_db, get_sales_db
from ...storage import BlobStore, get_blob_store
from ...supabase import SupabaseClient
from ..cart.router import get_session_id
from ..cart.store import CartStore, get_cart_store
from .schemas import CheckoutRequest, CheckoutResponse
from .service import CheckoutService

router = APIRouter(prefix="/checkout", tags=["Checkout"])


def get_checkout_service(
    session_id: str = Depends(get_session_id),
    inventory_db: SupabaseClient = Depends(get_inventory_db),
    sales_db: SupabaseClient = Depends(get_sales_db),
    cart_store: CartStore = Depends(get_cart_store),
    blob_store: BlobStore = Depends(get_blob_store),
) -> CheckoutService:
    """Dependency injection for CheckoutService"""
    return CheckoutService(inventory_db, sales_db, cart_store, blob_store, session_id)


@router.post("", response_model=CheckoutResponse)
async def checkout(data: CheckoutRequest, service: CheckoutService = Depends(get_checkout_service)):
    """Place an order from the session cart (or from the items in the body)"""
    order = await service.checkout(data)
    return CheckoutResponse(message="Order submitted successfully", order=order)
