"""Cart router - FastAPI endpoints for the pending order"""

from fastapi import APIRouter, Depends, Header

from ...config import DEFAULT_SESSION_ID
from ...database import get_inventory_db
from ...supabase import SupabaseClient
from .schemas import AddToCartRequest, CartResponse, RemoveOneRequest
from .service import CartService
from .store import CartStore, get_cart_store

router = APIRouter(prefix="/cart", tags=["Cart"])


def get_session_id(x_session_id: str = Header(DEFAULT_SESSION_ID)) -> str:
    """Cart session, taken from the X-Session-Id header"""
    return x_session_id.strip() or DEFAULT_SESSION_ID


def get_cart_service(
    session_id: str = Depends(get_session_id),
    store: CartStore = Depends(get_cart_store),
    db: SupabaseClient = Depends(get_inventory_db),
) -> CartService:
    """Dependency injection for CartService"""
    return CartService(store, db, session_id)


def _cart_response(service: CartService, message=None) -> CartResponse:
    items = service.snapshot()
    return CartResponse(message=message, cart=[line.describe() for line in items], items=items)


@router.get("", response_model=CartResponse)
async def get_cart(service: CartService = Depends(get_cart_service)):
    return _cart_response(service)


@router.post("/addtocart", response_model=CartResponse)
async def add_to_cart(data: AddToCartRequest, service: CartService = Depends(get_cart_service)):
    """Add a product or service to the cart"""
    await service.add(data)
    return _cart_response(service, "Item added to cart")


@router.post("/remove-one", response_model=CartResponse)
async def remove_one(data: RemoveOneRequest, service: CartService = Depends(get_cart_service)):
    service.remove_one(data)
    return _cart_response(service, "One item removed")


@router.post("/clear", response_model=CartResponse)
async def clear_cart(service: CartService = Depends(get_cart_service)):
    service.clear()
    return _cart_response(service, "Cart cleared")
