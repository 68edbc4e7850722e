"""Checkout domain schemas"""

from typing import Any, Optional, Union

from pydantic import BaseModel


class CheckoutItem(BaseModel):
    """A line sent directly in the checkout body instead of using the cart"""

    id: Optional[Union[int, str]] = None
    type: Optional[str] = None
    quantity: Optional[int] = 1
    size: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = None


class CheckoutRequest(BaseModel):
    items: Optional[list[CheckoutItem]] = None
    payment_method: Optional[str] = None
    payment_proof: Optional[str] = None
    reference_number: Optional[str] = None


class CheckoutResponse(BaseModel):
    message: str
    order: dict[str, Any]
