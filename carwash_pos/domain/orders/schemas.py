"""Order domain schemas"""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel


class OrderItemDetail(BaseModel):
    """Snapshot of one cart line as it was sold"""

    id: int
    type: str
    name: str
    price: float
    quantity: int
    size: Optional[str] = None


class OrderResponse(BaseModel):
    order_id: Union[int, str]
    order_date: Optional[datetime] = None
    reference_number: Optional[str] = None
    total_quantity: int
    total_amount: float
    items: Optional[str] = None
    item_details: Optional[Any] = None
    payment_method: Optional[str] = None
    payment_proof: Optional[str] = None
