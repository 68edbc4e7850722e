"""Cart domain schemas - Pydantic models for validation"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from ..catalog.schemas import SizeTier


class ItemType(str, Enum):
    PRODUCT = "product"
    SERVICE = "service"


class CartLine(BaseModel):
    """One pending line; identity is (id, type, size)"""

    id: int
    type: ItemType
    name: str
    price: float
    quantity: int = Field(gt=0)
    size: Optional[SizeTier] = None

    def key(self) -> tuple[str, ItemType, Optional[SizeTier]]:
        return str(self.id), self.type, self.size

    def matches(self, item_id, item_type: ItemType, size: Optional[SizeTier] = None) -> bool:
        if str(self.id) != str(item_id) or self.type != item_type:
            return False
        if self.type == ItemType.PRODUCT:
            return True
        return size is None or self.size == size

    def describe(self) -> str:
        size = f" - {self.size.value}" if self.size else ""
        return f"{self.quantity}x {self.name} [{self.type.value}{size}]"


class AddToCartRequest(BaseModel):
    """Schema for adding a line to the cart"""

    id: Optional[Union[int, str]] = None
    type: Optional[str] = None
    quantity: Optional[int] = 1
    size: Optional[str] = None
    name: Optional[str] = None
    price: Optional[float] = None


class RemoveOneRequest(BaseModel):
    id: Optional[Union[int, str]] = None
    type: Optional[str] = None
    size: Optional[str] = None


class CartResponse(BaseModel):
    message: Optional[str] = None
    cart: list[str]
    items: list[CartLine]
