"""Catalog domain schemas - products, services and their size tiers"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SizeTier(str, Enum):
    """Vehicle size used for service pricing and linked-product selection"""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    XLARGE = "xlarge"
    XXLARGE = "xxlarge"

    @property
    def variant_id(self) -> int:
        return _VARIANT_IDS[self]

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["SizeTier"]:
        """Return the tier for a size name, or None if it is not one"""
        if value is None:
            return None
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


_VARIANT_IDS = {tier: index for index, tier in enumerate(SizeTier, start=1)}


class Product(BaseModel):
    product_id: int
    name: str
    price: float = 0.0
    stock: int = 0
    category_id: Optional[int] = None


class Service(BaseModel):
    service_id: int
    service_name: str
    small: Optional[float] = None
    medium: Optional[float] = None
    large: Optional[float] = None
    xlarge: Optional[float] = None
    xxlarge: Optional[float] = None

    @property
    def pricing(self) -> dict[SizeTier, float]:
        """Priced tiers only, in tier order"""
        return {
            tier: getattr(self, tier.value)
            for tier in SizeTier
            if getattr(self, tier.value) is not None
        }

    def price_for(self, size: Optional[SizeTier]) -> Optional[float]:
        if size is None:
            return None
        return self.pricing.get(size)

    def first_priced_size(self) -> Optional[SizeTier]:
        return next(iter(self.pricing), None)


class ServiceProductLink(BaseModel):
    """A product consumed when a service is performed on a given size"""

    service_id: Optional[int] = None
    product_id: int
    quantity: int
    variant_id: int


class ProductResponse(BaseModel):
    product_id: int
    name: str
    price: float
    stock: int
    category_id: Optional[int] = None


class ServiceResponse(BaseModel):
    """Service row as stored, plus the derived category name and availability"""

    model_config = ConfigDict(extra="allow")

    service_id: int
    service_name: str
    small: Optional[float] = None
    medium: Optional[float] = None
    large: Optional[float] = None
    xlarge: Optional[float] = None
    xxlarge: Optional[float] = None
    category_name: Optional[str] = None
    active: bool = True
