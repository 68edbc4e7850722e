"""Catalog domain - products, services and service-linked products"""

from .router import products_router, services_router

__all__ = ["products_router", "services_router"]
