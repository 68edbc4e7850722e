"""Catalog router - read-only product and service endpoints"""

from fastapi import APIRouter, Depends

from ...database import get_inventory_db
from ...supabase import SupabaseClient
from .schemas import ProductResponse, ServiceResponse
from .service import CatalogService

products_router = APIRouter(prefix="/products", tags=["Products"])
services_router = APIRouter(prefix="/services", tags=["Services"])


def get_catalog_service(db: SupabaseClient = Depends(get_inventory_db)) -> CatalogService:
    """Dependency injection for CatalogService"""
    return CatalogService(db)


@products_router.get("", response_model=list[ProductResponse])
async def list_products(service: CatalogService = Depends(get_catalog_service)):
    """List retail products"""
    return await service.list_products()


@products_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, service: CatalogService = Depends(get_catalog_service)):
    return await service.get_product(product_id)


@services_router.get("")
async def list_services(service: CatalogService = Depends(get_catalog_service)):
    """List services, flagging the ones that cannot currently be performed"""
    services = await service.list_services()
    return {"services": [s.model_dump() for s in services]}


@services_router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(service_id: int, service: CatalogService = Depends(get_catalog_service)):
    return await service.get_service(service_id)
