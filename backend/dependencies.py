from functools import lru_cache

from config import settings
from repositories.catalog_repository import (
    CatalogRepository,
    InMemoryCatalogRepository,
    SupabaseCatalogRepository,
)
from repositories.order_repository import (
    InMemoryOrderRepository,
    OrderRepository,
    SupabaseOrderRepository,
)
from services.orders_service import OrderService


@lru_cache(maxsize=1)
def get_order_repository() -> OrderRepository:
    if settings.storage_backend == "supabase":
        return SupabaseOrderRepository()
    return InMemoryOrderRepository()


@lru_cache(maxsize=1)
def get_catalog_repository() -> CatalogRepository:
    if settings.storage_backend == "supabase":
        return SupabaseCatalogRepository()
    return InMemoryCatalogRepository()


@lru_cache(maxsize=1)
def get_order_service() -> OrderService:
    return OrderService(get_order_repository())
