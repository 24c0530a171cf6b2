from .catalog import router as catalog_router
from .orders import router as orders_router
from .shipping import router as shipping_router

__all__ = [
    "catalog_router",
    "orders_router",
    "shipping_router",
]
