"""POS service routers package."""

from services.pos_service.routers.inventory import router as inventory_router
from services.pos_service.routers.orders import router as orders_router
from services.pos_service.routers.tax import router as tax_router

__all__ = [
    "inventory_router",
    "orders_router",
    "tax_router",
]
