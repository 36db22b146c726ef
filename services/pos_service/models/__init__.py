"""POS Service models package."""

from services.pos_service.models.catalog import Product, Shop
from services.pos_service.models.commerce import Customer, Order, OrderItem
from services.pos_service.models.enums import (
    TERMINAL_ORDER_STATUSES,
    GSTRate,
    InventoryAction,
    LoyaltyTier,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ProductCategory,
    TaxKind,
    UnitOfMeasurement,
)
from services.pos_service.models.inventory import Inventory, InventoryAuditLog

__all__ = [
    "Customer",
    "GSTRate",
    "Inventory",
    "InventoryAction",
    "InventoryAuditLog",
    "LoyaltyTier",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "Product",
    "ProductCategory",
    "Shop",
    "TERMINAL_ORDER_STATUSES",
    "TaxKind",
    "UnitOfMeasurement",
]
