"""Enum definitions for POS service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class GSTRate(enum.IntEnum):
    """Legal GST slabs, in percent."""

    ZERO = 0
    FIVE = 5
    TWELVE = 12
    EIGHTEEN = 18
    TWENTY_EIGHT = 28


class TaxKind(str, enum.Enum):
    CGST = "CGST"
    SGST = "SGST"
    IGST = "IGST"
    CESS = "CESS"


class ProductCategory(str, enum.Enum):
    GROCERIES = "groceries"
    DAIRY = "dairy"
    VEGETABLES = "vegetables"
    FRUITS = "fruits"
    BEVERAGES = "beverages"
    SNACKS = "snacks"
    PERSONAL_CARE = "personal_care"
    HOUSEHOLD = "household"
    OTHER = "other"


class UnitOfMeasurement(str, enum.Enum):
    KG = "kg"
    GRAM = "gram"
    LITER = "liter"
    ML = "ml"
    PIECE = "piece"
    PACK = "pack"
    BOX = "box"


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


TERMINAL_ORDER_STATUSES = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}
)


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    UPI = "upi"
    CARD = "card"
    WALLET = "wallet"
    SPLIT = "split"


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"
    REFUNDED = "refunded"


class InventoryAction(str, enum.Enum):
    INVENTORY_ADD = "inventory_add"
    INVENTORY_SUBTRACT = "inventory_subtract"
    SALE = "sale"
    RETURN = "return"


class LoyaltyTier(str, enum.Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
