"""Pydantic schemas for the POS service.

Money crosses the API in rupees (``Decimal``); the core works in paise.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from libs.common.currency import paise_to_rupees, rupees_to_paise
from pydantic import BaseModel, ConfigDict, Field, computed_field
from services.pos_service import loyalty
from services.pos_service.models import (
    LoyaltyTier,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    ProductCategory,
    TaxKind,
)

# ============================================================================
# ORDER SCHEMAS
# ============================================================================


class OrderItemCreate(BaseModel):
    product_id: uuid.UUID
    quantity: int = Field(..., ge=1)
    # Defaults to the product's selling price
    unit_price: Optional[Decimal] = Field(None, gt=0, decimal_places=2)
    discount_amount: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)


class OrderCreate(BaseModel):
    """A cart submitted at the counter."""

    customer_id: Optional[uuid.UUID] = None
    customer_name: Optional[str] = Field(None, max_length=255)
    customer_phone: Optional[str] = Field(None, max_length=15)
    items: list[OrderItemCreate] = Field(..., min_length=1)
    payment_method: PaymentMethod
    discount_amount: Decimal = Field(Decimal("0"), ge=0, decimal_places=2)
    place_of_supply: Optional[str] = Field(None, max_length=100)
    is_delivery: bool = False
    delivery_address: Optional[str] = None
    notes: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderCancelRequest(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    line_number: int
    product_name: str
    hsn_code: str
    gst_rate: int
    quantity: int
    unit_price: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    total_price: Decimal


class CustomerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    phone: str
    loyalty_points: int
    total_spent: Decimal

    @computed_field
    @property
    def tier(self) -> LoyaltyTier:
        return loyalty.calculate_tier(rupees_to_paise(self.total_spent))

    @computed_field
    @property
    def tier_multiplier(self) -> float:
        return loyalty.tier_multiplier(self.tier)

    @computed_field
    @property
    def spend_to_next_tier(self) -> Decimal:
        return paise_to_rupees(
            loyalty.spend_to_next_tier(rupees_to_paise(self.total_spent))
        )


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    order_number: str
    shop_id: uuid.UUID
    cashier_id: Optional[str]
    status: OrderStatus
    payment_method: PaymentMethod
    payment_status: PaymentStatus

    customer_id: Optional[uuid.UUID]
    customer_name: str
    customer_phone: Optional[str]

    subtotal: Decimal
    discount_amount: Decimal
    tax_amount: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    igst_amount: Decimal
    total_amount: Decimal
    loyalty_points_awarded: int
    place_of_supply: str

    is_delivery: bool
    delivery_address: Optional[str]
    notes: Optional[str]

    completed_at: Optional[datetime]
    cancelled_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    items: list[OrderItemResponse] = []
    customer: Optional[CustomerSummary] = None


class OrderListResponse(BaseModel):
    """Paginated order list."""

    items: list[OrderResponse]
    total: int
    page: int
    page_size: int


# ============================================================================
# INVENTORY SCHEMAS
# ============================================================================


class InventoryAdjustment(BaseModel):
    """Restock or correct stock for one product."""

    product_id: uuid.UUID
    delta_quantity: int = Field(..., description="Positive to add, negative to subtract")
    cost_price: Optional[Decimal] = Field(None, ge=0, decimal_places=2)
    notes: Optional[str] = None


class InventoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    shop_id: uuid.UUID
    quantity: int
    min_stock_level: int
    max_stock_level: int
    cost_price: Decimal
    batch_number: Optional[str]
    expiry_date: Optional[date]
    last_updated: datetime
    is_low_stock: bool


class ProductSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    barcode: Optional[str]
    selling_price: Decimal
    category: ProductCategory


class InventoryWithProduct(InventoryResponse):
    product: ProductSummary


class InventoryListResponse(BaseModel):
    """Paginated stock list."""

    items: list[InventoryWithProduct]
    total: int
    page: int
    page_size: int


# ============================================================================
# TAX SCHEMAS
# ============================================================================


class TaxCalculationRequest(BaseModel):
    """Either both states, or both GSTINs for a registered (B2B) supply."""

    amount: Decimal = Field(..., ge=0, decimal_places=2)
    gst_rate: int
    source_state: Optional[str] = Field(None, min_length=1, max_length=100)
    target_state: Optional[str] = Field(None, min_length=1, max_length=100)
    seller_gstin: Optional[str] = None
    buyer_gstin: Optional[str] = None
    hsn_code: Optional[str] = None


class TaxLineResponse(BaseModel):
    kind: TaxKind
    rate: Decimal
    amount: Decimal


class TaxCalculationResponse(BaseModel):
    taxable_amount: Decimal
    source_state: Optional[str] = None
    target_state: Optional[str] = None
    is_intrastate: bool
    tax_lines: list[TaxLineResponse]
    total_tax: Decimal
    total_amount: Decimal
