"""POS commerce models: customers, orders and order items."""

import random
import string
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.currency import paise_to_rupees
from libs.common.datetime_utils import compact_timestamp, utc_now
from libs.db.base import Base
from services.pos_service.models.enums import (
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    enum_values,
)
from sqlalchemy import BigInteger, Boolean, CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid, false, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# CUSTOMER
# ============================================================================


class Customer(Base):
    """Shop customer with loyalty balance."""

    __tablename__ = "pos_customers"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    shop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("pos_shops.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(15), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Only order creation/cancellation moves these
    loyalty_points: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    total_spent_paise: Mapped[int] = mapped_column(
        BigInteger, default=0, server_default="0", nullable=False
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=true()
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        CheckConstraint("loyalty_points >= 0", name="non_negative_loyalty_points"),
        CheckConstraint("total_spent_paise >= 0", name="non_negative_total_spent"),
        Index("ix_pos_customers_shop_phone", "shop_id", "phone"),
    )

    orders = relationship("Order", back_populates="customer")

    @property
    def total_spent(self) -> Decimal:
        return paise_to_rupees(self.total_spent_paise)

    def __repr__(self):
        return f"<Customer {self.name} points={self.loyalty_points}>"


# ============================================================================
# ORDER MODELS
# ============================================================================


class Order(Base):
    """A sale at a shop counter (or for delivery)."""

    __tablename__ = "pos_orders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_number: Mapped[str] = mapped_column(
        String(40), unique=True, nullable=False, index=True
    )
    shop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("pos_shops.id", ondelete="CASCADE"), nullable=False
    )
    cashier_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    # Customer
    customer_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("pos_customers.id", ondelete="SET NULL"), nullable=True
    )
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[Optional[str]] = mapped_column(String(15), nullable=True)

    # Pricing (in paise)
    subtotal_paise: Mapped[int] = mapped_column(BigInteger, nullable=False)
    discount_amount_paise: Mapped[int] = mapped_column(
        BigInteger, default=0, server_default="0", nullable=False
    )
    tax_amount_paise: Mapped[int] = mapped_column(BigInteger, nullable=False)
    cgst_amount_paise: Mapped[int] = mapped_column(
        BigInteger, default=0, server_default="0", nullable=False
    )
    sgst_amount_paise: Mapped[int] = mapped_column(
        BigInteger, default=0, server_default="0", nullable=False
    )
    igst_amount_paise: Mapped[int] = mapped_column(
        BigInteger, default=0, server_default="0", nullable=False
    )
    total_amount_paise: Mapped[int] = mapped_column(BigInteger, nullable=False)

    # Points credited to the customer when the order was placed
    loyalty_points_awarded: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )

    # State the goods are supplied to; equals the shop state for counter sales
    place_of_supply: Mapped[str] = mapped_column(String(100), nullable=False)

    status: Mapped[OrderStatus] = mapped_column(
        SAEnum(
            OrderStatus,
            values_callable=enum_values,
            name="pos_order_status_enum",
        ),
        default=OrderStatus.PENDING,
        nullable=False,
    )
    payment_method: Mapped[PaymentMethod] = mapped_column(
        SAEnum(
            PaymentMethod,
            values_callable=enum_values,
            name="pos_payment_method_enum",
        ),
        nullable=False,
    )
    payment_status: Mapped[PaymentStatus] = mapped_column(
        SAEnum(
            PaymentStatus,
            values_callable=enum_values,
            name="pos_payment_status_enum",
        ),
        default=PaymentStatus.PENDING,
        nullable=False,
    )

    # Delivery
    is_delivery: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false()
    )
    delivery_address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Timestamps
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        CheckConstraint("subtotal_paise >= 0", name="non_negative_subtotal"),
        CheckConstraint("discount_amount_paise >= 0", name="non_negative_discount"),
        CheckConstraint("total_amount_paise >= 0", name="non_negative_total"),
        Index("ix_pos_orders_shop_created", "shop_id", "created_at"),
        Index("ix_pos_orders_shop_status", "shop_id", "status"),
    )

    # Relationships
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.line_number",
    )
    customer = relationship("Customer", back_populates="orders")

    @staticmethod
    def generate_order_number(prefix: str = "ORD") -> str:
        """Generate an order number like ORD-20261019101500-A1B2C."""
        random_part = "".join(
            random.choices(string.ascii_uppercase + string.digits, k=5)
        )
        return f"{prefix}-{compact_timestamp()}-{random_part}"

    @property
    def subtotal(self) -> Decimal:
        return paise_to_rupees(self.subtotal_paise)

    @property
    def discount_amount(self) -> Decimal:
        return paise_to_rupees(self.discount_amount_paise)

    @property
    def tax_amount(self) -> Decimal:
        return paise_to_rupees(self.tax_amount_paise)

    @property
    def cgst_amount(self) -> Decimal:
        return paise_to_rupees(self.cgst_amount_paise)

    @property
    def sgst_amount(self) -> Decimal:
        return paise_to_rupees(self.sgst_amount_paise)

    @property
    def igst_amount(self) -> Decimal:
        return paise_to_rupees(self.igst_amount_paise)

    @property
    def total_amount(self) -> Decimal:
        return paise_to_rupees(self.total_amount_paise)

    def __repr__(self):
        return f"<Order {self.order_number} status={self.status}>"


class OrderItem(Base):
    """Order line items (snapshot at order time)."""

    __tablename__ = "pos_order_items"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("pos_orders.id", ondelete="CASCADE"), nullable=False
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("pos_products.id"), nullable=False
    )
    line_number: Mapped[int] = mapped_column(Integer, nullable=False)

    # Snapshot at order time (products may change)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    hsn_code: Mapped[str] = mapped_column(String(8), nullable=False)
    gst_rate: Mapped[int] = mapped_column(Integer, nullable=False)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price_paise: Mapped[int] = mapped_column(BigInteger, nullable=False)
    discount_amount_paise: Mapped[int] = mapped_column(
        BigInteger, default=0, server_default="0", nullable=False
    )
    tax_amount_paise: Mapped[int] = mapped_column(BigInteger, nullable=False)
    total_price_paise: Mapped[int] = mapped_column(BigInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="positive_quantity"),
        CheckConstraint("discount_amount_paise >= 0", name="non_negative_item_discount"),
        Index("ix_pos_order_items_order_line", "order_id", "line_number", unique=True),
    )

    # Relationships
    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    @property
    def unit_price(self) -> Decimal:
        return paise_to_rupees(self.unit_price_paise)

    @property
    def discount_amount(self) -> Decimal:
        return paise_to_rupees(self.discount_amount_paise)

    @property
    def tax_amount(self) -> Decimal:
        return paise_to_rupees(self.tax_amount_paise)

    @property
    def total_price(self) -> Decimal:
        return paise_to_rupees(self.total_price_paise)

    def __repr__(self):
        return f"<OrderItem {self.product_name} qty={self.quantity}>"
