"""POS inventory models: stock per product/shop and the audit trail."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from libs.common.currency import paise_to_rupees
from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.pos_service.models.enums import InventoryAction, enum_values
from sqlalchemy import BigInteger, CheckConstraint, Date, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# INVENTORY MODELS
# ============================================================================


class Inventory(Base):
    """Stock held by a shop for one product."""

    __tablename__ = "pos_inventory"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("pos_products.id", ondelete="CASCADE"), nullable=False
    )
    shop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("pos_shops.id", ondelete="CASCADE"), nullable=False
    )

    # Stock levels
    quantity: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    min_stock_level: Mapped[int] = mapped_column(Integer, default=10, nullable=False)
    max_stock_level: Mapped[int] = mapped_column(Integer, default=1000, nullable=False)

    cost_price_paise: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    batch_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    expiry_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="non_negative_stock"),
        UniqueConstraint("product_id", "shop_id", name="uq_pos_inventory_product_shop"),
    )

    product = relationship("Product", back_populates="inventory")

    @property
    def cost_price(self) -> Decimal:
        return paise_to_rupees(self.cost_price_paise)

    @property
    def is_low_stock(self) -> bool:
        return self.quantity <= self.min_stock_level

    def __repr__(self):
        return f"<Inventory product={self.product_id} qty={self.quantity}>"


class InventoryAuditLog(Base):
    """Append-only record of every stock change."""

    __tablename__ = "pos_inventory_audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # Kept after the stock row is deleted; product_id and shop_id still identify it
    inventory_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid, ForeignKey("pos_inventory.id", ondelete="SET NULL"), nullable=True
    )
    product_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    shop_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    action: Mapped[InventoryAction] = mapped_column(
        SAEnum(
            InventoryAction,
            values_callable=enum_values,
            name="pos_inventory_action_enum",
        ),
        nullable=False,
    )
    quantity_delta: Mapped[int] = mapped_column(
        Integer, nullable=False
    )  # Positive = add, negative = subtract
    old_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    new_quantity: Mapped[int] = mapped_column(Integer, nullable=False)

    reference_type: Mapped[Optional[str]] = mapped_column(
        String(30), nullable=True
    )  # order, manual
    reference_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    performed_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    __table_args__ = (
        Index("ix_pos_inventory_audit_logs_inventory", "inventory_id"),
        Index("ix_pos_inventory_audit_logs_shop", "shop_id", "created_at"),
    )

    def __repr__(self):
        return f"<InventoryAuditLog {self.action} {self.old_quantity}->{self.new_quantity}>"
