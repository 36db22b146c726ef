"""POS catalog models: shops and products."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from libs.common.currency import paise_to_rupees
from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from services.pos_service.models.enums import (
    ProductCategory,
    UnitOfMeasurement,
    enum_values,
)
from sqlalchemy import BigInteger, Boolean, CheckConstraint, DateTime
from sqlalchemy import Enum as SAEnum
from sqlalchemy import ForeignKey, Index, Integer, String, Text, Uuid, true
from sqlalchemy.orm import Mapped, mapped_column, relationship

# ============================================================================
# SHOP
# ============================================================================


class Shop(Base):
    """A retail shop. Its state decides intrastate vs interstate GST."""

    __tablename__ = "pos_shops"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    gstin: Mapped[Optional[str]] = mapped_column(String(15), nullable=True)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, server_default=true()
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now
    )

    products = relationship("Product", back_populates="shop")

    def __repr__(self):
        return f"<Shop {self.name} ({self.state})>"


# ============================================================================
# PRODUCT
# ============================================================================


class Product(Base):
    """Sellable product with its GST classification."""

    __tablename__ = "pos_products"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    shop_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("pos_shops.id", ondelete="CASCADE"), nullable=False
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    barcode: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    hsn_code: Mapped[str] = mapped_column(String(8), nullable=False)

    category: Mapped[ProductCategory] = mapped_column(
        SAEnum(
            ProductCategory,
            values_callable=enum_values,
            name="pos_product_category_enum",
        ),
        default=ProductCategory.OTHER,
    )
    unit_of_measurement: Mapped[UnitOfMeasurement] = mapped_column(
        SAEnum(
            UnitOfMeasurement,
            values_callable=enum_values,
            name="pos_unit_of_measurement_enum",
        ),
        default=UnitOfMeasurement.PIECE,
    )

    # Pricing (in paise)
    base_price_paise: Mapped[int] = mapped_column(BigInteger, nullable=False)
    selling_price_paise: Mapped[int] = mapped_column(BigInteger, nullable=False)
    gst_rate: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

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
        CheckConstraint("base_price_paise > 0", name="positive_base_price"),
        CheckConstraint("selling_price_paise > 0", name="positive_selling_price"),
        CheckConstraint("gst_rate IN (0, 5, 12, 18, 28)", name="legal_gst_rate"),
        Index("ix_pos_products_shop_id", "shop_id"),
    )

    shop = relationship("Shop", back_populates="products")
    inventory = relationship("Inventory", back_populates="product")

    @property
    def selling_price(self) -> Decimal:
        return paise_to_rupees(self.selling_price_paise)

    @property
    def base_price(self) -> Decimal:
        return paise_to_rupees(self.base_price_paise)

    def __repr__(self):
        return f"<Product {self.name} gst={self.gst_rate}%>"
