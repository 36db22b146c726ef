"""create_pos_tables

Revision ID: 3f9c2a71d0b4
Revises:
Create Date: 2026-10-19 09:30:00.000000
"""

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = "3f9c2a71d0b4"
down_revision = None
branch_labels = None
depends_on = None


PRODUCT_CATEGORY = sa.Enum(
    "groceries",
    "dairy",
    "vegetables",
    "fruits",
    "beverages",
    "snacks",
    "personal_care",
    "household",
    "other",
    name="pos_product_category_enum",
)
UNIT_OF_MEASUREMENT = sa.Enum(
    "kg", "gram", "liter", "ml", "piece", "pack", "box",
    name="pos_unit_of_measurement_enum",
)
INVENTORY_ACTION = sa.Enum(
    "inventory_add", "inventory_subtract", "sale", "return",
    name="pos_inventory_action_enum",
)
ORDER_STATUS = sa.Enum(
    "pending", "processing", "completed", "cancelled", "refunded",
    name="pos_order_status_enum",
)
PAYMENT_METHOD = sa.Enum(
    "cash", "upi", "card", "wallet", "split",
    name="pos_payment_method_enum",
)
PAYMENT_STATUS = sa.Enum(
    "pending", "processing", "success", "failed", "refunded",
    name="pos_payment_status_enum",
)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "pos_shops",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("gstin", sa.String(15), nullable=True),
        sa.Column("state", sa.String(100), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "pos_products",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "shop_id",
            sa.Uuid(),
            sa.ForeignKey("pos_shops.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("barcode", sa.String(64), nullable=True),
        sa.Column("hsn_code", sa.String(8), nullable=False),
        sa.Column("category", PRODUCT_CATEGORY, nullable=True),
        sa.Column("unit_of_measurement", UNIT_OF_MEASUREMENT, nullable=True),
        sa.Column("base_price_paise", sa.BigInteger(), nullable=False),
        sa.Column("selling_price_paise", sa.BigInteger(), nullable=False),
        sa.Column("gst_rate", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("base_price_paise > 0", name="positive_base_price"),
        sa.CheckConstraint("selling_price_paise > 0", name="positive_selling_price"),
        sa.CheckConstraint("gst_rate IN (0, 5, 12, 18, 28)", name="legal_gst_rate"),
    )
    op.create_index("ix_pos_products_shop_id", "pos_products", ["shop_id"])

    op.create_table(
        "pos_inventory",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "product_id",
            sa.Uuid(),
            sa.ForeignKey("pos_products.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "shop_id",
            sa.Uuid(),
            sa.ForeignKey("pos_shops.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("quantity", sa.Integer(), server_default="0", nullable=False),
        sa.Column("min_stock_level", sa.Integer(), nullable=False),
        sa.Column("max_stock_level", sa.Integer(), nullable=False),
        sa.Column("cost_price_paise", sa.BigInteger(), nullable=False),
        sa.Column("batch_number", sa.String(64), nullable=True),
        sa.Column("expiry_date", sa.Date(), nullable=True),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("quantity >= 0", name="non_negative_stock"),
        sa.UniqueConstraint(
            "product_id", "shop_id", name="uq_pos_inventory_product_shop"
        ),
    )

    op.create_table(
        "pos_inventory_audit_logs",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "inventory_id",
            sa.Uuid(),
            sa.ForeignKey("pos_inventory.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("product_id", sa.Uuid(), nullable=False),
        sa.Column("shop_id", sa.Uuid(), nullable=False),
        sa.Column("action", INVENTORY_ACTION, nullable=False),
        sa.Column("quantity_delta", sa.Integer(), nullable=False),
        sa.Column("old_quantity", sa.Integer(), nullable=False),
        sa.Column("new_quantity", sa.Integer(), nullable=False),
        sa.Column("reference_type", sa.String(30), nullable=True),
        sa.Column("reference_id", sa.Uuid(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("performed_by", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index(
        "ix_pos_inventory_audit_logs_inventory",
        "pos_inventory_audit_logs",
        ["inventory_id"],
    )
    op.create_index(
        "ix_pos_inventory_audit_logs_shop",
        "pos_inventory_audit_logs",
        ["shop_id", "created_at"],
    )

    op.create_table(
        "pos_customers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "shop_id",
            sa.Uuid(),
            sa.ForeignKey("pos_shops.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(15), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("loyalty_points", sa.Integer(), server_default="0", nullable=False),
        sa.Column(
            "total_spent_paise", sa.BigInteger(), server_default="0", nullable=False
        ),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("loyalty_points >= 0", name="non_negative_loyalty_points"),
        sa.CheckConstraint("total_spent_paise >= 0", name="non_negative_total_spent"),
    )
    op.create_index(
        "ix_pos_customers_shop_phone", "pos_customers", ["shop_id", "phone"]
    )

    op.create_table(
        "pos_orders",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("order_number", sa.String(40), nullable=False),
        sa.Column(
            "shop_id",
            sa.Uuid(),
            sa.ForeignKey("pos_shops.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("cashier_id", sa.String(255), nullable=True),
        sa.Column(
            "customer_id",
            sa.Uuid(),
            sa.ForeignKey("pos_customers.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("customer_name", sa.String(255), nullable=False),
        sa.Column("customer_phone", sa.String(15), nullable=True),
        sa.Column("subtotal_paise", sa.BigInteger(), nullable=False),
        sa.Column(
            "discount_amount_paise", sa.BigInteger(), server_default="0", nullable=False
        ),
        sa.Column("tax_amount_paise", sa.BigInteger(), nullable=False),
        sa.Column(
            "cgst_amount_paise", sa.BigInteger(), server_default="0", nullable=False
        ),
        sa.Column(
            "sgst_amount_paise", sa.BigInteger(), server_default="0", nullable=False
        ),
        sa.Column(
            "igst_amount_paise", sa.BigInteger(), server_default="0", nullable=False
        ),
        sa.Column("total_amount_paise", sa.BigInteger(), nullable=False),
        sa.Column(
            "loyalty_points_awarded", sa.Integer(), server_default="0", nullable=False
        ),
        sa.Column("place_of_supply", sa.String(100), nullable=False),
        sa.Column("status", ORDER_STATUS, nullable=False),
        sa.Column("payment_method", PAYMENT_METHOD, nullable=False),
        sa.Column("payment_status", PAYMENT_STATUS, nullable=False),
        sa.Column(
            "is_delivery", sa.Boolean(), server_default=sa.false(), nullable=True
        ),
        sa.Column("delivery_address", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("subtotal_paise >= 0", name="non_negative_subtotal"),
        sa.CheckConstraint("discount_amount_paise >= 0", name="non_negative_discount"),
        sa.CheckConstraint("total_amount_paise >= 0", name="non_negative_total"),
    )
    op.create_index(
        "ix_pos_orders_order_number", "pos_orders", ["order_number"], unique=True
    )
    op.create_index(
        "ix_pos_orders_shop_created", "pos_orders", ["shop_id", "created_at"]
    )
    op.create_index("ix_pos_orders_shop_status", "pos_orders", ["shop_id", "status"])

    op.create_table(
        "pos_order_items",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column(
            "order_id",
            sa.Uuid(),
            sa.ForeignKey("pos_orders.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "product_id",
            sa.Uuid(),
            sa.ForeignKey("pos_products.id"),
            nullable=False,
        ),
        sa.Column("line_number", sa.Integer(), nullable=False),
        sa.Column("product_name", sa.String(255), nullable=False),
        sa.Column("hsn_code", sa.String(8), nullable=False),
        sa.Column("gst_rate", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price_paise", sa.BigInteger(), nullable=False),
        sa.Column(
            "discount_amount_paise", sa.BigInteger(), server_default="0", nullable=False
        ),
        sa.Column("tax_amount_paise", sa.BigInteger(), nullable=False),
        sa.Column("total_price_paise", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("quantity > 0", name="positive_quantity"),
        sa.CheckConstraint(
            "discount_amount_paise >= 0", name="non_negative_item_discount"
        ),
    )
    op.create_index(
        "ix_pos_order_items_order_line",
        "pos_order_items",
        ["order_id", "line_number"],
        unique=True,
    )


def downgrade() -> None:
    op.drop_table("pos_order_items")
    op.drop_table("pos_orders")
    op.drop_table("pos_customers")
    op.drop_table("pos_inventory_audit_logs")
    op.drop_table("pos_inventory")
    op.drop_table("pos_products")
    op.drop_table("pos_shops")

    bind = op.get_bind()
    for enum_type in (
        PAYMENT_STATUS,
        PAYMENT_METHOD,
        ORDER_STATUS,
        INVENTORY_ACTION,
        UNIT_OF_MEASUREMENT,
        PRODUCT_CATEGORY,
    ):
        enum_type.drop(bind, checkfirst=True)
