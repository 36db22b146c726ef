"""Transactional store operations used by the POS orchestrators.

Every function takes the caller's ``AsyncSession`` and never commits on its
own; ``unit_of_work`` owns the commit/rollback boundary.
"""

import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from libs.common.datetime_utils import utc_now
from libs.common.logging import get_logger
from services.pos_service.errors import TransactionFailure
from services.pos_service.models import (
    Customer,
    Inventory,
    InventoryAction,
    InventoryAuditLog,
    Order,
    OrderItem,
    Product,
    Shop,
)
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Transaction scope
# ---------------------------------------------------------------------------


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Commit everything done inside the block, or roll all of it back.

    Store-level failures surface as ``TransactionFailure``; domain errors are
    re-raised unchanged after the rollback.
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.warning("Unit of work aborted by the store: %s", exc)
        raise TransactionFailure() from exc
    except BaseException:
        await db.rollback()
        raise


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


async def get_shop(db: AsyncSession, shop_id: uuid.UUID) -> Optional[Shop]:
    result = await db.execute(select(Shop).where(Shop.id == shop_id))
    return result.scalar_one_or_none()


async def find_product_by_id_and_shop(
    db: AsyncSession, product_id: uuid.UUID, shop_id: uuid.UUID
) -> Optional[Product]:
    result = await db.execute(
        select(Product).where(Product.id == product_id, Product.shop_id == shop_id)
    )
    return result.scalar_one_or_none()


async def get_customer(
    db: AsyncSession, customer_id: uuid.UUID, shop_id: uuid.UUID
) -> Optional[Customer]:
    result = await db.execute(
        select(Customer).where(Customer.id == customer_id, Customer.shop_id == shop_id)
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Inventory
# ---------------------------------------------------------------------------


async def sum_inventory_quantity(
    db: AsyncSession, product_id: uuid.UUID, shop_id: uuid.UUID
) -> int:
    result = await db.execute(
        select(func.coalesce(func.sum(Inventory.quantity), 0)).where(
            Inventory.product_id == product_id, Inventory.shop_id == shop_id
        )
    )
    return int(result.scalar_one())


async def get_inventory(
    db: AsyncSession, product_id: uuid.UUID, shop_id: uuid.UUID
) -> Optional[Inventory]:
    result = await db.execute(
        select(Inventory)
        .where(Inventory.product_id == product_id, Inventory.shop_id == shop_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def conditional_decrement_inventory(
    db: AsyncSession, product_id: uuid.UUID, shop_id: uuid.UUID, amount: int
) -> int:
    """Decrement stock only where at least ``amount`` is on hand.

    Returns the number of rows changed; 0 means the stock was gone by the time
    of the write.
    """
    result = await db.execute(
        update(Inventory)
        .where(
            Inventory.product_id == product_id,
            Inventory.shop_id == shop_id,
            Inventory.quantity >= amount,
        )
        .values(quantity=Inventory.quantity - amount, last_updated=utc_now())
    )
    return result.rowcount


async def increment_inventory(
    db: AsyncSession, product_id: uuid.UUID, shop_id: uuid.UUID, amount: int
) -> int:
    result = await db.execute(
        update(Inventory)
        .where(Inventory.product_id == product_id, Inventory.shop_id == shop_id)
        .values(quantity=Inventory.quantity + amount, last_updated=utc_now())
    )
    return result.rowcount


async def write_inventory_audit(
    db: AsyncSession,
    *,
    inventory: Inventory,
    action: InventoryAction,
    old_quantity: int,
    new_quantity: int,
    performed_by: Optional[str] = None,
    reference_type: Optional[str] = None,
    reference_id: Optional[uuid.UUID] = None,
    notes: Optional[str] = None,
) -> InventoryAuditLog:
    """Append an audit row for a stock change."""
    audit_log = InventoryAuditLog(
        inventory_id=inventory.id,
        product_id=inventory.product_id,
        shop_id=inventory.shop_id,
        action=action,
        quantity_delta=new_quantity - old_quantity,
        old_quantity=old_quantity,
        new_quantity=new_quantity,
        performed_by=performed_by,
        reference_type=reference_type,
        reference_id=reference_id,
        notes=notes,
    )
    db.add(audit_log)
    return audit_log


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


async def create_order_with_items(
    db: AsyncSession, order: Order, items: list[OrderItem]
) -> Order:
    order.items = items
    db.add(order)
    await db.flush()
    return order


async def load_order(
    db: AsyncSession, order_id: uuid.UUID, shop_id: uuid.UUID
) -> Optional[Order]:
    """Fetch an order with its items and customer populated."""
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id, Order.shop_id == shop_id)
        .options(selectinload(Order.items), selectinload(Order.customer))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------


async def increment_customer_loyalty(
    db: AsyncSession, customer_id: uuid.UUID, points_delta: int, spent_delta: int
) -> int:
    result = await db.execute(
        update(Customer)
        .where(Customer.id == customer_id)
        .values(
            loyalty_points=Customer.loyalty_points + points_delta,
            total_spent_paise=Customer.total_spent_paise + spent_delta,
            updated_at=utc_now(),
        )
    )
    return result.rowcount


async def decrement_customer_loyalty(
    db: AsyncSession, customer_id: uuid.UUID, points_delta: int, spent_delta: int
) -> Optional[Customer]:
    """Reverse an earlier increment; balances never drop below zero."""
    result = await db.execute(
        select(Customer)
        .where(Customer.id == customer_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    customer = result.scalar_one_or_none()
    if customer is None:
        return None

    customer.loyalty_points = max(customer.loyalty_points - points_delta, 0)
    customer.total_spent_paise = max(customer.total_spent_paise - spent_delta, 0)
    customer.updated_at = utc_now()
    return customer
