"""Manual stock adjustments and low-stock queries."""

import uuid
from decimal import Decimal
from typing import Optional

from libs.common.currency import rupees_to_paise
from libs.common.logging import get_logger
from services.pos_service import repository
from services.pos_service.config import PosConfig
from services.pos_service.errors import InsufficientStock, ProductNotFound
from services.pos_service.models import Inventory, InventoryAction
from sqlalchemy import func, select
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def add_or_adjust_inventory(
    db: AsyncSession,
    *,
    product_id: uuid.UUID,
    shop_id: uuid.UUID,
    delta_quantity: int,
    performed_by: Optional[str],
    cost_price: Optional[Decimal] = None,
    notes: Optional[str] = None,
    config: Optional[PosConfig] = None,
) -> Inventory:
    """Add (or remove) stock for a product and record the change.

    A product with no stock row gets one, starting from ``max(delta, 0)``.
    Removing more than is on hand raises ``InsufficientStock`` and leaves
    the row untouched.
    """
    config = config or PosConfig.from_settings()

    async with repository.unit_of_work(db):
        product = await repository.find_product_by_id_and_shop(db, product_id, shop_id)
        if product is None:
            raise ProductNotFound(product_id)

        inventory = await repository.get_inventory(db, product_id, shop_id)
        if inventory is None:
            inventory = Inventory(
                product_id=product_id,
                shop_id=shop_id,
                quantity=max(delta_quantity, 0),
                min_stock_level=config.default_min_stock_level,
                max_stock_level=config.default_max_stock_level,
            )
            db.add(inventory)
            await db.flush()
            old_quantity = 0
        else:
            if delta_quantity < 0:
                changed = await repository.conditional_decrement_inventory(
                    db, product_id, shop_id, -delta_quantity
                )
                if not changed:
                    available = await repository.sum_inventory_quantity(
                        db, product_id, shop_id
                    )
                    raise InsufficientStock(
                        product_id,
                        available=available,
                        requested=-delta_quantity,
                        product_name=product.name,
                    )
            elif delta_quantity > 0:
                await repository.increment_inventory(
                    db, product_id, shop_id, delta_quantity
                )
            inventory = await repository.get_inventory(db, product_id, shop_id)
            old_quantity = inventory.quantity - delta_quantity

        if cost_price is not None:
            inventory.cost_price_paise = rupees_to_paise(cost_price)

        await repository.write_inventory_audit(
            db,
            inventory=inventory,
            action=(
                InventoryAction.INVENTORY_SUBTRACT
                if delta_quantity < 0
                else InventoryAction.INVENTORY_ADD
            ),
            old_quantity=old_quantity,
            new_quantity=inventory.quantity,
            performed_by=performed_by,
            reference_type="manual",
            notes=notes,
        )

    logger.info(
        "Adjusted stock for product %s at shop %s by %d (%d -> %d)",
        product_id,
        shop_id,
        delta_quantity,
        old_quantity,
        inventory.quantity,
        extra={
            "shop_id": shop_id,
            "product_id": product_id,
            "performed_by": performed_by,
        },
    )
    return inventory


async def list_low_stock(
    db: AsyncSession, shop_id: uuid.UUID, threshold: Optional[int] = None
) -> list[Inventory]:
    """Stock rows at or below their minimum level (or ``threshold`` if given)."""
    limit = Inventory.min_stock_level if threshold is None else threshold
    result = await db.execute(
        select(Inventory)
        .where(Inventory.shop_id == shop_id, Inventory.quantity <= limit)
        .order_by(Inventory.quantity.asc())
    )
    return list(result.scalars().all())


async def list_inventory(
    db: AsyncSession,
    shop_id: uuid.UUID,
    product_id: Optional[uuid.UUID] = None,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Inventory], int]:
    """Most recently touched stock rows first, with their products loaded."""
    query = select(Inventory).where(Inventory.shop_id == shop_id)
    if product_id is not None:
        query = query.where(Inventory.product_id == product_id)

    total = (
        await db.execute(select(func.count()).select_from(query.subquery()))
    ).scalar_one()

    result = await db.execute(
        query.options(selectinload(Inventory.product))
        .order_by(Inventory.last_updated.desc(), Inventory.id)
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return list(result.scalars().all()), total
