"""POS inventory router: stock list, adjustments and low-stock alerts."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from libs.db.session import get_async_db
from services.pos_service.config import PosConfig
from services.pos_service.routers._helpers import (
    get_cashier_id,
    get_pos_config,
    get_shop_id,
)
from services.pos_service.schemas import (
    InventoryAdjustment,
    InventoryListResponse,
    InventoryResponse,
    InventoryWithProduct,
)
from services.pos_service.services.inventory_ops import (
    add_or_adjust_inventory,
    list_inventory,
    list_low_stock,
)
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/inventory", tags=["pos-inventory"])


@router.get("", response_model=InventoryListResponse)
async def get_inventory_list(
    product_id: Optional[uuid.UUID] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    shop_id: uuid.UUID = Depends(get_shop_id),
    db: AsyncSession = Depends(get_async_db),
):
    rows, total = await list_inventory(
        db, shop_id, product_id=product_id, page=page, page_size=page_size
    )
    return InventoryListResponse(
        items=[InventoryWithProduct.model_validate(row) for row in rows],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=InventoryResponse)
async def adjust_inventory(
    payload: InventoryAdjustment,
    shop_id: uuid.UUID = Depends(get_shop_id),
    cashier_id: Optional[str] = Depends(get_cashier_id),
    config: PosConfig = Depends(get_pos_config),
    db: AsyncSession = Depends(get_async_db),
):
    """Restock or correct a product's stock (negative delta removes stock)."""
    return await add_or_adjust_inventory(
        db,
        product_id=payload.product_id,
        shop_id=shop_id,
        delta_quantity=payload.delta_quantity,
        performed_by=cashier_id,
        cost_price=payload.cost_price,
        notes=payload.notes,
        config=config,
    )


@router.get("/low-stock", response_model=list[InventoryResponse])
async def get_low_stock(
    threshold: Optional[int] = Query(None, ge=0),
    shop_id: uuid.UUID = Depends(get_shop_id),
    db: AsyncSession = Depends(get_async_db),
):
    return await list_low_stock(db, shop_id, threshold=threshold)
