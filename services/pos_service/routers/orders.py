"""POS orders router: counter sales, cancellation and status changes."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from libs.db.session import get_async_db
from services.pos_service.models import OrderStatus, PaymentStatus
from services.pos_service.routers._helpers import (
    get_cashier_id,
    get_orchestrator,
    get_shop_id,
)
from services.pos_service.schemas import (
    OrderCancelRequest,
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
)
from services.pos_service.services.order_ops import OrderOrchestrator
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/orders", tags=["pos-orders"])


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    cart: OrderCreate,
    shop_id: uuid.UUID = Depends(get_shop_id),
    cashier_id: Optional[str] = Depends(get_cashier_id),
    orchestrator: OrderOrchestrator = Depends(get_orchestrator),
    db: AsyncSession = Depends(get_async_db),
):
    """Place an order; stock and loyalty are updated in the same transaction."""
    return await orchestrator.create_order(
        db, shop_id=shop_id, cart=cart, cashier_id=cashier_id
    )


@router.get("", response_model=OrderListResponse)
async def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status"),
    payment_status: Optional[PaymentStatus] = None,
    search: Optional[str] = Query(None, max_length=100),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    shop_id: uuid.UUID = Depends(get_shop_id),
    orchestrator: OrderOrchestrator = Depends(get_orchestrator),
    db: AsyncSession = Depends(get_async_db),
):
    orders, total = await orchestrator.list_orders(
        db,
        shop_id,
        status=status_filter,
        payment_status=payment_status,
        search=search,
        page=page,
        page_size=page_size,
    )
    return OrderListResponse(
        items=[OrderResponse.model_validate(order) for order in orders],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: uuid.UUID,
    shop_id: uuid.UUID = Depends(get_shop_id),
    orchestrator: OrderOrchestrator = Depends(get_orchestrator),
    db: AsyncSession = Depends(get_async_db),
):
    return await orchestrator.get_order(db, order_id, shop_id)


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    shop_id: uuid.UUID = Depends(get_shop_id),
    cashier_id: Optional[str] = Depends(get_cashier_id),
    orchestrator: OrderOrchestrator = Depends(get_orchestrator),
    db: AsyncSession = Depends(get_async_db),
):
    return await orchestrator.update_status(
        db,
        order_id=order_id,
        shop_id=shop_id,
        new_status=payload.status,
        performed_by=cashier_id,
    )


@router.patch("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: uuid.UUID,
    payload: Optional[OrderCancelRequest] = None,
    shop_id: uuid.UUID = Depends(get_shop_id),
    cashier_id: Optional[str] = Depends(get_cashier_id),
    orchestrator: OrderOrchestrator = Depends(get_orchestrator),
    db: AsyncSession = Depends(get_async_db),
):
    """Cancel an open order and put its stock back."""
    return await orchestrator.cancel_order(
        db,
        order_id=order_id,
        shop_id=shop_id,
        reason=payload.reason if payload else None,
        performed_by=cashier_id,
    )
