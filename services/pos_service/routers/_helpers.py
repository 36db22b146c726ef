"""Shared request dependencies for POS routers."""

import uuid
from typing import Optional

from fastapi import Depends, Header
from services.pos_service.config import PosConfig
from services.pos_service.services.order_ops import OrderOrchestrator


async def get_shop_id(x_shop_id: uuid.UUID = Header(...)) -> uuid.UUID:
    """Shop the request acts on, from the ``X-Shop-ID`` header."""
    return x_shop_id


async def get_cashier_id(x_cashier_id: Optional[str] = Header(None)) -> Optional[str]:
    return x_cashier_id


def get_pos_config() -> PosConfig:
    return PosConfig.from_settings()


def get_orchestrator(config: PosConfig = Depends(get_pos_config)) -> OrderOrchestrator:
    return OrderOrchestrator(config)
