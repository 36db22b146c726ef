"""Explicit configuration handed to the POS orchestrators."""

from dataclasses import dataclass
from typing import Optional

from libs.common.config import Settings, get_settings


@dataclass(frozen=True)
class PosConfig:
    default_min_stock_level: int = 10
    default_max_stock_level: int = 1000
    loyalty_points_per_currency_unit: int = 1
    loyalty_points_threshold: int = 100  # rupees
    order_number_prefix: str = "ORD"

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PosConfig":
        settings = settings or get_settings()
        return cls(
            default_min_stock_level=settings.DEFAULT_MIN_STOCK_LEVEL,
            default_max_stock_level=settings.DEFAULT_MAX_STOCK_LEVEL,
            loyalty_points_per_currency_unit=settings.LOYALTY_POINTS_PER_CURRENCY_UNIT,
            loyalty_points_threshold=settings.LOYALTY_POINTS_THRESHOLD,
            order_number_prefix=settings.ORDER_NUMBER_PREFIX,
        )
