"""Loyalty points and customer tiers."""

from libs.common.currency import PAISE_PER_RUPEE
from services.pos_service.config import PosConfig
from services.pos_service.models.enums import LoyaltyTier

# Lifetime spend (in rupees) needed for each tier, highest first
TIER_THRESHOLDS = (
    (LoyaltyTier.PLATINUM, 100_000),
    (LoyaltyTier.GOLD, 50_000),
    (LoyaltyTier.SILVER, 20_000),
)

TIER_MULTIPLIERS = {
    LoyaltyTier.BRONZE: 1.0,
    LoyaltyTier.SILVER: 1.2,
    LoyaltyTier.GOLD: 1.5,
    LoyaltyTier.PLATINUM: 2.0,
}


def points_for_amount(amount_paise: int, config: PosConfig) -> int:
    """Points earned for an order total; 1 per ₹100 with the default config."""
    if amount_paise <= 0:
        return 0
    threshold_paise = config.loyalty_points_threshold * PAISE_PER_RUPEE
    return (amount_paise // threshold_paise) * config.loyalty_points_per_currency_unit


def calculate_tier(total_spent_paise: int) -> LoyaltyTier:
    for tier, rupees in TIER_THRESHOLDS:
        if total_spent_paise >= rupees * PAISE_PER_RUPEE:
            return tier
    return LoyaltyTier.BRONZE


def tier_multiplier(tier: LoyaltyTier) -> float:
    return TIER_MULTIPLIERS.get(tier, 1.0)


def spend_to_next_tier(total_spent_paise: int) -> int:
    """Paise still to spend before the next tier; 0 at platinum."""
    for _, rupees in reversed(TIER_THRESHOLDS):
        needed = rupees * PAISE_PER_RUPEE
        if total_spent_paise < needed:
            return needed - total_spent_paise
    return 0
