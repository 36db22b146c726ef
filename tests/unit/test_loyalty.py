"""Unit tests for loyalty points and tiers."""

import pytest
from services.pos_service.config import PosConfig
from services.pos_service.loyalty import (
    calculate_tier,
    points_for_amount,
    spend_to_next_tier,
    tier_multiplier,
)
from services.pos_service.models import LoyaltyTier


@pytest.mark.unit
@pytest.mark.parametrize(
    "amount_paise,expected",
    [(0, 0), (-500, 0), (9_999, 0), (10_000, 1), (23_600, 2), (1_000_000, 100)],
)
def test_default_points_are_one_per_hundred_rupees(amount_paise, expected):
    assert points_for_amount(amount_paise, PosConfig()) == expected


@pytest.mark.unit
def test_points_follow_configured_rate():
    config = PosConfig(loyalty_points_threshold=50, loyalty_points_per_currency_unit=2)

    assert points_for_amount(23_600, config) == 8


@pytest.mark.unit
@pytest.mark.parametrize(
    "rupees,tier",
    [
        (0, LoyaltyTier.BRONZE),
        (19_999, LoyaltyTier.BRONZE),
        (20_000, LoyaltyTier.SILVER),
        (49_999, LoyaltyTier.SILVER),
        (50_000, LoyaltyTier.GOLD),
        (100_000, LoyaltyTier.PLATINUM),
        (250_000, LoyaltyTier.PLATINUM),
    ],
)
def test_tier_boundaries(rupees, tier):
    assert calculate_tier(rupees * 100) == tier


@pytest.mark.unit
def test_tier_multipliers():
    assert tier_multiplier(LoyaltyTier.BRONZE) == 1.0
    assert tier_multiplier(LoyaltyTier.GOLD) == 1.5
    assert tier_multiplier(LoyaltyTier.PLATINUM) == 2.0


@pytest.mark.unit
def test_spend_to_next_tier():
    assert spend_to_next_tier(0) == 2_000_000
    assert spend_to_next_tier(2_500_000) == 2_500_000
    assert spend_to_next_tier(10_000_000) == 0
