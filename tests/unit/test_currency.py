"""Unit tests for rupee/paise conversion."""

from decimal import Decimal

import pytest
from libs.common.currency import format_inr, paise_to_rupees, rupees_to_paise


@pytest.mark.unit
def test_rupees_to_paise_rounds_half_up():
    assert rupees_to_paise(Decimal("145.60")) == 14_560
    assert rupees_to_paise("99.995") == 10_000
    assert rupees_to_paise(12) == 1_200


@pytest.mark.unit
def test_paise_to_rupees_has_two_places():
    assert paise_to_rupees(14_560) == Decimal("145.60")
    assert str(paise_to_rupees(5)) == "0.05"


@pytest.mark.unit
@pytest.mark.parametrize(
    "paise,expected",
    [
        (0, "₹0.00"),
        (99_950, "₹999.50"),
        (12_345_650, "₹1,23,456.50"),
        (1_000_000_000, "₹1,00,00,000.00"),
        (-5, "-₹0.05"),
    ],
)
def test_format_inr_uses_indian_grouping(paise, expected):
    assert format_inr(paise) == expected
