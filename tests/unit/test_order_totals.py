"""Unit tests for line pricing and order totals (amounts in paise)."""

from dataclasses import dataclass

import pytest
from services.pos_service.errors import ValidationError
from services.pos_service.models import TaxKind
from services.pos_service.order_totals import (
    calculate_line,
    calculate_order_totals,
    validate_line,
)


@dataclass
class Item:
    quantity: int
    unit_price: int
    discount_amount: int = 0
    tax_amount: int = 0


# ---------------------------------------------------------------------------
# calculate_line
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_line_tax_is_charged_on_discounted_amount():
    """3 x ₹50 less ₹20 at 12%: net ₹130, tax ₹15.60, total ₹145.60."""
    line = calculate_line(3, 5_000, 2_000, 12, "Maharashtra", "Maharashtra")

    assert line.gross == 15_000
    assert line.net == 13_000
    assert line.tax_amount == 1_560
    assert line.tax_for(TaxKind.CGST) == 780
    assert line.tax_for(TaxKind.SGST) == 780
    assert line.tax_for(TaxKind.IGST) == 0
    assert line.total_price == 14_560


@pytest.mark.unit
def test_interstate_line_carries_igst_only():
    line = calculate_line(2, 10_000, 0, 18, "Maharashtra", "Karnataka")

    assert line.tax_for(TaxKind.IGST) == 3_600
    assert line.tax_for(TaxKind.CGST) == 0
    assert line.total_price == 23_600


@pytest.mark.unit
@pytest.mark.parametrize(
    "quantity,unit_price,discount,field",
    [
        (0, 100, 0, "quantity"),
        (-1, 100, 0, "quantity"),
        (1, 0, 0, "unit_price"),
        (1, 100, -1, "discount_amount"),
        (2, 100, 201, "discount_amount"),
    ],
)
def test_validate_line_rejects_bad_input(quantity, unit_price, discount, field):
    with pytest.raises(ValidationError) as exc_info:
        validate_line(quantity, unit_price, discount)

    assert exc_info.value.field == field


@pytest.mark.unit
def test_discount_equal_to_line_total_is_allowed():
    assert validate_line(2, 100, 200) == 200


# ---------------------------------------------------------------------------
# calculate_order_totals
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_order_totals_sum_lines():
    items = [
        Item(quantity=3, unit_price=5_000, discount_amount=2_000, tax_amount=1_560),
        Item(quantity=2, unit_price=10_000, tax_amount=3_600),
    ]

    totals = calculate_order_totals(items)

    assert totals.subtotal == 33_000
    assert totals.total_tax == 5_160
    assert totals.total_discount == 2_000
    assert totals.final_amount == 38_160


@pytest.mark.unit
def test_order_level_discount_reduces_final_amount():
    items = [calculate_line(2, 10_000, 0, 18, "Goa", "Goa")]

    totals = calculate_order_totals(items, additional_discount=1_000)

    assert totals.subtotal == 20_000
    assert totals.total_tax == 3_600
    assert totals.total_discount == 0
    assert totals.final_amount == totals.subtotal - 1_000 + totals.total_tax


@pytest.mark.unit
@pytest.mark.parametrize("discount", [-1, 20_001])
def test_order_level_discount_out_of_range(discount):
    items = [Item(quantity=2, unit_price=10_000)]

    with pytest.raises(ValidationError) as exc_info:
        calculate_order_totals(items, additional_discount=discount)

    assert exc_info.value.field == "discount_amount"


@pytest.mark.unit
def test_order_totals_reject_item_discount_above_line_total():
    with pytest.raises(ValidationError):
        calculate_order_totals([Item(quantity=1, unit_price=500, discount_amount=600)])
