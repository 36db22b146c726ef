"""Order and line total calculations (all amounts in paise)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol

from services.pos_service.errors import ValidationError
from services.pos_service.gst import TaxLine, calculate_tax, get_total_tax_amount
from services.pos_service.models.enums import TaxKind


class PricedItem(Protocol):
    quantity: int
    unit_price: int
    discount_amount: int
    tax_amount: int


@dataclass(frozen=True)
class OrderTotals:
    subtotal: int
    total_tax: int
    total_discount: int
    final_amount: int


@dataclass(frozen=True)
class LineAmounts:
    quantity: int
    unit_price: int
    discount_amount: int
    gross: int
    net: int
    tax_lines: list[TaxLine] = field(default_factory=list)

    @property
    def tax_amount(self) -> int:
        return get_total_tax_amount(self.tax_lines)

    @property
    def total_price(self) -> int:
        return self.net + self.tax_amount

    def tax_for(self, kind: TaxKind) -> int:
        return sum(line.amount for line in self.tax_lines if line.kind == kind)


def validate_line(quantity: int, unit_price: int, discount_amount: int = 0) -> int:
    """Validate one line and return its gross amount."""
    if quantity <= 0:
        raise ValidationError("Quantity must be positive", field="quantity")
    if unit_price <= 0:
        raise ValidationError("Unit price must be positive", field="unit_price")
    if discount_amount < 0:
        raise ValidationError("Discount cannot be negative", field="discount_amount")
    gross = quantity * unit_price
    if discount_amount > gross:
        raise ValidationError(
            f"Item discount {discount_amount} exceeds line total {gross}",
            field="discount_amount",
        )
    return gross


def calculate_line(
    quantity: int,
    unit_price: int,
    discount_amount: int,
    gst_rate,
    source_state: str,
    target_state: str,
) -> LineAmounts:
    """Price a single line: tax is charged on the discounted line total."""
    gross = validate_line(quantity, unit_price, discount_amount)
    net = gross - discount_amount
    return LineAmounts(
        quantity=quantity,
        unit_price=unit_price,
        discount_amount=discount_amount,
        gross=gross,
        net=net,
        tax_lines=calculate_tax(net, gst_rate, source_state, target_state),
    )


def calculate_order_totals(
    items: Iterable[PricedItem], additional_discount: int = 0
) -> OrderTotals:
    """Sum subtotal, tax and discount over the items and apply an order discount.

    ``subtotal`` is net of item discounts; ``total_discount`` counts item
    discounts only; the order-level discount is taken off ``final_amount``.
    """
    subtotal = 0
    total_tax = 0
    total_discount = 0

    for item in items:
        gross = validate_line(item.quantity, item.unit_price, item.discount_amount)
        subtotal += gross - item.discount_amount
        total_tax += item.tax_amount
        total_discount += item.discount_amount

    if additional_discount < 0:
        raise ValidationError("Discount cannot be negative", field="discount_amount")
    if additional_discount > subtotal:
        raise ValidationError(
            f"Order discount {additional_discount} exceeds subtotal {subtotal}",
            field="discount_amount",
        )

    return OrderTotals(
        subtotal=subtotal,
        total_tax=total_tax,
        total_discount=total_discount,
        final_amount=subtotal - additional_discount + total_tax,
    )
