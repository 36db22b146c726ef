"""GST tax engine for Indian retail.

All amounts are integer paise. Rates are percentages from the legal GST slabs.

Intrastate supplies split the rate evenly into CGST and SGST; interstate
supplies carry a single IGST line at the full rate. Each line is rounded
half-up to the paisa on its own, so CGST + SGST can differ from one combined
rounding by a single paisa.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from libs.common.currency import round_half_up
from services.pos_service.errors import ValidationError
from services.pos_service.models.enums import GSTRate, TaxKind

HUNDRED = Decimal(100)

HSN_CODE_PATTERN = re.compile(r"^[0-9]{4,8}$")
GSTIN_PATTERN = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")
GSTIN_CHARSET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

GST_STATE_CODES: dict[str, str] = {
    "01": "Jammu and Kashmir",
    "02": "Himachal Pradesh",
    "03": "Punjab",
    "04": "Chandigarh",
    "05": "Uttarakhand",
    "06": "Haryana",
    "07": "Delhi",
    "08": "Rajasthan",
    "09": "Uttar Pradesh",
    "10": "Bihar",
    "11": "Sikkim",
    "12": "Arunachal Pradesh",
    "13": "Nagaland",
    "14": "Manipur",
    "15": "Mizoram",
    "16": "Tripura",
    "17": "Meghalaya",
    "18": "Assam",
    "19": "West Bengal",
    "20": "Jharkhand",
    "21": "Odisha",
    "22": "Chhattisgarh",
    "23": "Madhya Pradesh",
    "24": "Gujarat",
    "25": "Daman and Diu",
    "26": "Dadra and Nagar Haveli",
    "27": "Maharashtra",
    "29": "Karnataka",
    "30": "Goa",
    "31": "Lakshadweep",
    "32": "Kerala",
    "33": "Tamil Nadu",
    "34": "Puducherry",
    "35": "Andaman and Nicobar Islands",
    "36": "Telangana",
    "37": "Andhra Pradesh",
    "38": "Ladakh",
}


@dataclass(frozen=True)
class TaxLine:
    kind: TaxKind
    rate: Decimal
    amount: int  # paise


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


def validate_gst_rate(gst_rate) -> GSTRate:
    """Coerce ``gst_rate`` to a legal slab or raise ValidationError."""
    if isinstance(gst_rate, GSTRate):
        return gst_rate
    try:
        value = Decimal(str(gst_rate))
        if value != value.to_integral_value():
            raise ValueError(gst_rate)
        return GSTRate(int(value))
    except (ArithmeticError, TypeError, ValueError):
        raise ValidationError(
            f"GST rate must be one of {[r.value for r in GSTRate]}, got {gst_rate!r}",
            field="gst_rate",
        ) from None


def _validate_amount(amount: int, field: str = "amount") -> int:
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative", field=field)
    return amount


def _line_amount(amount: int, rate: Decimal) -> int:
    return round_half_up(Decimal(amount) * rate / HUNDRED)


# ---------------------------------------------------------------------------
# Tax lines
# ---------------------------------------------------------------------------


def calculate_intrastate_tax(amount: int, gst_rate) -> list[TaxLine]:
    """CGST + SGST, each at half the GST rate."""
    rate = validate_gst_rate(gst_rate)
    _validate_amount(amount)
    half_rate = Decimal(rate.value) / 2
    line_amount = _line_amount(amount, half_rate)
    return [
        TaxLine(kind=TaxKind.CGST, rate=half_rate, amount=line_amount),
        TaxLine(kind=TaxKind.SGST, rate=half_rate, amount=line_amount),
    ]


def calculate_interstate_tax(amount: int, gst_rate) -> list[TaxLine]:
    """A single IGST line at the full GST rate."""
    rate = validate_gst_rate(gst_rate)
    _validate_amount(amount)
    full_rate = Decimal(rate.value)
    return [TaxLine(kind=TaxKind.IGST, rate=full_rate, amount=_line_amount(amount, full_rate))]


def is_intrastate(source_state: str, target_state: str) -> bool:
    return source_state.strip().casefold() == target_state.strip().casefold()


def calculate_tax(
    amount: int, gst_rate, source_state: str, target_state: str
) -> list[TaxLine]:
    """Route to intrastate or interstate tax based on the two states."""
    if is_intrastate(source_state, target_state):
        return calculate_intrastate_tax(amount, gst_rate)
    return calculate_interstate_tax(amount, gst_rate)


def get_total_tax_amount(tax_lines: Iterable[TaxLine]) -> int:
    return sum(line.amount for line in tax_lines)


# ---------------------------------------------------------------------------
# Price conversion
# ---------------------------------------------------------------------------


def calculate_inclusive_price(base_price: int, gst_rate) -> int:
    """Price with GST included: base × (1 + rate/100)."""
    rate = validate_gst_rate(gst_rate)
    _validate_amount(base_price, "base_price")
    return round_half_up(Decimal(base_price) * (HUNDRED + rate.value) / HUNDRED)


def calculate_exclusive_price(inclusive_price: int, gst_rate) -> int:
    """Price before GST: inclusive / (1 + rate/100)."""
    rate = validate_gst_rate(gst_rate)
    _validate_amount(inclusive_price, "inclusive_price")
    return round_half_up(Decimal(inclusive_price) * HUNDRED / (HUNDRED + rate.value))


# ---------------------------------------------------------------------------
# HSN / GSTIN
# ---------------------------------------------------------------------------


def validate_hsn_code(code: str) -> bool:
    return bool(HSN_CODE_PATTERN.match(code or ""))


def _gstin_check_character(body: str) -> str:
    total = 0
    for index, char in enumerate(body):
        factor = 1 if index % 2 == 0 else 2
        product = GSTIN_CHARSET.index(char) * factor
        total += product // 36 + product % 36
    return GSTIN_CHARSET[(36 - total % 36) % 36]


def validate_gstin(gstin: str) -> str:
    """Return the normalised GSTIN or raise ValidationError."""
    value = (gstin or "").strip().upper()
    if len(value) != 15:
        raise ValidationError("GST number must be 15 characters long", field="gstin")
    if not GSTIN_PATTERN.match(value):
        raise ValidationError("Invalid GST number format", field="gstin")
    if _gstin_check_character(value[:14]) != value[14]:
        raise ValidationError("Invalid GST number checksum", field="gstin")
    return value


def state_code_from_gstin(gstin: str) -> str:
    return validate_gstin(gstin)[:2]


def state_from_gstin(gstin: str) -> str | None:
    return GST_STATE_CODES.get(state_code_from_gstin(gstin))


def is_interstate_supply(seller_gstin: str, buyer_gstin: str) -> bool:
    return state_code_from_gstin(seller_gstin) != state_code_from_gstin(buyer_gstin)
