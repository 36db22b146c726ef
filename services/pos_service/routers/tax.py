"""GST preview router."""

from fastapi import APIRouter
from libs.common.currency import paise_to_rupees, rupees_to_paise
from services.pos_service.errors import ValidationError
from services.pos_service.gst import (
    calculate_interstate_tax,
    calculate_intrastate_tax,
    get_total_tax_amount,
    is_interstate_supply,
    is_intrastate,
    state_from_gstin,
    validate_hsn_code,
)
from services.pos_service.schemas import (
    TaxCalculationRequest,
    TaxCalculationResponse,
    TaxLineResponse,
)

router = APIRouter(prefix="/tax", tags=["pos-tax"])


@router.post("/calculate", response_model=TaxCalculationResponse)
async def calculate_tax_preview(payload: TaxCalculationRequest):
    """Break an amount into CGST/SGST or IGST without touching the store."""
    if payload.hsn_code is not None and not validate_hsn_code(payload.hsn_code):
        raise ValidationError("HSN code must be 4 to 8 digits", field="hsn_code")

    if payload.seller_gstin and payload.buyer_gstin:
        # Registered parties: the state codes in the GSTINs decide
        intrastate = not is_interstate_supply(payload.seller_gstin, payload.buyer_gstin)
        source_state = state_from_gstin(payload.seller_gstin)
        target_state = state_from_gstin(payload.buyer_gstin)
    elif payload.source_state and payload.target_state:
        intrastate = is_intrastate(payload.source_state, payload.target_state)
        source_state, target_state = payload.source_state, payload.target_state
    else:
        raise ValidationError(
            "Provide source_state and target_state, or seller_gstin and buyer_gstin",
            field="target_state",
        )

    amount = rupees_to_paise(payload.amount)
    if intrastate:
        tax_lines = calculate_intrastate_tax(amount, payload.gst_rate)
    else:
        tax_lines = calculate_interstate_tax(amount, payload.gst_rate)
    total_tax = get_total_tax_amount(tax_lines)
    return TaxCalculationResponse(
        taxable_amount=paise_to_rupees(amount),
        source_state=source_state,
        target_state=target_state,
        is_intrastate=intrastate,
        tax_lines=[
            TaxLineResponse(
                kind=line.kind, rate=line.rate, amount=paise_to_rupees(line.amount)
            )
            for line in tax_lines
        ],
        total_tax=paise_to_rupees(total_tax),
        total_amount=paise_to_rupees(amount + total_tax),
    )
