"""POST /v1/quotes - Fee breakdown for a prospective booking"""

from fastapi import APIRouter

from shortlet_settlement.api.v1.schemas import BreakdownResponse, QuoteRequest, money_amount
from shortlet_settlement.domain.commission import calculate_fee_components, compute_breakdown_for
from shortlet_settlement.domain.models import CommissionBreakdown

router = APIRouter()


def breakdown_response(breakdown: CommissionBreakdown) -> BreakdownResponse:
    return BreakdownResponse(
        currency=breakdown.total_amount.currency,
        room_fee=money_amount(breakdown.room_fee),
        cleaning_fee=money_amount(breakdown.cleaning_fee),
        security_deposit=money_amount(breakdown.security_deposit),
        subtotal=money_amount(breakdown.subtotal),
        service_fee=money_amount(breakdown.service_fee),
        platform_fee=money_amount(breakdown.platform_fee),
        total_amount=money_amount(breakdown.total_amount),
        cleaning_fee_to_realtor=money_amount(breakdown.cleaning_fee_to_realtor),
        service_fee_to_platform=money_amount(breakdown.service_fee_to_platform),
        room_fee_in_escrow=money_amount(breakdown.room_fee_in_escrow),
        deposit_in_escrow=money_amount(breakdown.deposit_in_escrow),
        room_fee_split_realtor=money_amount(breakdown.room_fee_split_realtor),
        room_fee_split_platform=money_amount(breakdown.room_fee_split_platform),
        total_realtor_earnings=money_amount(breakdown.total_realtor_earnings),
    )


@router.post("/quotes", response_model=BreakdownResponse)
def create_quote(request_body: QuoteRequest):
    """
    Price a booking: room fee, service fee, deposit and who receives what.

    Returns:
        Immediate releases, escrow holdings and the post-window 90/10 split
    """
    components = calculate_fee_components(
        price_per_night=request_body.price_per_night,
        number_of_nights=request_body.number_of_nights,
        cleaning_fee=request_body.cleaning_fee,
        security_deposit=request_body.security_deposit,
        currency=request_body.currency,
    )
    return breakdown_response(compute_breakdown_for(components))
