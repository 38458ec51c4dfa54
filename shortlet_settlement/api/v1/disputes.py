"""POST /v1/disputes/* - Dispute outcome previews for admins"""

from fastapi import APIRouter

from shortlet_settlement.api.v1.schemas import (
    DepositDeductionRequest,
    DepositDeductionResponse,
    RefundPreviewRequest,
    RefundPreviewResponse,
    money_amount,
)
from shortlet_settlement.domain.disputes import deduct_from_deposit, refund_for_tier
from shortlet_settlement.domain.money import Money

router = APIRouter()


@router.post("/disputes/refund", response_model=RefundPreviewResponse)
def preview_refund(request_body: RefundPreviewRequest):
    """Room-fee refund the guest would receive for a dispute tier"""
    refund = refund_for_tier(request_body.tier, Money(request_body.room_fee, request_body.currency))
    return RefundPreviewResponse(
        tier=request_body.tier,
        refund_amount=money_amount(refund),
        currency=refund.currency,
    )


@router.post("/disputes/deposit-deduction", response_model=DepositDeductionResponse)
def preview_deposit_deduction(request_body: DepositDeductionRequest):
    """Deposit split for a realtor damage claim, capped at the deposit"""
    result = deduct_from_deposit(
        Money(request_body.damage_amount, request_body.currency),
        Money(request_body.deposit_amount, request_body.currency),
    )
    return DepositDeductionResponse(
        realtor_gets=money_amount(result.realtor_gets),
        guest_refund=money_amount(result.guest_refund),
        is_liability_capped=result.is_liability_capped,
        currency=result.realtor_gets.currency,
    )
