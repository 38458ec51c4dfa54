"""/v1/payments/{payment_id}/* - Escrow steps, commission and payout"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends

from shortlet_settlement.api.dependencies import get_payout_processor, get_settlement_orchestrator, unit_of_work
from shortlet_settlement.api.v1.schemas import (
    CommissionRequest,
    CommissionResponse,
    GuestDisputeRequest,
    PaymentSettlementResponse,
    PayoutRequest,
    PayoutResponse,
    ReleaseDepositRequest,
    ReleaseRoomFeeRequest,
    money_amount,
)
from shortlet_settlement.domain.exceptions import NotFoundError
from shortlet_settlement.infrastructure.database.models import Payment
from shortlet_settlement.services.payouts import PayoutProcessor
from shortlet_settlement.services.settlement import SettlementOrchestrator

router = APIRouter()


def _rounded(value: Optional[Decimal]) -> Optional[Decimal]:
    return value.quantize(Decimal("0.01")) if value is not None else None


def settlement_response(payment: Payment) -> PaymentSettlementResponse:
    return PaymentSettlementResponse(
        payment_id=payment.id,
        booking_id=payment.booking_id,
        realtor_id=payment.realtor_id,
        status=payment.status,
        currency=payment.currency,
        amount=_rounded(payment.amount),
        service_fee=_rounded(payment.service_fee),
        platform_fee=_rounded(payment.platform_fee),
        room_fee_in_escrow=bool(payment.room_fee_in_escrow),
        deposit_in_escrow=bool(payment.deposit_in_escrow),
        room_fee_split_realtor=_rounded(payment.room_fee_split_realtor),
        room_fee_split_platform=_rounded(payment.room_fee_split_platform),
        room_fee_refunded=_rounded(payment.room_fee_refunded),
        deposit_to_realtor=_rounded(payment.deposit_to_realtor),
        deposit_refunded=_rounded(payment.deposit_refunded),
        platform_commission=_rounded(payment.platform_commission),
        commission_rate=payment.commission_rate,
        realtor_earnings=_rounded(payment.realtor_earnings),
        commission_paid_out=bool(payment.commission_paid_out),
        payout_reference=payment.payout_reference,
    )


@router.get("/payments/{payment_id}", response_model=PaymentSettlementResponse)
def get_payment(payment_id: str, orchestrator: SettlementOrchestrator = Depends(get_settlement_orchestrator)):
    """Current settlement state of a payment"""
    payment = orchestrator.payments.get_payment_by_id(payment_id)
    if payment is None:
        raise NotFoundError("Payment not found")
    return settlement_response(payment)


@router.post("/payments/{payment_id}/hold", response_model=PaymentSettlementResponse)
def hold_funds(payment_id: str, orchestrator: SettlementOrchestrator = Depends(get_settlement_orchestrator)):
    """Payment verified: release cleaning and service fees, hold room fee and deposit"""
    with unit_of_work(orchestrator.db):
        orchestrator.hold_funds(payment_id)
    return settlement_response(orchestrator.payments.get_payment_by_id(payment_id))


@router.post("/payments/{payment_id}/release-room-fee", response_model=PaymentSettlementResponse)
def release_room_fee(
    payment_id: str,
    request_body: ReleaseRoomFeeRequest = ReleaseRoomFeeRequest(),
    orchestrator: SettlementOrchestrator = Depends(get_settlement_orchestrator),
):
    """Called by the scheduler once the guest dispute window has closed"""
    with unit_of_work(orchestrator.db):
        orchestrator.release_room_fee(payment_id, check_in_at=request_body.check_in_at)
    return settlement_response(orchestrator.payments.get_payment_by_id(payment_id))


@router.post("/payments/{payment_id}/guest-dispute", response_model=PaymentSettlementResponse)
def resolve_guest_dispute(
    payment_id: str,
    request_body: GuestDisputeRequest,
    orchestrator: SettlementOrchestrator = Depends(get_settlement_orchestrator),
):
    """Apply an admin's dispute tier to the escrowed room fee"""
    with unit_of_work(orchestrator.db):
        orchestrator.resolve_guest_dispute(payment_id, request_body.tier)
    return settlement_response(orchestrator.payments.get_payment_by_id(payment_id))


@router.post("/payments/{payment_id}/release-deposit", response_model=PaymentSettlementResponse)
def release_deposit(
    payment_id: str,
    request_body: ReleaseDepositRequest = ReleaseDepositRequest(),
    orchestrator: SettlementOrchestrator = Depends(get_settlement_orchestrator),
):
    """Settle the security deposit after the realtor window or a damage ruling"""
    with unit_of_work(orchestrator.db):
        orchestrator.release_deposit(
            payment_id,
            damage_amount=request_body.damage_amount,
            check_out_at=request_body.check_out_at,
        )
    return settlement_response(orchestrator.payments.get_payment_by_id(payment_id))


@router.post("/payments/{payment_id}/commission", response_model=CommissionResponse)
def attach_commission(
    payment_id: str,
    request_body: CommissionRequest = CommissionRequest(),
    orchestrator: SettlementOrchestrator = Depends(get_settlement_orchestrator),
):
    """
    Compute and store the flat-rate commission for a held or settled payment.

    Returns:
        Commission, realtor earnings and the rate applied
    """
    with unit_of_work(orchestrator.db):
        breakdown = orchestrator.attach_commission(payment_id, request_body.custom_rate)

    return CommissionResponse(
        payment_id=payment_id,
        currency=breakdown.total_amount.currency,
        total_amount=money_amount(breakdown.total_amount),
        platform_commission=money_amount(breakdown.platform_commission),
        payment_processing_fee=money_amount(breakdown.payment_processing_fee),
        realtor_earnings=money_amount(breakdown.realtor_earnings),
        commission_rate=breakdown.commission_rate,
    )


@router.post("/payments/{payment_id}/payout", response_model=PayoutResponse)
def process_payout(
    payment_id: str,
    request_body: PayoutRequest = PayoutRequest(),
    processor: PayoutProcessor = Depends(get_payout_processor),
):
    """
    Mark realtor earnings as paid out.

    409 means the payout was already processed. The realtor email is sent
    after the response and never affects the result.
    """
    with unit_of_work(processor.db):
        result = processor.process_payout(payment_id, request_body.payout_reference)

    return PayoutResponse(
        payment_id=result.payment_id,
        realtor_id=result.realtor_id,
        amount=money_amount(result.amount),
        currency=result.amount.currency,
        payout_reference=result.payout_reference,
        payout_date=result.payout_date,
    )
