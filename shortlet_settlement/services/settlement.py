"""Settlement orchestration: attaches commission and moves payments through escrow"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Dict, Optional, Union

from sqlalchemy.orm import Session

from shortlet_settlement.config import settings
from shortlet_settlement.domain.commission import compute_breakdown_for, compute_legacy_breakdown
from shortlet_settlement.domain.disputes import deduct_from_deposit, parse_tier, refund_for_tier, split_retained_room_fee
from shortlet_settlement.domain.escrow import (
    ensure_commission_allowed,
    ensure_transition,
    is_guest_dispute_window_open,
    is_realtor_dispute_window_open,
)
from shortlet_settlement.domain.exceptions import NotFoundError, PreconditionFailedError
from shortlet_settlement.domain.models import (
    CommissionAttachedDetails,
    CommissionBreakdown,
    DepositDeductionResult,
    DisputeTier,
    EscrowTransitionDetails,
    LegacyBreakdown,
    PaymentStatus,
)
from shortlet_settlement.domain.money import Money
from shortlet_settlement.infrastructure.database.models import Payment
from shortlet_settlement.infrastructure.database.repositories import (
    AuditLogRepository,
    PaymentRepository,
    fee_components,
)
from shortlet_settlement.infrastructure.observability.logging import log_settlement_step
from shortlet_settlement.infrastructure.observability.metrics import (
    commission_attached_counter,
    dispute_refund_counter,
    settlement_transition_counter,
)
from shortlet_settlement.utils.date_utils import Clock, utc_now

SYSTEM_ACTOR = "system"
PAYMENT_ENTITY = "PAYMENT"


class SettlementOrchestrator:
    """
    Applies commission and escrow steps to a single payment record.

    Each call is one read (row-locked where the database supports it) and one
    write. Nothing is committed here: the caller owns the transaction and must
    commit or roll back.

    Escrow steps, driven by an external scheduler or an admin decision:
        hold_funds            INITIATED -> HELD
        release_room_fee      HELD -> PARTIALLY_RELEASED
        resolve_guest_dispute HELD -> PARTIALLY_RELEASED
        release_deposit       PARTIALLY_RELEASED -> SETTLED
    """

    def __init__(
        self,
        db: Session,
        clock: Clock = utc_now,
        guest_dispute_window: Optional[timedelta] = None,
        realtor_dispute_window: Optional[timedelta] = None,
    ):
        self.db = db
        self.payments = PaymentRepository(db)
        self.audit = AuditLogRepository(db)
        self.clock = clock
        self.guest_dispute_window = guest_dispute_window or timedelta(hours=settings.guest_dispute_window_hours)
        self.realtor_dispute_window = realtor_dispute_window or timedelta(
            hours=settings.realtor_dispute_window_hours
        )

    def _load(self, payment_id: str) -> Payment:
        payment = self.payments.get_payment_for_update(payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")
        return payment

    def attach_commission(self, payment_id: str, custom_rate: Optional[Decimal] = None) -> LegacyBreakdown:
        """
        Compute the flat-rate commission for a payment and store it on the record.

        Raises:
            NotFoundError: Payment does not exist
            PreconditionFailedError: Payment is not HELD, PARTIALLY_RELEASED or SETTLED
        """
        payment = self._load(payment_id)
        ensure_commission_allowed(payment.status)

        breakdown = compute_legacy_breakdown(Money(payment.amount, payment.currency), custom_rate)
        self.payments.update_payment(
            payment,
            platform_commission=breakdown.platform_commission,
            commission_rate=breakdown.commission_rate,
            realtor_earnings=breakdown.realtor_earnings,
        )
        self.audit.append_entry(
            PAYMENT_ENTITY,
            payment.id,
            SYSTEM_ACTOR,
            CommissionAttachedDetails(
                platform_commission=str(breakdown.platform_commission.quantize().amount),
                commission_rate=str(breakdown.commission_rate),
                realtor_earnings=str(breakdown.realtor_earnings.quantize().amount),
                currency=payment.currency,
            ),
        )
        commission_attached_counter.inc()
        return breakdown

    def hold_funds(self, payment_id: str) -> CommissionBreakdown:
        """Payment verified: release cleaning and service fees, hold room fee and deposit"""
        payment = self._load(payment_id)
        ensure_transition(payment.status, PaymentStatus.HELD)

        breakdown = compute_breakdown_for(fee_components(payment))
        self._transition(
            payment,
            "hold_funds",
            PaymentStatus.HELD,
            amounts={
                "cleaning_fee_to_realtor": breakdown.cleaning_fee_to_realtor,
                "service_fee_to_platform": breakdown.service_fee_to_platform,
                "room_fee_in_escrow": breakdown.room_fee_in_escrow,
                "deposit_in_escrow": breakdown.deposit_in_escrow,
            },
            service_fee=breakdown.service_fee,
            platform_fee=breakdown.platform_fee,
            room_fee_in_escrow=True,
            deposit_in_escrow=True,
        )
        return breakdown

    def release_room_fee(self, payment_id: str, check_in_at: Optional[datetime] = None) -> CommissionBreakdown:
        """
        Guest dispute window elapsed: split the escrowed room fee 90/10.

        When check_in_at is given the release is refused while the window is open.
        """
        payment = self._load(payment_id)
        self._ensure_room_fee_held(payment)
        if check_in_at is not None and is_guest_dispute_window_open(
            check_in_at, self.clock(), self.guest_dispute_window
        ):
            raise PreconditionFailedError("Guest dispute window is still open")

        breakdown = compute_breakdown_for(fee_components(payment))
        self._transition(
            payment,
            "release_room_fee",
            PaymentStatus.PARTIALLY_RELEASED,
            amounts={
                "room_fee_split_realtor": breakdown.room_fee_split_realtor,
                "room_fee_split_platform": breakdown.room_fee_split_platform,
            },
            room_fee_split_realtor=breakdown.room_fee_split_realtor,
            room_fee_split_platform=breakdown.room_fee_split_platform,
            room_fee_refunded=Money.zero(payment.currency),
            room_fee_in_escrow=False,
        )
        return breakdown

    def resolve_guest_dispute(self, payment_id: str, tier: Union[DisputeTier, str]) -> Money:
        """Refund the guest by tier and split the retained room fee 90/10"""
        resolved = parse_tier(tier)
        payment = self._load(payment_id)
        self._ensure_room_fee_held(payment)

        room_fee = Money(payment.room_fee, payment.currency)
        refund = refund_for_tier(resolved, room_fee)
        realtor_share, platform_share = split_retained_room_fee(room_fee, refund)

        self._transition(
            payment,
            "guest_dispute",
            PaymentStatus.PARTIALLY_RELEASED,
            amounts={
                "room_fee_refunded": refund,
                "room_fee_split_realtor": realtor_share,
                "room_fee_split_platform": platform_share,
            },
            room_fee_refunded=refund,
            room_fee_split_realtor=realtor_share,
            room_fee_split_platform=platform_share,
            room_fee_in_escrow=False,
        )
        dispute_refund_counter.labels(tier=resolved.value).inc()
        return refund

    def release_deposit(
        self,
        payment_id: str,
        damage_amount: Optional[Union[Money, Decimal]] = None,
        check_out_at: Optional[datetime] = None,
    ) -> DepositDeductionResult:
        """
        Settle the security deposit, deducting any damage awarded to the realtor.

        Without a damage claim the deposit is only released once the realtor
        dispute window after check_out_at has closed.
        """
        payment = self._load(payment_id)
        ensure_transition(payment.status, PaymentStatus.SETTLED)
        if not payment.deposit_in_escrow:
            raise PreconditionFailedError("Security deposit not in escrow or already released")
        if damage_amount is None and check_out_at is not None and is_realtor_dispute_window_open(
            check_out_at, self.clock(), self.realtor_dispute_window
        ):
            raise PreconditionFailedError("Realtor dispute window is still open")

        if damage_amount is not None and not isinstance(damage_amount, Money):
            damage_amount = Money(damage_amount, payment.currency)
        deposit = Money(payment.security_deposit, payment.currency)
        result = deduct_from_deposit(damage_amount or Money.zero(payment.currency), deposit)

        self._transition(
            payment,
            "release_deposit",
            PaymentStatus.SETTLED,
            amounts={
                "deposit_to_realtor": result.realtor_gets,
                "deposit_refunded": result.guest_refund,
            },
            deposit_to_realtor=result.realtor_gets,
            deposit_refunded=result.guest_refund,
            deposit_in_escrow=False,
        )
        return result

    def _ensure_room_fee_held(self, payment: Payment) -> None:
        ensure_transition(payment.status, PaymentStatus.PARTIALLY_RELEASED)
        if not payment.room_fee_in_escrow:
            raise PreconditionFailedError("Room fee not in escrow or already released")

    def _transition(
        self,
        payment: Payment,
        step: str,
        target: PaymentStatus,
        amounts: Dict[str, Money],
        **fields,
    ) -> None:
        from_status = payment.status
        self.payments.update_payment(payment, status=target.value, **fields)

        printable = {name: str(value.quantize().amount) for name, value in amounts.items()}
        self.audit.append_entry(
            PAYMENT_ENTITY,
            payment.id,
            SYSTEM_ACTOR,
            EscrowTransitionDetails(step=step, from_status=from_status, to_status=target.value, amounts=printable),
        )
        settlement_transition_counter.labels(step=step).inc()
        log_settlement_step(payment.id, step, from_status, target.value, printable)
