"""Data access layer for payments and the audit log"""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional, Union

from sqlalchemy import update
from sqlalchemy.orm import Session

from shortlet_settlement.domain.models import (
    CommissionAttachedDetails,
    EscrowTransitionDetails,
    FeeComponents,
    PaymentStatus,
    PayoutProcessedDetails,
    SettledPayment,
)
from shortlet_settlement.domain.money import Money
from shortlet_settlement.infrastructure.database.models import AuditLog, Payment

AuditDetails = Union[PayoutProcessedDetails, CommissionAttachedDetails, EscrowTransitionDetails]


def _column_value(value: Any) -> Any:
    """Money is stored as its amount rounded to the minor unit"""
    if isinstance(value, Money):
        return value.quantize().amount
    return value


def money_or_none(amount: Optional[Decimal], currency: str) -> Optional[Money]:
    return Money(amount, currency) if amount is not None else None


def fee_components(payment: Payment) -> FeeComponents:
    return FeeComponents(
        room_fee=Money(payment.room_fee, payment.currency),
        cleaning_fee=Money(payment.cleaning_fee, payment.currency),
        security_deposit=Money(payment.security_deposit, payment.currency),
    )


def to_settled_payment(payment: Payment) -> SettledPayment:
    return SettledPayment(
        payment_id=payment.id,
        realtor_id=payment.realtor_id,
        amount=Money(payment.amount, payment.currency),
        platform_commission=money_or_none(payment.platform_commission, payment.currency),
        realtor_earnings=money_or_none(payment.realtor_earnings, payment.currency),
        commission_paid_out=bool(payment.commission_paid_out),
        created_at=payment.created_at,
    )


class PaymentRepository:
    """Repository for booking payments"""

    def __init__(self, db: Session):
        self.db = db

    def create_payment(
        self,
        booking_id: str,
        realtor_id: str,
        fees: FeeComponents,
        amount: Optional[Money] = None,
        status: PaymentStatus = PaymentStatus.INITIATED,
        realtor_email: Optional[str] = None,
        realtor_business_name: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> Payment:
        """Persist a payment record; amount defaults to room + cleaning + deposit"""
        if amount is None:
            amount = fees.room_fee + fees.cleaning_fee + fees.security_deposit

        db_payment = Payment(
            booking_id=booking_id,
            realtor_id=realtor_id,
            realtor_email=realtor_email,
            realtor_business_name=realtor_business_name,
            currency=amount.currency,
            status=PaymentStatus(status).value,
            amount=_column_value(amount),
            room_fee=_column_value(fees.room_fee),
            cleaning_fee=_column_value(fees.cleaning_fee),
            security_deposit=_column_value(fees.security_deposit),
        )
        if created_at is not None:
            db_payment.created_at = created_at
        self.db.add(db_payment)
        self.db.flush()  # Get ID without committing
        return db_payment

    def get_payment_by_id(self, payment_id: str) -> Optional[Payment]:
        return self.db.query(Payment).filter(Payment.id == payment_id).first()

    def get_payment_for_update(self, payment_id: str) -> Optional[Payment]:
        """Fetch with a row lock held until the surrounding transaction ends"""
        return self.db.query(Payment).filter(Payment.id == payment_id).with_for_update().first()

    def update_payment(self, payment: Payment, **fields: Any) -> Payment:
        for name, value in fields.items():
            if not hasattr(Payment, name):
                raise AttributeError(f"Payment has no column {name!r}")
            setattr(payment, name, _column_value(value))
        self.db.flush()
        return payment

    def mark_paid_out(self, payment_id: str, payout_date: datetime, payout_reference: str) -> bool:
        """
        Flip commission_paid_out in a single conditional UPDATE.

        Returns:
            True if this call flipped the flag, False if it was already set
        """
        result = self.db.execute(
            update(Payment)
            .where(Payment.id == payment_id, Payment.commission_paid_out.is_(False))
            .values(
                commission_paid_out=True,
                payout_date=payout_date,
                payout_reference=payout_reference,
            )
            .execution_options(synchronize_session=False)
        )

        # Bring the cached row in line with what the UPDATE wrote
        payment = self.db.get(Payment, payment_id)
        if payment is not None:
            self.db.refresh(payment)
        return result.rowcount == 1

    def list_settled_payments(
        self,
        realtor_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        currency: Optional[str] = None,
    ) -> List[SettledPayment]:
        """Settled payments, optionally for one realtor or currency, created within [start, end]"""
        query = self.db.query(Payment).filter(Payment.status == PaymentStatus.SETTLED.value)
        if currency is not None:
            query = query.filter(Payment.currency == currency.upper())
        if realtor_id is not None:
            query = query.filter(Payment.realtor_id == realtor_id)
        if start is not None:
            query = query.filter(Payment.created_at >= start)
        if end is not None:
            query = query.filter(Payment.created_at <= end)

        return [to_settled_payment(p) for p in query.order_by(Payment.created_at).all()]


class AuditLogRepository:
    """Append-only audit trail"""

    def __init__(self, db: Session):
        self.db = db

    def append_entry(
        self,
        entity_type: str,
        entity_id: str,
        actor_id: str,
        details: AuditDetails,
    ) -> AuditLog:
        entry = AuditLog(
            action=details.action,
            entity_type=entity_type,
            entity_id=entity_id,
            actor_id=actor_id,
            details=details.to_dict(),
        )
        self.db.add(entry)
        self.db.flush()
        return entry

    def list_entries(self, entity_id: str, action: Optional[str] = None) -> List[AuditLog]:
        query = self.db.query(AuditLog).filter(AuditLog.entity_id == entity_id)
        if action is not None:
            query = query.filter(AuditLog.action == action)
        return query.order_by(AuditLog.created_at).all()
