"""SQLAlchemy ORM models for payments and the audit trail"""

import uuid
from sqlalchemy import Column, String, Boolean, Numeric, DateTime, Text, JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

from shortlet_settlement.domain.models import PaymentStatus

Base = declarative_base()

MONEY = Numeric(12, 2)


def _uuid_str() -> str:
    return str(uuid.uuid4())


class Payment(Base):
    """Booking payment and the settlement fields computed for it"""

    __tablename__ = "payment"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    booking_id = Column(Text, nullable=False, index=True)
    realtor_id = Column(Text, nullable=False, index=True)
    realtor_email = Column(Text, nullable=True)
    realtor_business_name = Column(Text, nullable=True)
    currency = Column(String(3), nullable=False, default="NGN")
    status = Column(String(32), nullable=False, default=PaymentStatus.INITIATED.value, index=True)

    # Guest-facing amounts, fixed at booking time
    amount = Column(MONEY, nullable=False)  # legacy gross total
    room_fee = Column(MONEY, nullable=False, default=0)
    cleaning_fee = Column(MONEY, nullable=False, default=0)
    security_deposit = Column(MONEY, nullable=False, default=0)

    # Flat-rate commission
    platform_commission = Column(MONEY, nullable=True)
    commission_rate = Column(Numeric(5, 4), nullable=True)
    realtor_earnings = Column(MONEY, nullable=True)

    # Escrow
    service_fee = Column(MONEY, nullable=True)
    platform_fee = Column(MONEY, nullable=True)
    room_fee_in_escrow = Column(Boolean, nullable=False, default=False)
    deposit_in_escrow = Column(Boolean, nullable=False, default=False)
    room_fee_split_realtor = Column(MONEY, nullable=True)
    room_fee_split_platform = Column(MONEY, nullable=True)
    room_fee_refunded = Column(MONEY, nullable=True)
    deposit_to_realtor = Column(MONEY, nullable=True)
    deposit_refunded = Column(MONEY, nullable=True)

    # Payout
    commission_paid_out = Column(Boolean, nullable=False, default=False)
    payout_date = Column(DateTime(timezone=True), nullable=True)
    payout_reference = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())


class AuditLog(Base):
    """Append-only audit trail entry"""

    __tablename__ = "audit_log"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    action = Column(Text, nullable=False, index=True)
    entity_type = Column(Text, nullable=False)
    entity_id = Column(Text, nullable=False, index=True)
    actor_id = Column(Text, nullable=False)
    details = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
