"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, asdict
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from shortlet_settlement.domain.money import Money


class PaymentStatus(str, Enum):
    """Lifecycle of a booking payment"""

    INITIATED = "INITIATED"
    HELD = "HELD"
    PARTIALLY_RELEASED = "PARTIALLY_RELEASED"
    SETTLED = "SETTLED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class DisputeTier(str, Enum):
    """Admin classification of a guest complaint"""

    TIER_1_SEVERE = "TIER_1_SEVERE"  # inaccessible, fraudulent or uninhabitable
    TIER_2_PARTIAL = "TIER_2_PARTIAL"  # missing amenities, broken non-blocking equipment
    TIER_3_ABUSE = "TIER_3_ABUSE"  # unsubstantiated, abusive or late claim


@dataclass(frozen=True)
class FeeComponents:
    """Guest-facing price breakdown for one booking"""

    room_fee: Money
    cleaning_fee: Money
    security_deposit: Money


@dataclass(frozen=True)
class CommissionBreakdown:
    """Who gets what, and when, for one booking payment"""

    room_fee: Money
    cleaning_fee: Money
    security_deposit: Money
    subtotal: Money  # room_fee + cleaning_fee
    service_fee: Money  # 2% of subtotal
    platform_fee: Money  # 10% of room fee
    total_amount: Money  # subtotal + service_fee + security_deposit

    # Released at payment verification
    cleaning_fee_to_realtor: Money
    service_fee_to_platform: Money

    # Held in escrow
    room_fee_in_escrow: Money
    deposit_in_escrow: Money

    # Released after the guest dispute window
    room_fee_split_realtor: Money
    room_fee_split_platform: Money

    total_realtor_earnings: Money  # cleaning_fee + 90% of room fee


@dataclass(frozen=True)
class LegacyBreakdown:
    """Flat-rate commission against the full booking total (deprecated path)"""

    total_amount: Money
    platform_commission: Money
    payment_processing_fee: Money  # always zero, gateway fees are charged to the guest
    realtor_earnings: Money
    commission_rate: Decimal


@dataclass(frozen=True)
class DepositDeductionResult:
    """Split of a security deposit after a realtor damage claim"""

    realtor_gets: Money
    guest_refund: Money
    is_liability_capped: bool


@dataclass(frozen=True)
class SettledPayment:
    """Read-only snapshot of a settled payment used for reporting"""

    payment_id: str
    realtor_id: str
    amount: Money
    platform_commission: Optional[Money]
    realtor_earnings: Optional[Money]
    commission_paid_out: bool
    created_at: datetime


@dataclass(frozen=True)
class CommissionReport:
    """Per-realtor commission totals over a date range"""

    realtor_id: str
    total_earnings: Money
    total_commission_paid: Money
    pending_payouts: Money
    completed_payouts: Money
    payout_count: int
    booking_count: int


@dataclass(frozen=True)
class PlatformCommissionReport:
    """Platform-wide commission totals over a date range"""

    total_revenue: Money
    total_commissions: Money
    total_payouts: Money
    pending_payouts: Money
    total_bookings: int
    active_realtors: int


@dataclass(frozen=True)
class PayoutResult:
    """Outcome of a successful realtor payout"""

    payment_id: str
    realtor_id: str
    amount: Money
    payout_reference: str
    payout_date: datetime


# Audit log payloads. Each action has its own versioned shape so readers of the
# audit trail can dispatch on the action column.


@dataclass(frozen=True)
class PayoutProcessedDetails:
    realtor_id: str
    amount: str
    currency: str
    payout_reference: str
    schema_version: int = 1

    action = "PAYOUT_PROCESSED"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CommissionAttachedDetails:
    platform_commission: str
    commission_rate: str
    realtor_earnings: str
    currency: str
    schema_version: int = 1

    action = "COMMISSION_ATTACHED"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class EscrowTransitionDetails:
    step: str
    from_status: str
    to_status: str
    amounts: Dict[str, str]
    schema_version: int = 1

    action = "ESCROW_TRANSITION"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
