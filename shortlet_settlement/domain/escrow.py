"""Escrow state rules and dispute windows"""

from datetime import datetime, timedelta
from typing import Dict, FrozenSet

from shortlet_settlement.domain.exceptions import PreconditionFailedError
from shortlet_settlement.domain.models import PaymentStatus
from shortlet_settlement.utils.date_utils import as_utc

COMMISSION_ELIGIBLE_STATUSES: FrozenSet[PaymentStatus] = frozenset(
    {PaymentStatus.HELD, PaymentStatus.PARTIALLY_RELEASED, PaymentStatus.SETTLED}
)

ALLOWED_TRANSITIONS: Dict[PaymentStatus, FrozenSet[PaymentStatus]] = {
    PaymentStatus.INITIATED: frozenset({PaymentStatus.HELD, PaymentStatus.FAILED}),
    PaymentStatus.HELD: frozenset({PaymentStatus.PARTIALLY_RELEASED, PaymentStatus.REFUNDED}),
    PaymentStatus.PARTIALLY_RELEASED: frozenset({PaymentStatus.SETTLED}),
    PaymentStatus.SETTLED: frozenset(),
    PaymentStatus.FAILED: frozenset(),
    PaymentStatus.REFUNDED: frozenset(),
}

GUEST_DISPUTE_WINDOW = timedelta(hours=1)
REALTOR_DISPUTE_WINDOW = timedelta(hours=48)


def ensure_commission_allowed(status: PaymentStatus) -> None:
    if PaymentStatus(status) not in COMMISSION_ELIGIBLE_STATUSES:
        raise PreconditionFailedError("Cannot calculate commission for incomplete payment")


def ensure_transition(current: PaymentStatus, target: PaymentStatus) -> None:
    current, target = PaymentStatus(current), PaymentStatus(target)
    if target not in ALLOWED_TRANSITIONS[current]:
        raise PreconditionFailedError(f"Invalid escrow transition {current.value} -> {target.value}")


def is_guest_dispute_window_open(
    check_in_at: datetime,
    now: datetime,
    window: timedelta = GUEST_DISPUTE_WINDOW,
) -> bool:
    """Guest can raise a dispute until `window` after check-in (room fee still held)"""
    return as_utc(now) < as_utc(check_in_at) + window


def is_realtor_dispute_window_open(
    check_out_at: datetime,
    now: datetime,
    window: timedelta = REALTOR_DISPUTE_WINDOW,
) -> bool:
    """Realtor can claim damages until `window` after check-out (deposit still held)"""
    return as_utc(now) < as_utc(check_out_at) + window
