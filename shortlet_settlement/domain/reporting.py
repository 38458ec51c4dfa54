"""Commission report aggregation over settled payments"""

from typing import Iterable, List, Optional

from shortlet_settlement.domain.models import CommissionReport, PlatformCommissionReport, SettledPayment
from shortlet_settlement.domain.money import DEFAULT_CURRENCY, Money


def _sum(values: Iterable[Optional[Money]], currency: str) -> Money:
    total = Money.zero(currency)
    for value in values:
        if value is not None:
            total = total + value
    return total


def build_realtor_report(
    realtor_id: str,
    payments: List[SettledPayment],
    currency: str = DEFAULT_CURRENCY,
) -> CommissionReport:
    """
    Roll up one realtor's settled payments.

    Payments without computed earnings or commission count as zero.
    pending = total earnings - earnings already paid out.
    """
    paid_out = [p for p in payments if p.commission_paid_out]

    total_earnings = _sum((p.realtor_earnings for p in payments), currency)
    completed_payouts = _sum((p.realtor_earnings for p in paid_out), currency)

    return CommissionReport(
        realtor_id=realtor_id,
        total_earnings=total_earnings,
        total_commission_paid=_sum((p.platform_commission for p in payments), currency),
        pending_payouts=total_earnings - completed_payouts,
        completed_payouts=completed_payouts,
        payout_count=len(paid_out),
        booking_count=len(payments),
    )


def build_platform_report(
    payments: List[SettledPayment],
    currency: str = DEFAULT_CURRENCY,
) -> PlatformCommissionReport:
    """Roll up every settled payment into platform-wide totals"""
    total_earnings = _sum((p.realtor_earnings for p in payments), currency)
    completed_payouts = _sum((p.realtor_earnings for p in payments if p.commission_paid_out), currency)

    return PlatformCommissionReport(
        total_revenue=_sum((p.amount for p in payments), currency),
        total_commissions=_sum((p.platform_commission for p in payments), currency),
        total_payouts=completed_payouts,
        pending_payouts=total_earnings - completed_payouts,
        total_bookings=len(payments),
        active_realtors=len({p.realtor_id for p in payments}),
    )
