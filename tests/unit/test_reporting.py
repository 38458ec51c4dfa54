"""Unit tests for commission report aggregation"""

from datetime import datetime, timezone
from shortlet_settlement.domain.models import SettledPayment
from shortlet_settlement.domain.money import Money
from shortlet_settlement.domain.reporting import build_platform_report, build_realtor_report

CREATED = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _payment(payment_id, realtor_id, amount, commission, earnings, paid_out):
    return SettledPayment(
        payment_id=payment_id,
        realtor_id=realtor_id,
        amount=Money(amount),
        platform_commission=Money(commission) if commission is not None else None,
        realtor_earnings=Money(earnings) if earnings is not None else None,
        commission_paid_out=paid_out,
        created_at=CREATED,
    )


def test_realtor_report_splits_pending_and_completed():
    payments = [
        _payment("p1", "r1", "100000", "7000", "93000", True),
        _payment("p2", "r1", "50000", "3500", "46500", False),
    ]

    report = build_realtor_report("r1", payments)

    assert report.total_earnings == Money(139500)
    assert report.total_commission_paid == Money(10500)
    assert report.completed_payouts == Money(93000)
    assert report.pending_payouts == Money(46500)
    assert report.payout_count == 1
    assert report.booking_count == 2


def test_realtor_report_counts_missing_earnings_as_zero():
    """Settled payment whose commission was never attached"""
    report = build_realtor_report("r1", [_payment("p1", "r1", "100000", None, None, False)])

    assert report.total_earnings == Money(0)
    assert report.total_commission_paid == Money(0)
    assert report.pending_payouts == Money(0)
    assert report.booking_count == 1


def test_realtor_report_empty():
    report = build_realtor_report("r1", [])

    assert report.total_earnings == Money(0)
    assert report.pending_payouts == Money(0)
    assert report.booking_count == 0


def test_platform_report_totals_and_active_realtors():
    payments = [
        _payment("p1", "r1", "100000", "7000", "93000", True),
        _payment("p2", "r1", "50000", "3500", "46500", False),
        _payment("p3", "r2", "20000", "1400", "18600", True),
    ]

    report = build_platform_report(payments)

    assert report.total_revenue == Money(170000)
    assert report.total_commissions == Money(11900)
    assert report.total_payouts == Money(111600)
    assert report.pending_payouts == Money(46500)
    assert report.total_bookings == 3
    assert report.active_realtors == 2


def test_pending_payouts_never_negative():
    payments = [_payment(f"p{i}", "r1", "1000", "70", "930", i % 2 == 0) for i in range(6)]

    assert build_realtor_report("r1", payments).pending_payouts >= Money(0)
    assert build_platform_report(payments).pending_payouts >= Money(0)
