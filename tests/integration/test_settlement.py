"""Integration tests for the settlement orchestrator against the test database"""

import pytest
from datetime import timedelta
from decimal import Decimal
from shortlet_settlement.domain.exceptions import InvalidArgumentError, NotFoundError, PreconditionFailedError
from shortlet_settlement.domain.models import PaymentStatus
from shortlet_settlement.domain.money import Money
from shortlet_settlement.infrastructure.database.repositories import AuditLogRepository
from shortlet_settlement.services.settlement import SettlementOrchestrator


@pytest.fixture
def orchestrator(db, clock):
    return SettlementOrchestrator(db, clock=clock)


@pytest.mark.parametrize("status", [PaymentStatus.HELD, PaymentStatus.PARTIALLY_RELEASED, PaymentStatus.SETTLED])
def test_attach_commission_writes_legacy_fields(orchestrator, make_payment, status):
    """7% of the 130000 legacy total"""
    payment = make_payment(status=status)

    breakdown = orchestrator.attach_commission(payment.id)

    assert breakdown.platform_commission == Money(9100)
    assert payment.platform_commission == Decimal("9100.00")
    assert payment.realtor_earnings == Decimal("120900.00")
    assert payment.commission_rate == Decimal("0.07")


def test_attach_commission_custom_rate(orchestrator, make_payment):
    payment = make_payment(status=PaymentStatus.HELD)

    orchestrator.attach_commission(payment.id, custom_rate=Decimal("0.10"))

    assert payment.platform_commission == Decimal("13000.00")
    assert payment.realtor_earnings == Decimal("117000.00")


@pytest.mark.parametrize("status", [PaymentStatus.INITIATED, PaymentStatus.FAILED, PaymentStatus.REFUNDED])
def test_attach_commission_refused_for_incomplete_payment(orchestrator, make_payment, status):
    payment = make_payment(status=status)

    with pytest.raises(PreconditionFailedError, match="incomplete payment"):
        orchestrator.attach_commission(payment.id)
    assert payment.realtor_earnings is None


def test_attach_commission_missing_payment(orchestrator, db):
    with pytest.raises(NotFoundError):
        orchestrator.attach_commission("does-not-exist")


def test_attach_commission_writes_audit_entry(orchestrator, make_payment, db):
    payment = make_payment(status=PaymentStatus.SETTLED)

    orchestrator.attach_commission(payment.id)

    entries = AuditLogRepository(db).list_entries(payment.id, action="COMMISSION_ATTACHED")
    assert len(entries) == 1
    assert entries[0].details["platform_commission"] == "9100.00"
    assert entries[0].details["schema_version"] == 1


def test_full_escrow_lifecycle(orchestrator, make_payment, db):
    """hold -> release room fee -> release deposit with no damage"""
    payment = make_payment()

    orchestrator.hold_funds(payment.id)
    assert payment.status == PaymentStatus.HELD.value
    assert payment.service_fee == Decimal("2200.00")
    assert payment.platform_fee == Decimal("10000.00")
    assert payment.room_fee_in_escrow is True
    assert payment.deposit_in_escrow is True

    orchestrator.release_room_fee(payment.id)
    assert payment.status == PaymentStatus.PARTIALLY_RELEASED.value
    assert payment.room_fee_split_realtor == Decimal("90000.00")
    assert payment.room_fee_split_platform == Decimal("10000.00")
    assert payment.room_fee_in_escrow is False

    result = orchestrator.release_deposit(payment.id)
    assert payment.status == PaymentStatus.SETTLED.value
    assert result.guest_refund == Money(20000)
    assert payment.deposit_refunded == Decimal("20000.00")
    assert payment.deposit_to_realtor == Decimal("0.00")
    assert payment.deposit_in_escrow is False

    steps = [e.details["step"] for e in AuditLogRepository(db).list_entries(payment.id, action="ESCROW_TRANSITION")]
    assert sorted(steps) == ["hold_funds", "release_deposit", "release_room_fee"]


def test_release_room_fee_before_hold_is_refused(orchestrator, make_payment):
    payment = make_payment()

    with pytest.raises(PreconditionFailedError):
        orchestrator.release_room_fee(payment.id)


def test_release_room_fee_waits_for_guest_window(orchestrator, make_payment, clock):
    payment = make_payment()
    orchestrator.hold_funds(payment.id)

    with pytest.raises(PreconditionFailedError, match="Guest dispute window"):
        orchestrator.release_room_fee(payment.id, check_in_at=clock() - timedelta(minutes=30))

    orchestrator.release_room_fee(payment.id, check_in_at=clock() - timedelta(hours=2))
    assert payment.status == PaymentStatus.PARTIALLY_RELEASED.value


def test_resolve_guest_dispute_partial(orchestrator, make_payment):
    """30% refund, remaining 70000 split 90/10"""
    payment = make_payment()
    orchestrator.hold_funds(payment.id)

    refund = orchestrator.resolve_guest_dispute(payment.id, "TIER_2_PARTIAL")

    assert refund == Money(30000)
    assert payment.room_fee_refunded == Decimal("30000.00")
    assert payment.room_fee_split_realtor == Decimal("63000.00")
    assert payment.room_fee_split_platform == Decimal("7000.00")
    assert payment.status == PaymentStatus.PARTIALLY_RELEASED.value


def test_resolve_guest_dispute_after_release_is_refused(orchestrator, make_payment):
    payment = make_payment()
    orchestrator.hold_funds(payment.id)
    orchestrator.release_room_fee(payment.id)

    with pytest.raises(PreconditionFailedError):
        orchestrator.resolve_guest_dispute(payment.id, "TIER_1_SEVERE")


def test_resolve_guest_dispute_unknown_tier(orchestrator, make_payment):
    payment = make_payment()
    orchestrator.hold_funds(payment.id)

    with pytest.raises(InvalidArgumentError):
        orchestrator.resolve_guest_dispute(payment.id, "TIER_9")
    assert payment.room_fee_in_escrow is True


def test_release_deposit_with_damage_above_deposit(orchestrator, make_payment):
    payment = make_payment()
    orchestrator.hold_funds(payment.id)
    orchestrator.release_room_fee(payment.id)

    result = orchestrator.release_deposit(payment.id, damage_amount=Decimal("25000"))

    assert result.is_liability_capped is True
    assert payment.deposit_to_realtor == Decimal("20000.00")
    assert payment.deposit_refunded == Decimal("0.00")


def test_release_deposit_waits_for_realtor_window(orchestrator, make_payment, clock):
    payment = make_payment()
    orchestrator.hold_funds(payment.id)
    orchestrator.release_room_fee(payment.id)

    with pytest.raises(PreconditionFailedError, match="Realtor dispute window"):
        orchestrator.release_deposit(payment.id, check_out_at=clock() - timedelta(hours=3))


def test_release_deposit_damage_claim_ignores_window(orchestrator, make_payment, clock):
    """A resolved damage claim settles the deposit without waiting"""
    payment = make_payment()
    orchestrator.hold_funds(payment.id)
    orchestrator.release_room_fee(payment.id)

    result = orchestrator.release_deposit(
        payment.id, damage_amount=Money(5000), check_out_at=clock() - timedelta(hours=3)
    )

    assert result.realtor_gets == Money(5000)
    assert result.guest_refund == Money(15000)
