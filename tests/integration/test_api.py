"""End-to-end tests through the HTTP API"""

import pytest
from decimal import Decimal
from shortlet_settlement.domain.models import PaymentStatus


def test_health_check(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client):
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "http_request_duration_seconds" in response.text


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_quote_breakdown(client):
    response = client.post(
        "/v1/quotes",
        json={
            "price_per_night": "50000",
            "number_of_nights": 2,
            "cleaning_fee": "10000",
            "security_deposit": "20000",
        },
    )

    assert response.status_code == 200
    data = response.json()
    assert data["currency"] == "NGN"
    assert data["subtotal"] == "110000.00"
    assert data["service_fee"] == "2200.00"
    assert data["platform_fee"] == "10000.00"
    assert data["total_amount"] == "132200.00"
    assert data["room_fee_split_realtor"] == "90000.00"
    assert data["room_fee_split_platform"] == "10000.00"
    assert data["total_realtor_earnings"] == "100000.00"


def test_quote_rejects_negative_price(client):
    response = client.post("/v1/quotes", json={"price_per_night": "-1", "number_of_nights": 1})
    assert response.status_code == 422


def test_refund_preview(client):
    response = client.post("/v1/disputes/refund", json={"tier": "TIER_2_PARTIAL", "room_fee": "100000"})

    assert response.status_code == 200
    assert response.json()["refund_amount"] == "30000.00"


def test_refund_preview_unknown_tier(client):
    response = client.post("/v1/disputes/refund", json={"tier": "TIER_9", "room_fee": "100000"})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_ARGUMENT"


@pytest.mark.parametrize(
    "damage,realtor_gets,guest_refund,capped",
    [
        ("25000", "20000.00", "0.00", True),
        ("5000", "5000.00", "15000.00", False),
    ],
)
def test_deposit_deduction_preview(client, damage, realtor_gets, guest_refund, capped):
    response = client.post(
        "/v1/disputes/deposit-deduction",
        json={"damage_amount": damage, "deposit_amount": "20000"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["realtor_gets"] == realtor_gets
    assert data["guest_refund"] == guest_refund
    assert data["is_liability_capped"] is capped


def test_get_unknown_payment(client):
    response = client.get("/v1/payments/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"detail": "Payment not found", "code": "NOT_FOUND"}


def test_commission_refused_for_incomplete_payment(client, make_payment):
    payment = make_payment(status=PaymentStatus.INITIATED)

    response = client.post(f"/v1/payments/{payment.id}/commission", json={})

    assert response.status_code == 400
    assert response.json()["detail"] == "Cannot calculate commission for incomplete payment"


def test_commission_rejects_out_of_range_rate(client, make_payment):
    payment = make_payment(status=PaymentStatus.HELD)

    response = client.post(f"/v1/payments/{payment.id}/commission", json={"custom_rate": "1.5"})

    assert response.status_code == 422


def test_settlement_flow_through_payout(client, make_payment, notifier):
    payment = make_payment()
    payment_id = payment.id

    held = client.post(f"/v1/payments/{payment_id}/hold")
    assert held.status_code == 200
    assert held.json()["status"] == "HELD"
    assert held.json()["service_fee"] == "2200.00"

    released = client.post(f"/v1/payments/{payment_id}/release-room-fee", json={})
    assert released.status_code == 200
    assert released.json()["room_fee_split_realtor"] == "90000.00"
    assert released.json()["room_fee_in_escrow"] is False

    settled = client.post(f"/v1/payments/{payment_id}/release-deposit", json={"damage_amount": "5000"})
    assert settled.status_code == 200
    assert settled.json()["status"] == "SETTLED"
    assert settled.json()["deposit_to_realtor"] == "5000.00"
    assert settled.json()["deposit_refunded"] == "15000.00"

    commission = client.post(f"/v1/payments/{payment_id}/commission", json={})
    assert commission.status_code == 200
    assert commission.json()["platform_commission"] == "9100.00"
    assert commission.json()["realtor_earnings"] == "120900.00"

    payout = client.post(f"/v1/payments/{payment_id}/payout", json={"payout_reference": "TRF_001"})
    assert payout.status_code == 200
    assert payout.json()["payout_reference"] == "TRF_001"
    assert payout.json()["amount"] == "120900.00"
    notifier.send_realtor_payout.assert_awaited_once()

    again = client.post(f"/v1/payments/{payment_id}/payout", json={})
    assert again.status_code == 409
    assert again.json()["code"] == "CONFLICT"
    notifier.send_realtor_payout.assert_awaited_once()

    state = client.get(f"/v1/payments/{payment_id}").json()
    assert state["commission_paid_out"] is True
    assert state["payout_reference"] == "TRF_001"


def test_payout_succeeds_when_email_fails(client, settled_payment, notifier):
    notifier.send_realtor_payout.side_effect = RuntimeError("smtp down")

    response = client.post(f"/v1/payments/{settled_payment.id}/payout", json={})

    assert response.status_code == 200
    assert response.json()["payout_reference"].startswith("PAYOUT_")


def test_out_of_order_step_is_refused(client, make_payment):
    payment = make_payment()

    response = client.post(f"/v1/payments/{payment.id}/release-deposit", json={})

    assert response.status_code == 400
    assert response.json()["code"] == "PRECONDITION_FAILED"


def test_realtor_report(client, settled_payment):
    response = client.get("/v1/reports/realtors/realtor_1")

    assert response.status_code == 200
    data = response.json()
    assert data["booking_count"] == 1
    assert data["total_earnings"] == "120900.00"
    assert data["pending_payouts"] == "120900.00"
    assert data["completed_payouts"] == "0.00"


def test_platform_report_rejects_inverted_range(client):
    response = client.get("/v1/reports/platform", params={"start_date": "2026-03-01", "end_date": "2026-02-01"})

    assert response.status_code == 400


def test_realtor_report_per_currency(client, settled_payment, make_payment):
    make_payment(
        room_fee="100",
        cleaning_fee="10",
        security_deposit="20",
        currency="USD",
        status=PaymentStatus.SETTLED,
        booking_id="booking_usd",
        realtor_earnings=Decimal("120.90"),
    )

    ngn = client.get("/v1/reports/realtors/realtor_1")
    usd = client.get("/v1/reports/realtors/realtor_1", params={"currency": "USD"})

    assert ngn.status_code == 200
    assert ngn.json()["booking_count"] == 1
    assert ngn.json()["total_earnings"] == "120900.00"
    assert usd.status_code == 200
    assert usd.json()["currency"] == "USD"
    assert usd.json()["total_earnings"] == "120.90"
