"""Prometheus metrics for settlement steps, payouts and notification delivery"""

from prometheus_client import Counter, Histogram

# Settlement metrics
settlement_transition_counter = Counter(
    "settlement_transitions_total",
    "Escrow state transitions applied",
    ["step"],  # hold_funds | release_room_fee | guest_dispute | release_deposit
)

commission_attached_counter = Counter(
    "commission_attached_total",
    "Flat-rate commissions written onto payments",
)

dispute_refund_counter = Counter(
    "dispute_refunds_total",
    "Guest disputes resolved by tier",
    ["tier"],
)

# Payout metrics
payout_counter = Counter(
    "payouts_total",
    "Realtor payout attempts",
    ["outcome"],  # processed | conflict
)

payout_amount_histogram = Histogram(
    "payout_amount",
    "Realtor payout amounts in major currency units",
    buckets=[10_000, 50_000, 100_000, 250_000, 500_000, 1_000_000, 5_000_000],
)

# Notification metrics
notification_latency_histogram = Histogram(
    "notification_latency_seconds",
    "Email service response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

notification_failure_counter = Counter(
    "payout_notification_failures_total",
    "Payout notifications that could not be delivered",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payout(processed: bool, amount: float = 0.0) -> None:
    """Record payout outcome; amount only observed for processed payouts"""
    if processed:
        payout_counter.labels(outcome="processed").inc()
        payout_amount_histogram.observe(amount)
    else:
        payout_counter.labels(outcome="conflict").inc()
