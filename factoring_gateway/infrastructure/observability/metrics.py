"""Prometheus metrics for monitoring offer volume, rejections, settlements and payouts"""

from prometheus_client import Counter, Histogram

# Offer metrics
offer_created_counter = Counter(
    "factoring_offer_created_total",
    "Total offers created",
    ["tier_id"],
)

offer_rejection_counter = Counter(
    "factoring_offer_rejected_total",
    "Offer requests rejected by a tier bound",
    ["check"],  # tenure | advance_fee | discount_fee | factoring_fee | invoice_amount | available_amount
)

advanced_amount_histogram = Histogram(
    "factoring_advanced_amount",
    "Advanced amount per offer in asset units",
    buckets=[10_000, 100_000, 1_000_000, 5_000_000, 10_000_000, 50_000_000],
)

# Settlement metrics
settlement_counter = Counter(
    "factoring_settlement_total",
    "Offers settled",
    ["timeliness"],  # on_time | late
)

settlement_fees_counter = Counter(
    "factoring_settlement_fees_total",
    "Fees collected at settlement in asset units",
)

# Payments metrics
payout_failure_counter = Counter(
    "payout_failures_total",
    "Failed payout instructions",
    ["operation"],  # create_offer | reserve_refund
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_offer_created(tier_id: str, advanced_amount: int) -> None:
    offer_created_counter.labels(tier_id=tier_id).inc()
    advanced_amount_histogram.observe(advanced_amount)


def record_rejection(check: str) -> None:
    offer_rejection_counter.labels(check=check).inc()


def record_settlement(number_of_late_days: int, total_calculated_fees: int) -> None:
    """Record settlement outcome for monitoring late payment rates"""
    timeliness = "late" if number_of_late_days > 0 else "on_time"
    settlement_counter.labels(timeliness=timeliness).inc()
    settlement_fees_counter.inc(total_calculated_fees)
