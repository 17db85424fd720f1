"""Prometheus metrics for monitoring quotes, auto-approval rates and backend calls"""

from prometheus_client import Counter, Histogram

# Pricing metrics
quote_counter = Counter(
    "rental_quote_total",
    "Total pricing quotes computed",
    ["tier", "outcome"],  # daily | weekly | monthly ; auto_approved | manual_review
)

quote_total_histogram = Histogram(
    "rental_quote_amount",
    "Quoted grand totals",
    buckets=[100, 250, 500, 1000, 2500, 5000, 10000, 25000],
)

reservation_counter = Counter(
    "rental_reservation_total",
    "Instant-booking reservations created",
    ["status"],  # confirmed | pending_approval
)

agreement_draft_counter = Counter(
    "rental_agreement_draft_total",
    "Agreement drafts produced from bookings",
    ["source"],  # instant_booking | reservation | request
)

# Hosted backend metrics
backend_fetch_failures_counter = Counter(
    "backend_fetch_failures_total",
    "Failed hosted backend calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_quote(tier: str, approved: bool, total: float) -> None:
    """Record quote metrics for monitoring auto-approval rates and tier mix"""
    outcome = "auto_approved" if approved else "manual_review"
    quote_counter.labels(tier=tier, outcome=outcome).inc()
    quote_total_histogram.observe(total)
