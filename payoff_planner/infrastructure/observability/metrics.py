"""Prometheus metrics for calculations, payment distribution and collaborator health"""

from prometheus_client import Counter, Histogram

# Calculation metrics
calculation_counter = Counter(
    "payoff_calculation_total",
    "Total calculation requests",
    ["outcome"],  # created | cached | no_debts | insufficient_payment | runaway | upstream_error
)

simulation_months_histogram = Histogram(
    "payoff_simulation_months",
    "Months needed to pay off all debts, per strategy",
    ["strategy"],
    buckets=[6, 12, 24, 36, 60, 120, 240, 600, 1200],
)

# Payment metrics
distribution_counter = Counter(
    "payoff_distribution_total",
    "Lump-sum payment distributions",
    ["strategy", "outcome"],  # recorded | failed
)

# Plan tracking
plan_status_counter = Counter(
    "payoff_plan_status_total",
    "Reconciled active plan statuses",
    ["status"],  # on_track | outdated | complete
)

# Notification metrics
notification_latency_histogram = Histogram(
    "notification_latency_seconds",
    "Notification webhook response time",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

notification_failure_counter = Counter(
    "notification_failures_total",
    "Failed notification deliveries",
)

event_publish_failures_counter = Counter(
    "event_publish_failures_total",
    "Report-created events that could not be handed to the event sink",
)

# Debt source metrics
upstream_failures_counter = Counter(
    "upstream_failures_total",
    "Failed debt source or store calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_calculation(outcome: str, months_by_strategy: dict[str, int] | None = None) -> None:
    """Record calculation outcome and, for fresh reports, the payoff horizon per strategy"""
    calculation_counter.labels(outcome=outcome).inc()

    for strategy, months in (months_by_strategy or {}).items():
        simulation_months_histogram.labels(strategy=strategy).observe(months)
