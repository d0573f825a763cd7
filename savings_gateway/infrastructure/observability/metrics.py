"""Prometheus metrics for transaction volume, buffer health and recalculation performance"""

from prometheus_client import Counter, Histogram

from savings_gateway.domain.engine import INCOME_WORKFLOW
from savings_gateway.domain.models import Recalculation

# Transaction metrics
transaction_counter = Counter(
    "savings_transactions_total",
    "Total transactions processed",
    ["kind"],  # income | expense
)

buffer_status_counter = Counter(
    "savings_buffer_status_total",
    "Buffer classifications produced by recalculations",
    ["status"],  # CRITICAL | LOW | MODERATE | HEALTHY
)

# Advisory metrics
surplus_counter = Counter(
    "savings_surplus_advisories_total",
    "Income events that produced a surplus allocation",
)

overspending_counter = Counter(
    "savings_overspending_advisories_total",
    "Expense events that exceeded the daily spending buffer",
)

# Workflow health
workflow_failure_counter = Counter(
    "savings_workflow_failures_total",
    "Recalculation workflows that failed and were rolled back",
    ["workflow"],
)

concurrency_conflict_counter = Counter(
    "savings_concurrency_conflicts_total",
    "Optimistic-lock conflicts that forced a workflow retry",
)

recalculation_latency_histogram = Histogram(
    "savings_recalculation_seconds",
    "Time to load, recalculate and persist one transaction event",
    ["workflow"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_recalculation(recalculation: Recalculation, duration_seconds: float) -> None:
    """Record metrics for a committed recalculation"""
    kind = "income" if recalculation.workflow == INCOME_WORKFLOW else "expense"
    transaction_counter.labels(kind=kind).inc()
    buffer_status_counter.labels(status=recalculation.buffer.status.value).inc()
    recalculation_latency_histogram.labels(workflow=recalculation.workflow).observe(duration_seconds)

    if recalculation.surplus is not None:
        surplus_counter.inc()
    if recalculation.overspending is not None:
        overspending_counter.inc()
