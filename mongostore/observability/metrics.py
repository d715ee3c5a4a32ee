"""Prometheus metrics for mongostore.

Counts session operations, their latency, connection attempts and the
work done by the expiration sweeper.
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import Counter, Histogram

# Session operation metrics
SESSION_OPERATIONS = Counter(
    "mongostore_session_operations_total",
    "Total number of session store operations",
    labelnames=["operation", "outcome"],
)

SESSION_OPERATION_LATENCY = Histogram(
    "mongostore_session_operation_latency_seconds",
    "Session store operation latency in seconds",
    labelnames=["operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

# Connection metrics
CONNECTION_ATTEMPTS = Counter(
    "mongostore_connection_attempts_total",
    "Total number of connect/authenticate/resolve sequences",
    labelnames=["outcome"],
)

# Sweeper metrics
EXPIRED_SESSIONS_SWEPT = Counter(
    "mongostore_expired_sessions_swept_total",
    "Total number of expired session records removed by the sweeper",
)

SWEEP_ERRORS = Counter(
    "mongostore_sweep_errors_total",
    "Total number of failed sweeper ticks",
)


@contextmanager
def track_operation(operation: str) -> Iterator[None]:
    """Count a session operation and observe its latency.

    Usage:
        with track_operation("get"):
            ...
    """
    start = time.perf_counter()
    outcome = "error"
    try:
        yield
        outcome = "ok"
    finally:
        SESSION_OPERATIONS.labels(operation=operation, outcome=outcome).inc()
        SESSION_OPERATION_LATENCY.labels(operation=operation).observe(
            time.perf_counter() - start
        )
