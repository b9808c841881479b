"""Prometheus metrics definitions for s3acl.

All metrics use the ``s3acl_`` prefix. They are registered in the global
``prometheus_client`` registry only once ``init_metrics()`` has been called;
until then the module-level references stay ``None`` and the client records
nothing.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# Flag indicating whether metrics have been initialised via init_metrics().
_initialized: bool = False

# ---------------------------------------------------------------------------
# Request counter  (labels: operation, method, status)
# ---------------------------------------------------------------------------
requests_total: Counter | None = None

# ---------------------------------------------------------------------------
# Request latency  (labels: operation)
# ---------------------------------------------------------------------------
request_duration_seconds: Histogram | None = None


def init_metrics() -> None:
    """Create and register all Prometheus metrics.

    Safe to call more than once; later calls are no-ops.
    """
    global _initialized
    global requests_total, request_duration_seconds

    if _initialized:
        return

    requests_total = Counter(
        "s3acl_requests_total",
        "Total S3 requests sent by operation, method and response status",
        ["operation", "method", "status"],
    )

    request_duration_seconds = Histogram(
        "s3acl_request_duration_seconds",
        "S3 request round-trip latency in seconds",
        ["operation"],
    )

    _initialized = True


def observe_request(operation: str, method: str, status: int, duration: float) -> None:
    """Record one completed request when metrics are enabled."""
    if requests_total is not None:
        requests_total.labels(operation=operation, method=method, status=str(status)).inc()
    if request_duration_seconds is not None:
        request_duration_seconds.labels(operation=operation).observe(duration)
