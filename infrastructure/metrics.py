"""Prometheus metrics for the studio assistant.

Metrics:
    gateway_requests_total          Counter by endpoint (chat/analyze_mix) and HTTP status
    gateway_latency_seconds         Histogram of end-to-end gateway latency
    transcriptions_total            Counter by outcome (ok/degraded)
    project_store_errors_total      Counter of store failures by operation

Usage::

    from infrastructure.metrics import LatencyTimer, record_gateway_request

    with LatencyTimer() as t:
        reply = gateway.reply(...)
    record_gateway_request(endpoint="chat", status=reply.status_code, latency_seconds=t.elapsed)
"""

from __future__ import annotations

import logging
import time

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

logger = logging.getLogger(__name__)

_REGISTRY = CollectorRegistry()

gateway_requests_total = Counter(
    "dh_gateway_requests_total",
    "Gateway requests by endpoint and HTTP status",
    ["endpoint", "status"],
    registry=_REGISTRY,
)

gateway_latency_seconds = Histogram(
    "dh_gateway_latency_seconds",
    "End-to-end gateway latency in seconds",
    ["endpoint"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
    registry=_REGISTRY,
)

transcriptions_total = Counter(
    "dh_transcriptions_total",
    "Mix transcription attempts by outcome",
    ["outcome"],
    registry=_REGISTRY,
)

project_store_errors_total = Counter(
    "dh_project_store_errors_total",
    "Project store failures by operation",
    ["operation"],
    registry=_REGISTRY,
)


def record_gateway_request(*, endpoint: str, status: int, latency_seconds: float) -> None:
    """Record a completed gateway request.

    Args:
        endpoint: ``"chat"`` or ``"analyze_mix"``.
        status: HTTP status code returned to the client.
        latency_seconds: End-to-end wall-clock time in seconds.
    """
    gateway_requests_total.labels(endpoint=endpoint, status=str(status)).inc()
    gateway_latency_seconds.labels(endpoint=endpoint).observe(latency_seconds)


def record_transcription(outcome: str) -> None:
    """Increment the transcription counter for *outcome* (ok | degraded)."""
    transcriptions_total.labels(outcome=outcome).inc()


def record_store_error(operation: str) -> None:
    """Increment the store failure counter for *operation* (load | upsert | delete)."""
    project_store_errors_total.labels(operation=operation).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
    """
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST


class LatencyTimer:
    """Context manager for measuring latency.

    Usage::

        with LatencyTimer() as t:
            result = run_gateway()
        record_gateway_request(endpoint="chat", status=200, latency_seconds=t.elapsed)
    """

    def __init__(self) -> None:
        """Initialize timer."""
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> LatencyTimer:
        """Start timing."""
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        """Stop timing and record elapsed."""
        self.elapsed = time.perf_counter() - self._start
