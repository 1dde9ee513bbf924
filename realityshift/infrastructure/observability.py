# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

REQUEST_LATENCY = Histogram(
    "realityshift_request_latency_seconds",
    "Request latency",
    labelnames=("endpoint",),
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, 30),
)
REQUEST_COUNTER = Counter(
    "realityshift_requests_total",
    "Number of processed requests",
    labelnames=("endpoint", "status"),
)
OUTBOUND_LATENCY = Histogram(
    "realityshift_outbound_latency_seconds",
    "Latency of deadline-bounded outbound calls",
    labelnames=("outcome",),
    buckets=(0.1, 0.5, 1, 2, 5, 10, 30, 60),
)
OUTBOUND_COUNTER = Counter(
    "realityshift_outbound_total",
    "Deadline-bounded outbound calls by outcome",
    labelnames=("outcome",),
)


def record_request(endpoint: str, status: int, duration: float) -> None:
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(duration)
    REQUEST_COUNTER.labels(endpoint=endpoint, status=str(status)).inc()


def record_outbound(outcome: str, duration: float) -> None:
    OUTBOUND_LATENCY.labels(outcome=outcome).observe(duration)
    OUTBOUND_COUNTER.labels(outcome=outcome).inc()


def render_metrics() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST


__all__ = [
    "OUTBOUND_COUNTER",
    "OUTBOUND_LATENCY",
    "REQUEST_COUNTER",
    "REQUEST_LATENCY",
    "record_outbound",
    "record_request",
    "render_metrics",
]
