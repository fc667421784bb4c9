"""Prometheus metrics exporter for the growth tracking API.

This module provides Prometheus metrics collection behind the TELEMETRY_ENABLED flag.
All instrumentation is safe-by-default: if the flag is false, every recorder is a no-op.

Metrics:
- http_request_duration_seconds: HTTP endpoint latency histogram
- http_requests_total: Request count by method/endpoint/status
- growth_collections_total: Platform collection runs by platform and status
"""

from __future__ import annotations

import logging

from growthtrack.config import telemetry_enabled

_LOG = logging.getLogger(__name__)

_METRICS_INITIALIZED = False

# Metric instances (populated on init)
_registry = None
_http_request_duration = None
_http_requests_total = None
_growth_collections_total = None


def init_prometheus() -> None:
    """Initialize Prometheus metrics collection if enabled.

    Safe to call multiple times (idempotent). If TELEMETRY_ENABLED=false this
    becomes a no-op.
    """
    global _METRICS_INITIALIZED, _registry
    global _http_request_duration, _http_requests_total, _growth_collections_total

    if not telemetry_enabled():
        _LOG.debug("Telemetry disabled, skipping Prometheus init")
        return

    if _METRICS_INITIALIZED:
        _LOG.debug("Prometheus metrics already initialized")
        return

    from prometheus_client import CollectorRegistry, Counter, Histogram

    _registry = CollectorRegistry()

    _http_request_duration = Histogram(
        "http_request_duration_seconds",
        "HTTP request latency in seconds",
        ["method", "endpoint", "status_code"],
        buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
        registry=_registry,
    )

    _http_requests_total = Counter(
        "http_requests_total",
        "Total HTTP requests by method, endpoint, and status code",
        ["method", "endpoint", "status_code"],
        registry=_registry,
    )

    _growth_collections_total = Counter(
        "growth_collections_total",
        "Growth metric collection runs by platform and status",
        ["platform", "status"],  # success | error
        registry=_registry,
    )

    _METRICS_INITIALIZED = True
    _LOG.info("Prometheus metrics initialized")


def reset_prometheus() -> None:
    """Drop all metric instances so the next init starts from a clean registry."""
    global _METRICS_INITIALIZED, _registry
    global _http_request_duration, _http_requests_total, _growth_collections_total

    _METRICS_INITIALIZED = False
    _registry = None
    _http_request_duration = None
    _http_requests_total = None
    _growth_collections_total = None


def record_http_request(method: str, endpoint: str, status_code: int, duration_seconds: float) -> None:
    """Record HTTP request metrics.

    Args:
        method: HTTP method (GET, POST, etc.)
        endpoint: Normalized endpoint path (e.g., /api/growth/dashboard)
        status_code: HTTP status code (200, 400, etc.)
        duration_seconds: Request duration in seconds
    """
    if not _METRICS_INITIALIZED:
        return

    try:
        _http_request_duration.labels(method=method, endpoint=endpoint, status_code=status_code).observe(
            duration_seconds
        )
        _http_requests_total.labels(method=method, endpoint=endpoint, status_code=status_code).inc()
    except Exception as exc:
        _LOG.warning("Failed to record HTTP request metric: %s", exc)


def record_growth_collection(platform: str, status: str) -> None:
    """Count one platform collection run.

    Args:
        platform: Platform value (discord, youtube, ...)
        status: success or error
    """
    if not _METRICS_INITIALIZED:
        return

    try:
        _growth_collections_total.labels(platform=platform, status=status).inc()
    except Exception as exc:
        _LOG.warning("Failed to record growth collection metric: %s", exc)


def generate_metrics_text() -> str:
    """Generate Prometheus metrics in text exposition format.

    Returns:
        Metrics text in Prometheus format, or empty string if disabled
    """
    if not _METRICS_INITIALIZED:
        return ""

    from prometheus_client import generate_latest

    return generate_latest(_registry).decode("utf-8")
