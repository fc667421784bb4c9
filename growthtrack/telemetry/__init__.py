"""Telemetry module for observability (noop by default).

Metrics are exported in Prometheus format when TELEMETRY_ENABLED is true.
"""
from __future__ import annotations

import logging

from growthtrack.config import telemetry_enabled

_LOG = logging.getLogger(__name__)


def init_telemetry() -> None:
    """Initialize telemetry based on environment configuration.

    Environment variables:
    - TELEMETRY_ENABLED: Enable/disable telemetry (default: false)

    Safe to call multiple times (idempotent).
    """
    if not telemetry_enabled():
        _LOG.debug("Telemetry disabled (TELEMETRY_ENABLED=false)")
        return

    from .prom import init_prometheus

    init_prometheus()
    _LOG.info("Telemetry initialized: backend=prometheus")


__all__ = ["init_telemetry"]
