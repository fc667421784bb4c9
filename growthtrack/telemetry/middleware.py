"""FastAPI middleware for automatic HTTP request telemetry.

Tracks request latency and counts for every endpoint, feeding the Prometheus
exporter. If telemetry is disabled the recorders return immediately.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from growthtrack.schemas.growth import PLATFORM_VALUES
from growthtrack.telemetry.prom import record_http_request

_LOG = logging.getLogger(__name__)

_NUMERIC_SEGMENT = re.compile(r"/\d+(?=/|$)")


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Record latency and status of every HTTP request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        status_code = 500  # Default to 500 if exception occurs
        endpoint = self._normalize_endpoint(request.url.path)

        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as exc:
            _LOG.error("Exception in request handler: %s", exc, exc_info=True)
            raise
        finally:
            record_http_request(
                method=request.method,
                endpoint=endpoint,
                status_code=status_code,
                duration_seconds=time.perf_counter() - start_time,
            )

    @staticmethod
    def _normalize_endpoint(path: str) -> str:
        """Keep metric labels bounded.

        Known platform segments stay as-is (a closed set); any other trailing
        segment under a platform route collapses to ``{platform}``, and numeric
        segments collapse to ``{id}``.

        Args:
            path: Raw URL path

        Returns:
            Normalized path
        """
        path = _NUMERIC_SEGMENT.sub("/{id}", path)

        for prefix in ("/api/growth/platform/", "/api/growth/collect/"):
            if path.startswith(prefix):
                segment = path[len(prefix) :]
                if segment not in PLATFORM_VALUES:
                    return prefix + "{platform}"

        return path
