"""Uniform result-to-HTTP-response mapping for the growth API.

Every growth handler answers with the same JSON envelope:

    {"success": true,  "data": ..., "timestamp": "...", ...echoed params}   200
    {"success": false, "error": "...", "timestamp": "..."}                   400 / 500

- Parameter validation failures map to 400 and happen before the service call.
- A failed ``ServiceResult`` maps to 500 with the service's own message.
- Unexpected exceptions are logged here and map to a generic 500; the
  exception text never reaches the client.
"""

from __future__ import annotations

import functools
import logging
from datetime import UTC, datetime
from typing import Any, Awaitable, Callable

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from growthtrack.schemas.result import ServiceResult

_LOG = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def utc_timestamp() -> str:
    """ISO-8601 UTC instant with millisecond precision, e.g. 2026-10-18T09:30:00.123Z."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def success_response(data: Any = None, **fields: Any) -> JSONResponse:
    """200 envelope; ``fields`` are echoed at the top level of the body."""
    body = {"success": True, **fields, "data": data, "timestamp": utc_timestamp()}
    return JSONResponse(status_code=200, content=jsonable_encoder(body))


def error_response(status_code: int, error: str) -> JSONResponse:
    body = {"success": False, "error": error, "timestamp": utc_timestamp()}
    return JSONResponse(status_code=status_code, content=body)


def validation_error(error: str) -> JSONResponse:
    return error_response(400, error)


def internal_error() -> JSONResponse:
    return error_response(500, INTERNAL_ERROR_MESSAGE)


def result_response(result: ServiceResult[Any], **echo: Any) -> JSONResponse:
    """Translate a service result into its envelope.

    Args:
        result: Outcome of the service call
        **echo: Validated request parameters to echo back on success

    Returns:
        200 with ``data`` on success, 500 with the service error otherwise
    """
    if result.success:
        return success_response(result.data, **echo)
    return error_response(500, result.error or INTERNAL_ERROR_MESSAGE)


def envelope_guard(handler_name: str) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """Catch anything a handler raises and answer with the generic 500 envelope.

    Usage:
        @router.get("/dashboard")
        @envelope_guard("get_marketing_dashboard")
        async def get_marketing_dashboard(...):
            ...
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except Exception:
                _LOG.exception("Error in %s handler", handler_name)
                return internal_error()

        return wrapper

    return decorator
