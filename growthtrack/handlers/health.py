"""Health, readiness and liveness probes."""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from growthtrack.envelope import utc_timestamp
from growthtrack.services.growth import GrowthTrackingService, get_growth_service

_LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


def _store_health(service: GrowthTrackingService) -> dict:
    try:
        healthy = service.store.ping()
    except Exception as exc:
        _LOG.warning("Store ping failed: %s", exc)
        return {"status": "unhealthy", "error": str(exc)}

    if healthy:
        return {"status": "healthy", "error": None}
    return {"status": "unhealthy", "error": "Store did not respond"}


@router.get("")
async def health_check(service: GrowthTrackingService = Depends(get_growth_service)):
    """
    Overall health.

    Returns 200 when the store answers, 503 otherwise. The growth scheduler
    being stopped is reported but does not make the service unhealthy, since
    scheduled collection is opt-in.
    """
    try:
        start_time = time.perf_counter()

        store_health = _store_health(service)
        state = service.state()
        overall = store_health["status"]

        body = {
            "status": overall,
            "timestamp": utc_timestamp(),
            "services": {
                "store": store_health,
                "growth": {
                    "status": "active" if state.running else "inactive",
                    "running": state.running,
                    "collection_count": state.collection_count,
                },
            },
        }

        _LOG.debug("Health check completed in %.1fms", (time.perf_counter() - start_time) * 1000)
        return JSONResponse(status_code=200 if overall == "healthy" else 503, content=body)
    except Exception:
        _LOG.exception("Health check failed")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "timestamp": utc_timestamp(), "error": "Health check failed"},
        )


@router.get("/readiness")
async def readiness_check(service: GrowthTrackingService = Depends(get_growth_service)):
    try:
        store_health = _store_health(service)
        if store_health["status"] == "healthy":
            return JSONResponse(status_code=200, content={"status": "ready", "timestamp": utc_timestamp()})

        return JSONResponse(
            status_code=503,
            content={"status": "not ready", "timestamp": utc_timestamp(), "error": store_health["error"]},
        )
    except Exception:
        _LOG.exception("Readiness check failed")
        return JSONResponse(
            status_code=503,
            content={"status": "error", "timestamp": utc_timestamp(), "error": "Readiness check failed"},
        )


@router.get("/liveness")
async def liveness_check():
    return {"status": "alive", "timestamp": utc_timestamp()}
