"""FastAPI web API for growth tracking.

Routes:
- /api/growth/*: growth dashboard, platform summaries, manual collection, status
- /health, /health/readiness, /health/liveness: probes
- /metrics: Prometheus exposition (empty unless TELEMETRY_ENABLED=true)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from growthtrack import __version__
from growthtrack.config import allowed_origins, app_env
from growthtrack.handlers import growth, health
from growthtrack.services.growth import growth_tracking_service
from growthtrack.telemetry import init_telemetry
from growthtrack.telemetry.middleware import TelemetryMiddleware
from growthtrack.telemetry.prom import generate_metrics_text

_LOG = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the growth scheduler with the app and stop it on shutdown."""
    await growth_tracking_service.initialize()
    try:
        yield
    finally:
        await growth_tracking_service.shutdown()


app = FastAPI(
    title="Growth Tracking API",
    version=__version__,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "growth", "description": "Growth metrics, dashboards and manual collection"},
        {"name": "health", "description": "Health and status endpoints"},
    ],
)

init_telemetry()
app.add_middleware(TelemetryMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins(),
    allow_credentials=False,  # No cookies needed
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=600,  # Cache preflight for 10 minutes
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    """Add security headers to all responses."""
    response = await call_next(request)

    response.headers["Referrer-Policy"] = "no-referrer"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"

    return response


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes answer with a JSON 404 naming the method and path."""
    if exc.status_code == 404:
        return JSONResponse(
            status_code=404,
            content={"error": "Not Found", "message": f"Route {request.method} {request.url.path} not found"},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    _LOG.error("Unhandled error: %s", exc, exc_info=exc)
    message = str(exc) if app_env() == "development" else "Something went wrong"
    return JSONResponse(status_code=500, content={"error": "Internal Server Error", "message": message})


app.include_router(health.router)
app.include_router(growth.router)


@app.get("/")
def root():
    """API root endpoint."""
    return {
        "name": "Growth Tracking API",
        "version": app.version,
        "status": "running",
        "endpoints": [
            "GET /health",
            "GET /health/readiness",
            "GET /health/liveness",
            "GET /metrics",
            "GET /api/growth/dashboard",
            "GET /api/growth/platform/{platform}",
            "POST /api/growth/collect",
            "POST /api/growth/collect/{platform}",
            "GET /api/growth/status",
            "GET /api/growth/metrics/latest",
            "GET /api/growth/metrics/chart",
        ],
    }


@app.get("/metrics", response_class=PlainTextResponse)
def metrics():
    """Prometheus metrics in text exposition format (empty when telemetry is disabled)."""
    return generate_metrics_text()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=3000)
