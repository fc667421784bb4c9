"""Environment-driven settings for the growth tracking API.

Every value is read at call time so tests can flip flags with monkeypatch.
"""

from __future__ import annotations

import os

_TRUTHY = {"1", "true", "yes"}

DEFAULT_ALLOWED_ORIGINS = ["http://localhost:3000"]


def _flag(name: str, default: str = "false") -> bool:
    return str(os.getenv(name, default)).lower() in _TRUTHY


def growth_tracking_enabled() -> bool:
    """Whether scheduled collection starts with the app (GROWTH_TRACKING_ENABLED)."""
    return _flag("GROWTH_TRACKING_ENABLED")


def telemetry_enabled() -> bool:
    return _flag("TELEMETRY_ENABLED")


def app_env() -> str:
    return os.getenv("GROWTH_ENV", "development").lower()


def is_production() -> bool:
    return app_env() == "production"


def allowed_origins() -> list[str]:
    """CORS origins: everything outside production, an explicit list inside it."""
    if not is_production():
        return ["*"]

    raw = os.getenv("GROWTH_ALLOWED_ORIGINS", "")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or list(DEFAULT_ALLOWED_ORIGINS)


def log_level() -> str:
    return os.getenv("LOG_LEVEL", "INFO").upper()
