"""Global pytest configuration and fixtures."""

import pytest
from _utils import FakeGrowthService
from fastapi.testclient import TestClient


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch):
    """
    Pin feature flags for every test.

    - GROWTH_TRACKING_ENABLED: false (no scheduled collection loops)
    - TELEMETRY_ENABLED: false (recorders are no-ops unless a test opts in)
    - GROWTH_ENV: development
    - WEBFLOW_*: removed so OAuth tests control credentials explicitly
    """
    monkeypatch.setenv("GROWTH_TRACKING_ENABLED", "false")
    monkeypatch.setenv("TELEMETRY_ENABLED", "false")
    monkeypatch.setenv("GROWTH_ENV", "development")
    monkeypatch.delenv("WEBFLOW_CLIENT_ID", raising=False)
    monkeypatch.delenv("WEBFLOW_CLIENT_SECRET", raising=False)

    from growthtrack.telemetry import prom

    prom.reset_prometheus()
    yield
    prom.reset_prometheus()


@pytest.fixture
def fake_service():
    return FakeGrowthService()


@pytest.fixture
def client(fake_service):
    """TestClient whose growth routes talk to ``fake_service``."""
    from growthtrack.services.growth import get_growth_service
    from growthtrack.webapi import app

    app.dependency_overrides[get_growth_service] = lambda: fake_service
    yield TestClient(app)
    app.dependency_overrides.clear()
