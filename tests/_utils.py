"""Test doubles and builders shared by the growth API tests."""

from datetime import UTC, datetime
from typing import Optional

from growthtrack.schemas.growth import CollectionResult, DashboardRecord, GrowthAnalytics, Platform
from growthtrack.schemas.result import ServiceResult


def make_record(platform: Platform, metric_type: str, current: int, change_1d: int = 0) -> DashboardRecord:
    analytics = GrowthAnalytics(
        platform=platform,
        metric_type=metric_type,
        current_value=current,
        previous_value=current - change_1d,
        change_1d=change_1d,
        change_7d=change_1d,
        change_30d=change_1d,
        calculated_at=datetime(2026, 10, 1, tzinfo=UTC),
    )
    return DashboardRecord.from_analytics(analytics)


class FakeGrowthService:
    """Growth service double that records every call.

    Each query returns whatever the test assigns to the matching attribute;
    set ``raise_error`` to make every awaited call raise.
    """

    def __init__(self):
        self.dashboard_result: ServiceResult = ServiceResult.ok([])
        self.summary_result: ServiceResult = ServiceResult.ok([])
        self.collection_results: list[CollectionResult] = []
        self.running = False
        self.active: list[Platform] = []
        self.raise_error: Optional[Exception] = None
        self.calls: list[tuple] = []

    def _maybe_raise(self):
        if self.raise_error is not None:
            raise self.raise_error

    async def get_marketing_dashboard(self):
        self.calls.append(("get_marketing_dashboard",))
        self._maybe_raise()
        return self.dashboard_result

    async def get_platform_growth_summary(self, platform):
        self.calls.append(("get_platform_growth_summary", platform))
        self._maybe_raise()
        return self.summary_result

    async def trigger_manual_collection(self, platform=None):
        self.calls.append(("trigger_manual_collection", platform))
        self._maybe_raise()
        return self.collection_results

    def is_running(self):
        return self.running

    def get_active_collections(self):
        return list(self.active)

    def get_collection_count(self):
        return len(self.active)
