"""Tests for GrowthTrackingService collection, analytics refresh and lifecycle."""

import asyncio

import pytest

from growthtrack.schemas.growth import PLATFORM_METRICS, CollectedMetric, MetricType, Platform, PlatformConfig
from growthtrack.services.growth import GrowthTrackingService, default_collectors
from growthtrack.services.store import GrowthStore
from growthtrack.telemetry import prom


def _fixed(*metrics):
    async def collect():
        return list(metrics)

    return collect


def _failing(message):
    async def collect():
        raise RuntimeError(message)

    return collect


@pytest.fixture
def service():
    collectors = default_collectors()
    collectors[Platform.DISCORD] = _fixed(
        CollectedMetric(metric_type=MetricType.DISCORD_MEMBER_COUNT, value=250),
        CollectedMetric(metric_type=MetricType.DISCORD_MESSAGE_COUNT, value=1200),
    )
    collectors[Platform.TELEGRAM] = _failing("Telegram API unavailable")
    return GrowthTrackingService(collectors=collectors)


@pytest.mark.asyncio
class TestCollection:
    async def test_single_platform_success(self, service):
        result = await service.collect_platform_metrics(Platform.DISCORD)

        assert result.success is True
        assert result.error is None
        assert [m.value for m in result.metrics_collected] == [250, 1200]
        assert service.store.get_platform_config(Platform.DISCORD).last_collection_status == "success"

    async def test_collector_failure_is_reported(self, service):
        result = await service.collect_platform_metrics(Platform.TELEGRAM)

        assert result.success is False
        assert result.error == "Telegram API unavailable"
        config = service.store.get_platform_config(Platform.TELEGRAM)
        assert config.last_collection_status == "error"
        assert config.last_collection_error == "Telegram API unavailable"

    async def test_unsupported_platform(self):
        service = GrowthTrackingService(collectors={})

        result = await service.collect_platform_metrics(Platform.LUMA)

        assert result.success is False
        assert result.error == "Unsupported platform: luma"

    async def test_placeholder_collectors_report_zero(self):
        service = GrowthTrackingService()

        result = await service.collect_platform_metrics(Platform.YOUTUBE)

        assert result.success is True
        assert [m.metric_type for m in result.metrics_collected] == list(PLATFORM_METRICS[Platform.YOUTUBE])
        assert all(m.value == 0 for m in result.metrics_collected)
        assert result.metrics_collected[0].metadata["status"] == "not_implemented"

    async def test_collect_all_keeps_going_after_failure(self, service):
        results = await service.trigger_manual_collection()

        assert [r.platform for r in results] == list(Platform)
        assert [r.platform for r in results if not r.success] == [Platform.TELEGRAM]

    async def test_collect_all_skips_disabled_platforms(self):
        store = GrowthStore(
            platform_configs=[
                PlatformConfig(platform=Platform.DISCORD),
                PlatformConfig(platform=Platform.LUMA, collection_enabled=False),
            ]
        )
        service = GrowthTrackingService(store=store)

        results = await service.collect_all_metrics()

        assert [r.platform for r in results] == [Platform.DISCORD]

    async def test_manual_single_platform_refreshes_dashboard(self, service):
        results = await service.trigger_manual_collection(Platform.DISCORD)

        assert len(results) == 1
        dashboard = await service.get_marketing_dashboard()
        assert dashboard.success is True
        values = {r.metric_type: r.current_value for r in dashboard.data if r.platform is Platform.DISCORD}
        assert values == {MetricType.DISCORD_MEMBER_COUNT: 250, MetricType.DISCORD_MESSAGE_COUNT: 1200}

    async def test_collection_counter_when_telemetry_enabled(self, service, monkeypatch):
        monkeypatch.setenv("TELEMETRY_ENABLED", "true")
        prom.init_prometheus()

        await service.collect_platform_metrics(Platform.DISCORD)
        await service.collect_platform_metrics(Platform.TELEGRAM)

        text = prom.generate_metrics_text()
        assert 'growth_collections_total{platform="discord",status="success"} 1.0' in text
        assert 'growth_collections_total{platform="telegram",status="error"} 1.0' in text


@pytest.mark.asyncio
class TestQueries:
    async def test_platform_summary(self, service):
        await service.trigger_manual_collection(Platform.DISCORD)

        summary = await service.get_platform_growth_summary(Platform.DISCORD)

        assert summary.success is True
        assert [a.metric_type for a in summary.data] == [
            MetricType.DISCORD_MEMBER_COUNT,
            MetricType.DISCORD_MESSAGE_COUNT,
        ]

    async def test_dashboard_failure_becomes_result(self, service, monkeypatch):
        def boom():
            raise RuntimeError("store offline")

        monkeypatch.setattr(service.store, "get_dashboard_records", boom)

        result = await service.get_marketing_dashboard()

        assert result.success is False
        assert result.error == "Failed to retrieve marketing dashboard data"

    async def test_summary_failure_becomes_result(self, service, monkeypatch):
        def boom(platform):
            raise RuntimeError("store offline")

        monkeypatch.setattr(service.store, "get_platform_analytics", boom)

        result = await service.get_platform_growth_summary(Platform.LUMA)

        assert result.success is False
        assert result.error == "Failed to retrieve growth summary for luma"


@pytest.mark.asyncio
class TestLifecycle:
    async def test_initialize_disabled_is_noop(self, service):
        await service.initialize()

        assert service.is_running() is False
        assert service.get_active_collections() == []
        assert service.state().collection_count == 0

    async def test_initialize_schedules_enabled_platforms(self, service, monkeypatch):
        monkeypatch.setenv("GROWTH_TRACKING_ENABLED", "true")

        await service.initialize()
        try:
            assert service.is_running() is True
            assert service.get_collection_count() == len(Platform)
            assert set(service.get_active_collections()) == set(Platform)
        finally:
            await service.shutdown()

        assert service.is_running() is False
        assert service.get_collection_count() == 0

    async def test_initialize_twice_keeps_one_schedule(self, service, monkeypatch):
        monkeypatch.setenv("GROWTH_TRACKING_ENABLED", "true")

        await service.initialize()
        await service.initialize()
        try:
            assert service.get_collection_count() == len(Platform)
        finally:
            await service.shutdown()

    async def test_shutdown_cancels_tasks(self, service, monkeypatch):
        monkeypatch.setenv("GROWTH_TRACKING_ENABLED", "true")
        await service.initialize()
        tasks = list(service._collection_tasks.values())

        await service.shutdown()
        await asyncio.sleep(0)

        assert all(t.cancelled() for t in tasks)
