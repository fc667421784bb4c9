"""Growth tracking service.

Collects platform metrics, keeps analytics current and answers the queries
the growth API handlers need. Scheduled collection only starts when
GROWTH_TRACKING_ENABLED is true; manual collection is always available.

Query methods return ``ServiceResult`` values; failures are logged here and
surfaced as typed results rather than exceptions.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol

from growthtrack.config import growth_tracking_enabled
from growthtrack.schemas.growth import (
    PLATFORM_METRICS,
    CollectedMetric,
    CollectionResult,
    DashboardRecord,
    GrowthAnalytics,
    GrowthMetric,
    Platform,
    PlatformConfig,
    ServiceState,
    utcnow,
)
from growthtrack.schemas.result import ServiceResult
from growthtrack.services.store import GrowthStore
from growthtrack.telemetry.prom import record_growth_collection

_LOG = logging.getLogger(__name__)

Collector = Callable[[], Awaitable[list[CollectedMetric]]]


class GrowthService(Protocol):
    """What the HTTP handlers require from a growth service."""

    async def get_marketing_dashboard(self) -> ServiceResult[list[DashboardRecord]]: ...

    async def get_platform_growth_summary(self, platform: Platform) -> ServiceResult[list[GrowthAnalytics]]: ...

    async def trigger_manual_collection(self, platform: Optional[Platform] = None) -> list[CollectionResult]: ...

    def is_running(self) -> bool: ...

    def get_active_collections(self) -> list[Platform]: ...

    def get_collection_count(self) -> int: ...


def service_state(service: GrowthService) -> ServiceState:
    """Snapshot of the scheduler state, read through the service's query methods."""
    return ServiceState(
        running=service.is_running(),
        active_collections=service.get_active_collections(),
        collection_count=service.get_collection_count(),
    )


def _placeholder_collector(platform: Platform, note: str) -> Collector:
    """Collector that reports zero for every metric of ``platform`` until an API integration exists."""

    async def collect() -> list[CollectedMetric]:
        _LOG.debug("%s metrics collection not implemented yet - returning placeholder values", platform.value)
        return [
            CollectedMetric(metric_type=metric, value=0, metadata={"status": "not_implemented", "note": note})
            for metric in PLATFORM_METRICS[platform]
        ]

    return collect


def default_collectors() -> dict[Platform, Collector]:
    return {
        Platform.DISCORD: _placeholder_collector(Platform.DISCORD, "Requires Discord API integration"),
        Platform.TELEGRAM: _placeholder_collector(Platform.TELEGRAM, "Requires Telegram API integration"),
        Platform.YOUTUBE: _placeholder_collector(Platform.YOUTUBE, "Requires YouTube Data API integration"),
        Platform.LINKEDIN: _placeholder_collector(Platform.LINKEDIN, "Requires LinkedIn API integration"),
        Platform.LUMA: _placeholder_collector(Platform.LUMA, "Requires Luma API integration"),
        Platform.EMAIL_NEWSLETTER: _placeholder_collector(
            Platform.EMAIL_NEWSLETTER, "Requires Webflow forms integration"
        ),
    }


class GrowthTrackingService:
    """Collects growth metrics and serves dashboard data.

    Example:
        service = GrowthTrackingService()
        await service.initialize()          # no-op unless GROWTH_TRACKING_ENABLED=true
        results = await service.trigger_manual_collection(Platform.DISCORD)
        dashboard = await service.get_marketing_dashboard()
        await service.shutdown()
    """

    def __init__(
        self,
        store: Optional[GrowthStore] = None,
        collectors: Optional[dict[Platform, Collector]] = None,
    ):
        self.store = store or GrowthStore()
        self.collectors = collectors if collectors is not None else default_collectors()
        self._collection_tasks: dict[Platform, asyncio.Task] = {}
        self._initialized = False

    # Lifecycle

    async def initialize(self) -> None:
        """Start scheduled collection for every enabled platform (only if enabled via env)."""
        if not growth_tracking_enabled():
            _LOG.info("Growth tracking is disabled (GROWTH_TRACKING_ENABLED not set to true)")
            return

        if self._initialized:
            _LOG.debug("Growth Tracking Service already initialized")
            return

        _LOG.info("Initializing Growth Tracking Service...")
        try:
            for config in self._load_platform_configs():
                if config.collection_enabled:
                    self._schedule_collection(config)
        except Exception:
            _LOG.exception("Failed to initialize Growth Tracking Service")
            return

        self._initialized = True
        _LOG.info("Growth Tracking Service initialized (%d platforms scheduled)", len(self._collection_tasks))

    async def shutdown(self) -> None:
        """Cancel every scheduled collection."""
        _LOG.info("Shutting down Growth Tracking Service...")

        tasks = list(self._collection_tasks.items())
        for platform, task in tasks:
            task.cancel()
            _LOG.debug("Stopped collection for %s", platform.value)
        if tasks:
            await asyncio.gather(*(t for _, t in tasks), return_exceptions=True)

        self._collection_tasks.clear()
        self._initialized = False
        _LOG.info("Growth Tracking Service shutdown complete")

    def _schedule_collection(self, config: PlatformConfig) -> None:
        interval_seconds = config.collection_interval_minutes * 60
        task = asyncio.create_task(
            self._collection_loop(config.platform, interval_seconds),
            name=f"growth-collect-{config.platform.value}",
        )
        self._collection_tasks[config.platform] = task
        _LOG.info(
            "Scheduled data collection for %s every %d minutes",
            config.platform.value,
            config.collection_interval_minutes,
        )

    async def _collection_loop(self, platform: Platform, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            await self.collect_platform_metrics(platform)
            self.calculate_all_analytics()

    # Collection

    async def collect_platform_metrics(self, platform: Platform) -> CollectionResult:
        """Collect, store and account for one platform's metrics.

        Args:
            platform: Platform to collect

        Returns:
            CollectionResult with success=False and the error message on any failure
        """
        timestamp = utcnow()

        try:
            collector = self.collectors.get(platform)
            if collector is None:
                raise ValueError(f"Unsupported platform: {platform.value}")

            metrics = await collector()
            for metric in metrics:
                self.store.save_metric(
                    GrowthMetric(
                        platform=platform,
                        metric_type=metric.metric_type,
                        metric_value=metric.value,
                        metric_metadata=metric.metadata,
                        recorded_at=timestamp,
                    )
                )
        except Exception as exc:
            message = str(exc) or exc.__class__.__name__
            _LOG.error("Failed to collect metrics from %s: %s", platform.value, message)
            self.store.update_collection_status(platform, "error", message)
            record_growth_collection(platform.value, "error")
            return CollectionResult(platform=platform, collection_timestamp=timestamp, success=False, error=message)

        self.store.update_collection_status(platform, "success")
        record_growth_collection(platform.value, "success")
        _LOG.info("Collected %d metrics from %s", len(metrics), platform.value)

        return CollectionResult(
            platform=platform,
            metrics_collected=metrics,
            collection_timestamp=timestamp,
            success=True,
        )

    async def collect_all_metrics(self) -> list[CollectionResult]:
        """Collect every enabled platform, then refresh analytics."""
        results = []
        for config in self._load_platform_configs():
            if config.collection_enabled:
                results.append(await self.collect_platform_metrics(config.platform))

        self.calculate_all_analytics()
        return results

    def calculate_all_analytics(self) -> None:
        at = utcnow()
        for platform, metrics in PLATFORM_METRICS.items():
            for metric in metrics:
                self.store.calculate_analytics(platform, metric, at)
        _LOG.debug("Analytics calculation completed for all platforms")

    async def trigger_manual_collection(self, platform: Optional[Platform] = None) -> list[CollectionResult]:
        """Collect one platform (then refresh analytics) or every enabled platform."""
        if platform is not None:
            _LOG.info("Manual collection triggered for %s", platform.value)
            result = await self.collect_platform_metrics(platform)
            self.calculate_all_analytics()
            return [result]

        _LOG.info("Manual collection triggered for all platforms")
        return await self.collect_all_metrics()

    # Queries

    async def get_marketing_dashboard(self) -> ServiceResult[list[DashboardRecord]]:
        try:
            return ServiceResult.ok(self.store.get_dashboard_records())
        except Exception:
            _LOG.exception("Error getting marketing dashboard data")
            return ServiceResult.fail("Failed to retrieve marketing dashboard data")

    async def get_platform_growth_summary(self, platform: Platform) -> ServiceResult[list[GrowthAnalytics]]:
        try:
            return ServiceResult.ok(self.store.get_platform_analytics(platform))
        except Exception:
            _LOG.exception("Error getting growth summary for %s", platform.value)
            return ServiceResult.fail(f"Failed to retrieve growth summary for {platform.value}")

    def _load_platform_configs(self) -> list[PlatformConfig]:
        return self.store.get_platform_configs()

    # Status

    def is_running(self) -> bool:
        return self._initialized

    def get_active_collections(self) -> list[Platform]:
        return [p for p, task in self._collection_tasks.items() if not task.done()]

    def get_collection_count(self) -> int:
        return len(self._collection_tasks)

    def state(self) -> ServiceState:
        return service_state(self)


growth_tracking_service = GrowthTrackingService()


def get_growth_service() -> GrowthTrackingService:
    """FastAPI dependency returning the process-wide growth service."""
    return growth_tracking_service
