"""In-memory storage for growth metrics, analytics and platform configs.

Samples are unique per (platform, metric_type, recorded_at). Analytics are
kept one row per (platform, metric_type, calculation date); the dashboard
reads the newest row of each pair.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from growthtrack.schemas.growth import (
    CollectionStatus,
    DashboardRecord,
    GrowthAnalytics,
    GrowthMetric,
    MetricType,
    Platform,
    PlatformConfig,
    default_platform_configs,
    utcnow,
)

_LOG = logging.getLogger(__name__)

# Look-back windows for change calculations
WINDOWS: dict[str, timedelta] = {
    "1d": timedelta(days=1),
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "1y": timedelta(days=365),
}


def percent_change(current: int, base: int) -> float:
    """Percentage change from ``base`` to ``current``; 0 when there is no positive base."""
    if base <= 0:
        return 0.0
    return round((current - base) / base * 100, 2)


class GrowthStore:
    """Process-local store backing the growth tracking service."""

    def __init__(self, platform_configs: Optional[list[PlatformConfig]] = None):
        configs = platform_configs if platform_configs is not None else default_platform_configs()
        self._configs: dict[Platform, PlatformConfig] = {c.platform: c for c in configs}
        self._metrics: dict[tuple[Platform, MetricType, datetime], GrowthMetric] = {}
        self._analytics: dict[tuple[Platform, MetricType, date], GrowthAnalytics] = {}

    def ping(self) -> bool:
        return True

    # Metrics

    def save_metric(self, metric: GrowthMetric) -> None:
        key = (metric.platform, metric.metric_type, metric.recorded_at)
        self._metrics[key] = metric

    def list_metrics(self, platform: Platform, metric_type: MetricType) -> list[GrowthMetric]:
        """All samples for one metric, oldest first."""
        samples = [m for (p, t, _), m in self._metrics.items() if p == platform and t == metric_type]
        return sorted(samples, key=lambda m: m.recorded_at)

    def value_at(self, platform: Platform, metric_type: MetricType, at: datetime) -> int:
        """Latest value recorded at or before ``at`` (0 when nothing was recorded yet)."""
        latest: Optional[GrowthMetric] = None
        for sample in self.list_metrics(platform, metric_type):
            if sample.recorded_at > at:
                break
            latest = sample
        return latest.metric_value if latest else 0

    # Analytics

    def calculate_analytics(
        self, platform: Platform, metric_type: MetricType, at: Optional[datetime] = None
    ) -> GrowthAnalytics:
        """Compute and store change analytics for one metric.

        Args:
            platform: Platform the metric belongs to
            metric_type: Metric to analyse
            at: Calculation instant (default: now)

        Returns:
            The stored analytics row
        """
        at = at or utcnow()
        current = self.value_at(platform, metric_type, at)
        bases = {label: self.value_at(platform, metric_type, at - delta) for label, delta in WINDOWS.items()}

        analytics = GrowthAnalytics(
            platform=platform,
            metric_type=metric_type,
            current_value=current,
            previous_value=bases["1d"],
            change_1d=current - bases["1d"],
            change_7d=current - bases["7d"],
            change_30d=current - bases["30d"],
            change_1y=current - bases["1y"],
            change_1d_percent=percent_change(current, bases["1d"]),
            change_7d_percent=percent_change(current, bases["7d"]),
            change_30d_percent=percent_change(current, bases["30d"]),
            change_1y_percent=percent_change(current, bases["1y"]),
            calculated_at=at,
        )
        self._analytics[(platform, metric_type, at.date())] = analytics
        return analytics

    def _latest_analytics(self) -> dict[tuple[Platform, MetricType], GrowthAnalytics]:
        latest: dict[tuple[Platform, MetricType], GrowthAnalytics] = {}
        for (platform, metric_type, _), row in self._analytics.items():
            current = latest.get((platform, metric_type))
            if current is None or row.calculated_at > current.calculated_at:
                latest[(platform, metric_type)] = row
        return latest

    def get_dashboard_records(self) -> list[DashboardRecord]:
        """Newest analytics per (platform, metric) with trends, ordered by platform then metric."""
        rows = self._latest_analytics().values()
        ordered = sorted(rows, key=lambda r: (r.platform.value, r.metric_type.value))
        return [DashboardRecord.from_analytics(r) for r in ordered]

    def get_platform_analytics(self, platform: Platform) -> list[GrowthAnalytics]:
        rows = [r for (p, _), r in self._latest_analytics().items() if p == platform]
        return sorted(rows, key=lambda r: r.metric_type.value)

    # Platform configs

    def get_platform_configs(self) -> list[PlatformConfig]:
        return list(self._configs.values())

    def get_platform_config(self, platform: Platform) -> Optional[PlatformConfig]:
        return self._configs.get(platform)

    def update_collection_status(
        self, platform: Platform, status: CollectionStatus, error: Optional[str] = None
    ) -> None:
        config = self._configs.get(platform)
        if config is None:
            _LOG.debug("No platform config for %s, status not recorded", platform.value)
            return

        self._configs[platform] = config.model_copy(
            update={
                "last_collected_at": utcnow(),
                "last_collection_status": status,
                "last_collection_error": error,
            }
        )
