"""Pydantic schemas for the growth tracking API."""

from growthtrack.schemas.growth import (
    METRIC_VALUES,
    PLATFORM_METRICS,
    PLATFORM_VALUES,
    CollectedMetric,
    CollectionResult,
    DashboardRecord,
    GrowthAnalytics,
    GrowthMetric,
    MetricType,
    Platform,
    PlatformConfig,
    ServiceState,
    Trend,
    is_metric_for_platform,
    parse_metric,
    parse_platform,
)
from growthtrack.schemas.result import ServiceResult

__all__ = [
    "CollectedMetric",
    "CollectionResult",
    "DashboardRecord",
    "GrowthAnalytics",
    "GrowthMetric",
    "METRIC_VALUES",
    "MetricType",
    "PLATFORM_METRICS",
    "PLATFORM_VALUES",
    "Platform",
    "PlatformConfig",
    "ServiceResult",
    "ServiceState",
    "Trend",
    "is_metric_for_platform",
    "parse_metric",
    "parse_platform",
]
