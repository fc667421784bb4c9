"""Growth tracking schemas.

Closed enumerations for platforms and metric types, plus the pydantic records
that flow between the collectors, the store, the service and the handlers.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class Platform(str, Enum):
    """External services tracked for growth metrics."""

    DISCORD = "discord"
    TELEGRAM = "telegram"
    YOUTUBE = "youtube"
    LINKEDIN = "linkedin"
    LUMA = "luma"
    EMAIL_NEWSLETTER = "email_newsletter"


class MetricType(str, Enum):
    """Measurable quantities collected per platform."""

    DISCORD_MESSAGE_COUNT = "discord_message_count"
    DISCORD_MEMBER_COUNT = "discord_member_count"
    TELEGRAM_MESSAGE_COUNT = "telegram_message_count"
    TELEGRAM_MEMBER_COUNT = "telegram_member_count"
    YOUTUBE_TOTAL_VIEWS = "youtube_total_views"
    YOUTUBE_TOTAL_IMPRESSIONS = "youtube_total_impressions"
    YOUTUBE_TOP_VIDEO_VIEWS = "youtube_top_video_views"
    YOUTUBE_TOP_VIDEO_IMPRESSIONS = "youtube_top_video_impressions"
    YOUTUBE_SUBSCRIBER_COUNT = "youtube_subscriber_count"
    LINKEDIN_FOLLOWER_COUNT = "linkedin_follower_count"
    LUMA_PAGE_VIEWS = "luma_page_views"
    LUMA_SUBSCRIBER_COUNT = "luma_subscriber_count"
    EMAIL_NEWSLETTER_SIGNUP_COUNT = "email_newsletter_signup_count"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"

    @classmethod
    def from_change(cls, change: int) -> "Trend":
        if change > 0:
            return cls.UP
        if change < 0:
            return cls.DOWN
        return cls.STABLE


PLATFORM_VALUES = frozenset(p.value for p in Platform)
METRIC_VALUES = frozenset(m.value for m in MetricType)

PLATFORM_METRICS: dict[Platform, tuple[MetricType, ...]] = {
    Platform.DISCORD: (MetricType.DISCORD_MESSAGE_COUNT, MetricType.DISCORD_MEMBER_COUNT),
    Platform.TELEGRAM: (MetricType.TELEGRAM_MESSAGE_COUNT, MetricType.TELEGRAM_MEMBER_COUNT),
    Platform.YOUTUBE: (
        MetricType.YOUTUBE_TOTAL_VIEWS,
        MetricType.YOUTUBE_TOTAL_IMPRESSIONS,
        MetricType.YOUTUBE_TOP_VIDEO_VIEWS,
        MetricType.YOUTUBE_TOP_VIDEO_IMPRESSIONS,
        MetricType.YOUTUBE_SUBSCRIBER_COUNT,
    ),
    Platform.LINKEDIN: (MetricType.LINKEDIN_FOLLOWER_COUNT,),
    Platform.LUMA: (MetricType.LUMA_PAGE_VIEWS, MetricType.LUMA_SUBSCRIBER_COUNT),
    Platform.EMAIL_NEWSLETTER: (MetricType.EMAIL_NEWSLETTER_SIGNUP_COUNT,),
}

# Collection intervals (minutes) seeded for a fresh store.
DEFAULT_COLLECTION_INTERVALS: dict[Platform, int] = {
    Platform.DISCORD: 60,
    Platform.TELEGRAM: 60,
    Platform.YOUTUBE: 120,
    Platform.LINKEDIN: 240,
    Platform.LUMA: 180,
    Platform.EMAIL_NEWSLETTER: 360,
}


def parse_platform(value: Optional[str]) -> Optional[Platform]:
    """Return the Platform for ``value``, or None when it is not in the allow-list."""
    if value is None or value not in PLATFORM_VALUES:
        return None
    return Platform(value)


def parse_metric(value: Optional[str]) -> Optional[MetricType]:
    """Return the MetricType for ``value``, or None when it is not in the allow-list."""
    if value is None or value not in METRIC_VALUES:
        return None
    return MetricType(value)


def is_metric_for_platform(metric: MetricType, platform: Platform) -> bool:
    return metric in PLATFORM_METRICS.get(platform, ())


def utcnow() -> datetime:
    return datetime.now(UTC)


class CollectedMetric(BaseModel):
    """A single value produced by a platform collector."""

    metric_type: MetricType
    value: int = Field(0, ge=0)
    metadata: dict[str, Any] = Field(default_factory=dict)


class GrowthMetric(BaseModel):
    """Raw metric sample as stored."""

    platform: Platform
    metric_type: MetricType
    metric_value: int = Field(0, ge=0)
    metric_metadata: dict[str, Any] = Field(default_factory=dict)
    recorded_at: datetime


class GrowthAnalytics(BaseModel):
    """Changes of one metric over the standard windows, as of ``calculated_at``."""

    platform: Platform
    metric_type: MetricType
    current_value: int = 0
    previous_value: int = 0
    change_1d: int = 0
    change_7d: int = 0
    change_30d: int = 0
    change_1y: int = 0
    change_1d_percent: float = 0.0
    change_7d_percent: float = 0.0
    change_30d_percent: float = 0.0
    change_1y_percent: float = 0.0
    calculated_at: datetime


class DashboardRecord(GrowthAnalytics):
    """Analytics row with trend labels, as served on the marketing dashboard."""

    trend_1d: Trend = Trend.STABLE
    trend_7d: Trend = Trend.STABLE
    trend_30d: Trend = Trend.STABLE

    @classmethod
    def from_analytics(cls, analytics: GrowthAnalytics) -> "DashboardRecord":
        return cls(
            **analytics.model_dump(),
            trend_1d=Trend.from_change(analytics.change_1d),
            trend_7d=Trend.from_change(analytics.change_7d),
            trend_30d=Trend.from_change(analytics.change_30d),
        )


CollectionStatus = Literal["pending", "success", "error"]


class PlatformConfig(BaseModel):
    """Collection settings and last-run bookkeeping for one platform."""

    platform: Platform
    collection_enabled: bool = True
    collection_interval_minutes: int = Field(60, gt=0)
    platform_metadata: dict[str, Any] = Field(default_factory=dict)
    last_collected_at: Optional[datetime] = None
    last_collection_status: CollectionStatus = "pending"
    last_collection_error: Optional[str] = None


class CollectionResult(BaseModel):
    """Outcome of collecting one platform."""

    platform: Platform
    metrics_collected: list[CollectedMetric] = Field(default_factory=list)
    collection_timestamp: datetime
    success: bool
    error: Optional[str] = None


class ServiceState(BaseModel):
    """Point-in-time view of the growth service scheduler."""

    running: bool
    active_collections: list[Platform] = Field(default_factory=list)
    collection_count: int = 0


def default_platform_configs() -> list[PlatformConfig]:
    return [
        PlatformConfig(platform=platform, collection_interval_minutes=minutes)
        for platform, minutes in DEFAULT_COLLECTION_INTERVALS.items()
    ]
