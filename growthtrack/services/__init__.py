"""Growth tracking service and its in-memory store."""

from growthtrack.services.growth import (
    GrowthService,
    GrowthTrackingService,
    get_growth_service,
    growth_tracking_service,
    service_state,
)
from growthtrack.services.store import GrowthStore

__all__ = [
    "GrowthService",
    "GrowthStore",
    "GrowthTrackingService",
    "get_growth_service",
    "growth_tracking_service",
    "service_state",
]
