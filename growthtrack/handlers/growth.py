"""Growth tracking API handlers.

Every route validates its parameters first, calls one growth service method
and answers with the envelope from ``growthtrack.envelope``.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder

from growthtrack.envelope import envelope_guard, result_response, success_response, validation_error
from growthtrack.schemas.growth import MetricType, Platform, parse_metric, parse_platform
from growthtrack.services.growth import GrowthService, get_growth_service, service_state

_LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/api/growth", tags=["growth"])

VALID_PLATFORMS = ", ".join(p.value for p in Platform)

CHART_PLACEHOLDER_MESSAGE = "Chart data endpoint not yet implemented - placeholder response"


def _invalid_platform(platform: str) -> str:
    return f"Invalid platform: {platform}. Valid platforms: {VALID_PLATFORMS}"


@router.get("/dashboard")
@envelope_guard("get_marketing_dashboard")
async def get_marketing_dashboard(service: GrowthService = Depends(get_growth_service)):
    """Marketing dashboard: newest analytics row for every platform metric."""
    result = await service.get_marketing_dashboard()
    return result_response(result)


@router.get("/platform/{platform}")
@envelope_guard("get_platform_growth")
async def get_platform_growth(platform: str, service: GrowthService = Depends(get_growth_service)):
    """Growth summary for one platform; the platform is echoed in the body."""
    parsed = parse_platform(platform)
    if parsed is None:
        return validation_error(_invalid_platform(platform))

    result = await service.get_platform_growth_summary(parsed)
    return result_response(result, platform=parsed.value)


async def _collect(service: GrowthService, platform: Optional[Platform]):
    _LOG.info("Manual data collection triggered for %s", platform.value if platform else "all platforms")

    results = await service.trigger_manual_collection(platform)
    success_count = sum(1 for r in results if r.success)

    return success_response(
        results,
        message=f"Data collection completed: {success_count}/{len(results)} platforms successful",
    )


@router.post("/collect")
@envelope_guard("trigger_data_collection")
async def trigger_data_collection(service: GrowthService = Depends(get_growth_service)):
    """
    Manually trigger data collection for every enabled platform.

    Returns:
        Per-platform collection results and a "k/n platforms successful" message
    """
    return await _collect(service, None)


@router.post("/collect/{platform}")
@envelope_guard("trigger_platform_collection")
async def trigger_platform_collection(platform: str, service: GrowthService = Depends(get_growth_service)):
    """Manually trigger data collection for a single platform."""
    parsed = parse_platform(platform)
    if parsed is None:
        return validation_error(_invalid_platform(platform))

    return await _collect(service, parsed)


@router.get("/status")
@envelope_guard("get_growth_status")
async def get_growth_status(service: GrowthService = Depends(get_growth_service)):
    state = service_state(service)
    return success_response(
        {
            "service_running": state.running,
            "active_collections": state.active_collections,
            "collection_count": state.collection_count,
            "available_platforms": [p.value for p in Platform],
            "available_metrics": [m.value for m in MetricType],
            "status": "active" if state.running else "inactive",
        }
    )


def summarize_latest(records: list[Any]) -> dict[str, dict[str, dict[str, Any]]]:
    """Fold dashboard rows into ``{platform: {metric: {current_value, change_*, trend_*}}}``."""
    summary: dict[str, dict[str, dict[str, Any]]] = {}
    for record in jsonable_encoder(records or []):
        summary.setdefault(record["platform"], {})[record["metric_type"]] = {
            "current_value": record.get("current_value"),
            "change_1d": record.get("change_1d"),
            "change_7d": record.get("change_7d"),
            "change_30d": record.get("change_30d"),
            "trend_1d": record.get("trend_1d"),
            "trend_7d": record.get("trend_7d"),
            "trend_30d": record.get("trend_30d"),
        }
    return summary


@router.get("/metrics/latest")
@envelope_guard("get_latest_metrics")
async def get_latest_metrics(service: GrowthService = Depends(get_growth_service)):
    """Quick overview of the latest value and changes of every metric."""
    result = await service.get_marketing_dashboard()
    if not result.success:
        return result_response(result)
    return success_response(summarize_latest(result.data))


@router.get("/metrics/chart")
@envelope_guard("get_metrics_for_chart")
async def get_metrics_for_chart(
    platform: Optional[str] = None,
    metric: Optional[str] = None,
    period: str = "30d",
):
    """
    Chart series for one metric.

    Example:
        GET /api/growth/metrics/chart?platform=discord&metric=discord_message_count&period=30d

    Historical series are not stored yet; the response echoes the parameters
    with an empty ``chart_data`` list.
    """
    if not platform or not metric:
        return validation_error("platform and metric parameters are required")

    if parse_platform(platform) is None:
        return validation_error(f"Invalid platform: {platform}")

    if parse_metric(metric) is None:
        return validation_error(f"Invalid metric: {metric}")

    return success_response(
        {
            "platform": platform,
            "metric": metric,
            "period": period,
            "chart_data": [],
            "message": CHART_PLACEHOLDER_MESSAGE,
        }
    )
