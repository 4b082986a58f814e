"""Visitor analytics API endpoints"""

import asyncio
from typing import Literal

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
import structlog

from app.analytics.client import AnalyticsError, GoogleAnalyticsClient
from app.api.auth import get_session
from app.config import Settings, get_settings

router = APIRouter(dependencies=[Depends(get_session)])
logger = structlog.get_logger()


def get_analytics_client(settings: Settings = Depends(get_settings)) -> GoogleAnalyticsClient:
    return GoogleAnalyticsClient(settings)


def _dump(value):
    if isinstance(value, list):
        return [item.model_dump(by_alias=True) for item in value]
    if value is None or isinstance(value, int):
        return value
    return value.model_dump(by_alias=True)


@router.get("")
async def get_analytics(
    type: Literal["all", "summary", "daily", "pages", "sources", "realtime"] = "all",
    days: int = Query(30, ge=1, le=365),
    client: GoogleAnalyticsClient = Depends(get_analytics_client),
):
    """Dashboard visitor figures for the last `days` days"""
    try:
        if type == "realtime":
            return {"realtimeUsers": await client.realtime_users()}
        if type == "summary":
            return {"summary": _dump(await client.summary(days))}
        if type == "daily":
            return {"daily": _dump(await client.daily(days))}
        if type == "pages":
            return {"pages": _dump(await client.top_pages(days))}
        if type == "sources":
            return {"sources": _dump(await client.traffic_sources(days))}

        summary, daily, pages, sources, realtime_users = await asyncio.gather(
            client.summary(days),
            client.daily(days),
            client.top_pages(days),
            client.traffic_sources(days),
            client.realtime_users(),
        )
    except AnalyticsError as e:
        logger.error("Analytics request failed", type=type, days=days, error=str(e))
        return JSONResponse(status_code=500, content={"error": "Failed to fetch analytics data"})

    return {
        "summary": _dump(summary),
        "daily": _dump(daily),
        "pages": _dump(pages),
        "sources": _dump(sources),
        "realtimeUsers": realtime_users,
    }
