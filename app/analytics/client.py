"""
GA4 Data API client.

Reads visitor figures for the dashboard: a period summary, daily series,
top pages, traffic sources and realtime active users. Built from Settings;
without a property id every report comes back empty instead of failing.
"""

from typing import List, Optional

import structlog
from google.analytics.data_v1beta import BetaAnalyticsDataAsyncClient
from google.analytics.data_v1beta.types import (
    DateRange,
    Dimension,
    Metric,
    OrderBy,
    RunRealtimeReportRequest,
    RunReportRequest,
)
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from pydantic import BaseModel, ConfigDict, Field

from app.config import Settings

logger = structlog.get_logger()

ANALYTICS_SCOPES = ["https://www.googleapis.com/auth/analytics.readonly"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


class AnalyticsError(Exception):
    """The analytics provider could not be reached or rejected the report"""


class AnalyticsSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_users: int = Field(serialization_alias="totalUsers")
    new_users: int = Field(serialization_alias="newUsers")
    sessions: int
    page_views: int = Field(serialization_alias="pageViews")
    avg_session_duration: float = Field(serialization_alias="avgSessionDuration")
    bounce_rate: float = Field(serialization_alias="bounceRate")


class DailyAnalytics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str
    users: int
    sessions: int
    page_views: int = Field(serialization_alias="pageViews")


class PageViews(BaseModel):
    path: str
    title: str
    views: int


class TrafficSource(BaseModel):
    source: str
    users: int
    sessions: int


def _int(value: Optional[str]) -> int:
    return int(float(value)) if value else 0


def _float(value: Optional[str]) -> float:
    return float(value) if value else 0.0


def _period(days: int) -> List[DateRange]:
    return [DateRange(start_date=f"{days}daysAgo", end_date="today")]


class GoogleAnalyticsClient:
    """Thin wrapper over BetaAnalyticsDataAsyncClient returning dashboard models"""

    def __init__(self, settings: Settings, client: Optional[BetaAnalyticsDataAsyncClient] = None):
        self.property_id = settings.ga4_property_id
        self.client_email = settings.google_service_account_email
        # Keys pasted into env files usually carry literal \n sequences
        self.private_key = settings.google_private_key.replace("\\n", "\n")
        self.timeout = settings.analytics_request_timeout_seconds
        self._client = client

    @property
    def configured(self) -> bool:
        return bool(self.property_id)

    @property
    def property(self) -> str:
        return f"properties/{self.property_id}"

    def _get_client(self) -> BetaAnalyticsDataAsyncClient:
        if self._client is None:
            credentials = service_account.Credentials.from_service_account_info(
                {
                    "client_email": self.client_email,
                    "private_key": self.private_key,
                    "token_uri": TOKEN_URI,
                },
                scopes=ANALYTICS_SCOPES,
            )
            self._client = BetaAnalyticsDataAsyncClient(credentials=credentials)
        return self._client

    async def _run_report(self, request: RunReportRequest):
        try:
            return await self._get_client().run_report(request=request, timeout=self.timeout)
        except (GoogleAPIError, GoogleAuthError, ValueError) as e:
            logger.error("Analytics report failed", property=self.property, error=str(e))
            raise AnalyticsError(str(e)) from e

    async def summary(self, days: int = 30) -> Optional[AnalyticsSummary]:
        """Totals over the last `days` days; None when there is no data"""
        if not self.configured:
            logger.warning("GA4 property id is not set")
            return None

        response = await self._run_report(RunReportRequest(
            property=self.property,
            date_ranges=_period(days),
            metrics=[
                Metric(name="totalUsers"),
                Metric(name="newUsers"),
                Metric(name="sessions"),
                Metric(name="screenPageViews"),
                Metric(name="averageSessionDuration"),
                Metric(name="bounceRate"),
            ],
        ))

        if not response.rows:
            return None

        values = [metric.value for metric in response.rows[0].metric_values]
        return AnalyticsSummary(
            total_users=_int(values[0]),
            new_users=_int(values[1]),
            sessions=_int(values[2]),
            page_views=_int(values[3]),
            avg_session_duration=_float(values[4]),
            bounce_rate=_float(values[5]) * 100,
        )

    async def daily(self, days: int = 30) -> List[DailyAnalytics]:
        """One row per day (YYYYMMDD), oldest first"""
        if not self.configured:
            return []

        response = await self._run_report(RunReportRequest(
            property=self.property,
            date_ranges=_period(days),
            dimensions=[Dimension(name="date")],
            metrics=[Metric(name="totalUsers"), Metric(name="sessions"), Metric(name="screenPageViews")],
            order_bys=[OrderBy(dimension=OrderBy.DimensionOrderBy(dimension_name="date"), desc=False)],
        ))

        return [
            DailyAnalytics(
                date=row.dimension_values[0].value or "",
                users=_int(row.metric_values[0].value),
                sessions=_int(row.metric_values[1].value),
                page_views=_int(row.metric_values[2].value),
            )
            for row in response.rows
        ]

    async def top_pages(self, days: int = 30, limit: int = 10) -> List[PageViews]:
        if not self.configured:
            return []

        response = await self._run_report(RunReportRequest(
            property=self.property,
            date_ranges=_period(days),
            dimensions=[Dimension(name="pagePath"), Dimension(name="pageTitle")],
            metrics=[Metric(name="screenPageViews")],
            order_bys=[OrderBy(metric=OrderBy.MetricOrderBy(metric_name="screenPageViews"), desc=True)],
            limit=limit,
        ))

        return [
            PageViews(
                path=row.dimension_values[0].value or "",
                title=row.dimension_values[1].value or "",
                views=_int(row.metric_values[0].value),
            )
            for row in response.rows
        ]

    async def traffic_sources(self, days: int = 30, limit: int = 10) -> List[TrafficSource]:
        if not self.configured:
            return []

        response = await self._run_report(RunReportRequest(
            property=self.property,
            date_ranges=_period(days),
            dimensions=[Dimension(name="sessionSource")],
            metrics=[Metric(name="totalUsers"), Metric(name="sessions")],
            order_bys=[OrderBy(metric=OrderBy.MetricOrderBy(metric_name="sessions"), desc=True)],
            limit=limit,
        ))

        return [
            TrafficSource(
                source=row.dimension_values[0].value or "(direct)",
                users=_int(row.metric_values[0].value),
                sessions=_int(row.metric_values[1].value),
            )
            for row in response.rows
        ]

    async def realtime_users(self) -> int:
        """Active users over the last 30 minutes"""
        if not self.configured:
            return 0

        try:
            response = await self._get_client().run_realtime_report(
                request=RunRealtimeReportRequest(
                    property=self.property,
                    metrics=[Metric(name="activeUsers")],
                ),
                timeout=self.timeout,
            )
        except (GoogleAPIError, GoogleAuthError, ValueError) as e:
            logger.error("Realtime analytics report failed", property=self.property, error=str(e))
            raise AnalyticsError(str(e)) from e

        if not response.rows:
            return 0
        return _int(response.rows[0].metric_values[0].value)
