"""SMS schedule, log and test-send API endpoints"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import structlog

from app.config import Settings, get_settings
from app.database import get_db
from app.models.sms import ScheduleStatus, SmsLog, SmsSchedule
from app.schemas.sms import (
    MOBILE_PHONE_PATTERN,
    SmsScheduleListResponse,
    SmsLogListResponse,
    SmsTestRequest,
    SmsTestResponse,
)
from app.api.auth import get_session
from app.sms.gateway import SensSmsClient
from app.sms.notifier import TelegramNotifier
from app.sms.kst import kst_day_bounds, kst_month_bounds

router = APIRouter(dependencies=[Depends(get_session)])
logger = structlog.get_logger()

MAX_SCHEDULES = 500


def get_sms_client(settings: Settings = Depends(get_settings)) -> SensSmsClient:
    """Gateway client that reports successful sends to the operator channel"""
    return SensSmsClient(settings, notifier=TelegramNotifier(settings))


@router.get("/schedules", response_model=SmsScheduleListResponse)
async def list_schedules(
    status: Optional[ScheduleStatus] = None,
    view_type: Literal["all", "daily", "monthly"] = "all",
    date: Optional[str] = Query(None, description="YYYY-MM-DD for daily, YYYY-MM for monthly"),
    db: AsyncSession = Depends(get_db),
):
    """List SMS schedules, optionally limited to one KST day or month"""
    query = select(SmsSchedule).options(selectinload(SmsSchedule.reservation))

    if status:
        query = query.where(SmsSchedule.status == status)

    if view_type != "all" and date:
        try:
            if view_type == "daily":
                start, end = kst_day_bounds(date)
            else:
                year, month = (int(part) for part in date.split("-")[:2])
                start, end = kst_month_bounds(year, month)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid date")
        query = query.where(SmsSchedule.scheduled_at.between(start, end))

    query = query.order_by(SmsSchedule.scheduled_at.desc()).limit(MAX_SCHEDULES)
    result = await db.execute(query)

    return SmsScheduleListResponse(items=result.scalars().all())


@router.get("/logs", response_model=SmsLogListResponse)
async def list_logs(
    limit: int = Query(100, ge=1, le=500),
    reservation_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    """Recent dispatch audit records"""
    query = select(SmsLog)
    if reservation_id is not None:
        query = query.where(SmsLog.reservation_id == reservation_id)

    result = await db.execute(query.order_by(SmsLog.created_at.desc(), SmsLog.id.desc()).limit(limit))
    return SmsLogListResponse(items=result.scalars().all())


@router.post("/test", response_model=SmsTestResponse)
async def send_test_sms(
    request: SmsTestRequest,
    client: SensSmsClient = Depends(get_sms_client),
):
    """Send one message directly through the gateway"""
    if not request.phone or not request.message.strip():
        raise HTTPException(status_code=400, detail="Phone and message are required")

    if not MOBILE_PHONE_PATTERN.match(request.phone.replace("-", "")):
        raise HTTPException(status_code=400, detail="Invalid mobile phone number")

    result = await client.send(request.phone, request.message)

    if not result.success:
        logger.error("Test SMS failed", phone=request.phone, error=result.error)
        raise HTTPException(status_code=500, detail=result.error or "SMS send failed")

    logger.info("Test SMS sent", phone=request.phone, request_id=result.request_id)
    return SmsTestResponse(
        success=True,
        request_id=result.request_id,
        message_type=result.message_type,
    )
