"""SMS schedule, log and test-send schemas"""

import re
from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel

from app.models.reservation import ProductType
from app.models.sms import ScheduleStatus, ScheduleType

MOBILE_PHONE_PATTERN = re.compile(r"^01[0-9]-?[0-9]{3,4}-?[0-9]{4}$")


class ScheduleReservationSummary(BaseModel):
    """Reservation fields shown next to a schedule"""
    company_name: Optional[str]
    manager_name: str
    phone: str
    product_type: ProductType

    class Config:
        from_attributes = True


class SmsScheduleResponse(BaseModel):
    """SMS schedule response"""
    id: int
    reservation_id: Optional[int]
    schedule_type: ScheduleType
    scheduled_at: datetime
    status: ScheduleStatus
    sent_at: Optional[datetime]
    created_at: datetime
    reservation: Optional[ScheduleReservationSummary] = None

    class Config:
        from_attributes = True


class SmsScheduleListResponse(BaseModel):
    items: List[SmsScheduleResponse]


class SmsLogResponse(BaseModel):
    """Dispatch audit record"""
    id: int
    reservation_id: Optional[int]
    schedule_id: Optional[int]
    phone: Optional[str]
    message: Optional[str]
    status: ScheduleStatus
    response_data: Optional[Any]
    created_at: datetime

    class Config:
        from_attributes = True


class SmsLogListResponse(BaseModel):
    items: List[SmsLogResponse]


class SmsTestRequest(BaseModel):
    """Manual test send"""
    phone: str
    message: str


class SmsTestResponse(BaseModel):
    success: bool
    request_id: Optional[str] = None
    message_type: Optional[str] = None
