"""Pydantic schemas for request/response validation"""

from app.schemas.auth import LoginRequest, SessionResponse
from app.schemas.reservation import (
    ReservationCreate,
    ReservationUpdate,
    ReservationResponse,
    ReservationListResponse,
)
from app.schemas.template import (
    MessageTemplateCreate,
    MessageTemplateUpdate,
    MessageTemplateResponse,
    MessageTemplateListResponse,
)
from app.schemas.sms import (
    SmsScheduleResponse,
    SmsScheduleListResponse,
    SmsLogResponse,
    SmsLogListResponse,
    SmsTestRequest,
    SmsTestResponse,
)

__all__ = [
    "LoginRequest",
    "SessionResponse",
    "ReservationCreate",
    "ReservationUpdate",
    "ReservationResponse",
    "ReservationListResponse",
    "MessageTemplateCreate",
    "MessageTemplateUpdate",
    "MessageTemplateResponse",
    "MessageTemplateListResponse",
    "SmsScheduleResponse",
    "SmsScheduleListResponse",
    "SmsLogResponse",
    "SmsLogListResponse",
    "SmsTestRequest",
    "SmsTestResponse",
]
