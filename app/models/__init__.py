"""Database models"""

from app.models.reservation import Reservation, ProductType, PaymentStatus
from app.models.sms import SmsSchedule, SmsLog, ScheduleType, ScheduleStatus
from app.models.template import MessageTemplate

__all__ = [
    "Reservation",
    "ProductType",
    "PaymentStatus",
    "SmsSchedule",
    "SmsLog",
    "ScheduleType",
    "ScheduleStatus",
    "MessageTemplate",
]
