"""SMS schedule and dispatch log models"""

import enum
from datetime import datetime
from sqlalchemy import Column, String, Integer, DateTime, Enum, ForeignKey, JSON, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base
from app.models.reservation import enum_values
from app.sms.exceptions import InvalidStatusTransition


class ScheduleType(str, enum.Enum):
    """Notification milestones of a stay"""
    D_MINUS_7 = "d_minus_7"  # legacy, never scheduled
    D_MINUS_1 = "d_minus_1"
    D_DAY_MORNING = "d_day_morning"
    BEFORE_MEAL = "before_meal"
    BEFORE_CLOSE = "before_close"


STANDARD_SCHEDULE_TYPES = (
    ScheduleType.D_MINUS_1,
    ScheduleType.D_DAY_MORNING,
    ScheduleType.BEFORE_MEAL,
    ScheduleType.BEFORE_CLOSE,
)

SCHEDULE_LABELS = {
    ScheduleType.D_MINUS_7: "D-7 사전안내",
    ScheduleType.D_MINUS_1: "D-1 안내",
    ScheduleType.D_DAY_MORNING: "당일 아침",
    ScheduleType.BEFORE_MEAL: "식사 안내",
    ScheduleType.BEFORE_CLOSE: "퇴실 안내",
}


class ScheduleStatus(str, enum.Enum):
    """
    Lifecycle of a notification job.

    pending -> in_flight | failed | skipped
    in_flight -> sent | failed

    sent, failed and skipped are terminal. in_flight marks a job claimed by a
    dispatcher run whose gateway call has not resolved yet.
    """
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def is_terminal(self) -> bool:
        return self in (ScheduleStatus.SENT, ScheduleStatus.FAILED, ScheduleStatus.SKIPPED)

    def can_transition_to(self, target: "ScheduleStatus") -> bool:
        return target in _TRANSITIONS.get(self, frozenset())

    def ensure_transition(self, target: "ScheduleStatus") -> "ScheduleStatus":
        """Return target if the move is legal, else raise InvalidStatusTransition"""
        if not self.can_transition_to(target):
            raise InvalidStatusTransition(self.value, target.value)
        return target


_TRANSITIONS = {
    ScheduleStatus.PENDING: frozenset({
        ScheduleStatus.IN_FLIGHT,
        ScheduleStatus.FAILED,
        ScheduleStatus.SKIPPED,
    }),
    ScheduleStatus.IN_FLIGHT: frozenset({
        ScheduleStatus.SENT,
        ScheduleStatus.FAILED,
    }),
}


class SmsSchedule(Base):
    """Table sms_schedules: one pending notification job per trigger kind"""
    __tablename__ = "sms_schedules"
    __table_args__ = (
        UniqueConstraint("reservation_id", "schedule_type", name="uq_sms_schedules_reservation_type"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Nullable: deleting a reservation keeps its jobs, which then fail at dispatch
    reservation_id = Column(Integer, ForeignKey("reservations.id", ondelete="SET NULL"), nullable=True)

    schedule_type = Column(
        Enum(ScheduleType, name="schedule_type", values_callable=enum_values, native_enum=False),
        nullable=False,
    )
    scheduled_at = Column(DateTime, nullable=False, index=True)  # naive UTC
    status = Column(
        Enum(ScheduleStatus, name="schedule_status", values_callable=enum_values, native_enum=False),
        nullable=False,
        default=ScheduleStatus.PENDING,
        index=True,
    )
    sent_at = Column(DateTime)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    reservation = relationship("Reservation", back_populates="sms_schedules")


class SmsLog(Base):
    """Append-only audit record of every dispatch attempt"""
    __tablename__ = "sms_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id", ondelete="SET NULL"))
    schedule_id = Column(Integer, ForeignKey("sms_schedules.id", ondelete="SET NULL"))

    phone = Column(String(20))
    message = Column(Text)
    status = Column(
        Enum(ScheduleStatus, name="schedule_status", values_callable=enum_values, native_enum=False),
        nullable=False,
    )
    response_data = Column(JSON)  # raw gateway result

    created_at = Column(DateTime, default=datetime.utcnow)
