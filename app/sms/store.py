"""Persistence operations used by the SMS dispatcher"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, List, Optional

import structlog
from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.reservation import PaymentStatus, ProductType, Reservation
from app.models.sms import ScheduleStatus, ScheduleType, SmsLog, SmsSchedule
from app.models.template import MessageTemplate

logger = structlog.get_logger()


@dataclass(frozen=True)
class ReservationSnapshot:
    """Reservation fields the dispatcher needs, detached from the session"""
    id: int
    use_date: date
    product_type: ProductType
    people_count: int
    company_name: Optional[str]
    manager_name: str
    phone: str
    payment_status: PaymentStatus

    @property
    def display_name(self) -> str:
        return self.company_name or self.manager_name

    @classmethod
    def from_model(cls, reservation: Reservation) -> "ReservationSnapshot":
        return cls(
            id=reservation.id,
            use_date=reservation.use_date,
            product_type=reservation.product_type,
            people_count=reservation.people_count,
            company_name=reservation.company_name,
            manager_name=reservation.manager_name,
            phone=reservation.phone,
            payment_status=reservation.payment_status,
        )


@dataclass(frozen=True)
class DueSchedule:
    """A pending job joined with its reservation (None if deleted)"""
    id: int
    schedule_type: ScheduleType
    scheduled_at: datetime
    reservation: Optional[ReservationSnapshot]


class SmsScheduleStore:
    """
    SQLAlchemy-backed job store.

    Status changes are conditional updates on the expected current status,
    so a job can only leave a state once even if two dispatcher runs overlap.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_pending(self, window_start: datetime, window_end: datetime) -> List[DueSchedule]:
        """Pending jobs with scheduled_at in [window_start, window_end], joined with their reservation"""
        result = await self.db.execute(
            select(SmsSchedule)
            .where(
                and_(
                    SmsSchedule.status == ScheduleStatus.PENDING,
                    SmsSchedule.scheduled_at >= window_start,
                    SmsSchedule.scheduled_at <= window_end,
                )
            )
            .options(selectinload(SmsSchedule.reservation))
            .order_by(SmsSchedule.scheduled_at, SmsSchedule.id)
        )
        return [
            DueSchedule(
                id=schedule.id,
                schedule_type=schedule.schedule_type,
                scheduled_at=schedule.scheduled_at,
                reservation=ReservationSnapshot.from_model(schedule.reservation) if schedule.reservation else None,
            )
            for schedule in result.scalars().all()
        ]

    async def transition(
        self,
        schedule_id: int,
        current: ScheduleStatus,
        target: ScheduleStatus,
        sent_at: Optional[datetime] = None,
    ) -> bool:
        """
        Move a job from current to target.

        Returns False when the row is no longer in current (another run got
        there first). Raises InvalidStatusTransition for illegal moves.
        """
        current.ensure_transition(target)

        values = {"status": target}
        if target == ScheduleStatus.SENT:
            values["sent_at"] = sent_at

        result = await self.db.execute(
            update(SmsSchedule)
            .where(SmsSchedule.id == schedule_id, SmsSchedule.status == current)
            .values(**values)
        )
        await self.db.commit()

        changed = result.rowcount == 1
        logger.debug(
            "Schedule transition",
            schedule_id=schedule_id,
            current=current.value,
            target=target.value,
            changed=changed,
        )
        return changed

    async def claim(self, schedule_id: int) -> bool:
        """Reserve a pending job for sending"""
        return await self.transition(schedule_id, ScheduleStatus.PENDING, ScheduleStatus.IN_FLIGHT)

    async def append_log(
        self,
        reservation_id: Optional[int],
        schedule_id: Optional[int],
        phone: Optional[str],
        message: Optional[str],
        status: ScheduleStatus,
        response_data: Any = None,
    ) -> SmsLog:
        log = SmsLog(
            reservation_id=reservation_id,
            schedule_id=schedule_id,
            phone=phone,
            message=message,
            status=status,
            response_data=response_data,
        )
        self.db.add(log)
        await self.db.commit()
        return log

    async def find_template(
        self,
        product_type: ProductType,
        schedule_type: ScheduleType,
    ) -> Optional[MessageTemplate]:
        result = await self.db.execute(
            select(MessageTemplate).where(
                MessageTemplate.product_type == product_type,
                MessageTemplate.schedule_type == schedule_type,
            )
        )
        return result.scalar_one_or_none()

    async def rollback(self) -> None:
        await self.db.rollback()
