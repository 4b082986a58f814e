"""SMS schedule calculation and creation-time scheduling"""

from datetime import datetime, timedelta
from typing import Dict, List, NamedTuple, Union

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.reservation import ProductType, Reservation
from app.models.sms import STANDARD_SCHEDULE_TYPES, ScheduleStatus, ScheduleType, SmsSchedule
from app.sms.exceptions import InvalidScheduleConfig
from app.sms.kst import DateLike, kst_to_utc, parse_civil_date

logger = structlog.get_logger()


class ScheduleOffset(NamedTuple):
    day_offset: int
    clock: str  # HH:MM in KST


SCHEDULE_CONFIG: Dict[ProductType, Dict[ScheduleType, ScheduleOffset]] = {
    ProductType.OVERNIGHT: {
        ScheduleType.D_MINUS_1: ScheduleOffset(-1, "10:00"),
        ScheduleType.D_DAY_MORNING: ScheduleOffset(0, "08:00"),
        ScheduleType.BEFORE_MEAL: ScheduleOffset(0, "17:30"),
        ScheduleType.BEFORE_CLOSE: ScheduleOffset(1, "10:00"),
    },
    ProductType.DAYTRIP: {
        ScheduleType.D_MINUS_1: ScheduleOffset(-1, "10:00"),
        ScheduleType.D_DAY_MORNING: ScheduleOffset(0, "08:00"),
        ScheduleType.BEFORE_MEAL: ScheduleOffset(0, "11:30"),
        ScheduleType.BEFORE_CLOSE: ScheduleOffset(0, "16:00"),
    },
    ProductType.TRAINING: {
        ScheduleType.D_MINUS_1: ScheduleOffset(-1, "10:00"),
        ScheduleType.D_DAY_MORNING: ScheduleOffset(0, "08:00"),
        ScheduleType.BEFORE_MEAL: ScheduleOffset(0, "17:30"),
        ScheduleType.BEFORE_CLOSE: ScheduleOffset(2, "10:00"),
    },
}


def _coerce(enum_cls, value):
    try:
        return enum_cls(value)
    except ValueError:
        return None


def calculate_scheduled_at(
    use_date: DateLike,
    product_type: Union[ProductType, str],
    schedule_type: Union[ScheduleType, str],
) -> datetime:
    """
    Dispatch instant (naive UTC) for one trigger of a reservation.

    The offset is applied in whole civil days to use_date, then the KST clock
    time of the table entry is resolved to UTC.

    Raises InvalidScheduleConfig for an unknown pair and ValueError for a
    malformed use_date.
    """
    product = _coerce(ProductType, product_type)
    kind = _coerce(ScheduleType, schedule_type)
    config = SCHEDULE_CONFIG.get(product, {}).get(kind) if product and kind else None
    if config is None:
        raise InvalidScheduleConfig(str(getattr(product_type, "value", product_type)),
                                    str(getattr(schedule_type, "value", schedule_type)))

    target_date = parse_civil_date(use_date) + timedelta(days=config.day_offset)
    return kst_to_utc(target_date, config.clock)


async def create_sms_schedules(db: AsyncSession, reservation: Reservation) -> List[SmsSchedule]:
    """
    Insert one pending job per standard trigger kind for a new reservation.

    A trigger whose offset cannot be computed is logged and left out; the
    others are still created. Commits on success.
    """
    schedules = []
    for schedule_type in STANDARD_SCHEDULE_TYPES:
        try:
            scheduled_at = calculate_scheduled_at(
                reservation.use_date,
                reservation.product_type,
                schedule_type,
            )
        except InvalidScheduleConfig as e:
            logger.warning(
                "Skipping SMS schedule",
                reservation_id=reservation.id,
                schedule_type=schedule_type.value,
                error=str(e),
            )
            continue

        schedules.append(SmsSchedule(
            reservation_id=reservation.id,
            schedule_type=schedule_type,
            scheduled_at=scheduled_at,
            status=ScheduleStatus.PENDING,
        ))

    db.add_all(schedules)
    await db.commit()

    logger.info(
        "SMS schedules created",
        reservation_id=reservation.id,
        count=len(schedules),
    )
    return schedules
