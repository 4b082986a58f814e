#!/usr/bin/env python3
"""
Print the next pending SMS schedules with their reservation
"""

import asyncio
import sys


async def check_sms(limit: int = 10):
    from sqlalchemy import select
    from sqlalchemy.orm import selectinload

    from app.database import SessionLocal
    from app.models.sms import ScheduleStatus, SmsSchedule
    from app.sms.kst import format_kst

    async with SessionLocal() as db:
        result = await db.execute(
            select(SmsSchedule)
            .where(SmsSchedule.status == ScheduleStatus.PENDING)
            .options(selectinload(SmsSchedule.reservation))
            .order_by(SmsSchedule.scheduled_at)
            .limit(limit)
        )
        schedules = result.scalars().all()

    print("=== Pending SMS schedules ===")
    print(f"{len(schedules)} found\n")

    for i, schedule in enumerate(schedules, start=1):
        reservation = schedule.reservation
        print(f"[{i}] ID: {schedule.id}")
        print(f"    Scheduled (KST): {format_kst(schedule.scheduled_at)}")
        print(f"    Type: {schedule.schedule_type.value}")
        if reservation:
            print(f"    Recipient: {reservation.display_name}")
            print(f"    Phone: {reservation.phone}")
            print(f"    Use date: {reservation.use_date}")
        else:
            print("    Reservation: missing")
        print()


if __name__ == "__main__":
    asyncio.run(check_sms(int(sys.argv[1]) if len(sys.argv) > 1 else 10))
