#!/usr/bin/env python3
"""
Seed script to create or update the standard SMS templates
"""

import asyncio

HEADER = "[초호쉼터] {company_name} 담당자님"

TEMPLATES = {
    ("overnight", "d_minus_1"): (
        f"{HEADER}, 내일 워크샵 이용 예정입니다.\n\n"
        "▶ 일시: {use_date}\n"
        "▶ 인원: {people_count}명\n"
        "▶ 입실: 오후 3시 / 퇴실: 익일 오전 11시\n\n"
        "📌 21:30 이후 매너타임, 개별 앰프 사용 불가"
    ),
    ("overnight", "d_day_morning"): (
        f"{HEADER}, 오늘 워크샵 일정입니다.\n\n"
        "▶ 입실: 오후 3시 (15:00)\n"
        "▶ 퇴실: 내일 오전 11시\n"
        "▶ 주차: 대형버스/승용차 가능"
    ),
    ("overnight", "before_meal"): (
        f"{HEADER}, 저녁 식사 안내드립니다.\n\n"
        "⏰ 저녁 식사: 6시 30분 (18:30~21:30)\n"
        "⚠️ 21:30 이후 매너타임 준수"
    ),
    ("overnight", "before_close"): (
        f"{HEADER}, 퇴실 안내드립니다.\n\n"
        "⏰ 퇴실: 오전 11시 (11:00)\n"
        "☕ 조식: 8시 30분~10시\n\n"
        "이용해 주셔서 감사합니다!"
    ),
    ("daytrip", "d_minus_1"): (
        f"{HEADER}, 내일 야유회 이용 예정입니다.\n\n"
        "▶ 일시: {use_date}\n"
        "▶ 인원: {people_count}명\n"
        "▶ 입실: 오전 10시 / 퇴실: 오후 5시"
    ),
    ("daytrip", "d_day_morning"): (
        f"{HEADER}, 오늘 야유회 일정입니다.\n\n"
        "▶ 입실: 오전 10시 (10:00)\n"
        "▶ 퇴실: 오후 5시 (17:00)"
    ),
    ("daytrip", "before_meal"): (
        f"{HEADER}, 점심 식사 안내드립니다.\n\n"
        "⏰ 점심 식사: 12시 (12:00)"
    ),
    ("daytrip", "before_close"): (
        f"{HEADER}, 퇴실 1시간 전입니다.\n\n"
        "⏰ 퇴실: 오후 5시 (17:00)\n\n"
        "이용해 주셔서 감사합니다!"
    ),
    ("training", "d_minus_1"): (
        f"{HEADER}, 내일 수련회가 시작됩니다.\n\n"
        "▶ 일시: {use_date} (2박3일)\n"
        "▶ 인원: {people_count}명\n"
        "▶ 입실: 오후 3시 / 퇴실: 3일차 오전 11시"
    ),
    ("training", "d_day_morning"): (
        f"{HEADER}, 오늘 수련회가 시작됩니다.\n\n"
        "▶ 입실: 오후 3시 (15:00)\n"
        "▶ 퇴실: 3일차 오전 11시"
    ),
    ("training", "before_meal"): (
        f"{HEADER}, 저녁 식사 안내드립니다.\n\n"
        "⏰ 저녁 식사: 6시 30분 (18:30~21:30)\n"
        "⚠️ 21:30 이후 매너타임 준수"
    ),
    ("training", "before_close"): (
        f"{HEADER}, 퇴실 안내드립니다.\n\n"
        "⏰ 퇴실: 오전 11시 (11:00)\n\n"
        "2박3일 이용해 주셔서 감사합니다!"
    ),
}


async def seed_templates():
    """Insert missing templates and refresh existing bodies"""
    from sqlalchemy import select

    from app.database import SessionLocal, engine, Base
    from app.models.reservation import ProductType
    from app.models.sms import ScheduleType
    from app.models.template import MessageTemplate

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        for (product_type, schedule_type), content in TEMPLATES.items():
            result = await db.execute(
                select(MessageTemplate).where(
                    MessageTemplate.product_type == ProductType(product_type),
                    MessageTemplate.schedule_type == ScheduleType(schedule_type),
                )
            )
            template = result.scalar_one_or_none()

            if template:
                template.message_content = content
                print(f"Updated: {product_type} - {schedule_type}")
            else:
                db.add(MessageTemplate(
                    product_type=ProductType(product_type),
                    schedule_type=ScheduleType(schedule_type),
                    message_content=content,
                ))
                print(f"Created: {product_type} - {schedule_type}")

        await db.commit()

    print(f"\n{len(TEMPLATES)} templates seeded.")


if __name__ == "__main__":
    asyncio.run(seed_templates())
