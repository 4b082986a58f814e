"""Message template model"""

from datetime import datetime
from sqlalchemy import Column, Integer, DateTime, Enum, Text, UniqueConstraint

from app.database import Base
from app.models.reservation import ProductType, enum_values
from app.models.sms import ScheduleType


class MessageTemplate(Base):
    """SMS body for one (product type, trigger kind) pair"""
    __tablename__ = "message_templates"
    __table_args__ = (
        UniqueConstraint("product_type", "schedule_type", name="uq_message_templates_product_schedule"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    product_type = Column(
        Enum(ProductType, name="product_type", values_callable=enum_values, native_enum=False),
        nullable=False,
    )
    schedule_type = Column(
        Enum(ScheduleType, name="schedule_type", values_callable=enum_values, native_enum=False),
        nullable=False,
    )

    # Body with {company_name}, {manager_name}, {phone}, {use_date}, {people_count}
    message_content = Column(Text, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
