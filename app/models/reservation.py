"""Reservation model"""

import enum
from datetime import datetime
from sqlalchemy import Column, String, Integer, Date, DateTime, Enum, Text
from sqlalchemy.orm import relationship

from app.database import Base


def enum_values(enum_cls):
    """Persist enum values ("completed"), not member names ("COMPLETED")"""
    return [member.value for member in enum_cls]


class ProductType(str, enum.Enum):
    """Rental products offered by the venue"""
    OVERNIGHT = "overnight"  # 1 night / 2 days workshop
    DAYTRIP = "daytrip"  # day outing
    TRAINING = "training"  # 2 nights / 3 days retreat


class PaymentStatus(str, enum.Enum):
    """
    Payment state of a reservation.

    SMS dispatch requires exactly COMPLETED. The stored value is "completed",
    never "paid".
    """
    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETED = "completed"


PRODUCT_LABELS = {
    ProductType.OVERNIGHT: "1박2일 워크샵",
    ProductType.DAYTRIP: "당일 야유회",
    ProductType.TRAINING: "2박3일 수련회",
}


class Reservation(Base):
    """Table reservations"""
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Reservation details
    use_date = Column(Date, nullable=False, index=True)
    product_type = Column(
        Enum(ProductType, name="product_type", values_callable=enum_values, native_enum=False),
        nullable=False,
    )
    people_count = Column(Integer, nullable=False, default=0)

    # Contact information
    company_name = Column(String(255))
    manager_name = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    email = Column(String(255))

    # Payment
    deposit_amount = Column(Integer, nullable=False, default=0)
    payment_status = Column(
        Enum(PaymentStatus, name="payment_status", values_callable=enum_values, native_enum=False),
        nullable=False,
        default=PaymentStatus.PENDING,
    )

    # Notes
    notes = Column(Text)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    sms_schedules = relationship("SmsSchedule", back_populates="reservation")

    @property
    def display_name(self) -> str:
        """Company name, falling back to the manager's name"""
        return self.company_name or self.manager_name
