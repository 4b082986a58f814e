"""Reservation schemas"""

from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, Field

from app.models.reservation import PaymentStatus, ProductType


class ReservationCreate(BaseModel):
    """Create reservation request"""
    use_date: date
    product_type: ProductType
    people_count: int = Field(ge=0)
    company_name: Optional[str] = None
    manager_name: str
    phone: str
    email: Optional[str] = None
    deposit_amount: int = Field(default=0, ge=0)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    notes: Optional[str] = None


class ReservationUpdate(BaseModel):
    """Update reservation request"""
    use_date: Optional[date] = None
    product_type: Optional[ProductType] = None
    people_count: Optional[int] = Field(default=None, ge=0)
    company_name: Optional[str] = None
    manager_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    deposit_amount: Optional[int] = Field(default=None, ge=0)
    payment_status: Optional[PaymentStatus] = None
    notes: Optional[str] = None


class ReservationResponse(BaseModel):
    """Reservation response"""
    id: int
    use_date: date
    product_type: ProductType
    people_count: int
    company_name: Optional[str]
    manager_name: str
    phone: str
    email: Optional[str]
    deposit_amount: int
    payment_status: PaymentStatus
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ReservationListResponse(BaseModel):
    """Paginated reservation list"""
    items: List[ReservationResponse]
    total: int
    page: int
    page_size: int
    total_pages: int
