"""Message template schemas"""

from datetime import datetime
from typing import List
from pydantic import BaseModel, Field

from app.models.reservation import ProductType
from app.models.sms import ScheduleType


class MessageTemplateCreate(BaseModel):
    """Create template request"""
    product_type: ProductType
    schedule_type: ScheduleType
    message_content: str = Field(min_length=1)


class MessageTemplateUpdate(BaseModel):
    """Update template body"""
    message_content: str = Field(min_length=1)


class MessageTemplateResponse(BaseModel):
    """Template response"""
    id: int
    product_type: ProductType
    schedule_type: ScheduleType
    message_content: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class MessageTemplateListResponse(BaseModel):
    items: List[MessageTemplateResponse]
