"""Message template API endpoints"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.database import get_db
from app.models.template import MessageTemplate
from app.schemas.template import (
    MessageTemplateCreate,
    MessageTemplateUpdate,
    MessageTemplateResponse,
    MessageTemplateListResponse,
)
from app.api.auth import get_session

router = APIRouter(dependencies=[Depends(get_session)])
logger = structlog.get_logger()


async def _get_template_or_404(db: AsyncSession, template_id: int) -> MessageTemplate:
    result = await db.execute(select(MessageTemplate).where(MessageTemplate.id == template_id))
    template = result.scalar_one_or_none()

    if not template:
        raise HTTPException(status_code=404, detail="Template not found")

    return template


@router.get("", response_model=MessageTemplateListResponse)
async def list_templates(db: AsyncSession = Depends(get_db)):
    """List all templates by product and schedule type"""
    result = await db.execute(
        select(MessageTemplate).order_by(MessageTemplate.product_type, MessageTemplate.schedule_type)
    )
    return MessageTemplateListResponse(items=result.scalars().all())


@router.post("", response_model=MessageTemplateResponse, status_code=201)
async def create_template(
    template_data: MessageTemplateCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create the template for a (product type, schedule type) pair"""
    result = await db.execute(
        select(MessageTemplate).where(
            MessageTemplate.product_type == template_data.product_type,
            MessageTemplate.schedule_type == template_data.schedule_type,
        )
    )
    if result.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Template already exists")

    template = MessageTemplate(**template_data.model_dump())
    db.add(template)
    await db.commit()
    await db.refresh(template)

    logger.info(
        "Template created",
        template_id=template.id,
        product_type=template.product_type.value,
        schedule_type=template.schedule_type.value,
    )
    return template


@router.get("/{template_id}", response_model=MessageTemplateResponse)
async def get_template(template_id: int, db: AsyncSession = Depends(get_db)):
    """Get template details"""
    return await _get_template_or_404(db, template_id)


@router.put("/{template_id}", response_model=MessageTemplateResponse)
async def update_template(
    template_id: int,
    template_data: MessageTemplateUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Replace the template body"""
    template = await _get_template_or_404(db, template_id)
    template.message_content = template_data.message_content

    await db.commit()
    await db.refresh(template)

    logger.info("Template updated", template_id=template.id)
    return template
