"""Reservation management API endpoints"""

import math
from typing import Optional
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from app.database import get_db
from app.models.reservation import PaymentStatus, Reservation
from app.models.sms import SmsSchedule
from app.schemas.reservation import (
    ReservationCreate,
    ReservationUpdate,
    ReservationResponse,
    ReservationListResponse,
)
from app.api.auth import get_session
from app.sms.schedule import create_sms_schedules

router = APIRouter(dependencies=[Depends(get_session)])
logger = structlog.get_logger()


async def _get_reservation_or_404(db: AsyncSession, reservation_id: int) -> Reservation:
    result = await db.execute(select(Reservation).where(Reservation.id == reservation_id))
    reservation = result.scalar_one_or_none()

    if not reservation:
        raise HTTPException(status_code=404, detail="Reservation not found")

    return reservation


@router.get("", response_model=ReservationListResponse)
async def list_reservations(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[PaymentStatus] = None,
    from_date: Optional[date] = None,
    to_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
):
    """List reservations with pagination, newest use date first"""
    query = select(Reservation)
    count_query = select(func.count(Reservation.id))

    if status:
        query = query.where(Reservation.payment_status == status)
        count_query = count_query.where(Reservation.payment_status == status)

    if from_date:
        query = query.where(Reservation.use_date >= from_date)
        count_query = count_query.where(Reservation.use_date >= from_date)

    if to_date:
        query = query.where(Reservation.use_date <= to_date)
        count_query = count_query.where(Reservation.use_date <= to_date)

    # Get total
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    # Get paginated results
    offset = (page - 1) * page_size
    query = query.order_by(Reservation.use_date.desc(), Reservation.id.desc()).offset(offset).limit(page_size)

    result = await db.execute(query)
    reservations = result.scalars().all()

    return ReservationListResponse(
        items=reservations,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size),
    )


@router.post("", response_model=ReservationResponse, status_code=201)
async def create_reservation(
    reservation_data: ReservationCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a reservation and its SMS schedules"""
    reservation = Reservation(**reservation_data.model_dump())

    db.add(reservation)
    await db.commit()
    await db.refresh(reservation)

    logger.info(
        "Reservation created",
        reservation_id=reservation.id,
        use_date=reservation.use_date.isoformat(),
        product_type=reservation.product_type.value,
    )

    # Schedules are best-effort: the reservation stands even if this fails
    try:
        await create_sms_schedules(db, reservation)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            "Failed to create SMS schedules",
            reservation_id=reservation.id,
            error=str(e),
        )

    return reservation


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(
    reservation_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get reservation details"""
    return await _get_reservation_or_404(db, reservation_id)


async def _apply_update(db: AsyncSession, reservation_id: int, reservation_data: ReservationUpdate):
    reservation = await _get_reservation_or_404(db, reservation_id)

    for field, value in reservation_data.model_dump(exclude_unset=True).items():
        setattr(reservation, field, value)

    await db.commit()
    await db.refresh(reservation)

    return reservation


@router.put("/{reservation_id}", response_model=ReservationResponse)
async def update_reservation(
    reservation_id: int,
    reservation_data: ReservationUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update reservation"""
    return await _apply_update(db, reservation_id, reservation_data)


@router.patch("/{reservation_id}", response_model=ReservationResponse)
async def patch_reservation(
    reservation_id: int,
    reservation_data: ReservationUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Partial update, e.g. payment status changes from the list view"""
    return await _apply_update(db, reservation_id, reservation_data)


@router.delete("/{reservation_id}")
async def delete_reservation(
    reservation_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a reservation; its SMS schedules are kept and fail at dispatch"""
    reservation = await _get_reservation_or_404(db, reservation_id)

    await db.execute(
        update(SmsSchedule)
        .where(SmsSchedule.reservation_id == reservation_id)
        .values(reservation_id=None)
    )
    await db.delete(reservation)
    await db.commit()

    logger.info("Reservation deleted", reservation_id=reservation_id)
    return {"success": True}
