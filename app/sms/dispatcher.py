"""
SMS dispatcher.

Invoked by the periodic trigger. Each run picks up pending jobs scheduled
within +/- window_minutes of now, checks the reservation, renders the
template, sends through the gateway and records the outcome. A summary of
the run goes to the operator channel.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field

from app.models.reservation import PaymentStatus
from app.models.sms import SCHEDULE_LABELS, ScheduleStatus, ScheduleType
from app.sms.exceptions import ReservationNotFound, TemplateNotFound
from app.sms.gateway import SensSmsClient
from app.sms.kst import format_kst, utcnow
from app.sms.notifier import TelegramNotifier
from app.sms.store import DueSchedule, SmsScheduleStore
from app.sms.templates import render_template, reservation_fields

logger = structlog.get_logger()


class DispatchItem(BaseModel):
    """Outcome for one job"""
    model_config = ConfigDict(populate_by_name=True)

    schedule_id: int = Field(serialization_alias="scheduleId")
    reservation_id: Optional[int] = Field(default=None, serialization_alias="reservationId")
    company_name: Optional[str] = Field(default=None, serialization_alias="companyName")
    schedule_type: ScheduleType = Field(serialization_alias="scheduleType")
    status: ScheduleStatus
    success: bool
    error: Optional[str] = None


class DispatchSummary(BaseModel):
    """Outcome of one dispatcher run"""
    ok: bool = True
    message: str
    count: int = 0
    sent: int = 0
    failed: int = 0
    skipped: int = 0
    results: List[DispatchItem] = []
    error: Optional[str] = None

    @classmethod
    def from_results(cls, results: List[DispatchItem]) -> "DispatchSummary":
        if not results:
            return cls(message="No SMS to send")
        return cls(
            message="SMS processing completed",
            count=len(results),
            sent=sum(1 for r in results if r.status == ScheduleStatus.SENT),
            failed=sum(1 for r in results if r.status == ScheduleStatus.FAILED),
            skipped=sum(1 for r in results if r.status == ScheduleStatus.SKIPPED),
            results=results,
        )


def schedule_label(schedule_type: ScheduleType) -> str:
    """Korean operator label, falling back to the raw value"""
    return SCHEDULE_LABELS.get(schedule_type, getattr(schedule_type, "value", str(schedule_type)))


class SmsDispatcher:
    """Runs one dispatch batch"""

    def __init__(
        self,
        store: SmsScheduleStore,
        sms_client: SensSmsClient,
        notifier: TelegramNotifier,
        window_minutes: int = 15,
        notify_empty_batches: bool = False,
    ):
        self.store = store
        self.sms_client = sms_client
        self.notifier = notifier
        self.window_minutes = window_minutes
        self.notify_empty_batches = notify_empty_batches

    def window(self, now: datetime) -> Tuple[datetime, datetime]:
        delta = timedelta(minutes=self.window_minutes)
        return now - delta, now + delta

    async def run(self, now: Optional[datetime] = None) -> DispatchSummary:
        """
        Process every due job. Never raises: a batch-level error is reported
        to the operator channel and returned as ok=False.
        """
        now = now or utcnow()

        try:
            window_start, window_end = self.window(now)
            schedules = await self.store.list_pending(window_start, window_end)

            logger.info(
                "Processing SMS schedules",
                count=len(schedules),
                window_start=window_start.isoformat(),
                window_end=window_end.isoformat(),
            )

            results = []
            for schedule in schedules:
                item = await self._process(schedule)
                if item is not None:
                    results.append(item)

            summary = DispatchSummary.from_results(results)
        except Exception as e:
            logger.exception("SMS dispatch batch failed", error=str(e))
            await self._notify_error(e, now)
            return DispatchSummary(ok=False, message="SMS processing failed", error=str(e))

        logger.info(
            "SMS dispatch finished",
            count=summary.count,
            sent=summary.sent,
            failed=summary.failed,
            skipped=summary.skipped,
        )

        if summary.count or self.notify_empty_batches:
            try:
                await self._notify_summary(summary, now)
            except Exception as e:
                logger.warning("Summary notification failed", error=str(e))

        return summary

    async def _process(self, schedule: DueSchedule) -> Optional[DispatchItem]:
        """Isolate one job: an unexpected error marks it failed and the batch continues"""
        try:
            return await self._dispatch(schedule)
        except Exception as e:
            logger.exception("SMS schedule processing failed", schedule_id=schedule.id, error=str(e))
            await self.store.rollback()
            return await self._fail_after_error(schedule, e)

    async def _dispatch(self, schedule: DueSchedule) -> Optional[DispatchItem]:
        reservation = schedule.reservation

        if reservation is None:
            error = ReservationNotFound(f"Reservation for schedule {schedule.id} not found")
            logger.warning("SMS schedule has no reservation", schedule_id=schedule.id)
            return await self._close(schedule, ScheduleStatus.PENDING, ScheduleStatus.FAILED, error=str(error))

        # Exact match only: partial payments and anything else are skipped
        if reservation.payment_status != PaymentStatus.COMPLETED:
            reason = f"payment_status={getattr(reservation.payment_status, 'value', reservation.payment_status)}"
            item = await self._close(
                schedule, ScheduleStatus.PENDING, ScheduleStatus.SKIPPED, reservation, error=reason
            )
            if item is not None:
                await self._audit(schedule, reservation, None, ScheduleStatus.SKIPPED, {"reason": reason})
            return item

        template = await self.store.find_template(reservation.product_type, schedule.schedule_type)
        if template is None:
            error = TemplateNotFound(reservation.product_type.value, schedule.schedule_type.value)
            logger.warning(
                "SMS template missing",
                schedule_id=schedule.id,
                product_type=reservation.product_type.value,
                schedule_type=schedule.schedule_type.value,
            )
            item = await self._close(
                schedule, ScheduleStatus.PENDING, ScheduleStatus.FAILED, reservation, error=str(error)
            )
            if item is not None:
                await self._audit(schedule, reservation, None, ScheduleStatus.FAILED, {"error": str(error)})
            return item

        message = render_template(template.message_content, reservation_fields(reservation))

        if not await self.store.claim(schedule.id):
            logger.info("SMS schedule already claimed", schedule_id=schedule.id)
            return None

        result = await self.sms_client.send(
            reservation.phone,
            message,
            company_name=reservation.display_name,
            schedule_type=schedule.schedule_type.value,
        )

        status = ScheduleStatus.SENT if result.success else ScheduleStatus.FAILED

        # The gateway has answered: a storage error from here on must not relabel the outcome
        try:
            await self.store.transition(
                schedule.id,
                ScheduleStatus.IN_FLIGHT,
                status,
                sent_at=utcnow() if result.success else None,
            )
        except Exception as e:
            logger.exception(
                "Could not record SMS outcome",
                schedule_id=schedule.id,
                status=status.value,
                error=str(e),
            )
            await self.store.rollback()

        await self._audit(schedule, reservation, message, status, result.model_dump())

        logger.info(
            "SMS schedule processed",
            schedule_id=schedule.id,
            status=status.value,
            request_id=result.request_id,
        )
        return self._item(schedule, status, reservation, error=result.error)

    async def _close(self, schedule, current, target, reservation=None, error=None) -> Optional[DispatchItem]:
        if not await self.store.transition(schedule.id, current, target):
            logger.info("SMS schedule already handled", schedule_id=schedule.id, target=target.value)
            return None
        return self._item(schedule, target, reservation, error=error)

    async def _fail_after_error(self, schedule: DueSchedule, error: Exception) -> Optional[DispatchItem]:
        for current in (ScheduleStatus.IN_FLIGHT, ScheduleStatus.PENDING):
            try:
                if await self.store.transition(schedule.id, current, ScheduleStatus.FAILED):
                    break
            except Exception as e:
                logger.error("Could not mark SMS schedule failed", schedule_id=schedule.id, error=str(e))
                await self.store.rollback()
                return None
        else:
            return None

        if schedule.reservation is not None:
            await self._audit(
                schedule, schedule.reservation, None, ScheduleStatus.FAILED, {"error": str(error)}
            )
        return self._item(schedule, ScheduleStatus.FAILED, schedule.reservation, error=str(error))

    async def _audit(self, schedule, reservation, message, status, response_data) -> None:
        try:
            await self.store.append_log(
                reservation_id=reservation.id,
                schedule_id=schedule.id,
                phone=reservation.phone,
                message=message,
                status=status,
                response_data=response_data,
            )
        except Exception as e:
            logger.warning("SMS log write failed", schedule_id=schedule.id, error=str(e))
            await self.store.rollback()

    def _item(self, schedule, status, reservation=None, error=None) -> DispatchItem:
        return DispatchItem(
            schedule_id=schedule.id,
            reservation_id=reservation.id if reservation is not None else None,
            company_name=reservation.display_name if reservation is not None else None,
            schedule_type=schedule.schedule_type,
            status=status,
            success=status == ScheduleStatus.SENT,
            error=error,
        )

    async def _notify_summary(self, summary: DispatchSummary, now: datetime) -> None:
        text = "🤖 <b>SMS Cron 실행 결과</b>\n\n"
        text += f"⏰ 실행시간: {format_kst(now, '%Y-%m-%d %H:%M')}\n"
        text += (
            f"📊 처리: {summary.count}건 "
            f"(성공 {summary.sent}, 실패 {summary.failed}, 건너뜀 {summary.skipped})\n"
        )

        if summary.results:
            text += "\n<b>상세내역:</b>\n"
            icons = {ScheduleStatus.SENT: "✅", ScheduleStatus.SKIPPED: "⏭"}
            for item in summary.results:
                icon = icons.get(item.status, "❌")
                name = item.company_name or f"#{item.schedule_id}"
                text += f"{icon} {name} - {schedule_label(item.schedule_type)}\n"

        await self.notifier.send(text)

    async def _notify_error(self, error: Exception, now: datetime) -> None:
        try:
            await self.notifier.send(
                "❌ <b>SMS Cron 에러</b>\n\n"
                f"⏰ 시간: {format_kst(now, '%Y-%m-%d %H:%M')}\n"
                f"💥 에러: {error}"
            )
        except Exception as e:
            logger.warning("Error notification failed", error=str(e))


def get_sms_dispatcher(db, settings) -> SmsDispatcher:
    """Wire a dispatcher from a session and the application settings"""
    notifier = TelegramNotifier(settings)
    return SmsDispatcher(
        store=SmsScheduleStore(db),
        sms_client=SensSmsClient(settings, notifier=notifier),
        notifier=notifier,
        window_minutes=settings.sms_dispatch_window_minutes,
        notify_empty_batches=settings.sms_notify_empty_batches,
    )
