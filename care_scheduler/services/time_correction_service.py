"""시각 보정 서비스 — 실제 근무 시각 보고 및 확인.

Time Correction Service — A caregiver reports the times actually worked
on a shift; the client may acknowledge, which copies them onto the shift,
or leave the report PENDING. Independent of client verification.
"""

from datetime import date, datetime, time, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.enums import NotificationKind, ShiftStatus, TimeCorrectionStatus
from care_scheduler.models.scheduling import Shift
from care_scheduler.repositories.shift_repository import shift_repository
from care_scheduler.repositories.user_repository import user_repository
from care_scheduler.schemas.scheduling import TimeCorrectionRequest
from care_scheduler.services.notification_service import notification_service
from care_scheduler.services.permission_service import (
    AccessContext,
    can_manage_client_schedule,
    can_report_time_correction,
    require,
)
from care_scheduler.services.shift_service import shift_service
from care_scheduler.utils.exceptions import BadRequestError
from care_scheduler.utils.time_range import format_time, parse_time


class TimeCorrectionService:
    """시각 보정 서비스.

    Time correction flow over existing shifts.
    """

    async def report(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        shift_id: UUID,
        data: TimeCorrectionRequest,
        today: date | None = None,
    ) -> Shift:
        """제공자가 실제 근무 시각을 보고합니다.

        Record actual start/end times and an optional note, mark the
        correction PENDING and notify the client. A new report replaces an
        earlier one.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            ctx: 호출자 컨텍스트, 배정 제공자만 (Caller context, assigned caregiver only)
            shift_id: 시프트 UUID (Shift UUID)
            data: 보고 데이터 (Reported times and note)
            today: 기준일, 선택 (Reference date)

        Returns:
            Shift: 갱신된 시프트 (Updated shift)

        Raises:
            NotFoundError: 시프트가 없을 때 (When shift not found)
            AuthorizationError: 배정 제공자가 아닐 때 (Caller is not the assigned caregiver)
            BadRequestError: 미래 시프트 또는 미배정 상태 (Future or not-worked shift)
            ValidationError: 시각 형식 오류 (Malformed times)
        """
        today = today or date.today()
        shift: Shift = await shift_service.get_shift(db, shift_id)
        require(can_report_time_correction(ctx, shift))

        if shift.shift_date > today:
            raise BadRequestError(
                "미래 시프트의 근무 시각은 보고할 수 없습니다 (Cannot report times for a future shift)"
            )
        if shift.status not in (ShiftStatus.FILLED.value, ShiftStatus.COMPLETED.value):
            raise BadRequestError(
                "배정 또는 완료 상태의 시프트만 보고할 수 있습니다 "
                "(Only filled or completed shifts accept time corrections)"
            )

        actual_start: time = parse_time(data.actual_start_time, "actual_start_time")
        actual_end: time = parse_time(data.actual_end_time, "actual_end_time")

        shift.actual_start_time = actual_start
        shift.actual_end_time = actual_end
        shift.caregiver_note = data.caregiver_note
        shift.time_correction_status = TimeCorrectionStatus.PENDING.value
        shift.time_correction_at = datetime.now(timezone.utc)
        await db.flush()

        client_user = await user_repository.get_client_user(db, shift.client_id)
        if client_user is not None:
            caregiver_names = await user_repository.get_caregiver_names(db, [shift.caregiver_id])
            await notification_service.dispatch(
                db,
                client_user.id,
                NotificationKind.TIME_CORRECTION_REPORTED,
                {
                    "caregiver_name": caregiver_names.get(shift.caregiver_id, ""),
                    "date": shift.shift_date.isoformat(),
                    "planned_start_time": format_time(shift.start_time),
                    "planned_end_time": format_time(shift.end_time),
                    "actual_start_time": format_time(actual_start),
                    "actual_end_time": format_time(actual_end),
                },
                reference_type="shift",
                reference_id=shift.id,
            )

        await db.refresh(shift)
        return shift

    async def acknowledge(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        shift_id: UUID,
    ) -> Shift:
        """대상자가 보고된 시각을 수락합니다.

        Copy the reported actual times onto the shift's planned times and
        mark the correction ACKNOWLEDGED. A generated shift whose times now
        differ from its shift type becomes MANUALLY_EDITED.

        Raises:
            NotFoundError: 시프트가 없을 때 (When shift not found)
            AuthorizationError: 소유 대상자가 아닐 때 (Caller does not own the shift)
            BadRequestError: 대기 중인 보고가 없을 때 (No pending correction)
        """
        shift: Shift = await shift_service.get_shift(db, shift_id)
        require(can_manage_client_schedule(ctx, shift.client_id))

        if shift.time_correction_status != TimeCorrectionStatus.PENDING.value:
            raise BadRequestError(
                "대기 중인 시각 보정이 없습니다 (No pending time correction for this shift)"
            )

        shift.start_time = shift.actual_start_time
        shift.end_time = shift.actual_end_time
        shift.time_correction_status = TimeCorrectionStatus.ACKNOWLEDGED.value
        await shift_service.mark_override_if_changed(db, shift)
        await db.flush()
        await db.refresh(shift)
        return shift

    async def list_pending(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        client_id: UUID,
    ) -> Sequence[Shift]:
        """대상자의 대기 중인 시각 보정 목록 (Pending corrections, newest first)."""
        require(ctx.is_admin or can_manage_client_schedule(ctx, client_id))
        return await shift_repository.get_pending_corrections(db, client_id)


# 싱글턴 인스턴스 — Singleton instance
time_correction_service: TimeCorrectionService = TimeCorrectionService()
