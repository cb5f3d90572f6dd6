"""휴가 엔진 — 휴가 요청 제출/검토/숨김 및 시프트 배정 해제.

Time-Off Engine — Submission (fanned out across clients), review,
dismissal and withdrawal of caregiver time-off requests. Approval clears
the caregiver from the client's shifts in the request's date range in the
same flush as the status change, so the router's single commit makes both
visible together.

State Machine:
    PENDING → APPROVED | DENIED (종료 상태 — terminal)
    SICK_LEAVE: 제출 즉시 APPROVED (approved at submission)
    dismissed: 상태와 무관한 표시 플래그 (visibility flag, orthogonal to status)
"""

import uuid
from datetime import datetime, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.logging import get_logger
from care_scheduler.models.enums import NotificationKind, TimeOffStatus, TimeOffType, UserRole
from care_scheduler.models.scheduling import Shift
from care_scheduler.models.time_off import TimeOffRequest
from care_scheduler.repositories.shift_repository import shift_repository
from care_scheduler.repositories.time_off_repository import time_off_repository
from care_scheduler.repositories.user_repository import user_repository
from care_scheduler.schemas.time_off import TimeOffCreate, TimeOffReview
from care_scheduler.services.notification_service import notification_service
from care_scheduler.services.permission_service import (
    AccessContext,
    can_dismiss_time_off,
    can_request_time_off,
    can_review_time_off,
    require,
)
from care_scheduler.services.shift_service import shift_service
from care_scheduler.utils.exceptions import AuthorizationError, BadRequestError, NotFoundError, ValidationError

logger = get_logger(__name__)


class TimeOffService:
    """휴가 엔진 서비스.

    Time-off engine. Every mutating method flushes only; routers commit.
    """

    async def get_request(
        self,
        db: AsyncSession,
        request_id: UUID,
    ) -> TimeOffRequest:
        """휴가 요청을 조회합니다.

        Raises:
            NotFoundError: 요청이 없을 때 (When request not found)
        """
        request: TimeOffRequest | None = await time_off_repository.get_by_id(db, request_id)
        if request is None:
            raise NotFoundError("휴가 요청을 찾을 수 없습니다 (Time-off request not found)")
        return request

    async def _clear_shifts(
        self,
        db: AsyncSession,
        request: TimeOffRequest,
    ) -> int:
        # 승인된 기간의 해당 제공자+대상자 시프트 배정 해제
        shifts: Sequence[Shift] = await shift_repository.clear_caregiver_shifts(
            db, request.caregiver_id, request.client_id, request.start_date, request.end_date
        )
        for shift in shifts:
            await shift_service.mark_override_if_changed(db, shift)
        cleared: int = len(shifts)
        logger.info(
            "time_off_shifts_cleared",
            request_id=str(request.id),
            caregiver_id=str(request.caregiver_id),
            client_id=str(request.client_id),
            start_date=request.start_date.isoformat(),
            end_date=request.end_date.isoformat(),
            cleared=cleared,
        )
        return cleared

    # --- 제출 (Submit) ---

    async def submit(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        data: TimeOffCreate,
    ) -> dict:
        """휴가 요청을 제출합니다 (대상자마다 한 건).

        Submit a time-off request to one or more clients. One row is
        created per distinct client; with more than one client the rows
        share a group_id. SICK_LEAVE is forced to is_emergency and approved
        immediately, clearing the caregiver's shifts with each client.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            ctx: 호출자 컨텍스트, 제공자만 (Caller context, caregivers only)
            data: 제출 데이터 (Submission data)

        Returns:
            dict: {"count", "group_id", "auto_approved", "affected_shifts", "requests"}

        Raises:
            ValidationError: 유형/기간 오류 (Unknown type or bad range)
            AuthorizationError: 활성 관계가 없는 대상자 포함 (A client without an active relationship)
        """
        if data.request_type not in {t.value for t in TimeOffType}:
            raise ValidationError(
                f"알 수 없는 휴가 유형입니다 (Unknown request_type: {data.request_type})"
            )
        if data.start_date > data.end_date:
            raise ValidationError(
                "시작일은 종료일보다 늦을 수 없습니다 (start_date must not be after end_date)"
            )
        if ctx.role != UserRole.CAREGIVER or ctx.caregiver_id is None:
            raise AuthorizationError("제공자만 휴가를 신청할 수 있습니다 (Only caregivers may request time off)")

        # 순서를 유지한 채 중복 제거 (Distinct clients, submission order kept)
        client_ids: list[UUID] = list(dict.fromkeys(data.client_ids))
        for client_id in client_ids:
            require(
                can_request_time_off(ctx, client_id),
                "활성 관계가 없는 대상자입니다 (No active relationship with this client)",
            )

        is_sick_leave: bool = data.request_type == TimeOffType.SICK_LEAVE.value
        group_id: UUID | None = uuid.uuid4() if len(client_ids) > 1 else None
        now: datetime = datetime.now(timezone.utc)

        requests: list[TimeOffRequest] = []
        affected: int = 0
        for client_id in client_ids:
            request: TimeOffRequest = await time_off_repository.create(
                db,
                {
                    "group_id": group_id,
                    "caregiver_id": ctx.caregiver_id,
                    "client_id": client_id,
                    "request_type": data.request_type,
                    "start_date": data.start_date,
                    "end_date": data.end_date,
                    "reason": data.reason,
                    "status": TimeOffStatus.APPROVED.value if is_sick_leave else TimeOffStatus.PENDING.value,
                    "is_emergency": True if is_sick_leave else data.is_emergency,
                    "reviewed_at": now if is_sick_leave else None,
                },
            )
            cleared: int = await self._clear_shifts(db, request) if is_sick_leave else 0
            affected += cleared
            requests.append(request)
            await self._notify_client(db, request, cleared)

        logger.info(
            "time_off_submitted",
            caregiver_id=str(ctx.caregiver_id),
            request_type=data.request_type,
            clients=len(client_ids),
            auto_approved=is_sick_leave,
            affected_shifts=affected,
        )

        return {
            "count": len(requests),
            "group_id": str(group_id) if group_id else None,
            "auto_approved": is_sick_leave,
            "affected_shifts": affected,
            "requests": requests,
        }

    async def _notify_client(
        self,
        db: AsyncSession,
        request: TimeOffRequest,
        affected_shifts: int,
    ) -> None:
        client_user = await user_repository.get_client_user(db, request.client_id)
        if client_user is None:
            return
        caregiver_names = await user_repository.get_caregiver_names(db, [request.caregiver_id])
        kind: NotificationKind = (
            NotificationKind.SICK_LEAVE_REPORTED
            if request.request_type == TimeOffType.SICK_LEAVE.value
            else NotificationKind.TIME_OFF_SUBMITTED
        )
        await notification_service.dispatch(
            db,
            client_user.id,
            kind,
            {
                "caregiver_name": caregiver_names.get(request.caregiver_id, ""),
                "start_date": request.start_date.isoformat(),
                "end_date": request.end_date.isoformat(),
                "request_type": request.request_type,
                "affected_shifts": affected_shifts,
            },
            reference_type="time_off_request",
            reference_id=request.id,
        )

    # --- 검토 (Review) ---

    async def review(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        request_id: UUID,
        data: TimeOffReview,
    ) -> tuple[TimeOffRequest, int]:
        """휴가 요청을 승인 또는 거절합니다.

        Approve or deny a PENDING request. Approval clears the caregiver
        from the client's shifts in the range within the same flush as the
        status change, so a failure anywhere leaves the request PENDING once
        the router rolls back. COMPLETED and CANCELLED shifts in the range
        are deliberately not cleared: worked history and cancellations keep
        their caregiver. Cleared generated shifts are tagged MANUALLY_EDITED
        so regeneration does not reassign them.
        Denial requires review notes and never touches shifts.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            ctx: 호출자 컨텍스트 (Caller context)
            request_id: 휴가 요청 UUID (Request UUID)
            data: 검토 데이터 (Review decision)

        Returns:
            tuple[TimeOffRequest, int]: (검토된 요청, 해제된 시프트 수)
                                        (Reviewed request, cleared shift count)

        Raises:
            ValidationError: 알 수 없는 결정 또는 거절 사유 누락 (Bad status or missing notes)
            NotFoundError: 요청이 없을 때 (When request not found)
            AuthorizationError: 요청을 받은 대상자가 아닐 때 (Caller is not the client)
            BadRequestError: 이미 결정된 요청 (Request already decided)
        """
        if data.status not in (TimeOffStatus.APPROVED.value, TimeOffStatus.DENIED.value):
            raise ValidationError("status는 APPROVED 또는 DENIED여야 합니다 (status must be APPROVED or DENIED)")
        notes: str | None = data.review_notes.strip() if data.review_notes else None
        if data.status == TimeOffStatus.DENIED.value and not notes:
            raise ValidationError("거절 시 사유가 필요합니다 (review_notes are required when denying)")

        request: TimeOffRequest = await self.get_request(db, request_id)
        require(can_review_time_off(ctx, request))
        if request.status != TimeOffStatus.PENDING.value:
            raise BadRequestError(
                "이미 처리된 요청입니다 (Only pending requests can be reviewed)"
            )

        request.status = data.status
        request.review_notes = notes
        request.reviewed_by = ctx.user_id
        request.reviewed_at = datetime.now(timezone.utc)
        await db.flush()

        affected: int = 0
        if data.status == TimeOffStatus.APPROVED.value:
            affected = await self._clear_shifts(db, request)

        await self._notify_caregiver(db, request)
        await db.refresh(request)
        return request, affected

    async def _notify_caregiver(
        self,
        db: AsyncSession,
        request: TimeOffRequest,
    ) -> None:
        caregiver_user = await user_repository.get_caregiver_user(db, request.caregiver_id)
        if caregiver_user is None:
            return
        client_names = await user_repository.get_client_names(db, [request.client_id])
        kind: NotificationKind = (
            NotificationKind.TIME_OFF_APPROVED
            if request.status == TimeOffStatus.APPROVED.value
            else NotificationKind.TIME_OFF_DENIED
        )
        await notification_service.dispatch(
            db,
            caregiver_user.id,
            kind,
            {
                "client_name": client_names.get(request.client_id, ""),
                "start_date": request.start_date.isoformat(),
                "end_date": request.end_date.isoformat(),
                "review_notes": request.review_notes or "",
            },
            reference_type="time_off_request",
            reference_id=request.id,
        )

    # --- 숨김 / 철회 (Dismiss / Withdraw) ---

    async def dismiss(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        request_id: UUID,
    ) -> TimeOffRequest:
        """결정된 요청을 목록에서 숨깁니다 (상태는 변경하지 않음).

        Hide a decided request from list views. Status is unchanged.

        Raises:
            NotFoundError: 요청이 없을 때 (When request not found)
            AuthorizationError: 요청 당사자가 아닐 때 (Caller is neither party)
            BadRequestError: 대기 중인 요청 (Pending requests cannot be dismissed)
        """
        request: TimeOffRequest = await self.get_request(db, request_id)
        require(can_dismiss_time_off(ctx, request))
        if request.status == TimeOffStatus.PENDING.value:
            raise BadRequestError(
                "대기 중인 요청은 숨길 수 없습니다 (Pending requests cannot be dismissed)"
            )
        request.dismissed = True
        await db.flush()
        return request

    async def withdraw(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        request_id: UUID,
    ) -> None:
        """제공자가 자신의 대기/거절 요청을 삭제합니다.

        Delete the caller's own PENDING or DENIED request. Approved
        requests already cleared shifts and cannot be withdrawn.

        Raises:
            NotFoundError: 요청이 없을 때 (When request not found)
            AuthorizationError: 요청자가 아닐 때 (Caller did not submit it)
            BadRequestError: 승인된 요청 (Approved requests cannot be withdrawn)
        """
        request: TimeOffRequest = await self.get_request(db, request_id)
        require(ctx.role == UserRole.CAREGIVER and ctx.caregiver_id == request.caregiver_id)
        if request.status == TimeOffStatus.APPROVED.value:
            raise BadRequestError(
                "승인된 요청은 철회할 수 없습니다 (Approved requests cannot be withdrawn)"
            )
        await time_off_repository.delete(db, request_id)

    # --- 조회 (Queries) ---

    async def list_requests(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        status: str | None = None,
        include_dismissed: bool = False,
        client_id: UUID | None = None,
        caregiver_id: UUID | None = None,
    ) -> Sequence[TimeOffRequest]:
        """역할 범위의 휴가 요청 목록 (Role-scoped request list, newest first).

        Caregivers see their own requests, clients the requests addressed
        to them, admins any filter combination.
        """
        if status is not None and status not in {s.value for s in TimeOffStatus}:
            raise ValidationError(f"알 수 없는 상태입니다 (Unknown status: {status})")

        if ctx.role == UserRole.CAREGIVER:
            caregiver_id = ctx.caregiver_id
        elif ctx.role == UserRole.CLIENT:
            client_id = ctx.client_id

        return await time_off_repository.get_by_filters(
            db,
            caregiver_id=caregiver_id,
            client_id=client_id,
            status=status,
            include_dismissed=include_dismissed,
        )

    async def build_responses(
        self,
        db: AsyncSession,
        requests: Sequence[TimeOffRequest],
    ) -> list[dict]:
        """휴가 요청 응답 목록을 구성합니다 (이름 일괄 조회)."""
        caregiver_names = await user_repository.get_caregiver_names(db, [r.caregiver_id for r in requests])
        client_names = await user_repository.get_client_names(db, [r.client_id for r in requests])
        return [
            {
                "id": str(r.id),
                "group_id": str(r.group_id) if r.group_id else None,
                "caregiver_id": str(r.caregiver_id),
                "caregiver_name": caregiver_names.get(r.caregiver_id),
                "client_id": str(r.client_id),
                "client_name": client_names.get(r.client_id),
                "request_type": r.request_type,
                "start_date": r.start_date,
                "end_date": r.end_date,
                "reason": r.reason,
                "status": r.status,
                "is_emergency": r.is_emergency,
                "review_notes": r.review_notes,
                "reviewed_at": r.reviewed_at,
                "dismissed": r.dismissed,
                "created_at": r.created_at,
            }
            for r in requests
        ]


# 싱글턴 인스턴스 — Singleton instance
time_off_service: TimeOffService = TimeOffService()
