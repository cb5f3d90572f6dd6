"""시프트 배정 서비스 — 시프트 생성/수정/삭제/확인 비즈니스 로직.

Shift Assignment Service — Business logic for individual shifts.
Handles creation with duplicate checks, caregiver (un)assignment,
recurring caregiver cascades, client verification and calendar listing.

Status Flow:
    SCHEDULED ⇄ FILLED (제공자 배정/해제 — caregiver assigned or cleared)
    → COMPLETED (잠김: 수정/삭제 불가 — locked against edits and deletion)
    → CANCELLED (충돌 감지에서 제외 — ignored by conflict detection)

Origin Flow:
    GENERATED → MANUALLY_EDITED: 수정 후 값이 생성값과 하나라도 다를 때
    (When any of caregiver, status, times or notes differs from what the
    pattern would produce after an edit; no-op edits keep the tag.)
"""

from datetime import date, datetime, time, timezone
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.enums import RecurrenceType, ShiftOrigin, ShiftStatus, TimeCorrectionStatus, UserRole
from care_scheduler.models.scheduling import Shift, ShiftPattern, ShiftType
from care_scheduler.repositories.shift_pattern_repository import shift_pattern_repository
from care_scheduler.repositories.shift_repository import shift_repository
from care_scheduler.repositories.shift_type_repository import shift_type_repository
from care_scheduler.repositories.user_repository import user_repository
from care_scheduler.schemas.scheduling import RecurrenceInstruction, ShiftCreate, ShiftUpdate
from care_scheduler.services.conflict_service import conflict_service
from care_scheduler.services.generation_service import generation_service
from care_scheduler.services.permission_service import (
    AccessContext,
    can_manage_client_schedule,
    can_view_caregiver_schedule,
    can_view_client_schedule,
    require,
)
from care_scheduler.utils.exceptions import BadRequestError, DuplicateError, NotFoundError, ValidationError
from care_scheduler.utils.recurrence import occurs_on, validate_recurrence_type
from care_scheduler.utils.time_range import format_time, parse_time

# 조회 기간 상한 — 캘린더 한 번에 최대 1년 (Longest range a single list call may span)
MAX_LIST_RANGE_DAYS: int = 366


class ShiftService:
    """시프트 배정 서비스.

    Shift assignment service. Conflicts are computed after every caregiver
    or time change and returned as warnings; they never block a write.
    """

    async def get_shift(
        self,
        db: AsyncSession,
        shift_id: UUID,
    ) -> Shift:
        """시프트를 조회합니다.

        Raises:
            NotFoundError: 시프트가 없을 때 (When shift not found)
        """
        shift: Shift | None = await shift_repository.get_by_id(db, shift_id)
        if shift is None:
            raise NotFoundError("시프트를 찾을 수 없습니다 (Shift not found)")
        return shift

    async def _validate_caregiver(
        self,
        db: AsyncSession,
        caregiver_id: UUID,
        client_id: UUID,
    ) -> None:
        if not await user_repository.has_active_relationship(db, caregiver_id, client_id):
            raise ValidationError(
                "대상자와 활성 관계인 제공자가 아닙니다 "
                "(Caregiver not found or has no active relationship with this client)"
            )

    def _resolve_recurrence_end(
        self,
        recurrence: RecurrenceInstruction,
        anchor: date,
        today: date,
    ) -> date:
        """반복 지시를 검증하고 종료일을 결정합니다.

        Validate a recurrence instruction anchored at ``anchor`` and
        return its effective end date: the given end_date, or 31 December
        of the anchor's year, clamped to the horizon cap.

        Raises:
            ValidationError: 규칙/요일/종료일 오류 (Invalid rule, weekday or end date)
        """
        validate_recurrence_type(recurrence.type)
        if (
            recurrence.day_of_week is not None
            and recurrence.type != RecurrenceType.DAILY
            and recurrence.day_of_week != anchor.weekday()
        ):
            raise ValidationError(
                "반복 요일이 시프트 날짜의 요일과 다릅니다 "
                "(day_of_week must match the weekday of the shift date)"
            )

        end_date: date = recurrence.end_date or date(anchor.year, 12, 31)
        if end_date < anchor:
            raise ValidationError(
                "반복 종료일은 시프트 날짜 이후여야 합니다 "
                "(Recurrence end_date must not be before the shift date)"
            )
        cap: date = generation_service.get_horizon_cap(today)
        return min(end_date, cap)

    # --- 조회 (Queries) ---

    async def list_shifts(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        start_date: date,
        end_date: date,
        client_id: UUID | None = None,
        caregiver_id: UUID | None = None,
    ) -> Sequence[Shift]:
        """기간 내 시프트를 조회합니다 (역할 범위 적용).

        List shifts in [start_date, end_date] for a client or a caregiver.
        Without a filter the caller's own profile is used; caregivers only
        see shifts of clients they are actively related to.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            ctx: 호출자 컨텍스트 (Caller context)
            start_date: 시작일, 포함 (Range start, inclusive)
            end_date: 종료일, 포함 (Range end, inclusive)
            client_id: 대상자 필터, 선택 (Optional client filter)
            caregiver_id: 제공자 필터, 선택 (Optional caregiver filter)

        Returns:
            Sequence[Shift]: 날짜, 시작 시각 순 시프트 목록 (Shifts by date and start time)

        Raises:
            ValidationError: 기간 오류 또는 필터 누락 (Bad range or missing filter)
            AuthorizationError: 조회 권한이 없을 때 (Caller may not view)
        """
        if start_date > end_date:
            raise ValidationError(
                "시작일은 종료일보다 늦을 수 없습니다 (start_date must not be after end_date)"
            )
        if (end_date - start_date).days >= MAX_LIST_RANGE_DAYS:
            raise ValidationError(
                f"조회 기간은 최대 {MAX_LIST_RANGE_DAYS}일입니다 "
                f"(Range must span at most {MAX_LIST_RANGE_DAYS} days)"
            )

        if client_id is None and caregiver_id is None:
            if ctx.role == UserRole.CLIENT:
                client_id = ctx.client_id
            elif ctx.role == UserRole.CAREGIVER:
                caregiver_id = ctx.caregiver_id
            else:
                raise ValidationError(
                    "client_id 또는 caregiver_id가 필요합니다 (client_id or caregiver_id is required)"
                )

        client_scope: Sequence[UUID] | None = None
        if client_id is not None:
            require(can_view_client_schedule(ctx, client_id))
        if caregiver_id is not None:
            require(can_view_caregiver_schedule(ctx, caregiver_id))
            # 관계가 끝난 대상자의 시프트는 숨김 (Hide clients the caregiver no longer serves)
            if ctx.role == UserRole.CAREGIVER:
                client_scope = list(ctx.active_client_ids)

        return await shift_repository.get_by_range(
            db,
            start_date,
            end_date,
            client_id=client_id,
            caregiver_id=caregiver_id,
            client_ids=client_scope,
        )

    async def has_shift_on(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        caregiver_id: UUID,
        client_id: UUID,
        shift_date: date,
    ) -> bool:
        """제공자가 해당 날짜에 대상자와 근무했는지 확인합니다.

        Whether the caregiver has a FILLED or COMPLETED shift with the
        client on the date. Used by record forms to gate caregiver entries.
        """
        require(
            can_view_client_schedule(ctx, client_id)
            or can_view_caregiver_schedule(ctx, caregiver_id)
        )
        return await shift_repository.has_worked_shift_on(db, caregiver_id, client_id, shift_date)

    # --- 생성 (Create) ---

    async def create_shift(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        data: ShiftCreate,
        today: date | None = None,
    ) -> tuple[Shift, list[dict]]:
        """새 시프트를 생성합니다.

        Create a MANUAL shift. Times default to the shift type's; status is
        FILLED when a caregiver is given, else SCHEDULED. A recurrence
        instruction is validated here but applied separately by
        ``apply_recurrence_on_create`` once the shift is committed.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            ctx: 호출자 컨텍스트 (Caller context)
            data: 시프트 생성 데이터 (Shift creation data)
            today: 기준일, 선택 (Reference date)

        Returns:
            tuple[Shift, list[dict]]: (생성된 시프트, 충돌 경고 목록)
                                      (Created shift, conflict warnings)

        Raises:
            AuthorizationError: 소유 대상자가 아닐 때 (Caller does not own the client)
            NotFoundError: 시프트 유형이 없을 때 (Shift type not found for this client)
            ValidationError: 시각/제공자/반복 지시 오류 (Invalid times, caregiver or recurrence)
            DuplicateError: 같은 대상자+유형+날짜 시프트가 있을 때 (Duplicate shift)
        """
        today = today or date.today()
        client_id: UUID | None = data.client_id or ctx.client_id
        if client_id is None:
            raise ValidationError("client_id가 필요합니다 (client_id is required)")
        require(can_manage_client_schedule(ctx, client_id))

        shift_type: ShiftType | None = await shift_type_repository.get_by_id(db, data.shift_type_id, client_id)
        if shift_type is None:
            raise NotFoundError("시프트 유형을 찾을 수 없습니다 (Shift type not found)")

        start_time: time = (
            parse_time(data.start_time, "start_time") if data.start_time else shift_type.start_time
        )
        end_time: time = (
            parse_time(data.end_time, "end_time") if data.end_time else shift_type.end_time
        )

        if data.caregiver_id is not None:
            await self._validate_caregiver(db, data.caregiver_id, client_id)
        if data.recurrence is not None:
            self._resolve_recurrence_end(data.recurrence, data.date, today)

        # 중복 시프트 검사 — One shift per client + shift type + date
        if await shift_repository.check_duplicate(db, client_id, data.shift_type_id, data.date):
            raise DuplicateError(
                "해당 날짜에 같은 유형의 시프트가 이미 존재합니다 "
                "(A shift of this type already exists for this client on this date)"
            )

        shift: Shift = await shift_repository.create(
            db,
            {
                "client_id": client_id,
                "shift_type_id": data.shift_type_id,
                "shift_date": data.date,
                "start_time": start_time,
                "end_time": end_time,
                "caregiver_id": data.caregiver_id,
                "status": (
                    ShiftStatus.FILLED.value if data.caregiver_id is not None else ShiftStatus.SCHEDULED.value
                ),
                "origin": ShiftOrigin.MANUAL.value,
                "internal_notes": data.internal_notes,
                "instruction_notes": data.instruction_notes,
                "created_by": ctx.user_id,
            },
        )

        conflicts: list[dict] = await conflict_service.find_conflicts(
            db, shift.caregiver_id, shift.shift_date, shift.start_time, shift.end_time, shift.id
        )
        return shift, conflicts

    async def apply_recurrence_on_create(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        shift: Shift,
        recurrence: RecurrenceInstruction,
        today: date | None = None,
    ) -> tuple[ShiftPattern, int]:
        """생성된 시프트를 기준으로 반복 패턴을 만들고 시프트를 생성합니다.

        Second step of the create-with-recurrence flow: record a pattern
        anchored at the shift's date (same client, shift type and
        caregiver) and generate its shifts. Does not commit.

        Returns:
            tuple[ShiftPattern, int]: (생성된 패턴, 생성된 시프트 수)
                                      (Created pattern, generated shift count)
        """
        today = today or date.today()
        end_date: date = self._resolve_recurrence_end(recurrence, shift.shift_date, today)

        pattern: ShiftPattern = await shift_pattern_repository.create(
            db,
            {
                "client_id": shift.client_id,
                "caregiver_id": shift.caregiver_id,
                "shift_type_id": shift.shift_type_id,
                "recurrence_type": recurrence.type,
                "start_date": shift.shift_date,
                "end_date": end_date,
                "is_active": True,
                "created_by": ctx.user_id,
            },
        )
        generated, _ = await generation_service.generate_for_pattern(
            db, pattern, today, generation_service.resolve_horizon(today, end_date)
        )
        return pattern, generated

    # --- 수정 (Update) ---

    async def _generation_baseline(
        self,
        db: AsyncSession,
        shift: Shift,
    ) -> tuple:
        """생성 작업이 이 시프트에 만들었을 값 (Values generation would produce).

        Returns:
            tuple: (caregiver_id, status, start_time, end_time,
                    internal_notes, instruction_notes)
        """
        caregiver_id: UUID | None = shift.caregiver_id
        start_time: time = shift.start_time
        end_time: time = shift.end_time

        if shift.pattern_id is not None:
            pattern: ShiftPattern | None = await shift_pattern_repository.get_by_id(db, shift.pattern_id)
            if pattern is not None:
                caregiver_id = pattern.caregiver_id
        shift_type: ShiftType | None = await shift_type_repository.get_by_id(db, shift.shift_type_id)
        if shift_type is not None:
            start_time, end_time = shift_type.start_time, shift_type.end_time
        status: str = (
            ShiftStatus.FILLED.value if caregiver_id is not None else ShiftStatus.SCHEDULED.value
        )
        return caregiver_id, status, start_time, end_time, None, None

    async def mark_override_if_changed(
        self,
        db: AsyncSession,
        shift: Shift,
    ) -> None:
        """생성 시프트가 생성값과 달라졌으면 MANUALLY_EDITED로 표시합니다.

        Tag a GENERATED shift MANUALLY_EDITED when any editable field now
        differs from what generation would produce, so regeneration keeps
        it. Other origins are left alone.
        """
        if shift.origin != ShiftOrigin.GENERATED.value:
            return
        current: tuple = (
            shift.caregiver_id,
            shift.status,
            shift.start_time,
            shift.end_time,
            shift.internal_notes,
            shift.instruction_notes,
        )
        if current != await self._generation_baseline(db, shift):
            shift.origin = ShiftOrigin.MANUALLY_EDITED.value

    async def update_shift(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        shift_id: UUID,
        data: ShiftUpdate,
        today: date | None = None,
    ) -> dict:
        """시프트를 수정하고 필요 시 반복 배정을 적용합니다.

        Update a shift. ``caregiver_id`` omitted leaves the assignment
        unchanged; an explicit null unassigns. With a recurrence
        instruction and a caregiver, a tracking pattern is recorded and the
        caregiver is cascaded onto future unassigned shifts of the same
        client and shift type that match the rule, through the end date.
        Saving a shift with a PENDING time correction acknowledges it; the
        reported times are not copied.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            ctx: 호출자 컨텍스트 (Caller context)
            shift_id: 시프트 UUID (Shift UUID)
            data: 수정 데이터 (Update data)
            today: 기준일, 선택 (Reference date)

        Returns:
            dict: {"shift", "conflicts", "recurring_updated", "pattern_id"}

        Raises:
            NotFoundError: 시프트가 없을 때 (When shift not found)
            AuthorizationError: 소유 대상자가 아닐 때 (Caller does not own the shift)
            BadRequestError: 완료된 시프트일 때 (When the shift is COMPLETED)
            ValidationError: 시각/상태/제공자/반복 지시 오류 (Invalid input)
        """
        today = today or date.today()
        shift: Shift = await self.get_shift(db, shift_id)
        require(can_manage_client_schedule(ctx, shift.client_id))

        if shift.status == ShiftStatus.COMPLETED.value:
            raise BadRequestError(
                "완료된 시프트는 수정할 수 없습니다 (Completed shifts cannot be edited)"
            )

        fields_set: set[str] = data.model_fields_set

        # 변경 후 값 계산 — Compute the post-edit values
        new_caregiver: UUID | None = (
            data.caregiver_id if "caregiver_id" in fields_set else shift.caregiver_id
        )
        new_start: time = (
            parse_time(data.start_time, "start_time") if data.start_time is not None else shift.start_time
        )
        new_end: time = (
            parse_time(data.end_time, "end_time") if data.end_time is not None else shift.end_time
        )
        if new_caregiver is not None and new_caregiver != shift.caregiver_id:
            await self._validate_caregiver(db, new_caregiver, shift.client_id)

        new_status: str
        if data.status is not None:
            if data.status not in {s.value for s in ShiftStatus}:
                raise ValidationError(f"알 수 없는 상태입니다 (Unknown status: {data.status})")
            if data.status == ShiftStatus.FILLED.value and new_caregiver is None:
                raise ValidationError(
                    "제공자 없이 FILLED 상태로 변경할 수 없습니다 (FILLED requires a caregiver)"
                )
            new_status = data.status
        elif new_caregiver is None and shift.status == ShiftStatus.FILLED.value:
            new_status = ShiftStatus.SCHEDULED.value
        elif new_caregiver is not None and shift.status == ShiftStatus.SCHEDULED.value:
            new_status = ShiftStatus.FILLED.value
        else:
            new_status = shift.status

        cascade_end: date | None = None
        if data.recurrence is not None:
            cascade_end = self._resolve_recurrence_end(data.recurrence, shift.shift_date, today)

        shift.caregiver_id = new_caregiver
        shift.start_time = new_start
        shift.end_time = new_end
        shift.status = new_status
        if "internal_notes" in fields_set:
            shift.internal_notes = data.internal_notes
        if "instruction_notes" in fields_set:
            shift.instruction_notes = data.instruction_notes

        # 대상자가 저장하면 대기 중인 시각 보정은 확인된 것으로 처리
        if shift.time_correction_status == TimeCorrectionStatus.PENDING.value:
            shift.time_correction_status = TimeCorrectionStatus.ACKNOWLEDGED.value

        await self.mark_override_if_changed(db, shift)
        await db.flush()

        conflicts: list[dict] = await conflict_service.find_conflicts(
            db, shift.caregiver_id, shift.shift_date, shift.start_time, shift.end_time, shift.id
        )

        recurring_updated: int = 0
        pattern_id: UUID | None = None
        if data.recurrence is not None and cascade_end is not None and new_caregiver is not None:
            pattern_id, recurring_updated = await self._cascade_caregiver(
                db, ctx, shift, data.recurrence.type, cascade_end
            )

        await db.refresh(shift)
        return {
            "shift": shift,
            "conflicts": conflicts,
            "recurring_updated": recurring_updated,
            "pattern_id": pattern_id,
        }

    async def _cascade_caregiver(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        shift: Shift,
        recurrence_type: str,
        end_date: date,
    ) -> tuple[UUID, int]:
        """반복 규칙에 맞는 미래 미배정 시프트에 제공자를 배정합니다.

        Record a tracking pattern for the instruction and assign the
        shift's caregiver to every future SCHEDULED, unassigned shift of
        the same client and shift type matching the rule anchored at the
        shift's date, up to and including ``end_date``. Shifts already
        assigned to someone else are left untouched.

        Returns:
            tuple[UUID, int]: (추적 패턴 ID, 배정된 시프트 수)
                              (Tracking pattern ID, assigned shift count)
        """
        pattern: ShiftPattern = await shift_pattern_repository.create(
            db,
            {
                "client_id": shift.client_id,
                "caregiver_id": shift.caregiver_id,
                "shift_type_id": shift.shift_type_id,
                "recurrence_type": recurrence_type,
                "start_date": shift.shift_date,
                "end_date": end_date,
                "is_active": True,
                "created_by": ctx.user_id,
            },
        )

        candidates: Sequence[Shift] = await shift_repository.get_unassigned_after(
            db, shift.client_id, shift.shift_type_id, shift.shift_date, end_date
        )
        updated: int = 0
        for candidate in candidates:
            if not occurs_on(recurrence_type, shift.shift_date, candidate.shift_date):
                continue
            candidate.caregiver_id = shift.caregiver_id
            candidate.status = ShiftStatus.FILLED.value
            await self.mark_override_if_changed(db, candidate)
            updated += 1

        await db.flush()
        return pattern.id, updated

    # --- 삭제 / 확인 (Delete / Verify) ---

    async def delete_shift(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        shift_id: UUID,
    ) -> None:
        """시프트를 삭제합니다 (원본 패턴에는 영향 없음).

        Delete a shift instance. The originating pattern is unaffected.

        Raises:
            NotFoundError: 시프트가 없을 때 (When shift not found)
            AuthorizationError: 소유 대상자가 아닐 때 (Caller does not own the shift)
            BadRequestError: 완료된 시프트일 때 (When the shift is COMPLETED)
        """
        shift: Shift = await self.get_shift(db, shift_id)
        require(can_manage_client_schedule(ctx, shift.client_id))

        if shift.status == ShiftStatus.COMPLETED.value:
            raise BadRequestError(
                "완료된 시프트는 삭제할 수 없습니다 (Completed shifts cannot be deleted)"
            )
        await shift_repository.delete(db, shift_id)

    async def verify_shift(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        shift_id: UUID,
        verified: bool,
        today: date | None = None,
    ) -> Shift:
        """대상자가 시프트 수행을 확인하거나 확인을 취소합니다.

        Set or clear client verification. Verifying requires a caregiver,
        a FILLED or COMPLETED status and a date on or before today.

        Raises:
            NotFoundError: 시프트가 없을 때 (When shift not found)
            AuthorizationError: 소유 대상자가 아닐 때 (Caller does not own the shift)
            BadRequestError: 확인 조건 불충족 (Verification preconditions not met)
        """
        today = today or date.today()
        shift: Shift = await self.get_shift(db, shift_id)
        require(can_manage_client_schedule(ctx, shift.client_id))

        if verified:
            if shift.caregiver_id is None:
                raise BadRequestError(
                    "제공자가 없는 시프트는 확인할 수 없습니다 (Cannot verify a shift without a caregiver)"
                )
            if shift.shift_date > today:
                raise BadRequestError(
                    "미래 시프트는 확인할 수 없습니다 (Cannot verify a future shift)"
                )
            if shift.status not in (ShiftStatus.FILLED.value, ShiftStatus.COMPLETED.value):
                raise BadRequestError(
                    "배정 또는 완료 상태의 시프트만 확인할 수 있습니다 "
                    "(Only filled or completed shifts can be verified)"
                )
            shift.client_verified = True
            shift.client_verified_at = datetime.now(timezone.utc)
        else:
            shift.client_verified = False
            shift.client_verified_at = None

        await db.flush()
        await db.refresh(shift)
        return shift

    # --- 응답 구성 (Response building) ---

    async def build_responses(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        shifts: Sequence[Shift],
    ) -> list[dict]:
        """시프트 응답 목록을 구성합니다 (이름은 한 번에 조회).

        Build response dicts for many shifts, resolving client, caregiver
        and shift type names in bulk. internal_notes is only included for
        the owning client.
        """
        client_names = await user_repository.get_client_names(db, [s.client_id for s in shifts])
        caregiver_names = await user_repository.get_caregiver_names(
            db, [s.caregiver_id for s in shifts if s.caregiver_id is not None]
        )
        type_names = await shift_type_repository.get_names(db, [s.shift_type_id for s in shifts])

        items: list[dict] = []
        for s in shifts:
            items.append(
                {
                    "id": str(s.id),
                    "client_id": str(s.client_id),
                    "client_name": client_names.get(s.client_id),
                    "shift_type_id": str(s.shift_type_id),
                    "shift_type_name": type_names.get(s.shift_type_id),
                    "pattern_id": str(s.pattern_id) if s.pattern_id else None,
                    "date": s.shift_date,
                    "start_time": format_time(s.start_time),
                    "end_time": format_time(s.end_time),
                    "caregiver_id": str(s.caregiver_id) if s.caregiver_id else None,
                    "caregiver_name": caregiver_names.get(s.caregiver_id) if s.caregiver_id else None,
                    "status": s.status,
                    "origin": s.origin,
                    "is_pattern_override": s.is_pattern_override,
                    "internal_notes": (
                        s.internal_notes if can_manage_client_schedule(ctx, s.client_id) else None
                    ),
                    "instruction_notes": s.instruction_notes,
                    "client_verified": s.client_verified,
                    "client_verified_at": s.client_verified_at,
                    "actual_start_time": format_time(s.actual_start_time),
                    "actual_end_time": format_time(s.actual_end_time),
                    "caregiver_note": s.caregiver_note,
                    "time_correction_status": s.time_correction_status,
                    "time_correction_at": s.time_correction_at,
                    "created_at": s.created_at,
                    "updated_at": s.updated_at,
                }
            )
        return items

    async def build_response(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        shift: Shift,
    ) -> dict:
        """단일 시프트 응답을 구성합니다 (Build one shift response)."""
        return (await self.build_responses(db, ctx, [shift]))[0]


# 싱글턴 인스턴스 — Singleton instance
shift_service: ShiftService = ShiftService()
