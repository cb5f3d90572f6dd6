"""반복 패턴 서비스 — 패턴 비즈니스 로직.

Pattern Service — Business logic for recurrence patterns: validation,
update with optional regeneration, and soft deletion.
Generation itself lives in generation_service; routers run it after the
pattern change is committed.
"""

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.scheduling import ShiftPattern
from care_scheduler.repositories.shift_pattern_repository import shift_pattern_repository
from care_scheduler.repositories.shift_repository import shift_repository
from care_scheduler.repositories.shift_type_repository import shift_type_repository
from care_scheduler.repositories.user_repository import user_repository
from care_scheduler.schemas.scheduling import PatternCreate, PatternUpdate
from care_scheduler.services.generation_service import generation_service
from care_scheduler.services.permission_service import (
    AccessContext,
    can_manage_client_schedule,
    can_view_client_schedule,
    require,
)
from care_scheduler.utils.exceptions import NotFoundError, ValidationError
from care_scheduler.utils.recurrence import validate_recurrence_type


class PatternService:
    """반복 패턴 서비스.

    Recurrence pattern CRUD for the owning client.
    """

    async def _validate_range(
        self,
        start_date: date,
        end_date: date | None,
        today: date,
    ) -> None:
        """패턴 기간을 검증합니다.

        Validate end_date ≥ start_date and end_date ≤ the horizon cap.

        Raises:
            ValidationError: 기간이 잘못되었을 때 (Invalid range)
        """
        if end_date is None:
            return
        if end_date < start_date:
            raise ValidationError(
                "종료일은 시작일보다 빠를 수 없습니다 (end_date must not be before start_date)"
            )
        cap: date = generation_service.get_horizon_cap(today)
        if end_date > cap:
            raise ValidationError(
                f"종료일은 {cap.isoformat()} 이후일 수 없습니다 "
                f"(end_date must not be after {cap.isoformat()})"
            )

    async def _validate_caregiver(
        self,
        db: AsyncSession,
        caregiver_id: UUID,
        client_id: UUID,
    ) -> None:
        # 활성 관계가 없으면 배정 불가 (Only actively related caregivers may be assigned)
        if not await user_repository.has_active_relationship(db, caregiver_id, client_id):
            raise ValidationError(
                "대상자와 활성 관계인 제공자가 아닙니다 "
                "(Caregiver not found or has no active relationship with this client)"
            )

    async def get_pattern(
        self,
        db: AsyncSession,
        pattern_id: UUID,
    ) -> ShiftPattern:
        """패턴을 조회합니다.

        Raises:
            NotFoundError: 패턴이 없을 때 (When pattern not found)
        """
        pattern: ShiftPattern | None = await shift_pattern_repository.get_by_id(db, pattern_id)
        if pattern is None:
            raise NotFoundError("반복 패턴을 찾을 수 없습니다 (Pattern not found)")
        return pattern

    async def list_patterns(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        client_id: UUID,
    ) -> Sequence[ShiftPattern]:
        """대상자의 활성 패턴 목록을 조회합니다 (List a client's active patterns)."""
        require(can_view_client_schedule(ctx, client_id))
        return await shift_pattern_repository.get_by_client(db, client_id)

    async def create_pattern(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        client_id: UUID,
        data: PatternCreate,
        today: date | None = None,
    ) -> ShiftPattern:
        """새 반복 패턴을 생성합니다.

        Create a recurrence pattern after validating the rule, the date
        range, shift type ownership and the caregiver relationship.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            ctx: 호출자 컨텍스트 (Caller context)
            client_id: 소유 대상자 UUID (Owning client)
            data: 패턴 생성 데이터 (Pattern creation data)
            today: 기준일, 선택 (Reference date for the horizon cap)

        Returns:
            ShiftPattern: 생성된 패턴 (Created pattern)

        Raises:
            AuthorizationError: 소유 대상자가 아닐 때 (Caller does not own the client)
            ValidationError: 규칙/기간/제공자 검증 실패 (Invalid rule, range or caregiver)
            NotFoundError: 시프트 유형이 없을 때 (Shift type not found for this client)
        """
        require(can_manage_client_schedule(ctx, client_id))
        today = today or date.today()

        validate_recurrence_type(data.recurrence_type)
        await self._validate_range(data.start_date, data.end_date, today)

        shift_type = await shift_type_repository.get_by_id(db, data.shift_type_id, client_id)
        if shift_type is None:
            raise NotFoundError("시프트 유형을 찾을 수 없습니다 (Shift type not found)")

        if data.caregiver_id is not None:
            await self._validate_caregiver(db, data.caregiver_id, client_id)

        return await shift_pattern_repository.create(
            db,
            {
                "client_id": client_id,
                "caregiver_id": data.caregiver_id,
                "shift_type_id": data.shift_type_id,
                "recurrence_type": data.recurrence_type,
                "start_date": data.start_date,
                "end_date": data.end_date,
                "is_active": True,
                "created_by": ctx.user_id,
            },
        )

    async def update_pattern(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        pattern_id: UUID,
        data: PatternUpdate,
        today: date | None = None,
    ) -> tuple[ShiftPattern, int]:
        """반복 패턴을 수정합니다.

        Update a pattern. With ``regenerate_shifts`` the pattern's future
        GENERATED shifts (date ≥ today) are deleted first so the next
        generation run recreates them from the new values; overrides and
        manual shifts are kept.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            ctx: 호출자 컨텍스트 (Caller context)
            pattern_id: 패턴 UUID (Pattern UUID)
            data: 수정 데이터 (Update data; caregiver_id null = unassigned pattern)
            today: 기준일, 선택 (Reference date)

        Returns:
            tuple[ShiftPattern, int]: (수정된 패턴, 삭제된 시프트 수)
                                      (Updated pattern, deleted shift count)

        Raises:
            NotFoundError: 패턴이 없을 때 (When pattern not found)
            AuthorizationError: 소유 대상자가 아닐 때 (Caller does not own the pattern)
            ValidationError: 검증 실패 (Invalid rule, range or caregiver)
        """
        today = today or date.today()
        pattern: ShiftPattern = await self.get_pattern(db, pattern_id)
        require(can_manage_client_schedule(ctx, pattern.client_id))

        fields_set: set[str] = data.model_fields_set
        update_data: dict = {}

        if data.recurrence_type is not None:
            update_data["recurrence_type"] = validate_recurrence_type(data.recurrence_type)
        if data.start_date is not None:
            update_data["start_date"] = data.start_date
        if "end_date" in fields_set:
            update_data["end_date"] = data.end_date
        if "caregiver_id" in fields_set:
            if data.caregiver_id is not None:
                await self._validate_caregiver(db, data.caregiver_id, pattern.client_id)
            update_data["caregiver_id"] = data.caregiver_id

        await self._validate_range(
            update_data.get("start_date", pattern.start_date),
            update_data.get("end_date", pattern.end_date),
            today,
        )

        deleted: int = 0
        if data.regenerate_shifts:
            deleted = await shift_repository.delete_future_generated(db, pattern_id, today)

        if update_data:
            updated: ShiftPattern | None = await shift_pattern_repository.update(db, pattern_id, update_data)
            if updated is None:
                raise NotFoundError("반복 패턴을 찾을 수 없습니다 (Pattern not found)")
            pattern = updated

        return pattern, deleted

    async def deactivate_pattern(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        pattern_id: UUID,
        today: date | None = None,
    ) -> int:
        """반복 패턴을 비활성화하고 미래 생성 시프트를 삭제합니다.

        Soft-delete a pattern (is_active = False) and delete its future
        GENERATED shifts. Past shifts and overrides stay.

        Returns:
            int: 삭제된 시프트 수 (Deleted shift count)

        Raises:
            NotFoundError: 패턴이 없을 때 (When pattern not found)
            AuthorizationError: 소유 대상자가 아닐 때 (Caller does not own the pattern)
        """
        today = today or date.today()
        pattern: ShiftPattern = await self.get_pattern(db, pattern_id)
        require(can_manage_client_schedule(ctx, pattern.client_id))

        deleted: int = await shift_repository.delete_future_generated(db, pattern_id, today)
        pattern.is_active = False
        await db.flush()
        return deleted

    async def build_response(
        self,
        db: AsyncSession,
        pattern: ShiftPattern,
    ) -> dict:
        """패턴 응답 딕셔너리를 구성합니다 (제공자/유형 이름 포함).

        Build the pattern response dict with caregiver and shift type names.
        """
        caregiver_name: str | None = None
        if pattern.caregiver_id is not None:
            names = await user_repository.get_caregiver_names(db, [pattern.caregiver_id])
            caregiver_name = names.get(pattern.caregiver_id)
        type_names = await shift_type_repository.get_names(db, [pattern.shift_type_id])

        return {
            "id": str(pattern.id),
            "client_id": str(pattern.client_id),
            "caregiver_id": str(pattern.caregiver_id) if pattern.caregiver_id else None,
            "caregiver_name": caregiver_name,
            "shift_type_id": str(pattern.shift_type_id),
            "shift_type_name": type_names.get(pattern.shift_type_id),
            "recurrence_type": pattern.recurrence_type,
            "start_date": pattern.start_date,
            "end_date": pattern.end_date,
            "is_active": pattern.is_active,
            "created_at": pattern.created_at,
        }


# 싱글턴 인스턴스 — Singleton instance
pattern_service: PatternService = PatternService()
