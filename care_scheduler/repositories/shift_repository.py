"""시프트 레포지토리 — 시프트 관련 DB 쿼리 담당.

Shift Repository — Handles all shift-related database queries.
Extends BaseRepository with date-range listing, duplicate checks,
per-caregiver day lookups for conflict detection, and the set-based
statements used by time-off clearing and pattern regeneration.
"""

from datetime import date
from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.enums import ShiftOrigin, ShiftStatus, TimeCorrectionStatus
from care_scheduler.models.scheduling import Shift
from care_scheduler.repositories.base import BaseRepository


class ShiftRepository(BaseRepository[Shift]):
    """시프트 레포지토리.

    Shift repository with range queries, duplicate checks and set-based updates.

    Extends:
        BaseRepository[Shift]
    """

    def __init__(self) -> None:
        """레포지토리를 초기화합니다.

        Initialize the shift repository with Shift model.
        """
        super().__init__(Shift)

    async def get_by_range(
        self,
        db: AsyncSession,
        start_date: date,
        end_date: date,
        client_id: UUID | None = None,
        caregiver_id: UUID | None = None,
        client_ids: Sequence[UUID] | None = None,
    ) -> Sequence[Shift]:
        """기간 내 시프트를 날짜, 시작 시각 순으로 조회합니다.

        Retrieve shifts within [start_date, end_date] ordered by date and
        start time. At least one of the filters is expected.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            start_date: 시작일, 포함 (Range start, inclusive)
            end_date: 종료일, 포함 (Range end, inclusive)
            client_id: 대상자 필터, 선택 (Optional client filter)
            caregiver_id: 제공자 필터, 선택 (Optional caregiver filter)
            client_ids: 대상자 목록 필터, 선택 (Optional set of allowed clients)

        Returns:
            Sequence[Shift]: 시프트 목록 (List of shifts)
        """
        query: Select = select(Shift).where(
            Shift.shift_date >= start_date,
            Shift.shift_date <= end_date,
        )
        if client_id is not None:
            query = query.where(Shift.client_id == client_id)
        if caregiver_id is not None:
            query = query.where(Shift.caregiver_id == caregiver_id)
        if client_ids is not None:
            query = query.where(Shift.client_id.in_(list(client_ids)))
        query = query.order_by(Shift.shift_date, Shift.start_time)

        result = await db.execute(query)
        return result.scalars().all()

    async def get_existing_dates(
        self,
        db: AsyncSession,
        client_id: UUID,
        shift_type_id: UUID,
        start_date: date,
        end_date: date,
    ) -> set[date]:
        """대상자+유형 조합으로 이미 시프트가 있는 날짜를 조회합니다.

        Retrieve the dates in range that already hold a shift for the
        client + shift type pair, whatever its origin or status.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            client_id: 대상자 UUID (Client profile UUID)
            shift_type_id: 시프트 유형 UUID (Shift type UUID)
            start_date: 시작일 (Range start, inclusive)
            end_date: 종료일 (Range end, inclusive)

        Returns:
            set[date]: 기존 날짜 집합 (Dates that already have a shift)
        """
        result = await db.execute(
            select(Shift.shift_date).where(
                Shift.client_id == client_id,
                Shift.shift_type_id == shift_type_id,
                Shift.shift_date >= start_date,
                Shift.shift_date <= end_date,
            )
        )
        return set(result.scalars().all())

    async def check_duplicate(
        self,
        db: AsyncSession,
        client_id: UUID,
        shift_type_id: UUID,
        shift_date: date,
        exclude_id: UUID | None = None,
    ) -> bool:
        """동일 대상자+유형+날짜 조합의 시프트가 있는지 확인합니다.

        Check if a shift already exists for the same client + shift type + date.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            client_id: 대상자 UUID (Client profile UUID)
            shift_type_id: 시프트 유형 UUID (Shift type UUID)
            shift_date: 날짜 (Calendar date)
            exclude_id: 제외할 시프트 UUID, 선택 (Shift UUID to exclude — for updates)

        Returns:
            bool: 중복 존재 여부 (Whether a duplicate exists)
        """
        query = (
            select(func.count())
            .select_from(Shift)
            .where(
                Shift.client_id == client_id,
                Shift.shift_type_id == shift_type_id,
                Shift.shift_date == shift_date,
            )
        )
        if exclude_id is not None:
            query = query.where(Shift.id != exclude_id)

        count: int = (await db.execute(query)).scalar() or 0
        return count > 0

    async def get_caregiver_shifts_on(
        self,
        db: AsyncSession,
        caregiver_id: UUID,
        shift_date: date,
        exclude_id: UUID | None = None,
    ) -> Sequence[Shift]:
        """제공자의 특정 날짜 시프트를 조회합니다 (취소 제외).

        Retrieve a caregiver's non-cancelled shifts on one date, used by
        conflict detection.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caregiver_id: 제공자 UUID (Caregiver profile UUID)
            shift_date: 날짜 (Calendar date)
            exclude_id: 제외할 시프트 UUID, 선택 (Shift being edited)

        Returns:
            Sequence[Shift]: 시프트 목록 (List of shifts)
        """
        query: Select = select(Shift).where(
            Shift.caregiver_id == caregiver_id,
            Shift.shift_date == shift_date,
            Shift.status != ShiftStatus.CANCELLED.value,
        )
        if exclude_id is not None:
            query = query.where(Shift.id != exclude_id)
        query = query.order_by(Shift.start_time)

        result = await db.execute(query)
        return result.scalars().all()

    async def get_unassigned_after(
        self,
        db: AsyncSession,
        client_id: UUID,
        shift_type_id: UUID,
        after: date,
        through: date,
    ) -> Sequence[Shift]:
        """기준일 이후 미배정 시프트를 조회합니다.

        Retrieve SCHEDULED shifts without a caregiver for the client +
        shift type with ``after < date <= through``.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            client_id: 대상자 UUID (Client profile UUID)
            shift_type_id: 시프트 유형 UUID (Shift type UUID)
            after: 기준일, 제외 (Exclusive lower bound)
            through: 종료일, 포함 (Inclusive upper bound)

        Returns:
            Sequence[Shift]: 미배정 시프트 목록 (Unassigned shifts, by date)
        """
        result = await db.execute(
            select(Shift)
            .where(
                Shift.client_id == client_id,
                Shift.shift_type_id == shift_type_id,
                Shift.shift_date > after,
                Shift.shift_date <= through,
                Shift.caregiver_id.is_(None),
                Shift.status == ShiftStatus.SCHEDULED.value,
            )
            .order_by(Shift.shift_date)
        )
        return result.scalars().all()

    async def clear_caregiver_shifts(
        self,
        db: AsyncSession,
        caregiver_id: UUID,
        client_id: UUID,
        start_date: date,
        end_date: date,
    ) -> Sequence[Shift]:
        """기간 내 제공자+대상자 시프트의 배정을 해제합니다.

        Unassign the caregiver from every shift of the client within
        [start_date, end_date] (caregiver → null, status → SCHEDULED).
        Completed and cancelled shifts are left alone.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caregiver_id: 제공자 UUID (Caregiver profile UUID)
            client_id: 대상자 UUID (Client profile UUID)
            start_date: 시작일, 포함 (Range start, inclusive)
            end_date: 종료일, 포함 (Range end, inclusive)

        Returns:
            Sequence[Shift]: 해제된 시프트 (Cleared shifts)
        """
        result = await db.execute(
            select(Shift).where(
                Shift.caregiver_id == caregiver_id,
                Shift.client_id == client_id,
                Shift.shift_date >= start_date,
                Shift.shift_date <= end_date,
                Shift.status.not_in([ShiftStatus.COMPLETED.value, ShiftStatus.CANCELLED.value]),
            )
        )
        shifts: Sequence[Shift] = result.scalars().all()
        for shift in shifts:
            shift.caregiver_id = None
            shift.status = ShiftStatus.SCHEDULED.value
        await db.flush()
        return shifts

    async def delete_future_generated(
        self,
        db: AsyncSession,
        pattern_id: UUID,
        from_date: date,
    ) -> int:
        """패턴이 생성한 미래 시프트를 삭제합니다 (수정/완료 시프트 제외).

        Delete untouched GENERATED shifts of a pattern dated on or after
        ``from_date``. Overrides and completed shifts are kept.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            pattern_id: 패턴 UUID (Pattern UUID)
            from_date: 기준일, 포함 (Inclusive lower bound, usually today)

        Returns:
            int: 삭제된 시프트 수 (Count of deleted shifts)
        """
        result = await db.execute(
            select(Shift).where(
                Shift.pattern_id == pattern_id,
                Shift.origin == ShiftOrigin.GENERATED.value,
                Shift.shift_date >= from_date,
                Shift.status != ShiftStatus.COMPLETED.value,
            )
        )
        shifts: Sequence[Shift] = result.scalars().all()
        for shift in shifts:
            await db.delete(shift)
        await db.flush()
        return len(shifts)

    async def get_pending_corrections(
        self,
        db: AsyncSession,
        client_id: UUID,
    ) -> Sequence[Shift]:
        """대상자의 미확인 시각 보정 시프트를 최신순으로 조회합니다.

        Retrieve the client's shifts with a PENDING time correction,
        most recently reported first.
        """
        result = await db.execute(
            select(Shift)
            .where(
                Shift.client_id == client_id,
                Shift.time_correction_status == TimeCorrectionStatus.PENDING.value,
            )
            .order_by(Shift.time_correction_at.desc())
        )
        return result.scalars().all()

    async def has_worked_shift_on(
        self,
        db: AsyncSession,
        caregiver_id: UUID,
        client_id: UUID,
        shift_date: date,
    ) -> bool:
        """제공자가 해당 날짜에 대상자와 배정/완료 시프트가 있는지 확인합니다."""
        count: int = (
            await db.execute(
                select(func.count())
                .select_from(Shift)
                .where(
                    Shift.caregiver_id == caregiver_id,
                    Shift.client_id == client_id,
                    Shift.shift_date == shift_date,
                    Shift.status.in_([ShiftStatus.FILLED.value, ShiftStatus.COMPLETED.value]),
                )
            )
        ).scalar() or 0
        return count > 0


# 싱글턴 인스턴스 — Singleton instance
shift_repository: ShiftRepository = ShiftRepository()
