"""반복 패턴 레포지토리 — 패턴 DB 쿼리 담당.

Shift Pattern Repository — Database queries for recurrence patterns,
including the active-pattern selection used by the generation job.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.scheduling import ShiftPattern
from care_scheduler.repositories.base import BaseRepository


class ShiftPatternRepository(BaseRepository[ShiftPattern]):
    """반복 패턴 레포지토리.

    Recurrence pattern repository.

    Extends:
        BaseRepository[ShiftPattern]
    """

    def __init__(self) -> None:
        super().__init__(ShiftPattern)

    async def get_by_client(
        self,
        db: AsyncSession,
        client_id: UUID,
        include_inactive: bool = False,
    ) -> Sequence[ShiftPattern]:
        """대상자의 패턴 목록을 최신순으로 조회합니다.

        Retrieve a client's patterns, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            client_id: 대상자 UUID (Client profile UUID)
            include_inactive: 비활성 패턴 포함 여부 (Include soft-deleted patterns)

        Returns:
            Sequence[ShiftPattern]: 패턴 목록 (List of patterns)
        """
        query: Select = select(ShiftPattern).where(ShiftPattern.client_id == client_id)
        if not include_inactive:
            query = query.where(ShiftPattern.is_active.is_(True))
        query = query.order_by(ShiftPattern.created_at.desc())

        result = await db.execute(query)
        return result.scalars().all()

    async def get_active_ids(
        self,
        db: AsyncSession,
        client_id: UUID | None = None,
        pattern_id: UUID | None = None,
    ) -> list[UUID]:
        """생성 대상 활성 패턴 ID 목록을 조회합니다.

        Retrieve the IDs of active patterns to generate, optionally
        restricted to one client or one pattern.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            client_id: 대상자 필터, 선택 (Optional client filter)
            pattern_id: 패턴 필터, 선택 (Optional single-pattern filter)

        Returns:
            list[UUID]: 패턴 ID 목록, 생성 순 (Pattern IDs in creation order)
        """
        query: Select = select(ShiftPattern.id).where(ShiftPattern.is_active.is_(True))
        if client_id is not None:
            query = query.where(ShiftPattern.client_id == client_id)
        if pattern_id is not None:
            query = query.where(ShiftPattern.id == pattern_id)
        query = query.order_by(ShiftPattern.created_at, ShiftPattern.id)

        result = await db.execute(query)
        return list(result.scalars().all())


# 싱글턴 인스턴스 — Singleton instance
shift_pattern_repository: ShiftPatternRepository = ShiftPatternRepository()
