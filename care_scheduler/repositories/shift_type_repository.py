"""시프트 유형 레포지토리 — 시프트 유형 DB 쿼리 담당.

Shift Type Repository — Database queries for client-owned shift types.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.scheduling import Shift, ShiftPattern, ShiftType
from care_scheduler.repositories.base import BaseRepository


class ShiftTypeRepository(BaseRepository[ShiftType]):
    """시프트 유형 레포지토리.

    Shift type repository with client listing and usage checks.

    Extends:
        BaseRepository[ShiftType]
    """

    def __init__(self) -> None:
        super().__init__(ShiftType)

    async def get_by_client(
        self,
        db: AsyncSession,
        client_id: UUID,
    ) -> Sequence[ShiftType]:
        """대상자의 시프트 유형을 시작 시각 순으로 조회합니다.

        Retrieve a client's shift types ordered by start time.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            client_id: 대상자 UUID (Client profile UUID)

        Returns:
            Sequence[ShiftType]: 시프트 유형 목록 (List of shift types)
        """
        result = await db.execute(
            select(ShiftType)
            .where(ShiftType.client_id == client_id)
            .order_by(ShiftType.start_time, ShiftType.name)
        )
        return result.scalars().all()

    async def is_in_use(
        self,
        db: AsyncSession,
        shift_type_id: UUID,
    ) -> bool:
        """시프트 또는 패턴이 이 유형을 참조하는지 확인합니다.

        Check whether any shift or pattern references the shift type.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            shift_type_id: 시프트 유형 UUID (Shift type UUID)

        Returns:
            bool: 사용 중 여부 (Whether the type is referenced)
        """
        shift_count: int = (
            await db.execute(
                select(func.count()).select_from(Shift).where(Shift.shift_type_id == shift_type_id)
            )
        ).scalar() or 0
        if shift_count > 0:
            return True

        pattern_count: int = (
            await db.execute(
                select(func.count()).select_from(ShiftPattern).where(ShiftPattern.shift_type_id == shift_type_id)
            )
        ).scalar() or 0
        return pattern_count > 0

    async def get_names(
        self,
        db: AsyncSession,
        shift_type_ids: Sequence[UUID],
    ) -> dict[UUID, str]:
        """유형 ID → 이름 매핑을 조회합니다 (Resolve shift type names in one query)."""
        if not shift_type_ids:
            return {}
        result = await db.execute(
            select(ShiftType.id, ShiftType.name).where(ShiftType.id.in_(list(set(shift_type_ids))))
        )
        return {row.id: row.name for row in result.all()}


# 싱글턴 인스턴스 — Singleton instance
shift_type_repository: ShiftTypeRepository = ShiftTypeRepository()
