"""휴가 요청 레포지토리 — 휴가 요청 DB 쿼리 담당.

Time-Off Repository — Database queries for caregiver time-off requests.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.time_off import TimeOffRequest
from care_scheduler.repositories.base import BaseRepository


class TimeOffRepository(BaseRepository[TimeOffRequest]):
    """휴가 요청 레포지토리.

    Time-off request repository with role-scoped listing.

    Extends:
        BaseRepository[TimeOffRequest]
    """

    def __init__(self) -> None:
        super().__init__(TimeOffRequest)

    async def get_by_filters(
        self,
        db: AsyncSession,
        caregiver_id: UUID | None = None,
        client_id: UUID | None = None,
        status: str | None = None,
        include_dismissed: bool = False,
    ) -> Sequence[TimeOffRequest]:
        """필터 조건에 맞는 휴가 요청을 최신순으로 조회합니다.

        Retrieve time-off requests matching the filters, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caregiver_id: 제공자 필터, 선택 (Optional caregiver filter)
            client_id: 대상자 필터, 선택 (Optional client filter)
            status: 상태 필터, 선택 (Optional status filter)
            include_dismissed: 숨긴 요청 포함 여부 (Include dismissed requests)

        Returns:
            Sequence[TimeOffRequest]: 휴가 요청 목록 (List of requests)
        """
        query: Select = select(TimeOffRequest)
        if caregiver_id is not None:
            query = query.where(TimeOffRequest.caregiver_id == caregiver_id)
        if client_id is not None:
            query = query.where(TimeOffRequest.client_id == client_id)
        if status is not None:
            query = query.where(TimeOffRequest.status == status)
        if not include_dismissed:
            query = query.where(TimeOffRequest.dismissed.is_(False))
        query = query.order_by(TimeOffRequest.created_at.desc())

        result = await db.execute(query)
        return result.scalars().all()


# 싱글턴 인스턴스 — Singleton instance
time_off_repository: TimeOffRepository = TimeOffRepository()
