"""충돌 감지 서비스 — 제공자 중복 배정 경고.

Conflict Service — Finds a caregiver's other shifts overlapping a
proposed date and time range. Conflicts are informational: callers save
the assignment anyway and return the conflicts next to it.

Overlap rule (half-open, overnight ranges wrap past midnight):
    existing.start < new.end AND new.start < existing.end
"""

from datetime import date, time
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.scheduling import Shift
from care_scheduler.repositories.shift_repository import shift_repository
from care_scheduler.repositories.shift_type_repository import shift_type_repository
from care_scheduler.repositories.user_repository import user_repository
from care_scheduler.utils.time_range import format_time, parse_time, ranges_overlap


class ConflictService:
    """충돌 감지 서비스.

    Conflict detection over a caregiver's shifts on a single date.
    CANCELLED shifts never conflict.
    """

    async def find_conflicts(
        self,
        db: AsyncSession,
        caregiver_id: UUID | None,
        shift_date: date,
        start_time: time,
        end_time: time,
        exclude_shift_id: UUID | None = None,
    ) -> list[dict]:
        """겹치는 시프트 목록을 반환합니다.

        Return the caregiver's shifts on ``shift_date`` that overlap the
        given range, excluding ``exclude_shift_id``. An unassigned shift
        (caregiver None) has no conflicts.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            caregiver_id: 제공자 UUID 또는 None (Caregiver profile UUID or None)
            shift_date: 날짜 (Calendar date)
            start_time: 시작 시각 (Range start)
            end_time: 종료 시각 (Range end; at or before start means overnight)
            exclude_shift_id: 제외할 시프트, 선택 (The shift being edited)

        Returns:
            list[dict]: 충돌 정보 목록 — 대상자 이름, 유형 이름, 시각 포함
                        (Conflicts with client name, shift type name and times)
        """
        if caregiver_id is None:
            return []

        candidates: Sequence[Shift] = await shift_repository.get_caregiver_shifts_on(
            db, caregiver_id, shift_date, exclude_shift_id
        )
        overlapping: list[Shift] = [
            s for s in candidates
            if ranges_overlap(s.start_time, s.end_time, start_time, end_time)
        ]
        if not overlapping:
            return []

        client_names: dict[UUID, str] = await user_repository.get_client_names(
            db, [s.client_id for s in overlapping]
        )
        type_names: dict[UUID, str] = await shift_type_repository.get_names(
            db, [s.shift_type_id for s in overlapping]
        )

        return [
            {
                "shift_id": str(s.id),
                "client_id": str(s.client_id),
                "client_name": client_names.get(s.client_id),
                "shift_type_name": type_names.get(s.shift_type_id),
                "date": s.shift_date,
                "start_time": format_time(s.start_time),
                "end_time": format_time(s.end_time),
            }
            for s in overlapping
        ]

    async def check_conflicts(
        self,
        db: AsyncSession,
        caregiver_id: UUID,
        shift_date: date,
        start_time: str,
        end_time: str,
        exclude_shift_id: UUID | None = None,
    ) -> dict:
        """"HH:MM" 입력으로 충돌 여부를 검사합니다.

        Check conflicts for wire-format ("HH:MM") times.

        Returns:
            dict: {"has_conflict": bool, "conflicts": [...]}

        Raises:
            ValidationError: 시각 형식이 잘못되었을 때 (Malformed times)
        """
        conflicts: list[dict] = await self.find_conflicts(
            db,
            caregiver_id,
            shift_date,
            parse_time(start_time, "start_time"),
            parse_time(end_time, "end_time"),
            exclude_shift_id,
        )
        return {"has_conflict": len(conflicts) > 0, "conflicts": conflicts}


# 싱글턴 인스턴스 — Singleton instance
conflict_service: ConflictService = ConflictService()
