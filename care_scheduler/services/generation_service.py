"""시프트 생성 서비스 — 반복 패턴을 시프트로 전개.

Generation Service — Expands active recurrence patterns into concrete
shifts up to a rolling horizon.

Guarantees:
    - 멱등성: 이미 시프트가 있는 (대상자, 유형, 날짜)는 건너뜀
      (Idempotent: any existing shift for (client, shift type, date) is skipped)
    - 수정된 시프트는 읽기만 하고 절대 변경/삭제하지 않음
      (Overrides are never modified or deleted; generation only inserts)
    - 상한: 올해 + GENERATION_MAX_YEARS_AHEAD 의 12월 31일
      (Horizon cap: 31 December of today.year + GENERATION_MAX_YEARS_AHEAD)
    - 패턴 단위 트랜잭션: 한 패턴의 실패는 기록 후 다음 패턴으로 진행
      (One transaction per pattern; a failing pattern is reported and skipped)
"""

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.config import settings
from care_scheduler.logging import get_logger
from care_scheduler.models.enums import ShiftOrigin, ShiftStatus
from care_scheduler.models.scheduling import Shift, ShiftPattern, ShiftType
from care_scheduler.repositories.shift_pattern_repository import shift_pattern_repository
from care_scheduler.repositories.shift_repository import shift_repository
from care_scheduler.repositories.shift_type_repository import shift_type_repository
from care_scheduler.services.permission_service import (
    AccessContext,
    can_manage_client_schedule,
    can_run_global_generation,
    require,
)
from care_scheduler.utils.exceptions import NotFoundError
from care_scheduler.utils.recurrence import expand_dates, horizon_cap

logger = get_logger(__name__)


class GenerationService:
    """시프트 생성 서비스.

    Generation job over recurrence patterns. ``today`` is injectable so
    the job and its tests agree on the horizon.
    """

    @staticmethod
    def get_horizon_cap(today: date | None = None) -> date:
        """서버 측 생성 상한일을 반환합니다 (Server-side horizon cap)."""
        return horizon_cap(today or date.today(), settings.GENERATION_MAX_YEARS_AHEAD)

    def resolve_horizon(self, today: date, horizon_end: date | None = None) -> date:
        """요청된 상한일을 서버 상한으로 자릅니다 (Clamp a requested horizon to the cap)."""
        cap: date = self.get_horizon_cap(today)
        if horizon_end is None or horizon_end > cap:
            return cap
        return horizon_end

    async def authorize_run(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        client_id: UUID | None = None,
        pattern_id: UUID | None = None,
    ) -> None:
        """생성 작업 실행 권한을 확인합니다.

        Admins may run any scope. A client may run generation for its own
        client or for one of its own patterns; a run over every pattern is
        admin-only.

        Raises:
            NotFoundError: 패턴이 없을 때 (When pattern not found)
            AuthorizationError: 권한이 없을 때 (Caller may not run this scope)
        """
        if can_run_global_generation(ctx):
            return
        if pattern_id is not None:
            pattern: ShiftPattern | None = await shift_pattern_repository.get_by_id(db, pattern_id)
            if pattern is None:
                raise NotFoundError("반복 패턴을 찾을 수 없습니다 (Pattern not found)")
            require(can_manage_client_schedule(ctx, pattern.client_id))
        if client_id is not None:
            require(can_manage_client_schedule(ctx, client_id))
        if client_id is None and pattern_id is None:
            require(False, "전체 생성 작업은 관리자만 실행할 수 있습니다 (Only admins may run global generation)")

    async def generate_for_pattern(
        self,
        db: AsyncSession,
        pattern: ShiftPattern,
        today: date,
        horizon_end: date,
    ) -> tuple[int, int]:
        """단일 패턴의 누락된 시프트를 생성합니다 (커밋하지 않음).

        Create the missing shifts of one pattern over
        [max(today, start_date), min(end_date, horizon_end)]. Flushes but
        does not commit.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            pattern: 반복 패턴 (Recurrence pattern)
            today: 기준일 (Reference date)
            horizon_end: 이미 상한이 적용된 종료일 (Already-clamped horizon end)

        Returns:
            tuple[int, int]: (생성 수, 건너뛴 수) (Created count, skipped count)

        Raises:
            NotFoundError: 시프트 유형이 없을 때 (When the shift type is gone)
        """
        window_start: date = max(today, pattern.start_date)
        window_end: date = horizon_end
        if pattern.end_date is not None and pattern.end_date < window_end:
            window_end = pattern.end_date
        if window_start > window_end:
            return 0, 0

        shift_type: ShiftType | None = await shift_type_repository.get_by_id(db, pattern.shift_type_id)
        if shift_type is None:
            raise NotFoundError("시프트 유형을 찾을 수 없습니다 (Shift type not found)")

        dates: list[date] = expand_dates(pattern.recurrence_type, pattern.start_date, window_start, window_end)
        if not dates:
            return 0, 0

        # 기존 시프트 날짜 — 출처/상태와 무관하게 건너뜀
        existing: set[date] = await shift_repository.get_existing_dates(
            db, pattern.client_id, pattern.shift_type_id, dates[0], dates[-1]
        )
        status: str = (
            ShiftStatus.FILLED.value if pattern.caregiver_id is not None else ShiftStatus.SCHEDULED.value
        )

        created: int = 0
        for shift_date in dates:
            if shift_date in existing:
                continue
            db.add(
                Shift(
                    client_id=pattern.client_id,
                    shift_type_id=pattern.shift_type_id,
                    pattern_id=pattern.id,
                    shift_date=shift_date,
                    start_time=shift_type.start_time,
                    end_time=shift_type.end_time,
                    caregiver_id=pattern.caregiver_id,
                    status=status,
                    origin=ShiftOrigin.GENERATED.value,
                    created_by=pattern.created_by,
                )
            )
            created += 1

        if created:
            await db.flush()
        return created, len(dates) - created

    async def run_generation(
        self,
        db: AsyncSession,
        client_id: UUID | None = None,
        pattern_id: UUID | None = None,
        horizon_end: date | None = None,
        today: date | None = None,
    ) -> dict:
        """활성 패턴 전체에 대해 생성 작업을 실행합니다.

        Run generation over every active pattern (optionally one client or
        one pattern). Each pattern is committed on its own; failures are
        rolled back, logged and reported while the batch continues.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            client_id: 대상자 필터, 선택 (Optional client filter)
            pattern_id: 패턴 필터, 선택 (Optional single pattern)
            horizon_end: 요청 상한일, 서버 상한으로 잘림 (Requested horizon, clamped)
            today: 기준일, 기본값 오늘 (Reference date, defaults to today)

        Returns:
            dict: {"generated", "skipped", "patterns", "horizon_end", "failures"}
        """
        today = today or date.today()
        effective_end: date = self.resolve_horizon(today, horizon_end)

        pattern_ids: list[UUID] = await shift_pattern_repository.get_active_ids(db, client_id, pattern_id)

        generated: int = 0
        skipped: int = 0
        processed: int = 0
        failures: list[dict] = []

        for current_id in pattern_ids:
            try:
                pattern: ShiftPattern | None = await shift_pattern_repository.get_by_id(db, current_id)
                if pattern is None or not pattern.is_active:
                    continue
                created, existing = await self.generate_for_pattern(db, pattern, today, effective_end)
                await db.commit()
            except Exception as exc:
                await db.rollback()
                error: str = str(exc.detail) if hasattr(exc, "detail") else str(exc)
                failures.append({"pattern_id": str(current_id), "error": error})
                logger.error("generation_pattern_failed", pattern_id=str(current_id), error=error)
                continue

            processed += 1
            generated += created
            skipped += existing

        logger.info(
            "generation_completed",
            client_id=str(client_id) if client_id else None,
            pattern_id=str(pattern_id) if pattern_id else None,
            horizon_end=effective_end.isoformat(),
            patterns=processed,
            generated=generated,
            skipped=skipped,
            failures=len(failures),
        )

        return {
            "generated": generated,
            "skipped": skipped,
            "patterns": processed,
            "horizon_end": effective_end,
            "failures": failures,
        }


# 싱글턴 인스턴스 — Singleton instance
generation_service: GenerationService = GenerationService()
