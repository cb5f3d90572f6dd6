"""시프트 생성 작업 테스트.

Generation job tests — Expansion into shifts, idempotency, override
protection, horizon clamping and per-pattern failure isolation.
Runs against the service with an injected ``today``.
"""

import uuid
from datetime import date, time

import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.scheduling import Shift, ShiftPattern
from care_scheduler.schemas.scheduling import ShiftUpdate
from care_scheduler.services.generation_service import generation_service
from care_scheduler.services.shift_service import shift_service

TODAY = date(2025, 6, 1)


async def _make_pattern(db: AsyncSession, client_id, shift_type_id, caregiver_id=None, **kwargs) -> ShiftPattern:
    values = {
        "recurrence_type": "WEEKLY",
        "start_date": date(2025, 6, 4),
        "end_date": date(2025, 6, 30),
        "is_active": True,
    }
    values.update(kwargs)
    pattern = ShiftPattern(
        client_id=client_id,
        shift_type_id=shift_type_id,
        caregiver_id=caregiver_id,
        **values,
    )
    db.add(pattern)
    await db.commit()
    await db.refresh(pattern)
    return pattern


async def _shifts_for(db: AsyncSession, client_id) -> list[Shift]:
    result = await db.execute(
        select(Shift).where(Shift.client_id == client_id).order_by(Shift.shift_date)
    )
    return list(result.scalars().all())


@pytest_asyncio.fixture
async def weekly_pattern(db: AsyncSession, client_profile, shift_type, caregiver):
    """수요일마다 Carol이 배정된 6월 주간 패턴."""
    return await _make_pattern(db, client_profile.id, shift_type.id, caregiver.id)


class TestGenerationRun:
    """생성 작업 기본 동작 테스트."""

    async def test_generates_weekly_shifts(self, db, client_profile, caregiver, weekly_pattern):
        """주간 패턴 — 6월의 수요일 4개 생성, 배정 제공자와 유형 시각 사용."""
        summary = await generation_service.run_generation(db, today=TODAY)

        assert summary["generated"] == 4
        assert summary["skipped"] == 0
        assert summary["patterns"] == 1
        assert summary["failures"] == []

        shifts = await _shifts_for(db, client_profile.id)
        assert [s.shift_date for s in shifts] == [
            date(2025, 6, 4), date(2025, 6, 11), date(2025, 6, 18), date(2025, 6, 25),
        ]
        for s in shifts:
            assert s.caregiver_id == caregiver.id
            assert s.status == "FILLED"
            assert s.origin == "GENERATED"
            assert s.pattern_id == weekly_pattern.id
            assert (s.start_time, s.end_time) == (time(8, 0), time(12, 0))

    async def test_unassigned_pattern_creates_scheduled_shifts(self, db, client_profile, shift_type):
        """제공자 없는 패턴 — SCHEDULED 시프트 생성."""
        await _make_pattern(db, client_profile.id, shift_type.id, None)
        await generation_service.run_generation(db, today=TODAY)

        shifts = await _shifts_for(db, client_profile.id)
        assert len(shifts) == 4
        assert all(s.caregiver_id is None and s.status == "SCHEDULED" for s in shifts)

    async def test_second_run_is_idempotent(self, db, client_profile, weekly_pattern):
        """두 번째 실행 — 새 시프트 없음, 모두 건너뜀."""
        await generation_service.run_generation(db, today=TODAY)
        summary = await generation_service.run_generation(db, today=TODAY)

        assert summary["generated"] == 0
        assert summary["skipped"] == 4
        assert len(await _shifts_for(db, client_profile.id)) == 4

    async def test_window_starts_today(self, db, client_profile, weekly_pattern):
        """오늘 이전 날짜는 생성하지 않음."""
        summary = await generation_service.run_generation(db, today=date(2025, 6, 12))

        assert summary["generated"] == 2
        shifts = await _shifts_for(db, client_profile.id)
        assert [s.shift_date for s in shifts] == [date(2025, 6, 18), date(2025, 6, 25)]

    async def test_existing_manual_shift_is_skipped(self, db, client_profile, shift_type, weekly_pattern):
        """수동 시프트가 있는 날짜 — 생성하지 않고 수동 시프트 유지."""
        manual = Shift(
            client_id=client_profile.id,
            shift_type_id=shift_type.id,
            shift_date=date(2025, 6, 11),
            start_time=time(9, 0),
            end_time=time(11, 0),
            status="SCHEDULED",
            origin="MANUAL",
        )
        db.add(manual)
        await db.commit()

        summary = await generation_service.run_generation(db, today=TODAY)

        assert summary["generated"] == 3
        assert summary["skipped"] == 1
        shifts = await _shifts_for(db, client_profile.id)
        june_11 = [s for s in shifts if s.shift_date == date(2025, 6, 11)]
        assert len(june_11) == 1
        assert june_11[0].origin == "MANUAL"
        assert june_11[0].start_time == time(9, 0)

    async def test_inactive_pattern_is_ignored(self, db, client_profile, shift_type, caregiver):
        """비활성 패턴 — 생성 대상 아님."""
        await _make_pattern(db, client_profile.id, shift_type.id, caregiver.id, is_active=False)
        summary = await generation_service.run_generation(db, today=TODAY)

        assert summary["patterns"] == 0
        assert summary["generated"] == 0

    async def test_client_filter(
        self, db, client_profile, other_client_profile, other_shift_type, caregiver, weekly_pattern
    ):
        """대상자 필터 — 다른 대상자의 패턴은 실행되지 않음."""
        await _make_pattern(db, other_client_profile.id, other_shift_type.id, caregiver.id)

        summary = await generation_service.run_generation(db, client_id=other_client_profile.id, today=TODAY)

        assert summary["patterns"] == 1
        assert len(await _shifts_for(db, client_profile.id)) == 0
        assert len(await _shifts_for(db, other_client_profile.id)) == 4


class TestOverrideProtection:
    """수정된 시프트 보호 테스트."""

    async def test_edited_shift_survives_regeneration(
        self, db, client_profile, caregiver, second_caregiver, client_ctx, weekly_pattern
    ):
        """배정 변경된 생성 시프트 — 재실행 후에도 변경 유지."""
        await generation_service.run_generation(db, today=TODAY)
        target = (await _shifts_for(db, client_profile.id))[1]
        target_id = target.id

        await shift_service.update_shift(
            db, client_ctx, target_id, ShiftUpdate(caregiver_id=second_caregiver.id), today=TODAY
        )
        await db.commit()

        summary = await generation_service.run_generation(db, today=TODAY)

        assert summary["generated"] == 0
        edited = await db.get(Shift, target_id)
        assert edited.caregiver_id == second_caregiver.id
        assert edited.origin == "MANUALLY_EDITED"
        assert edited.is_pattern_override is True

    async def test_deleted_generated_shift_is_recreated(self, db, client_profile, client_ctx, weekly_pattern):
        """삭제된 생성 시프트 — 다음 실행에서 다시 생성."""
        await generation_service.run_generation(db, today=TODAY)
        target = (await _shifts_for(db, client_profile.id))[0]

        await shift_service.delete_shift(db, client_ctx, target.id)
        await db.commit()

        summary = await generation_service.run_generation(db, today=TODAY)
        assert summary["generated"] == 1
        assert len(await _shifts_for(db, client_profile.id)) == 4


class TestHorizon:
    """생성 상한 테스트."""

    async def test_open_ended_pattern_clamped_to_cap(self, db, client_profile, shift_type):
        """종료일 없는 패턴 — 요청 상한이 커도 다음 해 12월 31일까지만."""
        # 2025-12-01은 월요일 — 매달 첫 월요일
        await _make_pattern(
            db, client_profile.id, shift_type.id, None,
            recurrence_type="FIRST_OF_MONTH", start_date=date(2025, 12, 1), end_date=None,
        )

        summary = await generation_service.run_generation(
            db, horizon_end=date(2030, 1, 1), today=date(2025, 12, 1)
        )

        assert summary["horizon_end"] == date(2026, 12, 31)
        assert summary["generated"] == 13
        shifts = await _shifts_for(db, client_profile.id)
        assert shifts[-1].shift_date <= date(2026, 12, 31)

    async def test_requested_horizon_inside_cap_is_kept(self, db, client_profile, weekly_pattern):
        """상한 이내 요청 — 그대로 사용."""
        summary = await generation_service.run_generation(
            db, horizon_end=date(2025, 6, 15), today=TODAY
        )

        assert summary["horizon_end"] == date(2025, 6, 15)
        assert summary["generated"] == 2


class TestFailureIsolation:
    """패턴별 실패 격리 테스트."""

    async def test_failing_pattern_does_not_stop_batch(self, db, client_profile, shift_type, caregiver):
        """유형이 없는 패턴은 실패로 보고되고 나머지 패턴은 생성됨."""
        client_id = client_profile.id
        broken = await _make_pattern(db, client_id, uuid.uuid4(), caregiver.id)
        broken_id = broken.id
        await _make_pattern(db, client_id, shift_type.id, caregiver.id)

        summary = await generation_service.run_generation(db, today=TODAY)

        assert summary["generated"] == 4
        assert summary["patterns"] == 1
        assert summary["failures"] == [
            {"pattern_id": str(broken_id), "error": "시프트 유형을 찾을 수 없습니다 (Shift type not found)"}
        ]
        count = (
            await db.execute(select(func.count()).select_from(Shift).where(Shift.client_id == client_id))
        ).scalar()
        assert count == 4
