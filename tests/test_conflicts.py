"""충돌 감지 테스트.

Conflict detection tests — Overlaps across clients on the same date,
touching ranges, cancelled shifts, self-exclusion and the check endpoint.
"""

from datetime import date, time

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.scheduling import Shift
from care_scheduler.services.conflict_service import conflict_service
from tests.conftest import auth_header

DAY = date(2025, 6, 4)
URL = "/api/v1/scheduling/conflicts/check"


@pytest_asyncio.fixture
async def existing_shift(db: AsyncSession, other_client_profile, other_shift_type, caregiver):
    """대상자 Y에서 Carol의 10:00–14:00 시프트."""
    shift = Shift(
        client_id=other_client_profile.id,
        shift_type_id=other_shift_type.id,
        shift_date=DAY,
        start_time=time(10, 0),
        end_time=time(14, 0),
        caregiver_id=caregiver.id,
        status="FILLED",
        origin="MANUAL",
    )
    db.add(shift)
    await db.commit()
    await db.refresh(shift)
    return shift


class TestFindConflicts:
    """서비스 수준 충돌 감지 테스트."""

    async def test_overlap_with_other_clients_shift(self, db, caregiver, existing_shift):
        """다른 대상자의 겹치는 시프트 — 대상자/유형 이름과 함께 반환."""
        conflicts = await conflict_service.find_conflicts(db, caregiver.id, DAY, time(8, 0), time(12, 0))

        assert len(conflicts) == 1
        assert conflicts[0]["shift_id"] == str(existing_shift.id)
        assert conflicts[0]["client_name"] == "Bob"
        assert conflicts[0]["shift_type_name"] == "Midday"
        assert conflicts[0]["start_time"] == "10:00"
        assert conflicts[0]["end_time"] == "14:00"

    async def test_touching_range_is_not_a_conflict(self, db, caregiver, existing_shift):
        """14:00 시작 — 맞닿음은 충돌 아님."""
        conflicts = await conflict_service.find_conflicts(db, caregiver.id, DAY, time(14, 0), time(18, 0))
        assert conflicts == []

    async def test_other_date_is_not_a_conflict(self, db, caregiver, existing_shift):
        conflicts = await conflict_service.find_conflicts(
            db, caregiver.id, date(2025, 6, 5), time(10, 0), time(14, 0)
        )
        assert conflicts == []

    async def test_cancelled_shift_is_ignored(self, db, caregiver, existing_shift):
        """취소된 시프트 — 충돌 대상 아님."""
        existing_shift.status = "CANCELLED"
        await db.commit()

        conflicts = await conflict_service.find_conflicts(db, caregiver.id, DAY, time(8, 0), time(12, 0))
        assert conflicts == []

    async def test_shift_being_edited_is_excluded(self, db, caregiver, existing_shift):
        """수정 중인 시프트 자신은 제외."""
        conflicts = await conflict_service.find_conflicts(
            db, caregiver.id, DAY, time(10, 0), time(14, 0), exclude_shift_id=existing_shift.id
        )
        assert conflicts == []

    async def test_unassigned_has_no_conflicts(self, db, existing_shift):
        conflicts = await conflict_service.find_conflicts(db, None, DAY, time(10, 0), time(14, 0))
        assert conflicts == []


class TestConflictCheckEndpoint:
    """충돌 검사 API 테스트."""

    async def test_check_reports_conflict(self, client: AsyncClient, client_token, caregiver, existing_shift):
        res = await client.post(URL, json={
            "caregiver_id": str(caregiver.id),
            "date": DAY.isoformat(),
            "start_time": "13:00",
            "end_time": "15:00",
        }, headers=auth_header(client_token))

        assert res.status_code == 200
        body = res.json()
        assert body["has_conflict"] is True
        assert body["conflicts"][0]["client_name"] == "Bob"

    async def test_check_without_conflict(self, client: AsyncClient, client_token, caregiver, existing_shift):
        res = await client.post(URL, json={
            "caregiver_id": str(caregiver.id),
            "date": DAY.isoformat(),
            "start_time": "06:00",
            "end_time": "10:00",
        }, headers=auth_header(client_token))

        assert res.status_code == 200
        assert res.json() == {"has_conflict": False, "conflicts": []}

    async def test_malformed_time_rejected(self, client: AsyncClient, client_token, caregiver):
        res = await client.post(URL, json={
            "caregiver_id": str(caregiver.id),
            "date": DAY.isoformat(),
            "start_time": "9am",
            "end_time": "10:00",
        }, headers=auth_header(client_token))

        assert res.status_code == 422

    async def test_caregiver_cannot_check(self, client: AsyncClient, caregiver_token, caregiver):
        """제공자는 충돌 검사 불가 — 403."""
        res = await client.post(URL, json={
            "caregiver_id": str(caregiver.id),
            "date": DAY.isoformat(),
            "start_time": "08:00",
            "end_time": "10:00",
        }, headers=auth_header(caregiver_token))

        assert res.status_code == 403
