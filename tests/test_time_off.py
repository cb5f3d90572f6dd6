"""휴가 엔진 API 테스트.

Time-off engine API tests — Submission fan-out, sick-leave auto-approval,
review with shift clearing, dismissal, withdrawal, role-scoped listing and
the notifications each step leaves behind.
"""

import uuid
from datetime import date, time, timedelta

import pytest
import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.scheduling import Shift, ShiftPattern
from care_scheduler.models.time_off import TimeOffRequest
from care_scheduler.repositories.shift_repository import shift_repository
from tests.conftest import auth_header

URL = "/api/v1/scheduling/time-off"


async def _add_shift(db: AsyncSession, client_id, shift_type_id, shift_date: date, caregiver_id, status: str = "FILLED") -> Shift:
    shift = Shift(
        client_id=client_id,
        shift_type_id=shift_type_id,
        shift_date=shift_date,
        start_time=time(8, 0),
        end_time=time(12, 0),
        caregiver_id=caregiver_id,
        status=status,
        origin="MANUAL",
    )
    db.add(shift)
    await db.commit()
    await db.refresh(shift)
    return shift


@pytest_asyncio.fixture
async def leave_day() -> date:
    return date.today() + timedelta(days=10)


@pytest_asyncio.fixture
async def booked(db: AsyncSession, client_profile, other_client_profile, shift_type, other_shift_type, caregiver, leave_day):
    """Carol의 X, Y 시프트 (휴가 당일) 및 X의 완료 시프트."""
    return {
        "x": await _add_shift(db, client_profile.id, shift_type.id, leave_day, caregiver.id),
        "y": await _add_shift(db, other_client_profile.id, other_shift_type.id, leave_day, caregiver.id),
        "x_completed": await _add_shift(
            db, client_profile.id, shift_type.id, leave_day + timedelta(days=1), caregiver.id, status="COMPLETED"
        ),
    }


async def _submit(client: AsyncClient, token: str, client_ids, start: date, end: date, request_type: str = "VACATION", **extra):
    return await client.post(URL, json={
        "client_ids": [str(c) for c in client_ids],
        "request_type": request_type,
        "start_date": start.isoformat(),
        "end_date": end.isoformat(),
        **extra,
    }, headers=auth_header(token))


class TestSubmit:
    """휴가 제출 테스트."""

    async def test_single_client_request_is_pending(self, client: AsyncClient, caregiver_token, client_profile, leave_day):
        res = await _submit(client, caregiver_token, [client_profile.id], leave_day, leave_day, reason="Family event")

        assert res.status_code == 201
        body = res.json()
        assert body["count"] == 1
        assert body["group_id"] is None
        assert body["auto_approved"] is False
        assert body["affected_shifts"] == 0
        assert body["requests"][0]["status"] == "PENDING"
        assert body["requests"][0]["client_name"] == "Alice"
        assert body["requests"][0]["caregiver_name"] == "Carol"

    async def test_multi_client_request_shares_group(
        self, client: AsyncClient, caregiver_token, client_profile, other_client_profile, leave_day
    ):
        """여러 대상자 — 대상자마다 한 건, 같은 group_id."""
        res = await _submit(
            client, caregiver_token,
            [client_profile.id, other_client_profile.id, client_profile.id],
            leave_day, leave_day + timedelta(days=2),
        )

        assert res.status_code == 201
        body = res.json()
        assert body["count"] == 2
        assert body["group_id"] is not None
        assert {r["group_id"] for r in body["requests"]} == {body["group_id"]}
        assert {r["client_name"] for r in body["requests"]} == {"Alice", "Bob"}

    async def test_sick_leave_auto_approved_clears_only_that_client(
        self, client: AsyncClient, db, caregiver_token, client_profile, booked, leave_day
    ):
        """병가 — 즉시 승인, X 시프트만 해제, 완료 시프트와 Y 시프트는 유지."""
        res = await _submit(
            client, caregiver_token, [client_profile.id], leave_day, leave_day + timedelta(days=1), "SICK_LEAVE"
        )

        assert res.status_code == 201
        body = res.json()
        assert body["auto_approved"] is True
        assert body["affected_shifts"] == 1
        assert body["requests"][0]["status"] == "APPROVED"
        assert body["requests"][0]["is_emergency"] is True

        for key in ("x", "y", "x_completed"):
            await db.refresh(booked[key])
        assert booked["x"].caregiver_id is None
        assert booked["x"].status == "SCHEDULED"
        assert booked["y"].caregiver_id is not None
        assert booked["x_completed"].caregiver_id is not None
        assert booked["x_completed"].status == "COMPLETED"

    async def test_sick_leave_notifies_client(
        self, client: AsyncClient, caregiver_token, client_token, client_profile, booked, leave_day
    ):
        await _submit(client, caregiver_token, [client_profile.id], leave_day, leave_day, "SICK_LEAVE")

        res = await client.get("/api/v1/scheduling/my/notifications", headers=auth_header(client_token))

        assert res.status_code == 200
        items = res.json()
        assert len(items) == 1
        assert items[0]["type"] == "sick_leave_reported"
        assert "Carol" in items[0]["message"]
        assert items[0]["payload"]["affected_shifts"] == 1

    async def test_unrelated_client_rejected(
        self, client: AsyncClient, second_caregiver_token, other_client_profile, leave_day
    ):
        """관계 없는 대상자 — 403."""
        res = await _submit(client, second_caregiver_token, [other_client_profile.id], leave_day, leave_day)
        assert res.status_code == 403

    async def test_client_cannot_submit(self, client: AsyncClient, client_token, client_profile, leave_day):
        res = await _submit(client, client_token, [client_profile.id], leave_day, leave_day)
        assert res.status_code == 403

    async def test_inverted_range_rejected(self, client: AsyncClient, caregiver_token, client_profile, leave_day):
        res = await _submit(client, caregiver_token, [client_profile.id], leave_day, leave_day - timedelta(days=1))
        assert res.status_code == 422

    async def test_unknown_type_rejected(self, client: AsyncClient, caregiver_token, client_profile, leave_day):
        res = await _submit(client, caregiver_token, [client_profile.id], leave_day, leave_day, "HOLIDAY")
        assert res.status_code == 422

    async def test_empty_client_list_rejected(self, client: AsyncClient, caregiver_token, leave_day):
        res = await _submit(client, caregiver_token, [], leave_day, leave_day)
        assert res.status_code == 422


class TestReview:
    """휴가 검토 테스트."""

    @pytest_asyncio.fixture
    async def pending_id(self, client: AsyncClient, caregiver_token, client_profile, leave_day) -> str:
        res = await _submit(client, caregiver_token, [client_profile.id], leave_day, leave_day + timedelta(days=2))
        return res.json()["requests"][0]["id"]

    async def test_approve_clears_shifts(
        self, client: AsyncClient, db, client_token, booked, pending_id
    ):
        """승인 — 기간 내 X 시프트 배정 해제, 다른 대상자 시프트는 유지."""
        res = await client.post(f"{URL}/{pending_id}/review", json={"status": "APPROVED"}, headers=auth_header(client_token))

        assert res.status_code == 200
        body = res.json()
        assert body["request"]["status"] == "APPROVED"
        assert body["request"]["reviewed_at"] is not None
        assert body["affected_shifts"] == 1

        await db.refresh(booked["x"])
        await db.refresh(booked["y"])
        assert booked["x"].caregiver_id is None
        assert booked["y"].caregiver_id is not None
        await db.refresh(booked["x_completed"])
        assert booked["x_completed"].caregiver_id is not None
        assert booked["x_completed"].status == "COMPLETED"

    async def test_failed_clearing_rolls_back_approval(
        self, client: AsyncClient, db, monkeypatch, client_token, caregiver, booked, pending_id
    ):
        """시프트 해제 실패 — 승인 전체 취소, 요청은 PENDING, 배정 유지."""
        async def _failing_clear(*args, **kwargs):
            raise RuntimeError("shift store unavailable")

        monkeypatch.setattr(shift_repository, "clear_caregiver_shifts", _failing_clear)

        with pytest.raises(RuntimeError):
            await client.post(f"{URL}/{pending_id}/review", json={"status": "APPROVED"}, headers=auth_header(client_token))
        await db.rollback()

        request = await db.get(TimeOffRequest, uuid.UUID(pending_id))
        await db.refresh(request)
        assert request.status == "PENDING"
        assert request.reviewed_at is None
        await db.refresh(booked["x"])
        await db.refresh(caregiver)
        assert booked["x"].caregiver_id == caregiver.id
        assert booked["x"].status == "FILLED"

    async def test_approval_marks_cleared_generated_shift_as_edited(
        self, client: AsyncClient, db, client_token, client_profile, shift_type, caregiver, leave_day, pending_id
    ):
        """생성 시프트 배정 해제 — 재생성이 휴가 중인 제공자를 다시 배정하지 않도록 보호."""
        pattern = ShiftPattern(
            client_id=client_profile.id, shift_type_id=shift_type.id, caregiver_id=caregiver.id,
            recurrence_type="DAILY", start_date=leave_day, end_date=leave_day, is_active=True,
        )
        db.add(pattern)
        await db.flush()
        shift = await _add_shift(db, client_profile.id, shift_type.id, leave_day, caregiver.id)
        shift.origin = "GENERATED"
        shift.pattern_id = pattern.id
        await db.commit()

        res = await client.post(f"{URL}/{pending_id}/review", json={"status": "APPROVED"}, headers=auth_header(client_token))

        assert res.json()["affected_shifts"] == 1
        await db.refresh(shift)
        assert shift.caregiver_id is None
        assert shift.origin == "MANUALLY_EDITED"

    async def test_approval_notifies_caregiver(self, client: AsyncClient, client_token, caregiver_token, pending_id):
        await client.post(f"{URL}/{pending_id}/review", json={"status": "APPROVED"}, headers=auth_header(client_token))

        res = await client.get("/api/v1/scheduling/my/notifications", headers=auth_header(caregiver_token))
        assert [n["type"] for n in res.json()] == ["time_off_approved"]
        assert "Alice" in res.json()[0]["message"]

    async def test_deny_requires_notes(self, client: AsyncClient, client_token, pending_id):
        res = await client.post(f"{URL}/{pending_id}/review", json={"status": "DENIED", "review_notes": "  "}, headers=auth_header(client_token))
        assert res.status_code == 422

    async def test_deny_keeps_shifts(self, client: AsyncClient, db, client_token, booked, pending_id):
        res = await client.post(
            f"{URL}/{pending_id}/review", json={"status": "DENIED", "review_notes": "No cover available"},
            headers=auth_header(client_token),
        )

        assert res.status_code == 200
        assert res.json()["request"]["status"] == "DENIED"
        assert res.json()["request"]["review_notes"] == "No cover available"
        assert res.json()["affected_shifts"] == 0
        await db.refresh(booked["x"])
        assert booked["x"].caregiver_id is not None

    async def test_decided_request_cannot_be_reviewed_again(self, client: AsyncClient, client_token, pending_id):
        """이미 처리된 요청 — 400."""
        await client.post(f"{URL}/{pending_id}/review", json={"status": "APPROVED"}, headers=auth_header(client_token))
        res = await client.post(
            f"{URL}/{pending_id}/review", json={"status": "DENIED", "review_notes": "Changed my mind"},
            headers=auth_header(client_token),
        )
        assert res.status_code == 400

    async def test_unknown_decision_rejected(self, client: AsyncClient, client_token, pending_id):
        res = await client.post(f"{URL}/{pending_id}/review", json={"status": "PENDING"}, headers=auth_header(client_token))
        assert res.status_code == 422

    async def test_other_client_cannot_review(self, client: AsyncClient, other_client_token, pending_id):
        res = await client.post(f"{URL}/{pending_id}/review", json={"status": "APPROVED"}, headers=auth_header(other_client_token))
        assert res.status_code == 403

    async def test_caregiver_cannot_review(self, client: AsyncClient, caregiver_token, pending_id):
        res = await client.post(f"{URL}/{pending_id}/review", json={"status": "APPROVED"}, headers=auth_header(caregiver_token))
        assert res.status_code == 403


class TestDismissAndWithdraw:
    """숨김 및 철회 테스트."""

    @pytest_asyncio.fixture
    async def pending_id(self, client: AsyncClient, caregiver_token, client_profile, leave_day) -> str:
        res = await _submit(client, caregiver_token, [client_profile.id], leave_day, leave_day)
        return res.json()["requests"][0]["id"]

    async def test_pending_request_cannot_be_dismissed(self, client: AsyncClient, client_token, pending_id):
        res = await client.post(f"{URL}/{pending_id}/dismiss", headers=auth_header(client_token))
        assert res.status_code == 400

    async def test_dismissed_request_hidden_from_list(self, client: AsyncClient, client_token, pending_id):
        """숨긴 요청 — 기본 목록에서 제외, include_dismissed로 조회."""
        await client.post(
            f"{URL}/{pending_id}/review", json={"status": "DENIED", "review_notes": "Short notice"},
            headers=auth_header(client_token),
        )
        res = await client.post(f"{URL}/{pending_id}/dismiss", headers=auth_header(client_token))
        assert res.status_code == 200
        assert res.json()["dismissed"] is True
        assert res.json()["status"] == "DENIED"

        res = await client.get(URL, headers=auth_header(client_token))
        assert res.json() == []

        res = await client.get(URL, params={"include_dismissed": True}, headers=auth_header(client_token))
        assert [r["id"] for r in res.json()] == [pending_id]

    async def test_withdraw_pending(self, client: AsyncClient, caregiver_token, pending_id):
        res = await client.delete(f"{URL}/{pending_id}", headers=auth_header(caregiver_token))
        assert res.status_code == 200

        res = await client.get(URL, headers=auth_header(caregiver_token))
        assert res.json() == []

    async def test_approved_request_cannot_be_withdrawn(self, client: AsyncClient, client_token, caregiver_token, pending_id):
        await client.post(f"{URL}/{pending_id}/review", json={"status": "APPROVED"}, headers=auth_header(client_token))

        res = await client.delete(f"{URL}/{pending_id}", headers=auth_header(caregiver_token))
        assert res.status_code == 400

    async def test_only_requester_can_withdraw(self, client: AsyncClient, second_caregiver_token, pending_id):
        res = await client.delete(f"{URL}/{pending_id}", headers=auth_header(second_caregiver_token))
        assert res.status_code == 403


class TestListing:
    """역할별 목록 테스트."""

    async def test_each_side_sees_its_own_requests(
        self, client: AsyncClient, caregiver_token, second_caregiver_token, client_token, other_client_token,
        client_profile, other_client_profile, leave_day,
    ):
        await _submit(client, caregiver_token, [client_profile.id, other_client_profile.id], leave_day, leave_day)
        await _submit(client, second_caregiver_token, [client_profile.id], leave_day, leave_day)

        res = await client.get(URL, headers=auth_header(caregiver_token))
        assert len(res.json()) == 2
        assert {r["caregiver_name"] for r in res.json()} == {"Carol"}

        res = await client.get(URL, headers=auth_header(client_token))
        assert len(res.json()) == 2
        assert {r["client_name"] for r in res.json()} == {"Alice"}

        res = await client.get(URL, headers=auth_header(other_client_token))
        assert len(res.json()) == 1

    async def test_status_filter(self, client: AsyncClient, caregiver_token, client_profile, leave_day):
        await _submit(client, caregiver_token, [client_profile.id], leave_day, leave_day)

        res = await client.get(URL, params={"status": "APPROVED"}, headers=auth_header(caregiver_token))
        assert res.json() == []

        res = await client.get(URL, params={"status": "BOGUS"}, headers=auth_header(caregiver_token))
        assert res.status_code == 422
