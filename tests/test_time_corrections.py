"""시각 보정 API 테스트.

Time correction API tests — Caregiver reports, the pending list and
client acknowledgement.
"""

from datetime import date, time, timedelta

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.scheduling import Shift
from tests.conftest import auth_header


async def _add_shift(db: AsyncSession, client_id, shift_type_id, shift_date: date, caregiver_id) -> Shift:
    shift = Shift(
        client_id=client_id,
        shift_type_id=shift_type_id,
        shift_date=shift_date,
        start_time=time(8, 0),
        end_time=time(12, 0),
        caregiver_id=caregiver_id,
        status="FILLED",
        origin="MANUAL",
    )
    db.add(shift)
    await db.commit()
    await db.refresh(shift)
    return shift


@pytest_asyncio.fixture
async def worked_shift(db: AsyncSession, client_profile, shift_type, caregiver) -> Shift:
    """어제 Carol이 근무한 X의 시프트."""
    return await _add_shift(db, client_profile.id, shift_type.id, date.today() - timedelta(days=1), caregiver.id)


def _report_url(shift) -> str:
    return f"/api/v1/scheduling/shifts/{shift.id}/time-correction"


class TestReport:
    """시각 보정 보고 테스트."""

    async def test_caregiver_reports_actual_times(self, client: AsyncClient, caregiver_token, worked_shift):
        res = await client.post(_report_url(worked_shift), json={
            "actual_start_time": "08:15",
            "actual_end_time": "12:30",
            "caregiver_note": "Stayed late for the pharmacy run",
        }, headers=auth_header(caregiver_token))

        assert res.status_code == 200
        body = res.json()
        assert body["time_correction_status"] == "PENDING"
        assert body["actual_start_time"] == "08:15"
        assert body["actual_end_time"] == "12:30"
        assert body["start_time"] == "08:00"
        assert body["client_verified"] is False

    async def test_report_notifies_client(self, client: AsyncClient, caregiver_token, client_token, worked_shift):
        await client.post(_report_url(worked_shift), json={
            "actual_start_time": "08:15", "actual_end_time": "12:30",
        }, headers=auth_header(caregiver_token))

        res = await client.get("/api/v1/scheduling/my/notifications", headers=auth_header(client_token))

        items = res.json()
        assert [n["type"] for n in items] == ["time_correction_reported"]
        assert items[0]["reference_type"] == "shift"
        assert items[0]["reference_id"] == str(worked_shift.id)

    async def test_unassigned_caregiver_cannot_report(self, client: AsyncClient, second_caregiver_token, worked_shift):
        """배정되지 않은 제공자 — 403."""
        res = await client.post(_report_url(worked_shift), json={
            "actual_start_time": "08:15", "actual_end_time": "12:30",
        }, headers=auth_header(second_caregiver_token))
        assert res.status_code == 403

    async def test_future_shift_rejected(self, client: AsyncClient, db, caregiver_token, client_profile, shift_type, caregiver):
        shift = await _add_shift(db, client_profile.id, shift_type.id, date.today() + timedelta(days=2), caregiver.id)

        res = await client.post(_report_url(shift), json={
            "actual_start_time": "08:15", "actual_end_time": "12:30",
        }, headers=auth_header(caregiver_token))
        assert res.status_code == 400

    async def test_malformed_time_rejected(self, client: AsyncClient, caregiver_token, worked_shift):
        res = await client.post(_report_url(worked_shift), json={
            "actual_start_time": "8.15", "actual_end_time": "12:30",
        }, headers=auth_header(caregiver_token))
        assert res.status_code == 422


class TestAcknowledge:
    """시각 보정 수락 테스트."""

    @pytest_asyncio.fixture
    async def reported(self, client: AsyncClient, caregiver_token, worked_shift) -> Shift:
        await client.post(_report_url(worked_shift), json={
            "actual_start_time": "08:15", "actual_end_time": "12:30",
        }, headers=auth_header(caregiver_token))
        return worked_shift

    async def test_pending_list(self, client: AsyncClient, client_token, client_profile, reported):
        res = await client.get(
            f"/api/v1/scheduling/clients/{client_profile.id}/time-corrections", headers=auth_header(client_token)
        )

        assert res.status_code == 200
        assert [s["id"] for s in res.json()] == [str(reported.id)]

    async def test_pending_list_forbidden_for_other_client(
        self, client: AsyncClient, other_client_token, client_profile, reported
    ):
        res = await client.get(
            f"/api/v1/scheduling/clients/{client_profile.id}/time-corrections", headers=auth_header(other_client_token)
        )
        assert res.status_code == 403

    async def test_acknowledge_copies_times(self, client: AsyncClient, client_token, client_profile, reported):
        """수락 — 보고 시각이 시프트 시각이 됨, 대기 목록에서 제외."""
        res = await client.post(f"{_report_url(reported)}/acknowledge", headers=auth_header(client_token))

        assert res.status_code == 200
        body = res.json()
        assert body["time_correction_status"] == "ACKNOWLEDGED"
        assert body["start_time"] == "08:15"
        assert body["end_time"] == "12:30"
        assert body["origin"] == "MANUAL"

        res = await client.get(
            f"/api/v1/scheduling/clients/{client_profile.id}/time-corrections", headers=auth_header(client_token)
        )
        assert res.json() == []

    async def test_acknowledge_marks_generated_shift_as_edited(
        self, client: AsyncClient, db, client_token, reported
    ):
        """생성 시프트의 시각 보정 수락 — 재생성에서 보호되도록 MANUALLY_EDITED."""
        reported.origin = "GENERATED"
        await db.commit()

        res = await client.post(f"{_report_url(reported)}/acknowledge", headers=auth_header(client_token))

        assert res.status_code == 200
        assert res.json()["origin"] == "MANUALLY_EDITED"

    async def test_saving_shift_acknowledges_pending_correction(
        self, client: AsyncClient, client_token, client_profile, reported
    ):
        """대상자가 시프트를 저장하면 대기 중인 보정은 확인 처리, 시각은 그대로."""
        res = await client.put(f"/api/v1/scheduling/shifts/{reported.id}", json={
            "instruction_notes": "Pharmacy run on Tuesdays",
        }, headers=auth_header(client_token))

        assert res.status_code == 200
        shift = res.json()["shift"]
        assert shift["time_correction_status"] == "ACKNOWLEDGED"
        assert shift["start_time"] == "08:00"
        assert shift["end_time"] == "12:00"

        res = await client.get(
            f"/api/v1/scheduling/clients/{client_profile.id}/time-corrections", headers=auth_header(client_token)
        )
        assert res.json() == []

    async def test_acknowledge_twice_rejected(self, client: AsyncClient, client_token, reported):
        await client.post(f"{_report_url(reported)}/acknowledge", headers=auth_header(client_token))
        res = await client.post(f"{_report_url(reported)}/acknowledge", headers=auth_header(client_token))
        assert res.status_code == 400

    async def test_caregiver_cannot_acknowledge(self, client: AsyncClient, caregiver_token, reported):
        res = await client.post(f"{_report_url(reported)}/acknowledge", headers=auth_header(caregiver_token))
        assert res.status_code == 403
