"""인증 및 권한 테스트.

Authentication and authorization tests — Token handling, access context
resolution and the generation endpoint's scope rules.
"""

import uuid
from datetime import date, timedelta

import jwt
from httpx import AsyncClient

from care_scheduler.config import settings
from care_scheduler.models.enums import UserRole
from care_scheduler.models.scheduling import ShiftPattern
from tests.conftest import auth_header, make_token

SHIFTS_URL = "/api/v1/scheduling/shifts"
GENERATE_URL = "/api/v1/scheduling/generate"
RANGE = {"start_date": "2025-06-01", "end_date": "2025-06-30"}


class TestAuthentication:
    """토큰 검증 테스트."""

    async def test_health_is_public(self, client: AsyncClient):
        res = await client.get("/health")
        assert res.status_code == 200
        assert res.json() == {"status": "ok"}

    async def test_missing_token(self, client: AsyncClient):
        res = await client.get(SHIFTS_URL, params=RANGE)
        assert res.status_code in (401, 403)

    async def test_garbage_token(self, client: AsyncClient):
        res = await client.get(SHIFTS_URL, params=RANGE, headers=auth_header("not-a-jwt"))
        assert res.status_code == 401

    async def test_expired_token(self, client: AsyncClient, client_profile):
        """만료된 토큰 — 401."""
        token = jwt.encode(
            {"sub": str(client_profile.user_id), "type": "access", "exp": 1},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        res = await client.get(SHIFTS_URL, params=RANGE, headers=auth_header(token))
        assert res.status_code == 401

    async def test_non_access_token_rejected(self, client: AsyncClient, client_profile):
        token = jwt.encode(
            {"sub": str(client_profile.user_id), "type": "refresh"},
            settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        res = await client.get(SHIFTS_URL, params=RANGE, headers=auth_header(token))
        assert res.status_code == 401

    async def test_unknown_user(self, client: AsyncClient):
        token = make_token(uuid.uuid4(), UserRole.CLIENT)
        res = await client.get(SHIFTS_URL, params=RANGE, headers=auth_header(token))
        assert res.status_code == 401

    async def test_inactive_user(self, client: AsyncClient, db, client_profile, client_token):
        """비활성 사용자 — 401."""
        from care_scheduler.models.user import User

        user = await db.get(User, client_profile.user_id)
        user.is_active = False
        await db.commit()

        res = await client.get(SHIFTS_URL, params=RANGE, headers=auth_header(client_token))
        assert res.status_code == 401

    async def test_client_role_without_profile(self, client: AsyncClient, db):
        """프로필 없는 대상자 사용자 — 403."""
        from care_scheduler.models.user import User

        user = User(email="orphan@test.com", full_name="Orphan", role=UserRole.CLIENT.value)
        db.add(user)
        await db.commit()

        res = await client.get(SHIFTS_URL, params=RANGE, headers=auth_header(make_token(user.id, UserRole.CLIENT)))
        assert res.status_code == 403

    async def test_stored_role_wins_over_claim(self, client: AsyncClient, admin_user):
        """역할은 DB 기준 — 관리자는 필터 없이 조회 불가 (422)."""
        token = make_token(admin_user.id, UserRole.CLIENT)
        res = await client.get(SHIFTS_URL, params=RANGE, headers=auth_header(token))
        assert res.status_code == 422

    async def test_valid_token(self, client: AsyncClient, client_token):
        res = await client.get(SHIFTS_URL, params=RANGE, headers=auth_header(client_token))
        assert res.status_code == 200
        assert res.json() == []


class TestGenerationScope:
    """생성 작업 권한 범위 테스트."""

    async def test_client_runs_own_generation(
        self, client: AsyncClient, db, client_token, client_profile, shift_type
    ):
        start = date.today() + timedelta(days=1)
        db.add(ShiftPattern(
            client_id=client_profile.id, shift_type_id=shift_type.id, recurrence_type="DAILY",
            start_date=start, end_date=start + timedelta(days=2), is_active=True,
        ))
        await db.commit()

        res = await client.post(GENERATE_URL, json={"client_id": str(client_profile.id)}, headers=auth_header(client_token))

        assert res.status_code == 200
        body = res.json()
        assert body["generated"] == 3
        assert body["patterns"] == 1
        assert body["failures"] == []

    async def test_requested_horizon_is_clamped(self, client: AsyncClient, client_token, client_profile):
        """요청 상한이 서버 상한보다 크면 잘림."""
        res = await client.post(GENERATE_URL, json={
            "client_id": str(client_profile.id),
            "horizon_end": date(date.today().year + 10, 1, 1).isoformat(),
        }, headers=auth_header(client_token))

        assert res.status_code == 200
        expected = date(date.today().year + settings.GENERATION_MAX_YEARS_AHEAD, 12, 31)
        assert res.json()["horizon_end"] == expected.isoformat()

    async def test_client_cannot_run_for_other_client(self, client: AsyncClient, other_client_token, client_profile):
        res = await client.post(GENERATE_URL, json={"client_id": str(client_profile.id)}, headers=auth_header(other_client_token))
        assert res.status_code == 403

    async def test_client_cannot_run_other_clients_pattern(
        self, client: AsyncClient, db, other_client_token, client_profile, shift_type
    ):
        pattern = ShiftPattern(
            client_id=client_profile.id, shift_type_id=shift_type.id, recurrence_type="DAILY",
            start_date=date.today(), is_active=True,
        )
        db.add(pattern)
        await db.commit()

        res = await client.post(GENERATE_URL, json={"pattern_id": str(pattern.id)}, headers=auth_header(other_client_token))
        assert res.status_code == 403

    async def test_unknown_pattern(self, client: AsyncClient, client_token):
        res = await client.post(GENERATE_URL, json={"pattern_id": str(uuid.uuid4())}, headers=auth_header(client_token))
        assert res.status_code == 404

    async def test_global_run_is_admin_only(self, client: AsyncClient, client_token, admin_token):
        """전체 실행 — 관리자만."""
        res = await client.post(GENERATE_URL, json={}, headers=auth_header(client_token))
        assert res.status_code == 403

        res = await client.post(GENERATE_URL, json={}, headers=auth_header(admin_token))
        assert res.status_code == 200
        assert res.json()["patterns"] == 0

    async def test_caregiver_cannot_run(self, client: AsyncClient, caregiver_token, client_profile):
        res = await client.post(GENERATE_URL, json={"client_id": str(client_profile.id)}, headers=auth_header(caregiver_token))
        assert res.status_code == 403
