"""테스트 인프라 — 인메모리 SQLite DB, 세션, httpx 클라이언트 픽스처.

Test infrastructure — In-memory SQLite (aiosqlite) DB, session, and httpx
client fixtures. Schema is created fresh for every test. Fixture data is
committed so that rollbacks inside the code under test never remove it.
"""

from collections.abc import AsyncGenerator
from datetime import time

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from care_scheduler.database import Base, get_db
from care_scheduler.main import app
from care_scheduler.models import *  # noqa: F401,F403 — register all models with metadata
from care_scheduler.models.enums import UserRole
from care_scheduler.services.permission_service import AccessContext
from care_scheduler.utils.jwt import create_access_token

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# Function-scoped: 엔진, 세션, 클라이언트
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """테스트용 async 엔진. 테스트마다 스키마를 새로 생성합니다."""
    eng = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼: 사용자/프로필/관계 생성
# ---------------------------------------------------------------------------
async def _create_user(db: AsyncSession, email: str, full_name: str, role: UserRole):
    from care_scheduler.models.user import User
    user = User(email=email, full_name=full_name, role=role.value)
    db.add(user)
    await db.flush()
    return user


async def _create_client(db: AsyncSession, email: str, name: str):
    from care_scheduler.models.user import ClientProfile
    user = await _create_user(db, email, name, UserRole.CLIENT)
    profile = ClientProfile(user_id=user.id, name=name)
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


async def _create_caregiver(db: AsyncSession, email: str, name: str, *client_profiles):
    from care_scheduler.models.user import CaregiverClientRelationship, CaregiverProfile
    user = await _create_user(db, email, name, UserRole.CAREGIVER)
    profile = CaregiverProfile(user_id=user.id, name=name, color="#10B981")
    db.add(profile)
    await db.flush()
    for client_profile in client_profiles:
        db.add(CaregiverClientRelationship(caregiver_id=profile.id, client_id=client_profile.id))
    await db.commit()
    await db.refresh(profile)
    return profile


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 데이터 생성
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def client_profile(db: AsyncSession):
    """대상자 X 프로필을 생성합니다."""
    return await _create_client(db, "alice@test.com", "Alice")


@pytest_asyncio.fixture
async def other_client_profile(db: AsyncSession):
    """대상자 Y 프로필을 생성합니다."""
    return await _create_client(db, "bob@test.com", "Bob")


@pytest_asyncio.fixture
async def caregiver(db: AsyncSession, client_profile, other_client_profile):
    """두 대상자 모두와 활성 관계인 제공자를 생성합니다."""
    return await _create_caregiver(db, "carol@test.com", "Carol", client_profile, other_client_profile)


@pytest_asyncio.fixture
async def second_caregiver(db: AsyncSession, client_profile):
    """대상자 X와만 관계인 두 번째 제공자를 생성합니다."""
    return await _create_caregiver(db, "dave@test.com", "Dave", client_profile)


@pytest_asyncio.fixture
async def admin_user(db: AsyncSession):
    """관리자 사용자를 생성합니다."""
    user = await _create_user(db, "admin@test.com", "Admin", UserRole.ADMIN)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def shift_type(db: AsyncSession, client_profile):
    """대상자 X의 오전 시프트 유형 (08:00–12:00)."""
    from care_scheduler.models.scheduling import ShiftType
    st = ShiftType(client_id=client_profile.id, name="Morning", start_time=time(8, 0), end_time=time(12, 0))
    db.add(st)
    await db.commit()
    await db.refresh(st)
    return st


@pytest_asyncio.fixture
async def other_shift_type(db: AsyncSession, other_client_profile):
    """대상자 Y의 시프트 유형 (10:00–14:00)."""
    from care_scheduler.models.scheduling import ShiftType
    st = ShiftType(client_id=other_client_profile.id, name="Midday", start_time=time(10, 0), end_time=time(14, 0))
    db.add(st)
    await db.commit()
    await db.refresh(st)
    return st


# ---------------------------------------------------------------------------
# 토큰 및 권한 컨텍스트
# ---------------------------------------------------------------------------
def make_token(user_id, role: UserRole) -> str:
    """테스트용 JWT 액세스 토큰을 생성합니다."""
    return create_access_token({"sub": str(user_id), "role": role.value})


@pytest.fixture
def client_token(client_profile) -> str:
    return make_token(client_profile.user_id, UserRole.CLIENT)


@pytest.fixture
def other_client_token(other_client_profile) -> str:
    return make_token(other_client_profile.user_id, UserRole.CLIENT)


@pytest.fixture
def caregiver_token(caregiver) -> str:
    return make_token(caregiver.user_id, UserRole.CAREGIVER)


@pytest.fixture
def second_caregiver_token(second_caregiver) -> str:
    return make_token(second_caregiver.user_id, UserRole.CAREGIVER)


@pytest.fixture
def admin_token(admin_user) -> str:
    return make_token(admin_user.id, UserRole.ADMIN)


@pytest.fixture
def client_ctx(client_profile) -> AccessContext:
    """대상자 X의 권한 컨텍스트."""
    return AccessContext(user_id=client_profile.user_id, role=UserRole.CLIENT, client_id=client_profile.id)


@pytest.fixture
def caregiver_ctx(caregiver, client_profile, other_client_profile) -> AccessContext:
    """제공자의 권한 컨텍스트 (X, Y 모두 활성 관계)."""
    return AccessContext(
        user_id=caregiver.user_id,
        role=UserRole.CAREGIVER,
        caregiver_id=caregiver.id,
        active_client_ids=frozenset({client_profile.id, other_client_profile.id}),
    )


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
