"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session setup for the scheduling store.
The API uses one session per request via ``get_db``; the generation
batch job opens its own session through ``job_session`` and releases
the connection pool when it finishes.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from care_scheduler.config import settings


def _engine_options(url: str) -> dict[str, Any]:
    """드라이버별 엔진 옵션 (Engine options per driver).

    SQLite (aiosqlite, local runs) has no sized connection pool; PostgreSQL
    (asyncpg) gets a pre-pinged pool.
    """
    if url.startswith("sqlite"):
        return {"echo": settings.DEBUG}
    return {
        "echo": settings.DEBUG,
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
    }


engine: AsyncEngine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# expire_on_commit=False: 생성 작업은 패턴별 커밋 후에도 객체를 계속 읽음
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """스케줄링 ORM 모델의 선언적 베이스 (Declarative base for all models)."""


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 세션 (Per-request session dependency).

    Routers commit explicitly; anything uncommitted when the request ends
    is discarded as the session closes.
    """
    async with async_session() as session:
        yield session


@asynccontextmanager
async def job_session() -> AsyncGenerator[AsyncSession, None]:
    """배치 작업용 세션 — 종료 시 커넥션 풀 해제.

    Session for one-shot batch runs (cron). The engine's pool is disposed
    on exit so the process can terminate cleanly.
    """
    try:
        async with async_session() as session:
            yield session
    finally:
        await engine.dispose()
