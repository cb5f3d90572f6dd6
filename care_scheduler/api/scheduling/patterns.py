"""반복 패턴 라우터 — 패턴 CRUD 및 생성 작업 연동.

Recurrence Pattern Router — Pattern CRUD. Creation (and an update with
regenerate_shifts) commits the pattern first, then runs the generation
job for that pattern, which commits on its own.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.api.deps import get_access_context
from care_scheduler.database import get_db
from care_scheduler.schemas.scheduling import (
    PatternCreate,
    PatternMutationResponse,
    PatternResponse,
    PatternUpdate,
)
from care_scheduler.services.generation_service import generation_service
from care_scheduler.services.pattern_service import pattern_service
from care_scheduler.services.permission_service import AccessContext

router: APIRouter = APIRouter()


@router.get(
    "/clients/{client_id}/patterns",
    response_model=list[PatternResponse],
)
async def list_patterns(
    client_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> list[dict]:
    """대상자의 활성 반복 패턴 목록을 조회합니다 (List active patterns, newest first)."""
    patterns = await pattern_service.list_patterns(db, ctx, client_id)
    return [await pattern_service.build_response(db, p) for p in patterns]


@router.post(
    "/clients/{client_id}/patterns",
    response_model=PatternMutationResponse,
    status_code=201,
)
async def create_pattern(
    client_id: UUID,
    data: PatternCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """반복 패턴을 생성하고 선택적으로 시프트를 생성합니다.

    Create a pattern; with ``generate`` the generation job runs for it
    immediately after the pattern is committed.
    """
    pattern = await pattern_service.create_pattern(db, ctx, client_id, data)
    await db.commit()
    result: dict = {"pattern": await pattern_service.build_response(db, pattern)}

    if data.generate:
        summary: dict = await generation_service.run_generation(db, pattern_id=pattern.id)
        result["generated_shifts"] = summary["generated"]
    return result


@router.put(
    "/patterns/{pattern_id}",
    response_model=PatternMutationResponse,
)
async def update_pattern(
    pattern_id: UUID,
    data: PatternUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """반복 패턴을 수정합니다.

    Update a pattern. With ``regenerate_shifts`` future untouched generated
    shifts are replaced from the new values; edited shifts are kept.
    """
    pattern, deleted = await pattern_service.update_pattern(db, ctx, pattern_id, data)
    await db.commit()
    result: dict = {
        "pattern": await pattern_service.build_response(db, pattern),
        "deleted_shifts": deleted,
    }

    if data.regenerate_shifts and pattern.is_active:
        summary: dict = await generation_service.run_generation(db, pattern_id=pattern_id)
        result["generated_shifts"] = summary["generated"]
    return result


@router.delete(
    "/patterns/{pattern_id}",
    response_model=PatternMutationResponse,
)
async def delete_pattern(
    pattern_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """반복 패턴을 비활성화합니다.

    Deactivate a pattern and delete its future generated shifts.
    """
    deleted: int = await pattern_service.deactivate_pattern(db, ctx, pattern_id)
    pattern = await pattern_service.get_pattern(db, pattern_id)
    result: dict = {
        "pattern": await pattern_service.build_response(db, pattern),
        "deleted_shifts": deleted,
    }
    await db.commit()
    return result
