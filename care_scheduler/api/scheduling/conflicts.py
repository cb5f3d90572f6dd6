"""충돌 검사 라우터 — 저장 전 제공자 중복 배정 확인.

Conflict Router — Lets the calendar check a proposed assignment before
saving it.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.api.deps import get_access_context
from care_scheduler.database import get_db
from care_scheduler.schemas.scheduling import ConflictCheckRequest, ConflictCheckResponse
from care_scheduler.services.conflict_service import conflict_service
from care_scheduler.services.permission_service import AccessContext, require

router: APIRouter = APIRouter()


@router.post(
    "/conflicts/check",
    response_model=ConflictCheckResponse,
)
async def check_conflicts(
    data: ConflictCheckRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """제안된 배정의 충돌 여부를 검사합니다.

    Check whether assigning the caregiver to the given date and times
    would overlap another of their shifts.
    """
    # 충돌 검사는 일정 관리자(대상자)와 관리자만 (Schedule owners and admins only)
    require(ctx.client_id is not None or ctx.is_admin)
    return await conflict_service.check_conflicts(
        db,
        data.caregiver_id,
        data.date,
        data.start_time,
        data.end_time,
        data.exclude_shift_id,
    )
