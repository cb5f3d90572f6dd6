"""생성 작업 라우터 — 반복 패턴 전개 요청 엔드포인트.

Generation Router — On-demand generation runs. The job commits each
pattern on its own, so this endpoint does not commit.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.api.deps import get_access_context
from care_scheduler.database import get_db
from care_scheduler.schemas.scheduling import GenerationRequest, GenerationResponse
from care_scheduler.services.generation_service import generation_service
from care_scheduler.services.permission_service import AccessContext

router: APIRouter = APIRouter()


@router.post(
    "/generate",
    response_model=GenerationResponse,
)
async def run_generation(
    data: GenerationRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """활성 반복 패턴의 누락된 시프트를 생성합니다.

    Run the generation job for one pattern, one client or (admins only)
    every active pattern. horizon_end is clamped to the server-side cap.
    """
    await generation_service.authorize_run(db, ctx, data.client_id, data.pattern_id)
    return await generation_service.run_generation(
        db,
        client_id=data.client_id,
        pattern_id=data.pattern_id,
        horizon_end=data.horizon_end,
        today=date.today(),
    )
