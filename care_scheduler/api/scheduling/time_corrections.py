"""시각 보정 라우터 — 실제 근무 시각 보고/확인 엔드포인트.

Time Correction Router — Caregivers report actual worked times; the
owning client lists and acknowledges them.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.api.deps import get_access_context
from care_scheduler.database import get_db
from care_scheduler.schemas.scheduling import ShiftResponse, TimeCorrectionRequest
from care_scheduler.services.notification_service import notification_service
from care_scheduler.services.permission_service import AccessContext
from care_scheduler.services.shift_service import shift_service
from care_scheduler.services.time_correction_service import time_correction_service

router: APIRouter = APIRouter()


@router.get(
    "/clients/{client_id}/time-corrections",
    response_model=list[ShiftResponse],
)
async def list_pending_corrections(
    client_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> list[dict]:
    """대기 중인 시각 보정 목록을 조회합니다 (Pending corrections, newest first)."""
    shifts = await time_correction_service.list_pending(db, ctx, client_id)
    return await shift_service.build_responses(db, ctx, shifts)


@router.post(
    "/shifts/{shift_id}/time-correction",
    response_model=ShiftResponse,
)
async def report_time_correction(
    shift_id: UUID,
    data: TimeCorrectionRequest,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """제공자가 실제 근무 시각을 보고합니다.

    Report the actual start and end times of a worked shift.
    """
    shift = await time_correction_service.report(db, ctx, shift_id, data)
    result: dict = await shift_service.build_response(db, ctx, shift)
    await db.commit()
    notification_service.schedule_pending_emails(db, background_tasks)
    return result


@router.post(
    "/shifts/{shift_id}/time-correction/acknowledge",
    response_model=ShiftResponse,
)
async def acknowledge_time_correction(
    shift_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """대상자가 보고된 시각을 수락합니다.

    Accept the reported times; they replace the shift's planned times.
    """
    shift = await time_correction_service.acknowledge(db, ctx, shift_id)
    result: dict = await shift_service.build_response(db, ctx, shift)
    await db.commit()
    return result
