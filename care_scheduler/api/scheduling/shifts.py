"""시프트 라우터 — 시프트 조회/생성/수정/삭제/확인 엔드포인트.

Shift Router — Calendar listing, creation, assignment updates, deletion
and client verification of individual shifts.

Create with recurrence is a compound operation:
    1. create_shift — 시프트 저장 후 커밋 (shift committed first)
    2. create_pattern_and_generate — 패턴 생성 + 시프트 생성
       실패 시 1단계는 유지되고 207 응답 (on failure step 1 stays and a 207 is returned)
"""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.api.deps import get_access_context
from care_scheduler.database import get_db
from care_scheduler.logging import get_logger
from care_scheduler.schemas.common import MessageResponse, PartialFailureResponse
from care_scheduler.schemas.scheduling import (
    ShiftCheckResponse,
    ShiftCreate,
    ShiftMutationResponse,
    ShiftResponse,
    ShiftUpdate,
    ShiftVerifyRequest,
)
from care_scheduler.services.permission_service import AccessContext
from care_scheduler.services.shift_service import shift_service
from care_scheduler.utils.exceptions import PartialFailureError

logger = get_logger(__name__)

router: APIRouter = APIRouter()


@router.get(
    "/shifts",
    response_model=list[ShiftResponse],
)
async def list_shifts(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    start_date: Annotated[date, Query()],
    end_date: Annotated[date, Query()],
    client_id: Annotated[UUID | None, Query()] = None,
    caregiver_id: Annotated[UUID | None, Query()] = None,
) -> list[dict]:
    """기간 내 시프트를 조회합니다.

    List shifts in a date range for a client or a caregiver. Without a
    filter the caller's own schedule is returned.
    """
    shifts = await shift_service.list_shifts(db, ctx, start_date, end_date, client_id, caregiver_id)
    return await shift_service.build_responses(db, ctx, shifts)


@router.get(
    "/shifts/check",
    response_model=ShiftCheckResponse,
)
async def check_shift(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    caregiver_id: Annotated[UUID, Query()],
    client_id: Annotated[UUID, Query()],
    shift_date: Annotated[date, Query(alias="date")],
) -> dict:
    """제공자가 해당 날짜에 대상자와 근무했는지 확인합니다.

    Whether the caregiver has a filled or completed shift with the client
    on the date.
    """
    has_shift: bool = await shift_service.has_shift_on(db, ctx, caregiver_id, client_id, shift_date)
    return {"has_shift": has_shift}


@router.post(
    "/shifts",
    response_model=ShiftMutationResponse,
    status_code=201,
    responses={207: {"model": PartialFailureResponse}},
)
async def create_shift(
    data: ShiftCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """시프트를 생성합니다 (반복 지시가 있으면 패턴과 시프트도 생성).

    Create a shift. Conflicts are returned as warnings. With a recurrence
    instruction a pattern anchored at the shift's date is created and
    generated after the shift is committed.
    """
    shift, conflicts = await shift_service.create_shift(db, ctx, data)
    await db.commit()
    result: dict = {
        "shift": await shift_service.build_response(db, ctx, shift),
        "conflicts": conflicts,
    }
    if data.recurrence is None:
        return result

    shift_id: str = str(shift.id)
    try:
        pattern, generated = await shift_service.apply_recurrence_on_create(db, ctx, shift, data.recurrence)
        pattern_id: str = str(pattern.id)
        await db.commit()
    except Exception as exc:
        await db.rollback()
        logger.error("shift_recurrence_failed", shift_id=shift_id, error=str(exc))
        raise PartialFailureError(
            message="시프트는 저장되었으나 반복 패턴 생성에 실패했습니다 "
            "(Shift saved; creating the recurring pattern failed)",
            completed_steps=["create_shift"],
            failed_step="create_pattern_and_generate",
            data={"shift_id": shift_id},
        ) from exc

    result["pattern_id"] = pattern_id
    result["generated"] = generated
    return result


@router.put(
    "/shifts/{shift_id}",
    response_model=ShiftMutationResponse,
)
async def update_shift(
    shift_id: UUID,
    data: ShiftUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """시프트를 수정합니다.

    Update caregiver, times, notes or status. A recurrence instruction
    with a caregiver cascades the assignment onto matching future
    unassigned shifts.
    """
    outcome: dict = await shift_service.update_shift(db, ctx, shift_id, data)
    result: dict = {
        "shift": await shift_service.build_response(db, ctx, outcome["shift"]),
        "conflicts": outcome["conflicts"],
        "recurring_updated": outcome["recurring_updated"],
        "pattern_id": str(outcome["pattern_id"]) if outcome["pattern_id"] else None,
    }
    await db.commit()
    return result


@router.delete(
    "/shifts/{shift_id}",
    response_model=MessageResponse,
)
async def delete_shift(
    shift_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """시프트를 삭제합니다 (원본 패턴 유지).

    Delete a shift instance; its pattern is unaffected.
    """
    await shift_service.delete_shift(db, ctx, shift_id)
    await db.commit()
    return {"message": "시프트가 삭제되었습니다 (Shift deleted)"}


@router.post(
    "/shifts/{shift_id}/verify",
    response_model=ShiftResponse,
)
async def verify_shift(
    shift_id: UUID,
    data: ShiftVerifyRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """대상자가 시프트 수행을 확인하거나 취소합니다.

    Set or clear client verification of a past shift.
    """
    shift = await shift_service.verify_shift(db, ctx, shift_id, data.verified)
    result: dict = await shift_service.build_response(db, ctx, shift)
    await db.commit()
    return result
