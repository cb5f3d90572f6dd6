"""휴가 요청 라우터 — 제출/검토/숨김/철회 엔드포인트.

Time-Off Router — Caregivers submit and withdraw requests; clients review
them; either side may dismiss a decided request.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.api.deps import get_access_context
from care_scheduler.database import get_db
from care_scheduler.schemas.common import MessageResponse
from care_scheduler.schemas.time_off import (
    TimeOffCreate,
    TimeOffResponse,
    TimeOffReview,
    TimeOffReviewResponse,
    TimeOffSubmitResponse,
)
from care_scheduler.services.notification_service import notification_service
from care_scheduler.services.permission_service import AccessContext
from care_scheduler.services.time_off_service import time_off_service

router: APIRouter = APIRouter()


@router.get(
    "",
    response_model=list[TimeOffResponse],
)
async def list_time_off(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
    status: Annotated[str | None, Query()] = None,
    include_dismissed: Annotated[bool, Query()] = False,
    client_id: Annotated[UUID | None, Query()] = None,
    caregiver_id: Annotated[UUID | None, Query()] = None,
) -> list[dict]:
    """역할 범위의 휴가 요청 목록을 조회합니다.

    List time-off requests visible to the caller, newest first.
    """
    requests = await time_off_service.list_requests(
        db, ctx, status, include_dismissed, client_id, caregiver_id
    )
    return await time_off_service.build_responses(db, requests)


@router.post(
    "",
    response_model=TimeOffSubmitResponse,
    status_code=201,
)
async def submit_time_off(
    data: TimeOffCreate,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """휴가 요청을 제출합니다.

    Submit a request to one or more clients. Sick leave is approved
    immediately and clears the caregiver's shifts in the range.
    """
    outcome: dict = await time_off_service.submit(db, ctx, data)
    result: dict = {**outcome, "requests": await time_off_service.build_responses(db, outcome["requests"])}
    await db.commit()
    notification_service.schedule_pending_emails(db, background_tasks)
    return result


@router.post(
    "/{request_id}/review",
    response_model=TimeOffReviewResponse,
)
async def review_time_off(
    request_id: UUID,
    data: TimeOffReview,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """휴가 요청을 승인 또는 거절합니다.

    Approve (clearing affected shifts) or deny (notes required) a request.
    """
    request, affected = await time_off_service.review(db, ctx, request_id, data)
    result: dict = {
        "request": (await time_off_service.build_responses(db, [request]))[0],
        "affected_shifts": affected,
    }
    await db.commit()
    notification_service.schedule_pending_emails(db, background_tasks)
    return result


@router.post(
    "/{request_id}/dismiss",
    response_model=TimeOffResponse,
)
async def dismiss_time_off(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """결정된 요청을 숨깁니다 (Hide a decided request)."""
    request = await time_off_service.dismiss(db, ctx, request_id)
    result: dict = (await time_off_service.build_responses(db, [request]))[0]
    await db.commit()
    return result


@router.delete(
    "/{request_id}",
    response_model=MessageResponse,
)
async def withdraw_time_off(
    request_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """대기 또는 거절된 자신의 요청을 철회합니다 (Withdraw an own pending or denied request)."""
    await time_off_service.withdraw(db, ctx, request_id)
    await db.commit()
    return {"message": "휴가 요청이 철회되었습니다 (Time-off request withdrawn)"}
