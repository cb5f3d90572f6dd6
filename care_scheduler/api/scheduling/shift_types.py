"""시프트 유형 라우터 — 대상자 소유 시프트 유형 CRUD 엔드포인트.

Shift Type Router — CRUD endpoints for client-owned shift types.
Listing is nested under /clients/{client_id}/shift-types.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.api.deps import get_access_context
from care_scheduler.database import get_db
from care_scheduler.schemas.scheduling import ShiftTypeCreate, ShiftTypeResponse, ShiftTypeUpdate
from care_scheduler.services.permission_service import AccessContext
from care_scheduler.services.shift_type_service import shift_type_service

router: APIRouter = APIRouter()


@router.get(
    "/clients/{client_id}/shift-types",
    response_model=list[ShiftTypeResponse],
)
async def list_shift_types(
    client_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> list[dict]:
    """대상자의 시프트 유형 목록을 조회합니다.

    List a client's shift types ordered by start time.
    """
    shift_types = await shift_type_service.list_shift_types(db, ctx, client_id)
    return [shift_type_service.build_response(t) for t in shift_types]


@router.post(
    "/clients/{client_id}/shift-types",
    response_model=ShiftTypeResponse,
    status_code=201,
)
async def create_shift_type(
    client_id: UUID,
    data: ShiftTypeCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """새 시프트 유형을 생성합니다.

    Create a shift type for the caller's client.
    """
    shift_type = await shift_type_service.create_shift_type(db, ctx, client_id, data)
    result: dict = shift_type_service.build_response(shift_type)
    await db.commit()
    return result


@router.put(
    "/shift-types/{shift_type_id}",
    response_model=ShiftTypeResponse,
)
async def update_shift_type(
    shift_type_id: UUID,
    data: ShiftTypeUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> dict:
    """시프트 유형을 수정합니다.

    Update a shift type. Existing shifts keep their times.
    """
    shift_type = await shift_type_service.update_shift_type(db, ctx, shift_type_id, data)
    result: dict = shift_type_service.build_response(shift_type)
    await db.commit()
    return result


@router.delete(
    "/shift-types/{shift_type_id}",
    status_code=204,
)
async def delete_shift_type(
    shift_type_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> None:
    """사용 중이 아닌 시프트 유형을 삭제합니다.

    Delete a shift type no shift or pattern references.
    """
    await shift_type_service.delete_shift_type(db, ctx, shift_type_id)
    await db.commit()
