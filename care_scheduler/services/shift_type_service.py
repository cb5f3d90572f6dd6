"""시프트 유형 서비스 — 시프트 유형 비즈니스 로직.

Shift Type Service — Business logic for client-owned shift types.
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.scheduling import ShiftType
from care_scheduler.repositories.shift_type_repository import shift_type_repository
from care_scheduler.schemas.scheduling import ShiftTypeCreate, ShiftTypeUpdate
from care_scheduler.services.permission_service import (
    AccessContext,
    can_manage_client_schedule,
    can_view_client_schedule,
    require,
)
from care_scheduler.utils.exceptions import BadRequestError, NotFoundError
from care_scheduler.utils.time_range import format_time, parse_time, validate_color


class ShiftTypeService:
    """시프트 유형 서비스.

    Shift type CRUD. Deleting a type still referenced by shifts or
    patterns is refused.
    """

    async def get_shift_type(
        self,
        db: AsyncSession,
        shift_type_id: UUID,
        client_id: UUID | None = None,
    ) -> ShiftType:
        """시프트 유형을 조회합니다.

        Get a shift type, optionally scoped to a client.

        Raises:
            NotFoundError: 유형이 없을 때 (When shift type not found)
        """
        shift_type: ShiftType | None = await shift_type_repository.get_by_id(db, shift_type_id, client_id)
        if shift_type is None:
            raise NotFoundError("시프트 유형을 찾을 수 없습니다 (Shift type not found)")
        return shift_type

    async def list_shift_types(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        client_id: UUID,
    ) -> Sequence[ShiftType]:
        """대상자의 시프트 유형 목록을 조회합니다 (List a client's shift types)."""
        require(can_view_client_schedule(ctx, client_id))
        return await shift_type_repository.get_by_client(db, client_id)

    async def create_shift_type(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        client_id: UUID,
        data: ShiftTypeCreate,
    ) -> ShiftType:
        """새 시프트 유형을 생성합니다.

        Create a shift type after validating HH:MM times and the color.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            ctx: 호출자 컨텍스트 (Caller context)
            client_id: 소유 대상자 UUID (Owning client)
            data: 생성 데이터 (Creation data)

        Returns:
            ShiftType: 생성된 유형 (Created shift type)

        Raises:
            AuthorizationError: 소유 대상자가 아닐 때 (Caller does not own the client)
            ValidationError: 시각/색상 형식 오류 (Malformed time or color)
        """
        require(can_manage_client_schedule(ctx, client_id))
        start_time = parse_time(data.start_time, "start_time")
        end_time = parse_time(data.end_time, "end_time")
        color: str = validate_color(data.color)

        return await shift_type_repository.create(
            db,
            {
                "client_id": client_id,
                "name": data.name.strip(),
                "start_time": start_time,
                "end_time": end_time,
                "color": color,
            },
        )

    async def update_shift_type(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        shift_type_id: UUID,
        data: ShiftTypeUpdate,
    ) -> ShiftType:
        """시프트 유형을 수정합니다.

        Update a shift type. Existing shifts keep their own times; only
        future generation picks up the new ones.

        Raises:
            NotFoundError: 유형이 없을 때 (When shift type not found)
            AuthorizationError: 소유 대상자가 아닐 때 (Caller does not own the type)
        """
        shift_type: ShiftType = await self.get_shift_type(db, shift_type_id)
        require(can_manage_client_schedule(ctx, shift_type.client_id))

        update_data: dict = {}
        if data.name is not None:
            update_data["name"] = data.name.strip()
        if data.start_time is not None:
            update_data["start_time"] = parse_time(data.start_time, "start_time")
        if data.end_time is not None:
            update_data["end_time"] = parse_time(data.end_time, "end_time")
        if data.color is not None:
            update_data["color"] = validate_color(data.color)

        if not update_data:
            return shift_type

        updated: ShiftType | None = await shift_type_repository.update(db, shift_type_id, update_data)
        if updated is None:
            raise NotFoundError("시프트 유형을 찾을 수 없습니다 (Shift type not found)")
        return updated

    async def delete_shift_type(
        self,
        db: AsyncSession,
        ctx: AccessContext,
        shift_type_id: UUID,
    ) -> None:
        """시프트 유형을 삭제합니다 (사용 중이면 거부).

        Delete a shift type unless a shift or pattern still uses it.

        Raises:
            NotFoundError: 유형이 없을 때 (When shift type not found)
            AuthorizationError: 소유 대상자가 아닐 때 (Caller does not own the type)
            BadRequestError: 사용 중일 때 (When still referenced)
        """
        shift_type: ShiftType = await self.get_shift_type(db, shift_type_id)
        require(can_manage_client_schedule(ctx, shift_type.client_id))

        if await shift_type_repository.is_in_use(db, shift_type_id):
            raise BadRequestError(
                "사용 중인 시프트 유형은 삭제할 수 없습니다 "
                "(Shift type is used by shifts or patterns and cannot be deleted)"
            )
        await shift_type_repository.delete(db, shift_type_id)

    def build_response(self, shift_type: ShiftType) -> dict:
        """시프트 유형 응답 딕셔너리를 구성합니다 (Build the response dict)."""
        return {
            "id": str(shift_type.id),
            "client_id": str(shift_type.client_id),
            "name": shift_type.name,
            "start_time": format_time(shift_type.start_time),
            "end_time": format_time(shift_type.end_time),
            "color": shift_type.color,
            "created_at": shift_type.created_at,
        }


# 싱글턴 인스턴스 — Singleton instance
shift_type_service: ShiftTypeService = ShiftTypeService()
