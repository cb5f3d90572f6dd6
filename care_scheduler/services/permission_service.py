"""권한 서비스 — 호출자 컨텍스트와 역할별 권한 검사.

Permission Service — The caller's access context and capability checks.
Role branching lives here only; services and routers ask a capability
function instead of comparing role strings themselves.

Role rules:
    CLIENT: 자신의 일정만 조회/관리, 휴가 검토 (Owns and manages its schedule, reviews time off)
    CAREGIVER: 활성 관계 대상자의 일정 조회, 자신의 배정 조회, 휴가 신청, 시각 보정 보고
               (Views related clients' schedules and own assignments, requests time off,
               reports time corrections)
    ADMIN: 전체 조회 및 전체 생성 작업 실행 (Views everything, runs global generation)
"""

from dataclasses import dataclass, field
from uuid import UUID

from care_scheduler.models.enums import UserRole
from care_scheduler.models.scheduling import Shift
from care_scheduler.models.time_off import TimeOffRequest
from care_scheduler.utils.exceptions import AuthorizationError


@dataclass(frozen=True)
class AccessContext:
    """호출자 권한 컨텍스트 — 요청마다 JWT와 프로필로 구성.

    Caller context built per request from the bearer token and stored
    profiles. Passed explicitly to every service call.

    Attributes:
        user_id: 사용자 UUID (Authenticated user)
        role: 역할 (CLIENT | CAREGIVER | ADMIN)
        client_id: 대상자 프로필 UUID, CLIENT만 (Client profile for CLIENT users)
        caregiver_id: 제공자 프로필 UUID, CAREGIVER만 (Caregiver profile for CAREGIVER users)
        active_client_ids: 활성 관계 대상자 목록 (Clients the caregiver is actively related to)
    """

    user_id: UUID
    role: UserRole
    client_id: UUID | None = None
    caregiver_id: UUID | None = None
    active_client_ids: frozenset[UUID] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


def can_view_client_schedule(ctx: AccessContext, client_id: UUID) -> bool:
    """대상자 일정 조회 가능 여부 (May the caller view this client's schedule)."""
    if ctx.role == UserRole.ADMIN:
        return True
    if ctx.role == UserRole.CLIENT:
        return ctx.client_id == client_id
    return client_id in ctx.active_client_ids


def can_view_caregiver_schedule(ctx: AccessContext, caregiver_id: UUID) -> bool:
    """제공자 배정 일정 조회 가능 여부 (May the caller view this caregiver's assignments)."""
    if ctx.role == UserRole.ADMIN:
        return True
    return ctx.role == UserRole.CAREGIVER and ctx.caregiver_id == caregiver_id


def can_manage_client_schedule(ctx: AccessContext, client_id: UUID) -> bool:
    """시프트 유형/패턴/시프트 변경 가능 여부 — 소유 대상자만.

    Only the owning client mutates shift types, patterns and shifts.
    """
    return ctx.role == UserRole.CLIENT and ctx.client_id == client_id


def can_request_time_off(ctx: AccessContext, client_id: UUID) -> bool:
    """휴가 신청 가능 여부 — 활성 관계의 제공자만."""
    return ctx.role == UserRole.CAREGIVER and client_id in ctx.active_client_ids


def can_review_time_off(ctx: AccessContext, request: TimeOffRequest) -> bool:
    """휴가 승인/거절 가능 여부 — 요청을 받은 대상자만."""
    return ctx.role == UserRole.CLIENT and ctx.client_id == request.client_id


def can_dismiss_time_off(ctx: AccessContext, request: TimeOffRequest) -> bool:
    """결정된 요청 숨김 가능 여부 — 요청자 제공자 또는 대상자.

    Either side of the request may hide a decided request from its own view.
    """
    if ctx.role == UserRole.CAREGIVER:
        return ctx.caregiver_id == request.caregiver_id
    if ctx.role == UserRole.CLIENT:
        return ctx.client_id == request.client_id
    return False


def can_report_time_correction(ctx: AccessContext, shift: Shift) -> bool:
    """시각 보정 보고 가능 여부 — 해당 시프트에 배정된 제공자만."""
    return (
        ctx.role == UserRole.CAREGIVER
        and ctx.caregiver_id is not None
        and shift.caregiver_id == ctx.caregiver_id
    )


def can_run_global_generation(ctx: AccessContext) -> bool:
    return ctx.role == UserRole.ADMIN


def require(allowed: bool, detail: str = "권한이 없습니다 (Insufficient permissions)") -> None:
    """권한 검사 결과가 거짓이면 403을 발생시킵니다.

    Raise AuthorizationError when a capability check failed.

    Args:
        allowed: 권한 검사 결과 (Result of a capability function)
        detail: 오류 메시지 (Error message)

    Raises:
        AuthorizationError: 권한이 없을 때 (When not allowed)
    """
    if not allowed:
        raise AuthorizationError(detail)
