"""스케줄링 API 라우터 패키지 — 모든 스케줄링 엔드포인트 통합.

Scheduling API Router package — Aggregates every scheduling endpoint
into a single router for inclusion in the FastAPI application.

Included routers:
    - shift_types: 시프트 유형 관리 (Client-owned shift types)
    - patterns: 반복 패턴 관리 (Recurrence patterns)
    - shifts: 시프트 조회/배정/확인 (Shift calendar, assignment, verification)
    - conflicts: 충돌 검사 (Conflict check before saving)
    - generation: 생성 작업 실행 (On-demand generation runs)
    - time_off: 휴가 요청 (Time-off requests)
    - time_corrections: 시각 보정 (Actual worked times)
    - notifications: 내 알림 (My notifications)
"""

from fastapi import APIRouter

from care_scheduler.api.scheduling.shift_types import router as shift_types_router
from care_scheduler.api.scheduling.patterns import router as patterns_router
from care_scheduler.api.scheduling.shifts import router as shifts_router
from care_scheduler.api.scheduling.conflicts import router as conflicts_router
from care_scheduler.api.scheduling.generation import router as generation_router
from care_scheduler.api.scheduling.time_off import router as time_off_router
from care_scheduler.api.scheduling.time_corrections import router as time_corrections_router
from care_scheduler.api.scheduling.notifications import router as notifications_router

scheduling_router: APIRouter = APIRouter()

# ---------------------------------------------------------------------------
# 일정 정의 — Shift types and recurrence patterns
# ---------------------------------------------------------------------------
scheduling_router.include_router(shift_types_router, tags=["Shift Types"])
scheduling_router.include_router(patterns_router, tags=["Patterns"])

# ---------------------------------------------------------------------------
# 시프트 — Shifts, conflicts, generation and time corrections
# ---------------------------------------------------------------------------
# /shifts/check 는 /shifts/{shift_id} 보다 먼저 등록됨 (shifts router declares it first)
scheduling_router.include_router(shifts_router, tags=["Shifts"])
scheduling_router.include_router(conflicts_router, tags=["Conflicts"])
scheduling_router.include_router(generation_router, tags=["Generation"])
scheduling_router.include_router(time_corrections_router, tags=["Time Corrections"])

# ---------------------------------------------------------------------------
# 휴가 및 알림 — Time off and notifications
# ---------------------------------------------------------------------------
scheduling_router.include_router(time_off_router, prefix="/time-off", tags=["Time Off"])
scheduling_router.include_router(notifications_router, prefix="/my/notifications", tags=["My Notifications"])
