"""스케줄링 Pydantic 요청/응답 스키마 정의.

Scheduling request/response schemas: shift types, recurrence patterns,
shifts, conflicts, generation and time corrections.
Times travel as "HH:MM" strings and are parsed by the services so that a
bad value is reported as a 422 with a readable message.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field


# === 시프트 유형 (Shift Type) 스키마 ===

class ShiftTypeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    start_time: str  # "HH:MM"
    end_time: str  # "HH:MM"
    color: str = "#3B82F6"  # "#RRGGBB"


class ShiftTypeUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    start_time: str | None = None
    end_time: str | None = None
    color: str | None = None


class ShiftTypeResponse(BaseModel):
    id: str
    client_id: str
    name: str
    start_time: str
    end_time: str
    color: str
    created_at: datetime


# === 반복 패턴 (Recurrence Pattern) 스키마 ===

class PatternCreate(BaseModel):
    """반복 패턴 생성 요청 스키마.

    Recurrence pattern creation request schema.
    The weekday of start_date anchors weekday-based rules.

    Attributes:
        shift_type_id: 시프트 유형 UUID (Shift type identifier)
        recurrence_type: 반복 규칙 (DAILY | WEEKLY | BIWEEKLY | FIRST_OF_MONTH | LAST_OF_MONTH)
        start_date: 시작일 (First date and anchor)
        end_date: 종료일, 선택 (Last date; null = open-ended up to the horizon cap)
        caregiver_id: 배정 제공자 UUID, 선택 (Pre-assigned caregiver)
        generate: 생성 직후 시프트 생성 여부 (Run generation right after creation)
    """

    shift_type_id: UUID
    recurrence_type: str
    start_date: date
    end_date: date | None = None
    caregiver_id: UUID | None = None
    generate: bool = True


class PatternUpdate(BaseModel):
    """반복 패턴 수정 요청 스키마.

    regenerate_shifts가 True이면 미래의 미수정 생성 시프트를 삭제 후 다시 생성합니다.
    (When regenerate_shifts is set, future untouched generated shifts are
    deleted and regenerated from the updated pattern.)
    """

    caregiver_id: UUID | None = None
    recurrence_type: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    regenerate_shifts: bool = False


class PatternResponse(BaseModel):
    id: str
    client_id: str
    caregiver_id: str | None
    caregiver_name: str | None
    shift_type_id: str
    shift_type_name: str | None
    recurrence_type: str
    start_date: date
    end_date: date | None
    is_active: bool
    created_at: datetime


class PatternMutationResponse(BaseModel):
    pattern: PatternResponse
    deleted_shifts: int = 0  # 삭제된 미래 시프트 수 (Future shifts removed)
    generated_shifts: int = 0  # 새로 생성된 시프트 수 (Shifts created by the follow-up run)


# === 시프트 (Shift) 스키마 ===

class RecurrenceInstruction(BaseModel):
    """반복 지시 — 시프트 생성/수정과 함께 반복 패턴을 적용.

    Recurrence instruction attached to a shift create or update.
    The edited shift's date is the anchor; day_of_week (0 = Monday)
    must match it when given.

    Attributes:
        type: 반복 규칙 (Recurrence rule)
        day_of_week: 요일 0=월 ~ 6=일, 선택 (Weekday, Monday = 0)
        end_date: 종료일, 선택 (Last date; defaults to 31 December of the shift's year)
    """

    type: str
    day_of_week: int | None = Field(default=None, ge=0, le=6)
    end_date: date | None = None


class ShiftCreate(BaseModel):
    """시프트 생성 요청 스키마.

    Shift creation request schema. Times default to the shift type's.
    """

    client_id: UUID | None = None  # 생략 시 호출자의 대상자 프로필 (Defaults to the caller's client)
    shift_type_id: UUID
    date: date
    start_time: str | None = None  # "HH:MM"
    end_time: str | None = None  # "HH:MM"
    caregiver_id: UUID | None = None
    internal_notes: str | None = None
    instruction_notes: str | None = None
    recurrence: RecurrenceInstruction | None = None


class ShiftUpdate(BaseModel):
    """시프트 수정 요청 스키마.

    caregiver_id를 생략하면 변경 없음, null이면 배정 해제.
    (Omitting caregiver_id leaves it unchanged; an explicit null unassigns.)
    """

    caregiver_id: UUID | None = None
    start_time: str | None = None
    end_time: str | None = None
    internal_notes: str | None = None
    instruction_notes: str | None = None
    status: str | None = None
    recurrence: RecurrenceInstruction | None = None


class ShiftVerifyRequest(BaseModel):
    verified: bool


class ShiftResponse(BaseModel):
    """시프트 응답 스키마 (Shift response with resolved names)."""

    id: str
    client_id: str
    client_name: str | None
    shift_type_id: str
    shift_type_name: str | None
    pattern_id: str | None
    date: date
    start_time: str
    end_time: str
    caregiver_id: str | None
    caregiver_name: str | None
    status: str
    origin: str
    is_pattern_override: bool
    internal_notes: str | None = None  # 대상자에게만 노출 (Only shown to the owning client)
    instruction_notes: str | None
    client_verified: bool
    client_verified_at: datetime | None
    actual_start_time: str | None
    actual_end_time: str | None
    caregiver_note: str | None
    time_correction_status: str | None
    time_correction_at: datetime | None
    created_at: datetime
    updated_at: datetime


class ConflictResponse(BaseModel):
    shift_id: str
    client_id: str
    client_name: str | None
    shift_type_name: str | None
    date: date
    start_time: str
    end_time: str


class ShiftMutationResponse(BaseModel):
    """시프트 생성/수정 응답 — 충돌 경고 포함.

    Shift create/update response. Conflicts are warnings: the shift was
    saved regardless.
    """

    shift: ShiftResponse
    conflicts: list[ConflictResponse] = []
    recurring_updated: int = 0  # 반복 적용으로 배정된 시프트 수 (Shifts assigned by the cascade)
    pattern_id: str | None = None  # 반복 지시로 생성된 패턴 (Pattern recorded for the instruction)
    generated: int = 0  # 생성 단계에서 만든 시프트 수 (Shifts created by the generation step)


class ShiftCheckResponse(BaseModel):
    has_shift: bool


# === 충돌 검사 (Conflict Check) 스키마 ===

class ConflictCheckRequest(BaseModel):
    caregiver_id: UUID
    date: date
    start_time: str
    end_time: str
    exclude_shift_id: UUID | None = None


class ConflictCheckResponse(BaseModel):
    has_conflict: bool
    conflicts: list[ConflictResponse]


# === 생성 작업 (Generation) 스키마 ===

class GenerationRequest(BaseModel):
    """생성 작업 요청 스키마.

    horizon_end는 서버 상한을 넘으면 잘립니다 (Clamped to the server-side cap).
    """

    client_id: UUID | None = None
    pattern_id: UUID | None = None
    horizon_end: date | None = None


class GenerationFailure(BaseModel):
    pattern_id: str
    error: str


class GenerationResponse(BaseModel):
    generated: int
    skipped: int
    patterns: int
    horizon_end: date
    failures: list[GenerationFailure]


# === 시각 보정 (Time Correction) 스키마 ===

class TimeCorrectionRequest(BaseModel):
    actual_start_time: str  # "HH:MM"
    actual_end_time: str  # "HH:MM"
    caregiver_note: str | None = Field(default=None, max_length=2000)
