"""스케줄링 도메인 열거형 정의.

Scheduling domain enumerations.
Values are stored as plain strings (String columns), matching the wire
format; the enums give services a closed set to compare against.
"""

from enum import Enum


class UserRole(str, Enum):
    """사용자 역할 — 외부 인증 서비스가 부여 (Role granted by the auth service)."""

    CLIENT = "CLIENT"
    CAREGIVER = "CAREGIVER"
    ADMIN = "ADMIN"


class RelationshipStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class RecurrenceType(str, Enum):
    """반복 규칙 — 패턴이 어떤 날짜에 시프트를 만드는지 결정.

    Recurrence rule deciding which calendar dates a pattern produces.
    All weekday-based rules are anchored at the pattern's start date.
    """

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    BIWEEKLY = "BIWEEKLY"
    FIRST_OF_MONTH = "FIRST_OF_MONTH"
    LAST_OF_MONTH = "LAST_OF_MONTH"


class ShiftStatus(str, Enum):
    """시프트 상태 (Shift status).

    SCHEDULED: 미배정 (no caregiver yet)
    FILLED: 배정됨 (caregiver assigned)
    COMPLETED: 완료, 수정/삭제 불가 (done, locked)
    CANCELLED: 취소 (ignored by conflict detection)
    """

    SCHEDULED = "SCHEDULED"
    FILLED = "FILLED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ShiftOrigin(str, Enum):
    """시프트 출처 — 생성 작업이 건드려도 되는지 판단하는 명시적 태그.

    GENERATED: 패턴에서 생성, 수정 이력 없음 (Produced by a pattern, untouched)
    MANUAL: 사용자가 직접 생성 (Created by hand, no pattern)
    MANUALLY_EDITED: 생성 후 수정됨 — pattern override (Generated, then edited)
    """

    GENERATED = "GENERATED"
    MANUAL = "MANUAL"
    MANUALLY_EDITED = "MANUALLY_EDITED"


class TimeCorrectionStatus(str, Enum):
    PENDING = "PENDING"
    ACKNOWLEDGED = "ACKNOWLEDGED"


class TimeOffType(str, Enum):
    DAY_OFF = "DAY_OFF"
    SICK_LEAVE = "SICK_LEAVE"
    VACATION = "VACATION"


class TimeOffStatus(str, Enum):
    """휴가 요청 상태 — PENDING → APPROVED | DENIED (둘 다 종료 상태)."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DENIED = "DENIED"


class NotificationKind(str, Enum):
    """알림 템플릿 종류 (Notification template kinds)."""

    TIME_OFF_SUBMITTED = "time_off_submitted"
    SICK_LEAVE_REPORTED = "sick_leave_reported"
    TIME_OFF_APPROVED = "time_off_approved"
    TIME_OFF_DENIED = "time_off_denied"
    TIME_CORRECTION_REPORTED = "time_correction_reported"
