"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions shared across the
scheduling API: generic messages, notifications and partial failures.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """범용 메시지 응답 스키마.

    Generic message response schema for simple confirmations.
    Used for delete operations and other actions that return a
    human-readable confirmation message.

    Attributes:
        message: 응답 메시지 (Response message string)
    """

    message: str  # 응답 메시지 (Human-readable confirmation message)


class NotificationResponse(BaseModel):
    """알림 응답 스키마.

    Notification response schema.
    Uses polymorphic reference_type + reference_id for deep-linking
    to the source entity in the client app.
    """

    id: str  # 알림 UUID 문자열 (Notification UUID as string)
    type: str  # 알림 유형 — "time_off_submitted"|"sick_leave_reported"|...
    message: str  # 알림 메시지 (Display message)
    reference_type: str | None  # 참조 엔티티 유형 (Entity type for deep-linking)
    reference_id: str | None  # 참조 엔티티 UUID (Entity UUID for deep-linking)
    payload: dict[str, Any] | None = None
    is_read: bool  # 읽음 여부 (Read flag)
    created_at: datetime  # 생성 일시 UTC (Creation timestamp)


class PartialFailureResponse(BaseModel):
    """부분 실패 응답 스키마 (HTTP 207).

    Body returned when a compound operation committed some steps and a
    later step failed.

    Attributes:
        message: 설명 (Human-readable summary)
        completed_steps: 완료된 단계 (Steps that were committed)
        failed_step: 실패한 단계 (Step that failed)
        data: 저장된 엔티티 식별자 (Identifiers of what was persisted)
    """

    message: str
    completed_steps: list[str]
    failed_step: str
    data: dict[str, Any]
