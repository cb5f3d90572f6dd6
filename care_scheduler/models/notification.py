"""알림 관련 SQLAlchemy ORM 모델 정의.

Notification SQLAlchemy ORM model definitions.
Implements a polymorphic notification system where each notification
can reference a time-off request or a shift via reference_type and reference_id.

Tables:
    - notifications: 사용자 알림 (User notifications with polymorphic references)
"""

import uuid
from datetime import datetime, timezone
from typing import Any
from sqlalchemy import JSON, String, Boolean, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from care_scheduler.database import Base


class Notification(Base):
    """알림 모델 — 사용자에게 전달되는 시스템 알림.

    Notification model — In-app notification written by the dispatch
    collaborator. Email delivery (when configured) is a side channel and
    is not tracked here.

    Notification Types (type 필드 값):
        - "time_off_submitted": 휴가 요청 접수 (New time-off request, to the client)
        - "sick_leave_reported": 병가 보고 (Emergency sick leave, to the client)
        - "time_off_approved" / "time_off_denied": 검토 결과 (Decision, to the caregiver)
        - "time_correction_reported": 시각 보정 보고 (Actual times reported, to the client)

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 수신자 FK (Recipient user)
        type: 알림 유형 (Template kind, see above)
        message: 알림 메시지 (Human-readable message)
        reference_type: 참조 엔티티 유형 (time_off_request | shift)
        reference_id: 참조 엔티티 ID (Referenced entity UUID)
        payload: 템플릿 데이터 (Template payload)
        is_read: 읽음 여부 (Whether the user has read it)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "notifications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(String(1000), nullable=False)
    reference_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    reference_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    payload: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_notifications_user_read", "user_id", "is_read"),
    )
