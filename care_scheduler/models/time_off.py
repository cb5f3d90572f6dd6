"""휴가 요청 SQLAlchemy ORM 모델 정의.

Time-off request SQLAlchemy ORM model definitions.

Tables:
    - time_off_requests: 제공자의 휴가/병가 요청 (Caregiver time-off requests)
"""

import uuid
from datetime import date, datetime, timezone
from sqlalchemy import String, DateTime, Date, Text, Boolean, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from care_scheduler.database import Base


class TimeOffRequest(Base):
    """휴가 요청 모델 — 제공자가 특정 대상자에게 제출하는 부재 요청.

    Time-off request model — A caregiver's request to be unavailable for
    one client over a date range. A multi-client submission creates one row
    per client sharing a group_id.

    Status Flow:
        PENDING → APPROVED | DENIED (둘 다 종료 — both terminal)
        SICK_LEAVE + is_emergency: 생성 즉시 APPROVED (approved at creation)

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        group_id: 묶음 ID, 선택 (Links sibling requests from one submission)
        caregiver_id: 요청 제공자 FK (Requesting caregiver)
        client_id: 대상자 FK (Client asked for the time off)
        request_type: 유형 (DAY_OFF | SICK_LEAVE | VACATION)
        start_date / end_date: 기간, 양 끝 포함 (Inclusive date range)
        reason: 사유, 선택 (Optional reason)
        status: 상태 (PENDING | APPROVED | DENIED)
        is_emergency: 긴급 여부, 병가는 항상 True (Always true for sick leave)
        review_notes: 검토 메모, 거절 시 필수 (Required when denying)
        reviewed_by / reviewed_at: 검토자/검토 일시 (Reviewer and time)
        dismissed: 알림 숨김 — 상태와 무관 (Soft-hide flag, orthogonal to status)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "time_off_requests"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    group_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    caregiver_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("caregiver_profiles.id", ondelete="CASCADE"), nullable=False)
    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("client_profiles.id", ondelete="CASCADE"), nullable=False)
    request_type: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="PENDING")
    is_emergency: Mapped[bool] = mapped_column(Boolean, default=False)
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    dismissed: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_time_off_caregiver_status", "caregiver_id", "status"),
        Index("ix_time_off_client_status", "client_id", "status"),
        Index("ix_time_off_group", "group_id"),
    )
