"""스케줄링 관련 SQLAlchemy ORM 모델 정의.

Scheduling SQLAlchemy ORM model definitions.
A client defines shift types (named time windows) and recurrence patterns
(caregiver × shift type × rule); the generation job expands patterns into
concrete shifts.

Tables:
    - shift_types: 시프트 유형 (Named time-window templates owned by a client)
    - shift_patterns: 반복 패턴 (Recurrence patterns)
    - shifts: 시프트 인스턴스 (One calendar occurrence of care for one client)
"""

import uuid
from datetime import date, datetime, time, timezone
from sqlalchemy import String, DateTime, Date, Time, Text, Boolean, ForeignKey, UniqueConstraint, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from care_scheduler.database import Base
from care_scheduler.models.enums import ShiftOrigin


class ShiftType(Base):
    """시프트 유형 모델 — 대상자가 정의하는 재사용 가능한 시간대.

    Shift type model — A named, reusable time window ("Morning", 08:00–12:00)
    owned by a client. Cannot be deleted while shifts or patterns use it.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        client_id: 소유 대상자 FK (Owning client)
        name: 유형 이름 (Display name)
        start_time: 시작 시각 (Default start time for shifts of this type)
        end_time: 종료 시각 (Default end time; may be earlier than start for overnight)
        color: 표시 색상 #RRGGBB (Display color)
    """

    __tablename__ = "shift_types"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 소유 대상자 FK — CASCADE: 대상자 삭제 시 유형도 삭제
    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("client_profiles.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    color: Mapped[str] = mapped_column(String(7), default="#3B82F6")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_shift_types_client", "client_id"),
    )


class ShiftPattern(Base):
    """반복 패턴 모델 — 어떤 날짜에 시프트가 생기는지 정의.

    Recurrence pattern model — Defines which calendar dates produce a shift
    for a shift type, optionally pre-assigned to a caregiver.

    Weekday-based rules use the weekday of start_date as the anchor;
    BIWEEKLY parity is counted in whole weeks from start_date.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        client_id: 소유 대상자 FK (Owning client)
        caregiver_id: 배정 제공자 FK, 선택 (Pre-assigned caregiver; null = unassigned pattern)
        shift_type_id: 시프트 유형 FK (Shift type whose times are used)
        recurrence_type: 반복 규칙 (DAILY | WEEKLY | BIWEEKLY | FIRST_OF_MONTH | LAST_OF_MONTH)
        start_date: 시작일, 요일 기준점 (First date and weekday anchor)
        end_date: 종료일, 선택 (Last date; null = open-ended up to the horizon cap)
        is_active: 활성 여부, 삭제 시 False (Soft delete flag)
        created_by: 작성자 FK (Creating user)
    """

    __tablename__ = "shift_patterns"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("client_profiles.id", ondelete="CASCADE"), nullable=False)
    caregiver_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("caregiver_profiles.id", ondelete="SET NULL"), nullable=True)
    shift_type_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("shift_types.id", ondelete="RESTRICT"), nullable=False)
    recurrence_type: Mapped[str] = mapped_column(String(20), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        Index("ix_shift_patterns_client_active", "client_id", "is_active"),
    )


class Shift(Base):
    """시프트 모델 — 한 대상자의 특정 날짜 돌봄 1회.

    Shift model — One concrete occurrence of care for a client on a date,
    optionally assigned to a caregiver.

    Origin Flow:
        GENERATED → MANUALLY_EDITED (배정/시각 변경 시 — when caregiver or times change)
        MANUAL (직접 생성, 변하지 않음 — created by hand, stays MANUAL)

    Time Correction Flow:
        None → PENDING (제공자가 실제 시각 보고) → ACKNOWLEDGED (대상자가 수락)

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        client_id: 대상자 FK (Client receiving care)
        shift_type_id: 시프트 유형 FK (Shift type)
        pattern_id: 생성한 패턴 FK, 선택 (Pattern that generated this shift)
        shift_date: 날짜 (Calendar date)
        start_time / end_time: 계획 시각 (Planned times; may differ from the type)
        caregiver_id: 배정 제공자 FK, 선택 (Assigned caregiver; null = unfilled)
        status: 상태 (SCHEDULED | FILLED | COMPLETED | CANCELLED)
        origin: 출처 태그 (GENERATED | MANUAL | MANUALLY_EDITED)
        internal_notes: 대상자 전용 메모 (Client-private notes)
        instruction_notes: 제공자용 지시사항 (Caregiver-visible instructions)
        client_verified / client_verified_at: 대상자 확인 여부/일시 (Verification)
        actual_start_time / actual_end_time: 제공자 보고 실제 시각 (Reported actual times)
        caregiver_note: 제공자 메모 (Caregiver note attached to the correction)
        time_correction_status / time_correction_at: 시각 보정 상태/일시

    Constraints:
        uq_shift_client_type_date: 대상자+유형+날짜당 하나 (One shift per client, type and date)
    """

    __tablename__ = "shifts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("client_profiles.id", ondelete="CASCADE"), nullable=False)
    shift_type_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("shift_types.id", ondelete="RESTRICT"), nullable=False)
    # 패턴 FK — 패턴이 삭제되어도 시프트는 유지 (SET NULL)
    pattern_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("shift_patterns.id", ondelete="SET NULL"), nullable=True)
    shift_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    caregiver_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("caregiver_profiles.id", ondelete="SET NULL"), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="SCHEDULED")
    origin: Mapped[str] = mapped_column(String(20), default=ShiftOrigin.MANUAL.value)
    internal_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    instruction_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    client_verified: Mapped[bool] = mapped_column(Boolean, default=False)
    client_verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    actual_start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    actual_end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    caregiver_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    time_correction_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    time_correction_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_by: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("client_id", "shift_type_id", "date", name="uq_shift_client_type_date"),
        Index("ix_shifts_caregiver_date", "caregiver_id", "date"),
        Index("ix_shifts_client_date", "client_id", "date"),
    )

    @property
    def is_pattern_override(self) -> bool:
        """생성 후 수동 수정 여부 (True once a generated shift was edited by hand)."""
        return self.origin == ShiftOrigin.MANUALLY_EDITED.value
