"""사용자 및 프로필 관련 SQLAlchemy ORM 모델 정의.

User and profile SQLAlchemy ORM model definitions.
Accounts are owned by the external authentication service; these tables
hold just enough to build the caller's access context and address
notifications.

Tables:
    - users: 사용자 계정 (Accounts with a CLIENT / CAREGIVER / ADMIN role)
    - client_profiles: 돌봄 대상자 프로필 (Client profile, one per CLIENT user)
    - caregiver_profiles: 돌봄 제공자 프로필 (Caregiver profile, one per CAREGIVER user)
    - caregiver_client_relationships: 제공자-대상자 관계 (Caregiver ↔ client links)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from care_scheduler.database import Base


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        email: 이메일 주소, 알림 발송용 (Email address for notifications)
        full_name: 표시 이름 (Display name)
        role: 역할 — CLIENT / CAREGIVER / ADMIN (Role)
        is_active: 활성 여부 (Whether the account may call the API)
        created_at: 생성 일시 UTC (Creation timestamp)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 이메일 — Unique email address
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    # 표시 이름 — Display name
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # 역할 — CLIENT | CAREGIVER | ADMIN
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    # 활성 여부 — Inactive users are rejected at authentication
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships (at most one profile per user)
    client_profile = relationship("ClientProfile", back_populates="user", uselist=False)
    caregiver_profile = relationship("CaregiverProfile", back_populates="user", uselist=False)


class ClientProfile(Base):
    """돌봄 대상자 프로필 — 시프트, 패턴, 시프트 유형의 소유자.

    Client profile — owner of shift types, patterns and shifts.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 사용자 FK (Owning CLIENT user)
        name: 대상자 이름 (Client display name, shown in conflict warnings)
    """

    __tablename__ = "client_profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 사용자 FK — CASCADE: 사용자 삭제 시 프로필도 삭제
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="client_profile")


class CaregiverProfile(Base):
    """돌봄 제공자 프로필 — 시프트에 배정되고 휴가를 신청하는 주체.

    Caregiver profile — assigned to shifts, submits time-off requests.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        user_id: 사용자 FK (Owning CAREGIVER user)
        name: 제공자 이름 (Caregiver display name)
        color: 캘린더 표시 색상 (Calendar color, display only)
    """

    __tablename__ = "caregiver_profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    color: Mapped[str | None] = mapped_column(String(7), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    user = relationship("User", back_populates="caregiver_profile")


class CaregiverClientRelationship(Base):
    """제공자-대상자 관계 모델.

    Caregiver ↔ client relationship. Only ACTIVE relationships allow a
    caregiver to be assigned to the client's shifts or to request time off
    from that client.

    Constraints:
        uq_relationship_caregiver_client: 같은 쌍은 한 번만 (One row per pair)
    """

    __tablename__ = "caregiver_client_relationships"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    caregiver_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("caregiver_profiles.id", ondelete="CASCADE"), nullable=False)
    client_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("client_profiles.id", ondelete="CASCADE"), nullable=False)
    # 관계 상태 — ACTIVE | INACTIVE
    status: Mapped[str] = mapped_column(String(20), default="ACTIVE")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("caregiver_id", "client_id", name="uq_relationship_caregiver_client"),
    )
