"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations and
relationship resolution.

Modules:
    user: 사용자, 대상자/제공자 프로필, 관계 (Users, profiles, relationships)
    scheduling: 시프트 유형, 반복 패턴, 시프트 (Shift types, patterns, shifts)
    time_off: 휴가 요청 (Time-off requests)
    notification: 알림 (User notifications)
"""

from care_scheduler.models.user import User, ClientProfile, CaregiverProfile, CaregiverClientRelationship
from care_scheduler.models.scheduling import ShiftType, ShiftPattern, Shift
from care_scheduler.models.time_off import TimeOffRequest
from care_scheduler.models.notification import Notification

__all__ = [
    "User", "ClientProfile", "CaregiverProfile", "CaregiverClientRelationship",
    "ShiftType", "ShiftPattern", "Shift",
    "TimeOffRequest",
    "Notification",
]
