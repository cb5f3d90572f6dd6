"""알림 레포지토리 — 알림 관련 DB 쿼리 담당.

Notification Repository — Handles all notification-related database queries.
Extends BaseRepository with user-specific notification operations.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.models.notification import Notification
from care_scheduler.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    """알림 레포지토리.

    Notification repository with per-user listing and creation.

    Extends:
        BaseRepository[Notification]
    """

    def __init__(self) -> None:
        """레포지토리를 초기화합니다.

        Initialize the notification repository with Notification model.
        """
        super().__init__(Notification)

    async def get_user_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> Sequence[Notification]:
        """사용자의 알림 목록을 최신순으로 조회합니다.

        Retrieve a user's notifications, newest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 UUID (User UUID)

        Returns:
            Sequence[Notification]: 알림 목록 (List of notifications)
        """
        query: Select = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def create_notification(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_type: str,
        message: str,
        reference_type: str | None = None,
        reference_id: UUID | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Notification:
        """새 알림을 생성합니다.

        Create a new notification.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 수신자 UUID (Recipient user UUID)
            notification_type: 알림 유형 (Notification type)
            message: 알림 메시지 (Notification message)
            reference_type: 참조 유형, 선택 (Optional reference type)
            reference_id: 참조 ID, 선택 (Optional reference UUID)
            payload: 템플릿 데이터, 선택 (Optional template payload)

        Returns:
            Notification: 생성된 알림 (Created notification)
        """
        notification: Notification = Notification(
            user_id=user_id,
            type=notification_type,
            message=message,
            reference_type=reference_type,
            reference_id=reference_id,
            payload=payload,
        )
        db.add(notification)
        await db.flush()
        await db.refresh(notification)
        return notification


# 싱글턴 인스턴스 — Singleton instance
notification_repository: NotificationRepository = NotificationRepository()
