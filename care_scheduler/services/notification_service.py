"""알림 서비스 — 알림 생성 및 커밋 후 이메일 발송.

Notification Service — Dispatches scheduling notifications.
Each dispatch writes an in-app notification row in the caller's
transaction. When SMTP is configured the matching email is held on the
session and only handed to FastAPI background tasks by the router after
its commit succeeds, so a rolled-back operation never emails anyone.
Delivery failures are logged and never surface to the caller.
"""

from dataclasses import dataclass
from typing import Any, Sequence
from uuid import UUID

from fastapi import BackgroundTasks
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from care_scheduler.logging import get_logger
from care_scheduler.models.enums import NotificationKind
from care_scheduler.models.notification import Notification
from care_scheduler.repositories.notification_repository import notification_repository
from care_scheduler.repositories.user_repository import user_repository
from care_scheduler.utils.email import is_email_configured, send_email

logger = get_logger(__name__)

# 세션에 보류된 이메일 키 (Session.info key for emails awaiting commit)
_PENDING_EMAILS_KEY: str = "pending_notification_emails"


@event.listens_for(Session, "after_rollback")
def _drop_pending_emails(session: Session) -> None:
    # 롤백된 작업의 이메일은 발송하지 않음 (Rolled-back work sends no email)
    session.info.pop(_PENDING_EMAILS_KEY, None)


# 알림 종류별 메시지 템플릿 — Message template per kind (str.format over the payload)
_TEMPLATES: dict[str, str] = {
    NotificationKind.TIME_OFF_SUBMITTED.value: "{caregiver_name} requested time off ({start_date} – {end_date})",
    NotificationKind.SICK_LEAVE_REPORTED.value: "{caregiver_name} reported sick leave ({start_date} – {end_date}); {affected_shifts} shift(s) need coverage",
    NotificationKind.TIME_OFF_APPROVED.value: "Your time off with {client_name} ({start_date} – {end_date}) was approved",
    NotificationKind.TIME_OFF_DENIED.value: "Your time off with {client_name} ({start_date} – {end_date}) was denied: {review_notes}",
    NotificationKind.TIME_CORRECTION_REPORTED.value: "{caregiver_name} reported actual times {actual_start_time}–{actual_end_time} for {date}",
}

_SUBJECTS: dict[str, str] = {
    NotificationKind.TIME_OFF_SUBMITTED.value: "New time-off request",
    NotificationKind.SICK_LEAVE_REPORTED.value: "Sick leave reported",
    NotificationKind.TIME_OFF_APPROVED.value: "Time off approved",
    NotificationKind.TIME_OFF_DENIED.value: "Time off denied",
    NotificationKind.TIME_CORRECTION_REPORTED.value: "Time correction reported",
}


@dataclass(frozen=True)
class PendingEmail:
    """커밋을 기다리는 알림 이메일 (Notification email awaiting commit)."""

    to: str
    subject: str
    text: str
    kind: str


class NotificationService:
    """알림 서비스.

    Notification service used by the time-off engine and the time
    correction flow.
    """

    @staticmethod
    def render_message(kind: str, payload: dict[str, Any]) -> str:
        """템플릿에 페이로드를 채워 메시지를 만듭니다.

        Render the message for a kind. Missing payload keys render empty.
        """
        template: str = _TEMPLATES.get(kind, kind)
        return template.format_map(_DefaultDict(payload))

    async def dispatch(
        self,
        db: AsyncSession,
        recipient_user_id: UUID,
        kind: NotificationKind,
        payload: dict[str, Any],
        reference_type: str | None = None,
        reference_id: UUID | None = None,
    ) -> Notification:
        """알림을 생성하고 이메일을 커밋 후 발송 대기열에 보류합니다.

        Write the in-app notification and hold its email on the session
        until the router commits (see ``schedule_pending_emails``).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            recipient_user_id: 수신자 사용자 UUID (Recipient user UUID)
            kind: 알림 종류 (Template kind)
            payload: 템플릿 데이터 (Template payload, JSON-serialisable)
            reference_type: 참조 엔티티 유형, 선택 (time_off_request | shift)
            reference_id: 참조 엔티티 UUID, 선택 (Referenced entity UUID)

        Returns:
            Notification: 생성된 알림 (Created notification)
        """
        message: str = self.render_message(kind.value, payload)
        notification: Notification = await notification_repository.create_notification(
            db,
            user_id=recipient_user_id,
            notification_type=kind.value,
            message=message,
            reference_type=reference_type,
            reference_id=reference_id,
            payload=payload,
        )

        if is_email_configured():
            user = await user_repository.get_by_id(db, recipient_user_id)
            if user is not None and user.email:
                db.info.setdefault(_PENDING_EMAILS_KEY, []).append(
                    PendingEmail(
                        to=user.email,
                        subject=_SUBJECTS.get(kind.value, kind.value),
                        text=message,
                        kind=kind.value,
                    )
                )

        return notification

    def schedule_pending_emails(
        self,
        db: AsyncSession,
        background_tasks: BackgroundTasks,
    ) -> int:
        """커밋된 알림의 이메일을 백그라운드 작업으로 넘깁니다.

        Call after a successful commit. Moves the session's held emails to
        ``background_tasks``, which run after the response is sent.

        Returns:
            int: 예약된 이메일 수 (Number of emails scheduled)
        """
        pending: list[PendingEmail] = db.info.pop(_PENDING_EMAILS_KEY, [])
        for email in pending:
            background_tasks.add_task(self.deliver, email)
        return len(pending)

    @staticmethod
    async def deliver(email: PendingEmail) -> None:
        """이메일 한 건 발송 — 실패는 기록만 (Send one email; failures are logged only)."""
        try:
            await send_email(to=email.to, subject=email.subject, text=email.text)
        except Exception as exc:
            logger.warning(
                "notification_email_failed",
                kind=email.kind,
                to=email.to,
                error=str(exc),
            )

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> Sequence[Notification]:
        """사용자의 알림 목록을 조회합니다 (List a user's notifications, newest first)."""
        return await notification_repository.get_user_notifications(db, user_id)


class _DefaultDict(dict):
    def __missing__(self, key: str) -> str:
        return ""


# 싱글턴 인스턴스 — Singleton instance
notification_service: NotificationService = NotificationService()
