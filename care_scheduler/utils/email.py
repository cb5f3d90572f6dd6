"""알림 이메일 발송 — aiosmtplib SMTP 클라이언트.

Notification email delivery over SMTP (aiosmtplib). Scheduling
notifications are the only sender; delivery is skipped unless SMTP_USER
and SMTP_FROM_EMAIL are configured.
"""

from email.message import EmailMessage
from html import escape

import aiosmtplib

from care_scheduler.config import settings


def is_email_configured() -> bool:
    """SMTP 자격 증명과 발신 주소가 설정되었는지 확인합니다."""
    return bool(settings.SMTP_USER and settings.SMTP_FROM_EMAIL)


def build_message(to: str, subject: str, text: str) -> EmailMessage:
    """알림 본문으로 plain + HTML 메시지를 구성합니다.

    Build a multipart message whose HTML part is the escaped notification
    text, so payload values (names, notes) never inject markup.
    """
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>"
    msg["To"] = to
    msg.set_content(text)
    msg.add_alternative(f"<p>{escape(text)}</p>", subtype="html")
    return msg


async def send_email(to: str, subject: str, text: str) -> None:
    """알림 이메일을 발송합니다.

    Args:
        to: 수신자 이메일 주소 (Recipient address)
        subject: 제목 (Subject line)
        text: 알림 메시지 (Rendered notification message)

    Raises:
        aiosmtplib.SMTPException: 발송 실패 시 (Delivery failure; callers log and ignore it)
    """
    await aiosmtplib.send(
        build_message(to, subject, text),
        hostname=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USER,
        password=settings.SMTP_PASSWORD,
        start_tls=True,
    )
