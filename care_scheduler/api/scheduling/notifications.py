"""알림 라우터 — 내 알림 조회 엔드포인트.

Notification Router — In-app notifications of the caller.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from care_scheduler.api.deps import get_access_context
from care_scheduler.database import get_db
from care_scheduler.schemas.common import NotificationResponse
from care_scheduler.services.notification_service import notification_service
from care_scheduler.services.permission_service import AccessContext

router: APIRouter = APIRouter()


@router.get(
    "",
    response_model=list[NotificationResponse],
)
async def list_my_notifications(
    db: Annotated[AsyncSession, Depends(get_db)],
    ctx: Annotated[AccessContext, Depends(get_access_context)],
) -> list[dict]:
    """내 알림 목록을 최신순으로 조회합니다 (My notifications, newest first)."""
    notifications = await notification_service.list_for_user(db, ctx.user_id)
    return [
        {
            "id": str(n.id),
            "type": n.type,
            "message": n.message,
            "reference_type": n.reference_type,
            "reference_id": str(n.reference_id) if n.reference_id else None,
            "payload": n.payload,
            "is_read": n.is_read,
            "created_at": n.created_at,
        }
        for n in notifications
    ]
