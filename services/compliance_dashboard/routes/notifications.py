"""
Notification Routes
===================

In-app notification feed.

Version: 0.1.0
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from services.compliance_dashboard.dependencies import get_feed
from services.compliance_dashboard.notifications import NotificationFeed
from shared.models.common import ActionResponse
from shared.models.notification import FeedNotification

router = APIRouter()


@router.get("", response_model=list[FeedNotification])
async def list_notifications(
    unread: bool = Query(default=False, description="Only unread notifications"),
    feed: NotificationFeed = Depends(get_feed),
) -> list[FeedNotification]:
    """Notifications, newest first."""
    return feed.list(unread_only=unread)


@router.post("/{notification_id}/read", response_model=ActionResponse)
async def mark_notification_read(
    notification_id: int,
    feed: NotificationFeed = Depends(get_feed),
) -> ActionResponse:
    if not feed.mark_read(notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="알림을 찾을 수 없습니다.",
        )
    return ActionResponse(message="알림을 읽음으로 표시했습니다.")
