#!/usr/bin/env python3
"""
Notification endpoints - the caller's in-app notifications.
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from database.models import User
from database.uow import UnitOfWork
from ..dependencies import get_current_user, get_uow
from ..services.notification_service import NotificationServiceWrapper
from ..models.responses import NotificationReadResponse, NotificationsResponse

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


def get_notification_service(uow: UnitOfWork = Depends(get_uow)) -> NotificationServiceWrapper:
    """Dependency to get notification service."""
    return NotificationServiceWrapper(uow)


@router.get("", response_model=NotificationsResponse)
def list_notifications(
    user: User = Depends(get_current_user),
    notification_service: NotificationServiceWrapper = Depends(get_notification_service)
):
    """
    Latest 50 notifications, newest first.

    ``unread_count`` covers all of the caller's unread notifications.
    """
    result = notification_service.list_for_user(user)
    return NotificationsResponse(
        success=True,
        count=len(result['notifications']),
        unread_count=result['unread_count'],
        notifications=result['notifications']
    )


@router.patch("/{notification_id}/read", response_model=NotificationReadResponse)
def mark_notification_read(
    notification_id: UUID,
    user: User = Depends(get_current_user),
    notification_service: NotificationServiceWrapper = Depends(get_notification_service)
):
    notification = notification_service.mark_read(user, notification_id)
    return NotificationReadResponse(success=True, notification=notification)
