#!/usr/bin/env python3
"""
Notification service wrapper for the web application.
"""

import logging
from typing import Any, Dict

from core.config_loader import get_config
from core.errors import NotAuthorizedError, NotFoundError
from database.models import Notification, User
from database.uow import UnitOfWork
from notification import NotificationService
from ..models.responses import NotificationView
from ..utils import enum_value, optional_str, safe_datetime_iso

logger = logging.getLogger(__name__)

LIST_LIMIT = 50


def notification_view(notification: Notification) -> NotificationView:
    return NotificationView(
        id=str(notification.id),
        type=enum_value(notification.type),
        title=notification.title,
        message=notification.message,
        project_id=optional_str(notification.project_id),
        is_read=notification.is_read,
        created_at=safe_datetime_iso(notification.created_at),
    )


class NotificationServiceWrapper:
    """Wrapper for NotificationService bound to the request's unit of work."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow
        self.notification_service = NotificationService(uow.notifications, get_config().notifications)

    def list_for_user(self, user: User) -> Dict[str, Any]:
        """Latest notifications, newest first, plus the caller's total unread count."""
        notifications = [
            notification_view(n)
            for n in self.notification_service.list_for_user(user.id, limit=LIST_LIMIT)
        ]
        return {
            'notifications': notifications,
            'unread_count': self.uow.notifications.count_unread(user.id),
        }

    def mark_read(self, user: User, notification_id: Any) -> NotificationView:
        notification = self.uow.notifications.get_by_id(notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        if notification.user_id != user.id:
            raise NotAuthorizedError("You can only mark your own notifications as read")

        self.uow.notifications.mark_read(notification)
        self.uow.commit()
        return notification_view(notification)
