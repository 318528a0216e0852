import logging
from typing import Any, List, Optional

from sqlalchemy import func, select

from core.enums import NotificationType
from database.models import Notification
from database.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class NotificationRepository(BaseRepository):
    def create(
        self,
        user_id: Any,
        type: NotificationType,
        title: str,
        message: str,
        project_id: Optional[Any] = None
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            project_id=project_id,
            is_read=False
        )
        self.db.add(notification)
        self.db.flush()
        return notification

    def get_by_id(self, notification_id: Any) -> Optional[Notification]:
        return self.db.get(Notification, notification_id)

    def list_for_user(self, user_id: Any, limit: int = 50, unread_only: bool = False) -> List[Notification]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        stmt = stmt.order_by(Notification.created_at.desc()).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

    def mark_read(self, notification: Notification) -> Notification:
        notification.is_read = True
        self.db.flush()
        return notification

    def count_unread(self, user_id: Any) -> int:
        stmt = select(func.count()).select_from(Notification).where(
            Notification.user_id == user_id,
            Notification.is_read.is_(False)
        )
        return self.db.execute(stmt).scalar_one()
