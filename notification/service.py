#!/usr/bin/env python3
"""
Notification Service

Every event produces an in-app ``Notification`` row, written through the
caller's session so it commits or rolls back with the state change it
describes. Deliveries to external channels (email, webhook) are buffered in
an outbox and only sent by ``flush()`` after the caller has committed;
``discard()`` drops them when the transaction is rolled back.

Usage:
    from notification.service import NotificationService

    service = NotificationService(NotificationRepository(session), config)
    service.notify(user, content, project_id=project.id)
    session.commit()
    service.flush()
"""

import logging
from typing import Any, Dict, List, Optional

from redis import Redis
from rq import Queue, Retry

from core.config_loader import NotificationsConfig
from database.models import Notification, User
from database.repositories.notification import NotificationRepository
from notification.channels import NotificationChannelFactory
from notification.message_builder import NotificationContent, NotificationMessageBuilder

logger = logging.getLogger(__name__)

QUEUE_NAME = 'notifications'


class NotificationService:
    def __init__(
        self,
        repo: NotificationRepository,
        config: Optional[NotificationsConfig] = None,
        queue: Optional[Queue] = None
    ):
        """
        Args:
            repo: Repository bound to the caller's session
            config: Channel and queue settings
            queue: RQ queue to use instead of connecting to ``config.redis_url``
        """
        self.repo = repo
        self.config = config or NotificationsConfig()
        self._queue = queue
        self._queue_checked = queue is not None
        self._outbox: List[Dict[str, Any]] = []

    @property
    def pending_deliveries(self) -> List[Dict[str, Any]]:
        return list(self._outbox)

    def notify(self, user: User, content: NotificationContent, project_id: Optional[Any] = None) -> Notification:
        """Store the in-app notification and stage external deliveries."""
        notification = self.repo.create(
            user_id=user.id,
            type=content.type,
            title=content.title,
            message=content.message,
            project_id=project_id,
        )

        project_ref = str(project_id) if project_id else None
        metadata = {
            'notification_type': content.type.value,
            'project_id': project_ref,
            'link': NotificationMessageBuilder.project_link(self.config.base_url, project_ref),
        }
        for channel_type, channel_config in self.config.channels.items():
            if not channel_config.enabled:
                continue
            recipient = channel_config.recipient or self._default_recipient(user, channel_type)
            if not recipient:
                logger.debug(f"No {channel_type} recipient for user {user.id}; skipping")
                continue
            self._outbox.append({
                'channel_type': channel_type,
                'recipient': recipient,
                'subject': content.title,
                'body': content.message,
                'metadata': metadata,
            })

        logger.info(f"Notified user {user.id}: {content.title}")
        return notification

    def _default_recipient(self, user: User, channel_type: str) -> Optional[str]:
        if channel_type == 'email':
            return user.email or None
        return None

    def _get_queue(self) -> Optional[Queue]:
        """Connect to Redis on first use; None means deliver synchronously."""
        if self._queue_checked:
            return self._queue
        self._queue_checked = True

        if not self.config.use_async_queue or not self.config.redis_url:
            logger.info("Async queue disabled via config. Using sync mode.")
            return None
        try:
            redis_conn = Redis.from_url(self.config.redis_url)
            redis_conn.ping()
            self._queue = Queue(QUEUE_NAME, connection=redis_conn)
            logger.info("Notification service connected to Redis")
        except Exception as e:
            logger.error(f"Redis connection failed: {e}. Falling back to sync mode.")
            self._queue = None
        return self._queue

    def flush(self) -> List[Optional[str]]:
        """Send or enqueue staged deliveries. Call only after the transaction committed."""
        deliveries, self._outbox = self._outbox, []
        if not deliveries:
            return []

        queue = self._get_queue()
        results = []
        for delivery in deliveries:
            if queue is not None:
                try:
                    job = queue.enqueue(
                        process_delivery_task,
                        delivery,
                        job_timeout='5m',
                        result_ttl=86400,
                        retry=Retry(max=3, interval=[30, 60, 120])
                    )
                except Exception as e:
                    logger.error(f"Failed to queue {delivery['channel_type']} delivery: {e}")
                    results.append(None)
                    continue
                logger.info(f"Queued {delivery['channel_type']} delivery as job {job.id}")
                results.append(job.id)
            else:
                sent = process_delivery_task(delivery)
                results.append(delivery['channel_type'] if sent else None)
        return results

    def discard(self) -> None:
        if self._outbox:
            logger.info(f"Discarding {len(self._outbox)} staged deliveries after rollback")
        self._outbox = []

    def list_for_user(self, user_id: Any, limit: int = 50) -> List[Notification]:
        return self.repo.list_for_user(user_id, limit=limit)


# Worker task - must be at module level for RQ
def process_delivery_task(delivery: Dict[str, Any]) -> bool:
    channel_type = delivery['channel_type']
    try:
        channel = NotificationChannelFactory.get_channel(channel_type)
    except ValueError as e:
        logger.error(f"Dropping delivery: {e}")
        return False

    success = channel.send(
        delivery['recipient'],
        delivery['subject'],
        delivery['body'],
        delivery.get('metadata', {})
    )
    if success:
        logger.info(f"{channel_type} delivery sent")
    else:
        logger.error(f"{channel_type} delivery failed")
    return success
