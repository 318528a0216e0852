"""
Notification Module

In-app notifications with optional email and webhook delivery.

Usage:
    from notification import NotificationService, NotificationMessageBuilder

    service = NotificationService(repo, config)
    service.notify(user, NotificationMessageBuilder.team_accepted('portfolio'), project_id)
"""

from notification.channels import (
    NotificationChannel,
    EmailChannel,
    WebhookChannel,
    NotificationChannelFactory,
)

from notification.message_builder import (
    NotificationContent,
    NotificationMessageBuilder,
)

from notification.service import (
    NotificationService,
    process_delivery_task,
)

__all__ = [
    # Channels
    'NotificationChannel',
    'EmailChannel',
    'WebhookChannel',
    'NotificationChannelFactory',
    # Messages
    'NotificationContent',
    'NotificationMessageBuilder',
    # Service
    'NotificationService',
    'process_delivery_task',
]
