#!/usr/bin/env python3
"""
Notification Channels

External delivery for marketplace notifications. The in-app notification row
is always written by ``NotificationService``; channels here are optional
extras configured under ``notifications.channels``.

Usage:
    from notification.channels import NotificationChannelFactory

    channel = NotificationChannelFactory.get_channel('email')
    channel.send(recipient, subject, body, metadata)
"""

import ipaddress
import logging
import os
import smtplib
import socket
import urllib.parse
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from email.message import EmailMessage
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

WEBHOOK_TIMEOUT_SECONDS = 30
USER_AGENT = 'DevinOut-Notifications/1.0'


def _dry_run() -> bool:
    """With NOTIFICATION_DRY_RUN set, channels log what they would send and report success."""
    return os.environ.get('NOTIFICATION_DRY_RUN', '').lower() in ('true', '1', 'yes')


def _mask_email(address: str) -> str:
    domain = address.rpartition('@')[2] if '@' in address else ''
    return f"***@{domain}" if domain else "***"


def _resolve(hostname: str) -> List[Any]:
    return [ipaddress.ip_address(info[4][0]) for info in socket.getaddrinfo(hostname, None)]


def _validate_webhook_url(url: str) -> bool:
    """Only http(s) URLs whose host resolves to public addresses are accepted."""
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in ('http', 'https') or not parsed.hostname:
        logger.error(f"Webhook URL must be http(s) with a host: {url}")
        return False

    try:
        addresses = _resolve(parsed.hostname)
    except (socket.gaierror, ValueError) as e:
        logger.error(f"Could not resolve webhook host {parsed.hostname}: {e}")
        return False

    blocked = [a for a in addresses if a.is_private or a.is_loopback or a.is_reserved or a.is_link_local]
    if blocked:
        logger.error(f"Webhook host {parsed.hostname} resolves to non-public address {blocked[0]}")
        return False
    return True


@dataclass
class SmtpSettings:
    server: Optional[str]
    port: Optional[str]
    username: Optional[str]
    password: Optional[str]
    sender: str

    @classmethod
    def from_env(cls) -> 'SmtpSettings':
        return cls(
            server=os.environ.get('SMTP_SERVER'),
            port=os.environ.get('SMTP_PORT'),
            username=os.environ.get('SMTP_USERNAME'),
            password=os.environ.get('SMTP_PASSWORD'),
            sender=os.environ.get('FROM_EMAIL', 'noreply@devinout.app'),
        )

    @property
    def complete(self) -> bool:
        return all((self.server, self.port, self.username, self.password))


class NotificationChannel(ABC):
    """A delivery target. ``send`` reports failure by returning False, never by raising."""

    channel_type: str = ''

    @abstractmethod
    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> bool:
        """
        Args:
            recipient: Email address or webhook URL
            subject: Notification title
            body: Notification body
            metadata: notification_type, project_id and link of the event
        """

    def validate_config(self) -> bool:
        return True


class EmailChannel(NotificationChannel):
    """Plain-text email over SMTP with STARTTLS, configured from SMTP_* variables."""

    channel_type = 'email'

    def validate_config(self) -> bool:
        return SmtpSettings.from_env().complete

    def _compose(self, settings: SmtpSettings, recipient: str, subject: str, body: str, link: Optional[str]) -> EmailMessage:
        message = EmailMessage()
        message['From'] = settings.sender
        message['To'] = recipient
        message['Subject'] = subject
        message.set_content(f"{body}\n\n{link}" if link else body)
        return message

    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> bool:
        if _dry_run():
            logger.info(f"[DRY RUN] Email to {_mask_email(recipient)}: {subject}")
            return True

        settings = SmtpSettings.from_env()
        if not settings.complete:
            logger.error("Email channel enabled but SMTP settings are missing")
            return False

        message = self._compose(settings, recipient, subject, body, metadata.get('link'))
        try:
            with smtplib.SMTP(settings.server, int(settings.port)) as server:
                server.starttls()
                server.login(settings.username, settings.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            logger.error(f"Email to {_mask_email(recipient)} failed: {e}")
            return False

        logger.info(f"Email sent to {_mask_email(recipient)}")
        return True


class WebhookChannel(NotificationChannel):
    """POSTs a JSON event to the recipient URL."""

    channel_type = 'webhook'

    @staticmethod
    def build_payload(subject: str, body: str, metadata: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'type': metadata.get('notification_type', 'project_update'),
            'title': subject,
            'message': body,
            'project_id': metadata.get('project_id'),
            'link': metadata.get('link'),
            'timestamp': datetime.now(timezone.utc).isoformat(),
        }

    def send(self, recipient: str, subject: str, body: str, metadata: Dict[str, Any]) -> bool:
        if not _validate_webhook_url(recipient):
            return False

        payload = self.build_payload(subject, body, metadata)
        if _dry_run():
            logger.info(f"[DRY RUN] Webhook payload: {payload}")
            return True

        try:
            response = requests.post(
                recipient,
                json=payload,
                headers={'User-Agent': USER_AGENT},
                timeout=WEBHOOK_TIMEOUT_SECONDS
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Webhook delivery failed: {e}")
            return False

        logger.info(f"Webhook delivered to {urllib.parse.urlparse(recipient).hostname}")
        return True


class NotificationChannelFactory:
    """Channel classes by lower-case type name."""

    _channels: Dict[str, type] = {
        EmailChannel.channel_type: EmailChannel,
        WebhookChannel.channel_type: WebhookChannel,
    }

    @classmethod
    def get_channel(cls, channel_type: str) -> NotificationChannel:
        """Raises ValueError for an unregistered type."""
        try:
            return cls._channels[channel_type.lower()]()
        except KeyError:
            raise ValueError(
                f"Unknown channel type: {channel_type}. Available: {', '.join(cls.list_channels())}"
            ) from None

    @classmethod
    def register_channel(cls, channel_type: str, channel_class: type) -> None:
        if not (isinstance(channel_class, type) and issubclass(channel_class, NotificationChannel)):
            raise ValueError("Channel class must extend NotificationChannel")
        cls._channels[channel_type.lower()] = channel_class
        logger.info(f"Registered channel type: {channel_type}")

    @classmethod
    def list_channels(cls) -> List[str]:
        return sorted(cls._channels)
