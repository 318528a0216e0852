#!/usr/bin/env python3
"""
Tests for the notification outbox, delivery task and channels.

Usage:
    python -m pytest tests/unit/notification -v
"""

import os
import unittest
import uuid
from types import SimpleNamespace
from unittest.mock import MagicMock, Mock, patch

import requests

from core.config_loader import NotificationChannelConfig, NotificationsConfig
from core.enums import NotificationType
from notification import (
    EmailChannel,
    NotificationChannel,
    NotificationChannelFactory,
    NotificationMessageBuilder,
    NotificationService,
    WebhookChannel,
    process_delivery_task,
)


def make_user(email="freelancer@example.com"):
    return SimpleNamespace(id=uuid.uuid4(), email=email)


class TestNotificationOutbox(unittest.TestCase):

    def setUp(self):
        self.repo = Mock()
        self.repo.create.side_effect = lambda **kwargs: SimpleNamespace(**kwargs)
        self.config = NotificationsConfig(
            base_url="https://devinout.example.com/",
            channels={
                'email': NotificationChannelConfig(enabled=True),
                'webhook': NotificationChannelConfig(enabled=True, recipient="https://hooks.example.com/a"),
                'disabled': NotificationChannelConfig(enabled=False),
            },
            use_async_queue=False,
        )
        self.project_id = uuid.uuid4()
        self.content = NotificationMessageBuilder.team_accepted("portfolio")

    def test_notify_stores_row_and_stages_deliveries(self):
        service = NotificationService(self.repo, self.config)
        user = make_user()

        notification = service.notify(user, self.content, project_id=self.project_id)

        self.repo.create.assert_called_once_with(
            user_id=user.id,
            type=NotificationType.PROJECT_UPDATE,
            title="Team Accepted!",
            message=self.content.message,
            project_id=self.project_id,
        )
        self.assertEqual(notification.title, "Team Accepted!")

        staged = service.pending_deliveries
        self.assertEqual([d['channel_type'] for d in staged], ['email', 'webhook'])
        self.assertEqual(staged[0]['recipient'], "freelancer@example.com")
        self.assertEqual(staged[1]['recipient'], "https://hooks.example.com/a")
        self.assertEqual(
            staged[0]['metadata']['link'],
            f"https://devinout.example.com/projects/{self.project_id}"
        )

    def test_email_skipped_without_address(self):
        service = NotificationService(self.repo, self.config)
        service.notify(make_user(email=""), self.content)
        self.assertEqual([d['channel_type'] for d in service.pending_deliveries], ['webhook'])
        self.assertIsNone(service.pending_deliveries[0]['metadata']['link'])

    def test_no_channels_stages_nothing(self):
        service = NotificationService(self.repo, NotificationsConfig(channels={}))
        service.notify(make_user(), self.content)
        self.assertEqual(service.pending_deliveries, [])
        self.assertEqual(service.flush(), [])

    def test_discard_drops_staged(self):
        service = NotificationService(self.repo, self.config)
        service.notify(make_user(), self.content)
        service.discard()
        self.assertEqual(service.pending_deliveries, [])
        self.repo.create.assert_called_once()

    @patch('notification.service.process_delivery_task')
    def test_flush_sync_mode(self, mock_task):
        mock_task.side_effect = [True, False]
        service = NotificationService(self.repo, self.config)
        service.notify(make_user(), self.content)

        results = service.flush()

        self.assertEqual(results, ['email', None])
        self.assertEqual(mock_task.call_count, 2)
        self.assertEqual(service.pending_deliveries, [])
        self.assertEqual(service.flush(), [])

    def test_flush_enqueues_when_queue_given(self):
        queue = MagicMock()
        queue.enqueue.return_value = SimpleNamespace(id="job-1")
        service = NotificationService(self.repo, self.config, queue=queue)
        service.notify(make_user(), self.content)

        results = service.flush()

        self.assertEqual(results, ["job-1", "job-1"])
        self.assertEqual(queue.enqueue.call_count, 2)
        args, kwargs = queue.enqueue.call_args
        self.assertIs(args[0], process_delivery_task)
        self.assertEqual(args[1]['channel_type'], 'webhook')
        self.assertEqual(kwargs['job_timeout'], '5m')

    def test_enqueue_failure_is_logged_not_raised(self):
        queue = MagicMock()
        queue.enqueue.side_effect = ConnectionError("redis down")
        service = NotificationService(self.repo, self.config, queue=queue)
        service.notify(make_user(), self.content)

        with self.assertLogs('notification.service', level='ERROR'):
            results = service.flush()
        self.assertEqual(results, [None, None])

    @patch('notification.service.Redis')
    def test_redis_unreachable_falls_back_to_sync(self, mock_redis):
        mock_redis.from_url.return_value.ping.side_effect = ConnectionError("refused")
        config = self.config.model_copy(update={'use_async_queue': True, 'redis_url': 'redis://nowhere:6379/0'})
        service = NotificationService(self.repo, config)

        self.assertIsNone(service._get_queue())
        mock_redis.from_url.assert_called_once_with('redis://nowhere:6379/0')

    def test_sync_mode_never_touches_redis(self):
        with patch('notification.service.Redis') as mock_redis:
            service = NotificationService(self.repo, self.config)
            self.assertIsNone(service._get_queue())
            mock_redis.from_url.assert_not_called()


class TestProcessDeliveryTask(unittest.TestCase):

    def delivery(self, channel_type='webhook'):
        return {
            'channel_type': channel_type,
            'recipient': 'https://hooks.example.com/a',
            'subject': 'Team Accepted!',
            'body': 'Both freelancers accepted.',
            'metadata': {'notification_type': 'project_update'},
        }

    def test_unknown_channel(self):
        self.assertFalse(process_delivery_task(self.delivery('pigeon')))

    @patch.object(NotificationChannelFactory, 'get_channel')
    def test_delegates_to_channel(self, mock_get_channel):
        channel = Mock()
        channel.send.return_value = True
        mock_get_channel.return_value = channel

        self.assertTrue(process_delivery_task(self.delivery()))
        channel.send.assert_called_once_with(
            'https://hooks.example.com/a',
            'Team Accepted!',
            'Both freelancers accepted.',
            {'notification_type': 'project_update'},
        )


class TestChannels(unittest.TestCase):

    def setUp(self):
        self.original_env = dict(os.environ)
        os.environ.pop('NOTIFICATION_DRY_RUN', None)

    def tearDown(self):
        os.environ.clear()
        os.environ.update(self.original_env)

    def test_email_validation_missing_config(self):
        for key in ['SMTP_SERVER', 'SMTP_PORT', 'SMTP_USERNAME', 'SMTP_PASSWORD']:
            os.environ.pop(key, None)
        channel = EmailChannel()
        self.assertFalse(channel.validate_config())
        self.assertFalse(channel.send("a@example.com", "Hi", "Body", {}))

    def test_email_dry_run(self):
        os.environ['NOTIFICATION_DRY_RUN'] = 'true'
        self.assertTrue(EmailChannel().send("a@example.com", "Hi", "Body", {}))

    @patch('notification.channels.smtplib.SMTP')
    def test_email_sends_with_link(self, mock_smtp):
        os.environ.update({
            'SMTP_SERVER': 'smtp.example.com',
            'SMTP_PORT': '587',
            'SMTP_USERNAME': 'user',
            'SMTP_PASSWORD': 'pass',
        })
        server = mock_smtp.return_value.__enter__.return_value

        sent = EmailChannel().send("a@example.com", "Hi", "Body", {'link': 'https://x.example.com/p/1'})

        self.assertTrue(sent)
        mock_smtp.assert_called_once_with('smtp.example.com', 587)
        server.login.assert_called_once_with('user', 'pass')
        server.send_message.assert_called_once()

    def test_webhook_rejects_unsafe_urls(self):
        channel = WebhookChannel()
        self.assertFalse(channel.send("ftp://example.com/hook", "Hi", "Body", {}))
        self.assertFalse(channel.send("http://127.0.0.1:8080/hook", "Hi", "Body", {}))

    @patch('notification.channels._validate_webhook_url', return_value=True)
    @patch('notification.channels.requests.post')
    def test_webhook_posts_payload(self, mock_post, _):
        mock_post.return_value.raise_for_status.return_value = None

        sent = WebhookChannel().send(
            "https://hooks.example.com/a", "Title", "Body",
            {'notification_type': 'payment', 'project_id': 'p1', 'link': None}
        )

        self.assertTrue(sent)
        payload = mock_post.call_args.kwargs['json']
        self.assertEqual(payload['type'], 'payment')
        self.assertEqual(payload['title'], 'Title')
        self.assertEqual(payload['project_id'], 'p1')

    @patch('notification.channels._validate_webhook_url', return_value=True)
    @patch('notification.channels.requests.post')
    def test_webhook_http_error(self, mock_post, _):
        mock_post.return_value.raise_for_status.side_effect = requests.HTTPError("500")
        self.assertFalse(WebhookChannel().send("https://hooks.example.com/a", "T", "B", {}))

    def test_factory(self):
        self.assertIsInstance(NotificationChannelFactory.get_channel('EMAIL'), EmailChannel)
        with self.assertRaises(ValueError):
            NotificationChannelFactory.get_channel('pigeon')
        with self.assertRaises(ValueError):
            NotificationChannelFactory.register_channel('bad', object)

        class InAppEcho(NotificationChannel):
            channel_type = 'echo'

            def send(self, recipient, subject, body, metadata):
                return True

        NotificationChannelFactory.register_channel('echo', InAppEcho)
        try:
            self.assertIn('echo', NotificationChannelFactory.list_channels())
            self.assertTrue(NotificationChannelFactory.get_channel('echo').send('r', 's', 'b', {}))
        finally:
            NotificationChannelFactory._channels.pop('echo', None)


class TestMessageBuilder(unittest.TestCase):

    def test_messages(self):
        selected = NotificationMessageBuilder.team_selected("portfolio", "designer", 48)
        self.assertEqual(selected.type, NotificationType.TEAM_SELECTION)
        self.assertIn("48 hours", selected.message)

        partial = NotificationMessageBuilder.partial_acceptance("shop", "designer", "developer")
        self.assertIn("The developer declined", partial.message)

        payment = NotificationMessageBuilder.payment_received("shop", "premium", "order_1")
        self.assertEqual(payment.type, NotificationType.PAYMENT)
        self.assertIn("order_1", payment.message)

    def test_project_link(self):
        self.assertEqual(
            NotificationMessageBuilder.project_link("http://localhost:8080/", "abc"),
            "http://localhost:8080/projects/abc"
        )
        self.assertIsNone(NotificationMessageBuilder.project_link("http://localhost:8080", None))


if __name__ == '__main__':
    unittest.main()
