#!/usr/bin/env python3
"""
RQ worker that drains the notification delivery queue.

Usage:
    python -m notification.worker
    python -m notification.worker --burst --verbose
"""

import argparse
import logging
import sys
from typing import List, Optional

from redis import Redis
from redis.exceptions import RedisError
from rq import Queue, Worker

from core.config_loader import get_config
from notification.service import QUEUE_NAME

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = 'redis://localhost:6379/0'


def build_worker(redis_url: str, queue_names: List[str]) -> Worker:
    connection = Redis.from_url(redis_url)
    connection.ping()
    queues = [Queue(name, connection=connection) for name in queue_names]
    return Worker(queues, connection=connection)


def start_worker(burst: bool = False, queue_names: Optional[List[str]] = None, redis_url: Optional[str] = None) -> int:
    """Run until interrupted (or until the queues are empty in burst mode). Returns an exit code."""
    redis_url = redis_url or get_config().notifications.redis_url or DEFAULT_REDIS_URL
    queue_names = queue_names or [QUEUE_NAME]

    try:
        worker = build_worker(redis_url, queue_names)
    except RedisError as e:
        logger.error(f"Cannot reach Redis at {redis_url}: {e}")
        return 1

    logger.info(f"Worker listening on {', '.join(queue_names)} (burst={burst})")
    try:
        worker.work(burst=burst)
    except KeyboardInterrupt:
        logger.info("Worker stopped")
    return 0


def main():
    parser = argparse.ArgumentParser(description='DevinOut notification worker')
    parser.add_argument('--burst', action='store_true', help='Exit once the queues are empty')
    parser.add_argument('--queues', nargs='+', default=[QUEUE_NAME])
    parser.add_argument('--redis-url', default=None, help='Overrides notifications.redis_url')
    parser.add_argument('--verbose', action='store_true')
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    sys.exit(start_worker(burst=args.burst, queue_names=args.queues, redis_url=args.redis_url))


if __name__ == '__main__':
    main()
