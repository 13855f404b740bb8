#!/usr/bin/env python3
"""
Out-of-band CalculateJobMatches via Redis Queue.

Employers trigger a recalculation from the web API; with the queue enabled the
batch runs on an RQ worker instead of inside the request. When the queue is
disabled or Redis is unreachable the batch runs synchronously.

Usage:
    from core.matching.tasks import MatchingTaskQueue

    queue = MatchingTaskQueue(config.matching.queue)
    outcome = queue.enqueue_job_match_calculation(job_id)
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from redis import Redis
from rq import Queue, Retry

from core.config_loader import QueueConfig, load_config

logger = logging.getLogger(__name__)

DEFAULT_REDIS_URL = 'redis://localhost:6379/0'


@dataclass
class EnqueueOutcome:
    """Where a CalculateJobMatches request ended up."""
    job_id: str
    queued: bool
    task_id: Optional[str] = None
    result: Optional[Dict[str, Any]] = None


class MatchingTaskQueue:
    def __init__(self, config: Optional[QueueConfig] = None, config_path: Optional[str] = None):
        self.config = config or QueueConfig()
        # Reloaded by the task, which may run in another process
        self.config_path = config_path
        self.redis_conn = None
        self.queue = None
        self.async_mode = False

        if not self.config.enabled:
            logger.info("Matching queue disabled via config. Using sync mode.")
            return

        redis_url = self.config.redis_url or DEFAULT_REDIS_URL
        try:
            self.redis_conn = Redis.from_url(redis_url)
            # Validate connection with ping before using
            self.redis_conn.ping()
            self.queue = Queue(self.config.queue_name, connection=self.redis_conn)
            self.async_mode = True
            logger.info(f"Matching queue connected to Redis ({self.config.queue_name})")
        except Exception as e:
            logger.error(f"Redis connection failed: {e}. Falling back to sync mode.")
            self.redis_conn = None
            self.queue = None

    def enqueue_job_match_calculation(self, job_id: str) -> EnqueueOutcome:
        if self.async_mode:
            job = self.queue.enqueue(
                run_job_match_calculation,
                job_id,
                self.config_path,
                job_timeout=self.config.job_timeout,
                result_ttl=self.config.result_ttl,
                retry=Retry(max=2, interval=[10, 30])
            )
            logger.info(f"Queued match calculation for job {job_id} as task {job.id}")
            return EnqueueOutcome(job_id=job_id, queued=True, task_id=job.id)

        return EnqueueOutcome(job_id=job_id, queued=False, result=run_job_match_calculation(job_id, self.config_path))

    def get_queue_status(self) -> Dict[str, Any]:
        if not self.async_mode:
            return {'status': 'sync_mode', 'queue_length': 0}

        try:
            return {
                'status': 'active',
                'queue_length': len(self.queue),
                'redis_connected': self.redis_conn.ping()
            }
        except Exception as e:
            return {'status': 'error', 'error': str(e)}


# Worker task - must be at module level for RQ
def run_job_match_calculation(job_id: str, config_path: Optional[str] = None) -> Dict[str, Any]:
    """Run CalculateJobMatches for one job in its own unit of work.

    `config_path` is the file the enqueuing process loaded; None means the
    default config.yaml.
    """
    from core.app_context import build_matching_service
    from database.uow import matching_uow

    config = load_config(config_path) if config_path else load_config()
    with matching_uow(config.database.url) as repo:
        service = build_matching_service(repo, config.matching)
        result = service.calculate_job_matches(job_id)

    return {
        'job_id': result.job_id,
        'match_count': result.match_count,
        'skipped_count': result.skipped_count,
        'evaluated_count': result.evaluated_count,
        'duration_seconds': round(result.duration_seconds, 3),
    }
