import json
import logging
import sys
import os
import time
import argparse

from redis import Redis
from rq import Worker
from tenacity import retry, stop_after_attempt, wait_fixed

from core.app_context import AppContext
from core.config_loader import load_config
from core.matching.exceptions import MatchingError
from core.ranking import BrowseFilters, SortKey
from database.database import init_db
from database.uow import matching_uow

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@retry(stop=stop_after_attempt(5), wait=wait_fixed(2))
def initialize_database(url: str) -> None:
    logger.info("Initializing database...")
    try:
        init_db(url)
        logger.info("Tables created or verified.")
    except Exception as e:
        logger.error(f"Error initializing DB: {e}")
        raise


def _print(payload) -> None:
    print(json.dumps(payload, indent=2, default=str))


def run_calculate(ctx: AppContext, job_ids, enqueue: bool = False) -> None:
    """CalculateJobMatches for the given jobs, or every active job when none are given."""
    if not job_ids:
        with matching_uow(ctx.config.database.url) as repo:
            job_ids = [job.job_id for job in repo.jobs.get_active_jobs()]
        logger.info(f"No job ids given; recalculating {len(job_ids)} active jobs")

    for job_id in job_ids:
        step_start = time.time()
        if enqueue:
            outcome = ctx.task_queue.enqueue_job_match_calculation(job_id)
            _print({'job_id': job_id, 'queued': outcome.queued, 'task_id': outcome.task_id,
                    'result': outcome.result})
            continue

        try:
            with matching_uow(ctx.config.database.url) as repo:
                result = ctx.matching_service(repo).calculate_job_matches(job_id)
        except MatchingError as e:
            logger.error(f"Job {job_id}: {e}")
            continue

        _print({
            'job_id': job_id,
            'match_count': result.match_count,
            'skipped_count': result.skipped_count,
            'preview': [
                {'rank': r.rank, 'candidate_id': r.candidate_id, 'overall_score': r.overall_score}
                for r in result.preview
            ],
        })
        logger.info(f"Job {job_id} completed in {time.time() - step_start:.2f}s")


def run_browse(ctx: AppContext, candidate_id: str, args) -> None:
    filters = BrowseFilters(
        location_types=[t.lower() for t in (args.location_types or [])],
        qualified_only=args.qualified_only,
        sort_by=SortKey(args.sort_by),
        min_score=args.min_score
    )
    with matching_uow(ctx.config.database.url) as repo:
        results = ctx.matching_service(repo).browse_jobs_for_candidate(candidate_id, filters)

    _print([
        {
            'job_id': r.job_id,
            'title': r.job.title if r.job else None,
            'overall_score': r.overall_score,
            'qualified': r.score.qualified,
        }
        for r in results
    ])


def run_score(ctx: AppContext, candidate_id: str, job_id: str) -> None:
    with matching_uow(ctx.config.database.url) as repo:
        score = ctx.matching_service(repo).compute_match(candidate_id, job_id)
    _print(score.to_dict())


def start_worker(ctx: AppContext, burst: bool = False) -> None:
    """Start an RQ worker for the matching queue."""
    queue_config = ctx.config.matching.queue
    redis_url = queue_config.redis_url or 'redis://localhost:6379/0'

    logger.info(f"Starting RQ Worker on queue '{queue_config.queue_name}' ({redis_url})")
    redis_conn = Redis.from_url(redis_url)
    redis_conn.ping()

    worker = Worker([queue_config.queue_name], connection=redis_conn)
    worker.work(burst=burst)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Matching Engine Driver")
    parser.add_argument('--config', default='config.yaml', help='Path to config.yaml')
    subparsers = parser.add_subparsers(dest='command', required=True)

    subparsers.add_parser('init-db', help='Create missing tables')

    calc = subparsers.add_parser('calculate', help='Recalculate the ranking for jobs')
    calc.add_argument('job_ids', nargs='*', help='Job ids (default: every active job)')
    calc.add_argument('--enqueue', action='store_true', help='Push onto the matching queue')

    browse = subparsers.add_parser('browse', help='Exploratory job list for a candidate')
    browse.add_argument('candidate_id')
    browse.add_argument('--location-types', nargs='+')
    browse.add_argument('--qualified-only', action='store_true')
    browse.add_argument('--sort-by', choices=[k.value for k in SortKey], default=SortKey.OVERALL_SCORE.value)
    browse.add_argument('--min-score', type=float)

    score = subparsers.add_parser('score', help='Score one candidate against one job')
    score.add_argument('candidate_id')
    score.add_argument('job_id')

    worker = subparsers.add_parser('worker', help='Run the matching queue worker')
    worker.add_argument('--burst', action='store_true', help='Process all and exit')

    args = parser.parse_args(argv)

    config_path = os.path.abspath(args.config)
    config = load_config(config_path)
    ctx = AppContext.build(config, config_path)

    try:
        if args.command == 'init-db':
            initialize_database(config.database.url)
        elif args.command == 'calculate':
            run_calculate(ctx, args.job_ids, enqueue=args.enqueue)
        elif args.command == 'browse':
            run_browse(ctx, args.candidate_id, args)
        elif args.command == 'score':
            run_score(ctx, args.candidate_id, args.job_id)
        elif args.command == 'worker':
            start_worker(ctx, burst=args.burst)
    except MatchingError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
