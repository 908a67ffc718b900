"""
PROGRESSION App - Celery Tasks

- Per-giller evaluation after a delivery completes (queued by delivery code)
- Nightly re-evaluation of every giller from the stored stats snapshots
"""

import logging

from celery import shared_task
from django.db import DatabaseError

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    name='progression.tasks.evaluate_giller_progression',
    max_retries=3,
    default_retry_delay=30,
)
def evaluate_giller_progression(self, user_id: str, stats: dict):
    """
    Run the evaluation pass for one giller (async).

    Args:
        user_id: User UUID string
        stats: UserStats mapping (camelCase or snake_case keys)

    Store failures are retried; malformed stats are logged and dropped since
    retrying would fail the same way.
    """
    from progression.services import ProgressionService

    try:
        result = ProgressionService.process_stats(user_id, stats)
    except ValueError as e:
        logger.error(f"[TASK] Invalid stats for {user_id}: {e}")
        return None
    except DatabaseError as e:
        logger.error(f"[TASK] Progression update failed for {user_id}: {e}")
        raise self.retry(exc=e)

    if result['new_badges']:
        logger.info(f"[TASK] {user_id} earned {len(result['new_badges'])} badge(s): {result['new_badges']}")
    return result


@shared_task(name='progression.tasks.reevaluate_all_gillers')
def reevaluate_all_gillers():
    """
    Re-run the evaluation pass for every giller with a stored stats snapshot.

    Runs nightly so that badges whose thresholds were reached without a
    completion hook firing still get awarded.
    """
    from progression.models import GillerStats
    from progression.services import ProgressionService

    processed = awarded = failed = 0

    for record in GillerStats.objects.all().iterator():
        try:
            result = ProgressionService.process_stats(record.user_id, record.to_user_stats())
        except DatabaseError as e:
            logger.error(f"[TASK] Re-evaluation failed for {record.user_id}: {e}")
            failed += 1
            continue
        processed += 1
        awarded += len(result['new_badges'])

    logger.info(
        f"[TASK] Badge re-evaluation done: {processed} gillers, "
        f"{awarded} new badges, {failed} failures"
    )
    return {'processed': processed, 'awarded': awarded, 'failed': failed}
