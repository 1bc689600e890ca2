import dataclasses
import logging

from config import celery_app
from mch_care.reconciliation.sync import pull_subject, push_subject
from mch_care.utils.lock import subject_sync_lock

logger = logging.getLogger(__name__)


@celery_app.task()
def push_pending_completions(subject_id: str):
    with subject_sync_lock(subject_id) as acquired:
        if not acquired:
            logger.info("Sync already running for subject %s, skipping push", subject_id)
            return None
        return push_subject(subject_id).asdict()


@celery_app.task()
def pull_server_completions(subject_id: str):
    with subject_sync_lock(subject_id) as acquired:
        if not acquired:
            logger.info("Sync already running for subject %s, skipping pull", subject_id)
            return None
        result = pull_subject(subject_id)
        return dataclasses.asdict(result) if result is not None else None
