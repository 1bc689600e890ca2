import logging
from contextlib import contextmanager

import sentry_sdk
from django.core.cache import cache
from redis.exceptions import LockError
from waffle import switch_is_active

from mch_care.flags.switch_names import SUBJECT_SYNC_LOCK

logger = logging.getLogger(__name__)


def subject_sync_lock_key(subject_id: str) -> str:
    return f"mch_care:ledger_sync:{subject_id}"


@contextmanager
def subject_sync_lock(subject_id: str, *, timeout: int = 60, blocking_timeout: float = 0):
    """
    Hold the reconciliation lock for one subject so that pushes and pulls for
    it never overlap across workers. Yields whether the lock was acquired.

    Only enforced while the ``subject_sync_lock`` switch is active.
    """
    if not switch_is_active(SUBJECT_SYNC_LOCK):
        yield True
        return

    lock = cache.lock(subject_sync_lock_key(subject_id), timeout=timeout)
    try:
        acquired = lock.acquire(blocking=blocking_timeout > 0, blocking_timeout=blocking_timeout or None)
    except LockError:
        sentry_sdk.capture_message(message="Error in acquiring subject sync lock", level="error")
        acquired = False

    try:
        yield acquired
    finally:
        if acquired:
            try:
                lock.release()
            except LockError:
                # expired before release; another worker may already hold it
                logger.warning("Sync lock for subject %s expired before release", subject_id)
                sentry_sdk.capture_message(message="Error while releasing subject sync lock", level="error")
