# Serialize push/pull for a subject across Celery workers with a Redis lock
SUBJECT_SYNC_LOCK = "subject_sync_lock"
