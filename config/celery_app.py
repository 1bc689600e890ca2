import os

import sentry_sdk
from celery import Celery
from celery.signals import task_failure, task_retry

# set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.local")

app = Celery("mch_care")

# Configuration keys are read from Django settings with a CELERY_ prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Picks up mch_care.reconciliation.tasks
app.autodiscover_tasks()


def _tag_subject(scope, args):
    # sync tasks take the subject id as their only positional argument
    if args:
        scope.set_tag("subject_id", str(args[0]))


@task_retry.connect
def sentry_log_retry(request=None, reason=None, einfo=None, **kwargs):
    with sentry_sdk.push_scope() as scope:
        if request:
            scope.set_tag("celery_task", request.task)
            scope.set_tag("retries", request.retries)
            _tag_subject(scope, request.args)
        if reason:
            scope.set_extra("reason", str(reason))
        sentry_sdk.capture_message("Celery task retrying", level="warning")


@task_failure.connect
def sentry_log_failure(sender=None, task_id=None, exception=None, args=None, **kwargs):
    with sentry_sdk.push_scope() as scope:
        scope.set_tag("celery_task", getattr(sender, "name", None))
        scope.set_tag("task_id", task_id)
        _tag_subject(scope, args)
        sentry_sdk.capture_exception(exception)
