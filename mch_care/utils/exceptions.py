import logging

from rest_framework.exceptions import APIException, NotFound, PermissionDenied
from rest_framework.views import exception_handler as drf_exception_handler

from mch_care.schedules.exceptions import InvalidTemplateError, TemplateNotFoundError
from mch_care.subjects.registry import SubjectNotFound

logger = logging.getLogger(__name__)


class ScheduleUnavailable(APIException):
    status_code = 503
    default_detail = "This schedule is currently unavailable."
    default_code = "schedule_unavailable"


def _translate(exc):
    if isinstance(exc, TemplateNotFoundError):
        logger.warning("Request for unknown schedule domain: %s", exc.domain)
        return NotFound(f"Unknown schedule: {exc.domain}")
    if isinstance(exc, InvalidTemplateError):
        logger.error("Schedule %s failed validation: %s", exc.domain, "; ".join(exc.problems))
        return ScheduleUnavailable()
    if isinstance(exc, SubjectNotFound):
        logger.info("Subject %s not found for %s", exc.subject_id, exc.domain)
        return NotFound("Subject not found.")
    return exc


def mch_exception_handler(exc, context):
    request = context.get("request")

    if isinstance(exc, PermissionDenied) and request is not None:
        user_id = getattr(getattr(request, "user", None), "id", None)
        logger.warning("User (ID: %s) was denied access to %s", user_id, request.path)

    return drf_exception_handler(_translate(exc), context)
