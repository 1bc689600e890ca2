from .base import *  # noqa
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
DEBUG = True
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="Vq3mR8tLw1ZyK5nXc7bJf0pHs2dGa9eUoT4iN6lQxMzBvCjYhWkSgPrDuFeA1tOq",
)
ALLOWED_HOSTS = ["localhost", "0.0.0.0", "127.0.0.1"] + env.list("DJANGO_ALLOWED_HOSTS", default=[])

# Celery
# ------------------------------------------------------------------------------
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

# MCH Care
# ------------------------------------------------------------------------------
LOGGING["loggers"]["mch_care"]["level"] = "DEBUG"  # noqa: F405
