"""
With these settings, tests run faster.
"""

from .base import *  # noqa
from .base import env

# GENERAL
# ------------------------------------------------------------------------------
SECRET_KEY = env(
    "DJANGO_SECRET_KEY",
    default="x9Jc2lQeVb0kZmT4uWq7sR1yN8pD3aHfG6oLiE5tKvXzB2nCdMwYhUgAjSrFlPe",
)
TEST_RUNNER = "django.test.runner.DiscoverRunner"

DATABASES = {"default": env.db("DATABASE_URL", default="sqlite:///:memory:")}

# PASSWORDS
# ------------------------------------------------------------------------------
PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

# CACHES
# ------------------------------------------------------------------------------
CACHES = {"default": {"BACKEND": "django.core.cache.backends.locmem.LocMemCache"}}

# Celery
# ------------------------------------------------------------------------------
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

# MCH Care
# ------------------------------------------------------------------------------
MCH_BACKEND_URL = "https://records.test/api"
MCH_BACKEND_TOKEN = "test-token"
