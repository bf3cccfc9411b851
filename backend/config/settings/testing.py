"""
Testing settings.
"""
import os

# Test runs must not depend on a populated environment
os.environ.setdefault("SECRET_KEY", "django-insecure-testing-key")
os.environ.setdefault("ALLOWED_HOSTS", "testserver,localhost")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
# Read by base before the SQLite override below replaces DATABASES
os.environ.setdefault("POSTGRES_DB", "api_management_test")
os.environ.setdefault("POSTGRES_USER", "postgres")
os.environ.setdefault("POSTGRES_PASSWORD", "postgres")
os.environ.setdefault("POSTGRES_HOST", "localhost")
os.environ.setdefault("POSTGRES_PORT", "5432")

from .base import *  # noqa: E402,F401,F403

DEBUG = False

# Use in-memory database for testing
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

# Disable password validation for testing
AUTH_PASSWORD_VALIDATORS = []

# Faster password hashing for testing
PASSWORD_HASHERS = [
    "django.contrib.auth.hashers.MD5PasswordHasher",
]

# Disable caching for testing
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.dummy.DummyCache",
    }
}
SESSION_ENGINE = "django.contrib.sessions.backends.db"

# Run Celery tasks in-process
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"

DEFAULT_TENANT_DOMAIN = "carbon.super"
MONETIZATION_USAGE_PUBLISH_FROM_TIME_DAYS = None
MONETIZATION_USAGE_PUBLISHER = "backend.apps.monetization.publishers.LoggingUsagePublisher"

# Keep test output and the filesystem quiet
LOGGING["handlers"].pop("file", None)
for _logger in LOGGING["loggers"].values():
    _logger["handlers"] = [h for h in _logger["handlers"] if h != "file"] or ["console"]
LOGGING["handlers"]["console"]["level"] = "WARNING"

# Disable CORS for testing
CORS_ALLOW_ALL_ORIGINS = True

# Test runner
TEST_RUNNER = "django.test.runner.DiscoverRunner"
