"""
Test settings for ShiftGuard.

Uses a file-backed SQLite database so that threaded tests share one database
with the test runner (SELECT FOR UPDATE is a no-op there; the process-local
employee locks do the serializing).
"""

import os

os.environ.setdefault("SECRET_KEY", "shiftguard-test-only")

from .base import *  # noqa: F401, F403, E402

DEBUG = False
ALLOWED_HOSTS = ["testserver", "localhost"]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "shiftguard.sqlite3",
        # IMMEDIATE makes concurrent writers queue on the database lock
        # instead of failing on a read-to-write upgrade.
        "OPTIONS": {"timeout": 20, "transaction_mode": "IMMEDIATE"},
        "TEST": {"NAME": BASE_DIR / "test_shiftguard.sqlite3"},
    },
}

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = "memory://"
CELERY_RESULT_BACKEND = "cache+memory://"
