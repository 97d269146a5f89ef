"""
Base Django settings for ShiftGuard.

All environment-specific settings (local.py, production.py, test.py) extend this module.
Values that MUST be overridden per environment are marked with # REQUIRED OVERRIDE.
"""

from datetime import timedelta
from pathlib import Path

import environ

# ---------------------------------------------------------------------------
# Path configuration
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# django-environ reads from .env file or OS environment
env = environ.Env(
    DEBUG=(bool, False),
    ALLOWED_HOSTS=(list, []),
)

environ.Env.read_env(BASE_DIR / ".env")

# ---------------------------------------------------------------------------
# Security
# ---------------------------------------------------------------------------
SECRET_KEY = env("SECRET_KEY")  # REQUIRED OVERRIDE
DEBUG = env("DEBUG")
ALLOWED_HOSTS = env("ALLOWED_HOSTS")

# ---------------------------------------------------------------------------
# Application definition
# ---------------------------------------------------------------------------
DJANGO_APPS = [
    "django.contrib.contenttypes",
]

LOCAL_APPS = [
    "apps.staff",
    "apps.scheduling",
    "apps.audit",
    "core",
]

INSTALLED_APPS = DJANGO_APPS + LOCAL_APPS

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "shiftguard.urls"

ASGI_APPLICATION = "shiftguard.asgi.application"

# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------
DATABASES = {
    "default": env.db("DATABASE_URL", default="postgres://shiftguard@localhost:5432/shiftguard"),
}

# ---------------------------------------------------------------------------
# Internationalization & Timezone
# ---------------------------------------------------------------------------
LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"  # Shift windows are stored and compared in UTC
USE_I18N = True
USE_TZ = True  # CRITICAL: all datetimes are timezone-aware

# ---------------------------------------------------------------------------
# Celery
# ---------------------------------------------------------------------------
CELERY_BROKER_URL = env("REDIS_URL", default="redis://localhost:6379/0")
CELERY_RESULT_BACKEND = env("REDIS_URL", default="redis://localhost:6379/0")
CELERY_ACCEPT_CONTENT = ["json"]
CELERY_TASK_SERIALIZER = "json"
CELERY_RESULT_SERIALIZER = "json"
CELERY_TIMEZONE = "UTC"
CELERY_TASK_DEFAULT_QUEUE = "default"

# ---------------------------------------------------------------------------
# ShiftGuard Business Rules (override in settings if needed)
# ---------------------------------------------------------------------------
SHIFTGUARD = {
    # How many times an update re-resolves its target employee when a concurrent
    # writer reassigns the shift between the unlocked read and the lock
    "SERIALIZE_RETRY_ATTEMPTS": 3,
    # Interval of the background sweep that re-verifies the no-overlap invariant
    "OVERLAP_SWEEP_MINUTES": 60,
}

CELERY_BEAT_SCHEDULE = {
    "sweep-overlapping-shifts": {
        "task": "scheduling.sweep_overlaps",
        "schedule": timedelta(minutes=SHIFTGUARD["OVERLAP_SWEEP_MINUTES"]),
    },
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"
