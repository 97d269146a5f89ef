"""
Celery application configuration for ShiftGuard.

Tasks are auto-discovered from each Django app's tasks.py module.
The only periodic job is the overlap sweep (see CELERY_BEAT_SCHEDULE in
settings/base.py), which re-verifies the no-overlap invariant store-wide.
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "shiftguard.settings.local")

app = Celery("shiftguard")

# Read configuration from Django settings, namespaced under CELERY_
app.config_from_object("django.conf:settings", namespace="CELERY")

# Auto-discover tasks in all installed apps
app.autodiscover_tasks()
