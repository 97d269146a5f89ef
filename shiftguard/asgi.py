"""
ASGI configuration for ShiftGuard.

Serves the health probe; the shift engine itself is used in-process by the
surrounding request layer.
"""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "shiftguard.settings.local")

application = get_asgi_application()
