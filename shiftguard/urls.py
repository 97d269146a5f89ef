"""
ShiftGuard root URL configuration.

The shift engine is called in-process by the surrounding request layer, so the
only route served here is the health probe used by the deployment platform.
"""

import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.urls import path
from django.utils import timezone

logger = logging.getLogger(__name__)


def health_check(request):
    """
    Lightweight health check endpoint.

    Returns 200 OK with a JSON body confirming the app and DB are reachable,
    or 503 when the database cannot be reached.
    """
    try:
        connection.ensure_connection()
        db_ok = True
    except DatabaseError as exc:
        logger.warning("Health check could not reach the database: %s", exc)
        db_ok = False

    status = 200 if db_ok else 503
    return JsonResponse(
        {
            "status": "ok" if db_ok else "degraded",
            "db": db_ok,
            "timestamp": timezone.now().isoformat(),
        },
        status=status,
    )


urlpatterns = [
    path("health/", health_check, name="health_check"),
]
