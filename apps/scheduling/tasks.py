"""
Celery tasks for ShiftGuard scheduling.

Tasks:
  sweep_overlaps: runs every OVERLAP_SWEEP_MINUTES; re-verifies that no two
                 shifts of the same employee overlap anywhere in the store.

Registered in CELERY_BEAT_SCHEDULE (see settings/base.py).

Design notes:
  - Read-only and idempotent: safe to run any number of times.
  - Writes through ShiftService can never produce a violation; the sweep exists
    to catch rows written around it (manual SQL, data imports, restores).
  - Violations are logged at ERROR with both shift ids; nothing is repaired
    automatically because either shift could be the one that is wrong.
"""

import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(name="scheduling.sweep_overlaps")
def sweep_overlaps() -> dict:
    """
    Scan every assigned shift for same-employee overlaps.

    Returns:
        Dict with the number of employees checked and violations found.
    """
    from apps.scheduling.conflicts import find_overlapping_pairs
    from apps.scheduling.models import Shift

    shifts = list(
        Shift.objects.filter(employee__isnull=False).order_by("employee_id", "start_time", "id")
    )
    pairs = find_overlapping_pairs(shifts)

    for first, second in pairs:
        logger.error(
            "Overlapping shifts for employee=%d: shift=%d %s and shift=%d %s",
            first.employee_id,
            first.pk,
            first.window,
            second.pk,
            second.window,
        )

    employees_checked = len({s.employee_id for s in shifts})
    logger.info(
        "Overlap sweep checked %d employee(s), found %d violation(s).",
        employees_checked,
        len(pairs),
    )
    return {"employees_checked": employees_checked, "violations": len(pairs)}
