"""
Conflict Detector for ShiftGuard.

Decides whether a candidate window may be given to an employee: it reads the
employee's shifts from the store and reports the first one whose window
overlaps the candidate under the canonical half-open test
(intervals.overlaps). It never writes.

The answer is only as fresh as the snapshot it read. Callers that act on it
(create/update in services.py) must run it inside the store's serialized
block for the same employee, so no other writer can slip in between the
check and the write.

Usage:
    from apps.scheduling.conflicts import check_conflict

    conflict = check_conflict(store, employee_id, window, exclude_id=shift.pk)
    if conflict:
        raise OverlapConflict(conflict)
"""

import logging
from dataclasses import dataclass
from itertools import combinations
from typing import TYPE_CHECKING, Iterable, Optional

from apps.scheduling.intervals import Window, overlaps

if TYPE_CHECKING:
    from apps.scheduling.models import Shift
    from apps.scheduling.store import ShiftStore

logger = logging.getLogger(__name__)


@dataclass
class Conflict:
    """
    A collision between a candidate window and an existing shift.

    Attributes:
        shift: The existing shift the candidate overlaps.
        employee_id: The employee both belong to.
        window: The candidate window that was checked.
    """

    shift: "Shift"
    employee_id: int
    window: Window

    @property
    def shift_id(self) -> int:
        return self.shift.pk

    @property
    def reason(self) -> str:
        """Human-readable explanation naming the colliding shift."""
        existing = self.shift.window
        return (
            f"Shift overlaps with an existing shift for this employee: shift {self.shift_id} "
            f"runs {existing.start.strftime('%Y-%m-%d %H:%M')} to "
            f"{existing.end.strftime('%Y-%m-%d %H:%M')} UTC."
        )


def check_conflict(
    store: "ShiftStore",
    employee_id: Optional[int],
    window: Window,
    exclude_id: Optional[int] = None,
) -> Optional[Conflict]:
    """
    Return the first existing shift of `employee_id` that overlaps `window`.

    Args:
        store: Where to read the employee's shifts from.
        employee_id: The employee to check; None (unassigned) never conflicts.
        window: The candidate half-open window.
        exclude_id: A shift id to leave out (the shift being updated).

    Returns:
        A Conflict for the earliest overlapping shift, or None.
    """
    if employee_id is None:
        return None

    for existing in store.list_by_employee(employee_id, exclude_id=exclude_id):
        if overlaps(existing.window, window):
            logger.info(
                "Conflict for employee=%s: candidate %s overlaps shift=%s %s",
                employee_id,
                window,
                existing.pk,
                existing.window,
            )
            return Conflict(shift=existing, employee_id=employee_id, window=window)

    return None


def find_overlapping_pairs(shifts: Iterable["Shift"]) -> list[tuple["Shift", "Shift"]]:
    """
    Return every pair of same-employee shifts whose windows overlap.

    Unassigned shifts are skipped. Used by the integrity sweep; after writes
    that went through the shift service the result is always empty.
    """
    by_employee: dict[int, list["Shift"]] = {}
    for shift in shifts:
        if shift.employee_id is not None:
            by_employee.setdefault(shift.employee_id, []).append(shift)

    pairs = []
    for employee_shifts in by_employee.values():
        for first, second in combinations(employee_shifts, 2):
            if overlaps(first.window, second.window):
                pairs.append((first, second))
    return pairs
