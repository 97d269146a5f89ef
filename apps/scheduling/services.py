"""
Shift Service for ShiftGuard.

The only path through which shifts are created, changed or removed.

Responsibilities:
  - Validate payloads (duration, start time, references) before any write
  - Run the conflict detector for the shift's effective employee
  - Serialize read-check-write sequences per employee:
      1. process-local lock keyed by employee id (core.locks)
      2. one database transaction holding SELECT FOR UPDATE on the employee row
  - Write one audit entry per accepted mutation, in the same transaction
  - Raise typed SchedulingError subclasses; never return partial results

Per shift: Proposed → Validated → Persisted, or Proposed → Rejected (nothing
written).

Usage:
    service = ShiftService()
    shift = service.create({"employeeId": 7, "startTime": "2024-09-01T08:00:00Z", "duration": 8})
    service.update(shift.pk, {"duration": 4})
    service.delete(shift.pk)
"""

import logging
from typing import Optional, Union

from django.conf import settings

from apps.audit.models import AuditLog
from apps.scheduling.conflicts import Conflict, check_conflict
from apps.scheduling.exceptions import NotFound, OverlapConflict, StorageUnavailable
from apps.scheduling.intervals import compute_end_time, parse_start_time, validate_duration, window_for
from apps.scheduling.models import Shift
from apps.scheduling.payloads import ShiftPatch, ShiftPayload
from apps.scheduling.store import DjangoShiftStore, ShiftStore
from core.locks import KeyedLock, employee_locks

logger = logging.getLogger(__name__)


def _reference_id(model: str, value) -> Optional[int]:
    """
    Normalize a record reference to an integer id.

    Raises:
        NotFound: If the value cannot possibly name an existing record.
    """
    if value is None:
        return None
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().isascii() and value.strip().isdecimal():
        return int(value.strip())
    raise NotFound(model, value, f"{model} not found")


def _text(value) -> str:
    return "" if value is None else str(value)


class ShiftService:
    """
    Entry point for every shift operation.

    Args:
        store: Storage adapter; defaults to the ORM-backed DjangoShiftStore.
        locks: Per-employee lock registry; defaults to the process-wide one so
               separate service instances still serialize against each other.
    """

    def __init__(self, store: Optional[ShiftStore] = None, locks: Optional[KeyedLock] = None):
        self.store = store if store is not None else DjangoShiftStore()
        self.locks = locks if locks is not None else employee_locks

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, payload: Union[ShiftPayload, dict], actor: str = "") -> Shift:
        """
        Create a shift after checking it against the employee's other shifts.

        Args:
            payload: ShiftPayload, or a request dict with camelCase keys.
            actor: Caller identity recorded in the audit log.

        Returns:
            The persisted Shift.

        Raises:
            InvalidDuration: Non-positive duration or unparseable start time.
            NotFound: The referenced employee or job does not exist.
            OverlapConflict: The window overlaps one of the employee's shifts.
            StorageUnavailable: The store failed transiently.
        """
        if isinstance(payload, dict):
            payload = ShiftPayload.from_dict(payload)

        window = window_for(payload.start_time, payload.duration)
        employee_id = _reference_id("Employee", payload.employee_id)
        candidate = Shift(
            employee_id=employee_id,
            job_id=_reference_id("Job", payload.job_id),
            start_time=window.start,
            duration=validate_duration(payload.duration),
            location=_text(payload.location),
            role=_text(payload.role),
        )

        with self.locks.hold(employee_id), self.store.serialized(employee_id):
            conflict = check_conflict(self.store, employee_id, window)
            if conflict:
                raise OverlapConflict(conflict)
            shift = self.store.insert(candidate)
            AuditLog.record("shift.created", shift, actor=actor, after=shift.as_dict())

        logger.info("Created shift=%d employee=%s window=%s", shift.pk, employee_id, shift.window)
        return shift

    def update(self, shift_id, patch: Union[ShiftPatch, dict], actor: str = "") -> Shift:
        """
        Apply a partial update and re-validate the result.

        Fields absent from the patch keep their stored values. The merged shift
        is checked against every other shift of its effective employee (the
        patched one, or the current one if the patch leaves it alone).

        The effective employee is first resolved from an unlocked read; once
        its lock is held the shift is re-read, and if a concurrent writer
        reassigned it in between the resolution is retried.

        Raises:
            InvalidDuration, NotFound, OverlapConflict, StorageUnavailable
        """
        if isinstance(patch, dict):
            patch = ShiftPatch.from_dict(patch)
        shift_id = _reference_id("Shift", shift_id)
        changes = self._validated_changes(patch)

        attempts = settings.SHIFTGUARD["SERIALIZE_RETRY_ATTEMPTS"]
        for attempt in range(1, attempts + 1):
            employee_id = changes.get("employee_id", self.store.get(shift_id).employee_id)

            with self.locks.hold(employee_id), self.store.serialized(employee_id):
                existing = self.store.get(shift_id, for_update=True)
                if changes.get("employee_id", existing.employee_id) != employee_id:
                    logger.info(
                        "Shift=%d was reassigned while waiting for employee=%s (attempt %d/%d)",
                        shift_id, employee_id, attempt, attempts,
                    )
                    continue

                before = existing.as_dict()
                candidate = self._merge(existing, changes)
                conflict = check_conflict(self.store, employee_id, candidate.window, exclude_id=shift_id)
                if conflict:
                    raise OverlapConflict(conflict)
                shift = self.store.replace(shift_id, candidate)
                AuditLog.record("shift.updated", shift, actor=actor, before=before, after=shift.as_dict())

            logger.info("Updated shift=%d employee=%s window=%s", shift.pk, employee_id, shift.window)
            return shift

        raise StorageUnavailable(
            f"Shift {shift_id} kept changing employee during the update; try again."
        )

    def delete(self, shift_id, actor: str = "") -> Shift:
        """
        Remove a shift. Removal can only relax the no-overlap rule, so no
        conflict check is needed.

        Returns:
            The removed shift (its pk still set, for the caller's response).

        Raises:
            NotFound: If the shift does not exist (including a repeated delete).
        """
        shift_id = _reference_id("Shift", shift_id)
        with self.store.serialized(None):
            shift = self.store.remove(shift_id)
            AuditLog.record("shift.deleted", shift, actor=actor, before=shift.as_dict())

        logger.info("Deleted shift=%d employee=%s", shift_id, shift.employee_id)
        return shift

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, shift_id) -> Shift:
        """Return one shift, or raise NotFound."""
        return self.store.get(_reference_id("Shift", shift_id))

    def check(self, payload: Union[ShiftPayload, dict], exclude_id=None) -> Optional[Conflict]:
        """
        What-if check: would this payload conflict if submitted now?

        Writes nothing and takes no locks, so the answer can be stale by the
        time a create/update runs; those re-check under the lock.
        """
        if isinstance(payload, dict):
            payload = ShiftPayload.from_dict(payload)
        window = window_for(payload.start_time, payload.duration)
        return check_conflict(
            self.store,
            _reference_id("Employee", payload.employee_id),
            window,
            exclude_id=_reference_id("Shift", exclude_id),
        )

    def list(self, employee_id=None, unassigned: bool = False):
        """
        Return shifts ordered by start time.

        Args:
            employee_id: Only this employee's shifts.
            unassigned: Only shifts without an employee (takes precedence).

        Returns:
            List of Shift instances with employee and job pre-joined for display.
        """
        return self.store.list_shifts(
            employee_id=_reference_id("Employee", employee_id),
            unassigned=unassigned,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validated_changes(patch: ShiftPatch) -> dict:
        """Validate each field the patch sets, independently of the others."""
        changes = patch.changes()
        if "start_time" in changes:
            changes["start_time"] = parse_start_time(changes["start_time"])
        if "duration" in changes:
            changes["duration"] = validate_duration(changes["duration"])
        if "employee_id" in changes:
            changes["employee_id"] = _reference_id("Employee", changes["employee_id"])
        if "job_id" in changes:
            changes["job_id"] = _reference_id("Job", changes["job_id"])
        for text_field in ("location", "role"):
            if text_field in changes:
                changes[text_field] = _text(changes[text_field])
        return changes

    @staticmethod
    def _merge(existing: Shift, changes: dict) -> Shift:
        """Build the post-update shift; end_time is derived from the merged values."""
        merged = Shift(
            pk=existing.pk,
            employee_id=changes.get("employee_id", existing.employee_id),
            job_id=changes.get("job_id", existing.job_id),
            start_time=changes.get("start_time", existing.start_time),
            duration=changes.get("duration", existing.duration),
            location=changes.get("location", existing.location),
            role=changes.get("role", existing.role),
        )
        merged.end_time = compute_end_time(merged.start_time, merged.duration)
        return merged
