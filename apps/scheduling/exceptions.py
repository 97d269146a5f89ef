"""
Typed failures raised by the shift engine.

Each failure kind maps to exactly one externally visible outcome: the
surrounding request layer reads `status_code` and `as_dict()` and never has to
inspect messages. Validation and conflict failures are always raised before
anything is written.
"""

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from apps.scheduling.conflicts import Conflict


class SchedulingError(Exception):
    """Base class for every failure the shift engine reports to its caller."""

    code = "scheduling_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def as_dict(self) -> dict[str, Any]:
        """Return a plain payload the caller can serialize as-is."""
        return {"error": self.message, "code": self.code}


class InvalidDuration(SchedulingError):
    """Duration is zero, negative or not a number, or startTime is unparseable."""

    code = "invalid_duration"
    status_code = 400


class OverlapConflict(SchedulingError):
    """The candidate window overlaps an existing shift for the same employee."""

    code = "overlap_conflict"
    status_code = 409

    def __init__(self, conflict: "Conflict"):
        super().__init__(conflict.reason)
        self.conflict = conflict

    @property
    def shift_id(self) -> int:
        """Id of the existing shift the candidate collides with."""
        return self.conflict.shift_id

    def as_dict(self) -> dict[str, Any]:
        payload = super().as_dict()
        payload["conflictingShiftId"] = self.shift_id
        return payload


class NotFound(SchedulingError):
    """A referenced shift (or employee/job) does not exist."""

    code = "not_found"
    status_code = 404

    def __init__(self, model: str, pk: Any, message: Optional[str] = None):
        super().__init__(message or f"{model} not found")
        self.model = model
        self.pk = pk


class StorageUnavailable(SchedulingError):
    """The underlying store failed transiently; the caller may retry with backoff."""

    code = "storage_unavailable"
    status_code = 503
