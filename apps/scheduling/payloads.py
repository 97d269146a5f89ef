"""
Request payloads accepted by the shift engine.

The surrounding request layer hands over plain dictionaries using the external
camelCase keys (employeeId, startTime, duration, jobId, location, role).
These dataclasses name every accepted field explicitly:

  ShiftPayload  → a full shift proposal (create, what-if checks)
  ShiftPatch    → a partial update; fields left at UNSET keep their current value

UNSET is distinct from None so a patch can clear a reference
(e.g. {"employeeId": None} unassigns the shift). Keys the engine does not
recognise, and derived keys such as endTime, are ignored. Field values are
validated by the service when the payload is applied.
"""

from dataclasses import dataclass, fields
from typing import Any, Optional

# External key → attribute name
FIELD_ALIASES = {
    "employeeId": "employee_id",
    "employee_id": "employee_id",
    "startTime": "start_time",
    "start_time": "start_time",
    "duration": "duration",
    "jobId": "job_id",
    "job_id": "job_id",
    "location": "location",
    "role": "role",
}


class _Unset:
    """Marker for a patch field the caller did not send."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


def _normalize(data: dict) -> dict:
    normalized = {}
    for key, value in data.items():
        name = FIELD_ALIASES.get(key)
        if name is not None:
            normalized[name] = value
    return normalized


@dataclass
class ShiftPayload:
    """A complete shift proposal."""

    start_time: Any
    duration: Any
    employee_id: Optional[int] = None
    job_id: Optional[int] = None
    location: str = ""
    role: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "ShiftPayload":
        """
        Build a payload from a request dictionary.

        Missing startTime/duration are passed through as None and rejected
        by the interval model as InvalidDuration.
        """
        values = _normalize(data)
        values.setdefault("start_time", None)
        values.setdefault("duration", None)
        for text_field in ("location", "role"):
            if values.get(text_field) is None:
                values[text_field] = ""
        return cls(**values)


@dataclass
class ShiftPatch:
    """A partial update over an existing shift."""

    employee_id: Any = UNSET
    start_time: Any = UNSET
    duration: Any = UNSET
    job_id: Any = UNSET
    location: Any = UNSET
    role: Any = UNSET

    @classmethod
    def from_dict(cls, data: dict) -> "ShiftPatch":
        return cls(**_normalize(data))

    def changes(self) -> dict[str, Any]:
        """Return only the fields the caller actually sent."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    @property
    def touches_window(self) -> bool:
        """True if the patch changes start_time or duration."""
        return self.start_time is not UNSET or self.duration is not UNSET
