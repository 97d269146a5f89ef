"""
Interval model for shift windows.

A shift occupies the half-open window [start_time, end_time), where end_time is
start_time plus the shift's duration in hours. `overlaps` is the single overlap
predicate used everywhere in the engine: a shift ending exactly when another
begins does not overlap it.

All functions here are pure; they never touch the database.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from datetime import timezone as dt_timezone
from decimal import Decimal

from django.utils import timezone
from django.utils.dateparse import parse_datetime

from apps.scheduling.exceptions import InvalidDuration


@dataclass(frozen=True)
class Window:
    """A half-open time interval [start, end)."""

    start: datetime
    end: datetime

    @property
    def hours(self) -> float:
        return (self.end - self.start).total_seconds() / 3600

    def __str__(self) -> str:
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"


def overlaps(window_a: Window, window_b: Window) -> bool:
    """Return True iff the two half-open windows share at least one instant."""
    return window_a.start < window_b.end and window_b.start < window_a.end


def validate_duration(duration) -> float:
    """
    Coerce a duration in hours to a float and check it is strictly positive.

    Numeric strings are accepted (request payloads often carry them);
    booleans, NaN and infinities are not.

    Raises:
        InvalidDuration: If the value is not a finite number greater than zero.
    """
    if isinstance(duration, bool) or duration is None:
        raise InvalidDuration(f"Duration must be a positive number of hours, got {duration!r}.")
    if isinstance(duration, (int, float, Decimal)):
        hours = float(duration)
    elif isinstance(duration, str):
        try:
            hours = float(duration.strip())
        except ValueError:
            raise InvalidDuration(f"Duration must be a positive number of hours, got {duration!r}.")
    else:
        raise InvalidDuration(f"Duration must be a positive number of hours, got {duration!r}.")

    if not math.isfinite(hours) or hours <= 0:
        raise InvalidDuration(f"Duration must be a positive number of hours, got {duration!r}.")
    return hours


def parse_start_time(value) -> datetime:
    """
    Return `value` as a timezone-aware datetime.

    Accepts datetimes and ISO-8601 strings (a trailing "Z" is allowed).
    Naive values are taken to be UTC, matching how shifts are stored.

    Raises:
        InvalidDuration: If the value cannot be read as a timestamp.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = parse_datetime(value.strip())
        except ValueError:
            parsed = None
        if parsed is None:
            raise InvalidDuration(f"startTime {value!r} is not a valid ISO-8601 timestamp.")
    else:
        raise InvalidDuration(f"startTime {value!r} is not a valid timestamp.")

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed, dt_timezone.utc)
    return parsed


def compute_end_time(start_time: datetime, duration) -> datetime:
    """
    Return start_time + duration hours.

    Raises:
        InvalidDuration: If duration is not strictly positive, rounds to an
            empty window at microsecond resolution, or overflows the
            datetime range.
    """
    hours = validate_duration(duration)
    try:
        end_time = start_time + timedelta(hours=hours)
    except OverflowError:
        raise InvalidDuration(f"Duration {duration!r} puts the shift end out of range.")
    if end_time <= start_time:
        raise InvalidDuration(f"Duration {duration!r} is shorter than one microsecond.")
    return end_time


def window_for(start_time, duration) -> Window:
    """Build the window a shift with this start and duration would occupy."""
    start = parse_start_time(start_time)
    return Window(start=start, end=compute_end_time(start, duration))
