"""
Tests for the interval model: end-time arithmetic, the half-open overlap
predicate, and duration/start-time validation.

Run with:
    pytest apps/scheduling/tests/test_intervals.py
"""

from datetime import datetime, timedelta
from decimal import Decimal

from django.test import SimpleTestCase

from apps.scheduling.exceptions import InvalidDuration
from apps.scheduling.intervals import (
    Window,
    compute_end_time,
    overlaps,
    parse_start_time,
    validate_duration,
    window_for,
)
from apps.scheduling.tests.factories import UTC, at


class ComputeEndTimeTest(SimpleTestCase):

    def test_end_time_is_start_plus_duration_hours(self):
        for hours in (8, 4, 0.5, 1.25, 7.75):
            with self.subTest(hours=hours):
                end = compute_end_time(at(8), hours)
                self.assertEqual((end - at(8)).total_seconds() / 3600, hours)

    def test_eight_hour_shift_ends_at_four_pm(self):
        self.assertEqual(compute_end_time(at(8), 8), at(16))

    def test_shift_may_cross_midnight(self):
        self.assertEqual(compute_end_time(at(22), 4), at(2, day=2))

    def test_rejects_non_positive_duration(self):
        with self.assertRaises(InvalidDuration):
            compute_end_time(at(8), 0)

    def test_rejects_duration_below_one_microsecond(self):
        with self.assertRaises(InvalidDuration):
            compute_end_time(at(8), 1e-10)

    def test_rejects_duration_out_of_datetime_range(self):
        with self.assertRaises(InvalidDuration):
            compute_end_time(at(8), 1e20)
        with self.assertRaises(InvalidDuration):
            compute_end_time(datetime.max.replace(tzinfo=UTC), 1)


class OverlapsTest(SimpleTestCase):
    """Half-open windows: [start, end)."""

    def setUp(self):
        self.morning = Window(at(8), at(16))

    def test_partial_overlap(self):
        self.assertTrue(overlaps(self.morning, Window(at(14), at(18))))

    def test_contained_window_overlaps(self):
        self.assertTrue(overlaps(self.morning, Window(at(10), at(11))))

    def test_identical_windows_overlap(self):
        self.assertTrue(overlaps(self.morning, Window(at(8), at(16))))

    def test_abutting_windows_do_not_overlap(self):
        self.assertFalse(overlaps(self.morning, Window(at(16), at(20))))
        self.assertFalse(overlaps(Window(at(4), at(8)), self.morning))

    def test_disjoint_windows(self):
        self.assertFalse(overlaps(self.morning, Window(at(18), at(22))))

    def test_symmetric(self):
        other = Window(at(15), at(17))
        self.assertEqual(overlaps(self.morning, other), overlaps(other, self.morning))

    def test_window_hours(self):
        self.assertEqual(self.morning.hours, 8)


class ValidateDurationTest(SimpleTestCase):

    def test_accepts_positive_numbers(self):
        self.assertEqual(validate_duration(8), 8.0)
        self.assertEqual(validate_duration(0.5), 0.5)
        self.assertEqual(validate_duration(Decimal("1.25")), 1.25)

    def test_accepts_numeric_string(self):
        self.assertEqual(validate_duration("8"), 8.0)
        self.assertEqual(validate_duration(" 2.5 "), 2.5)

    def test_rejects_invalid_values(self):
        for value in (0, -1, -0.5, "0", "abc", "", None, True, False, float("nan"), float("inf"), [8]):
            with self.subTest(value=value):
                with self.assertRaises(InvalidDuration):
                    validate_duration(value)


class ParseStartTimeTest(SimpleTestCase):

    def test_parses_iso_string_with_z(self):
        self.assertEqual(parse_start_time("2024-09-01T08:00:00Z"), at(8))

    def test_parses_iso_string_with_offset(self):
        self.assertEqual(parse_start_time("2024-09-01T10:00:00+02:00"), at(8))

    def test_naive_datetime_is_treated_as_utc(self):
        parsed = parse_start_time(datetime(2024, 9, 1, 8, 0))
        self.assertEqual(parsed, at(8))
        self.assertIsNotNone(parsed.tzinfo)

    def test_aware_datetime_is_returned_unchanged(self):
        value = at(8)
        self.assertIs(parse_start_time(value), value)

    def test_rejects_unparseable_values(self):
        for value in ("not a date", "2024-13-01T00:00:00", 12345, None):
            with self.subTest(value=value):
                with self.assertRaises(InvalidDuration):
                    parse_start_time(value)


class WindowForTest(SimpleTestCase):

    def test_builds_window_from_string_start(self):
        window = window_for("2024-09-01T08:00:00Z", "8")
        self.assertEqual(window, Window(at(8), at(16)))

    def test_end_matches_timedelta(self):
        window = window_for(at(9, 30), 1.25)
        self.assertEqual(window.end - window.start, timedelta(hours=1, minutes=15))
        self.assertEqual(window.start.tzinfo, UTC)
