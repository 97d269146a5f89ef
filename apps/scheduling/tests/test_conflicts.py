"""
Tests for the conflict detector.

Scenarios follow one employee with an 08:00-16:00 shift on 2024-09-01.
"""

from django.test import TestCase

from apps.scheduling.conflicts import check_conflict, find_overlapping_pairs
from apps.scheduling.intervals import Window
from apps.scheduling.models import Shift
from apps.scheduling.store import DjangoShiftStore
from apps.scheduling.tests.factories import at, make_employee


class CheckConflictTest(TestCase):

    def setUp(self):
        self.store = DjangoShiftStore()
        self.employee = make_employee()
        self.morning = Shift.objects.create(employee=self.employee, start_time=at(8), duration=8)

    def test_overlap_names_existing_shift(self):
        conflict = check_conflict(self.store, self.employee.pk, Window(at(14), at(18)))
        self.assertIsNotNone(conflict)
        self.assertEqual(conflict.shift_id, self.morning.pk)
        self.assertEqual(conflict.employee_id, self.employee.pk)
        self.assertIn(f"shift {self.morning.pk}", conflict.reason)
        self.assertIn("2024-09-01 08:00 to 2024-09-01 16:00 UTC", conflict.reason)

    def test_abutting_window_is_not_a_conflict(self):
        self.assertIsNone(check_conflict(self.store, self.employee.pk, Window(at(16), at(20))))
        self.assertIsNone(check_conflict(self.store, self.employee.pk, Window(at(4), at(8))))

    def test_unassigned_candidate_never_conflicts(self):
        self.assertIsNone(check_conflict(self.store, None, Window(at(8), at(16))))

    def test_other_employee_does_not_conflict(self):
        other = make_employee()
        self.assertIsNone(check_conflict(self.store, other.pk, Window(at(8), at(16))))

    def test_excluded_shift_is_ignored(self):
        conflict = check_conflict(
            self.store, self.employee.pk, Window(at(9), at(17)), exclude_id=self.morning.pk
        )
        self.assertIsNone(conflict)

    def test_reports_earliest_overlapping_shift(self):
        evening = Shift.objects.create(employee=self.employee, start_time=at(18), duration=4)
        conflict = check_conflict(self.store, self.employee.pk, Window(at(6), at(23)))
        self.assertEqual(conflict.shift_id, self.morning.pk)

        conflict = check_conflict(
            self.store, self.employee.pk, Window(at(6), at(23)), exclude_id=self.morning.pk
        )
        self.assertEqual(conflict.shift_id, evening.pk)


class FindOverlappingPairsTest(TestCase):

    def setUp(self):
        self.employee = make_employee()

    def test_no_pairs_for_disjoint_shifts(self):
        shifts = [
            Shift.objects.create(employee=self.employee, start_time=at(8), duration=8),
            Shift.objects.create(employee=self.employee, start_time=at(16), duration=4),
        ]
        self.assertEqual(find_overlapping_pairs(shifts), [])

    def test_detects_same_employee_overlap(self):
        first = Shift.objects.create(employee=self.employee, start_time=at(8), duration=8)
        second = Shift.objects.create(employee=self.employee, start_time=at(14), duration=4)
        self.assertEqual(find_overlapping_pairs([first, second]), [(first, second)])

    def test_ignores_unassigned_and_cross_employee_overlaps(self):
        other = make_employee()
        shifts = [
            Shift.objects.create(employee=self.employee, start_time=at(8), duration=8),
            Shift.objects.create(employee=other, start_time=at(8), duration=8),
            Shift.objects.create(start_time=at(8), duration=8),
            Shift.objects.create(start_time=at(8), duration=8),
        ]
        self.assertEqual(find_overlapping_pairs(shifts), [])
