"""
Concurrency tests for the shift service.

Each worker thread gets its own database connection, so these run as
TransactionTestCase: every write is committed and visible across threads.
A barrier releases all workers at once to maximise contention.
"""

import threading

from django.db import connection
from django.test import TransactionTestCase

from apps.audit.models import AuditLog
from apps.scheduling.conflicts import find_overlapping_pairs
from apps.scheduling.exceptions import OverlapConflict
from apps.scheduling.models import Shift
from apps.scheduling.services import ShiftService
from apps.scheduling.tests.factories import make_employee
from core.locks import employee_locks


def run_concurrently(*calls):
    """Run each callable in its own thread; return results or raised exceptions in order."""
    barrier = threading.Barrier(len(calls))
    results = [None] * len(calls)

    def worker(index, call):
        try:
            barrier.wait(timeout=10)
            results[index] = call()
        except Exception as exc:  # collected for the assertions
            results[index] = exc
        finally:
            connection.close()

    threads = [threading.Thread(target=worker, args=(i, call)) for i, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return results


class ConcurrentCreateTest(TransactionTestCase):

    def setUp(self):
        self.employee = make_employee()

    def create(self, start, duration, employee=None):
        data = {
            "employeeId": (employee or self.employee).pk,
            "startTime": start,
            "duration": duration,
        }
        return lambda: ShiftService().create(data)

    def test_two_overlapping_creates_yield_one_success_and_one_conflict(self):
        results = run_concurrently(
            self.create("2024-09-01T08:00:00Z", 8),
            self.create("2024-09-01T14:00:00Z", 4),
        )
        created = [r for r in results if isinstance(r, Shift)]
        conflicts = [r for r in results if isinstance(r, OverlapConflict)]
        self.assertEqual(len(created), 1, results)
        self.assertEqual(len(conflicts), 1, results)
        self.assertEqual(conflicts[0].shift_id, created[0].pk)
        self.assertEqual(Shift.objects.count(), 1)
        self.assertEqual(AuditLog.objects.filter(action="shift.created").count(), 1)

    def test_many_identical_creates_yield_exactly_one_shift(self):
        results = run_concurrently(*[self.create("2024-09-01T08:00:00Z", 8) for _ in range(6)])
        self.assertEqual(sum(isinstance(r, Shift) for r in results), 1, results)
        self.assertEqual(sum(isinstance(r, OverlapConflict) for r in results), 5, results)
        self.assertEqual(Shift.objects.count(), 1)

    def test_abutting_creates_both_succeed(self):
        results = run_concurrently(
            self.create("2024-09-01T08:00:00Z", 8),
            self.create("2024-09-01T16:00:00Z", 4),
        )
        self.assertTrue(all(isinstance(r, Shift) for r in results), results)

    def test_different_employees_do_not_block_each_other(self):
        other = make_employee()
        results = run_concurrently(
            self.create("2024-09-01T08:00:00Z", 8),
            self.create("2024-09-01T08:00:00Z", 8, employee=other),
        )
        self.assertTrue(all(isinstance(r, Shift) for r in results), results)
        self.assertEqual(Shift.objects.count(), 2)

    def test_lock_registry_is_empty_afterwards(self):
        run_concurrently(*[self.create("2024-09-01T08:00:00Z", 1) for _ in range(3)])
        self.assertEqual(len(employee_locks), 0)


class ConcurrentUpdateTest(TransactionTestCase):

    def setUp(self):
        self.employee = make_employee()
        self.morning = ShiftService().create(
            {"employeeId": self.employee.pk, "startTime": "2024-09-01T08:00:00Z", "duration": 4}
        )

    def test_extend_and_create_in_same_gap(self):
        results = run_concurrently(
            lambda: ShiftService().update(self.morning.pk, {"duration": 8}),
            lambda: ShiftService().create(
                {"employeeId": self.employee.pk, "startTime": "2024-09-01T13:00:00Z", "duration": 2}
            ),
        )
        self.assertEqual(sum(isinstance(r, Shift) for r in results), 1, results)
        self.assertEqual(sum(isinstance(r, OverlapConflict) for r in results), 1, results)
        self.assertEqual(find_overlapping_pairs(Shift.objects.all()), [])

    def test_reassignments_into_same_window(self):
        other = make_employee()
        rival = ShiftService().create({"startTime": "2024-09-01T09:00:00Z", "duration": 2})
        results = run_concurrently(
            lambda: ShiftService().update(self.morning.pk, {"employeeId": other.pk}),
            lambda: ShiftService().update(rival.pk, {"employeeId": other.pk}),
        )
        self.assertEqual(sum(isinstance(r, Shift) for r in results), 1, results)
        self.assertEqual(Shift.objects.filter(employee=other).count(), 1)
