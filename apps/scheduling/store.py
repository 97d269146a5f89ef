"""
Shift Store Adapter.

The shift service talks to storage only through the ShiftStore interface, so
the engine never depends on a global database handle. DjangoShiftStore is the
ORM-backed implementation used in every environment.

Each method is individually atomic. Composing a read-check-write sequence
safely is the caller's job, done inside `serialized(employee_id)`:

  - opens one transaction (transaction.atomic)
  - takes SELECT FOR UPDATE on the employee's row, so two writers for the same
    employee in different processes queue up behind each other

Transient database failures surface as StorageUnavailable; the caller may
retry them. Nothing else is retried here.
"""

import functools
import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator

from django.db import InterfaceError, OperationalError, transaction

from apps.scheduling.exceptions import NotFound, StorageUnavailable
from apps.scheduling.models import Shift

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (OperationalError, InterfaceError)

# Fields a replace() copies onto the stored row; id and timestamps stay put
MUTABLE_FIELDS = ("employee_id", "job_id", "start_time", "duration", "location", "role")


class ShiftStore(ABC):
    """Storage capabilities the shift engine relies on."""

    @abstractmethod
    def get(self, shift_id, for_update: bool = False) -> Shift:
        """Return the shift with this id (optionally row-locked), or raise NotFound."""

    @abstractmethod
    def list_by_employee(self, employee_id, exclude_id=None) -> list[Shift]:
        """Return every shift of one employee, optionally leaving one id out."""

    @abstractmethod
    def list_shifts(self, employee_id=None, unassigned: bool = False) -> list[Shift]:
        """Return shifts ordered by start time, optionally scoped."""

    @abstractmethod
    def insert(self, shift: Shift) -> Shift:
        """Persist a new shift and return it with its id assigned."""

    @abstractmethod
    def replace(self, shift_id, shift: Shift) -> Shift:
        """Overwrite the stored shift's fields, or raise NotFound."""

    @abstractmethod
    def remove(self, shift_id) -> Shift:
        """Delete the shift and return what was removed, or raise NotFound."""

    @abstractmethod
    def serialized(self, employee_id) -> Iterator[None]:
        """Context manager: one transaction holding the employee's write lock."""


def _storage_call(method):
    """Translate transient database errors into StorageUnavailable."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except TRANSIENT_ERRORS as exc:
            logger.warning("Shift store call %s failed: %s", method.__name__, exc)
            raise StorageUnavailable(f"Shift storage is unavailable: {exc}") from exc

    return wrapper


class DjangoShiftStore(ShiftStore):
    """ShiftStore backed by the Django ORM."""

    @_storage_call
    def get(self, shift_id, for_update: bool = False) -> Shift:
        """
        Return the shift with this id.

        Args:
            shift_id: Primary key of the shift.
            for_update: Lock the row until the surrounding transaction ends.

        Raises:
            NotFound: If no such shift exists.
        """
        qs = Shift.objects.select_for_update() if for_update else Shift.objects.all()
        shift = qs.filter(pk=shift_id).first()
        if shift is None:
            raise NotFound("Shift", shift_id, "Shift not found")
        return shift

    @_storage_call
    def list_by_employee(self, employee_id, exclude_id=None) -> list[Shift]:
        qs = Shift.objects.filter(employee_id=employee_id)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return list(qs.order_by("start_time", "id"))

    @_storage_call
    def list_shifts(self, employee_id=None, unassigned: bool = False) -> list[Shift]:
        qs = Shift.objects.select_related("employee", "job")
        if unassigned:
            qs = qs.filter(employee__isnull=True)
        elif employee_id is not None:
            qs = qs.filter(employee_id=employee_id)
        return list(qs.order_by("start_time", "id"))

    @_storage_call
    def insert(self, shift: Shift) -> Shift:
        self._check_job(shift.job_id)
        shift.pk = None
        shift.save(force_insert=True)
        return shift

    @_storage_call
    def replace(self, shift_id, shift: Shift) -> Shift:
        self._check_job(shift.job_id)
        with transaction.atomic():
            current = Shift.objects.select_for_update().filter(pk=shift_id).first()
            if current is None:
                raise NotFound("Shift", shift_id, "Shift not found")
            for name in MUTABLE_FIELDS:
                setattr(current, name, getattr(shift, name))
            current.save()
        return current

    @_storage_call
    def remove(self, shift_id) -> Shift:
        with transaction.atomic():
            shift = Shift.objects.select_for_update().filter(pk=shift_id).first()
            if shift is None:
                raise NotFound("Shift", shift_id, "Shift not found")
            shift.delete()
        # delete() clears the pk; the caller still needs to know what was removed
        shift.pk = shift_id
        return shift

    @contextmanager
    def serialized(self, employee_id) -> Iterator[None]:
        """
        Run the block in one transaction holding the employee's row lock.

        Unassigned shifts (employee_id None) only get the transaction.

        Raises:
            NotFound: If the employee does not exist.
            StorageUnavailable: If the transaction cannot be opened or committed.
        """
        try:
            with transaction.atomic():
                if employee_id is not None:
                    self._lock_employee(employee_id)
                yield
        except TRANSIENT_ERRORS as exc:
            logger.warning("Serialized block for employee=%s failed: %s", employee_id, exc)
            raise StorageUnavailable(f"Shift storage is unavailable: {exc}") from exc

    @staticmethod
    def _lock_employee(employee_id) -> None:
        from apps.staff.models import Employee

        locked = (
            Employee.objects.select_for_update()
            .filter(pk=employee_id)
            .values_list("pk", flat=True)
            .first()
        )
        if locked is None:
            raise NotFound("Employee", employee_id, "Employee not found")

    @staticmethod
    def _check_job(job_id) -> None:
        from apps.staff.models import Job

        if job_id is not None and not Job.objects.filter(pk=job_id).exists():
            raise NotFound("Job", job_id, "Job not found")
