"""
Staff reference models for ShiftGuard.

Employees and jobs are the records a shift points at. Shifts hold only weak
references to them: an employee reference scopes overlap checking, a job
reference is descriptive. Neither model owns shifts, and removing an employee
turns that employee's shifts back into unassigned ones.

The Employee row doubles as the lock handle for that employee's shift set:
the scheduling store takes SELECT FOR UPDATE on it before checking overlaps.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Employee(models.Model):
    """A person who can be scheduled onto shifts."""

    first_name = models.CharField(_("first name"), max_length=150)
    last_name = models.CharField(_("last name"), max_length=150)
    email = models.EmailField(_("email address"), unique=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Employee"
        verbose_name_plural = "Employees"
        ordering = ["last_name", "first_name"]

    def __str__(self) -> str:
        """Return the employee's full name."""
        return self.get_full_name() or self.email

    def get_full_name(self) -> str:
        """Return the first_name plus the last_name, with a space in between."""
        return f"{self.first_name} {self.last_name}".strip()


class Job(models.Model):
    """
    A unit of work shifts are staffed for (a client engagement, a site, a project).

    Examples: "Warehouse inventory", "Front desk cover"
    """

    name = models.CharField(max_length=150)
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Job"
        verbose_name_plural = "Jobs"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name
