"""
Scheduling models for ShiftGuard.

Defines the Shift: a block of work with a start time and a duration in hours,
optionally assigned to one employee.

All datetimes are stored as UTC. end_time is derived (start_time + duration)
and recomputed on every save, so it can never drift from the two fields it is
built from. The no-overlap rule between shifts of the same employee is
enforced by the shift service, not by the model: writes must go through
apps.scheduling.services.ShiftService.
"""

from django.db import models
from django.db.models import F, Q

from apps.scheduling.intervals import Window, compute_end_time, parse_start_time


class Shift(models.Model):
    """
    A scheduled work block.

    A shift without an employee is unfilled ("Not Filled"); unfilled shifts may
    coincide freely. The employee and job references are weak: deleting the
    employee leaves the shift in place, unassigned.
    """

    employee = models.ForeignKey(
        "staff.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="shifts",
    )
    job = models.ForeignKey(
        "staff.Job",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="shifts",
    )

    # Times stored as UTC, always.
    start_time = models.DateTimeField(help_text="Shift start time in UTC.")
    duration = models.FloatField(help_text="Shift length in hours; strictly positive.")
    end_time = models.DateTimeField(
        editable=False,
        help_text="Derived: start_time + duration. Recomputed on save.",
    )

    location = models.CharField(max_length=200, blank=True)
    role = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Shift"
        verbose_name_plural = "Shifts"
        ordering = ["start_time", "id"]
        indexes = [
            models.Index(fields=["employee", "start_time"], name="shift_employee_start_idx"),
            models.Index(fields=["start_time", "end_time"], name="shift_window_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(duration__gt=0), name="shift_duration_positive"),
            models.CheckConstraint(condition=Q(end_time__gt=F("start_time")), name="shift_end_after_start"),
        ]

    def __str__(self) -> str:
        """Return a human-readable shift description."""
        who = str(self.employee) if self.employee_id else "Not Filled"
        return f"{who} | {self.start_time.strftime('%Y-%m-%d %H:%M')} UTC | {self.duration:g}h"

    def save(self, *args, **kwargs):
        """Recompute end_time from start_time and duration before writing."""
        self.start_time = parse_start_time(self.start_time)
        self.end_time = compute_end_time(self.start_time, self.duration)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and ({"start_time", "duration"} & set(update_fields)):
            kwargs["update_fields"] = set(update_fields) | {"end_time"}
        super().save(*args, **kwargs)

    @property
    def window(self) -> Window:
        """The half-open interval this shift occupies."""
        return Window(start=self.start_time, end=self.end_time)

    @property
    def is_filled(self) -> bool:
        """Return True if an employee is assigned to this shift."""
        return self.employee_id is not None

    @property
    def status_display(self) -> str:
        return "Filled" if self.is_filled else "Not Filled"

    def as_dict(self) -> dict:
        """
        Serialize the shift with the external camelCase keys.

        References are returned as plain ids; joining employee or job records
        for display is left to the caller.
        """
        return {
            "id": self.pk,
            "employeeId": self.employee_id,
            "startTime": self.start_time.isoformat(),
            "duration": self.duration,
            "endTime": self.end_time.isoformat(),
            "jobId": self.job_id,
            "location": self.location,
            "role": self.role,
        }
