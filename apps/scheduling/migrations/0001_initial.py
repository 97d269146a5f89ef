import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("staff", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Shift",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("start_time", models.DateTimeField(help_text="Shift start time in UTC.")),
                ("duration", models.FloatField(help_text="Shift length in hours; strictly positive.")),
                (
                    "end_time",
                    models.DateTimeField(
                        editable=False,
                        help_text="Derived: start_time + duration. Recomputed on save.",
                    ),
                ),
                ("location", models.CharField(blank=True, max_length=200)),
                ("role", models.CharField(blank=True, max_length=100)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "employee",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="shifts",
                        to="staff.employee",
                    ),
                ),
                (
                    "job",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="shifts",
                        to="staff.job",
                    ),
                ),
            ],
            options={
                "verbose_name": "Shift",
                "verbose_name_plural": "Shifts",
                "ordering": ["start_time", "id"],
                "indexes": [
                    models.Index(fields=["employee", "start_time"], name="shift_employee_start_idx"),
                    models.Index(fields=["start_time", "end_time"], name="shift_window_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("duration__gt", 0)),
                        name="shift_duration_positive",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("end_time__gt", models.F("start_time"))),
                        name="shift_end_after_start",
                    ),
                ],
            },
        ),
    ]
