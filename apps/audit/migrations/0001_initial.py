import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("contenttypes", "0002_remove_content_type_name"),
    ]

    operations = [
        migrations.CreateModel(
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("actor", models.CharField(blank=True, max_length=150)),
                (
                    "action",
                    models.CharField(
                        db_index=True,
                        help_text="Dot-separated action identifier, e.g., 'shift.created'",
                        max_length=100,
                    ),
                ),
                ("object_id", models.PositiveBigIntegerField(null=True)),
                (
                    "before",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Serialized state of the object before the change. Empty for creations.",
                    ),
                ),
                (
                    "after",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Serialized state of the object after the change. Empty for deletions.",
                    ),
                ),
                ("note", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                (
                    "content_type",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        to="contenttypes.contenttype",
                    ),
                ),
            ],
            options={
                "verbose_name": "Audit Log Entry",
                "verbose_name_plural": "Audit Log",
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["content_type", "object_id"], name="audit_content_object_idx"),
                    models.Index(fields=["action", "-created_at"], name="audit_action_created_idx"),
                ],
            },
        ),
    ]
