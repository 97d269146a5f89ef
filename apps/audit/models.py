"""
Audit trail models for ShiftGuard.

Every accepted shift mutation is logged immutably. Logs record who did what,
when, and what the before/after state was. Logs are never updated or deleted.

The log is written atomically with the operation (same DB transaction)
so there is no window where a change exists without an audit record, and a
rejected operation leaves no record at all.
"""

from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models


class AuditLog(models.Model):
    """
    Immutable record of every schedule change made through the shift engine.

    Uses Django's ContentType framework for generic relations so any model
    can be audited. The object id survives deletion of the audited row.

    Action strings follow the pattern: "model.event"
    Examples:
      - "shift.created"
      - "shift.updated"
      - "shift.deleted"
    """

    # Identity of the caller, as passed in by the surrounding request layer
    actor = models.CharField(max_length=150, blank=True)

    action = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Dot-separated action identifier, e.g., 'shift.created'",
    )

    content_type = models.ForeignKey(ContentType, on_delete=models.SET_NULL, null=True)
    object_id = models.PositiveBigIntegerField(null=True)
    content_object = GenericForeignKey("content_type", "object_id")

    before = models.JSONField(
        default=dict,
        blank=True,
        help_text="Serialized state of the object before the change. Empty for creations.",
    )
    after = models.JSONField(
        default=dict,
        blank=True,
        help_text="Serialized state of the object after the change. Empty for deletions.",
    )

    note = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        verbose_name = "Audit Log Entry"
        verbose_name_plural = "Audit Log"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["content_type", "object_id"], name="audit_content_object_idx"),
            models.Index(fields=["action", "-created_at"], name="audit_action_created_idx"),
        ]

    def __str__(self) -> str:
        """Return a human-readable summary of the audit entry."""
        actor_name = self.actor or "System"
        return f"[{self.created_at.strftime('%Y-%m-%d %H:%M')}] {actor_name} → {self.action}"

    def save(self, *args, **kwargs):
        """
        Override save to enforce immutability: audit logs cannot be updated.

        Raises:
            RuntimeError: If attempting to update an existing audit log entry.
        """
        if self.pk:
            raise RuntimeError("AuditLog entries are immutable and cannot be updated.")
        super().save(*args, **kwargs)

    @classmethod
    def record(cls, action: str, instance: models.Model, *, actor: str = "",
               before: dict = None, after: dict = None) -> "AuditLog":
        """
        Append an entry for a change to `instance`.

        Args:
            action: Dot-separated action identifier.
            instance: The changed model instance (may already be deleted).
            actor: Caller identity; blank means a system action.
            before: Snapshot prior to the change.
            after: Snapshot after the change.

        Returns:
            The saved AuditLog entry.
        """
        return cls.objects.create(
            actor=actor,
            action=action,
            content_type=ContentType.objects.get_for_model(instance),
            object_id=instance.pk,
            before=before or {},
            after=after or {},
        )
