from django.conf import settings
from django.db import models


# ---------- Audit / Event log ----------
class AuditLog(models.Model):
    # Nullable for automated actions (seed command, background jobs)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL
    )
    # append, void, reverse, create, post, paid
    action = models.CharField(max_length=50)
    object_type = models.CharField(max_length=100)  # "LedgerEntry", "Invoice"
    # Business id of the object ("TX-8K2M1Q", "IT-4RZ0AB")
    object_id = models.CharField(max_length=100)
    # Snapshot / details of the change; voided entries live on here
    changes = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")
        indexes = [
            models.Index(fields=["object_type", "object_id"], name="auditlog_object_idx"),
            models.Index(fields=["created_at"], name="auditlog_created_idx"),
        ]

    def __str__(self):
        return f"[{self.created_at:%Y-%m-%d %H:%M}] {self.user} {self.action} {self.object_type}({self.object_id})"
