from django.contrib import admin

from ..models import AuditLog
from .ReadOnly import ReadOnlyAdmin


# Audit rows are evidence; nobody edits them
@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdmin):
    list_display = ("id", "created_at", "user", "action", "object_type", "object_id")
    search_fields = ("object_type", "object_id", "user__username")
    list_filter = ("action", "object_type", "created_at")

    # Fetch everything in one SQL join
    def get_queryset(self, request):
        return super().get_queryset(request).select_related("user")
