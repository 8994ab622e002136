from django.contrib import admin

from ..models import LedgerEntry
from .mixins import BranchAdminMixin
from .ReadOnly import ReadOnlyAdmin


@admin.register(LedgerEntry)
class LedgerEntryAdmin(BranchAdminMixin, ReadOnlyAdmin):
    list_display = (
        "entry_id",
        "posting_date",
        "system_entry_date",
        "entry_type",
        "category",
        "amount",
        "account",
        "location",
        "is_late_entry",
    )
    date_hierarchy = "posting_date"

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("account", "location")

    @admin.display(boolean=True, description="Late entry")
    def is_late_entry(self, obj):
        return obj.is_late_entry
