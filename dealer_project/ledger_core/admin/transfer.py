from django.contrib import admin

from ..models import InternalTransfer
from .actions import post_transfers


@admin.register(InternalTransfer)
class InternalTransferAdmin(admin.ModelAdmin):
    list_display = (
        "transfer_id",
        "date",
        "source_account",
        "destination_account",
        "amount",
        "currency",
        "reference",
        "status",
    )
    list_filter = ("status", "currency")
    search_fields = ("transfer_id", "reference", "correlation_id")
    # Status only moves through the "Post selected transfers" action
    readonly_fields = ("status", "correlation_id", "posted_at", "created_by", "created_at")
    actions = [post_transfers]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related("source_account", "destination_account")
