from django.contrib import admin

from ..models import Invoice
from .actions import mark_invoices_paid


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ("invoice_number", "customer_name", "date", "due_date", "amount", "status", "location")
    list_filter = ("status", "location")
    search_fields = ("invoice_number", "customer_name")
    # Paid only through the action, which enforces the transition rules
    readonly_fields = ("created_at",)
    actions = [mark_invoices_paid]

    def get_readonly_fields(self, request, obj=None):
        if obj is not None and obj.status == "Paid":
            return [f.name for f in self.model._meta.fields]
        return self.readonly_fields
