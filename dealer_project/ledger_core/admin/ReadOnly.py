from django.contrib import admin
from django.core.exceptions import PermissionDenied

"""Base admin for append-only models (ledger rows, audit log)."""
class ReadOnlyAdmin(admin.ModelAdmin):
    list_per_page = 50  # page size

    # make every model field readonly
    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]

    def has_add_permission(self, request):
        return False

    # Voiding goes through the ledger service, never through admin delete
    def has_delete_permission(self, request, obj=None):
        return False

    # View the change form; edits are blocked because fields are readonly
    def has_change_permission(self, request, obj=None):
        return True

    # Prevent any attempt to save via the admin UI
    def save_model(self, request, obj, form, change):
        raise PermissionDenied("Rows cannot be changed via the admin.")

    # Disable admin actions like delete_selected
    def get_actions(self, request):
        return {}

    # Common useful filters if present
    def get_list_filter(self, request):
        possible = {f.name for f in self.model._meta.fields}
        filters = []
        for candidate in ("location", "entry_type", "category", "period", "action", "object_type"):
            if candidate in possible:
                filters.append(candidate)
        return tuple(filters)

    # Useful searchable text fields if present
    def get_search_fields(self, request):
        possible = {f.name for f in self.model._meta.fields}
        search = []
        for candidate in ("entry_id", "description", "correlation_id", "object_id"):
            if candidate in possible:
                search.append(candidate)
        return tuple(search)
