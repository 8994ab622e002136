from django.contrib import admin

from ..models import Account, Location, Vehicle
from .mixins import BranchAdminMixin


@admin.register(Location)
class LocationAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "kind", "address", "phone", "email")
    search_fields = ("id", "name")


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "account_type", "balance", "is_locked")
    list_filter = ("account_type", "is_locked")
    search_fields = ("code", "name")
    ordering = ("code",)

    # code is the account's identity once it exists
    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return ("code", "created_at")
        return ("created_at",)


@admin.register(Vehicle)
class VehicleAdmin(BranchAdminMixin, admin.ModelAdmin):
    list_display = ("stock_number", "year", "make", "model", "vin", "price", "status", "location")
    list_filter = ("status", "location")
    search_fields = ("stock_number", "vin", "make", "model")
