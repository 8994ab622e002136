from decimal import Decimal

from django.db import models

from ..managers import BranchManager
from .location import Location


class VehicleStatus(models.TextChoices):
    NEW = "New", "New"
    WORKING_ON_IT = "Working on it", "Working on it"
    READY = "Ready", "Ready"
    SOLD = "Sold", "Sold"


class Vehicle(models.Model):
    """Inventory unit. Read-only to the ledger; cost analysis sums the
    ledger entries that reference it."""

    stock_number = models.CharField(max_length=32, unique=True)
    vin = models.CharField(max_length=17, blank=True)
    year = models.PositiveIntegerField()
    make = models.CharField(max_length=64)
    model = models.CharField(max_length=64)
    # asking (or realized) sale price
    price = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    status = models.CharField(
        max_length=20, choices=VehicleStatus.choices, default=VehicleStatus.NEW
    )
    location = models.ForeignKey(
        Location, on_delete=models.PROTECT, related_name="vehicles"
    )

    # Enforce branch scoping
    objects = BranchManager()

    class Meta:
        ordering = ("stock_number",)

    def __str__(self):
        return f"{self.year} {self.make} {self.model} ({self.stock_number})"
