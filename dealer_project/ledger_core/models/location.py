from django.db import models


class Location(models.Model):
    """
    Dealership site (branch). Acts purely as a partition key:
    ledger entries, invoices and vehicles are attributed to one location
    and every branch figure is computed by filtering on it.
    """

    class Kind(models.TextChoices):
        SHOWROOM = "Showroom", "Showroom"
        WAREHOUSE = "Warehouse", "Warehouse"

    # Short stable id ("loc1"), used in URLs, sessions and exports
    id = models.CharField(max_length=20, primary_key=True)
    name = models.CharField(max_length=200)
    address = models.CharField(max_length=255, blank=True)
    kind = models.CharField(max_length=20, choices=Kind.choices, default=Kind.SHOWROOM)
    phone = models.CharField(max_length=32, blank=True)
    email = models.EmailField(blank=True)

    class Meta:
        ordering = ("id",)

    def __str__(self):
        return self.name
