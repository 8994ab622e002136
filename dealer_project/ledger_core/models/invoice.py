from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from ..exceptions import InvalidStateError
from ..managers import BranchManager
from .location import Location
from .vehicle import Vehicle


class InvoiceStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    PAID = "Paid", "Paid"
    OVERDUE = "Overdue", "Overdue"


class Invoice(models.Model):  # Receivable owed by a customer
    invoice_number = models.CharField(max_length=32, unique=True)  # "INV-2024-001"
    customer_name = models.CharField(max_length=200)
    date = models.DateField()  # issue date
    due_date = models.DateField()

    amount = models.DecimalField(
        max_digits=18, decimal_places=2, validators=[MinValueValidator(Decimal("0"))]
    )
    tax_amount = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )

    status = models.CharField(
        max_length=10, choices=InvoiceStatus.choices, default=InvoiceStatus.PENDING
    )
    """ Workflow:
        Pending = issued, not paid.
        Overdue = flagged by hand; never derived from due_date.
        Paid    = settled, terminal. """

    # Optional attribution; invoices without a branch only show in "all"
    location = models.ForeignKey(
        Location, null=True, blank=True, on_delete=models.PROTECT, related_name="invoices"
    )
    vehicle = models.ForeignKey(
        Vehicle, null=True, blank=True, on_delete=models.SET_NULL, related_name="invoices"
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    # Enforce branch scoping
    objects = BranchManager()

    class Meta:
        ordering = ("-date", "-id")
        indexes = [models.Index(fields=["status"], name="invoice_status_idx")]

    def __str__(self):
        return f"Inv {self.invoice_number}"

    def days_past_due(self, as_of):
        return (as_of - self.due_date).days

    def save(self, *args, **kwargs):
        """Make paid invoices immutable in all code paths
        (admin, views, services)"""
        if self.pk:
            orig = Invoice.objects.filter(pk=self.pk).first()
            if orig and orig.status == InvoiceStatus.PAID:
                changed = [
                    field
                    for field in ("status", "amount", "invoice_number")
                    if getattr(orig, field) != getattr(self, field)
                ]
                if changed:
                    raise InvalidStateError(
                        f"Cannot modify {changed} on paid invoice {self.invoice_number}."
                    )
        self.full_clean()
        return super().save(*args, **kwargs)

    def transition_to(self, new_status):
        allowed = {
            InvoiceStatus.PENDING.value: [InvoiceStatus.PAID],
            InvoiceStatus.OVERDUE.value: [InvoiceStatus.PAID],
            InvoiceStatus.PAID.value: [],  # Paid → (no further transitions)
        }
        if new_status not in allowed.get(str(self.status), []):
            raise InvalidStateError(
                f"Invoice {self.invoice_number} cannot go from {self.status} to {new_status}"
            )
        self.status = new_status
        self.save()
