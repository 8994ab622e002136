"""Paid invoices are part of the receivables history."""
from django.core.exceptions import ValidationError
from django.db.models.signals import pre_delete
from django.dispatch import receiver

from .models import Invoice, InvoiceStatus


# pre_delete fires just before Django deletes the instance,
# for single deletes and queryset/admin bulk deletes alike
@receiver(pre_delete, sender=Invoice)
def prevent_delete_paid_invoice(sender, instance, **kwargs):
    """
    Raised inside Django's delete transaction: a caller already inside
    transaction.atomic() must wrap the delete in its own atomic block
    (a savepoint) to keep using the connection after the error.
    """
    if instance.status == InvoiceStatus.PAID:
        raise ValidationError("Cannot delete a paid invoice.")
