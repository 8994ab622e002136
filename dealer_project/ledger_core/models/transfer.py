from django.conf import settings
from django.db import models

from ..exceptions import InvalidStateError
from .account import Account


class TransferStatus(models.TextChoices):
    PENDING = "Pending", "Pending"
    POSTED = "Posted", "Posted"


class InternalTransfer(models.Model):
    """
    Movement of funds between two accounts of the Chart of Accounts.

    Workflow:
        Pending = created, nothing in the ledger yet.
        Posted  = exactly one matched pair of ledger legs exists
                  (Expense on the source, Income on the destination).
    """

    transfer_id = models.CharField(max_length=20, unique=True)  # "IT-4RZ0AB"
    date = models.DateField()

    source_account = models.ForeignKey(
        Account, on_delete=models.PROTECT, related_name="outgoing_transfers"
    )
    destination_account = models.ForeignKey(
        Account, on_delete=models.PROTECT, related_name="incoming_transfers"
    )
    amount = models.DecimalField(max_digits=18, decimal_places=2)
    currency = models.CharField(max_length=3, default="CAD")
    reference = models.CharField(max_length=200, blank=True)

    status = models.CharField(
        max_length=10, choices=TransferStatus.choices, default=TransferStatus.PENDING
    )

    # Filled in when the transfer is posted
    correlation_id = models.CharField(max_length=20, blank=True)
    posted_at = models.DateTimeField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="transfers_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-date", "-id")

    def __str__(self):
        return f"{self.transfer_id} {self.source_account.code} → {self.destination_account.code} {self.amount}"

    def clean(self):
        # the single place transfer rules live
        from ..services.validation import validate_transfer

        if self.amount is not None:
            self.amount = validate_transfer(
                self.source_account_id, self.destination_account_id, self.amount
            )

    def save(self, *args, **kwargs):
        """Posted transfers are frozen."""
        if self.pk:
            orig = InternalTransfer.objects.filter(pk=self.pk).first()
            if orig and orig.status == TransferStatus.POSTED:
                changed = [
                    field
                    for field in ("status", "amount", "source_account_id", "destination_account_id", "correlation_id")
                    if getattr(orig, field) != getattr(self, field)
                ]
                if changed:
                    raise InvalidStateError(
                        f"Cannot modify {changed} on posted transfer {self.transfer_id}."
                    )
        self.full_clean()
        return super().save(*args, **kwargs)

    def transition_to(self, new_status):
        # Current state vs. allowed next states
        allowed = {
            TransferStatus.PENDING.value: [TransferStatus.POSTED],
            TransferStatus.POSTED.value: [],  # no reversal, no re-posting
        }
        if new_status not in allowed.get(str(self.status), []):
            raise InvalidStateError(
                f"Transfer {self.transfer_id} cannot go from {self.status} to {new_status}"
            )
        self.status = new_status
        self.save()
