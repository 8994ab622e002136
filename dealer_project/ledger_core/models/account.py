from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models


class AccountType(models.TextChoices):
    # Determines reporting: Balance Sheet vs P&L
    ASSET = "Asset", "Asset"
    LIABILITY = "Liability", "Liability"
    EQUITY = "Equity", "Equity"
    REVENUE = "Revenue", "Revenue"
    EXPENSE = "Expense", "Expense"


class Account(models.Model):
    """
    Ledger account in the Chart of Accounts.
    - code is globally unique and cannot change once created
    - balance is a display figure maintained by hand; posting does not touch it
    """

    # Every account has a code (e.g. "1000" or "A100")
    code = models.CharField(max_length=32, unique=True)
    name = models.CharField(max_length=200)  # "Cash on Hand", "Payroll Clearing"

    account_type = models.CharField(max_length=10, choices=AccountType.choices)

    balance = models.DecimalField(
        max_digits=18, decimal_places=2, default=Decimal("0.00")
    )
    description = models.CharField(max_length=255, blank=True)
    # Locked accounts stay in the chart but are flagged in the UI
    is_locked = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("code",)
        indexes = [models.Index(fields=["account_type"], name="account_type_idx")]

    def __str__(self):
        return f"{self.code} – {self.name}"  # "1000 – Cash on Hand"

    def clean(self):
        """The code is the account's identity in every ledger row."""
        if self.pk:
            orig_code = (
                Account.objects.filter(pk=self.pk)
                .values_list("code", flat=True)
                .first()
            )
            if orig_code is not None and orig_code != self.code:
                raise ValidationError(
                    {"code": f"Account code {orig_code} cannot be changed."}
                )

    def save(self, *args, **kwargs):
        self.full_clean()  # run validations before saving
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Accounts referenced by the ledger or a transfer stay in the chart."""
        if self.entries.exists():
            raise ValidationError("Cannot delete account used in ledger entries.")
        if self.outgoing_transfers.exists() or self.incoming_transfers.exists():
            raise ValidationError("Cannot delete account used in internal transfers.")
        return super().delete(*args, **kwargs)
