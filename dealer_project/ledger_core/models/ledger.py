from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from ..exceptions import InvalidStateError
from ..managers import LedgerEntryManager
from .account import Account
from .location import Location
from .vehicle import Vehicle


class TransactionType(models.TextChoices):
    INCOME = "INCOME", "Income"
    EXPENSE = "EXPENSE", "Expense"


class TransactionCategory(models.TextChoices):
    VEHICLE_PURCHASE = "Vehicle Purchase", "Vehicle Purchase"
    REPAIR = "Repair & Maintenance", "Repair & Maintenance"
    DETAILING = "Detailing", "Detailing"
    LOGISTICS = "Logistics", "Logistics"
    SALARY = "Employee Salary", "Employee Salary"
    BONUS = "Employee Bonus", "Employee Bonus"
    VEHICLE_SALE = "Vehicle Sale", "Vehicle Sale"
    OPERATING = "Operating Expense", "Operating Expense"
    MARKETING = "Marketing", "Marketing"
    UTILITIES = "Utilities", "Utilities"
    # Reserved for internal transfer legs
    TRANSFER = "Internal Transfer", "Internal Transfer"


class PaymentMethod(models.TextChoices):
    CASH = "Cash", "Cash"
    CREDIT = "Credit", "Credit"


class CreditSource(models.TextChoices):
    BANK = "Bank", "Bank"
    CARD = "Card", "Card"


class LedgerEntry(models.Model):
    """
    One posted line of the audit trail.

    Rows are append-only: once saved an entry is never updated in place,
    it can only be voided (deleted or reversed, see services.ledger).
    period is always derived from posting_date.
    """

    # Business id ("TX-8K2M1Q", "TRF-0PQ9ZX-A")
    entry_id = models.CharField(max_length=40, unique=True)

    # Accounting-effective date
    posting_date = models.DateField()
    # Date the row was keyed in; a later month than posting_date is a late entry
    system_entry_date = models.DateField()
    invoice_date = models.DateField(null=True, blank=True)

    entry_type = models.CharField(max_length=10, choices=TransactionType.choices)
    category = models.CharField(max_length=40, choices=TransactionCategory.choices)

    amount = models.DecimalField(
        max_digits=18, decimal_places=2, validators=[MinValueValidator(Decimal("0"))]
    )
    tax_amount = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0"))],
    )
    description = models.CharField(max_length=255)

    # Every entry belongs to exactly one account and one branch
    account = models.ForeignKey(Account, on_delete=models.PROTECT, related_name="entries")
    location = models.ForeignKey(Location, on_delete=models.PROTECT, related_name="entries")

    # "YYYY-MM" of posting_date, filled in by clean()
    period = models.CharField(max_length=7, blank=True, editable=False)

    # Vehicle this cost/income belongs to (drives vehicle cost analysis)
    vehicle = models.ForeignKey(
        Vehicle,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="ledger_entries",
    )
    # Set on the two legs produced by posting a transfer
    transfer = models.ForeignKey(
        "InternalTransfer",
        null=True,
        blank=True,
        on_delete=models.PROTECT,  # a posted transfer keeps its legs
        related_name="legs",
    )
    # Shared by both legs of a transfer, and by a reversal and its original
    correlation_id = models.CharField(max_length=40, blank=True)

    # How the money moved (audit detail only)
    payment_method = models.CharField(max_length=10, choices=PaymentMethod.choices, blank=True)
    credit_source = models.CharField(max_length=10, choices=CreditSource.choices, blank=True)
    payment_detail = models.CharField(max_length=120, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    objects = LedgerEntryManager()

    class Meta:
        # newest posting first, insertion order on ties
        ordering = ("-posting_date", "id")
        verbose_name_plural = "ledger entries"
        indexes = [
            models.Index(fields=["location", "posting_date"], name="entry_location_date_idx"),
            models.Index(fields=["period"], name="entry_period_idx"),
            models.Index(fields=["correlation_id"], name="entry_correlation_idx"),
        ]

    def __str__(self):
        return f"{self.entry_id} {self.posting_date} {self.entry_type} {self.amount}"

    @property
    def signed_amount(self):
        """Income counts positive, expense negative."""
        if self.entry_type == TransactionType.EXPENSE:
            return -self.amount
        return self.amount

    @property
    def is_late_entry(self):
        if not self.posting_date or not self.system_entry_date:
            return False
        posted = (self.posting_date.year, self.posting_date.month)
        keyed = (self.system_entry_date.year, self.system_entry_date.month)
        return keyed > posted

    def clean(self):
        # posting_date has been converted to a date by clean_fields()
        if self.posting_date:
            self.period = self.posting_date.strftime("%Y-%m")

        if self.payment_method == PaymentMethod.CREDIT and not self.credit_source:
            raise ValidationError(
                {"credit_source": "Credit payments need a source (Bank or Card)."}
            )
        if self.payment_method != PaymentMethod.CREDIT and self.credit_source:
            raise ValidationError(
                {"credit_source": "Only credit payments carry a credit source."}
            )

    def save(self, *args, **kwargs):
        # No update-in-place: an existing row is never written again
        if not self._state.adding:
            raise InvalidStateError(
                f"Ledger entry {self.entry_id} is immutable; void it instead."
            )
        self.full_clean()
        return super().save(*args, **kwargs)
