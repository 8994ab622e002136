import datetime
from decimal import Decimal

from django.test import TestCase

from ..models import (Account, AccountType, LedgerEntry, Location,
                      TransactionCategory, TransactionType)
from ..services import append_entry


class LedgerTestCase(TestCase):
    """Two branches and a small chart of accounts."""

    def setUp(self):
        self.loc1 = Location.objects.create(id="loc1", name="Main Showroom", kind=Location.Kind.SHOWROOM)
        self.loc2 = Location.objects.create(id="loc2", name="East Warehouse", kind=Location.Kind.WAREHOUSE)
        self.cash = Account.objects.create(
            code="A100", name="Cash", account_type=AccountType.ASSET, balance=Decimal("10000.00")
        )
        self.payroll = Account.objects.create(
            code="A200", name="Payroll Clearing", account_type=AccountType.LIABILITY
        )
        self.sales = Account.objects.create(code="4000", name="Vehicle Sales", account_type=AccountType.REVENUE)
        self.costs = Account.objects.create(code="5000", name="Vehicle Purchases", account_type=AccountType.EXPENSE)

    def make_entry(
        self,
        entry_id,
        amount="100.00",
        entry_type=TransactionType.INCOME,
        category=TransactionCategory.VEHICLE_SALE,
        account=None,
        location=None,
        posting_date=datetime.date(2024, 5, 10),
        system_entry_date=None,
        description=None,
        **extra,
    ):
        """
        Helper to append an entry. Defaults to a 100.00 vehicle sale
        at loc1 posted 2024-05-10.
        """
        entry = LedgerEntry(
            entry_id=entry_id,
            posting_date=posting_date,
            system_entry_date=system_entry_date or posting_date,
            entry_type=entry_type,
            category=category,
            amount=Decimal(amount),
            description=description or f"Entry {entry_id}",
            account=account or self.sales,
            location=location or self.loc1,
            **extra,
        )
        return append_entry(entry)
