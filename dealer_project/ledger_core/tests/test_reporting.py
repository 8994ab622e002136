import datetime
from decimal import Decimal

from django.core.exceptions import ValidationError

from ..models import (Account, AccountType, InvoiceStatus, TransactionCategory,
                      TransactionType, Vehicle, VehicleStatus)
from ..services import (asset_valuation, branch_income_breakdown,
                        create_transfer, income_expense_profit, issue_invoice,
                        post_transfer, receivables_aging, receivables_stats,
                        vehicle_cost_analysis)
from .base import LedgerTestCase


class IncomeExpenseProfitTests(LedgerTestCase):
    def setUp(self):
        super().setUp()
        self.make_entry("TX-INC", amount="1000.00", location=self.loc1)
        self.make_entry(
            "TX-EXP",
            amount="400.00",
            entry_type=TransactionType.EXPENSE,
            category=TransactionCategory.REPAIR,
            account=self.costs,
            location=self.loc2,
        )
        transfer = create_transfer(self.cash, self.payroll, "500.00")
        post_transfer(transfer, branch="loc1")

    def test_transfer_legs_are_excluded(self):
        summary = income_expense_profit("all")
        self.assertEqual(summary.income, Decimal("1000.00"))
        self.assertEqual(summary.expense, Decimal("400.00"))
        self.assertEqual(summary.profit, Decimal("600.00"))

    def test_totals_keep_two_decimals(self):
        summary = income_expense_profit("all")
        self.assertEqual([str(summary.income), str(summary.expense)], ["1000.00", "400.00"])
        self.assertEqual(str(branch_income_breakdown()[0].income), "1500.00")

    def test_branch_scope(self):
        loc1 = income_expense_profit("loc1")
        self.assertEqual((loc1.income, loc1.expense), (Decimal("1000.00"), Decimal("0.00")))
        loc2 = income_expense_profit("loc2")
        self.assertEqual(loc2.profit, Decimal("-400.00"))

    def test_branch_breakdown_includes_transfer_legs(self):
        rows = {row.location.pk: row.income for row in branch_income_breakdown()}
        # 1000 sale + 500 inbound transfer leg
        self.assertEqual(rows["loc1"], Decimal("1500.00"))
        self.assertEqual(rows["loc2"], Decimal("0.00"))


class AssetValuationTests(LedgerTestCase):
    def test_sums_asset_balances_only(self):
        Account.objects.create(
            code="1200", name="Vehicle Inventory", account_type=AccountType.ASSET, balance=Decimal("5000.00")
        )
        Account.objects.create(
            code="2000", name="Accounts Payable", account_type=AccountType.LIABILITY, balance=Decimal("750.00")
        )
        self.assertEqual(asset_valuation(), Decimal("15000.00"))
        self.assertEqual(str(asset_valuation()), "15000.00")

    def test_ignores_branch_scoped_ledger(self):
        # balances are company-wide; branch entries do not move them
        self.make_entry("TX-1", amount="999.00", location=self.loc2)
        self.assertEqual(asset_valuation(), Decimal("10000.00"))
        self.assertEqual(income_expense_profit("loc1").income, Decimal("0.00"))


class ReceivablesStatsTests(LedgerTestCase):
    def test_no_invoices_reports_full_efficiency(self):
        stats = receivables_stats()
        self.assertEqual(stats.total, Decimal("0.00"))
        self.assertEqual(stats.collection_efficiency, 100)

    def test_totals_and_rounded_efficiency(self):
        issue_invoice("Paid Customer", Decimal("200.00"), status=InvoiceStatus.PAID)
        issue_invoice("Late Customer", Decimal("50.00"), status=InvoiceStatus.OVERDUE)
        issue_invoice("New Customer", Decimal("50.00"))

        stats = receivables_stats()
        self.assertEqual(stats.total, Decimal("300.00"))
        self.assertEqual(str(stats.outstanding), "100.00")
        self.assertEqual(stats.outstanding, Decimal("100.00"))
        self.assertEqual(stats.overdue, Decimal("50.00"))
        # 66.67% rounds to 67
        self.assertEqual(stats.collection_efficiency, 67)

    def test_aging_buckets(self):
        as_of = datetime.date(2024, 6, 30)
        for days_late, amount in ((-5, "10.00"), (0, "20.00"), (15, "30.00"), (45, "40.00"), (75, "50.00"), (120, "60.00")):
            due = as_of - datetime.timedelta(days=days_late)
            issue_invoice("Customer", Decimal(amount), date=due - datetime.timedelta(days=30), due_date=due)
        issue_invoice(
            "Settled", Decimal("999.00"), date=datetime.date(2024, 1, 1),
            due_date=datetime.date(2024, 1, 31), status=InvoiceStatus.PAID,
        )

        aging = receivables_aging(as_of)
        self.assertEqual(
            aging,
            {
                "current": Decimal("30.00"),
                "1-30": Decimal("30.00"),
                "31-60": Decimal("40.00"),
                "61-90": Decimal("50.00"),
                "90+": Decimal("60.00"),
            },
        )
        self.assertEqual(list(aging), ["current", "1-30", "31-60", "61-90", "90+"])


class VehicleCostAnalysisTests(LedgerTestCase):
    def setUp(self):
        super().setUp()
        self.sold = Vehicle.objects.create(
            stock_number="OR-1", vin="1HGCM82633A004352", year=2019, make="Honda", model="Accord",
            price=Decimal("21900.00"), status=VehicleStatus.SOLD, location=self.loc1,
        )
        self.in_shop = Vehicle.objects.create(
            stock_number="OR-2", vin="1FTEW1EP7JFA12345", year=2020, make="Ford", model="F-150",
            price=Decimal("38900.00"), status=VehicleStatus.WORKING_ON_IT, location=self.loc2,
        )
        expense = {
            "entry_type": TransactionType.EXPENSE,
            "category": TransactionCategory.VEHICLE_PURCHASE,
            "account": self.costs,
        }
        self.make_entry("TX-1", amount="15000.00", vehicle=self.sold, location=self.loc1, **expense)
        # booked at the other branch, still this vehicle's cost
        self.make_entry("TX-2", amount="400.00", vehicle=self.sold, location=self.loc2, **expense)
        self.make_entry("TX-3", amount="30000.00", vehicle=self.in_shop, location=self.loc2, **expense)

    def by_stock(self, rows):
        return {row.vehicle.stock_number: row for row in rows}

    def test_profit_only_for_sold_vehicles(self):
        rows = self.by_stock(vehicle_cost_analysis())
        self.assertEqual(rows["OR-1"].total_cost, Decimal("15400.00"))
        self.assertEqual(rows["OR-1"].profit, Decimal("6500.00"))
        self.assertEqual(str(rows["OR-1"].total_cost), "15400.00")
        self.assertEqual(rows["OR-2"].total_cost, Decimal("30000.00"))
        self.assertIsNone(rows["OR-2"].profit)

    def test_branch_scope_filters_vehicles_not_costs(self):
        rows = self.by_stock(vehicle_cost_analysis("loc1"))
        self.assertEqual(list(rows), ["OR-1"])
        self.assertEqual(rows["OR-1"].total_cost, Decimal("15400.00"))

    def test_search_by_make_model_or_vin(self):
        self.assertEqual(list(self.by_stock(vehicle_cost_analysis(search="ford f-1"))), ["OR-2"])
        self.assertEqual(list(self.by_stock(vehicle_cost_analysis(search="a004352"))), ["OR-1"])

    def test_vehicle_without_entries_costs_nothing(self):
        Vehicle.objects.create(
            stock_number="OR-3", year=2016, make="BMW", model="328i",
            price=Decimal("18750.00"), location=self.loc1,
        )
        rows = self.by_stock(vehicle_cost_analysis())
        self.assertEqual(rows["OR-3"].total_cost, Decimal("0.00"))


class ChartOfAccountsTests(LedgerTestCase):
    def test_account_code_is_immutable(self):
        self.cash.code = "A999"
        with self.assertRaises(ValidationError):
            self.cash.save()
        self.assertTrue(Account.objects.filter(code="A100").exists())

    def test_account_in_use_cannot_be_deleted(self):
        self.make_entry("TX-1")
        with self.assertRaises(ValidationError):
            self.sales.delete()
        self.assertTrue(Account.objects.filter(pk=self.sales.pk).exists())

    def test_account_used_by_transfer_cannot_be_deleted(self):
        create_transfer(self.cash, self.payroll, "10.00")
        with self.assertRaises(ValidationError):
            self.payroll.delete()

    def test_unused_account_can_be_deleted(self):
        self.costs.delete()
        self.assertFalse(Account.objects.filter(code="5000").exists())
