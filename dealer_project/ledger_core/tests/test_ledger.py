import datetime
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import override_settings
from django.utils import timezone

from ..exceptions import DuplicateIdError, EntryNotFoundError, InvalidStateError
from ..models import (AuditLog, LedgerEntry, PaymentMethod,
                      TransactionCategory, TransactionType)
from ..services import (append_entry, create_transfer, late_entries,
                        post_transfer, query_entries, record_entry, void_entry)
from .base import LedgerTestCase


class AppendEntryTests(LedgerTestCase):
    def test_period_is_derived_from_posting_date(self):
        entry = self.make_entry("TX-1", posting_date=datetime.date(2024, 3, 31))
        self.assertEqual(entry.period, "2024-03")

    def test_caller_supplied_period_is_overwritten(self):
        entry = LedgerEntry(
            entry_id="TX-2",
            posting_date=datetime.date(2024, 7, 1),
            system_entry_date=datetime.date(2024, 7, 1),
            entry_type=TransactionType.INCOME,
            category=TransactionCategory.VEHICLE_SALE,
            amount=Decimal("10.00"),
            description="Sale",
            account=self.sales,
            location=self.loc1,
            period="1999-01",
        )
        append_entry(entry)
        entry.refresh_from_db()
        self.assertEqual(entry.period, "2024-07")

    def test_duplicate_id_is_rejected_and_ledger_unchanged(self):
        self.make_entry("TX-DUP")
        with self.assertLogs("ledger_core.services.ledger", level="WARNING"):
            with self.assertRaises(DuplicateIdError):
                self.make_entry("TX-DUP", amount="999.00")
        self.assertEqual(LedgerEntry.objects.count(), 1)
        self.assertEqual(LedgerEntry.objects.get().amount, Decimal("100.00"))

    def test_missing_account_raises_validation_error(self):
        entry = LedgerEntry(
            entry_id="TX-3",
            posting_date=datetime.date(2024, 5, 1),
            system_entry_date=datetime.date(2024, 5, 1),
            entry_type=TransactionType.EXPENSE,
            category=TransactionCategory.UTILITIES,
            amount=Decimal("50.00"),
            description="Hydro",
            location=self.loc1,
        )
        with self.assertRaises(ValidationError):
            append_entry(entry)
        self.assertFalse(LedgerEntry.objects.exists())

    def test_negative_amount_raises_validation_error(self):
        with self.assertRaises(ValidationError):
            self.make_entry("TX-4", amount="-5.00")
        self.assertFalse(LedgerEntry.objects.exists())

    def test_entries_are_immutable(self):
        entry = self.make_entry("TX-5")
        entry.description = "Edited"
        with self.assertRaises(InvalidStateError):
            entry.save()
        entry.refresh_from_db()
        self.assertEqual(entry.description, "Entry TX-5")

    def test_append_writes_audit_row(self):
        self.make_entry("TX-6")
        log = AuditLog.objects.get(object_id="TX-6")
        self.assertEqual(log.action, "append")
        self.assertEqual(log.changes["account"], "4000")

    def test_credit_payment_needs_a_source(self):
        with self.assertRaises(ValidationError):
            self.make_entry("TX-7", payment_method=PaymentMethod.CREDIT)

    @override_settings(LEDGER={"LOCKED": True})
    def test_locked_ledger_rejects_append(self):
        with self.assertRaises(InvalidStateError):
            self.make_entry("TX-8")
        self.assertFalse(LedgerEntry.objects.exists())


class RecordEntryTests(LedgerTestCase):
    def test_manual_entry_gets_generated_id_and_audit_dates(self):
        entry = record_entry(
            entry_type=TransactionType.EXPENSE,
            category=TransactionCategory.MARKETING,
            amount=Decimal("250.00"),
            account=self.costs,
            location=self.loc2,
            description="Radio spot",
            posting_date=datetime.date(2024, 1, 15),
        )
        self.assertTrue(entry.entry_id.startswith("TX-"))
        self.assertEqual(len(entry.entry_id), len("TX-") + 6)
        self.assertEqual(entry.system_entry_date, timezone.localdate())
        self.assertEqual(entry.invoice_date, datetime.date(2024, 1, 15))
        self.assertEqual(entry.period, "2024-01")

    def test_late_entries_are_flagged(self):
        self.make_entry(
            "TX-LATE",
            posting_date=datetime.date(2024, 4, 28),
            system_entry_date=datetime.date(2024, 5, 2),
        )
        self.make_entry(
            "TX-ONTIME",
            posting_date=datetime.date(2024, 5, 1),
            system_entry_date=datetime.date(2024, 5, 20),
        )
        self.assertEqual([e.entry_id for e in late_entries()], ["TX-LATE"])


class QueryEntriesTests(LedgerTestCase):
    def setUp(self):
        super().setUp()
        self.make_entry("TX-A", posting_date=datetime.date(2024, 5, 1), location=self.loc1)
        self.make_entry("TX-B", posting_date=datetime.date(2024, 5, 3), location=self.loc2)
        self.make_entry("TX-C", posting_date=datetime.date(2024, 5, 1), location=self.loc2)
        self.make_entry(
            "TX-D",
            posting_date=datetime.date(2024, 5, 2),
            location=self.loc1,
            entry_type=TransactionType.EXPENSE,
            category=TransactionCategory.REPAIR,
            account=self.costs,
            description="Brake pads for Civic",
        )

    def ids(self, entries):
        return [e.entry_id for e in entries]

    def test_all_sentinel_returns_every_entry_newest_first(self):
        # equal posting dates keep insertion order (TX-A before TX-C)
        self.assertEqual(self.ids(query_entries("all")), ["TX-B", "TX-D", "TX-A", "TX-C"])

    def test_branch_filter_returns_exact_subset_in_same_order(self):
        everything = list(query_entries("all"))
        for branch in ("loc1", "loc2"):
            expected = [e.entry_id for e in everything if e.location_id == branch]
            self.assertEqual(self.ids(query_entries(branch)), expected)

    def test_search_matches_description_case_insensitive(self):
        self.assertEqual(self.ids(query_entries(search="brake PADS")), ["TX-D"])

    def test_search_matches_account_code_substring(self):
        self.assertEqual(self.ids(query_entries(search="500")), ["TX-D"])

    def test_search_matches_id_case_insensitive(self):
        self.assertEqual(self.ids(query_entries(search="tx-c")), ["TX-C"])

    def test_type_and_category_filters_combine(self):
        self.assertEqual(self.ids(query_entries(entry_type=TransactionType.EXPENSE)), ["TX-D"])
        self.assertEqual(
            self.ids(query_entries("loc2", category=TransactionCategory.VEHICLE_SALE)),
            ["TX-B", "TX-C"],
        )
        self.assertEqual(
            self.ids(query_entries("loc2", entry_type=TransactionType.EXPENSE)), []
        )


class VoidEntryTests(LedgerTestCase):
    def setUp(self):
        super().setUp()
        for i, day in enumerate((1, 2, 2, 3), start=1):
            self.make_entry(f"TX-{i}", amount=f"{i}00.00", posting_date=datetime.date(2024, 6, day))

    def snapshot(self):
        return [
            (e.entry_id, e.posting_date, e.amount, e.description, e.location_id, e.account_id)
            for e in query_entries()
        ]

    def test_void_removes_exactly_one_entry(self):
        before = self.snapshot()
        void_entry("TX-2", reason="keyed twice")
        after = self.snapshot()

        self.assertEqual(len(after), len(before) - 1)
        self.assertNotIn("TX-2", [row[0] for row in after])
        self.assertEqual(after, [row for row in before if row[0] != "TX-2"])

    def test_void_keeps_snapshot_in_audit_log(self):
        void_entry("TX-3", reason="wrong branch")
        log = AuditLog.objects.get(action="void", object_id="TX-3")
        self.assertEqual(log.changes["reason"], "wrong branch")
        self.assertEqual(log.changes["entry"]["amount"], "300.00")

    def test_void_unknown_id_raises_not_found(self):
        with self.assertRaises(EntryNotFoundError):
            void_entry("TX-404")
        self.assertEqual(LedgerEntry.objects.count(), 4)

    @override_settings(LEDGER={"VOID_POLICY": "reverse"})
    def test_reverse_policy_appends_compensating_entry(self):
        reversal = void_entry("TX-1")

        self.assertEqual(reversal.entry_id, "TX-1-REV")
        self.assertEqual(reversal.entry_type, TransactionType.EXPENSE)
        self.assertEqual(reversal.amount, Decimal("100.00"))
        self.assertEqual(reversal.correlation_id, "TX-1")
        # original stays in the audit trail
        self.assertTrue(LedgerEntry.objects.filter(entry_id="TX-1").exists())
        self.assertEqual(LedgerEntry.objects.count(), 5)

    @override_settings(LEDGER={"VOID_POLICY": "reverse"})
    def test_second_reversal_is_rejected(self):
        void_entry("TX-1")
        with self.assertRaises(InvalidStateError):
            void_entry("TX-1")
        self.assertEqual(LedgerEntry.objects.filter(entry_id__startswith="TX-1-REV").count(), 1)

    @override_settings(LEDGER={"LOCKED": True})
    def test_locked_ledger_rejects_void(self):
        with self.assertRaises(InvalidStateError):
            void_entry("TX-1")
        self.assertEqual(LedgerEntry.objects.count(), 4)

    def test_transfer_leg_cannot_be_voided_alone(self):
        transfer = create_transfer(self.cash, self.payroll, "75.00", reference="Float")
        post_transfer(transfer)
        leg = LedgerEntry.objects.get(entry_id__endswith="-A", transfer=transfer)

        with self.assertRaises(InvalidStateError):
            void_entry(leg.entry_id)
        self.assertEqual(transfer.legs.count(), 2)
