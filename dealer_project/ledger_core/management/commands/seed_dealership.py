import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from ledger_core.models import (Account, AccountType, InvoiceStatus,
                                LedgerEntry, Location, TransactionCategory,
                                TransactionType, Vehicle, VehicleStatus)
from ledger_core.services import issue_invoice, record_entry

User = get_user_model()

LOCATIONS = [
    {
        "id": "loc1",
        "name": "Main Showroom",
        "address": "123 Auto Row, Toronto, ON",
        "kind": Location.Kind.SHOWROOM,
        "phone": "555-0100",
        "email": "sales@oldroad.auto",
    },
    {
        "id": "loc2",
        "name": "East Warehouse",
        "address": "456 Industrial Pkwy, Oshawa, ON",
        "kind": Location.Kind.WAREHOUSE,
        "phone": "555-0200",
        "email": "storage@oldroad.auto",
    },
]

# code, name, type, opening balance
CHART_OF_ACCOUNTS = [
    ("1000", "Cash on Hand", AccountType.ASSET, "125000.00"),
    ("1100", "Accounts Receivable", AccountType.ASSET, "18500.00"),
    ("1200", "Vehicle Inventory", AccountType.ASSET, "342000.00"),
    ("2000", "Accounts Payable", AccountType.LIABILITY, "22400.00"),
    ("2100", "Payroll Clearing", AccountType.LIABILITY, "0.00"),
    ("3000", "Owner's Equity", AccountType.EQUITY, "463100.00"),
    ("4000", "Vehicle Sales", AccountType.REVENUE, "0.00"),
    ("5000", "Vehicle Purchases", AccountType.EXPENSE, "0.00"),
    ("5100", "Repairs & Detailing", AccountType.EXPENSE, "0.00"),
    ("5200", "Salaries & Wages", AccountType.EXPENSE, "0.00"),
    ("5300", "Operating Expenses", AccountType.EXPENSE, "0.00"),
]

# stock number, vin, year, make, model, price, status, location
VEHICLES = [
    ("OR-1001", "1HGCM82633A004352", 2019, "Honda", "Accord", "21900.00", VehicleStatus.READY, "loc1"),
    ("OR-1002", "2T1BURHE5JC034461", 2018, "Toyota", "Corolla", "16500.00", VehicleStatus.SOLD, "loc1"),
    ("OR-1003", "1FTEW1EP7JFA12345", 2020, "Ford", "F-150", "38900.00", VehicleStatus.WORKING_ON_IT, "loc2"),
    ("OR-1004", "WBA8E9C50GK645321", 2016, "BMW", "328i", "18750.00", VehicleStatus.NEW, "loc2"),
]


class Command(BaseCommand):
    help = "Seed locations, chart of accounts, users, vehicles and a sample ledger."

    def add_arguments(self, parser):
        parser.add_argument("--username", default="admin", help="Username for the back-office admin.")
        parser.add_argument("--password", default="admin123", help="Password for the back-office admin.")

    @transaction.atomic
    def handle(self, *args, **options):
        # 1. Locations
        locations = {}
        for data in LOCATIONS:
            loc, _ = Location.objects.update_or_create(id=data["id"], defaults=data)
            locations[loc.id] = loc
        self.stdout.write(self.style.SUCCESS(f"Locations: {', '.join(locations)}"))

        # 2. Chart of accounts
        accounts = {}
        for code, name, account_type, balance in CHART_OF_ACCOUNTS:
            account, _ = Account.objects.get_or_create(
                code=code,
                defaults={"name": name, "account_type": account_type, "balance": Decimal(balance)},
            )
            accounts[code] = account
        self.stdout.write(self.style.SUCCESS(f"Chart of accounts: {len(accounts)} accounts"))

        # 3. Users (one per role)
        admin, created = User.objects.get_or_create(
            username=options["username"],
            defaults={
                "email": "admin@oldroad.auto",
                "first_name": "Master",
                "last_name": "Admin",
                "role": User.Role.ADMIN,
                "location": locations["loc1"],
                "is_staff": True,
            },
        )
        if created:
            admin.set_password(options["password"])
            admin.save()
        User.objects.get_or_create(
            username="sales",
            defaults={"email": "sales@oldroad.auto", "role": User.Role.SALES, "location": locations["loc1"]},
        )
        User.objects.get_or_create(
            username="customer",
            defaults={"email": "customer@gmail.com", "role": User.Role.CUSTOMER},
        )
        self.stdout.write(self.style.SUCCESS(f"Back-office user: {admin.username}"))

        # 4. Vehicles
        vehicles = {}
        for stock, vin, year, make, model, price, status, loc_id in VEHICLES:
            vehicle, _ = Vehicle.objects.get_or_create(
                stock_number=stock,
                defaults={
                    "vin": vin,
                    "year": year,
                    "make": make,
                    "model": model,
                    "price": Decimal(price),
                    "status": status,
                    "location": locations[loc_id],
                },
            )
            vehicles[stock] = vehicle

        # 5. Sample ledger, only into an empty ledger
        if LedgerEntry.objects.exists():
            self.stdout.write(self.style.WARNING("Ledger already has entries; skipping sample postings."))
            return

        today = timezone.localdate()
        samples = [
            (TransactionType.EXPENSE, TransactionCategory.VEHICLE_PURCHASE, "12400.00", "5000", "loc1", "Auction purchase OR-1002", "OR-1002", 20),
            (TransactionType.EXPENSE, TransactionCategory.DETAILING, "350.00", "5100", "loc1", "Full detail OR-1002", "OR-1002", 15),
            (TransactionType.INCOME, TransactionCategory.VEHICLE_SALE, "16500.00", "4000", "loc1", "Sale of 2018 Toyota Corolla", None, 5),
            (TransactionType.EXPENSE, TransactionCategory.VEHICLE_PURCHASE, "29800.00", "5000", "loc2", "Trade-in acquisition OR-1003", "OR-1003", 12),
            (TransactionType.EXPENSE, TransactionCategory.REPAIR, "1850.00", "5100", "loc2", "Brake and suspension work OR-1003", "OR-1003", 8),
            (TransactionType.EXPENSE, TransactionCategory.UTILITIES, "640.00", "5300", "loc2", "Hydro and heating", None, 3),
        ]
        for entry_type, category, amount, code, loc_id, description, stock, days_ago in samples:
            record_entry(
                entry_type=entry_type,
                category=category,
                amount=Decimal(amount),
                account=accounts[code],
                location=locations[loc_id],
                description=description,
                posting_date=today - datetime.timedelta(days=days_ago),
                vehicle=vehicles.get(stock),
                user=admin,
            )

        issue_invoice(
            "Jane Doe", Decimal("16500.00"), date=today - datetime.timedelta(days=5),
            status=InvoiceStatus.PAID, location=locations["loc1"], vehicle=vehicles["OR-1002"], user=admin,
        )
        issue_invoice(
            "Fleet Rentals Inc.", Decimal("4200.00"), date=today - datetime.timedelta(days=45),
            due_date=today - datetime.timedelta(days=15), status=InvoiceStatus.OVERDUE,
            location=locations["loc2"], user=admin,
        )
        issue_invoice("Sam Patel", Decimal("1250.00"), location=locations["loc1"], user=admin)

        self.stdout.write(self.style.SUCCESS("Dealership data seeded successfully!"))
