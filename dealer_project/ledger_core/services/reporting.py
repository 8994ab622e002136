"""
Read-side projections. Every figure is recomputed from the current
rows on each call; nothing is cached.
"""
import datetime
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from django.db.models import Q, Sum
from django.utils import timezone

from ..managers import ALL_BRANCHES
from ..models import (Account, AccountType, Invoice, InvoiceStatus,
                      LedgerEntry, Location, TransactionType, Vehicle,
                      VehicleStatus)

ZERO = Decimal("0.00")

# (label, lowest days past due, highest days past due)
AGING_BUCKETS = (
    ("current", None, 0),
    ("1-30", 1, 30),
    ("31-60", 31, 60),
    ("61-90", 61, 90),
    ("90+", 91, None),
)


@dataclass(frozen=True)
class ProfitSummary:
    income: Decimal
    expense: Decimal
    profit: Decimal


@dataclass(frozen=True)
class ReceivablesStats:
    total: Decimal
    outstanding: Decimal
    overdue: Decimal
    collection_efficiency: int  # whole percent


@dataclass(frozen=True)
class VehicleCost:
    vehicle: Vehicle
    total_cost: Decimal
    profit: Optional[Decimal]  # None until the vehicle is sold


@dataclass(frozen=True)
class BranchIncome:
    location: Location
    income: Decimal


def _money(value) -> Decimal:
    # SQLite hands back sums without the column scale
    return (value or ZERO).quantize(ZERO)


def income_expense_profit(branch=ALL_BRANCHES) -> ProfitSummary:
    totals = (
        LedgerEntry.objects.for_branch(branch)
        .excluding_transfers()
        .aggregate(
            income=Sum("amount", filter=Q(entry_type=TransactionType.INCOME)),
            expense=Sum("amount", filter=Q(entry_type=TransactionType.EXPENSE)),
        )
    )
    # If nothing was posted, Django returns None → fall back to 0
    income = _money(totals["income"])
    expense = _money(totals["expense"])
    return ProfitSummary(income=income, expense=expense, profit=income - expense)


def asset_valuation() -> Decimal:
    """Sum of Asset account balances.

    Account balances are company-wide, so no branch scope applies here
    even though the ledger figures next to it are branch scoped.
    """
    total = Account.objects.filter(account_type=AccountType.ASSET).aggregate(
        total=Sum("balance")
    )["total"]
    return _money(total)


def receivables_stats(branch=ALL_BRANCHES) -> ReceivablesStats:
    totals = Invoice.objects.for_branch(branch).aggregate(
        total=Sum("amount"),
        outstanding=Sum("amount", filter=~Q(status=InvoiceStatus.PAID)),
        overdue=Sum("amount", filter=Q(status=InvoiceStatus.OVERDUE)),
    )
    total = _money(totals["total"])
    outstanding = _money(totals["outstanding"])
    overdue = _money(totals["overdue"])

    # Nothing billed means nothing left to collect
    if total == 0:
        efficiency = 100
    else:
        ratio = (total - outstanding) / total * 100
        efficiency = int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    return ReceivablesStats(
        total=total,
        outstanding=outstanding,
        overdue=overdue,
        collection_efficiency=efficiency,
    )


def receivables_aging(as_of: Optional[datetime.date] = None, branch=ALL_BRANCHES) -> dict:
    """Outstanding amounts bucketed by days past due."""
    as_of = as_of or timezone.localdate()
    buckets = {label: ZERO for label, _low, _high in AGING_BUCKETS}

    outstanding = Invoice.objects.for_branch(branch).exclude(status=InvoiceStatus.PAID)
    for invoice in outstanding:
        days = invoice.days_past_due(as_of)
        for label, low, high in AGING_BUCKETS:
            if (low is None or days >= low) and (high is None or days <= high):
                buckets[label] += _money(invoice.amount)
                break
    return buckets


def vehicle_cost_analysis(branch=ALL_BRANCHES, search="") -> list[VehicleCost]:
    """
    Per vehicle in scope: every ledger entry referencing it counts toward
    total_cost, whatever branch the entry was booked at.
    """
    vehicles = Vehicle.objects.for_branch(branch)
    if search:
        term = search.lower()
        vehicles = [
            v for v in vehicles
            if term in f"{v.make} {v.model}".lower() or term in v.vin.lower()
        ]

    costs = dict(
        LedgerEntry.objects.filter(vehicle__isnull=False)
        .order_by()
        .values("vehicle_id")
        .annotate(total=Sum("amount"))
        .values_list("vehicle_id", "total")
    )

    results = []
    for vehicle in vehicles:
        total_cost = _money(costs.get(vehicle.pk))
        profit = vehicle.price - total_cost if vehicle.status == VehicleStatus.SOLD else None
        results.append(VehicleCost(vehicle=vehicle, total_cost=total_cost, profit=profit))
    return results


def branch_income_breakdown() -> list[BranchIncome]:
    """Income booked at each location, transfer legs included."""
    rows = Location.objects.annotate(
        income=Sum("entries__amount", filter=Q(entries__entry_type=TransactionType.INCOME))
    ).order_by("id")
    return [BranchIncome(location=loc, income=_money(loc.income)) for loc in rows]
