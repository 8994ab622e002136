import functools
import logging

from django.core.exceptions import ValidationError
from django.http import HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404
from django.utils.dateparse import parse_date
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .exceptions import DuplicateIdError, EntryNotFoundError, InvalidStateError
from .managers import ALL_BRANCHES
from .models import Account, InternalTransfer, Invoice, Location, Vehicle
from .permissions import back_office_required
from .services import (ExportFormat, asset_valuation, branch_income_breakdown,
                       create_transfer, export_filename, income_expense_profit,
                       issue_invoice, late_entries, mark_invoice_paid, post_transfer,
                       query_entries, receivables_aging, receivables_stats,
                       record_entry, render_export, search_invoices,
                       vehicle_cost_analysis, void_entry)

logger = logging.getLogger(__name__)


def ledger_errors(view):
    """Turn core errors into JSON the front end can show to the user."""

    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except ValidationError as e:
            detail = e.message_dict if hasattr(e, "error_dict") else e.messages
            return JsonResponse({"ok": False, "error": detail}, status=400)
        except EntryNotFoundError as e:
            return JsonResponse({"ok": False, "error": str(e)}, status=404)
        except (DuplicateIdError, InvalidStateError) as e:
            return JsonResponse({"ok": False, "error": str(e)}, status=409)

    return wrapper


# ---------- serializers ----------
def entry_to_dict(entry):
    return {
        "id": entry.entry_id,
        "posting_date": entry.posting_date.isoformat(),
        "system_entry_date": entry.system_entry_date.isoformat(),
        "invoice_date": entry.invoice_date.isoformat() if entry.invoice_date else None,
        "period": entry.period,
        "type": entry.entry_type,
        "category": entry.category,
        "amount": str(entry.amount),
        "tax_amount": str(entry.tax_amount),
        "description": entry.description,
        "account_code": entry.account.code,
        "location_id": entry.location_id,
        "correlation_id": entry.correlation_id,
        "late_entry": entry.is_late_entry,
    }


def transfer_to_dict(transfer):
    return {
        "id": transfer.transfer_id,
        "date": transfer.date.isoformat(),
        "source": transfer.source_account.code,
        "destination": transfer.destination_account.code,
        "amount": str(transfer.amount),
        "currency": transfer.currency,
        "reference": transfer.reference,
        "status": transfer.status,
        "correlation_id": transfer.correlation_id,
    }


def invoice_to_dict(invoice):
    return {
        "id": invoice.invoice_number,
        "customer_name": invoice.customer_name,
        "date": invoice.date.isoformat(),
        "due_date": invoice.due_date.isoformat(),
        "amount": str(invoice.amount),
        "status": invoice.status,
        "location_id": invoice.location_id,
    }


def _date_field(value, field):
    if not value:
        return None
    try:
        parsed = parse_date(value)
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError({field: f"Invalid date {value!r}."})
    return parsed


def _account_from_code(code, field):
    try:
        return Account.objects.get(code=code)
    except Account.DoesNotExist:
        raise ValidationError({field: f"Unknown account {code!r}."})


# ---------- dashboard ----------
@require_GET
@back_office_required
def summary_view(request):
    branch = request.branch
    profit = income_expense_profit(branch)
    ar = receivables_stats(branch)
    data = {
        "branch": branch,
        "income": str(profit.income),
        "expense": str(profit.expense),
        "profit": str(profit.profit),
        # not branch scoped
        "assets": str(asset_valuation()),
        "receivables": {
            "total": str(ar.total),
            "outstanding": str(ar.outstanding),
            "overdue": str(ar.overdue),
            "collection_efficiency": ar.collection_efficiency,
            "aging": {label: str(amount) for label, amount in receivables_aging(branch=branch).items()},
        },
        "late_entries": len(late_entries(branch)),
    }
    if branch == ALL_BRANCHES:
        data["branches"] = [
            {"id": row.location.pk, "name": row.location.name, "income": str(row.income)}
            for row in branch_income_breakdown()
        ]
    return JsonResponse(data)


@require_POST
@back_office_required
def select_branch_view(request):
    # Remembered for the rest of the session
    branch = request.POST.get("branch") or ALL_BRANCHES
    if branch != ALL_BRANCHES and not Location.objects.filter(pk=branch).exists():
        return JsonResponse({"ok": False, "error": f"Unknown branch {branch!r}."}, status=400)
    request.session["active_branch_id"] = branch
    return JsonResponse({"ok": True, "branch": branch})


# ---------- ledger ----------
@require_http_methods(["GET", "POST"])
@back_office_required
@ledger_errors
def entries_view(request):
    if request.method == "POST":
        data = request.POST
        branch = data.get("location") or request.branch
        if branch == ALL_BRANCHES:
            raise ValidationError({"location": "Pick a branch for the entry."})
        vehicle = None
        if data.get("vehicle"):
            vehicle = Vehicle.objects.filter(stock_number=data["vehicle"]).first()
            if vehicle is None:
                raise ValidationError({"vehicle": f"Unknown vehicle {data['vehicle']!r}."})
        location = Location.objects.filter(pk=branch).first()
        if location is None:
            raise ValidationError({"location": f"Unknown branch {branch!r}."})

        entry = record_entry(
            entry_type=data.get("type", ""),
            category=data.get("category", ""),
            amount=data.get("amount"),
            account=_account_from_code(data.get("account_code"), "account_code"),
            location=location,
            description=data.get("description", ""),
            posting_date=_date_field(data.get("posting_date"), "posting_date"),
            invoice_date=_date_field(data.get("invoice_date"), "invoice_date"),
            tax_amount=data.get("tax_amount") or 0,
            vehicle=vehicle,
            payment_method=data.get("payment_method", ""),
            credit_source=data.get("credit_source", ""),
            payment_detail=data.get("payment_detail", ""),
            user=request.user,
        )
        return JsonResponse({"ok": True, "entry": entry_to_dict(entry)}, status=201)

    entries = query_entries(
        branch=request.branch,
        search=request.GET.get("search", ""),
        entry_type=request.GET.get("type") or None,
        category=request.GET.get("category") or None,
    )
    return JsonResponse({"entries": [entry_to_dict(e) for e in entries]})


@require_POST
@back_office_required
@ledger_errors
def void_entry_view(request, entry_id):
    reversal = void_entry(entry_id, user=request.user, reason=request.POST.get("reason", ""))
    return JsonResponse(
        {"ok": True, "voided": entry_id, "reversal": reversal.entry_id if reversal else None}
    )


@require_GET
@back_office_required
def export_view(request):
    fmt = request.GET.get("fmt", ExportFormat.EXCEL)
    if fmt not in ExportFormat.CHOICES:
        return JsonResponse({"ok": False, "error": f"Unsupported format {fmt!r}."}, status=400)

    # Same rows, same order as the audit trail on screen
    entries = query_entries(
        branch=request.branch,
        search=request.GET.get("search", ""),
        entry_type=request.GET.get("type") or None,
        category=request.GET.get("category") or None,
    )
    response = HttpResponse(render_export(entries, fmt), content_type=ExportFormat.CONTENT_TYPES[fmt])
    response["Content-Disposition"] = f'attachment; filename="{export_filename(request.branch, fmt)}"'
    logger.info("Exported %s audit trail for %s", fmt, request.branch)
    return response


# ---------- transfers ----------
@require_http_methods(["GET", "POST"])
@back_office_required
@ledger_errors
def transfers_view(request):
    if request.method == "POST":
        transfer = create_transfer(
            _account_from_code(request.POST.get("source"), "source"),
            _account_from_code(request.POST.get("destination"), "destination"),
            request.POST.get("amount"),
            reference=request.POST.get("reference", ""),
            user=request.user,
        )
        return JsonResponse({"ok": True, "transfer": transfer_to_dict(transfer)}, status=201)

    transfers = InternalTransfer.objects.select_related("source_account", "destination_account")
    return JsonResponse({"transfers": [transfer_to_dict(t) for t in transfers]})


@require_POST
@back_office_required
@ledger_errors
def post_transfer_view(request, transfer_id):
    transfer = get_object_or_404(InternalTransfer, transfer_id=transfer_id)
    transfer = post_transfer(transfer, branch=request.branch, user=request.user)
    return JsonResponse({"ok": True, "transfer": transfer_to_dict(transfer)})


# ---------- receivables ----------
@require_http_methods(["GET", "POST"])
@back_office_required
@ledger_errors
def invoices_view(request):
    if request.method == "POST":
        location = None
        if request.branch != ALL_BRANCHES:
            location = Location.objects.get(pk=request.branch)
        invoice = issue_invoice(
            customer_name=request.POST.get("customer_name", ""),
            amount=request.POST.get("amount"),
            date=_date_field(request.POST.get("date"), "date"),
            due_date=_date_field(request.POST.get("due_date"), "due_date"),
            location=location,
            notes=request.POST.get("notes", ""),
            user=request.user,
        )
        return JsonResponse({"ok": True, "invoice": invoice_to_dict(invoice)}, status=201)

    invoices = search_invoices(request.GET.get("search", ""), branch=request.branch)
    return JsonResponse({"invoices": [invoice_to_dict(inv) for inv in invoices]})


@require_POST
@back_office_required
@ledger_errors
def pay_invoice_view(request, invoice_number):
    invoice = get_object_or_404(Invoice, invoice_number=invoice_number)
    invoice = mark_invoice_paid(invoice, user=request.user)
    return JsonResponse({"ok": True, "status": invoice.status})


# ---------- assets ----------
@require_GET
@back_office_required
def vehicle_costs_view(request):
    rows = vehicle_cost_analysis(request.branch, request.GET.get("search", ""))
    return JsonResponse(
        {
            "vehicles": [
                {
                    "stock_number": row.vehicle.stock_number,
                    "vehicle": str(row.vehicle),
                    "status": row.vehicle.status,
                    "price": str(row.vehicle.price),
                    "total_cost": str(row.total_cost),
                    "profit": str(row.profit) if row.profit is not None else None,
                }
                for row in rows
            ]
        }
    )


@require_GET
@back_office_required
def accounts_view(request):
    accounts = Account.objects.all()
    return JsonResponse(
        {
            "accounts": [
                {
                    "code": a.code,
                    "name": a.name,
                    "type": a.account_type,
                    "balance": str(a.balance),
                    "locked": a.is_locked,
                }
                for a in accounts
            ]
        }
    )
