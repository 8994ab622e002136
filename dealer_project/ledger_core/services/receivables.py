import datetime
import logging

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from ..exceptions import InvalidStateError
from ..managers import ALL_BRANCHES
from ..models import Invoice, InvoiceStatus
from .audit_helper import log_action
from .ledger import unique_id

logger = logging.getLogger(__name__)

# Net terms used when no due date is given
DEFAULT_TERMS_DAYS = 30


def issue_invoice(
    customer_name,
    amount,
    date=None,
    due_date=None,
    tax_amount=0,
    status=InvoiceStatus.PENDING,
    location=None,
    vehicle=None,
    notes="",
    user=None,
) -> Invoice:
    date = date or timezone.localdate()
    due_date = due_date or date + datetime.timedelta(days=DEFAULT_TERMS_DAYS)

    with transaction.atomic():
        invoice = Invoice.objects.create(
            invoice_number=unique_id("INV", Invoice, "invoice_number"),
            customer_name=customer_name,
            date=date,
            due_date=due_date,
            amount=amount,
            tax_amount=tax_amount,
            status=status,
            location=location,
            vehicle=vehicle,
            notes=notes,
        )
        log_action(
            action="create",
            instance=invoice,
            user=user,
            object_id=invoice.invoice_number,
            changes={"customer": customer_name, "amount": str(invoice.amount), "status": invoice.status},
        )
    logger.info("Issued invoice %s to %s", invoice.invoice_number, customer_name)
    return invoice


def mark_invoice_paid(invoice: Invoice, user=None) -> Invoice:
    """
    Pending/Overdue -> Paid. Raises InvalidStateError when already Paid.
    No ledger entry is emitted; cash receipts are journaled by hand.
    """
    with transaction.atomic():
        locked = Invoice.objects.select_for_update().get(pk=invoice.pk)
        previous = locked.status
        try:
            locked.transition_to(InvoiceStatus.PAID)
        except InvalidStateError:
            logger.warning("Rejected payment of invoice %s (status %s)", locked.invoice_number, previous)
            raise
        log_action(
            action="paid",
            instance=locked,
            user=user,
            object_id=locked.invoice_number,
            changes={"from": previous, "to": locked.status},
        )

    logger.info("Invoice %s marked paid", locked.invoice_number)
    invoice.refresh_from_db()
    return locked


def search_invoices(search="", branch=ALL_BRANCHES):
    """Customer name or invoice number match, newest first."""
    qs = Invoice.objects.for_branch(branch)
    if search:
        qs = qs.filter(Q(customer_name__icontains=search) | Q(invoice_number__icontains=search))
    return qs.select_related("location", "vehicle")
