from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

from ..exceptions import InvalidStateError
from ..managers import ALL_BRANCHES
from ..services import mark_invoice_paid, post_transfer

# ---------- Admin actions ----------


@admin.action(description="Post selected transfers")
def post_transfers(modeladmin, request, queryset):
    """
    Post each selected Pending transfer through the transfer service.
    Each transfer is posted in its own transaction; one failure does not
    stop the batch.
    """
    branch = getattr(request, "branch", ALL_BRANCHES)
    success = 0
    failures = 0

    for transfer in queryset:
        try:
            post_transfer(transfer, branch=branch, user=request.user)
            success += 1
        except (ValidationError, InvalidStateError) as exc:
            failures += 1
            modeladmin.message_user(
                request,
                _("Could not post transfer %(id)s: %(err)s") % {"id": transfer.transfer_id, "err": exc},
                level=messages.ERROR,
            )

    # Final summary message
    modeladmin.message_user(
        request,
        _("Posted %(success)d of %(total)d transfers.") % {
            "success": success,
            "total": success + failures,
        },
        level=messages.SUCCESS if failures == 0 else messages.WARNING,
    )


""" Enforce the invoice status rules instead of letting admins edit status """


@admin.action(description="Mark selected invoices as Paid")
def mark_invoices_paid(modeladmin, request, queryset):
    for invoice in queryset:
        try:
            mark_invoice_paid(invoice, user=request.user)
        except InvalidStateError as e:
            modeladmin.message_user(request, f"{invoice}: {e}", level=messages.ERROR)
