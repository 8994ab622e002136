import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from ..conf import ledger_setting
from ..exceptions import InvalidStateError
from ..managers import ALL_BRANCHES
from ..models import (InternalTransfer, LedgerEntry, Location,
                      TransactionCategory, TransactionType, TransferStatus)
from .audit_helper import log_action
from .ledger import append_entry, ensure_unlocked, unique_id
from .validation import validate_transfer

logger = logging.getLogger(__name__)


def create_transfer(source, destination, amount, reference="", user=None) -> InternalTransfer:
    """New Pending transfer dated today. Nothing reaches the ledger yet."""
    amount = validate_transfer(source, destination, amount)

    with transaction.atomic():
        transfer = InternalTransfer.objects.create(
            transfer_id=unique_id("IT", InternalTransfer, "transfer_id"),
            date=timezone.localdate(),
            source_account=source,
            destination_account=destination,
            amount=amount,
            currency=ledger_setting("CURRENCY"),
            reference=reference or "",
            status=TransferStatus.PENDING,
            created_by=user if getattr(user, "is_authenticated", False) else None,
        )
        log_action(
            action="create",
            instance=transfer,
            user=user,
            object_id=transfer.transfer_id,
            changes={
                "source": source.code,
                "destination": destination.code,
                "amount": str(amount),
                "reference": transfer.reference,
            },
        )

    logger.info(
        "Created transfer %s %s -> %s %s",
        transfer.transfer_id, source.code, destination.code, amount,
    )
    return transfer


def posting_location(branch) -> Location:
    """Branch that receives the legs: the scoped branch,
    or LEDGER["DEFAULT_BRANCH"] from the consolidated view."""
    branch_id = branch
    if branch in (None, "", ALL_BRANCHES):
        branch_id = ledger_setting("DEFAULT_BRANCH")
    try:
        return Location.objects.get(pk=branch_id)
    except Location.DoesNotExist:
        raise ValidationError(f"Unknown branch {branch_id!r}.")


def post_transfer(transfer: InternalTransfer, branch=ALL_BRANCHES, user=None) -> InternalTransfer:
    """
    Pending -> Posted. In one database transaction:
    - one TRF-XXXXXX correlation id is generated
    - "<id>-A": Expense leg on the source account ("Transfer Out")
    - "<id>-B": Income leg on the destination account ("Transfer In")
    - the transfer flips to Posted
    Either all of it is written or none of it.
    """
    ensure_unlocked()

    with transaction.atomic():
        # re-load & lock the row so two posts cannot interleave
        locked = (
            InternalTransfer.objects.select_for_update()
            .select_related("source_account", "destination_account")
            .get(pk=transfer.pk)
        )
        if locked.status != TransferStatus.PENDING:
            logger.warning("Rejected re-post of transfer %s", locked.transfer_id)
            raise InvalidStateError(f"Transfer {locked.transfer_id} is already {locked.status}.")

        location = posting_location(branch)
        today = timezone.localdate()
        correlation_id = unique_id("TRF", InternalTransfer, "correlation_id")

        legs = (
            (
                "A",
                TransactionType.EXPENSE,
                locked.source_account,
                f"Transfer Out [Ref: {locked.reference}]",
            ),
            (
                "B",
                TransactionType.INCOME,
                locked.destination_account,
                f"Transfer In [Ref: {locked.reference}]",
            ),
        )
        for suffix, entry_type, account, description in legs:
            append_entry(
                LedgerEntry(
                    entry_id=f"{correlation_id}-{suffix}",
                    posting_date=today,
                    system_entry_date=today,
                    invoice_date=today,
                    entry_type=entry_type,
                    category=TransactionCategory.TRANSFER,
                    amount=locked.amount,
                    tax_amount=0,
                    description=description,
                    account=account,
                    location=location,
                    transfer=locked,
                    correlation_id=correlation_id,
                ),
                user=user,
            )

        locked.correlation_id = correlation_id
        locked.posted_at = timezone.now()
        locked.transition_to(TransferStatus.POSTED)
        log_action(
            action="post",
            instance=locked,
            user=user,
            object_id=locked.transfer_id,
            changes={"correlation_id": correlation_id, "location": location.pk},
        )

    logger.info(
        "Posted transfer %s as %s",
        locked.transfer_id,
        correlation_id,
        extra={"transfer_id": locked.transfer_id, "location": location.pk},
    )
    # keep the caller's instance in step with the database
    transfer.refresh_from_db()
    return locked
