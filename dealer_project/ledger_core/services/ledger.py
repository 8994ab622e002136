import logging
import string

from django.core.exceptions import ImproperlyConfigured
from django.db import transaction
from django.utils import timezone
from django.utils.crypto import get_random_string

from ..conf import ledger_setting
from ..exceptions import DuplicateIdError, EntryNotFoundError, InvalidStateError
from ..managers import ALL_BRANCHES
from ..models import LedgerEntry, TransactionType
from .audit_helper import log_action, snapshot

logger = logging.getLogger(__name__)

ID_CHARS = string.ascii_uppercase + string.digits
VOID_POLICIES = ("delete", "reverse")


def unique_id(prefix, model, field):
    """Random business id such as "TX-8K2M1Q", unused in model.field."""
    while True:
        candidate = f"{prefix}-{get_random_string(6, allowed_chars=ID_CHARS)}"
        if not model.objects.filter(**{field: candidate}).exists():
            return candidate


def ensure_unlocked():
    if ledger_setting("LOCKED"):
        logger.warning("Rejected ledger mutation: ledger is locked")
        raise InvalidStateError("The ledger is locked; no entries can be added or voided.")


# ------------------------------------
# Append
# ------------------------------------
def append_entry(entry: LedgerEntry, user=None) -> LedgerEntry:
    """
    Insert an unsaved LedgerEntry.
    - DuplicateIdError when entry_id is already in the ledger
    - ValidationError on missing/invalid fields (model full_clean)
    - period is recomputed from posting_date
    """
    ensure_unlocked()
    with transaction.atomic():
        if LedgerEntry.objects.filter(entry_id=entry.entry_id).exists():
            logger.warning("Rejected duplicate ledger entry %s", entry.entry_id)
            raise DuplicateIdError(f"Ledger entry {entry.entry_id} already exists.")

        entry.save(force_insert=True)
        log_action(
            action="append",
            instance=entry,
            user=user,
            object_id=entry.entry_id,
            changes={
                "type": entry.entry_type,
                "category": entry.category,
                "amount": str(entry.amount),
                "account": entry.account.code,
                "location": entry.location_id,
                "posting_date": entry.posting_date.isoformat(),
            },
        )

    logger.info(
        "Appended ledger entry %s",
        entry.entry_id,
        extra={"entry_id": entry.entry_id, "amount": str(entry.amount), "location": entry.location_id},
    )
    return entry


def record_entry(
    *,
    entry_type,
    category,
    amount,
    account,
    location,
    description,
    posting_date=None,
    invoice_date=None,
    tax_amount=0,
    vehicle=None,
    payment_method="",
    credit_source="",
    payment_detail="",
    user=None,
) -> LedgerEntry:
    """Manual journal entry: generates the id and the audit dates."""
    today = timezone.localdate()
    posting_date = posting_date or today

    entry = LedgerEntry(
        entry_id=unique_id("TX", LedgerEntry, "entry_id"),
        posting_date=posting_date,
        system_entry_date=today,  # always the day it was keyed in
        invoice_date=invoice_date or posting_date,
        entry_type=entry_type,
        category=category,
        amount=amount,
        tax_amount=tax_amount,
        description=description,
        account=account,
        location=location,
        vehicle=vehicle,
        payment_method=payment_method,
        credit_source=credit_source,
        payment_detail=payment_detail,
    )
    return append_entry(entry, user=user)


# ------------------------------------
# Void
# ------------------------------------
def void_entry(entry_id: str, user=None, reason: str = ""):
    """
    Void one entry according to LEDGER["VOID_POLICY"]:
        "delete"  -> the row is removed; its snapshot stays in the AuditLog
        "reverse" -> a compensating "<id>-REV" entry is appended
    Returns the reversal entry, or None for deletion.
    """
    policy = ledger_setting("VOID_POLICY")
    if policy not in VOID_POLICIES:
        raise ImproperlyConfigured(f"Unknown LEDGER VOID_POLICY {policy!r}")
    ensure_unlocked()

    with transaction.atomic():
        try:
            entry = (
                LedgerEntry.objects.select_for_update()
                .select_related("account")
                .get(entry_id=entry_id)
            )
        except LedgerEntry.DoesNotExist:
            logger.warning("Void requested for unknown ledger entry %s", entry_id)
            raise EntryNotFoundError(f"Ledger entry {entry_id} not found.")

        # A posted transfer must keep both of its legs
        if entry.transfer_id:
            logger.warning("Rejected void of transfer leg %s", entry_id)
            raise InvalidStateError(
                f"{entry_id} is a leg of transfer {entry.correlation_id}; it cannot be voided on its own."
            )

        if policy == "reverse":
            return _reverse_entry(entry, user=user, reason=reason)

        data = snapshot(entry)
        entry.delete()
        log_action(
            action="void",
            instance=entry,
            user=user,
            object_id=entry_id,
            changes={"policy": policy, "reason": reason, "entry": data},
        )

    logger.info("Voided ledger entry %s (deleted)", entry_id, extra={"entry_id": entry_id})
    return None


def _reverse_entry(entry, user=None, reason=""):
    reversal_id = f"{entry.entry_id}-REV"
    if LedgerEntry.objects.filter(entry_id=reversal_id).exists():
        logger.warning("Rejected second reversal of %s", entry.entry_id)
        raise InvalidStateError(f"Ledger entry {entry.entry_id} has already been reversed.")

    today = timezone.localdate()
    opposite = (
        TransactionType.EXPENSE
        if entry.entry_type == TransactionType.INCOME
        else TransactionType.INCOME
    )
    reversal = LedgerEntry(
        entry_id=reversal_id,
        posting_date=today,
        system_entry_date=today,
        invoice_date=entry.invoice_date,
        entry_type=opposite,
        category=entry.category,
        amount=entry.amount,
        tax_amount=entry.tax_amount,
        description=f"Reversal of {entry.entry_id}: {entry.description}"[:255],
        account=entry.account,
        location_id=entry.location_id,
        vehicle_id=entry.vehicle_id,
        correlation_id=entry.entry_id,
    )
    append_entry(reversal, user=user)
    log_action(
        action="reverse",
        instance=entry,
        user=user,
        object_id=entry.entry_id,
        changes={"policy": "reverse", "reason": reason, "reversal": reversal_id},
    )
    logger.info("Voided ledger entry %s (reversed by %s)", entry.entry_id, reversal_id)
    return reversal


# ------------------------------------
# Read side
# ------------------------------------
def query_entries(branch=ALL_BRANCHES, search="", entry_type=None, category=None):
    """
    Conjunction of optional filters; newest posting date first,
    insertion order on equal dates.
    """
    qs = LedgerEntry.objects.for_branch(branch).search(search)
    if entry_type:
        qs = qs.filter(entry_type=entry_type)
    if category:
        qs = qs.filter(category=category)
    return qs.select_related("account", "location").order_by("-posting_date", "id")


def late_entries(branch=ALL_BRANCHES):
    """Entries keyed in a later month than the period they post to."""
    return [entry for entry in query_entries(branch) if entry.is_late_entry]
