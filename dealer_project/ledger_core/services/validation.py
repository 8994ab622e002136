from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError

from ..conf import ledger_setting

CENT = Decimal("0.01")


# -----------------------------------------
# Transfer rules
# -----------------------------------------
def validate_transfer(source, destination, amount) -> Decimal:
    """
    Check a transfer request and return the amount as a 2dp Decimal.

    Only a positive amount is required. Source and destination may be the
    same account unless LEDGER["ALLOW_SAME_ACCOUNT_TRANSFERS"] is off.
    """
    try:
        amount = Decimal(str(amount))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({"amount": "Transfer amount must be a number."})

    if not amount.is_finite():
        raise ValidationError({"amount": "Transfer amount must be a number."})
    try:
        amount = amount.quantize(CENT)
    except InvalidOperation:
        # more digits than the decimal context can hold
        raise ValidationError({"amount": "Transfer amount is too large."})
    if amount <= 0:
        raise ValidationError({"amount": "Transfer amount must be positive."})

    if source is None or destination is None:
        raise ValidationError("A transfer needs both a source and a destination account.")

    if source == destination and not ledger_setting("ALLOW_SAME_ACCOUNT_TRANSFERS"):
        raise ValidationError("Source and destination accounts must differ.")

    return amount
