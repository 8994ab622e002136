class DuplicateIdError(Exception):
    """Raised when a ledger entry is appended with an id that already exists."""
    pass


class InvalidStateError(Exception):
    """Raised when a mutation is not allowed from the object's current state
    (posting a posted transfer, paying a paid invoice, editing a ledger row)."""
    pass


class EntryNotFoundError(Exception):
    """Raised when voiding a ledger entry id that is not in the ledger."""
    pass
