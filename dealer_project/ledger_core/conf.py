from django.conf import settings

# Fallbacks for keys missing from settings.LEDGER
DEFAULTS = {
    "CURRENCY": "CAD",
    "DEFAULT_BRANCH": "loc1",
    "VOID_POLICY": "delete",
    "LOCKED": False,
    "ALLOW_SAME_ACCOUNT_TRANSFERS": True,
    "EXPORT_DIR": "exports",
}


def ledger_setting(name):
    """Read one switch from settings.LEDGER."""
    return getattr(settings, "LEDGER", {}).get(name, DEFAULTS[name])
