from django.forms.models import model_to_dict

from ..models import AuditLog


def log_action(*, action: str, instance, user=None, object_id=None, changes: dict | None = None):
    """
    Central audit logger.
    Runs inside the caller's transaction, so a rolled back mutation
    leaves no audit row behind.
    """
    # Anonymous or missing users are recorded as system actions
    if user is not None and not getattr(user, "is_authenticated", False):
        user = None

    return AuditLog.objects.create(
        user=user,
        action=action,
        object_type=instance.__class__.__name__,
        object_id=str(object_id or instance.pk),
        changes=changes,
    )


def snapshot(instance) -> dict:
    """JSON-safe copy of every field of a row."""
    data = model_to_dict(instance)
    return {key: (str(value) if value is not None else None) for key, value in data.items()}
