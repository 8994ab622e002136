import logging
from pathlib import Path

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task  # register this function as a Celery task
def export_ledger_snapshot(branch="all", search="", fmt="csv"):
    """Write the filtered audit trail to LEDGER["EXPORT_DIR"]; returns the file path."""
    # import lazily to avoid circular imports at module import time
    from .conf import ledger_setting
    from .services import export_filename, query_entries, render_export

    entries = query_entries(branch=branch, search=search)
    content = render_export(entries, fmt)

    export_dir = Path(ledger_setting("EXPORT_DIR"))
    export_dir.mkdir(parents=True, exist_ok=True)
    path = export_dir / export_filename(branch, fmt)
    path.write_bytes(content)

    logger.info("Exported audit trail for %s to %s", branch, path)
    return str(path)
