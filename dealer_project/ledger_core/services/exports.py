"""
Audit trail export.
One row per ledger entry, in the order given (query order).
CSV output is byte-for-byte reproducible from the same rows.
"""
import csv
import io

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Font

from ..managers import ALL_BRANCHES


class ExportFormat:
    EXCEL = "xlsx"
    CSV = "csv"

    CHOICES = [EXCEL, CSV]
    CONTENT_TYPES = {
        EXCEL: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        CSV: "text/csv",
    }


EXPORT_COLUMNS = [
    "ID",
    "PostingDate",
    "SystemEntryDate",
    "Description",
    "Category",
    "Type",
    "Amount",
    "Branch",
    "AccountCode",
]

SHEET_NAME = "AuditTrail"


def export_rows(entries) -> list[dict]:
    rows = []
    for entry in entries:
        rows.append(
            {
                "ID": entry.entry_id,
                "PostingDate": entry.posting_date.isoformat(),
                "SystemEntryDate": entry.system_entry_date.isoformat(),
                "Description": entry.description,
                "Category": str(entry.category),
                "Type": str(entry.entry_type),
                "Amount": entry.amount,
                "Branch": entry.location_id,
                "AccountCode": entry.account.code,
            }
        )
    return rows


def export_to_csv(entries) -> str:
    output = io.StringIO()
    # fixed line terminator keeps output identical across platforms
    writer = csv.DictWriter(output, fieldnames=EXPORT_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for row in export_rows(entries):
        writer.writerow({**row, "Amount": f"{row['Amount']:.2f}"})
    return output.getvalue()


def export_to_excel(entries) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_NAME

    ws.append(EXPORT_COLUMNS)
    for cell in ws[1]:
        cell.font = Font(bold=True)

    for row in export_rows(entries):
        ws.append([row[column] for column in EXPORT_COLUMNS])

    # Amount column as currency
    for (cell,) in ws.iter_rows(min_row=2, min_col=7, max_col=7):
        cell.number_format = "#,##0.00"

    ws.freeze_panes = "A2"

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def export_filename(branch=ALL_BRANCHES, fmt=ExportFormat.CSV, today=None) -> str:
    """Audit_<branch>_<YYYY-MM-DD>.<fmt>"""
    today = today or timezone.localdate()
    return f"Audit_{branch or ALL_BRANCHES}_{today.isoformat()}.{fmt}"


def render_export(entries, fmt) -> bytes:
    if fmt == ExportFormat.CSV:
        return export_to_csv(entries).encode("utf-8")
    if fmt == ExportFormat.EXCEL:
        return export_to_excel(entries)
    raise ValueError(f"Unsupported export format {fmt!r}")
