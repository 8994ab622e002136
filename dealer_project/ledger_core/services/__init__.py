from .audit_helper import log_action, snapshot
from .exports import (EXPORT_COLUMNS, ExportFormat, export_filename,
                      export_rows, export_to_csv, export_to_excel,
                      render_export)
from .ledger import (append_entry, late_entries, query_entries, record_entry,
                     unique_id, void_entry)
from .receivables import issue_invoice, mark_invoice_paid, search_invoices
from .reporting import (BranchIncome, ProfitSummary, ReceivablesStats,
                        VehicleCost, asset_valuation, branch_income_breakdown,
                        income_expense_profit, receivables_aging,
                        receivables_stats, vehicle_cost_analysis)
from .transfers import create_transfer, post_transfer, posting_location
from .validation import validate_transfer
