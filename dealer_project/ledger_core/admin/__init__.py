from .account import AccountAdmin, LocationAdmin, VehicleAdmin
from .actions import mark_invoices_paid, post_transfers
from .auditlog import AuditLogAdmin
from .forms import UserAdminChangeForm, UserAdminCreationForm
from .invoice import InvoiceAdmin
from .ledger import LedgerEntryAdmin
from .mixins import BranchAdminMixin
from .transfer import InternalTransferAdmin
from .user import UserAdmin
