from .account import Account, AccountType
from .auditlog import AuditLog
from .invoice import Invoice, InvoiceStatus
from .ledger import (CreditSource, LedgerEntry, PaymentMethod,
                     TransactionCategory, TransactionType)
from .location import Location
from .transfer import InternalTransfer, TransferStatus
from .user import User
from .vehicle import Vehicle, VehicleStatus
