"""
Temple Billing - SQLAlchemy models
Imported here so Base.metadata (and alembic) sees every table
"""

from temple_billing.models.user import User
from temple_billing.models.pooja import Pooja
from temple_billing.models.billing import Billing
from temple_billing.models.receipt_counter import ReceiptCounter
from temple_billing.models.withdrawal import Withdrawal
from temple_billing.models.expense import Expense
from temple_billing.models.audit_log import AuditLog

__all__ = [
    "User",
    "Pooja",
    "Billing",
    "ReceiptCounter",
    "Withdrawal",
    "Expense",
    "AuditLog",
]
