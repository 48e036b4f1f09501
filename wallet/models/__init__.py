"""
Data Models Package

This package contains all Pydantic models used by the wallet ledger.
All data owned by the ledger must conform to these schemas.
"""

from wallet.models.account import (
    Account,
    Favorite,
    Money,
    Payment,
    PaymentCategory,
    PaymentStatus,
    Phone,
)
from wallet.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "Account",
    "Favorite",
    "Money",
    "Payment",
    "PaymentCategory",
    "PaymentStatus",
    "Phone",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
