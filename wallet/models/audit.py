"""
Audit Models for the Wallet Ledger

Every balance-changing action in the ledger is recorded as an event.
This provides:
1. Traceability of every debit and credit
2. Debugging information when an operation is refused
3. A history that can be inspected after the fact

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Accounts
    ACCOUNT_REGISTERED = "account_registered"
    ACCOUNT_DEPOSITED = "account_deposited"

    # Payments
    PAYMENT_CREATED = "payment_created"
    PAYMENT_REJECTED = "payment_rejected"
    PAYMENT_REPEATED = "payment_repeated"

    # Favorites
    FAVORITE_CREATED = "favorite_created"
    FAVORITE_PAID = "favorite_paid"

    # Persistence
    ACCOUNTS_EXPORTED = "accounts_exported"
    ACCOUNTS_IMPORTED = "accounts_imported"

    # Failures
    OPERATION_FAILED = "operation_failed"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of the audit trail.
    Every successful mutation and every refused operation creates one.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'payment', 'favorite')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.account_registered(account_id, phone)
        event = AuditEventBuilder.payment_rejected(payment_id, account_id, amount)
    """

    @staticmethod
    def account_registered(account_id: int, phone: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_REGISTERED,
            entity_type="account",
            entity_id=str(account_id),
            description=f"Account registered: {phone}",
            details={"phone": phone},
        )

    @staticmethod
    def account_deposited(account_id: int, amount: int, balance: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_DEPOSITED,
            entity_type="account",
            entity_id=str(account_id),
            description=f"Deposited {amount} into account {account_id}",
            details={"amount": amount, "balance": balance},
        )

    @staticmethod
    def payment_created(
        payment_id: str,
        account_id: int,
        amount: int,
        category: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_CREATED,
            entity_type="payment",
            entity_id=payment_id,
            description=f"Payment of {amount} from account {account_id} ({category})",
            details={
                "account_id": account_id,
                "amount": amount,
                "category": category,
            },
        )

    @staticmethod
    def payment_rejected(payment_id: str, account_id: int, amount: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_REJECTED,
            entity_type="payment",
            entity_id=payment_id,
            description=f"Payment rejected, {amount} refunded to account {account_id}",
            details={"account_id": account_id, "refunded": amount},
        )

    @staticmethod
    def payment_repeated(payment_id: str, source_payment_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PAYMENT_REPEATED,
            entity_type="payment",
            entity_id=payment_id,
            description=f"Payment repeated from {source_payment_id}",
            details={"source_payment_id": source_payment_id},
        )

    @staticmethod
    def favorite_created(favorite_id: str, payment_id: str, name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FAVORITE_CREATED,
            entity_type="favorite",
            entity_id=favorite_id,
            description=f"Favorite '{name}' created from payment {payment_id}",
            details={"payment_id": payment_id, "name": name},
        )

    @staticmethod
    def favorite_paid(favorite_id: str, payment_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FAVORITE_PAID,
            entity_type="favorite",
            entity_id=favorite_id,
            description=f"Favorite paid as payment {payment_id}",
            details={"payment_id": payment_id},
        )

    @staticmethod
    def accounts_exported(path: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_EXPORTED,
            entity_type="file",
            entity_id=path,
            description=f"Exported {count} accounts",
            details={"path": path, "count": count},
        )

    @staticmethod
    def accounts_imported(path: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_IMPORTED,
            entity_type="file",
            entity_id=path,
            description=f"Imported {count} accounts",
            details={"path": path, "count": count},
        )

    @staticmethod
    def operation_failed(
        operation: str,
        error_code: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.OPERATION_FAILED,
            severity=AuditSeverity.WARNING,
            description=f"Operation refused: {operation}",
            error_code=error_code,
            error_message=error_message,
            details={"operation": operation, **(details or {})},
        )

    @staticmethod
    def storage_error(operation: str, path: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            entity_type="file",
            entity_id=path,
            description=f"Storage error during {operation}",
            error_message=error_message,
            details={"operation": operation, "path": path},
        )
