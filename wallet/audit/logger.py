"""
Audit Logger

DESIGN DECISION: Every balance-changing action in the ledger is logged.
This provides:
1. Traceability of every debit and credit
2. Debugging capability when an operation is refused
3. A history the caller can inspect

The audit logger:
- Always writes a structured local log line
- Gracefully handles failures (a broken audit store never breaks the ledger)
- Never replaces an error; the ledger still raises to its caller
"""

import logging
from typing import Optional

import structlog

from wallet.config import get_settings
from wallet.models.audit import AuditEvent, AuditEventBuilder
from wallet.services.storage import AuditStorageInterface


def configure_logging() -> None:
    """
    Configure structlog on top of the standard library logger.

    Level and renderer come from WALLET_LOG_LEVEL / WALLET_LOG_FORMAT.
    Runs once at import. Call it again after get_settings.cache_clear()
    to pick up changed settings; loggers are not cached, so existing
    AuditLogger instances follow the new configuration.

    Handlers are left to the application. Only the level of the
    "wallet" logger is set here.

    Raises:
        ValidationError: If WALLET_LOG_LEVEL or WALLET_LOG_FORMAT is invalid
    """
    settings = get_settings().logging

    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.format == "console"
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.getLogger("wallet").setLevel(settings.level)


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, if one is configured (for inspection)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for the audit trail.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        # Empty stores are falsy
        if self._storage is not None:
            try:
                return self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_account_registered(self, account_id: int, phone: str) -> None:
        self.log(AuditEventBuilder.account_registered(account_id, phone))

    def log_account_deposited(self, account_id: int, amount: int, balance: int) -> None:
        self.log(AuditEventBuilder.account_deposited(account_id, amount, balance))

    def log_payment_created(
        self,
        payment_id: str,
        account_id: int,
        amount: int,
        category: str,
    ) -> None:
        self.log(AuditEventBuilder.payment_created(payment_id, account_id, amount, category))

    def log_payment_rejected(self, payment_id: str, account_id: int, amount: int) -> None:
        self.log(AuditEventBuilder.payment_rejected(payment_id, account_id, amount))

    def log_payment_repeated(self, payment_id: str, source_payment_id: str) -> None:
        self.log(AuditEventBuilder.payment_repeated(payment_id, source_payment_id))

    def log_favorite_created(self, favorite_id: str, payment_id: str, name: str) -> None:
        self.log(AuditEventBuilder.favorite_created(favorite_id, payment_id, name))

    def log_favorite_paid(self, favorite_id: str, payment_id: str) -> None:
        self.log(AuditEventBuilder.favorite_paid(favorite_id, payment_id))

    def log_accounts_exported(self, path: str, count: int) -> None:
        self.log(AuditEventBuilder.accounts_exported(path, count))

    def log_accounts_imported(self, path: str, count: int) -> None:
        self.log(AuditEventBuilder.accounts_imported(path, count))

    def log_operation_failed(
        self,
        operation: str,
        error_code: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log a ledger operation that was refused."""
        self.log(AuditEventBuilder.operation_failed(
            operation=operation,
            error_code=error_code,
            error_message=error_message,
            details=details,
        ))

    def log_storage_error(self, operation: str, path: str, error_message: str) -> None:
        """Log a snapshot file failure."""
        self.log(AuditEventBuilder.storage_error(operation, path, error_message))
