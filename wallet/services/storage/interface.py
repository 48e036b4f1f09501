"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the flat-file snapshot for another format later
2. Use in-memory storage for testing
3. Keep the ledger decoupled from file handling

The interface is intentionally simple - only accounts are persisted.
Payments and favorites live for the lifetime of the ledger only.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

from wallet.models.account import Account
from wallet.models.audit import AuditEvent


class AccountStorageInterface(ABC):
    """
    Abstract interface for account snapshot storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def export_accounts(self, accounts: Iterable[Account], path: Path) -> int:
        """
        Write a snapshot of accounts, replacing any existing file.

        Args:
            accounts: Accounts in the order they should be written
            path: Destination file

        Returns:
            Number of accounts written

        Raises:
            StorageError: If the file cannot be written
            RecordFormatError: If an account cannot be represented
        """
        pass

    @abstractmethod
    def import_accounts(self, path: Path) -> list[Account]:
        """
        Read a snapshot of accounts.

        Args:
            path: Source file

        Returns:
            Accounts in file order

        Raises:
            StorageError: If the file cannot be read
            RecordFormatError: If a record is malformed
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class RecordFormatError(StorageError):
    """A snapshot record cannot be written or parsed."""

    def __init__(self, record: str, message: str):
        self.record = record
        super().__init__(message)
