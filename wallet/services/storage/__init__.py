"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Accounts are snapshotted to a flat file; the audit trail is kept in memory.
"""

from wallet.services.storage.interface import (
    AccountStorageInterface,
    AuditStorageInterface,
    RecordFormatError,
    StorageError,
)
from wallet.services.storage.flat_file import FlatFileAccountStorage
from wallet.services.storage.memory import InMemoryAuditStorage

__all__ = [
    # Interfaces
    "AccountStorageInterface",
    "AuditStorageInterface",
    # Exceptions
    "RecordFormatError",
    "StorageError",
    # Implementations
    "FlatFileAccountStorage",
    "InMemoryAuditStorage",
]
