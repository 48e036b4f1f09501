"""Services package."""

from wallet.services.storage import (
    AccountStorageInterface,
    AuditStorageInterface,
    FlatFileAccountStorage,
    InMemoryAuditStorage,
    RecordFormatError,
    StorageError,
)

__all__ = [
    "AccountStorageInterface",
    "AuditStorageInterface",
    "FlatFileAccountStorage",
    "InMemoryAuditStorage",
    "RecordFormatError",
    "StorageError",
]
