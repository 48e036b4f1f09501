"""Ledger service package."""

from wallet.ledger.errors import LedgerError, LedgerErrorCode
from wallet.ledger.service import LedgerService, create_ledger_service

__all__ = [
    "LedgerError",
    "LedgerErrorCode",
    "LedgerService",
    "create_ledger_service",
]
