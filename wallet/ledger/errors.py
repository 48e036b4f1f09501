"""
Ledger Errors

DESIGN DECISION: Every refusal the ledger can produce is one member of a
closed enumeration. A single exception type carries the code, so callers
branch on `error.code` and never on message text.
"""

from enum import Enum


class LedgerErrorCode(str, Enum):
    """All the ways a ledger operation can be refused."""
    PHONE_REGISTERED = "phone already registered"
    AMOUNT_MUST_BE_POSITIVE = "amount must be greater than zero"
    ACCOUNT_NOT_FOUND = "account not found"
    NOT_ENOUGH_BALANCE = "not enough balance in account"
    PAYMENT_NOT_FOUND = "payment not found"
    CANNOT_REGISTER_ACCOUNT = "can not register account"
    CANNOT_DEPOSIT_ACCOUNT = "can not deposit account"
    FAVORITE_NOT_FOUND = "favorite payment not found"

    @property
    def message(self) -> str:
        return self.value


class LedgerError(Exception):
    """A ledger operation was refused."""

    def __init__(self, code: LedgerErrorCode):
        self.code = code
        super().__init__(code.message)

    def __repr__(self) -> str:
        return f"LedgerError({self.code.name})"
