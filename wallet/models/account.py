"""
Core Data Models for the Wallet Ledger

These models define the shapes of everything the ledger owns:
1. Accounts - a phone number holding a balance
2. Payments - a debit tied to an account and a category
3. Favorites - named templates for repeating a payment

DESIGN DECISION: Money is an integer count of minor units (dirams, cents).
There is no fractional arithmetic anywhere in the ledger, so rounding
cannot drift a balance.

The models are passive. All behavior lives in the LedgerService.
"""

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# TYPE ALIASES
# =============================================================================

Money = int
"""Currency amount in minor units."""

Phone = str
"""Phone number identifying an account, e.g. "+992000000001"."""

PaymentCategory = str
"""Free-form payment category, e.g. "food", "auto"."""


# =============================================================================
# ENUMS
# =============================================================================

class PaymentStatus(str, Enum):
    """
    Payment lifecycle status.

    Payments start IN_PROGRESS. The only transition is to FAIL,
    which happens when a payment is rejected.
    """
    IN_PROGRESS = "INPROGRESS"
    FAIL = "FAIL"


# =============================================================================
# ENTITIES
# =============================================================================

class Account(BaseModel):
    """
    A registered phone number with a non-negative balance.

    Balance is re-validated on every assignment, so no code path can
    leave an account overdrawn.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(
        ...,
        description="Sequential account identifier"
    )
    phone: Phone = Field(
        ...,
        description="Phone number, unique at registration"
    )
    balance: Annotated[
        Money,
        Field(ge=0, description="Balance in minor units")
    ] = 0


class Payment(BaseModel):
    """
    A debit taken from an account.

    Amount and category are fixed at creation. Only the status changes,
    and only through a rejection.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        ...,
        description="Opaque globally unique identifier"
    )
    account_id: int = Field(
        ...,
        description="Account the payment was taken from"
    )
    amount: Money = Field(
        ...,
        gt=0,
        description="Debited amount in minor units"
    )
    category: PaymentCategory
    status: PaymentStatus = PaymentStatus.IN_PROGRESS


class Favorite(BaseModel):
    """A named snapshot of a payment that can be paid again on demand."""
    model_config = ConfigDict(frozen=True)

    id: str
    account_id: int
    name: str
    amount: Money = Field(gt=0)
    category: PaymentCategory
