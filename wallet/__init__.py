"""
Wallet - Source Package

An in-memory ledger of phone-number accounts, payments and
favorite payment templates, with a flat-file account snapshot.

DESIGN PRINCIPLES:
1. One owner of state: the LedgerService
2. Balances never go negative
3. Fail loudly with a typed error code
4. Every balance change is auditable
5. Snapshot format is swappable
"""

__version__ = "1.0.0"
__author__ = "Wallet Team"
