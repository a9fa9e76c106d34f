"""
Bank Ledger

An in-memory account ledger with per-variant minimum balance rules,
Decimal-only money handling, and an append-only transaction log.
"""

__version__ = "1.0.0"

from .accounts import Account, AccountProfile, AccountVariant
from .results import ErrorKind, FailureReason, LedgerResult
from .seed import create_service, seed_demo_data
from .service import LedgerService
from .transactions import Transaction, TransactionKind, TransactionLog
from .users import User

__all__ = [
    "Account",
    "AccountProfile",
    "AccountVariant",
    "ErrorKind",
    "FailureReason",
    "LedgerResult",
    "LedgerService",
    "Transaction",
    "TransactionKind",
    "TransactionLog",
    "User",
    "create_service",
    "seed_demo_data",
]
