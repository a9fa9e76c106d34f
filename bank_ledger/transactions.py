"""
Transaction Log Module

Immutable records of ledger-affecting events and the append-only log that
holds them. A Transaction is written exactly once per event and is never
mutated or removed.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple
from enum import Enum
import threading
import uuid

from .currency import Currency, Money


class TransactionKind(Enum):
    """Kinds of ledger events"""
    DEPOSIT = "DEPOSIT"    # Money added to an account from outside the ledger
    WITHDRAW = "WITHDRAW"  # Money taken out of the ledger
    DEBIT = "DEBIT"        # Source leg of a transfer
    CREDIT = "CREDIT"      # Destination leg of a transfer


@dataclass(frozen=True)
class Transaction:
    """
    One ledger-affecting event on a single account
    """
    account_number: str
    kind: TransactionKind
    amount: Decimal
    description: str
    currency: Currency = Currency.INR
    transaction_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self):
        if not self.account_number:
            raise ValueError("Transaction must reference an account number")

        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))

        if not self.amount > Decimal('0'):
            raise ValueError("Transaction amount must be positive")

    @classmethod
    def record(
        cls,
        account_number: str,
        kind: TransactionKind,
        amount: Decimal,
        description: str,
        currency: Currency = Currency.INR
    ) -> 'Transaction':
        """Create a transaction stamped with a fresh id and the current time"""
        return cls(
            account_number=account_number,
            kind=kind,
            amount=amount,
            description=description,
            currency=currency
        )

    @property
    def money(self) -> Money:
        """Amount as Money"""
        return Money(self.amount, self.currency)

    @property
    def is_inflow(self) -> bool:
        """True when the event increased the account balance"""
        return self.kind in (TransactionKind.DEPOSIT, TransactionKind.CREDIT)


class TransactionLog:
    """
    Append-only, insertion-ordered sequence of transactions
    """

    def __init__(self):
        self._entries: List[Transaction] = []
        self._lock = threading.RLock()

    def append(self, transaction: Transaction) -> Transaction:
        """Append a transaction and return it"""
        with self._lock:
            self._entries.append(transaction)
        return transaction

    def for_account(self, account_number: str) -> List[Transaction]:
        """All transactions of one account, oldest first"""
        with self._lock:
            return [t for t in self._entries if t.account_number == account_number]

    def snapshot(self) -> Tuple[Transaction, ...]:
        """Immutable copy of the whole log"""
        with self._lock:
            return tuple(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.snapshot())
