"""
Account Module

Bank accounts and their variant policies. A variant is nothing more than a
(minimum balance, interest rate) pair: Savings and Current accounts behave
identically apart from those two numbers.
"""

from decimal import Decimal
from datetime import datetime, timezone
from dataclasses import dataclass, field
from typing import Optional
from enum import Enum
import uuid

from .currency import AmountLike, Currency, Money, to_amount


class AccountVariant(Enum):
    """Account variants with their balance floor and annual interest rate"""
    SAVINGS = ("Savings", Decimal('100.00'), Decimal('0.02'))
    CURRENT = ("Current", Decimal('5000.00'), Decimal('0.01'))

    def __init__(self, label: str, minimum_balance: Decimal, interest_rate: Decimal):
        self.label = label
        self.minimum_balance = minimum_balance
        self.interest_rate = interest_rate

    @classmethod
    def from_label(cls, label: str) -> 'AccountVariant':
        """
        Resolve a variant from a display label

        Accepts the member name or label in any case, with or without a
        trailing "Account" ("Savings Account", "current", "SAVINGS").
        """
        normalized = label.strip().lower()
        if normalized.endswith(" account"):
            normalized = normalized[:-len(" account")].strip()
        for variant in cls:
            if normalized in (variant.label.lower(), variant.name.lower()):
                return variant
        raise ValueError(f"Unknown account variant '{label}'")


@dataclass(frozen=True)
class AccountProfile:
    """Optional holder details captured when an account is opened"""
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[str] = None


def generate_account_number(prefix: str = "ACC") -> str:
    """Generate a random account number such as ACC3F9A0C1B2D"""
    return f"{prefix}{uuid.uuid4().hex[:10].upper()}"


@dataclass(eq=False)
class Account:
    """
    Bank account holding a Decimal balance

    Balance changes only through deposit/withdraw/transfer, which refuse
    (return False) rather than raise. Accounts are identified by their
    account number.
    """
    account_number: str
    holder_name: str
    variant: AccountVariant
    balance: Decimal = Decimal('0')
    currency: Currency = Currency.INR
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    profile: AccountProfile = field(default_factory=AccountProfile)

    def __post_init__(self):
        if not self.account_number:
            raise ValueError("Account number is required")
        self.balance = to_amount(self.balance, self.currency)

    def __setattr__(self, name, value):
        if name == "account_number" and "account_number" in self.__dict__:
            raise AttributeError("Account number cannot be changed once assigned")
        super().__setattr__(name, value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Account):
            return NotImplemented
        return self.account_number == other.account_number

    def __hash__(self) -> int:
        return hash(self.account_number)

    @property
    def interest_rate(self) -> Decimal:
        """Annual interest rate of this account's variant"""
        return self.variant.interest_rate

    @property
    def balance_money(self) -> Money:
        """Current balance as Money"""
        return Money(self.balance, self.currency)

    def minimum_balance(self) -> Decimal:
        """Lowest balance a withdrawal may leave behind"""
        return self.variant.minimum_balance

    def calculate_interest(self) -> Decimal:
        """Interest on the current balance. Computed only, never posted."""
        return (self.balance_money * self.interest_rate).amount

    def _coerce(self, amount: AmountLike) -> Optional[Money]:
        try:
            money = Money(to_amount(amount, self.currency), self.currency)
        except ValueError:
            return None
        return money if money.is_positive() else None

    def can_withdraw(self, amount: AmountLike) -> bool:
        """Check whether withdraw(amount) would succeed"""
        money = self._coerce(amount)
        if money is None:
            return False
        return self.balance_money - money >= Money(self.minimum_balance(), self.currency)

    def can_deposit(self, amount: AmountLike) -> bool:
        """Check whether deposit(amount) would succeed"""
        money = self._coerce(amount)
        if money is None:
            return False
        return (self.balance_money + money).within_limit()

    def deposit(self, amount: AmountLike) -> bool:
        """Add a positive amount, keeping the balance below MAX_AMOUNT"""
        if not self.can_deposit(amount):
            return False
        self.balance = (self.balance_money + self._coerce(amount)).amount
        return True

    def withdraw(self, amount: AmountLike) -> bool:
        """Remove a positive amount, keeping the balance at or above the minimum"""
        if not self.can_withdraw(amount):
            return False
        self.balance = (self.balance_money - self._coerce(amount)).amount
        return True

    def transfer(self, target: 'Account', amount: AmountLike) -> bool:
        """Move amount to target. Neither balance changes unless both sides accept it."""
        if not target.can_deposit(amount) or not self.withdraw(amount):
            return False
        target.deposit(amount)
        return True

    def describe(self) -> str:
        """One-line summary for listings"""
        return (
            f"Account[{self.account_number}, Holder: {self.holder_name}, "
            f"Balance: {self.balance_money.to_string()}, Type: {self.variant.label}]"
        )
