"""
Money Module

Handles ISO 4217 currency codes and proper Decimal precision for ledger
amounts. NEVER uses float for monetary values: floats arriving from callers
are converted through their string form.
"""

from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP
from dataclasses import dataclass
from enum import Enum
from typing import Union
import re

# Amounts and balances stay strictly below MAX_AMOUNT. At this precision
# sums of two of them and interest products are exact, so ledger arithmetic
# never rounds and never depends on the calling thread's decimal context.
MAX_AMOUNT = Decimal('1e80')
LEDGER_CONTEXT = Context(prec=100, rounding=ROUND_HALF_UP)

AmountLike = Union[Decimal, int, float, str]


class Currency(Enum):
    """ISO 4217 Currency Codes with precision info"""
    INR = ("INR", 2)  # Indian Rupee, 2 decimal places
    USD = ("USD", 2)  # US Dollar, 2 decimal places
    EUR = ("EUR", 2)  # Euro, 2 decimal places
    GBP = ("GBP", 2)  # British Pound, 2 decimal places
    JPY = ("JPY", 0)  # Japanese Yen, 0 decimal places

    def __init__(self, code: str, precision: int):
        self.code = code
        self.precision = precision

    @classmethod
    def from_code(cls, code: str) -> 'Currency':
        """Look up a currency by its ISO code"""
        try:
            return cls[code.strip().upper()]
        except KeyError:
            raise ValueError(f"Unsupported currency code '{code}'") from None


@dataclass(frozen=True)
class Money:
    """
    Immutable money representation with currency and proper precision.
    """
    amount: Decimal
    currency: Currency

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', Decimal(str(self.amount)))

        # Round to currency precision
        object.__setattr__(self, 'amount', validate_decimal_precision(self.amount, self.currency))

    def _check_currency(self, other: 'Money', verb: str) -> None:
        if self.currency != other.currency:
            raise ValueError(f"Cannot {verb} {self.currency.code} and {other.currency.code}")

    def __add__(self, other: 'Money') -> 'Money':
        self._check_currency(other, "add")
        return Money(LEDGER_CONTEXT.add(self.amount, other.amount), self.currency)

    def __sub__(self, other: 'Money') -> 'Money':
        self._check_currency(other, "subtract")
        return Money(LEDGER_CONTEXT.subtract(self.amount, other.amount), self.currency)

    def __mul__(self, multiplier: Decimal) -> 'Money':
        if not isinstance(multiplier, Decimal):
            multiplier = Decimal(str(multiplier))
        return Money(LEDGER_CONTEXT.multiply(self.amount, multiplier), self.currency)

    def __ge__(self, other: 'Money') -> bool:
        self._check_currency(other, "compare")
        return self.amount >= other.amount

    def is_positive(self) -> bool:
        """Check if amount is positive"""
        return self.amount > Decimal('0')

    def within_limit(self) -> bool:
        """Check if the amount can be held as a balance"""
        return self.amount.copy_abs() < MAX_AMOUNT

    def to_string(self) -> str:
        """Format for display"""
        if self.currency.precision == 0:
            return f"{self.currency.code} {self.amount:,.0f}"
        return f"{self.currency.code} {self.amount:,.{self.currency.precision}f}"


def decimal_from_string(value: str) -> Decimal:
    """
    Safely convert string to Decimal, handling common formats

    Args:
        value: String representation of number, e.g. "Rs 1,000.50"

    Returns:
        Decimal value

    Raises:
        ValueError: If string cannot be converted to valid Decimal
    """
    if not value or not isinstance(value, str):
        raise ValueError("Value must be a non-empty string")

    # Remove currency prefixes, symbols and whitespace
    clean_value = re.sub(r'^(?:rs\.?|inr)\s*', '', value.strip(), flags=re.IGNORECASE)
    clean_value = re.sub(r'[^\d.,\-+]', '', clean_value)

    if ',' in clean_value and '.' in clean_value:
        # Both comma and dot - assume comma is thousands separator
        clean_value = clean_value.replace(',', '')
    elif ',' in clean_value and clean_value.count(',') == 1:
        parts = clean_value.split(',')
        if len(parts[1]) < 3:  # Likely decimal separator
            clean_value = clean_value.replace(',', '.')
        else:  # Likely thousands separator
            clean_value = clean_value.replace(',', '')
    else:
        clean_value = clean_value.replace(',', '')

    try:
        return Decimal(clean_value)
    except InvalidOperation:
        raise ValueError(f"Cannot convert '{value}' to Decimal") from None


def validate_decimal_precision(value: Decimal, currency: Currency) -> Decimal:
    """
    Validate and round decimal to currency precision

    Args:
        value: Decimal to validate
        currency: Currency defining precision

    Returns:
        Properly rounded Decimal

    Raises:
        ValueError: If the value has too many digits to hold at that precision
    """
    try:
        return value.quantize(
            Decimal(1).scaleb(-currency.precision),
            rounding=ROUND_HALF_UP,
            context=LEDGER_CONTEXT
        )
    except InvalidOperation:
        raise ValueError(f"Cannot represent {value} in {currency.code}") from None


def to_amount(value: AmountLike, currency: Currency) -> Decimal:
    """
    Coerce a caller-supplied amount into a Decimal at currency precision

    Raises:
        ValueError: If the value is not a finite number below MAX_AMOUNT
    """
    if isinstance(value, bool):
        raise ValueError("Amount must be a number, not a boolean")

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        amount = decimal_from_string(value)
    else:
        raise ValueError(f"Unsupported amount type: {type(value).__name__}")

    if not amount.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")

    if amount.copy_abs() >= MAX_AMOUNT:
        raise ValueError(f"Amount out of range, got {value!r}")

    return validate_decimal_precision(amount, currency)
