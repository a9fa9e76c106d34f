"""
Test suite for currency module

Tests Money class, amount coercion, and proper Decimal handling.
"""

import pytest
from decimal import Decimal

from bank_ledger.currency import (
    MAX_AMOUNT, Money, Currency, decimal_from_string, validate_decimal_precision, to_amount
)


class TestMoney:
    """Test Money class operations"""

    def test_money_creation(self):
        """Test Money object creation and rounding"""
        money = Money(Decimal('100.50'), Currency.INR)
        assert money.amount == Decimal('100.50')
        assert money.currency == Currency.INR

        # Rounded to currency precision
        assert Money(Decimal('100.555'), Currency.INR).amount == Decimal('100.56')
        assert Money(Decimal('100.7'), Currency.JPY).amount == Decimal('101')

    def test_money_arithmetic(self):
        """Test Money arithmetic operations"""
        money1 = Money(Decimal('100.50'), Currency.INR)
        money2 = Money(Decimal('50.25'), Currency.INR)

        assert (money1 + money2).amount == Decimal('150.75')
        assert (money1 - money2).amount == Decimal('50.25')
        assert (money1 * Decimal('2')).amount == Decimal('201.00')
        assert money1 >= money2
        assert not money2 >= money1

    def test_arithmetic_is_exact_beyond_default_precision(self):
        """Test 40-digit sums are not rounded by the thread's decimal context"""
        big = Money(Decimal('1' + '0' * 39), Currency.INR)
        cent = Money(Decimal('0.01'), Currency.INR)

        assert (big + cent).amount == Decimal('1' + '0' * 39 + '.01')
        assert (big - cent).amount == Decimal('9' * 39 + '.99')

    def test_currency_mismatch(self):
        """Test that mixing currencies is rejected"""
        with pytest.raises(ValueError, match="Cannot add"):
            Money(Decimal('1'), Currency.INR) + Money(Decimal('1'), Currency.USD)

        with pytest.raises(ValueError, match="Cannot compare"):
            Money(Decimal('1'), Currency.INR) >= Money(Decimal('1'), Currency.USD)

    def test_money_predicates(self):
        """Test positive and limit checks"""
        assert Money(Decimal('0.01'), Currency.INR).is_positive()
        assert not Money(Decimal('0'), Currency.INR).is_positive()
        assert Money(Decimal('9' * 79), Currency.INR).within_limit()
        assert not Money(MAX_AMOUNT, Currency.INR).within_limit()

    def test_to_string(self):
        """Test display formatting"""
        assert Money(Decimal('50000'), Currency.INR).to_string() == "INR 50,000.00"
        assert Money(Decimal('1234'), Currency.JPY).to_string() == "JPY 1,234"


class TestCurrency:
    """Test Currency lookups"""

    def test_from_code(self):
        """Test resolving ISO codes"""
        assert Currency.from_code("inr") == Currency.INR
        assert Currency.from_code(" USD ") == Currency.USD

    def test_unknown_code(self):
        """Test unknown codes raise ValueError"""
        with pytest.raises(ValueError, match="Unsupported currency code"):
            Currency.from_code("XYZ")


class TestAmountParsing:
    """Test decimal parsing and coercion helpers"""

    def test_decimal_from_string(self):
        """Test common textual formats"""
        assert decimal_from_string("1000") == Decimal('1000')
        assert decimal_from_string("1,000.50") == Decimal('1000.50')
        assert decimal_from_string("Rs 2,500") == Decimal('2500')
        assert decimal_from_string("Rs.500") == Decimal('500')
        assert decimal_from_string("12,5") == Decimal('12.5')

    def test_decimal_from_string_invalid(self):
        """Test garbage input raises ValueError"""
        with pytest.raises(ValueError):
            decimal_from_string("")

        with pytest.raises(ValueError):
            decimal_from_string("abc")

    def test_validate_decimal_precision(self):
        """Test rounding to currency precision"""
        assert validate_decimal_precision(Decimal('1.005'), Currency.INR) == Decimal('1.01')
        assert validate_decimal_precision(Decimal('1.5'), Currency.JPY) == Decimal('2')

    def test_to_amount_accepts_numbers(self):
        """Test int, float, str and Decimal inputs"""
        assert to_amount(100, Currency.INR) == Decimal('100.00')
        assert to_amount(0.1, Currency.INR) == Decimal('0.10')
        assert to_amount("250.5", Currency.INR) == Decimal('250.50')
        assert to_amount(Decimal('7'), Currency.INR) == Decimal('7.00')

    def test_to_amount_rejects_non_numbers(self):
        """Test booleans, non-finite values and other types are rejected"""
        for bad in (True, float('inf'), float('nan'), Decimal('NaN'), None, [1]):
            with pytest.raises(ValueError):
                to_amount(bad, Currency.INR)

    def test_to_amount_large_values(self):
        """Test amounts past 28 digits are kept exact up to MAX_AMOUNT"""
        assert to_amount(10 ** 27, Currency.INR) == Decimal('1' + '0' * 27 + '.00')
        assert to_amount(Decimal('1e30'), Currency.INR) == Decimal('1' + '0' * 30)

        for bad in (MAX_AMOUNT, -MAX_AMOUNT, 10 ** 100, float("1e300"), Decimal("1e999999")):
            with pytest.raises(ValueError, match="out of range"):
                to_amount(bad, Currency.INR)

    def test_validate_decimal_precision_overflow(self):
        """Test values too long to quantize raise ValueError"""
        with pytest.raises(ValueError, match="Cannot represent"):
            validate_decimal_precision(Decimal('1e120'), Currency.INR)
