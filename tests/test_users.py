"""
Test suite for users module
"""

import pytest
from decimal import Decimal

from bank_ledger.accounts import Account, AccountVariant
from bank_ledger.users import User


class TestUser:
    """Test User ownership and credentials"""

    def setup_method(self):
        self.user = User("U001", "srisha", "password123", "sri@email.com", "1234567890")

    def test_accounts_keep_opening_order(self):
        """Test accounts are listed in the order they were added"""
        first = Account("ACC001", "srisha", AccountVariant.SAVINGS, Decimal('500'))
        second = Account("ACC009", "srisha", AccountVariant.CURRENT, Decimal('6000'))
        self.user.add_account(first)
        self.user.add_account(second)

        assert self.user.accounts == (first, second)
        assert self.user.get_account("ACC009") is second
        assert self.user.get_account("ACC404") is None
        assert self.user.owns("ACC001")
        assert not self.user.owns("ACC404")

    def test_check_password(self):
        """Test exact, case-sensitive password comparison"""
        assert self.user.check_password("password123")
        assert not self.user.check_password("Password123")
        assert not self.user.check_password("")

    def test_password_not_in_repr(self):
        """Test the password is kept out of repr"""
        assert "password123" not in repr(self.user)
        assert "srisha" in repr(self.user)

    def test_accounts_cannot_be_appended_in_place(self):
        """Test the exposed accounts are immutable"""
        account = Account("ACC001", "srisha", AccountVariant.SAVINGS)
        self.user.add_account(account)

        with pytest.raises(AttributeError):
            self.user.accounts.append(Account("ACC666", "x", AccountVariant.SAVINGS))
        assert self.user.accounts == (account,)
