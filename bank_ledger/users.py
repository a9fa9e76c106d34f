"""
User Module

Account owners. A user logs in with a username and password and owns an
ordered tuple of accounts (opening order).
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .accounts import Account


@dataclass
class User:
    """Owner identity holding its accounts"""
    user_id: str
    username: str
    password: str = field(repr=False)  # Clear text, compared for equality only
    email: str
    phone: str
    accounts: Tuple[Account, ...] = ()

    def add_account(self, account: Account) -> None:
        """Attach an account, keeping opening order"""
        self.accounts = self.accounts + (account,)

    def get_account(self, account_number: str) -> Optional[Account]:
        """Get one of this user's accounts by number"""
        for account in self.accounts:
            if account.account_number == account_number:
                return account
        return None

    def owns(self, account_number: str) -> bool:
        """Check whether the account belongs to this user"""
        return self.get_account(account_number) is not None

    def check_password(self, candidate: str) -> bool:
        """Exact, case-sensitive password comparison"""
        return self.password == candidate
