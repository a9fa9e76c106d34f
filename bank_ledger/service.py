"""
Ledger Service Module

The single authority over users, accounts and the transaction log. Every
operation runs under one lock covering all three, so a registration or a
transfer is never observed half-applied, and every operation reports its
outcome as a LedgerResult instead of raising.
"""

from decimal import Decimal
from typing import Dict, List, Optional, Set, Union
import threading

from .accounts import Account, AccountProfile, AccountVariant, generate_account_number
from .config import LedgerConfig, get_config
from .currency import AmountLike, Currency, Money, to_amount
from .logging_config import get_logger, log_action
from .results import FailureReason, LedgerResult
from .transactions import Transaction, TransactionKind, TransactionLog
from .users import User


OPENING_BONUS_DESCRIPTION = "Account opening bonus"
INITIAL_DEPOSIT_DESCRIPTION = "Initial deposit"


class LedgerService:
    """
    In-memory ledger of users, accounts and transactions

    Build one per process (or per test) and pass it to whatever needs it.
    Users are kept by user id, accounts are indexed by account number, and
    every account in the index is owned by exactly one user.

    Lookups return the live Account and User objects. Read from them freely,
    but change balances only through this service: calling Account.deposit
    or withdraw directly skips the lock and leaves no transaction behind.
    A user's accounts are exposed as a tuple, so ownership cannot be changed
    from outside.
    """

    def __init__(self, config: Optional[LedgerConfig] = None):
        self.config = config or get_config()
        self.currency = Currency.from_code(self.config.currency)
        self.opening_bonus = to_amount(self.config.opening_bonus, self.currency)
        self.logger = get_logger("bank_ledger.service")

        self._users: Dict[str, User] = {}
        self._accounts: Dict[str, Account] = {}
        self._transactions = TransactionLog()
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Authentication and registration
    # ------------------------------------------------------------------

    def authenticate(self, username: str, password: str) -> LedgerResult:
        """
        Find the user with exactly this username and password

        Returns:
            LedgerResult carrying the User, or INVALID_CREDENTIALS
        """
        with self._lock:
            for user in self._users.values():
                if user.username == username and user.check_password(password):
                    log_action(
                        self.logger, "info", "User authenticated",
                        user_id=user.user_id, action="authenticate",
                        resource=f"user:{user.user_id}"
                    )
                    return LedgerResult.success(user)

            return self._fail(
                FailureReason.INVALID_CREDENTIALS, "Invalid username or password",
                action="authenticate", resource=f"username:{username}"
            )

    def register(
        self,
        username: str,
        password: str,
        email: str,
        phone: str,
        new_account: Account
    ) -> LedgerResult:
        """
        Register a user owning new_account and credit the opening bonus

        Args:
            username: Login name, unique (case-sensitive)
            password: Clear-text password
            email: Contact email
            phone: Contact phone
            new_account: Unindexed zero-balance account, usually built with new_account()

        Returns:
            LedgerResult carrying the new User
        """
        with self._lock:
            missing = [
                name for name, value in (
                    ("username", username), ("password", password),
                    ("email", email), ("phone", phone)
                )
                if not value or not str(value).strip()
            ]
            if missing:
                return self._fail(
                    FailureReason.MISSING_FIELD,
                    f"Required fields missing: {', '.join(missing)}",
                    action="register", resource=f"username:{username}"
                )

            if len(password) < self.config.password_min_length:
                return self._fail(
                    FailureReason.PASSWORD_TOO_SHORT,
                    f"Password must be at least {self.config.password_min_length} characters long",
                    action="register", resource=f"username:{username}"
                )

            if self._find_user(username):
                return self._fail(
                    FailureReason.USERNAME_TAKEN, f"Username {username} already exists",
                    action="register", resource=f"username:{username}"
                )

            if new_account.account_number in self._accounts:
                return self._fail(
                    FailureReason.ACCOUNT_NUMBER_TAKEN,
                    f"Account {new_account.account_number} already exists",
                    action="register", resource=f"account:{new_account.account_number}"
                )

            if new_account.balance != 0:
                return self._already_funded(new_account, action="register")

            # Derived from the user count. Collides if users are ever removed.
            user_id = f"U{len(self._users) + 1:03d}"
            if user_id in self._users:
                return self._fail(
                    FailureReason.USER_ID_TAKEN, f"User id {user_id} already in use",
                    action="register", resource=f"user:{user_id}"
                )
            user = User(
                user_id=user_id,
                username=username,
                password=password,
                email=email,
                phone=phone
            )
            self._attach(user, new_account, self.opening_bonus, OPENING_BONUS_DESCRIPTION)

            log_action(
                self.logger, "info", "User registered",
                user_id=user_id, action="register", resource=f"user:{user_id}",
                extra={
                    "username": username,
                    "account_number": new_account.account_number,
                    "variant": new_account.variant.label,
                    "opening_bonus": Money(self.opening_bonus, self.currency).to_string()
                }
            )
            return LedgerResult.success(user)

    def install(
        self,
        user: User,
        account: Account,
        opening_amount: AmountLike = 0,
        description: str = INITIAL_DEPOSIT_DESCRIPTION
    ) -> LedgerResult:
        """
        Add a prepared user and account, keeping their ids

        Bootstrap hook for seed data: skips the registration field rules
        but still refuses duplicate ids, usernames and account numbers.
        """
        with self._lock:
            if user.user_id in self._users:
                return self._fail(
                    FailureReason.USER_ID_TAKEN, f"User {user.user_id} already exists",
                    action="install", resource=f"user:{user.user_id}"
                )
            if self._find_user(user.username):
                return self._fail(
                    FailureReason.USERNAME_TAKEN, f"Username {user.username} already exists",
                    action="install", resource=f"username:{user.username}"
                )
            if account.account_number in self._accounts:
                return self._fail(
                    FailureReason.ACCOUNT_NUMBER_TAKEN,
                    f"Account {account.account_number} already exists",
                    action="install", resource=f"account:{account.account_number}"
                )
            if account.balance != 0:
                return self._already_funded(account, action="install")

            amount = self._parse_amount(opening_amount)
            if amount is None or amount < 0:
                return self._fail(
                    FailureReason.INVALID_AMOUNT, f"Invalid opening amount: {opening_amount}",
                    action="install", resource=f"account:{account.account_number}"
                )

            self._attach(user, account, amount, description)
            return LedgerResult.success(user)

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    def new_account(
        self,
        variant: Union[AccountVariant, str],
        holder_name: str,
        profile: Optional[AccountProfile] = None
    ) -> Account:
        """
        Build an account with a number no indexed account uses

        The account is not indexed until it is registered or opened.
        """
        if isinstance(variant, str):
            variant = AccountVariant.from_label(variant)

        with self._lock:
            account_number = generate_account_number(self.config.account_number_prefix)
            while account_number in self._accounts:
                account_number = generate_account_number(self.config.account_number_prefix)

        return Account(
            account_number=account_number,
            holder_name=holder_name,
            variant=variant,
            currency=self.currency,
            profile=profile or AccountProfile()
        )

    def open_account(
        self,
        user_id: str,
        account: Account,
        opening_deposit: AmountLike = 0
    ) -> LedgerResult:
        """
        Give an existing user another account

        Returns:
            LedgerResult carrying the opened Account
        """
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return self._fail(
                    FailureReason.USER_NOT_FOUND, f"User {user_id} not found",
                    action="open_account", resource=f"user:{user_id}"
                )

            if account.account_number in self._accounts:
                return self._fail(
                    FailureReason.ACCOUNT_NUMBER_TAKEN,
                    f"Account {account.account_number} already exists",
                    action="open_account", resource=f"account:{account.account_number}"
                )

            if account.balance != 0:
                return self._already_funded(account, action="open_account")

            amount = self._parse_amount(opening_deposit)
            if amount is None or amount < 0:
                return self._fail(
                    FailureReason.INVALID_AMOUNT, f"Invalid opening deposit: {opening_deposit}",
                    action="open_account", resource=f"account:{account.account_number}"
                )

            self._attach(user, account, amount, INITIAL_DEPOSIT_DESCRIPTION)

            log_action(
                self.logger, "info", "Account opened",
                user_id=user_id, action="open_account",
                resource=f"account:{account.account_number}",
                extra={"variant": account.variant.label, "opening_deposit": str(amount)}
            )
            return LedgerResult.success(account)

    # ------------------------------------------------------------------
    # Balance-changing operations
    # ------------------------------------------------------------------

    def deposit(
        self,
        account_number: str,
        amount: AmountLike,
        description: str = "Deposit"
    ) -> LedgerResult:
        """
        Credit money from outside the ledger

        Returns:
            LedgerResult carrying the DEPOSIT Transaction
        """
        with self._lock:
            account = self._accounts.get(account_number)
            if account is None:
                return self._fail(
                    FailureReason.ACCOUNT_NOT_FOUND, f"Account {account_number} not found",
                    action="deposit", resource=f"account:{account_number}"
                )

            value = self._parse_amount(amount)
            if value is None or value <= 0 or not account.deposit(value):
                return self._fail(
                    FailureReason.INVALID_AMOUNT, f"Invalid deposit amount: {amount}",
                    action="deposit", resource=f"account:{account_number}"
                )

            transaction = self._record(account, TransactionKind.DEPOSIT, value, description)
            log_action(
                self.logger, "info", "Deposit posted",
                action="deposit", resource=f"account:{account_number}",
                extra={
                    "transaction_id": transaction.transaction_id,
                    "amount": transaction.money.to_string(),
                    "balance": account.balance_money.to_string()
                }
            )
            return LedgerResult.success(transaction)

    def withdraw(
        self,
        account_number: str,
        amount: AmountLike,
        description: str = "Withdrawal"
    ) -> LedgerResult:
        """
        Take money out of the ledger, honouring the minimum balance

        Returns:
            LedgerResult carrying the WITHDRAW Transaction
        """
        with self._lock:
            account = self._accounts.get(account_number)
            if account is None:
                return self._fail(
                    FailureReason.ACCOUNT_NOT_FOUND, f"Account {account_number} not found",
                    action="withdraw", resource=f"account:{account_number}"
                )

            value = self._parse_amount(amount)
            if value is None or value <= 0:
                return self._fail(
                    FailureReason.INVALID_AMOUNT, f"Withdrawal amount must be positive, got {amount}",
                    action="withdraw", resource=f"account:{account_number}"
                )

            if not account.withdraw(value):
                return self._insufficient_funds(account, value, action="withdraw")

            transaction = self._record(account, TransactionKind.WITHDRAW, value, description)
            log_action(
                self.logger, "info", "Withdrawal posted",
                action="withdraw", resource=f"account:{account_number}",
                extra={
                    "transaction_id": transaction.transaction_id,
                    "amount": transaction.money.to_string(),
                    "balance": account.balance_money.to_string()
                }
            )
            return LedgerResult.success(transaction)

    def transfer(
        self,
        from_account_number: str,
        to_account_number: str,
        amount: AmountLike,
        description: str = ""
    ) -> LedgerResult:
        """
        Move money between two indexed accounts

        Either both balances change and a DEBIT/CREDIT pair is logged, or
        nothing changes at all.

        Returns:
            LedgerResult carrying the (debit, credit) transactions
        """
        with self._lock:
            source = self._accounts.get(from_account_number)
            if source is None:
                return self._fail(
                    FailureReason.SOURCE_NOT_FOUND,
                    f"From account not found: {from_account_number}",
                    action="transfer", resource=f"account:{from_account_number}"
                )

            destination = self._accounts.get(to_account_number)
            if destination is None:
                return self._fail(
                    FailureReason.DESTINATION_NOT_FOUND,
                    f"To account not found: {to_account_number}",
                    action="transfer", resource=f"account:{to_account_number}"
                )

            if from_account_number == to_account_number or source is destination:
                return self._fail(
                    FailureReason.SELF_TRANSFER, "Cannot transfer to same account",
                    action="transfer", resource=f"account:{from_account_number}"
                )

            value = self._parse_amount(amount)
            if value is None or value <= 0:
                return self._fail(
                    FailureReason.INVALID_AMOUNT, f"Transfer amount must be positive, got {amount}",
                    action="transfer", resource=f"account:{from_account_number}"
                )

            if not destination.can_deposit(value):
                return self._fail(
                    FailureReason.INVALID_AMOUNT,
                    f"Transfer would take {to_account_number} past the balance limit",
                    action="transfer", resource=f"account:{to_account_number}"
                )

            if not source.transfer(destination, value):
                return self._insufficient_funds(source, value, action="transfer")

            description = description or ""
            debit = self._record(
                source, TransactionKind.DEBIT, value,
                f"Transfer to {to_account_number} - {description}"
            )
            credit = self._record(
                destination, TransactionKind.CREDIT, value,
                f"Transfer from {from_account_number} - {description}"
            )

            log_action(
                self.logger, "info", "Transfer completed",
                action="transfer", resource=f"account:{from_account_number}",
                extra={
                    "from_account": from_account_number,
                    "to_account": to_account_number,
                    "amount": debit.money.to_string(),
                    "from_balance": source.balance_money.to_string(),
                    "to_balance": destination.balance_money.to_string(),
                    "debit_id": debit.transaction_id,
                    "credit_id": credit.transaction_id
                }
            )
            return LedgerResult.success((debit, credit))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def transaction_history(self, account_number: str) -> List[Transaction]:
        """Transactions of one account in the order they were recorded"""
        with self._lock:
            return self._transactions.for_account(account_number)

    def all_transactions(self) -> List[Transaction]:
        """Every recorded transaction, oldest first"""
        with self._lock:
            return list(self._transactions.snapshot())

    def accounts_of(self, user_id: str) -> List[Account]:
        """A user's accounts in opening order; empty for unknown users"""
        with self._lock:
            user = self._users.get(user_id)
            return list(user.accounts) if user else []

    def all_accounts(self) -> Set[Account]:
        """Snapshot of every indexed account"""
        with self._lock:
            return set(self._accounts.values())

    def lookup_account(self, account_number: str) -> Optional[Account]:
        """Get an indexed account by number"""
        with self._lock:
            return self._accounts.get(account_number)

    def get_user(self, user_id: str) -> Optional[User]:
        """Get a user by id"""
        with self._lock:
            return self._users.get(user_id)

    def find_user(self, username: str) -> Optional[User]:
        """Get a user by exact username"""
        with self._lock:
            return self._find_user(username)

    def user_count(self) -> int:
        """Number of registered users"""
        with self._lock:
            return len(self._users)

    def calculate_interest(self, account_number: str) -> LedgerResult:
        """
        Interest an account would earn on its current balance

        Nothing is posted; the result carries a Decimal.
        """
        with self._lock:
            account = self._accounts.get(account_number)
            if account is None:
                return self._fail(
                    FailureReason.ACCOUNT_NOT_FOUND, f"Account {account_number} not found",
                    action="calculate_interest", resource=f"account:{account_number}"
                )
            return LedgerResult.success(account.calculate_interest())

    def total_balance(self, user_id: str) -> Decimal:
        """Sum of the balances of a user's accounts"""
        with self._lock:
            return sum(
                (account.balance_money for account in self.accounts_of(user_id)),
                Money(Decimal('0'), self.currency)
            ).amount

    def describe_accounts(self) -> List[str]:
        """One summary line per indexed account, also logged at debug level"""
        with self._lock:
            lines = [account.describe() for account in self._accounts.values()]
        for line in lines:
            self.logger.debug(line)
        return lines

    # ------------------------------------------------------------------
    # Internals (callers hold the lock)
    # ------------------------------------------------------------------

    def _find_user(self, username: str) -> Optional[User]:
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    def _parse_amount(self, amount: AmountLike) -> Optional[Decimal]:
        try:
            return to_amount(amount, self.currency)
        except ValueError:
            return None

    def _attach(self, user: User, account: Account, amount: Decimal, description: str) -> None:
        """Link account to user, index both, and credit a non-zero opening amount"""
        self._users[user.user_id] = user
        user.add_account(account)
        self._accounts[account.account_number] = account

        if amount > 0:
            account.deposit(amount)
            self._record(account, TransactionKind.DEPOSIT, amount, description)

    def _record(
        self,
        account: Account,
        kind: TransactionKind,
        amount: Decimal,
        description: str
    ) -> Transaction:
        return self._transactions.append(
            Transaction.record(account.account_number, kind, amount, description, account.currency)
        )

    def _already_funded(self, account: Account, action: str) -> LedgerResult:
        return self._fail(
            FailureReason.INVALID_AMOUNT,
            (
                f"Account {account.account_number} already holds "
                f"{account.balance_money.to_string()}; opening balances must come "
                f"from a recorded deposit"
            ),
            action=action, resource=f"account:{account.account_number}"
        )

    def _insufficient_funds(self, account: Account, amount: Decimal, action: str) -> LedgerResult:
        return self._fail(
            FailureReason.INSUFFICIENT_FUNDS,
            (
                f"Insufficient funds: balance {account.balance_money.to_string()}, "
                f"requested {Money(amount, account.currency).to_string()}, "
                f"minimum balance {Money(account.minimum_balance(), account.currency).to_string()}"
            ),
            action=action, resource=f"account:{account.account_number}"
        )

    def _fail(
        self,
        reason: FailureReason,
        message: str,
        action: str,
        resource: str
    ) -> LedgerResult:
        log_action(
            self.logger, "warning", message,
            action=action, resource=resource,
            extra={"reason": reason.code, "kind": reason.kind.value}
        )
        return LedgerResult.failure(reason, message)
