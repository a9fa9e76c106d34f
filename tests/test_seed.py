"""
Test suite for seed data and the service factory
"""

import logging
import pytest
from decimal import Decimal

from bank_ledger.accounts import AccountVariant
from bank_ledger.config import LedgerConfig
from bank_ledger.seed import DEMO_USERS, create_service, seed_demo_data
from bank_ledger.transactions import TransactionKind


class TestSeedData:
    """Test the demo population"""

    def setup_method(self):
        self.service = create_service(LedgerConfig(), seed=True)

    def test_demo_users(self):
        """Test both demo users and their accounts"""
        srisha = self.service.get_user("U001")
        shilki = self.service.get_user("U002")

        assert srisha.username == "srisha"
        assert srisha.email == "sri@email.com"
        assert srisha.phone == "1234567890"
        assert shilki.username == "shilki"
        assert shilki.email == "shilki@email.com"

        acc1, = self.service.accounts_of("U001")
        acc2, = self.service.accounts_of("U002")
        assert acc1.account_number == "ACC001"
        assert acc1.variant == AccountVariant.SAVINGS
        assert acc1.balance == Decimal('50000.00')
        assert acc2.account_number == "ACC002"
        assert acc2.variant == AccountVariant.CURRENT
        assert acc2.balance == Decimal('100000.00')

    def test_opening_deposits_match_balances(self):
        """Test each seeded account has one matching DEPOSIT"""
        for entry in DEMO_USERS:
            history = self.service.transaction_history(entry["account_number"])
            assert len(history) == 1
            assert history[0].kind == TransactionKind.DEPOSIT
            assert history[0].amount == entry["opening_balance"]
            assert history[0].description == "Initial deposit"

    def test_services_are_isolated(self):
        """Test two services never share state"""
        other = create_service(LedgerConfig(), seed=True)
        assert self.service.transfer("ACC001", "ACC002", 500, "isolated")

        assert other.lookup_account("ACC001").balance == Decimal('50000.00')
        assert len(other.all_transactions()) == 2

    def test_seeding_twice_fails(self):
        """Test the seed refuses to duplicate identities"""
        with pytest.raises(ValueError, match="Cannot seed demo user srisha"):
            seed_demo_data(self.service)


class TestCreateService:
    """Test create_service seeding switches"""

    def test_seed_follows_config(self):
        """Test seed=None defers to config.seed_demo_data"""
        seeded = create_service(LedgerConfig(seed_demo_data=True))
        empty = create_service(LedgerConfig(seed_demo_data=False))

        assert seeded.user_count() == 2
        assert empty.user_count() == 0

    def test_explicit_seed_overrides_config(self):
        """Test an explicit flag wins over config"""
        assert create_service(LedgerConfig(seed_demo_data=True), seed=False).user_count() == 0
        assert create_service(LedgerConfig(seed_demo_data=False), seed=True).user_count() == 2

    def test_registration_after_seed(self):
        """Test the next registered user continues the id sequence"""
        service = create_service(LedgerConfig(), seed=True)
        account = service.new_account(AccountVariant.SAVINGS, "Meera")
        result = service.register("meera", "secret1", "m@example.com", "555", account)
        assert result.value.user_id == "U003"

    def test_log_handler_follows_config(self, reset_ledger_logger):
        """Test create_service configures the package logger unless switched off"""
        create_service(LedgerConfig(install_log_handler=False, log_level="ERROR"), seed=False)
        assert reset_ledger_logger.handlers == []
        assert reset_ledger_logger.propagate is True

        create_service(LedgerConfig(log_level="ERROR", log_format="text"), seed=False)
        assert len(reset_ledger_logger.handlers) == 1
        assert reset_ledger_logger.level == logging.ERROR
        assert reset_ledger_logger.propagate is False
