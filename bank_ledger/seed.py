"""
Seed Data Module

Deterministic demo population installed at service construction:
two users, each owning one funded account with a matching opening deposit.
"""

from decimal import Decimal
from typing import Optional

from .accounts import Account, AccountVariant
from .config import LedgerConfig, get_config
from .logging_config import configure_logging, get_logger, log_action
from .service import INITIAL_DEPOSIT_DESCRIPTION, LedgerService
from .users import User


DEMO_USERS = [
    {
        "user_id": "U001",
        "username": "srisha",
        "password": "password123",
        "email": "sri@email.com",
        "phone": "1234567890",
        "account_number": "ACC001",
        "variant": AccountVariant.SAVINGS,
        "opening_balance": Decimal('50000.00'),
    },
    {
        "user_id": "U002",
        "username": "shilki",
        "password": "password456",
        "email": "shilki@email.com",
        "phone": "0987654321",
        "account_number": "ACC002",
        "variant": AccountVariant.CURRENT,
        "opening_balance": Decimal('100000.00'),
    },
]

logger = get_logger("bank_ledger.seed")


def seed_demo_data(service: LedgerService) -> None:
    """
    Install the demo users into service

    Raises:
        ValueError: If the service already holds any of the demo identities
    """
    for entry in DEMO_USERS:
        user = User(
            user_id=entry["user_id"],
            username=entry["username"],
            password=entry["password"],
            email=entry["email"],
            phone=entry["phone"]
        )
        account = Account(
            account_number=entry["account_number"],
            holder_name=entry["username"],
            variant=entry["variant"],
            currency=service.currency
        )

        result = service.install(
            user, account, entry["opening_balance"], INITIAL_DEPOSIT_DESCRIPTION
        )
        if not result:
            raise ValueError(f"Cannot seed demo user {entry['username']}: {result.message}")

    log_action(
        logger, "info", "Demo data seeded", action="seed",
        extra={"users": [entry["username"] for entry in DEMO_USERS]}
    )


def create_service(config: Optional[LedgerConfig] = None, seed: Optional[bool] = None) -> LedgerService:
    """
    Build a fresh LedgerService

    Logging is configured from config first, unless install_log_handler
    is off.

    Args:
        config: Configuration to use, defaults to the global one
        seed: Install demo data; None defers to config.seed_demo_data

    Returns:
        The new service, owned by the caller
    """
    config = config or get_config()
    if config.install_log_handler:
        configure_logging(config)

    service = LedgerService(config)

    if seed is None:
        seed = config.seed_demo_data
    if seed:
        seed_demo_data(service)

    return service
