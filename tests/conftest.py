"""
Shared fixtures
"""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_ledger_logger():
    """Undo handlers and propagation changes made by create_service"""
    logger = logging.getLogger("bank_ledger")

    def reset():
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
        logger.propagate = True

    reset()
    yield logger
    reset()
