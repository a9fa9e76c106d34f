"""
Operation Results Module

Every LedgerService operation reports its outcome as a LedgerResult instead
of raising, so callers can branch on the failure reason and its kind.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Broad failure categories"""
    VALIDATION = "validation"  # Input rejected by a rule, caller can correct it
    NOT_FOUND = "not_found"    # Referenced user/account/credentials unknown
    CONFLICT = "conflict"      # Would duplicate an existing identity


class FailureReason(Enum):
    """Specific failure reasons, each bound to an ErrorKind"""
    INVALID_AMOUNT = ("invalid_amount", ErrorKind.VALIDATION)
    MISSING_FIELD = ("missing_field", ErrorKind.VALIDATION)
    PASSWORD_TOO_SHORT = ("password_too_short", ErrorKind.VALIDATION)
    SELF_TRANSFER = ("self_transfer", ErrorKind.VALIDATION)
    INSUFFICIENT_FUNDS = ("insufficient_funds", ErrorKind.VALIDATION)

    INVALID_CREDENTIALS = ("invalid_credentials", ErrorKind.NOT_FOUND)
    USER_NOT_FOUND = ("user_not_found", ErrorKind.NOT_FOUND)
    ACCOUNT_NOT_FOUND = ("account_not_found", ErrorKind.NOT_FOUND)
    SOURCE_NOT_FOUND = ("source_not_found", ErrorKind.NOT_FOUND)
    DESTINATION_NOT_FOUND = ("destination_not_found", ErrorKind.NOT_FOUND)

    USERNAME_TAKEN = ("username_taken", ErrorKind.CONFLICT)
    USER_ID_TAKEN = ("user_id_taken", ErrorKind.CONFLICT)
    ACCOUNT_NUMBER_TAKEN = ("account_number_taken", ErrorKind.CONFLICT)

    def __init__(self, code: str, kind: ErrorKind):
        self.code = code
        self.kind = kind


@dataclass(frozen=True)
class LedgerResult:
    """
    Outcome of a ledger operation

    On success ``value`` carries the produced entity (User, Account,
    Transaction, ...). On failure ``reason`` and ``message`` say why.
    """
    ok: bool
    value: Any = None
    reason: Optional[FailureReason] = None
    message: str = ""

    def __post_init__(self):
        if self.ok and self.reason is not None:
            raise ValueError("Successful result cannot carry a failure reason")
        if not self.ok and self.reason is None:
            raise ValueError("Failed result must carry a failure reason")

    def __bool__(self) -> bool:
        return self.ok

    @property
    def kind(self) -> Optional[ErrorKind]:
        """ErrorKind of the failure, None on success"""
        return self.reason.kind if self.reason else None

    @classmethod
    def success(cls, value: Any = None, message: str = "") -> 'LedgerResult':
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, reason: FailureReason, message: str) -> 'LedgerResult':
        return cls(ok=False, reason=reason, message=message)
