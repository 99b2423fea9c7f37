# audio_classifier/core/results.py
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """Failure kinds returned by the auth and metrics services."""
    INVALID_CREDENTIALS = 'InvalidCredentials'
    ACCOUNT_LOCKED = 'AccountLocked'
    INSUFFICIENT_PERMISSIONS = 'InsufficientPermissions'
    INVALID_TOKEN = 'InvalidToken'
    NOT_FOUND = 'NotFound'
    EMAIL_TAKEN = 'EmailTaken'


@dataclass(frozen=True)
class Result:
    value: Any = None
    error: Optional[ErrorKind] = None

    @property
    def ok(self):
        return self.error is None

    @classmethod
    def success(cls, value=None):
        return cls(value=value)

    @classmethod
    def failure(cls, kind):
        return cls(error=kind)
