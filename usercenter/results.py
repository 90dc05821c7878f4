"""Tagged outcomes returned by the account workflows."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_REQUEST = "invalid_request"
    VALIDATION = "validation"
    DUPLICATE_ACCOUNT = "duplicate_account"
    REGISTRATION_FAILED = "registration_failed"
    ACCOUNT_NOT_FOUND = "account_not_found"
    BAD_CREDENTIALS = "bad_credentials"
    SESSION_UNAVAILABLE = "session_unavailable"
    NOT_LOGGED_IN = "not_logged_in"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """A terminated operation, tagged with the reason it stopped."""

    kind: ErrorKind
    reason: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Success[T], Failure]


__all__ = ["ErrorKind", "Failure", "Result", "Success"]
