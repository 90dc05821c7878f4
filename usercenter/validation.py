"""Format rules for account handles and passwords."""

from __future__ import annotations

import logging
import string
from typing import Optional

from .results import ErrorKind, Failure

logger = logging.getLogger("usercenter.validation")

MIN_ACCOUNT_LENGTH = 6
MIN_PASSWORD_LENGTH = 8

_ALLOWED_CHARACTERS = frozenset(string.ascii_letters + string.digits)


def _has_disallowed_characters(value: str) -> bool:
    return any(char not in _ALLOWED_CHARACTERS for char in value)


def check_account(account: str) -> Optional[Failure]:
    """Return ``None`` when *account* is acceptable, otherwise the violated rule."""

    if len(account) < MIN_ACCOUNT_LENGTH:
        logger.debug("Account is shorter than %d characters", MIN_ACCOUNT_LENGTH)
        return Failure(
            ErrorKind.VALIDATION,
            f"Account must be at least {MIN_ACCOUNT_LENGTH} characters long",
        )

    if account[0] in string.digits:
        logger.debug("Account starts with a digit")
        return Failure(ErrorKind.VALIDATION, "Account must not start with a digit")

    if _has_disallowed_characters(account):
        logger.debug("Account contains characters outside [A-Za-z0-9]")
        return Failure(
            ErrorKind.VALIDATION,
            "Account may only contain ASCII letters and digits",
        )

    return None


def check_password(password: str) -> Optional[Failure]:
    """Return ``None`` when *password* is acceptable, otherwise the violated rule."""

    if len(password) < MIN_PASSWORD_LENGTH:
        logger.debug("Password is shorter than %d characters", MIN_PASSWORD_LENGTH)
        return Failure(
            ErrorKind.VALIDATION,
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )

    if _has_disallowed_characters(password):
        logger.debug("Password contains characters outside [A-Za-z0-9]")
        return Failure(
            ErrorKind.VALIDATION,
            "Password may only contain ASCII letters and digits",
        )

    return None


__all__ = ["MIN_ACCOUNT_LENGTH", "MIN_PASSWORD_LENGTH", "check_account", "check_password"]
