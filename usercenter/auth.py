"""Registration and login workflows."""

from __future__ import annotations

import logging
from typing import Optional

from .database import UserRepository
from .models import SanitizedUser, User
from .passwords import PasswordCodec
from .results import ErrorKind, Failure, Result, Success
from .sanitizer import sanitize_user
from .sessions import LOGIN_STATE, SessionContext
from .validation import check_account, check_password

logger = logging.getLogger("usercenter.auth")


def _is_blank(*values: Optional[str]) -> bool:
    return any(value is None or not value.strip() for value in values)


class AuthService:
    """Validate credentials, create accounts, and record logins in a session.

    The service keeps no state of its own; every call is a function of its
    arguments and of the repository and session it is given.
    """

    def __init__(self, repository: UserRepository, codec: PasswordCodec) -> None:
        self._repository = repository
        self._codec = codec

    def register(
        self,
        account: Optional[str],
        password: Optional[str],
        confirmation: Optional[str],
    ) -> Result[int]:
        """Create an account and return its identifier.

        Nothing is written unless every check passes.
        """

        logger.debug("Registering account %s", account)

        if _is_blank(account, password, confirmation):
            return Failure(ErrorKind.INVALID_REQUEST, "Account, password and confirmation are required")

        if password != confirmation:
            return Failure(ErrorKind.VALIDATION, "Password and confirmation do not match")

        failure = check_account(account) or check_password(password)
        if failure is not None:
            return failure

        if self._repository.count_by_account(account) > 0:
            logger.debug("Account %s is already taken", account)
            return Failure(ErrorKind.DUPLICATE_ACCOUNT, "Account is already registered")

        user = User(account=account, password=self._codec.encrypt(password))
        if not self._repository.insert(user) or user.id is None:
            logger.warning("Failed to persist new account %s", account)
            return Failure(ErrorKind.REGISTRATION_FAILED, "Registration failed, please try again later")

        logger.info("Registered account %s as user %s", account, user.id)
        return Success(user.id)

    def login(
        self,
        account: Optional[str],
        password: Optional[str],
        session: Optional[SessionContext],
    ) -> Result[SanitizedUser]:
        """Check credentials and store the sanitized user in *session*."""

        logger.debug("Login attempt for account %s", account)

        if _is_blank(account, password):
            return Failure(ErrorKind.INVALID_REQUEST, "Account and password are required")

        failure = check_account(account) or check_password(password)
        if failure is not None:
            return failure

        digest = self._codec.encrypt(password)

        user = self._repository.find_by_account(account)
        if user is None:
            logger.warning("Login failed for %s: no such account", account)
            return Failure(ErrorKind.ACCOUNT_NOT_FOUND, "No account matches the supplied account name")

        if user.password != digest:
            logger.warning("Login failed for %s: password mismatch", account)
            return Failure(ErrorKind.BAD_CREDENTIALS, "Password is incorrect")

        safe_user = sanitize_user(user)

        if session is None:
            logger.error("No session available to record login for user %s", user.id)
            return Failure(ErrorKind.SESSION_UNAVAILABLE, "Login state could not be saved")

        session.set(LOGIN_STATE, safe_user)
        logger.info("User %s logged in", user.id)
        return Success(safe_user)

    def current_user(self, session: Optional[SessionContext]) -> Result[SanitizedUser]:
        """Return the user recorded in *session* by a previous login."""

        snapshot = session.get(LOGIN_STATE) if session is not None else None
        if not isinstance(snapshot, SanitizedUser):
            return Failure(ErrorKind.NOT_LOGGED_IN, "You may not be logged in")
        return Success(snapshot)


__all__ = ["AuthService"]
