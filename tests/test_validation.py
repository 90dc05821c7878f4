from __future__ import annotations

import pytest

from usercenter.results import ErrorKind
from usercenter.validation import check_account, check_password


@pytest.mark.parametrize("account", ["", "a", "abcde", "ab12"])
def test_short_accounts_fail_on_length(account: str) -> None:
    failure = check_account(account)
    assert failure is not None
    assert failure.kind is ErrorKind.VALIDATION
    assert "at least 6" in failure.reason


@pytest.mark.parametrize("account", ["1abcdef", "9zzzzz", "0user01"])
def test_digit_leading_accounts_fail(account: str) -> None:
    failure = check_account(account)
    assert failure is not None
    assert "start with a digit" in failure.reason


@pytest.mark.parametrize("account", ["abc def", "abc_def", "abcdé1", "abcdef!", "abcdef\t"])
def test_accounts_with_symbols_fail(account: str) -> None:
    failure = check_account(account)
    assert failure is not None
    assert "letters and digits" in failure.reason


@pytest.mark.parametrize("account", ["abcdef", "User2023", "a12345", "ZZZZZZZZZZZZ"])
def test_valid_accounts_pass(account: str) -> None:
    assert check_account(account) is None


def test_length_is_reported_before_leading_digit() -> None:
    failure = check_account("1ab")
    assert failure is not None
    assert "at least 6" in failure.reason


def test_leading_digit_is_reported_before_symbols() -> None:
    failure = check_account("1abc-def")
    assert failure is not None
    assert "start with a digit" in failure.reason


@pytest.mark.parametrize("password", ["", "short", "1234567"])
def test_short_passwords_fail(password: str) -> None:
    failure = check_password(password)
    assert failure is not None
    assert "at least 8" in failure.reason


@pytest.mark.parametrize("password", ["password!", "pass word", "pässword"])
def test_passwords_with_symbols_fail(password: str) -> None:
    failure = check_password(password)
    assert failure is not None
    assert "letters and digits" in failure.reason


def test_passwords_may_start_with_a_digit() -> None:
    assert check_password("12345678") is None
    assert check_password("password") is None
