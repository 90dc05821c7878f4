from __future__ import annotations

from pathlib import Path

import pytest

import main
from main import _parse_args


def test_default_command_invokes_serve() -> None:
    args = _parse_args([])
    assert args.command == "serve"


def test_default_command_accepts_options_without_subcommand() -> None:
    args = _parse_args(["--host", "127.0.0.1", "--port", "9000"])
    assert args.command == "serve"
    assert args.host == "127.0.0.1"
    assert args.port == 9000


def test_config_option_precedes_subcommand() -> None:
    args = _parse_args(["--config", "custom.yaml", "list-users"])
    assert args.command == "list-users"
    assert args.config == "custom.yaml"


def test_config_option_without_subcommand_defaults_to_serve() -> None:
    args = _parse_args(["--config", "custom.yaml"])
    assert args.command == "serve"
    assert args.config == "custom.yaml"


def test_create_user_requires_account() -> None:
    args = _parse_args(["create-user", "abcdef"])
    assert args.command == "create-user"
    assert args.account == "abcdef"


def test_create_and_list_users(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("USERCENTER_DB_PATH", str(tmp_path / "usercenter.sqlite3"))
    monkeypatch.setenv("USERCENTER_PASSWORD_SALT", "cli-salt")
    monkeypatch.setattr(main, "getpass", lambda prompt="": "password")
    config = tmp_path / "absent.yaml"

    assert main.main(["--config", str(config), "create-user", "abcdef"]) == 0
    assert "Created user #1: abcdef" in capsys.readouterr().out

    assert main.main(["--config", str(config), "create-user", "abcdef"]) == 1
    assert "already registered" in capsys.readouterr().err

    assert main.main(["--config", str(config), "list-users"]) == 0
    listing = capsys.readouterr().out
    assert "1 user(s) found" in listing
    assert "abcdef" in listing


def test_invalid_configuration_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("USERCENTER_PASSWORD_SALT", raising=False)
    with pytest.raises(SystemExit):
        main.main(["--config", str(tmp_path / "absent.yaml"), "init-db"])


def test_config_option_with_equals_sign() -> None:
    args = _parse_args(["--config=custom.yaml"])
    assert args.command == "serve"
    assert args.config == "custom.yaml"

    args = _parse_args(["--config=custom.yaml", "init-db"])
    assert args.command == "init-db"
    assert args.config == "custom.yaml"
