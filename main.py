"""Command-line interface for the user center service."""

from __future__ import annotations
import argparse
import logging
import sys
from getpass import getpass
from pathlib import Path
from typing import Sequence

from usercenter.auth import AuthService
from usercenter.config import Settings, load_settings
from usercenter.database import Database, resolve_database_path
from usercenter.passwords import PasswordCodec
from usercenter.results import Failure
from usercenter.validation import MIN_PASSWORD_LENGTH

logger = logging.getLogger("usercenter.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="User center management utilities")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the YAML configuration file (defaults to USERCENTER_CONFIG or config/usercenter.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    subparsers.add_parser("init-db", help="Initialise the user database")
    subparsers.add_parser("list-users", help="List registered accounts")

    create_parser = subparsers.add_parser("create-user", help="Register a new account")
    create_parser.add_argument("account", help="Account handle used to log in")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP service")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Bind address for the API")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Port for the HTTP API (default: 8080)",
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "init-db", "list-users", "create-user"}

    # Global options may precede the subcommand.
    leading: list[str] = []
    rest = list(args_list)
    while rest:
        if rest[0] == "--config" and len(rest) >= 2:
            leading.extend(rest[:2])
            rest = rest[2:]
        elif rest[0].startswith("--config="):
            leading.append(rest[0])
            rest = rest[1:]
        else:
            break

    if not rest:
        rest = ["serve"]
    else:
        first = rest[0]
        if first in ("-h", "--help"):
            return parser.parse_args([*leading, *rest])
        if first not in known_commands:
            if any(flag in rest for flag in ("-h", "--help")):
                return parser.parse_args([*leading, *rest])
            rest = ["serve", *rest]

    return parser.parse_args([*leading, *rest])


def _load_settings(config: str | None) -> Settings:
    try:
        return load_settings(Path(config) if config else None)
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc


def _initialise_database(settings: Settings) -> Database:
    db_path = resolve_database_path(settings.database_path)
    database = Database(db_path)
    database.initialize()
    logger.info("Database initialised at %s", db_path)
    return database


def _serve(*, database: Database, settings: Settings, host: str, port: int) -> None:
    from usercenter.api import create_app
    import uvicorn

    logger.info("Starting user center API on http://%s:%s", host, port)

    app = create_app(database=database, settings=settings)
    uvicorn.run(app, host=host, port=port, log_level="info")


def _list_users(database: Database) -> None:
    users = database.list_users()
    if not users:
        print("No users are currently registered.")
        return

    print(f"{len(users)} user(s) found:")
    print(f"{'ID':>4}  {'Account':<24}  {'Name':<24}  Created")
    print("-" * 80)
    for user in users:
        created = user.created_at.strftime("%Y-%m-%d %H:%M:%S %Z") if user.created_at else "-"
        name = user.username or "<no name>"
        print(f"{user.id:>4}  {user.account:<24}  {name:<24}  {created}")


def _prompt_for_password() -> tuple[str, str] | None:
    for _ in range(3):
        password = getpass(f"Password (min {MIN_PASSWORD_LENGTH} letters or digits): ")
        if len(password) < MIN_PASSWORD_LENGTH:
            print("Password is too short. Please try again.")
            continue
        confirmation = getpass("Confirm password: ")
        if password != confirmation:
            print("Passwords do not match. Please try again.")
            continue
        return password, confirmation
    return None


def _create_user(database: Database, settings: Settings, account: str) -> int:
    credentials = _prompt_for_password()
    if credentials is None:
        print("Aborted creating user.")
        return 1

    codec = PasswordCodec(settings.password_salt, algorithm=settings.digest_algorithm)
    outcome = AuthService(database, codec).register(account.strip(), *credentials)
    if isinstance(outcome, Failure):
        print(f"Failed to create user: {outcome.reason}", file=sys.stderr)
        return 1

    print(f"Created user #{outcome.value}: {account.strip()}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for CLI usage."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    args = _parse_args(argv)
    settings = _load_settings(args.config)
    database = _initialise_database(settings)

    if args.command == "serve":
        _serve(database=database, settings=settings, host=args.host, port=args.port)
    elif args.command == "list-users":
        _list_users(database)
    elif args.command == "create-user":
        return _create_user(database, settings, args.account)
    elif args.command == "init-db":
        print("Database initialisation complete.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
