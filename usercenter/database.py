"""SQLite-backed persistence for user accounts."""
from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

from .models import User, UserRole, UserStatus

logger = logging.getLogger("usercenter.database")


def _ensure_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def resolve_database_path(env_value: Optional[str]) -> Path:
    """Resolve the on-disk path for the application database."""

    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    base_dir = Path(__file__).resolve().parent.parent / "data"
    return (base_dir / "usercenter.sqlite3").resolve(strict=False)


def _current_timestamp() -> datetime:
    return datetime.now(timezone.utc)


def _serialize_datetime(value: datetime) -> str:
    return value.isoformat()


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromisoformat(value)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class UserRepository(Protocol):
    """Storage operations the account workflows depend on."""

    def count_by_account(self, account: str) -> int: ...

    def find_by_account(self, account: str) -> Optional[User]: ...

    def insert(self, user: User) -> bool: ...

    def page_by_name_substring(
        self, pattern: Optional[str], page: int, size: int
    ) -> Tuple[List[User], int, int]: ...


class Database:
    """Simple wrapper around SQLite for persisting user accounts.

    Soft-deleted rows (``is_delete = 1``) are invisible to every query.
    """

    def __init__(self, path: Path) -> None:
        _ensure_directory(path)
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def initialize(self) -> None:
        """Create the required tables if they do not already exist."""

        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    account TEXT NOT NULL,
                    password TEXT,
                    username TEXT,
                    avatar_id INTEGER,
                    gender INTEGER,
                    phone TEXT,
                    email TEXT,
                    user_status INTEGER NOT NULL DEFAULT 0,
                    user_role INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    is_delete INTEGER NOT NULL DEFAULT 0
                );

                CREATE UNIQUE INDEX IF NOT EXISTS idx_users_account_live
                    ON users(account) WHERE is_delete = 0;
                CREATE INDEX IF NOT EXISTS idx_users_username ON users(username);
                """
            )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def count_by_account(self, account: str) -> int:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS total FROM users WHERE account = ? AND is_delete = 0",
                (account,),
            ).fetchone()
        return int(row["total"])

    def find_by_account(self, account: str) -> Optional[User]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM users WHERE account = ? AND is_delete = 0",
                (account,),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def list_users(self) -> List[User]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM users WHERE is_delete = 0 ORDER BY id ASC"
            ).fetchall()
        return [self._row_to_user(row) for row in rows]

    def page_by_name_substring(
        self,
        pattern: Optional[str],
        page: int,
        size: int,
    ) -> Tuple[List[User], int, int]:
        """Return ``(rows, total_pages, total_rows)`` for one page of a name search.

        A blank *pattern* disables the name filter entirely. Matching follows
        SQLite ``LIKE`` semantics, which ignore case for ASCII letters.
        """

        if size < 1:
            raise ValueError("Page size must be at least 1")
        page = max(page, 1)

        where = "is_delete = 0"
        params: List[object] = []
        if pattern is not None and pattern.strip():
            where += " AND username LIKE ? ESCAPE '\\'"
            params.append(f"%{_escape_like(pattern)}%")

        offset = (page - 1) * size
        with self._connect() as conn:
            total_row = conn.execute(
                f"SELECT COUNT(*) AS total FROM users WHERE {where}",
                params,
            ).fetchone()
            total = int(total_row["total"])
            # Offsets past the last row may not fit in an SQLite INTEGER.
            rows = []
            if offset < total:
                rows = conn.execute(
                    f"SELECT * FROM users WHERE {where} ORDER BY id ASC LIMIT ? OFFSET ?",
                    [*params, size, offset],
                ).fetchall()

        pages = (total + size - 1) // size
        return [self._row_to_user(row) for row in rows], pages, total

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def insert(self, user: User) -> bool:
        """Persist *user* and assign its identifier.

        Returns ``False`` when the store rejects the row, e.g. because a
        concurrent registration claimed the same account first.
        """

        now = _current_timestamp()
        created_at = user.created_at or now
        updated_at = user.updated_at or now

        with self._connect() as conn:
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO users (
                        account,
                        password,
                        username,
                        avatar_id,
                        gender,
                        phone,
                        email,
                        user_status,
                        user_role,
                        created_at,
                        updated_at,
                        is_delete
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        user.account,
                        user.password,
                        user.username,
                        user.avatar_id,
                        user.gender,
                        user.phone,
                        user.email,
                        int(user.status),
                        int(user.role),
                        _serialize_datetime(created_at),
                        _serialize_datetime(updated_at),
                        int(user.is_deleted),
                    ),
                )
            except sqlite3.IntegrityError:
                logger.warning("Store rejected insert for account %s", user.account)
                return False

        user.id = cursor.lastrowid
        user.created_at = created_at
        user.updated_at = updated_at
        return True

    def soft_delete(self, user_id: int) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                "UPDATE users SET is_delete = 1, updated_at = ? WHERE id = ? AND is_delete = 0",
                (_serialize_datetime(_current_timestamp()), user_id),
            )
        return cursor.rowcount > 0

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=int(row["id"]),
            account=str(row["account"]),
            password=row["password"],
            username=row["username"],
            avatar_id=row["avatar_id"],
            gender=row["gender"],
            phone=row["phone"],
            email=row["email"],
            created_at=_parse_datetime(row["created_at"]),
            updated_at=_parse_datetime(row["updated_at"]),
            status=UserStatus(int(row["user_status"])),
            role=UserRole(int(row["user_role"])),
            is_deleted=bool(row["is_delete"]),
        )


__all__ = ["Database", "UserRepository", "resolve_database_path"]
