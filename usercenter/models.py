"""Domain models for user accounts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


class UserStatus(IntEnum):
    ACTIVE = 0
    DISABLED = 1


class UserRole(IntEnum):
    NORMAL = 0
    ADMIN = 1


@dataclass
class User:
    """Represents a user account stored in the user center database.

    ``id`` is ``None`` until the repository assigns one on insert.
    """

    account: str
    password: Optional[str] = None
    id: Optional[int] = None
    username: Optional[str] = None
    avatar_id: Optional[int] = None
    gender: Optional[int] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    status: UserStatus = UserStatus.ACTIVE
    role: UserRole = UserRole.NORMAL
    is_deleted: bool = False


@dataclass(frozen=True)
class SanitizedUser:
    """A user record safe to hand to callers or keep in a session."""

    id: Optional[int]
    account: str
    username: Optional[str]
    avatar_id: Optional[int]
    gender: Optional[int]
    phone: Optional[str]
    email: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    status: UserStatus
    role: UserRole


@dataclass(frozen=True)
class Page(Generic[T]):
    records: List[T] = field(default_factory=list)
    current: int = 1
    size: int = 10
    pages: int = 0
    total: int = 0


__all__ = ["Page", "SanitizedUser", "User", "UserRole", "UserStatus"]
