"""In-memory session handling for logged-in users."""

from __future__ import annotations

import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Protocol

LOGIN_STATE = "user_login_state"


class SessionContext(Protocol):
    def set(self, key: str, value: Any) -> None: ...

    def get(self, key: str) -> Any: ...


class Session:
    """Key/value context bound to one session token."""

    def __init__(self, token: str) -> None:
        self._token = token
        self._values: Dict[str, Any] = {}
        self._lock = threading.Lock()

    @property
    def token(self) -> str:
        return self._token

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._values[key] = value

    def get(self, key: str) -> Any:
        with self._lock:
            return self._values.get(key)

    def remove(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)


@dataclass
class _SessionRecord:
    session: Session
    expires_at: datetime


class SessionManager:
    """Generate, resolve, and revoke user sessions."""

    def __init__(self, *, ttl: timedelta = timedelta(hours=8)) -> None:
        self._ttl = ttl
        self._sessions: Dict[str, _SessionRecord] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    @property
    def cookie_max_age(self) -> int:
        return int(self._ttl.total_seconds())

    def create(self) -> Session:
        now = self._now()
        token = secrets.token_urlsafe(32)
        record = _SessionRecord(session=Session(token), expires_at=now + self._ttl)
        with self._lock:
            self._purge_expired(now)
            self._sessions[token] = record
        return record.session

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _purge_expired(self, now: datetime) -> None:
        # Caller holds the lock.
        expired = [token for token, record in self._sessions.items() if record.expires_at <= now]
        for token in expired:
            del self._sessions[token]

    def resolve(self, token: str) -> Optional[Session]:
        now = self._now()
        with self._lock:
            record = self._sessions.get(token)
            if record is None:
                return None
            if record.expires_at <= now:
                self._sessions.pop(token, None)
                return None
            record.expires_at = now + self._ttl
            return record.session

    def destroy(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)


__all__ = ["LOGIN_STATE", "Session", "SessionContext", "SessionManager"]
