"""Configuration management for the user center service."""
from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Dict, Mapping, Optional

import yaml

from .passwords import DEFAULT_DIGEST_ALGORITHM

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_flag(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


@dataclass(frozen=True)
class Settings:
    """Process-wide settings.

    ``password_salt`` is part of every stored digest and must stay the same for
    the lifetime of the database.
    """

    database_path: Optional[str]
    password_salt: str
    digest_algorithm: str = DEFAULT_DIGEST_ALGORITHM
    session_ttl: timedelta = timedelta(hours=8)
    secure_cookies: bool = True

    @staticmethod
    def from_dict(data: Mapping[str, object]) -> "Settings":
        """Create :class:`Settings` from raw dictionary data."""
        salt = data.get("password_salt")
        if not salt:
            raise ValueError("Configuration must define a non-empty 'password_salt'")

        database_path = data.get("database_path")
        secure = data.get("secure_cookies", True)
        if isinstance(secure, str):
            secure = _env_flag(secure, True)

        try:
            ttl_hours = float(data.get("session_ttl_hours", 8))  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise ValueError("'session_ttl_hours' must be a number") from exc
        if ttl_hours <= 0:
            raise ValueError("'session_ttl_hours' must be positive")

        return Settings(
            database_path=str(database_path) if database_path else None,
            password_salt=str(salt),
            digest_algorithm=str(data.get("digest_algorithm") or DEFAULT_DIGEST_ALGORITHM),
            session_ttl=timedelta(hours=ttl_hours),
            secure_cookies=bool(secure),
        )


_ENV_OVERRIDES = {
    "USERCENTER_DB_PATH": "database_path",
    "USERCENTER_PASSWORD_SALT": "password_salt",
    "USERCENTER_DIGEST_ALGORITHM": "digest_algorithm",
    "USERCENTER_SESSION_TTL_HOURS": "session_ttl_hours",
    "USERCENTER_SESSION_SECURE": "secure_cookies",
}


def resolve_config_path(env_value: Optional[str]) -> Path:
    """Resolve the path to the configuration file."""
    if env_value:
        candidate = Path(env_value).expanduser().resolve(strict=False)
    else:
        candidate = (Path(__file__).resolve().parent.parent / "config" / "usercenter.yaml").resolve(strict=False)
    return candidate


def load_settings(
    config_path: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load settings from a YAML file, then apply environment overrides.

    The file is optional; a missing file leaves only the environment.
    """
    env = os.environ if environ is None else environ
    path = config_path or resolve_config_path(env.get("USERCENTER_CONFIG"))

    raw: Dict[str, object] = {}
    if path.is_file():
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Configuration file {path} must contain a mapping")
        raw.update(loaded)

    for env_name, key in _ENV_OVERRIDES.items():
        value = env.get(env_name)
        if value is not None and value.strip():
            raw[key] = value.strip()

    return Settings.from_dict(raw)


__all__ = ["Settings", "load_settings", "resolve_config_path"]
