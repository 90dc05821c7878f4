"""Deterministic password digests."""

from __future__ import annotations

import hashlib

DEFAULT_DIGEST_ALGORITHM = "sha256"


class PasswordCodec:
    """Obfuscate raw passwords with a process-wide salt.

    The salt is shared by every account, so identical passwords produce
    identical digests. Stored digests are only valid for the salt and
    algorithm they were produced with; changing either locks every existing
    account out.
    """

    def __init__(self, salt: str, *, algorithm: str = DEFAULT_DIGEST_ALGORITHM) -> None:
        if not salt:
            raise ValueError("A password salt must be configured")
        try:
            probe = hashlib.new(algorithm)
        except ValueError as exc:
            raise ValueError(f"Unsupported digest algorithm '{algorithm}'") from exc
        if probe.digest_size == 0:
            # shake_* digests need an explicit output length
            raise ValueError(f"Unsupported digest algorithm '{algorithm}'")
        self._salt = salt
        self._algorithm = algorithm

    @property
    def algorithm(self) -> str:
        return self._algorithm

    def encrypt(self, raw_password: str) -> str:
        data = (self._salt + raw_password).encode("utf-8")
        return hashlib.new(self._algorithm, data).hexdigest()


__all__ = ["DEFAULT_DIGEST_ALGORITHM", "PasswordCodec"]
