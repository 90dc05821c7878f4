"""Privacy-preserving projection of user records."""

from __future__ import annotations

from .models import SanitizedUser, User


def sanitize_user(user: User) -> SanitizedUser:
    """Drop the password digest and soft-delete flag from *user*."""

    return SanitizedUser(
        id=user.id,
        account=user.account,
        username=user.username,
        avatar_id=user.avatar_id,
        gender=user.gender,
        phone=user.phone,
        email=user.email,
        created_at=user.created_at,
        updated_at=user.updated_at,
        status=user.status,
        role=user.role,
    )


__all__ = ["sanitize_user"]
