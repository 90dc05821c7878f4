"""Paginated user search by display name."""

from __future__ import annotations

import logging
from typing import Optional

from .database import UserRepository
from .models import Page, SanitizedUser
from .results import ErrorKind, Failure, Result, Success
from .sanitizer import sanitize_user

logger = logging.getLogger("usercenter.search")


class SearchService:
    def __init__(self, repository: UserRepository) -> None:
        self._repository = repository

    def search_by_name(
        self,
        name_pattern: Optional[str],
        page: int,
        page_size: int,
    ) -> Result[Page[SanitizedUser]]:
        """Return one page of users whose display name contains *name_pattern*.

        A blank pattern matches every user. A page number past the end is
        answered with the last page instead of an empty one.
        """

        if page_size < 1:
            return Failure(ErrorKind.INVALID_REQUEST, "Page size must be at least 1")
        current = max(page, 1)

        rows, pages, total = self._repository.page_by_name_substring(name_pattern, current, page_size)
        if 0 < pages < current:
            logger.debug("Requested page %d exceeds last page %d, returning the last page", current, pages)
            current = pages
            rows, pages, total = self._repository.page_by_name_substring(name_pattern, current, page_size)

        logger.debug("Name search matched %d user(s) across %d page(s)", total, pages)
        return Success(
            Page(
                records=[sanitize_user(row) for row in rows],
                current=current,
                size=page_size,
                pages=pages,
                total=total,
            )
        )


__all__ = ["SearchService"]
