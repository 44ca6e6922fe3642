"""
Utilities for pagination.
"""

import math
from typing import Optional, Tuple

from pydantic import BaseModel

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 50

# Largest OFFSET a signed 64-bit SQL integer can hold
MAX_OFFSET = 2**63 - 1


class PaginationEnvelope(BaseModel):
    """Pagination metadata returned alongside a page of results."""

    page: int
    limit: int
    total_items: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def build(cls, page: int, limit: int, total_items: int) -> "PaginationEnvelope":
        total_pages = math.ceil(total_items / limit) if limit > 0 else 0
        return cls(
            page=page,
            limit=limit,
            total_items=total_items,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_previous_page=page > 1,
        )

    @classmethod
    def empty(cls, page: int, limit: int) -> "PaginationEnvelope":
        """Zero-filled envelope used when the query itself failed."""
        return cls(
            page=page,
            limit=limit,
            total_items=0,
            total_pages=0,
            has_next_page=False,
            has_previous_page=False,
        )


def clamp_pagination(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = MAX_LIMIT,
) -> Tuple[int, int]:
    """
    Force page/limit into range instead of rejecting them.

    Page is at least 1 and at most the last page whose offset still fits
    in MAX_OFFSET; limit is within [1, max_limit]; missing values fall back
    to page 1 and ``default_limit``.
    """
    page = DEFAULT_PAGE if page is None else max(1, int(page))
    limit = default_limit if limit is None else int(limit)
    limit = min(max(1, limit), max_limit)
    page = min(page, MAX_OFFSET // limit + 1)
    return page, limit


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit
