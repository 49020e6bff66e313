"""Shared helpers for the HTTP routes."""

import math

from fastapi import Query


def total_pages(total: int, limit: int) -> int:
    """Number of pages needed to show total rows at limit per page."""
    return math.ceil(total / limit) if limit else 0


class Pagination:  # pylint: disable=too-few-public-methods
    """Page and limit query parameters."""

    def __init__(self, default_limit: int = 10):
        self.default_limit = default_limit

    def __call__(
        self,
        page: int = Query(1, ge=1, description="1-based page number."),
        limit: int | None = Query(None, ge=1, le=100, description="Rows per page."),
    ) -> tuple[int, int]:
        return page, limit or self.default_limit
