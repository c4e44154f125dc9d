"""Pagination container for list queries."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of records plus the total count across all pages.

    Attributes:
        records: Records on this page.
        total: Number of records across all pages.
        page: 1-based page number.
        limit: Maximum records per page.
    """

    records: list[T] = field(default_factory=list)
    total: int = 0
    page: int = 1
    limit: int = 50

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def pages(self) -> int:
        """Number of pages needed to hold ``total`` records."""
        if self.total == 0 or self.limit < 1:
            return 0
        return (self.total + self.limit - 1) // self.limit


def check_page_bounds(page: int, limit: int) -> None:
    """Reject page numbers and page sizes below 1.

    Raises:
        ValueError: If ``page`` or ``limit`` is less than 1.
    """
    if page < 1:
        raise ValueError(f"page must be at least 1, got {page}")
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")
