from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, List, Optional, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: List[T]
    page: int
    page_size: int
    total: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return 1 < self.page <= self.total_pages


def total_pages(total: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError("page_size must be at least 1")
    return math.ceil(total / page_size)


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice ``items`` into the 1-based ``page``.

    Pages past the end come back empty; resetting to the first page is left
    to the caller.
    """
    if page < 1:
        raise ValueError("page must be at least 1")
    pages = total_pages(len(items), page_size)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        page_size=page_size,
        total=len(items),
        total_pages=pages,
    )


def page_numbers(current: int, pages: int, max_visible: int = 5) -> List[Optional[int]]:
    """Page numbers for a pagination control; ``None`` marks an ellipsis.

    A single page (or none) needs no control at all.
    """
    if pages <= 1:
        return []
    if pages <= max_visible:
        return list(range(1, pages + 1))
    if current <= 3:
        return [1, 2, 3, 4, None, pages]
    if current >= pages - 2:
        return [1, None, *range(pages - 3, pages + 1)]
    return [1, None, current - 1, current, current + 1, None, pages]
