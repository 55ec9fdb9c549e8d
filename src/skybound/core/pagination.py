# src/skybound/core/pagination.py

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Generic, List, Sequence, TypeVar

from skybound.core.constants import ITEMS_PER_PAGE

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T]
    page: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def total_pages(count: int, page_size: int = ITEMS_PER_PAGE) -> int:
    return math.ceil(count / page_size) if count > 0 else 0


def paginate(items: Sequence[T], page: int, page_size: int = ITEMS_PER_PAGE) -> Page[T]:
    """Slice one 1-based page out of `items`, clamping `page` into range."""
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    pages = total_pages(len(items), page_size)
    current = min(max(1, int(page)), max(1, pages))
    start = (current - 1) * page_size
    return Page(items=list(items[start:start + page_size]), page=current, total_pages=pages)


def page_window(current: int, total: int, max_visible: int = 5) -> List[int]:
    """
    Page numbers to show in the pager, keeping `current` roughly centred.
    e.g. page_window(5, 10) -> [3, 4, 5, 6, 7]
    """
    if total < 1:
        return []
    start = max(1, current - max_visible // 2)
    end = min(total, start + max_visible - 1)
    if end - start < max_visible - 1:
        start = max(1, end - max_visible + 1)
    return list(range(start, end + 1))
