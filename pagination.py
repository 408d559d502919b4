"""Pagination over the filtered student list.

Page numbers are 1-based. ``page_buttons`` returns the page-number bar as a
list of ints with ``ELLIPSIS`` markers: first and last page always, the
current page and its neighbours, and at most one ellipsis on each side.
"""

from __future__ import annotations

import math
from typing import List, Sequence, TypeVar, Union

from models import PAGE_SIZE

T = TypeVar("T")

ELLIPSIS = "..."

PageButton = Union[int, str]


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    if count <= 0:
        return 0
    return math.ceil(count / page_size)


def clamp_page(page: int, count: int, page_size: int = PAGE_SIZE) -> int:
    """Clamp ``page`` into ``1..total_pages`` (1 when there is nothing to show)."""
    last = max(1, total_pages(count, page_size))
    return max(1, min(int(page), last))


def page_slice(items: Sequence[T], page: int, page_size: int = PAGE_SIZE) -> List[T]:
    """Items of ``page``: ``items[(page-1)*size : page*size]``."""
    start = (max(1, page) - 1) * page_size
    return list(items[start:start + page_size])


def page_buttons(current: int, pages: int) -> List[PageButton]:
    """Page-number bar for ``pages`` pages; empty when there is at most one page."""
    if pages <= 1:
        return []
    out: List[PageButton] = []
    for i in range(1, pages + 1):
        if i == 1 or i == pages or current - 1 <= i <= current + 1:
            out.append(i)
        elif out[-1] != ELLIPSIS:
            # one marker per gap, however wide
            out.append(ELLIPSIS)
    return out


def has_prev(current: int) -> bool:
    return current > 1


def has_next(current: int, pages: int) -> bool:
    return current < pages
