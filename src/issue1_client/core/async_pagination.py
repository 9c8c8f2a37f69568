"""Async limit/offset pagination helpers."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from typing import Any

from .builders import calculate_limit_offset


async def aiterate_pages(
    fetch_page: Callable[[int, int], Awaitable[Sequence[Any] | None]],
    *,
    per_page: int = 25,
    start_page: int = 1,
    max_pages: int = 10_000,
) -> AsyncIterator[Sequence[Any]]:
    """Yield pages from ``fetch_page(limit, offset)`` until a short page.

    An empty page ends the iteration without being yielded. At most
    ``max_pages`` pages are fetched.
    """

    if per_page < 1:
        raise ValueError("per_page must be >= 1")
    if start_page < 1:
        raise ValueError("start_page must be >= 1")

    for page in range(start_page, start_page + max_pages):
        window = calculate_limit_offset(page, per_page)
        items = await fetch_page(window["limit"], window["offset"])
        if not items:
            return
        yield items
        if len(items) < per_page:
            return


__all__ = [
    "aiterate_pages",
]
