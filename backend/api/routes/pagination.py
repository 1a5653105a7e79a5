"""Shared pagination constants and page-number helpers."""

from __future__ import annotations

from fastapi import Response

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def normalize_page(raw_page: str | int | None) -> int:
    """Coerce a user-supplied page number; anything unusable becomes page 1."""
    if raw_page is None:
        return 1
    try:
        page = int(str(raw_page).strip())
    except ValueError:
        return 1
    return page if page >= 1 else 1


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def set_next_page_header(
    response: Response,
    *,
    page: int,
    has_more: bool,
) -> None:
    if has_more:
        response.headers["X-Next-Page"] = str(page + 1)
