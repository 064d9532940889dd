"""
Pagination helpers.

Zoho pages are 1-based and capped at 200 records. Callers page with
``limit``/``offset``; the page number is always re-derived from the offset,
and the returned ``nextCursor`` is simply the next page number as a string.
A cursor is therefore only meaningful when the caller keeps the same limit.
"""

from dataclasses import dataclass
from typing import Any, Callable

DEFAULT_LIMIT = 20
MAX_PER_PAGE = 200


@dataclass(frozen=True)
class PaginationState:
    """Page/per_page pair derived from a caller's limit and offset."""
    page: int
    per_page: int

    @classmethod
    def from_params(cls, limit: int | None = None, offset: int | None = None) -> "PaginationState":
        limit = limit or DEFAULT_LIMIT
        offset = offset or 0
        return cls(page=offset // limit + 1, per_page=min(limit, MAX_PER_PAGE))

    def to_query(self) -> dict[str, str]:
        """Return the page/per_page query parameters."""
        return {"page": str(self.page), "per_page": str(self.per_page)}

    def next_cursor(self, has_more: bool) -> str | None:
        return str(self.page + 1) if has_more else None


def empty_info(per_page: int) -> dict[str, Any]:
    """Return a Zoho list ``info`` block describing an empty page."""
    return {"page": 1, "per_page": per_page, "count": 0, "more_records": False}


def build_page(
    response: dict[str, Any] | None,
    state: PaginationState,
    mapper: Callable[[dict[str, Any]], dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """
    Convert a Zoho list envelope into a paginated response.

    A missing body (Zoho answers 204 when nothing matches) yields an empty
    page.

    Args:
        response: Zoho ``{"data": [...], "info": {...}}`` envelope, or None
        state: Pagination used for the request
        mapper: Optional per-record conversion

    Returns:
        Dict with items, count, total, hasMore and nextCursor
    """
    response = response or {}
    records = response.get("data") or []
    info = response.get("info") or {}

    items = [mapper(record) for record in records] if mapper else list(records)
    has_more = bool(info.get("more_records", False))

    return {
        "items": items,
        "count": len(items),
        "total": info.get("count", 0),
        "hasMore": has_more,
        "nextCursor": state.next_cursor(has_more),
    }
