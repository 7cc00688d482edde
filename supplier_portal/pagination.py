"""
supplier_portal/pagination.py

Pagination input/output records and the page math shared by every list.

Wire shapes:
- input:  {page >= 1, limit >= 1}
- output: {items, total >= 0, page, limit, hasMore} with hasMore = page * limit < total,
  validated by PageEnvelope before anything reaches a store
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

ELLIPSIS = "..."
MAX_PAGE_BUTTONS = 5

PageMarker = Union[int, str]


class Pagination(BaseModel):
    """Requested page. Immutable; use with_page()/model_copy() to move."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=DEFAULT_PAGE, ge=1)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1)

    def with_page(self, page: int) -> "Pagination":
        return Pagination(page=page, limit=self.limit)

    def merged(self, changes: "Pagination | Mapping[str, Any] | None") -> "Pagination":
        """Apply a full or partial page/limit change; missing keys keep ours."""
        if changes is None:
            return self
        if isinstance(changes, Pagination):
            return changes
        return Pagination(**{**self.model_dump(), **dict(changes)})

    def to_variables(self) -> dict[str, int]:
        return {"page": self.page, "limit": self.limit}


class PageEnvelope(BaseModel):
    """
    A list response `{items, total, page, limit, hasMore}` as the server sent
    it. Validation fails on non-object items or non-integer counters; null
    counters fall back to the requested page.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    items: list[dict[str, Any]]
    total: Optional[int] = Field(default=None, ge=0)
    page: Optional[int] = Field(default=None, ge=1)
    limit: Optional[int] = Field(default=None, ge=1)
    has_more: Optional[bool] = Field(default=None, alias="hasMore")


class PaginationMeta(BaseModel):
    """Pagination metadata of the last successful list response."""

    model_config = ConfigDict(frozen=True)

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    total: int = 0
    has_more: bool = False

    @classmethod
    def from_response(cls, envelope: PageEnvelope | Mapping[str, Any], requested: Pagination) -> "PaginationMeta":
        """Build metadata from a list envelope; raises ValidationError when malformed."""
        if not isinstance(envelope, PageEnvelope):
            envelope = PageEnvelope.model_validate(envelope)
        page = envelope.page or requested.page
        limit = envelope.limit or requested.limit
        total = envelope.total or 0
        return cls(page=page, limit=limit, total=total, has_more=has_more(page, limit, total))

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)

    def to_dict(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "hasMore": self.has_more,
            "totalPages": self.total_pages,
        }


def total_pages(total: int, limit: int) -> int:
    """ceil(total / limit); zero items means zero pages."""
    if limit < 1:
        raise ValueError("limit must be >= 1")
    if total <= 0:
        return 0
    return math.ceil(total / limit)


def has_more(page: int, limit: int, total: int) -> bool:
    return page * limit < total


def page_window(current_page: int, total: int) -> list[PageMarker]:
    """
    Page buttons for a paginated list.

    - total <= 5: every page in order.
    - otherwise: 1, an optional "...", the pages around current_page clamped to
      [2, total - 1], an optional "...", and total. An ellipsis only appears
      where a gap of more than one page exists.

    Example: page_window(5, 10) == [1, "...", 4, 5, 6, "...", 10]
    """
    if total <= 0:
        return []
    if total <= MAX_PAGE_BUTTONS:
        return list(range(1, total + 1))

    current_page = min(max(current_page, 1), total)
    start = max(2, current_page - 1)
    end = min(total - 1, current_page + 1)

    pages: list[PageMarker] = [1]
    if start > 2:
        pages.append(ELLIPSIS)
    pages.extend(range(start, end + 1))
    if end < total - 1:
        pages.append(ELLIPSIS)
    pages.append(total)
    return pages
