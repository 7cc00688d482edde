from __future__ import annotations

import pytest
from pydantic import ValidationError

from supplier_portal.pagination import (
    ELLIPSIS,
    PageEnvelope,
    Pagination,
    PaginationMeta,
    has_more,
    page_window,
    total_pages,
)


@pytest.mark.parametrize(
    ("total", "limit", "expected"),
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 10, 3), (25, 1, 25)],
)
def test_total_pages_is_ceiling_of_total_over_limit(total: int, limit: int, expected: int) -> None:
    assert total_pages(total, limit) == expected


def test_total_pages_rejects_limit_below_one() -> None:
    with pytest.raises(ValueError):
        total_pages(10, 0)


def test_has_more_for_25_items_in_pages_of_10() -> None:
    assert has_more(1, 10, 25) is True
    assert has_more(2, 10, 25) is True
    assert has_more(3, 10, 25) is False


def test_meta_from_response_recomputes_has_more() -> None:
    # The server's flag is not trusted; it is derived from page, limit and total.
    meta = PaginationMeta.from_response(
        {"items": [], "total": 25, "page": 3, "limit": 10, "hasMore": True},
        Pagination(page=3, limit=10),
    )
    assert meta.has_more is False
    assert meta.total_pages == 3
    assert meta.to_dict() == {"page": 3, "limit": 10, "total": 25, "hasMore": False, "totalPages": 3}


def test_meta_from_response_falls_back_to_requested_page() -> None:
    meta = PaginationMeta.from_response({"items": [], "total": 4}, Pagination(page=2, limit=3))
    assert (meta.page, meta.limit, meta.total, meta.has_more) == (2, 3, 4, False)


def test_meta_from_response_rejects_non_integer_counters() -> None:
    with pytest.raises(ValidationError):
        PaginationMeta.from_response({"items": [], "total": "lots"}, Pagination())
    with pytest.raises(ValidationError):
        PaginationMeta.from_response({"items": [], "total": -1}, Pagination())


def test_page_envelope_requires_object_items() -> None:
    assert PageEnvelope.model_validate({"items": [{"id": "a"}], "hasMore": True}).has_more is True
    with pytest.raises(ValidationError):
        PageEnvelope.model_validate({"items": [{"id": "a"}, 7]})


def test_merged_applies_partial_changes() -> None:
    current = Pagination(page=3, limit=25)
    assert current.merged(None) is current
    assert current.merged({"page": 1}) == Pagination(page=1, limit=25)
    assert current.merged({"limit": 50}) == Pagination(page=3, limit=50)
    assert current.merged(Pagination(page=2, limit=5)) == Pagination(page=2, limit=5)
    with pytest.raises(ValidationError):
        current.merged({"page": 0})


def test_pagination_rejects_page_zero() -> None:
    with pytest.raises(ValidationError):
        Pagination(page=0, limit=10)


def test_with_page_keeps_limit() -> None:
    assert Pagination(page=4, limit=25).with_page(1) == Pagination(page=1, limit=25)


def test_page_window_middle_of_ten() -> None:
    assert page_window(5, 10) == [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 10]


def test_page_window_shows_all_pages_up_to_five() -> None:
    assert page_window(3, 5) == [1, 2, 3, 4, 5]
    assert page_window(1, 1) == [1]


def test_page_window_near_the_edges_has_one_ellipsis() -> None:
    assert page_window(1, 10) == [1, 2, ELLIPSIS, 10]
    assert page_window(2, 10) == [1, 2, 3, ELLIPSIS, 10]
    assert page_window(3, 10) == [1, 2, 3, 4, ELLIPSIS, 10]
    assert page_window(10, 10) == [1, ELLIPSIS, 9, 10]


def test_page_window_ellipsis_only_where_pages_are_skipped() -> None:
    assert page_window(4, 6) == [1, ELLIPSIS, 3, 4, 5, 6]


def test_page_window_empty_list_and_out_of_range_page() -> None:
    assert page_window(1, 0) == []
    assert page_window(99, 10) == [1, ELLIPSIS, 9, 10]
