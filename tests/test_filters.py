from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from supplier_portal.filters import (
    FilterController,
    build_audit_log_filter,
    build_contract_filter,
    build_payment_filter,
    build_supplier_filter,
    is_all_sentinel,
    normalize_search,
    parse_date,
    parse_decimal,
    parse_pagination,
)
from supplier_portal.pagination import ELLIPSIS, PaginationMeta
from supplier_portal.stores import SupplierStore

from conftest import envelope


@pytest.mark.parametrize("value", ["ALL", "all", "All", "", "  ", None])
def test_all_sentinel_means_no_status(value) -> None:
    assert is_all_sentinel(value) is True
    assert "status" not in build_supplier_filter({"status": value}).to_variables()


@pytest.mark.parametrize("status", ["PENDING", "APPROVED", "REJECTED", "INACTIVE"])
def test_concrete_status_passes_through(status: str) -> None:
    assert build_supplier_filter({"status": status}).to_variables() == {"status": status}


def test_lower_case_status_is_normalized() -> None:
    assert build_contract_filter({"status": "active"}).to_variables() == {"status": "ACTIVE"}


def test_unknown_status_is_rejected() -> None:
    with pytest.raises(ValidationError):
        build_supplier_filter({"status": "BOGUS"})


def test_search_is_trimmed_and_blank_means_no_search() -> None:
    assert normalize_search("  acme  ") == "acme"
    assert normalize_search("   ") is None
    assert build_supplier_filter({"search": "   "}).to_variables() == {}
    assert build_supplier_filter({"search": " acme "}).to_variables() == {"search": "acme"}


def test_supplier_filter_reads_camel_case_keys_and_comma_lists() -> None:
    flt = build_supplier_filter({"categoryIds": "c1, c2", "country": "ALL"})
    assert flt.to_variables() == {"categoryIds": ["c1", "c2"]}


def test_foreign_key_sentinel_means_any() -> None:
    flt = build_payment_filter({"supplierId": "all", "contractId": "c9"})
    assert flt.to_variables() == {"contractId": "c9"}


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2025-03-01", date(2025, 3, 1)),
        ("2025-03-01T10:15:00Z", date(2025, 3, 1)),
        ("01.03.2025", date(2025, 3, 1)),
        (date(2025, 3, 1), date(2025, 3, 1)),
        ("not a date", None),
        ("", None),
    ],
)
def test_parse_date(raw, expected) -> None:
    assert parse_date(raw) == expected


def test_parse_decimal_accepts_comma() -> None:
    assert parse_decimal("1250,75") == Decimal("1250.75")
    assert parse_decimal("abc") is None


def test_date_range_is_serialized_as_iso_dates() -> None:
    flt = build_audit_log_filter({"dateFrom": "2025-01-01", "dateTo": "31.01.2025", "action": "UPDATE"})
    assert flt.to_variables() == {"dateFrom": "2025-01-01", "dateTo": "2025-01-31", "action": "UPDATE"}


def test_inverted_date_range_is_dropped(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="supplier_portal.filters")
    flt = build_audit_log_filter({"dateFrom": "2025-02-01", "dateTo": "2025-01-01", "userId": "u1"})
    assert flt.to_variables() == {"userId": "u1"}
    assert "inverted" in caplog.text


def test_inverted_value_range_is_dropped_but_dates_kept() -> None:
    flt = build_contract_filter({"minValue": "500", "maxValue": "100", "endDateFrom": "2025-01-01"})
    assert flt.to_variables() == {"endDateFrom": "2025-01-01"}


def test_parse_pagination_defaults_and_cap() -> None:
    assert parse_pagination({}).model_dump() == {"page": 1, "limit": 10}
    assert parse_pagination({"page": "0", "limit": "abc"}, 25).model_dump() == {"page": 1, "limit": 25}
    assert parse_pagination({"page": "3", "limit": "1000"}).model_dump() == {"page": 3, "limit": 100}


def test_controller_field_change_resets_page(gateway) -> None:
    store = SupplierStore(gateway)
    controller = FilterController(store, build_supplier_filter)
    store.set_pagination({"page": 5, "limit": 20})

    controller.set_field("status", "APPROVED")
    assert store.pagination.page == 1
    assert store.pagination.limit == 20
    assert store.filter.to_variables() == {"status": "APPROVED"}

    store.set_pagination({"page": 3, "limit": 20})
    controller.set_field("search", "acme")
    assert store.pagination.page == 1
    assert store.filter.to_variables() == {"status": "APPROVED", "search": "acme"}


def test_controller_go_to_page_is_clamped(gateway) -> None:
    store = SupplierStore(gateway)
    store.meta = PaginationMeta(page=1, limit=10, total=95, has_more=True)
    controller = FilterController(store, build_supplier_filter)

    assert controller.go_to_page(42).page == 10
    assert controller.go_to_page(-3).page == 1
    assert controller.go_to_page(5).page == 5
    assert controller.page_window() == [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 10]


def test_controller_reset_clears_fields(gateway) -> None:
    store = SupplierStore(gateway)
    controller = FilterController(store, build_supplier_filter)
    controller.apply({"status": "PENDING"})
    controller.reset()
    assert controller.fields == {}
    assert store.filter.to_variables() == {}


async def test_controller_refresh_sends_normalized_filter(gateway) -> None:
    gateway.reply("GetSuppliers", envelope([{"id": "s1", "name": "Acme"}]))
    store = SupplierStore(gateway)
    controller = FilterController(store, build_supplier_filter)
    controller.apply({"status": "ALL", "search": "  acme "})

    assert await controller.refresh() == [{"id": "s1", "name": "Acme"}]
    assert gateway.last_variables("GetSuppliers") == {
        "pagination": {"page": 1, "limit": 10},
        "filter": {"search": "acme"},
    }
