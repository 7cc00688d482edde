"""
supplier_portal/filters.py

Filter / pagination controller.

Translates raw user input (query-string values, form fields, UI state) into
the normalized filter records of supplier_portal.schemas and drives a store's
filter and page state.

Normalization rules:
- search text is trimmed; empty after trim means "no search filter"
- the status sentinel "ALL" (any case) or an empty value means "no status
  constraint": the key is omitted, never sent as a status value
- the same sentinel on a foreign-key selection means "any"
- date bounds accept date/datetime objects, YYYY-MM-DD, ISO-8601 and
  DD.MM.YYYY; an inverted range (from after to) is dropped entirely
- numeric bounds accept comma or dot decimals; an inverted range is dropped
- unparseable dates/numbers are ignored, unknown status values are rejected
  by the record (pydantic.ValidationError)
- any filter change resets the page to 1
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Generic, Mapping, Optional, TypeVar

from .pagination import DEFAULT_LIMIT, PageMarker, Pagination, page_window
from .schemas import (
    AuditLogFilter,
    ContractFilter,
    DocumentFilter,
    PaymentFilter,
    SupplierCategoryFilter,
    SupplierFilter,
    UserFilter,
)

logger = logging.getLogger(__name__)

ALL = "ALL"

MAX_LIMIT = 100

F = TypeVar("F")


# ---------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------
def _raw(raw: Mapping[str, Any], key: str) -> Any:
    """Read a key by its snake_case name, falling back to camelCase."""
    if key in raw:
        return raw[key]
    head, *rest = key.split("_")
    camel = head + "".join(part.title() for part in rest)
    return raw.get(camel)


def normalize_search(value: Any) -> Optional[str]:
    """Trimmed search text, or None when nothing is left."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def is_all_sentinel(value: Any) -> bool:
    if value is None:
        return True
    text = str(getattr(value, "value", value)).strip()
    return text == "" or text.upper() == ALL


def normalize_status(value: Any) -> Optional[str]:
    """Upper-cased status value, or None for the ALL sentinel / empty."""
    if is_all_sentinel(value):
        return None
    return str(getattr(value, "value", value)).strip().upper()


def normalize_id(value: Any) -> Optional[str]:
    """Foreign-key selection: trimmed id, or None for ALL / empty."""
    if is_all_sentinel(value):
        return None
    return str(value).strip()


def normalize_ids(value: Any) -> Optional[list[str]]:
    """List of ids from a list or a comma separated string."""
    if value is None:
        return None
    if isinstance(value, str):
        value = value.split(",")
    ids = [str(v).strip() for v in value if not is_all_sentinel(v)]
    return ids or None


def parse_date(value: Any) -> Optional[date]:
    """Parse a date bound from user input. Returns None if empty/invalid."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    raw = str(value).strip()
    if raw == "":
        return None

    try:
        return date.fromisoformat(raw[:10])
    except ValueError:
        pass

    try:
        return datetime.strptime(raw, "%d.%m.%Y").date()
    except ValueError:
        return None


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Parse decimal from user input (accepts comma or dot)."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    raw = str(value).strip().replace(",", ".")
    if raw == "":
        return None
    try:
        return Decimal(raw)
    except (InvalidOperation, ValueError):
        return None


def parse_optional_int(value: Any) -> Optional[int]:
    """Parse optional int from form/query."""
    if value is None:
        return None
    raw = str(value).strip()
    if raw == "":
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def normalize_range(low: Any, high: Any, *, label: str) -> tuple[Any, Any]:
    """Return (low, high); an inverted range means no constraint at all."""
    if low is not None and high is not None and low > high:
        logger.info("Ignoring inverted %s range: %s > %s", label, low, high)
        return None, None
    return low, high


# ---------------------------------------------------------------------
# Filter builders (raw input -> normalized record)
# ---------------------------------------------------------------------
def build_supplier_filter(raw: Mapping[str, Any]) -> SupplierFilter:
    return SupplierFilter(
        search=normalize_search(_raw(raw, "search")),
        status=normalize_status(_raw(raw, "status")),
        category_ids=normalize_ids(_raw(raw, "category_ids")),
        country=normalize_id(_raw(raw, "country")),
    )


def build_contract_filter(raw: Mapping[str, Any]) -> ContractFilter:
    start_from, start_to = normalize_range(
        parse_date(_raw(raw, "start_date_from")),
        parse_date(_raw(raw, "start_date_to")),
        label="start date",
    )
    end_from, end_to = normalize_range(
        parse_date(_raw(raw, "end_date_from")),
        parse_date(_raw(raw, "end_date_to")),
        label="end date",
    )
    min_value, max_value = normalize_range(
        parse_decimal(_raw(raw, "min_value")),
        parse_decimal(_raw(raw, "max_value")),
        label="value",
    )
    return ContractFilter(
        search=normalize_search(_raw(raw, "search")),
        status=normalize_status(_raw(raw, "status")),
        supplier_id=normalize_id(_raw(raw, "supplier_id")),
        start_date_from=start_from,
        start_date_to=start_to,
        end_date_from=end_from,
        end_date_to=end_to,
        min_value=min_value,
        max_value=max_value,
    )


def build_payment_filter(raw: Mapping[str, Any]) -> PaymentFilter:
    date_from, date_to = normalize_range(
        parse_date(_raw(raw, "date_from")),
        parse_date(_raw(raw, "date_to")),
        label="payment date",
    )
    min_amount, max_amount = normalize_range(
        parse_decimal(_raw(raw, "min_amount")),
        parse_decimal(_raw(raw, "max_amount")),
        label="amount",
    )
    return PaymentFilter(
        search=normalize_search(_raw(raw, "search")),
        status=normalize_status(_raw(raw, "status")),
        supplier_id=normalize_id(_raw(raw, "supplier_id")),
        contract_id=normalize_id(_raw(raw, "contract_id")),
        date_from=date_from,
        date_to=date_to,
        min_amount=min_amount,
        max_amount=max_amount,
    )


def build_audit_log_filter(raw: Mapping[str, Any]) -> AuditLogFilter:
    date_from, date_to = normalize_range(
        parse_date(_raw(raw, "date_from")),
        parse_date(_raw(raw, "date_to")),
        label="audit date",
    )
    return AuditLogFilter(
        user_id=normalize_id(_raw(raw, "user_id")),
        entity_type=normalize_id(_raw(raw, "entity_type")),
        entity_id=normalize_id(_raw(raw, "entity_id")),
        action=normalize_id(_raw(raw, "action")),
        date_from=date_from,
        date_to=date_to,
    )


def build_user_filter(raw: Mapping[str, Any]) -> UserFilter:
    return UserFilter(search=normalize_search(_raw(raw, "search")))


def build_supplier_category_filter(raw: Mapping[str, Any]) -> SupplierCategoryFilter:
    return SupplierCategoryFilter(search=normalize_search(_raw(raw, "search")))


def build_document_filter(raw: Mapping[str, Any]) -> DocumentFilter:
    return DocumentFilter(
        supplier_id=normalize_id(_raw(raw, "supplier_id")),
        contract_id=normalize_id(_raw(raw, "contract_id")),
        payment_id=normalize_id(_raw(raw, "payment_id")),
    )


def parse_pagination(raw: Mapping[str, Any], default_limit: int = DEFAULT_LIMIT) -> Pagination:
    """page/limit from user input; invalid values fall back to defaults."""
    page = parse_optional_int(_raw(raw, "page"))
    limit = parse_optional_int(_raw(raw, "limit"))
    if page is None or page < 1:
        page = 1
    if limit is None or limit < 1:
        limit = default_limit
    return Pagination(page=page, limit=min(limit, MAX_LIMIT))


# ---------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------
class FilterController(Generic[F]):
    """
    Keeps the raw filter fields of one list view and pushes the normalized
    filter into its store.

    The store is any object exposing set_filter(), set_pagination(),
    reset_filter(), fetch_many(), `pagination` and `meta` (see
    supplier_portal.stores.EntityStore).
    """

    def __init__(self, store: Any, builder: Callable[[Mapping[str, Any]], F]) -> None:
        self.store = store
        self.builder = builder
        self.fields: dict[str, Any] = {}

    def apply(self, raw: Mapping[str, Any]) -> F:
        """Replace every field; the store's page goes back to 1."""
        normalized = self.builder(raw)
        self.fields = dict(raw)
        self.store.set_filter(normalized)
        return normalized

    def set_field(self, name: str, value: Any) -> F:
        """Change one field; the store's page goes back to 1."""
        fields = dict(self.fields)
        fields[name] = value
        return self.apply(fields)

    def reset(self) -> None:
        self.fields = {}
        self.store.reset_filter()

    def go_to_page(self, page: int) -> Pagination:
        """Move to a page, clamped to the pages the last response reported."""
        last_page = max(self.store.meta.total_pages, 1)
        page = min(max(int(page), 1), last_page)
        pagination = self.store.pagination.with_page(page)
        self.store.set_pagination(pagination)
        return pagination

    def page_window(self) -> list[PageMarker]:
        return page_window(self.store.pagination.page, self.store.meta.total_pages)

    async def refresh(self) -> Optional[list[dict[str, Any]]]:
        return await self.store.fetch_many()
