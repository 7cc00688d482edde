"""
supplier_portal/stores.py

Entity stores: an in-memory cache of the current page of one entity type,
the selected ("current") entity, and the workflow actions on it.

Goals:
- One explicit store object per entity type, built around an injected
  gateway (anything with `async execute(document, variables)`), so each store
  can be exercised with a fake gateway.
- Uniform actions: fetch_one, fetch_many, create, update, delete, approve,
  reject, set_filter, reset_filter, set_pagination, clear, set_current.

IMPORTANT:
- The server is the source of truth. Local changes after a mutation are a
  shallow merge of the fields the server returned (see supplier_portal.records)
  and are safe to overwrite by the next fetch_many.
- A failed action leaves items/current/meta exactly as they were. The store
  records the sanitized message in `error`, notifies, and returns None/False.
  GatewayError never leaves a store action, and neither does a malformed
  response: that is recorded as a SchemaError.
- Precondition violations (empty id, empty rejection reason, invalid page)
  raise ValueError before any request is sent.
- List requests carry a generation number. A response older than the latest
  list request issued by the same store is discarded.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, ValidationError

from .audit import export_audit_logs_csv
from .errors import GatewayError, SchemaError
from .filters import (
    build_audit_log_filter,
    build_contract_filter,
    build_document_filter,
    build_payment_filter,
    build_supplier_category_filter,
    build_supplier_filter,
    build_user_filter,
)
from .graphql import mutations, queries
from .notifications import LogNotifier, Notifier
from .pagination import DEFAULT_LIMIT, PageEnvelope, Pagination, PaginationMeta
from .records import Record, find_by_id, merge_into, merge_record, prepend, remove_by_id, same_id
from .schemas import (
    AuditLogFilter,
    ContractFilter,
    DocumentFilter,
    PaymentFilter,
    PaymentStatus,
    PaymentUpdateInput,
    SupplierCategoryFilter,
    SupplierFilter,
    UserFilter,
    UserRole,
    days_remaining,
)

logger = logging.getLogger(__name__)


def _require_id(entity_id: Any) -> str:
    if entity_id is None or str(entity_id).strip() == "":
        raise ValueError("id must be a non-empty string")
    return str(entity_id).strip()


def _variables(value: Any) -> Any:
    """Wire form of an input record (or a plain mapping, passed as is)."""
    if isinstance(value, BaseModel) and hasattr(value, "to_variables"):
        return value.to_variables()
    if isinstance(value, Mapping):
        return dict(value)
    return value


# ---------------------------------------------------------------------
# Base stores
# ---------------------------------------------------------------------
class GatewayStore:
    """Gateway access with the loading/error bookkeeping every store shares."""

    def __init__(self, gateway: Any, notifier: Optional[Notifier] = None) -> None:
        self.gateway = gateway
        self.notifier: Notifier = notifier or LogNotifier()
        self.error: Optional[str] = None
        self.failure: Optional[GatewayError] = None
        self._pending = 0

    @property
    def loading(self) -> bool:
        return self._pending > 0

    async def _request(self, document: str, variables: Optional[Mapping[str, Any]] = None) -> Any:
        self._pending += 1
        self.error = None
        self.failure = None
        try:
            return await self.gateway.execute(document, dict(variables or {}))
        finally:
            self._pending -= 1

    def _fail(self, error: GatewayError | str) -> None:
        message = error.user_message if isinstance(error, GatewayError) else error
        self.error = message
        self.failure = error if isinstance(error, GatewayError) else None
        self.notifier.error(message)

    def _malformed(self, what: str, detail: Any) -> None:
        logger.warning("Malformed %s: %s", what, detail)
        self._fail(SchemaError(f"malformed {what}: {detail}"))

    async def _fetch_value(self, document: str, expected: type, what: str, variables: Optional[Mapping[str, Any]] = None) -> Any:
        """Fetch a non-paginated payload (summary object or aggregate list)."""
        try:
            value = await self._request(document, variables)
        except GatewayError as exc:
            self._fail(exc)
            return None
        if not isinstance(value, expected):
            self._malformed(what, f"expected {expected.__name__}, got {type(value).__name__}")
            return None
        if expected is list and not all(isinstance(row, dict) for row in value):
            self._malformed(what, "rows are not objects")
            return None
        return value


class EntityStore(GatewayStore):
    """Read side shared by every store: one page of items plus `current`."""

    entity_name = "Record"
    get_document: str = ""
    list_document: str = ""
    filter_model: type[BaseModel] = BaseModel
    filter_builder: Optional[Callable[[Mapping[str, Any]], Any]] = None
    # Name of the variable carrying the filter; None spreads its keys instead.
    filter_variable: Optional[str] = "filter"

    def __init__(self, gateway: Any, notifier: Optional[Notifier] = None, *, default_limit: int = DEFAULT_LIMIT) -> None:
        super().__init__(gateway, notifier)
        self.default_limit = default_limit

        self.items: list[Record] = []
        self.current: Optional[Record] = None
        self.pagination = Pagination(limit=default_limit)
        self.meta = PaginationMeta(limit=default_limit)
        self.filter = self.filter_model()

        self._generation = 0

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def state(self) -> dict[str, Any]:
        """JSON-friendly snapshot for the web layer."""
        return {
            "items": list(self.items),
            "current": self.current,
            "pagination": self.meta.to_dict(),
            "filter": self.filter.to_variables(),
            "loading": self.loading,
            "error": self.error,
        }

    def display_name(self, entity: Mapping[str, Any]) -> str:
        return str(entity.get("name") or entity.get("title") or entity.get("id") or "")

    def _normalize(self, entity: Record) -> Record:
        return entity

    def _merge(self, entity: Mapping[str, Any], changes: Mapping[str, Any]) -> Record:
        """Shallow merge of server-confirmed changes, then re-derive fields."""
        return self._normalize(merge_record(entity, changes))

    # ------------------------------------------------------------------
    # Filter / pagination
    # ------------------------------------------------------------------
    def _coerce_filter(self, value: Any) -> Any:
        if isinstance(value, self.filter_model):
            return value
        if isinstance(value, Mapping):
            if self.filter_builder is None:
                return self.filter_model.model_validate(value)
            return self.filter_builder(value)
        raise TypeError(f"expected {self.filter_model.__name__} or a mapping, got {type(value).__name__}")

    def set_filter(self, value: Any) -> None:
        """Replace the filter wholesale; the page goes back to 1."""
        self.filter = self._coerce_filter(value)
        self.pagination = self.pagination.with_page(1)

    def reset_filter(self) -> None:
        self.filter = self.filter_model()
        self.pagination = Pagination(page=1, limit=self.default_limit)

    def set_pagination(self, pagination: Pagination | Mapping[str, Any]) -> None:
        """Full or partial change; a missing page or limit keeps the stored one."""
        self.pagination = self.pagination.merged(pagination)

    def clear(self) -> None:
        """Drop the cached page. In-flight list responses are discarded."""
        self._generation += 1
        self.items = []
        self.meta = PaginationMeta(limit=self.pagination.limit)

    def set_current(self, entity: Optional[Mapping[str, Any]]) -> None:
        self.current = dict(entity) if entity is not None else None

    # ------------------------------------------------------------------
    # Gateway plumbing
    # ------------------------------------------------------------------
    def _filter_variables(self, value: Any) -> dict[str, Any]:
        wire = value.to_variables()
        if self.filter_variable is None:
            return wire
        return {self.filter_variable: wire}

    async def _fetch_page(self, document: str, variables: dict[str, Any], pagination: Pagination, filter: Any = None) -> Optional[list[Record]]:
        self._generation += 1
        generation = self._generation
        try:
            envelope = await self._request(document, variables)
        except GatewayError as exc:
            if generation != self._generation:
                logger.debug("Discarding stale %s list failure (generation %s)", self.entity_name, generation)
                return None
            self._fail(exc)
            return None

        if generation != self._generation:
            logger.debug(
                "Discarding stale %s list response (generation %s, latest %s)",
                self.entity_name,
                generation,
                self._generation,
            )
            return None

        try:
            page = PageEnvelope.model_validate(envelope)
        except ValidationError as exc:
            self._malformed(f"{self.entity_name} list response", exc.errors(include_url=False))
            return None

        self.items = [self._normalize(dict(item)) for item in page.items]
        self.meta = PaginationMeta.from_response(page, pagination)
        self.pagination = pagination
        if filter is not None:
            self.filter = filter
        return list(self.items)

    # ------------------------------------------------------------------
    # Read actions
    # ------------------------------------------------------------------
    async def fetch_one(self, entity_id: Any) -> Optional[Record]:
        """Load one entity into `current`. `current` is kept on failure."""
        entity_id = _require_id(entity_id)
        try:
            entity = await self._request(self.get_document, {"id": entity_id})
        except GatewayError as exc:
            self._fail(exc)
            return None

        if entity is None:
            self._fail(f"{self.entity_name} not found.")
            return None
        if not isinstance(entity, dict):
            self._malformed(f"{self.entity_name} payload", f"expected an object, got {type(entity).__name__}")
            return None

        self.current = self._normalize(dict(entity))
        return dict(self.current)

    async def fetch_many(
        self,
        pagination: Optional[Pagination | Mapping[str, Any]] = None,
        filter: Any = None,
    ) -> Optional[list[Record]]:
        """
        Load one page. Missing arguments (or missing page/limit keys) fall back
        to the stored pagination and filter; on success items and meta are
        replaced wholesale.
        """
        page = self.pagination.merged(pagination)
        wanted = self.filter if filter is None else self._coerce_filter(filter)

        variables = {"pagination": page.to_variables(), **self._filter_variables(wanted)}
        return await self._fetch_page(self.list_document, variables, page, wanted)

    def find(self, entity_id: Any) -> Optional[Record]:
        return find_by_id(self.items, entity_id)

    # ------------------------------------------------------------------
    # Local cache updates (server-confirmed results only)
    # ------------------------------------------------------------------
    def _apply_changes(self, entity_id: str, changes: Mapping[str, Any]) -> Record:
        self.items = merge_into(self.items, entity_id, changes, merge=self._merge)
        if same_id(self.current, entity_id):
            self.current = self._merge(self.current, changes)
            return dict(self.current)
        return find_by_id(self.items, entity_id) or dict(changes)

    def _insert(self, entity: Mapping[str, Any]) -> Record:
        entity = self._normalize(dict(entity))
        self.items = prepend(self.items, entity)
        self.current = dict(entity)
        return dict(entity)

    def _remove(self, entity_id: str) -> None:
        self.items = remove_by_id(self.items, entity_id)
        if same_id(self.current, entity_id):
            self.current = None


class MutableEntityStore(EntityStore):
    """Adds create / delete."""

    create_document: str = ""
    delete_document: str = ""

    async def _mutate_entity(self, document: str, variables: Mapping[str, Any]) -> Optional[Record]:
        try:
            entity = await self._request(document, variables)
        except GatewayError as exc:
            self._fail(exc)
            return None
        if not isinstance(entity, dict):
            self._malformed(f"{self.entity_name} mutation result", f"expected an object, got {type(entity).__name__}")
            return None
        return entity

    async def _merge_action(self, document: str, entity_id: Any, variables: Mapping[str, Any], verb: str) -> Optional[Record]:
        """Run a mutation returning changed fields and merge them by id."""
        changes = await self._mutate_entity(document, variables)
        if changes is None:
            return None
        merged = self._apply_changes(entity_id, changes)
        self.notifier.success(f"{self.entity_name} {verb}.")
        return merged

    async def create(self, payload: Any) -> Optional[Record]:
        entity = await self._mutate_entity(self.create_document, {"input": _variables(payload)})
        if entity is None:
            return None
        entity = self._insert(entity)
        self.notifier.success(f"{self.entity_name} \"{self.display_name(entity)}\" created.")
        return entity

    async def delete(self, entity_id: Any) -> bool:
        """True only when the server confirms the delete; False leaves state as is."""
        entity_id = _require_id(entity_id)
        try:
            deleted = await self._request(self.delete_document, {"id": entity_id})
        except GatewayError as exc:
            self._fail(exc)
            return False

        if deleted is not True:
            logger.info("%s %s was not deleted (server returned %r)", self.entity_name, entity_id, deleted)
            return False

        self._remove(entity_id)
        self.notifier.success(f"{self.entity_name} deleted.")
        return True


class EditableEntityStore(MutableEntityStore):
    """Adds update."""

    update_document: str = ""

    async def update(self, entity_id: Any, changes: Any) -> Optional[Record]:
        entity_id = _require_id(entity_id)
        return await self._merge_action(
            self.update_document,
            entity_id,
            {"id": entity_id, "input": _variables(changes)},
            "updated",
        )


class WorkflowEntityStore(EditableEntityStore):
    """Adds the approve / reject workflow."""

    approve_document: str = ""
    reject_document: str = ""

    async def approve(self, entity_id: Any) -> Optional[Record]:
        entity_id = _require_id(entity_id)
        return await self._merge_action(self.approve_document, entity_id, {"id": entity_id}, "approved")

    async def reject(self, entity_id: Any, reason: str) -> Optional[Record]:
        entity_id = _require_id(entity_id)
        if not isinstance(reason, str) or not reason.strip():
            raise ValueError("a rejection reason is required")
        return await self._merge_action(
            self.reject_document,
            entity_id,
            {"id": entity_id, "reason": reason.strip()},
            "rejected",
        )


# ---------------------------------------------------------------------
# Entity stores
# ---------------------------------------------------------------------
class SupplierStore(WorkflowEntityStore):
    entity_name = "Supplier"
    get_document = queries.GET_SUPPLIER_QUERY
    list_document = queries.GET_SUPPLIERS_QUERY
    create_document = mutations.CREATE_SUPPLIER_MUTATION
    update_document = mutations.UPDATE_SUPPLIER_MUTATION
    delete_document = mutations.DELETE_SUPPLIER_MUTATION
    approve_document = mutations.APPROVE_SUPPLIER_MUTATION
    reject_document = mutations.REJECT_SUPPLIER_MUTATION
    filter_model = SupplierFilter
    filter_builder = staticmethod(build_supplier_filter)

    async def rate(self, rating: Any) -> Optional[Record]:
        """Store sub-ratings; the overall rating is derived when not given."""
        wire = _variables(rating)
        supplier_id = _require_id(wire.get("supplierId") or wire.get("supplier_id"))
        return await self._merge_action(mutations.RATE_SUPPLIER_MUTATION, supplier_id, {"input": wire}, "rated")


class SupplierCategoryStore(EditableEntityStore):
    """Categories a supplier can be filed under (Supplier filter `categoryIds`)."""

    entity_name = "Supplier category"
    get_document = queries.GET_SUPPLIER_CATEGORY_QUERY
    list_document = queries.GET_SUPPLIER_CATEGORIES_QUERY
    create_document = mutations.CREATE_SUPPLIER_CATEGORY_MUTATION
    update_document = mutations.UPDATE_SUPPLIER_CATEGORY_MUTATION
    delete_document = mutations.DELETE_SUPPLIER_CATEGORY_MUTATION
    filter_model = SupplierCategoryFilter
    filter_builder = staticmethod(build_supplier_category_filter)
    filter_variable = None

    def choices(self) -> list[tuple[str, str]]:
        """(id, name) pairs of the loaded page, by name, for filter dropdowns."""
        pairs = [(str(item.get("id")), str(item.get("name") or "")) for item in self.items]
        return sorted(pairs, key=lambda pair: pair[1].lower())


class ContractStore(WorkflowEntityStore):
    entity_name = "Contract"
    get_document = queries.GET_CONTRACT_QUERY
    list_document = queries.GET_CONTRACTS_QUERY
    create_document = mutations.CREATE_CONTRACT_MUTATION
    update_document = mutations.UPDATE_CONTRACT_MUTATION
    delete_document = mutations.DELETE_CONTRACT_MUTATION
    approve_document = mutations.APPROVE_CONTRACT_MUTATION
    reject_document = mutations.REJECT_CONTRACT_MUTATION
    filter_model = ContractFilter
    filter_builder = staticmethod(build_contract_filter)

    def __init__(self, gateway: Any, notifier: Optional[Notifier] = None, *, default_limit: int = DEFAULT_LIMIT) -> None:
        super().__init__(gateway, notifier, default_limit=default_limit)
        self.expiration_summary: Optional[Record] = None
        self.by_status: list[Record] = []

    def display_name(self, entity: Mapping[str, Any]) -> str:
        return str(entity.get("title") or entity.get("contractNumber") or entity.get("id") or "")

    def _normalize(self, entity: Record) -> Record:
        # Fill daysRemaining when the server left it out.
        if "daysRemaining" not in entity and entity.get("endDate") and entity.get("status"):
            try:
                end_date = date.fromisoformat(str(entity["endDate"])[:10])
                entity["daysRemaining"] = days_remaining(end_date, entity["status"])
            except ValueError:
                pass
        return entity

    def _merge(self, entity: Mapping[str, Any], changes: Mapping[str, Any]) -> Record:
        merged = merge_record(entity, changes)
        if ("endDate" in changes or "status" in changes) and "daysRemaining" not in changes:
            # Derived from endDate and status; recompute from the merged values.
            merged.pop("daysRemaining", None)
        return self._normalize(merged)

    async def fetch_expiring(
        self,
        days_threshold: int = 30,
        pagination: Optional[Pagination | Mapping[str, Any]] = None,
    ) -> Optional[list[Record]]:
        """Contracts ending within `days_threshold` days (replaces the page)."""
        page = self.pagination.merged(pagination)
        variables = {"daysThreshold": int(days_threshold), "pagination": page.to_variables()}
        return await self._fetch_page(queries.GET_EXPIRING_CONTRACTS_QUERY, variables, page)

    async def fetch_expiration_summary(self) -> Optional[Record]:
        """Counts of contracts expiring soon / later / expired, plus the largest one."""
        summary = await self._fetch_value(
            queries.GET_CONTRACT_EXPIRATION_SUMMARY_QUERY,
            dict,
            "contract expiration summary",
        )
        if summary is None:
            return None
        self.expiration_summary = dict(summary)
        return dict(summary)

    async def fetch_by_status(self) -> Optional[list[Record]]:
        """Count and total value of contracts per status."""
        rows = await self._fetch_value(queries.GET_CONTRACTS_BY_STATUS_QUERY, list, "contracts by status")
        if rows is None:
            return None
        self.by_status = [dict(row) for row in rows]
        return list(self.by_status)


class PaymentStore(WorkflowEntityStore):
    entity_name = "Payment"
    get_document = queries.GET_PAYMENT_QUERY
    list_document = queries.GET_PAYMENTS_QUERY
    create_document = mutations.CREATE_PAYMENT_MUTATION
    update_document = mutations.UPDATE_PAYMENT_MUTATION
    delete_document = mutations.DELETE_PAYMENT_MUTATION
    approve_document = mutations.APPROVE_PAYMENT_MUTATION
    reject_document = mutations.REJECT_PAYMENT_MUTATION
    filter_model = PaymentFilter
    filter_builder = staticmethod(build_payment_filter)

    def display_name(self, entity: Mapping[str, Any]) -> str:
        if entity.get("invoiceNumber"):
            return str(entity["invoiceNumber"])
        if entity.get("amount") is not None:
            return f"{entity['amount']} {entity.get('currency') or ''}".strip()
        return str(entity.get("id") or "")

    async def mark_paid(self, entity_id: Any, payment_date: Optional[date] = None) -> Optional[Record]:
        """Move a payment to PAID; the only path that sets paymentDate."""
        changes = PaymentUpdateInput(status=PaymentStatus.PAID, payment_date=payment_date or date.today())
        return await self.update(entity_id, changes)


class DocumentStore(MutableEntityStore):
    """Documents attached to a supplier, contract or payment. Uploaded or deleted, never edited."""

    entity_name = "Document"
    get_document = queries.GET_DOCUMENT_QUERY
    list_document = queries.GET_DOCUMENTS_QUERY
    create_document = mutations.UPLOAD_DOCUMENT_MUTATION
    delete_document = mutations.DELETE_DOCUMENT_MUTATION
    filter_model = DocumentFilter
    filter_builder = staticmethod(build_document_filter)
    filter_variable = None

    async def upload(self, document: Any) -> Optional[Record]:
        return await self.create(document)


class UserStore(EditableEntityStore):
    entity_name = "User"
    get_document = queries.GET_USER_QUERY
    list_document = queries.GET_USERS_QUERY
    create_document = mutations.CREATE_USER_MUTATION
    update_document = mutations.UPDATE_USER_MUTATION
    delete_document = mutations.DELETE_USER_MUTATION
    filter_model = UserFilter
    filter_builder = staticmethod(build_user_filter)
    filter_variable = None

    def display_name(self, entity: Mapping[str, Any]) -> str:
        name = f"{entity.get('firstName') or ''} {entity.get('lastName') or ''}".strip()
        return name or str(entity.get("email") or entity.get("id") or "")

    async def change_role(self, user_id: Any, role: UserRole | str) -> Optional[Record]:
        user_id = _require_id(user_id)
        role = UserRole(role)
        return await self._merge_action(
            mutations.CHANGE_USER_ROLE_MUTATION,
            user_id,
            {"userId": user_id, "newRole": role.value},
            "role changed",
        )

    async def toggle_status(self, user_id: Any, is_active: bool) -> Optional[Record]:
        user_id = _require_id(user_id)
        return await self._merge_action(
            mutations.TOGGLE_USER_STATUS_MUTATION,
            user_id,
            {"userId": user_id, "isActive": bool(is_active)},
            "activated" if is_active else "deactivated",
        )


class AuditLogStore(EntityStore):
    """Read-only: audit entries are never edited or deleted."""

    entity_name = "Audit log"
    get_document = queries.GET_AUDIT_LOG_QUERY
    list_document = queries.GET_AUDIT_LOGS_QUERY
    filter_model = AuditLogFilter
    filter_builder = staticmethod(build_audit_log_filter)

    def export_csv(self) -> str:
        """CSV of the currently loaded page."""
        return export_audit_logs_csv(self.items)


# ---------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------
DEFAULT_PAYMENT_MONTHS = 6


class AnalyticsStore(GatewayStore):
    """
    Dashboard aggregates computed by the API. Nothing here is paginated or
    filtered; every fetch replaces its own slice of state on success.
    """

    def __init__(self, gateway: Any, notifier: Optional[Notifier] = None) -> None:
        super().__init__(gateway, notifier)
        self.summary: Optional[Record] = None
        self.suppliers_by_country: list[Record] = []
        self.suppliers_by_category: list[Record] = []
        self.contracts_by_status: list[Record] = []
        self.payments_by_month: list[Record] = []
        self._last_failure: Optional[tuple[Optional[str], Optional[GatewayError]]] = None

    def _fail(self, error: GatewayError | str) -> None:
        super()._fail(error)
        self._last_failure = (self.error, self.failure)

    @property
    def dashboard(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "suppliersByCountry": list(self.suppliers_by_country),
            "suppliersByCategory": list(self.suppliers_by_category),
            "contractsByStatus": list(self.contracts_by_status),
            "paymentsByMonth": list(self.payments_by_month),
        }

    async def fetch_summary(self) -> Optional[Record]:
        summary = await self._fetch_value(queries.GET_ANALYTICS_SUMMARY_QUERY, dict, "analytics summary")
        if summary is None:
            return None
        self.summary = dict(summary)
        return dict(summary)

    async def fetch_suppliers_by_country(self) -> Optional[list[Record]]:
        rows = await self._fetch_value(queries.GET_SUPPLIERS_BY_COUNTRY_QUERY, list, "suppliers by country")
        if rows is None:
            return None
        self.suppliers_by_country = [dict(row) for row in rows]
        return list(self.suppliers_by_country)

    async def fetch_suppliers_by_category(self) -> Optional[list[Record]]:
        rows = await self._fetch_value(queries.GET_SUPPLIERS_BY_CATEGORY_QUERY, list, "suppliers by category")
        if rows is None:
            return None
        self.suppliers_by_category = [dict(row) for row in rows]
        return list(self.suppliers_by_category)

    async def fetch_contracts_by_status(self) -> Optional[list[Record]]:
        rows = await self._fetch_value(queries.GET_CONTRACTS_BY_STATUS_QUERY, list, "contracts by status")
        if rows is None:
            return None
        self.contracts_by_status = [dict(row) for row in rows]
        return list(self.contracts_by_status)

    async def fetch_payments_by_month(self, months: int = DEFAULT_PAYMENT_MONTHS) -> Optional[list[Record]]:
        if int(months) < 1:
            raise ValueError("months must be >= 1")
        rows = await self._fetch_value(
            queries.GET_PAYMENTS_BY_MONTH_QUERY,
            list,
            "payments by month",
            {"months": int(months)},
        )
        if rows is None:
            return None
        self.payments_by_month = [dict(row) for row in rows]
        return list(self.payments_by_month)

    async def fetch_dashboard(self, months: int = DEFAULT_PAYMENT_MONTHS) -> Optional[dict[str, Any]]:
        """
        Load every aggregate concurrently. Parts that fail keep their previous
        value; the result is None when any part failed (`error` holds the last
        failure's message).
        """
        self._last_failure = None
        results = await asyncio.gather(
            self.fetch_summary(),
            self.fetch_suppliers_by_country(),
            self.fetch_suppliers_by_category(),
            self.fetch_contracts_by_status(),
            self.fetch_payments_by_month(months),
        )
        failed = [result for result in results if result is None]
        if failed:
            logger.info("Dashboard loaded with %s failed part(s)", len(failed))
            # A later part starting its request clears `error`; restore the failure.
            if self._last_failure is not None:
                self.error, self.failure = self._last_failure
            return None
        return self.dashboard


# ---------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------
class AuthStore:
    """
    Signed-in user, token and role permission map.

    The token itself is handed to `token_sink` (the web layer keeps it in the
    session cookie); this store never persists it.
    """

    def __init__(
        self,
        gateway: Any,
        notifier: Optional[Notifier] = None,
        *,
        token_sink: Optional[Callable[[Optional[str]], None]] = None,
    ) -> None:
        self.gateway = gateway
        self.notifier: Notifier = notifier or LogNotifier()
        self._token_sink = token_sink
        self.user: Optional[Record] = None
        self.permissions: dict[str, dict[str, bool]] = {}
        self.error: Optional[str] = None
        self.loading = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _store_token(self, token: Optional[str]) -> None:
        if self._token_sink is not None:
            self._token_sink(token)

    async def _request(self, document: str, variables: Optional[Mapping[str, Any]] = None) -> Any:
        self.loading = True
        self.error = None
        try:
            return await self.gateway.execute(document, dict(variables or {}))
        finally:
            self.loading = False

    async def login(self, credentials: Any) -> bool:
        wire = _variables(credentials)
        wire = {k: v for k, v in wire.items() if k in ("email", "password")}
        try:
            result = await self._request(mutations.LOGIN_MUTATION, {"input": wire})
        except GatewayError as exc:
            self.error = exc.user_message
            self.notifier.error(exc.user_message)
            return False

        if not isinstance(result, dict) or not result.get("token") or not isinstance(result.get("user"), dict):
            error = SchemaError("login response has no token")
            self.error = error.user_message
            self.notifier.error(error.user_message)
            return False

        self._store_token(result["token"])
        self.user = dict(result["user"])
        await self.fetch_permissions(self.user.get("role"))
        self.notifier.success(f"Welcome, {self.user.get('firstName') or self.user.get('email')}.")
        return True

    def logout(self) -> None:
        self._store_token(None)
        self.user = None
        self.permissions = {}

    async def fetch_current_user(self) -> Optional[Record]:
        """Load the signed-in user; any failure means the token is unusable."""
        try:
            user = await self._request(queries.CURRENT_USER_QUERY)
        except GatewayError as exc:
            self.error = exc.user_message
            self.logout()
            return None
        if not isinstance(user, dict):
            self.logout()
            return None

        self.user = dict(user)
        await self.fetch_permissions(self.user.get("role"))
        return dict(self.user)

    async def fetch_permissions(self, role: Any) -> dict[str, dict[str, bool]]:
        if not role:
            self.permissions = {}
            return {}
        try:
            permissions = await self._request(
                queries.GET_ROLE_PERMISSIONS_MAP_QUERY,
                {"role": UserRole(role).value},
            )
        except GatewayError as exc:
            self.error = exc.user_message
            self.permissions = {}
            return {}
        self.permissions = permissions if isinstance(permissions, dict) else {}
        return self.permissions

    def has_permission(self, resource: str, action: str) -> bool:
        granted = self.permissions.get(resource)
        return isinstance(granted, dict) and granted.get(action) is True
