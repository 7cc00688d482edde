"""
Audit log routes (Admin only).

Includes:
- list with query-string filters (userId, entityType, entityId, action,
  date range) and paging
- detail
- CSV export of the requested page

IMPORTANT:
- Audit logs are read-only. There is no create/update/delete route.
"""

from __future__ import annotations

from flask import Blueprint, Response, request
from flask_login import login_required
from pydantic import ValidationError

from ...audit import export_filename
from ...filters import FilterController, build_audit_log_filter, parse_pagination
from ...security import admin_required
from ...services import get_store
from ...stores import AuditLogStore
from ...utils import failure_response, list_response, respond, validation_response

audit_logs_bp = Blueprint("audit_logs", __name__, url_prefix="/audit-logs")

EXPORT_RESOURCE = "audit-logs"


async def _load_page(store: AuditLogStore):
    """Apply query-string filters and paging, then fetch. Returns (controller, error_response)."""
    controller = FilterController(store, build_audit_log_filter)
    args = request.args.to_dict()
    try:
        controller.apply(args)
    except ValidationError as exc:
        return controller, validation_response(exc)
    store.set_pagination(parse_pagination(args, store.default_limit))

    if await store.fetch_many() is None:
        return controller, failure_response(store)
    return controller, None


@audit_logs_bp.route("/")
@login_required
@admin_required
async def list_audit_logs():
    store = get_store(AuditLogStore)
    controller, error = await _load_page(store)
    if error is not None:
        return error
    return list_response(store, controller)


@audit_logs_bp.route("/export")
@login_required
@admin_required
async def export_audit_logs():
    """Download the requested page as audit-logs-YYYY-MM-DD.csv."""
    store = get_store(AuditLogStore)
    _, error = await _load_page(store)
    if error is not None:
        return error

    body = store.export_csv().encode("utf-8")
    return Response(
        body,
        content_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f"attachment; filename={export_filename(EXPORT_RESOURCE)}"},
    )


@audit_logs_bp.route("/<log_id>")
@login_required
@admin_required
async def audit_log_detail(log_id: str):
    store = get_store(AuditLogStore)
    entry = await store.fetch_one(log_id)
    if entry is None:
        return failure_response(store)
    return respond(entry)
