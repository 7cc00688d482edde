"""
Analytics routes.

Includes:
- dashboard: every aggregate in one response (?months= for the payment series)
- the single aggregates, for widgets that refresh on their own

IMPORTANT:
- Aggregates are computed by the API; nothing here is paginated.
- The dashboard fails as a whole when any of its parts failed.
"""

from __future__ import annotations

from flask import Blueprint, request
from flask_login import login_required

from ...filters import parse_optional_int
from ...services import get_analytics_store
from ...stores import DEFAULT_PAYMENT_MONTHS
from ...utils import failure_response, respond

analytics_bp = Blueprint("analytics", __name__, url_prefix="/analytics")

MAX_PAYMENT_MONTHS = 24


def _months() -> int:
    months = parse_optional_int(request.args.get("months"))
    if months is None or months < 1:
        return DEFAULT_PAYMENT_MONTHS
    return min(months, MAX_PAYMENT_MONTHS)


@analytics_bp.route("/")
@login_required
async def dashboard():
    store = get_analytics_store()
    months = _months()
    if await store.fetch_dashboard(months) is None:
        return failure_response(store)
    return respond(store.dashboard, months=months)


@analytics_bp.route("/summary")
@login_required
async def summary():
    store = get_analytics_store()
    result = await store.fetch_summary()
    if result is None:
        return failure_response(store)
    return respond(result)


@analytics_bp.route("/suppliers-by-country")
@login_required
async def suppliers_by_country():
    store = get_analytics_store()
    rows = await store.fetch_suppliers_by_country()
    if rows is None:
        return failure_response(store)
    return respond(rows)


@analytics_bp.route("/suppliers-by-category")
@login_required
async def suppliers_by_category():
    store = get_analytics_store()
    rows = await store.fetch_suppliers_by_category()
    if rows is None:
        return failure_response(store)
    return respond(rows)


@analytics_bp.route("/payments-by-month")
@login_required
async def payments_by_month():
    store = get_analytics_store()
    months = _months()
    rows = await store.fetch_payments_by_month(months)
    if rows is None:
        return failure_response(store)
    return respond(rows, months=months)
