"""
Supplier routes.

Includes:
- list with query-string filters (search, status, categoryIds, country) and paging
- detail / create / update / delete
- approve / reject (managers and admins) and rating
- supplier categories: list (one large page), detail, create, update, delete

IMPORTANT:
- UI is never trusted. Inputs are validated here, before the store sends them.
- A status filter of "ALL" (any case) or empty means no status constraint.
"""

from __future__ import annotations

from flask import Blueprint, request
from flask_login import login_required
from pydantic import ValidationError

from ...filters import FilterController, build_supplier_category_filter, build_supplier_filter, parse_pagination
from ...schemas import RejectionInput, SupplierCategoryInput, SupplierInput, SupplierRatingInput, SupplierUpdateInput
from ...security import approver_required
from ...services import get_store
from ...stores import SupplierCategoryStore, SupplierStore
from ...utils import failure_response, list_response, request_data, respond, validation_response

suppliers_bp = Blueprint("suppliers", __name__, url_prefix="/suppliers")

# Categories feed filter dropdowns, so the list asks for one large page.
CATEGORY_PAGE_SIZE = 100


# ---------------------------------------------------------------------
# LIST / DETAIL
# ---------------------------------------------------------------------

@suppliers_bp.route("/")
@login_required
async def list_suppliers():
    store = get_store(SupplierStore)
    controller = FilterController(store, build_supplier_filter)
    args = request.args.to_dict()
    try:
        controller.apply(args)
    except ValidationError as exc:
        return validation_response(exc)
    store.set_pagination(parse_pagination(args, store.default_limit))

    if await store.fetch_many() is None:
        return failure_response(store)
    return list_response(store, controller)


@suppliers_bp.route("/<supplier_id>")
@login_required
async def supplier_detail(supplier_id: str):
    store = get_store(SupplierStore)
    supplier = await store.fetch_one(supplier_id)
    if supplier is None:
        return failure_response(store)
    return respond(supplier)


# ---------------------------------------------------------------------
# CREATE / UPDATE / DELETE
# ---------------------------------------------------------------------

@suppliers_bp.route("/", methods=["POST"])
@login_required
async def create_supplier():
    try:
        payload = SupplierInput.model_validate(request_data())
    except ValidationError as exc:
        return validation_response(exc)

    store = get_store(SupplierStore)
    supplier = await store.create(payload)
    if supplier is None:
        return failure_response(store)
    return respond(supplier, 201)


@suppliers_bp.route("/<supplier_id>", methods=["PATCH", "POST"])
@login_required
async def update_supplier(supplier_id: str):
    try:
        changes = SupplierUpdateInput.model_validate(request_data())
    except ValidationError as exc:
        return validation_response(exc)

    store = get_store(SupplierStore)
    supplier = await store.update(supplier_id, changes)
    if supplier is None:
        return failure_response(store)
    return respond(supplier)


@suppliers_bp.route("/<supplier_id>", methods=["DELETE"])
@suppliers_bp.route("/<supplier_id>/delete", methods=["POST"])
@login_required
async def delete_supplier(supplier_id: str):
    store = get_store(SupplierStore)
    if not await store.delete(supplier_id):
        return failure_response(store)
    return respond({"id": supplier_id, "deleted": True})


# ---------------------------------------------------------------------
# WORKFLOW
# ---------------------------------------------------------------------

@suppliers_bp.route("/<supplier_id>/approve", methods=["POST"])
@login_required
@approver_required
async def approve_supplier(supplier_id: str):
    store = get_store(SupplierStore)
    supplier = await store.approve(supplier_id)
    if supplier is None:
        return failure_response(store)
    return respond(supplier)


@suppliers_bp.route("/<supplier_id>/reject", methods=["POST"])
@login_required
@approver_required
async def reject_supplier(supplier_id: str):
    try:
        rejection = RejectionInput.model_validate({"reason": request_data().get("reason")})
    except ValidationError as exc:
        return validation_response(exc)

    store = get_store(SupplierStore)
    supplier = await store.reject(supplier_id, rejection.reason)
    if supplier is None:
        return failure_response(store)
    return respond(supplier)


@suppliers_bp.route("/<supplier_id>/rate", methods=["POST"])
@login_required
async def rate_supplier(supplier_id: str):
    data = dict(request_data())
    data["supplierId"] = supplier_id
    try:
        rating = SupplierRatingInput.model_validate(data)
    except ValidationError as exc:
        return validation_response(exc)

    store = get_store(SupplierStore)
    supplier = await store.rate(rating)
    if supplier is None:
        return failure_response(store)
    return respond(supplier)


# ---------------------------------------------------------------------
# CATEGORIES
# ---------------------------------------------------------------------

@suppliers_bp.route("/categories")
@login_required
async def list_supplier_categories():
    store = get_store(SupplierCategoryStore)
    controller = FilterController(store, build_supplier_category_filter)
    args = request.args.to_dict()
    controller.apply(args)
    store.set_pagination(parse_pagination(args, CATEGORY_PAGE_SIZE))

    if await store.fetch_many() is None:
        return failure_response(store)
    return list_response(store, controller)


@suppliers_bp.route("/categories/<category_id>")
@login_required
async def supplier_category_detail(category_id: str):
    store = get_store(SupplierCategoryStore)
    category = await store.fetch_one(category_id)
    if category is None:
        return failure_response(store)
    return respond(category)


@suppliers_bp.route("/categories", methods=["POST"])
@login_required
@approver_required
async def create_supplier_category():
    try:
        payload = SupplierCategoryInput.model_validate(request_data())
    except ValidationError as exc:
        return validation_response(exc)

    store = get_store(SupplierCategoryStore)
    category = await store.create(payload)
    if category is None:
        return failure_response(store)
    return respond(category, 201)


@suppliers_bp.route("/categories/<category_id>", methods=["PATCH", "POST"])
@login_required
@approver_required
async def update_supplier_category(category_id: str):
    try:
        changes = SupplierCategoryInput.model_validate(request_data())
    except ValidationError as exc:
        return validation_response(exc)

    store = get_store(SupplierCategoryStore)
    category = await store.update(category_id, changes)
    if category is None:
        return failure_response(store)
    return respond(category)


@suppliers_bp.route("/categories/<category_id>", methods=["DELETE"])
@suppliers_bp.route("/categories/<category_id>/delete", methods=["POST"])
@login_required
@approver_required
async def delete_supplier_category(category_id: str):
    store = get_store(SupplierCategoryStore)
    if not await store.delete(category_id):
        return failure_response(store)
    return respond({"id": category_id, "deleted": True})
