"""
User management (Admin only).

Rules enforced:
- Only admins list, create, edit, delete users or change their role.
- UI never trusted: we validate server-side before calling the API.
"""

from __future__ import annotations

from flask import Blueprint, request
from flask_login import current_user, login_required
from pydantic import ValidationError

from ...filters import FilterController, build_user_filter, parse_pagination
from ...schemas import UserInput, UserRole, UserUpdateInput
from ...security import admin_required
from ...services import get_store
from ...stores import UserStore
from ...utils import failure_response, list_response, request_data, respond, validation_response

users_bp = Blueprint("users", __name__, url_prefix="/users")


# ---------------------------------------------------------------------
# LIST USERS
# ---------------------------------------------------------------------

@users_bp.route("/")
@login_required
@admin_required
async def list_users():
    """Admin view: list users, optionally searched by name or email."""
    store = get_store(UserStore)
    controller = FilterController(store, build_user_filter)
    args = request.args.to_dict()
    controller.apply(args)
    store.set_pagination(parse_pagination(args, store.default_limit))

    if await store.fetch_many() is None:
        return failure_response(store)
    return list_response(store, controller)


# ---------------------------------------------------------------------
# CREATE / EDIT / DELETE
# ---------------------------------------------------------------------

@users_bp.route("/", methods=["POST"])
@login_required
@admin_required
async def create_user():
    try:
        payload = UserInput.model_validate(request_data())
    except ValidationError as exc:
        return validation_response(exc)

    store = get_store(UserStore)
    user = await store.create(payload)
    if user is None:
        return failure_response(store)
    return respond(user, 201)


@users_bp.route("/<user_id>", methods=["PATCH", "POST"])
@login_required
@admin_required
async def edit_user(user_id: str):
    try:
        changes = UserUpdateInput.model_validate(request_data())
    except ValidationError as exc:
        return validation_response(exc)

    store = get_store(UserStore)
    user = await store.update(user_id, changes)
    if user is None:
        return failure_response(store)
    return respond(user)


@users_bp.route("/<user_id>", methods=["DELETE"])
@users_bp.route("/<user_id>/delete", methods=["POST"])
@login_required
@admin_required
async def delete_user(user_id: str):
    if str(current_user.id) == str(user_id):
        return respond(None, 400, error="You cannot delete your own account.")

    store = get_store(UserStore)
    if not await store.delete(user_id):
        return failure_response(store)
    return respond({"id": user_id, "deleted": True})


# ---------------------------------------------------------------------
# ROLE / STATUS
# ---------------------------------------------------------------------

@users_bp.route("/<user_id>/role", methods=["POST"])
@login_required
@admin_required
async def change_role(user_id: str):
    try:
        role = UserRole(str(request_data().get("role") or "").strip().upper())
    except ValueError:
        return respond(None, 400, error="Unknown role.")

    store = get_store(UserStore)
    user = await store.change_role(user_id, role)
    if user is None:
        return failure_response(store)
    return respond(user)


@users_bp.route("/<user_id>/status", methods=["POST"])
@login_required
@admin_required
async def toggle_status(user_id: str):
    raw = request_data().get("isActive")
    is_active = raw is True or str(raw).strip().lower() in {"1", "true", "on", "yes"}

    store = get_store(UserStore)
    user = await store.toggle_status(user_id, is_active)
    if user is None:
        return failure_response(store)
    return respond(user)
