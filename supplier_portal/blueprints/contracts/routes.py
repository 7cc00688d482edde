"""
Contract routes.

Includes:
- list with query-string filters (search, status, supplierId, start/end date
  ranges, value range) and paging
- contracts expiring within N days
- expiration summary and per-status totals
- detail / create / update / delete
- approve / reject (managers and admins)

IMPORTANT:
- end date must be after start date; rejected here before anything is sent.
- An inverted date or value range in the filters means "no constraint".
"""

from __future__ import annotations

from flask import Blueprint, request
from flask_login import login_required
from pydantic import ValidationError

from ...filters import FilterController, build_contract_filter, parse_optional_int, parse_pagination
from ...schemas import ContractInput, ContractUpdateInput, RejectionInput
from ...security import approver_required
from ...services import get_store
from ...stores import ContractStore
from ...utils import failure_response, list_response, request_data, respond, validation_response

contracts_bp = Blueprint("contracts", __name__, url_prefix="/contracts")

DEFAULT_EXPIRY_DAYS = 30


# ---------------------------------------------------------------------
# LIST / DETAIL
# ---------------------------------------------------------------------

@contracts_bp.route("/")
@login_required
async def list_contracts():
    store = get_store(ContractStore)
    controller = FilterController(store, build_contract_filter)
    args = request.args.to_dict()
    try:
        controller.apply(args)
    except ValidationError as exc:
        return validation_response(exc)
    store.set_pagination(parse_pagination(args, store.default_limit))

    if await store.fetch_many() is None:
        return failure_response(store)
    return list_response(store, controller)


@contracts_bp.route("/expiring")
@login_required
async def expiring_contracts():
    """Contracts ending within ?days= (default 30)."""
    store = get_store(ContractStore)
    args = request.args.to_dict()
    days = parse_optional_int(args.get("days"))
    if days is None or days < 0:
        days = DEFAULT_EXPIRY_DAYS

    if await store.fetch_expiring(days, parse_pagination(args, store.default_limit)) is None:
        return failure_response(store)
    return respond(store.items, pagination=store.meta.to_dict(), daysThreshold=days)


@contracts_bp.route("/expiration-summary")
@login_required
async def contract_expiration_summary():
    store = get_store(ContractStore)
    summary = await store.fetch_expiration_summary()
    if summary is None:
        return failure_response(store)
    return respond(summary)


@contracts_bp.route("/by-status")
@login_required
async def contracts_by_status():
    store = get_store(ContractStore)
    rows = await store.fetch_by_status()
    if rows is None:
        return failure_response(store)
    return respond(rows)


@contracts_bp.route("/<contract_id>")
@login_required
async def contract_detail(contract_id: str):
    store = get_store(ContractStore)
    contract = await store.fetch_one(contract_id)
    if contract is None:
        return failure_response(store)
    return respond(contract)


# ---------------------------------------------------------------------
# CREATE / UPDATE / DELETE
# ---------------------------------------------------------------------

@contracts_bp.route("/", methods=["POST"])
@login_required
async def create_contract():
    try:
        payload = ContractInput.model_validate(request_data())
    except ValidationError as exc:
        return validation_response(exc)

    store = get_store(ContractStore)
    contract = await store.create(payload)
    if contract is None:
        return failure_response(store)
    return respond(contract, 201)


@contracts_bp.route("/<contract_id>", methods=["PATCH", "POST"])
@login_required
async def update_contract(contract_id: str):
    try:
        changes = ContractUpdateInput.model_validate(request_data())
    except ValidationError as exc:
        return validation_response(exc)

    store = get_store(ContractStore)
    contract = await store.update(contract_id, changes)
    if contract is None:
        return failure_response(store)
    return respond(contract)


@contracts_bp.route("/<contract_id>", methods=["DELETE"])
@contracts_bp.route("/<contract_id>/delete", methods=["POST"])
@login_required
async def delete_contract(contract_id: str):
    store = get_store(ContractStore)
    if not await store.delete(contract_id):
        return failure_response(store)
    return respond({"id": contract_id, "deleted": True})


# ---------------------------------------------------------------------
# WORKFLOW
# ---------------------------------------------------------------------

@contracts_bp.route("/<contract_id>/approve", methods=["POST"])
@login_required
@approver_required
async def approve_contract(contract_id: str):
    store = get_store(ContractStore)
    contract = await store.approve(contract_id)
    if contract is None:
        return failure_response(store)
    return respond(contract)


@contracts_bp.route("/<contract_id>/reject", methods=["POST"])
@login_required
@approver_required
async def reject_contract(contract_id: str):
    try:
        rejection = RejectionInput.model_validate({"reason": request_data().get("reason")})
    except ValidationError as exc:
        return validation_response(exc)

    store = get_store(ContractStore)
    contract = await store.reject(contract_id, rejection.reason)
    if contract is None:
        return failure_response(store)
    return respond(contract)
