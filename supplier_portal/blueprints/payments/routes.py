"""
Payment routes.

Includes:
- list with query-string filters (search, status, supplierId, contractId,
  date range, amount range) and paging
- detail / create / update / delete
- approve / reject (managers and admins)
- mark-paid: the only way a payment date is recorded

IMPORTANT:
- A payment tied to a contract must pay that contract's supplier. The contract
  is loaded and checked before the payment is created.
"""

from __future__ import annotations

from flask import Blueprint, request
from flask_login import login_required
from pydantic import ValidationError

from ...filters import FilterController, build_payment_filter, parse_date, parse_pagination
from ...schemas import PaymentInput, PaymentUpdateInput, RejectionInput
from ...security import approver_required
from ...services import get_store
from ...stores import ContractStore, PaymentStore
from ...utils import failure_response, list_response, request_data, respond, validation_response

payments_bp = Blueprint("payments", __name__, url_prefix="/payments")


# ---------------------------------------------------------------------
# LIST / DETAIL
# ---------------------------------------------------------------------

@payments_bp.route("/")
@login_required
async def list_payments():
    store = get_store(PaymentStore)
    controller = FilterController(store, build_payment_filter)
    args = request.args.to_dict()
    try:
        controller.apply(args)
    except ValidationError as exc:
        return validation_response(exc)
    store.set_pagination(parse_pagination(args, store.default_limit))

    if await store.fetch_many() is None:
        return failure_response(store)
    return list_response(store, controller)


@payments_bp.route("/<payment_id>")
@login_required
async def payment_detail(payment_id: str):
    store = get_store(PaymentStore)
    payment = await store.fetch_one(payment_id)
    if payment is None:
        return failure_response(store)
    return respond(payment)


# ---------------------------------------------------------------------
# CREATE / UPDATE / DELETE
# ---------------------------------------------------------------------

@payments_bp.route("/", methods=["POST"])
@login_required
async def create_payment():
    try:
        payload = PaymentInput.model_validate(request_data())
    except ValidationError as exc:
        return validation_response(exc)

    if payload.contract_id:
        contracts = get_store(ContractStore)
        contract = await contracts.fetch_one(payload.contract_id)
        if contract is None:
            return failure_response(contracts)
        if not payload.matches_contract(contract):
            return respond(None, 400, error="The contract belongs to a different supplier.")

    store = get_store(PaymentStore)
    payment = await store.create(payload)
    if payment is None:
        return failure_response(store)
    return respond(payment, 201)


@payments_bp.route("/<payment_id>", methods=["PATCH", "POST"])
@login_required
async def update_payment(payment_id: str):
    try:
        changes = PaymentUpdateInput.model_validate(request_data())
    except ValidationError as exc:
        return validation_response(exc)

    store = get_store(PaymentStore)
    payment = await store.update(payment_id, changes)
    if payment is None:
        return failure_response(store)
    return respond(payment)


@payments_bp.route("/<payment_id>", methods=["DELETE"])
@payments_bp.route("/<payment_id>/delete", methods=["POST"])
@login_required
async def delete_payment(payment_id: str):
    store = get_store(PaymentStore)
    if not await store.delete(payment_id):
        return failure_response(store)
    return respond({"id": payment_id, "deleted": True})


# ---------------------------------------------------------------------
# WORKFLOW
# ---------------------------------------------------------------------

@payments_bp.route("/<payment_id>/approve", methods=["POST"])
@login_required
@approver_required
async def approve_payment(payment_id: str):
    store = get_store(PaymentStore)
    payment = await store.approve(payment_id)
    if payment is None:
        return failure_response(store)
    return respond(payment)


@payments_bp.route("/<payment_id>/reject", methods=["POST"])
@login_required
@approver_required
async def reject_payment(payment_id: str):
    try:
        rejection = RejectionInput.model_validate({"reason": request_data().get("reason")})
    except ValidationError as exc:
        return validation_response(exc)

    store = get_store(PaymentStore)
    payment = await store.reject(payment_id, rejection.reason)
    if payment is None:
        return failure_response(store)
    return respond(payment)


@payments_bp.route("/<payment_id>/mark-paid", methods=["POST"])
@login_required
@approver_required
async def mark_payment_paid(payment_id: str):
    data = request_data()
    raw_date = data.get("paymentDate") or data.get("payment_date")
    payment_date = parse_date(raw_date)
    if raw_date and payment_date is None:
        return respond(None, 400, error="Invalid payment date.")

    store = get_store(PaymentStore)
    payment = await store.mark_paid(payment_id, payment_date)
    if payment is None:
        return failure_response(store)
    return respond(payment)
