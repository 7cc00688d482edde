"""
Utility functions shared by the blueprints. This includes:
- request_data: JSON body or form fields of the current request
- respond: JSON response carrying the queued flash messages
- failure_response: HTTP status + body for a store action that returned None/False
- validation_response: 400 body for a rejected input record
- list_response: one page of a list view with its pagination metadata
"""

from __future__ import annotations

import json
from typing import Any

from flask import get_flashed_messages, jsonify, request
from pydantic import ValidationError

from .errors import GraphQLError

KIND_STATUS = {
    "AuthError": 401,
    "NetworkError": 502,
    "SchemaError": 502,
    "TimeoutError": 504,
    "UnknownError": 500,
}

CODE_STATUS = {
    "BAD_USER_INPUT": 400,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
}


def request_data() -> dict[str, Any]:
    """JSON object body, or the submitted form fields."""
    payload = request.get_json(silent=True)
    if isinstance(payload, dict):
        return payload
    return request.form.to_dict()


def respond(payload: Any = None, status: int = 200, **extra: Any):
    """JSON response; flash messages queued by the stores ride along."""
    body = {"data": payload, **extra}
    messages = get_flashed_messages(with_categories=True)
    if messages:
        body["messages"] = [{"category": c, "message": m} for c, m in messages]
    return jsonify(body), status


def failure_response(store: Any):
    """Translate the store's last recorded failure into an HTTP status."""
    failure = getattr(store, "failure", None)
    if isinstance(failure, GraphQLError):
        status = CODE_STATUS.get(failure.code or "", 422)
    elif failure is not None:
        status = KIND_STATUS.get(failure.kind, 500)
    elif store.error and store.error.endswith("not found."):
        status = 404
    else:
        # The server answered but declined (e.g. a delete returning false).
        status = 409
    return respond(None, status, error=store.error or "The request could not be completed.")


def validation_response(exc: ValidationError):
    errors = json.loads(exc.json(include_url=False, include_context=False))
    return respond(None, 400, error="Invalid input.", errors=errors)


def list_response(store: Any, controller: Any):
    """Current page with its metadata and page buttons."""
    return respond(
        store.items,
        pagination=store.meta.to_dict(),
        pages=controller.page_window(),
        filter=store.filter.to_variables(),
    )
