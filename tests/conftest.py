from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from supplier_portal import create_app
from supplier_portal.graphql import operation


class FakeGateway:
    """Scripted stand-in for GraphQLGateway, keyed by operation name.

    A scripted result may be a value, an exception to raise, or an
    asyncio.Future to await (to control resolution order).
    """

    def __init__(self) -> None:
        self.responses: dict[str, list[Any]] = {}
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def reply(self, name: str, *results: Any) -> None:
        self.responses.setdefault(name, []).extend(results)

    def last_variables(self, name: str) -> dict[str, Any]:
        for called, variables in reversed(self.calls):
            if called == name:
                return variables
        raise AssertionError(f"{name} was never called")

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def execute(self, document: str, variables: dict[str, Any] | None = None, *, timeout: float | None = None) -> Any:
        op = operation(document)
        self.calls.append((op.name, dict(variables or {})))
        queue = self.responses.get(op.name)
        if not queue:
            raise AssertionError(f"unexpected operation {op.name}")
        result = queue.pop(0)
        if isinstance(result, asyncio.Future):
            result = await result
        if isinstance(result, BaseException):
            raise result
        return result


class RecordingNotifier:
    def __init__(self) -> None:
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)


class FakeApi:
    """httpx.MockTransport handler answering GraphQL operations by name."""

    def __init__(self) -> None:
        self.responses: dict[str, list[httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def reply(self, name: str, payload: Any, status: int = 200) -> None:
        self.responses.setdefault(name, []).append(httpx.Response(status, json=payload))

    def data(self, name: str, root: str, value: Any) -> None:
        self.reply(name, {"data": {root: value}})

    def error(self, name: str, message: str, code: str, status: int = 200) -> None:
        self.reply(name, {"data": None, "errors": [{"message": message, "extensions": {"code": code}}]}, status)

    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        name = json.loads(request.content).get("operationName")
        queue = self.responses.get(name)
        if not queue:
            return httpx.Response(500, text=f"unexpected operation {name}")
        return queue.pop(0)


def envelope(items: list[dict[str, Any]], *, total: int | None = None, page: int = 1, limit: int = 10) -> dict[str, Any]:
    total = len(items) if total is None else total
    return {"items": items, "total": total, "page": page, "limit": limit, "hasMore": page * limit < total}


@pytest.fixture()
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture()
def app(api: FakeApi):
    app = create_app("config.TestConfig")
    app.config["GRAPHQL_TRANSPORT"] = httpx.MockTransport(api.handle)
    return app


@pytest.fixture()
def client(app):
    return app.test_client()


def sign_in(client, role: str = "PROCUREMENT_SPECIALIST", token: str = "token-123") -> dict[str, Any]:
    """Put an API token and user record in the test client's session."""
    user = {"id": "u1", "email": "anna@example.com", "firstName": "Anna", "lastName": "Berg", "role": role}
    with client.session_transaction() as sess:
        sess["auth_token"] = token
        sess["user"] = user
        sess["_user_id"] = user["id"]
        sess["_fresh"] = True
    return user
