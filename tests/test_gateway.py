from __future__ import annotations

import asyncio
import json
from decimal import Decimal

import httpx
import pytest

from supplier_portal.errors import (
    AuthError,
    GraphQLError,
    NetworkError,
    RequestTimeoutError,
    SchemaError,
    UnknownError,
)
from supplier_portal.gateway import GraphQLGateway
from supplier_portal.graphql import operation
from supplier_portal.graphql.mutations import APPROVE_SUPPLIER_MUTATION, CREATE_CONTRACT_MUTATION
from supplier_portal.graphql.queries import GET_SUPPLIER_QUERY, PING_QUERY

URL = "http://api.test/graphql"


def _gateway(handler, **kwargs) -> GraphQLGateway:
    return GraphQLGateway(URL, transport=httpx.MockTransport(handler), **kwargs)


def _json(payload, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json=payload)

    return handler


def test_operation_descriptor_reads_name_kind_and_root() -> None:
    op = operation(APPROVE_SUPPLIER_MUTATION)
    assert (op.name, op.kind, op.root, op.is_mutation) == ("ApproveSupplier", "mutation", "approveSupplier", True)
    assert operation(PING_QUERY).root == "__typename"


def test_operation_descriptor_rejects_anonymous_documents() -> None:
    with pytest.raises(ValueError):
        operation("{ suppliers { total } }")


async def test_returns_root_field_payload() -> None:
    gateway = _gateway(_json({"data": {"supplier": {"id": "s1", "name": "Acme"}}}))
    assert await gateway.execute(GET_SUPPLIER_QUERY, {"id": "s1"}) == {"id": "s1", "name": "Acme"}


async def test_request_body_and_bearer_header() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": {"createContract": {"id": "c1"}}})

    gateway = _gateway(handler, token_provider=lambda: "tok-1")
    await gateway.execute(CREATE_CONTRACT_MUTATION, {"input": {"value": Decimal("10.50")}})

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == URL
    assert request.headers["Authorization"] == "Bearer tok-1"
    body = json.loads(request.content)
    assert body["operationName"] == "CreateContract"
    assert body["query"] == CREATE_CONTRACT_MUTATION
    assert body["variables"] == {"input": {"value": "10.50"}}


async def test_no_token_means_no_authorization_header() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": {"__typename": "Query"}})

    gateway = _gateway(handler, token_provider=lambda: None)
    assert await gateway.execute(PING_QUERY) == "Query"
    assert "Authorization" not in seen[0].headers


async def test_graphql_error_surfaces_first_message() -> None:
    gateway = _gateway(
        _json(
            {
                "data": None,
                "errors": [
                    {"message": "Contract number already exists", "extensions": {"code": "BAD_USER_INPUT"}},
                    {"message": "second"},
                ],
            }
        )
    )
    with pytest.raises(GraphQLError) as excinfo:
        await gateway.execute(CREATE_CONTRACT_MUTATION, {"input": {}})

    error = excinfo.value
    assert error.kind == "GraphQLError"
    assert error.code == "BAD_USER_INPUT"
    assert error.user_message == "Contract number already exists"
    assert len(error.errors) == 2


async def test_forbidden_code_gets_fixed_user_message() -> None:
    gateway = _gateway(_json({"errors": [{"message": "role SPECIALIST lacks approve", "extensions": {"code": "FORBIDDEN"}}]}))
    with pytest.raises(GraphQLError) as excinfo:
        await gateway.execute(APPROVE_SUPPLIER_MUTATION, {"id": "s1"})
    assert excinfo.value.user_message == GraphQLError.CODE_MESSAGES["FORBIDDEN"]
    assert excinfo.value.diagnostic == "role SPECIALIST lacks approve"


async def test_unauthenticated_code_forces_logout_once() -> None:
    logouts: list[int] = []
    gateway = _gateway(
        _json({"errors": [{"message": "jwt expired", "extensions": {"code": "UNAUTHENTICATED"}}, {"message": "again", "extensions": {"code": "UNAUTHENTICATED"}}]}),
        on_unauthenticated=lambda: logouts.append(1),
    )
    with pytest.raises(AuthError) as excinfo:
        await gateway.execute(GET_SUPPLIER_QUERY, {"id": "s1"})

    assert logouts == [1]
    assert excinfo.value.diagnostic == "jwt expired"
    assert excinfo.value.user_message == AuthError.default_user_message


async def test_http_401_is_auth_error() -> None:
    logouts: list[int] = []
    gateway = _gateway(lambda request: httpx.Response(401, text="Unauthorized"), on_unauthenticated=lambda: logouts.append(1))
    with pytest.raises(AuthError):
        await gateway.execute(GET_SUPPLIER_QUERY, {"id": "s1"})
    assert logouts == [1]


async def test_non_json_body_is_schema_error() -> None:
    gateway = _gateway(lambda request: httpx.Response(200, text="<html>proxy</html>"))
    with pytest.raises(SchemaError):
        await gateway.execute(GET_SUPPLIER_QUERY, {"id": "s1"})


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"result": {}},
        {"data": {"somethingElse": {}}},
        {"errors": "nope"},
    ],
)
async def test_unexpected_envelope_is_schema_error(payload) -> None:
    gateway = _gateway(_json(payload))
    with pytest.raises(SchemaError):
        await gateway.execute(GET_SUPPLIER_QUERY, {"id": "s1"})


async def test_server_error_without_graphql_errors_is_unknown() -> None:
    gateway = _gateway(lambda request: httpx.Response(502, text="Bad gateway"))
    with pytest.raises(UnknownError):
        await gateway.execute(GET_SUPPLIER_QUERY, {"id": "s1"})


async def test_connection_failure_is_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkError) as excinfo:
        await _gateway(handler).execute(GET_SUPPLIER_QUERY, {"id": "s1"})
    assert excinfo.value.diagnostic == "connection refused"
    assert "refused" not in excinfo.value.user_message


async def test_transport_timeout_is_timeout_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("read timed out", request=request)

    with pytest.raises(RequestTimeoutError) as excinfo:
        await _gateway(handler).execute(GET_SUPPLIER_QUERY, {"id": "s1"})
    assert isinstance(excinfo.value, TimeoutError)
    assert excinfo.value.kind == "TimeoutError"


async def test_deadline_is_enforced() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json={"data": {"supplier": None}})

    with pytest.raises(RequestTimeoutError):
        await _gateway(handler).execute(GET_SUPPLIER_QUERY, {"id": "s1"}, timeout=0.05)


async def test_per_call_timeout_reaches_the_http_client() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.extensions["timeout"])
        return httpx.Response(200, json={"data": {"supplier": None}})

    gateway = _gateway(handler, timeout=15)
    await gateway.execute(GET_SUPPLIER_QUERY, {"id": "s1"}, timeout=60)
    await gateway.execute(GET_SUPPLIER_QUERY, {"id": "s1"})

    assert [t["read"] for t in seen] == [60, 15]
    assert seen[0] == {"connect": 60, "read": 60, "write": 60, "pool": 60}


async def test_unserializable_variables_are_unknown_error() -> None:
    gateway = _gateway(_json({"data": {"supplier": None}}))
    with pytest.raises(UnknownError):
        await gateway.execute(GET_SUPPLIER_QUERY, {"id": object()})


async def test_failures_are_logged_with_diagnostic(caplog: pytest.LogCaptureFixture) -> None:
    gateway = _gateway(lambda request: httpx.Response(200, text="oops"))
    with pytest.raises(SchemaError):
        await gateway.execute(GET_SUPPLIER_QUERY, {"id": "s1"})
    assert "GetSupplier" in caplog.text
    assert "SchemaError" in caplog.text
