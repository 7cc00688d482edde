"""
supplier_portal/gateway.py

Query/Mutation gateway: the single chokepoint between the stores and the
remote GraphQL API.

Contract:
- execute(operation, variables) POSTs {query, variables, operationName} to
  one endpoint and returns `data[<root field>]` of the named operation.
- Every outbound call carries `Authorization: Bearer <token>` when a session
  token is available. No token is not an error (some operations are public).
- Any failure is re-raised as exactly one GatewayError subclass
  (see supplier_portal.errors). Raw httpx / JSON exceptions never escape.
- UNAUTHENTICATED (HTTP 401 or extensions.code) runs the forced-logout
  callback once, then raises AuthError.

Cancellation is plain asyncio cancellation: CancelledError is never
classified or swallowed.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Union

import httpx

from .errors import (
    AuthError,
    GatewayError,
    GraphQLError,
    NetworkError,
    RequestTimeoutError,
    SchemaError,
    UnknownError,
)
from .graphql import Operation, operation

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0
UNAUTHENTICATED = "UNAUTHENTICATED"

TokenProvider = Callable[[], Optional[str]]


def _json_default(value: Any) -> Any:
    """Serialize the few non-JSON scalars variables may legitimately carry."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class GraphQLGateway:
    """Send named GraphQL operations and classify every failure."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        token_provider: Optional[TokenProvider] = None,
        on_unauthenticated: Optional[Callable[[], None]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._token_provider = token_provider
        self._on_unauthenticated = on_unauthenticated
        self._transport = transport

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def execute(
        self,
        op: Union[Operation, str],
        variables: Optional[Mapping[str, Any]] = None,
        *,
        timeout: Optional[float] = None,
    ) -> Any:
        """Run one operation and return its root field payload."""
        if isinstance(op, str):
            op = operation(op)

        budget = self.timeout if timeout is None else timeout
        try:
            body = json.dumps(
                {"query": op.document, "variables": dict(variables or {}), "operationName": op.name},
                default=_json_default,
            )
        except (TypeError, ValueError) as exc:
            raise self._fail(op, UnknownError(f"variables not serializable: {exc}"))

        try:
            response = await asyncio.wait_for(self._post(body, budget), timeout=budget)
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise self._fail(op, RequestTimeoutError(str(exc) or f"no response within {budget}s"))
        except httpx.TransportError as exc:
            raise self._fail(op, NetworkError(str(exc) or exc.__class__.__name__))
        except httpx.HTTPError as exc:
            raise self._fail(op, UnknownError(str(exc) or exc.__class__.__name__))

        return self._parse(op, response)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = self._token_provider() if self._token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _post(self, body: str, budget: float) -> httpx.Response:
        async with httpx.AsyncClient(transport=self._transport, timeout=httpx.Timeout(budget)) as client:
            return await client.post(self.url, content=body, headers=self._headers())

    def _parse(self, op: Operation, response: httpx.Response) -> Any:
        if response.status_code == 401:
            raise self._unauthenticated(op, f"HTTP 401 from {self.url}")

        try:
            payload = response.json()
        except ValueError:
            if response.is_error:
                raise self._fail(op, UnknownError(f"HTTP {response.status_code} with non-JSON body"))
            raise self._fail(op, SchemaError("response body is not JSON"))

        if not isinstance(payload, dict) or ("data" not in payload and "errors" not in payload):
            raise self._fail(op, SchemaError("response is not a GraphQL envelope"))

        errors = payload.get("errors") or []
        if not isinstance(errors, list) or not all(isinstance(err, dict) for err in errors):
            raise self._fail(op, SchemaError("malformed errors list"))

        if any((err.get("extensions") or {}).get("code") == UNAUTHENTICATED for err in errors):
            raise self._unauthenticated(op, errors[0].get("message") or UNAUTHENTICATED)

        if errors:
            first = errors[0]
            message = str(first.get("message") or "")
            code = (first.get("extensions") or {}).get("code")
            raise self._fail(op, GraphQLError(message, code=code, errors=errors))

        if response.is_error:
            raise self._fail(op, UnknownError(f"HTTP {response.status_code}"))

        data = payload.get("data")
        if not isinstance(data, dict) or op.root not in data:
            raise self._fail(op, SchemaError(f"missing field '{op.root}' in response data"))

        return data[op.root]

    def _unauthenticated(self, op: Operation, diagnostic: str) -> AuthError:
        error = self._fail(op, AuthError(diagnostic))
        if self._on_unauthenticated is not None:
            self._on_unauthenticated()
        return error

    def _fail(self, op: Operation, error: GatewayError) -> GatewayError:
        logger.warning("GraphQL %s %s failed [%s]: %s", op.kind, op.name, error.kind, error.diagnostic)
        return error
