"""
supplier_portal/errors.py

Classified gateway failures.

Every failure that crosses the gateway boundary is one of the classes below.
Each carries:
- kind: stable classification name (used by callers and in logs)
- diagnostic: the original low-level message, for logging only
- user_message: sanitized text that is safe to show to a user

IMPORTANT:
- Raw transport / parsing exceptions never escape the gateway.
- Stores catch GatewayError at the action boundary and never re-raise it.
"""

from __future__ import annotations

from typing import Any, Optional


class GatewayError(Exception):
    """Base class for every classified gateway failure."""

    kind = "UnknownError"
    default_user_message = "An unexpected error occurred. Please try again."

    def __init__(self, diagnostic: str = "", user_message: Optional[str] = None) -> None:
        self.diagnostic = diagnostic or self.kind
        self.user_message = user_message or self.default_user_message
        super().__init__(self.user_message)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} kind={self.kind} diagnostic={self.diagnostic!r}>"


class NetworkError(GatewayError):
    """Transport failure: connection refused, DNS, reset, TLS..."""

    kind = "NetworkError"
    default_user_message = "Unable to reach the server. Check your connection and try again."


class RequestTimeoutError(GatewayError, TimeoutError):
    """The deadline passed before a response arrived."""

    kind = "TimeoutError"
    default_user_message = "The request took too long. Please try again."


class AuthError(GatewayError):
    """Missing or invalid credentials. Triggers a forced logout."""

    kind = "AuthError"
    default_user_message = "Your session has expired. Please sign in again."


class SchemaError(GatewayError):
    """The server answered with a body we cannot interpret."""

    kind = "SchemaError"
    default_user_message = "The server returned an unexpected response. Please reload and try again."


class GraphQLError(GatewayError):
    """The operation executed but the server reported field-level errors."""

    kind = "GraphQLError"
    default_user_message = "The request could not be completed."

    CODE_MESSAGES = {
        "FORBIDDEN": "You do not have permission to perform this action.",
        "NOT_FOUND": "The requested resource was not found.",
    }

    def __init__(
        self,
        diagnostic: str = "",
        user_message: Optional[str] = None,
        *,
        code: Optional[str] = None,
        errors: Optional[list[dict[str, Any]]] = None,
    ) -> None:
        self.code = code
        self.errors = errors or []
        if user_message is None:
            user_message = self.CODE_MESSAGES.get(code or "") or diagnostic or None
        super().__init__(diagnostic, user_message)


class UnknownError(GatewayError):
    """Fallback for anything that fits no other class."""

    kind = "UnknownError"


ERROR_CLASSES = (
    NetworkError,
    RequestTimeoutError,
    AuthError,
    SchemaError,
    GraphQLError,
    UnknownError,
)
