"""
supplier_portal/services.py

Request-scoped wiring between Flask and the Flask-free core.

Provides:
- FlashNotifier: store notifications as Flask flash messages
- session token helpers (the token lives in the signed session cookie)
- force_logout(): the gateway's UNAUTHENTICATED callback
- get_gateway() / get_store() / get_auth_store() / get_analytics_store(): one gateway
  and one store per entity type per request, cached on flask.g
- redirect_forced_logout(): after_request hook turning a forced logout into
  a redirect to the login entry point

IMPORTANT:
- A forced logout never redirects a request that already targets the login
  endpoint (no redirect loop).
"""

from __future__ import annotations

import logging
from typing import Optional, TypeVar

from flask import current_app, flash, g, redirect, request, session, url_for
from flask_login import logout_user

from .gateway import GraphQLGateway
from .security import SESSION_USER_KEY
from .stores import AnalyticsStore, AuthStore

logger = logging.getLogger(__name__)

S = TypeVar("S")


class FlashNotifier:
    """Notifier that queues Flask flash messages for the next page."""

    def success(self, message: str) -> None:
        flash(message, "success")

    def error(self, message: str) -> None:
        flash(message, "danger")


# ---------------------------------------------------------------------
# Session token
# ---------------------------------------------------------------------
def get_token() -> Optional[str]:
    return session.get(current_app.config["AUTH_TOKEN_SESSION_KEY"])


def store_token(token: Optional[str]) -> None:
    """Token sink for AuthStore: None clears the session."""
    key = current_app.config["AUTH_TOKEN_SESSION_KEY"]
    if token:
        session[key] = token
    else:
        session.pop(key, None)
        session.pop(SESSION_USER_KEY, None)


def force_logout() -> None:
    """Tear the session down after the API rejected our credentials."""
    logger.info("Forced logout for %s %s", request.method, request.path)
    store_token(None)
    logout_user()
    g.force_login = True


def redirect_forced_logout(response):
    """after_request: send the browser to the login entry point."""
    if not g.get("force_login"):
        return response

    login_url = url_for(current_app.config["LOGIN_ENDPOINT"])
    if request.path == login_url:
        return response
    return redirect(login_url)


# ---------------------------------------------------------------------
# Per-request gateway and stores
# ---------------------------------------------------------------------
def build_gateway() -> GraphQLGateway:
    config = current_app.config
    return GraphQLGateway(
        config["GRAPHQL_API_URL"],
        timeout=float(config["GRAPHQL_TIMEOUT_SECONDS"]),
        token_provider=get_token,
        on_unauthenticated=force_logout,
        transport=config.get("GRAPHQL_TRANSPORT"),
    )


def get_gateway() -> GraphQLGateway:
    if "gateway" not in g:
        g.gateway = build_gateway()
    return g.gateway


def get_store(store_cls: type[S]) -> S:
    """One store per entity type per request, sharing the request's gateway."""
    stores = g.setdefault("stores", {})
    if store_cls not in stores:
        stores[store_cls] = store_cls(
            get_gateway(),
            FlashNotifier(),
            default_limit=current_app.config["DEFAULT_PAGE_SIZE"],
        )
    return stores[store_cls]


def get_auth_store() -> AuthStore:
    if "auth_store" not in g:
        g.auth_store = AuthStore(get_gateway(), FlashNotifier(), token_sink=store_token)
    return g.auth_store


def get_analytics_store() -> AnalyticsStore:
    if "analytics_store" not in g:
        g.analytics_store = AnalyticsStore(get_gateway(), FlashNotifier())
    return g.analytics_store
