"""
Authentication routes.

Provides:
- GET  /auth/login   login entry point (forced-logout redirect target)
- POST /auth/login   exchange credentials for an API token
- /auth/logout       drop the token and the session user
- GET  /auth/me      reload the signed-in user and its permission map

Rules:
- The API decides who may sign in; this layer only keeps the token and the
  returned user record in the signed session cookie.
- The login endpoint is never redirected to itself after a forced logout.
"""

from flask import Blueprint, flash, redirect, request, session, url_for
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf
from pydantic import ValidationError

from ...schemas import LoginInput
from ...security import SESSION_USER_KEY, SessionUser
from ...services import get_auth_store
from ...utils import request_data, respond, validation_response

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")

PERMISSIONS_SESSION_KEY = "permissions"


def _remember_user(user: dict, permissions: dict) -> SessionUser:
    session[SESSION_USER_KEY] = user
    session[PERMISSIONS_SESSION_KEY] = permissions
    return SessionUser(user)


# ============================================================
# LOGIN
# ============================================================

@auth_bp.route("/login", methods=["GET"])
def login():
    """Login entry point: tells the client where and how to sign in."""
    return respond(
        {
            "authenticated": current_user.is_authenticated,
            "login": url_for("auth.login_submit"),
            "csrfToken": generate_csrf(),
            "next": request.args.get("next"),
        }
    )


@auth_bp.route("/login", methods=["POST"])
async def login_submit():
    """Authenticate against the API and start a session."""
    try:
        credentials = LoginInput.model_validate(request_data())
    except ValidationError as exc:
        return validation_response(exc)

    auth = get_auth_store()
    if not await auth.login(credentials):
        return respond(None, 401, error=auth.error or "Invalid email or password.")

    login_user(_remember_user(auth.user, auth.permissions), remember=credentials.remember)
    return respond(auth.user, permissions=auth.permissions)


# ============================================================
# LOGOUT
# ============================================================

@auth_bp.route("/logout", methods=["GET", "POST"])
def logout():
    """Log out the current user."""
    get_auth_store().logout()
    session.pop(PERMISSIONS_SESSION_KEY, None)
    logout_user()
    flash("You have been signed out.", "info")
    return redirect(url_for("auth.login"))


# ============================================================
# CURRENT USER
# ============================================================

@auth_bp.route("/me")
@login_required
async def me():
    """Refresh the session user from the API."""
    auth = get_auth_store()
    user = await auth.fetch_current_user()
    if user is None:
        return respond(None, 401, error=auth.error or "Your session has expired. Please sign in again.")

    _remember_user(user, auth.permissions)
    return respond(user, permissions=auth.permissions)
