"""
supplier_portal/security.py

Access control helpers for the Supplier Management portal.

Key rules:
- UI is never trusted; role checks happen server-side, in the routes.
- Roles are ordered: PROCUREMENT_SPECIALIST < PROCUREMENT_MANAGER < ADMIN.
- Specialists create and edit suppliers, contracts and payments.
- Managers (and admins) approve or reject them.
- Audit logs and user administration are admin-only.

The signed-in user is not stored in a local database: the API returns it on
login, and it is kept in the Flask session (SessionUser) so Flask-Login can
load it on every request.

IMPORTANT:
- Decorators must preserve wrapped function metadata to avoid Flask endpoint collisions.
  We use functools.wraps everywhere.
- Views may be `async def`; decorators call them through current_app.ensure_sync.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Mapping, Optional, Tuple

from flask import current_app, jsonify, session
from flask_login import UserMixin, current_user

from .schemas import UserRole

SESSION_USER_KEY = "user"

ROLE_HIERARCHY = {
    UserRole.PROCUREMENT_SPECIALIST: 1,
    UserRole.PROCUREMENT_MANAGER: 2,
    UserRole.ADMIN: 3,
}


def role_at_least(role: Any, required: Any) -> bool:
    """True if `role` ranks at or above `required`. Unknown roles rank nowhere."""
    try:
        return ROLE_HIERARCHY[UserRole(role)] >= ROLE_HIERARCHY[UserRole(required)]
    except ValueError:
        return False


class SessionUser(UserMixin):
    """The API user record, as remembered in the session cookie."""

    def __init__(self, record: Mapping[str, Any]) -> None:
        self.record = dict(record)
        self.id = str(record.get("id") or "")
        self.email = record.get("email") or ""
        self.first_name = record.get("firstName") or ""
        self.last_name = record.get("lastName") or ""
        self.role = record.get("role") or ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or self.email

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def can_approve(self) -> bool:
        return role_at_least(self.role, UserRole.PROCUREMENT_MANAGER)


def load_session_user(user_id: str) -> Optional[SessionUser]:
    """Flask-Login user_loader: rebuild the user from the session record."""
    record = session.get(SESSION_USER_KEY)
    if not record or str(record.get("id")) != str(user_id):
        return None
    return SessionUser(record)


def _forbidden() -> Tuple[Any, int]:
    """Consistent 403 JSON body."""
    return jsonify({"error": "You do not have permission to perform this action."}), 403


def _unauthorized() -> Tuple[Any, int]:
    return jsonify({"error": "Authentication required."}), 401


def role_required(*roles: Any) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator factory: allow the listed roles (exact match).

    Usage:
        @role_required(UserRole.PROCUREMENT_MANAGER, UserRole.ADMIN)
        async def approve(supplier_id): ...
    """
    allowed = {UserRole(r) for r in roles}

    def decorator(view_func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view_func)
        def wrapper(*args: Any, **kwargs: Any):
            if not current_user.is_authenticated:
                return _unauthorized()
            try:
                role = UserRole(getattr(current_user, "role", ""))
            except ValueError:
                return _forbidden()
            if role not in allowed:
                return _forbidden()
            return current_app.ensure_sync(view_func)(*args, **kwargs)

        return wrapper

    return decorator


def admin_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator: admin-only."""
    return role_required(UserRole.ADMIN)(view_func)


def approver_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator: manager or admin (approve / reject workflow)."""
    return role_required(UserRole.PROCUREMENT_MANAGER, UserRole.ADMIN)(view_func)
