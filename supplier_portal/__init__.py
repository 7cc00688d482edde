"""
supplier_portal/__init__.py

Flask application factory for the Supplier Management portal.

Requirements:
- The GraphQL API owns persistence; this app keeps no database of its own.
- The session cookie carries the API token and the signed-in user record.
- UI is never trusted; role checks are enforced server-side in the routes.

Navigation:
- Sections are filtered by role for visibility only.
  All permissions are still enforced in the routes.
"""

from __future__ import annotations

import asyncio
import logging

import click
from flask import Flask, current_app
from flask_login import current_user

from .errors import GatewayError
from .extensions import csrf, login_manager
from .gateway import GraphQLGateway
from .graphql.queries import PING_QUERY
from .schemas import UserRole
from .security import load_session_user, role_at_least
from .services import redirect_forced_logout
from .utils import respond

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# NAVIGATION STRUCTURE (UI visibility only; security enforced in routes)
# -------------------------------------------------------------------

NAV_SECTIONS = [
    {
        "key": "procurement",
        "label": "Procurement",
        "items": [
            {"label": "Dashboard", "endpoint": "analytics.dashboard", "min_role": UserRole.PROCUREMENT_SPECIALIST},
            {"label": "Suppliers", "endpoint": "suppliers.list_suppliers", "min_role": UserRole.PROCUREMENT_SPECIALIST},
            {"label": "Supplier Categories", "endpoint": "suppliers.list_supplier_categories", "min_role": UserRole.PROCUREMENT_SPECIALIST},
            {"label": "Contracts", "endpoint": "contracts.list_contracts", "min_role": UserRole.PROCUREMENT_SPECIALIST},
            {"label": "Expiring Contracts", "endpoint": "contracts.expiring_contracts", "min_role": UserRole.PROCUREMENT_SPECIALIST},
            {"label": "Payments", "endpoint": "payments.list_payments", "min_role": UserRole.PROCUREMENT_SPECIALIST},
        ],
    },
    {
        "key": "administration",
        "label": "Administration",
        "items": [
            {"label": "Users", "endpoint": "users.list_users", "min_role": UserRole.ADMIN},
            {"label": "Audit Logs", "endpoint": "audit_logs.list_audit_logs", "min_role": UserRole.ADMIN},
        ],
    },
]


def visible_nav_sections(role: str | None) -> list[dict]:
    """Navigation filtered for a role; no role sees nothing."""
    if not role:
        return []

    visible_sections = []
    for section in NAV_SECTIONS:
        items = [
            {"label": item["label"], "endpoint": item["endpoint"]}
            for item in section["items"]
            if role_at_least(role, item["min_role"])
        ]
        if items:
            visible_sections.append({"key": section["key"], "label": section["label"], "items": items})
    return visible_sections


def create_app(config_object: str | object = "config.Config") -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Extensions
    csrf.init_app(app)

    login_manager.init_app(app)
    login_manager.login_view = app.config["LOGIN_ENDPOINT"]
    login_manager.login_message_category = "info"
    login_manager.user_loader(load_session_user)

    # ----------------------------------------------------------------------
    # Forced logout: redirect to the login entry point after the API
    # rejected the session token.
    # ----------------------------------------------------------------------
    app.after_request(redirect_forced_logout)

    # ----------------------------------------------------------------------
    # Blueprints
    # ----------------------------------------------------------------------
    from .blueprints.analytics import analytics_bp
    from .blueprints.audit_logs import audit_logs_bp
    from .blueprints.auth import auth_bp
    from .blueprints.contracts import contracts_bp
    from .blueprints.payments import payments_bp
    from .blueprints.suppliers import suppliers_bp
    from .blueprints.users import users_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(suppliers_bp)
    app.register_blueprint(contracts_bp)
    app.register_blueprint(payments_bp)
    app.register_blueprint(audit_logs_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(analytics_bp)

    # ----------------------------------------------------------------------
    # Context globals (navigation)
    # ----------------------------------------------------------------------
    @app.context_processor
    def inject_globals():
        role = getattr(current_user, "role", None) if current_user.is_authenticated else None
        return {"config": app.config, "nav_sections": visible_nav_sections(role)}

    # ----------------------------------------------------------------------
    # CLI
    # ----------------------------------------------------------------------
    @app.cli.command("check-api")
    def check_api_command():
        """Ping the configured GraphQL endpoint."""
        url = current_app.config["GRAPHQL_API_URL"]
        gateway = GraphQLGateway(
            url,
            timeout=float(current_app.config["GRAPHQL_TIMEOUT_SECONDS"]),
            transport=current_app.config.get("GRAPHQL_TRANSPORT"),
        )
        try:
            typename = asyncio.run(gateway.execute(PING_QUERY))
        except GatewayError as exc:
            click.echo(f"GraphQL API at {url} is not usable [{exc.kind}]: {exc.diagnostic}", err=True)
            raise SystemExit(1)
        click.echo(f"GraphQL API at {url} is reachable ({typename}).")

    # ----------------------------------------------------------------------
    # Home
    # ----------------------------------------------------------------------
    @app.route("/")
    def index():
        """Home: application name, signed-in user and visible navigation."""
        if not current_user.is_authenticated:
            return respond({"app": app.config["APP_NAME"], "user": None, "nav": []})
        return respond(
            {
                "app": app.config["APP_NAME"],
                "user": current_user.record,
                "nav": visible_nav_sections(current_user.role),
            }
        )

    return app
