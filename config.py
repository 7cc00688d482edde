"""
Application configuration.
This module defines the configuration settings for the Flask application: the GraphQL API endpoint, the request
timeout budget, where the session token lives and where a forced logout sends the user. It uses environment
variables for anything deployment-specific and defaults for development. In production, make sure to set the
appropriate environment variables and secure the secret key.
"""

import os


class Config:
    """Base configuration shared by all environments."""

    # IMPORTANT: change this in production
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-change-me-please")

    # Remote GraphQL API (the single endpoint every operation is POSTed to)
    GRAPHQL_API_URL = os.environ.get(
        "GRAPHQL_API_URL",
        "http://localhost:3000/api/graphql",
    )
    GRAPHQL_TIMEOUT_SECONDS = float(os.environ.get("GRAPHQL_TIMEOUT_SECONDS", "15"))
    # Optional httpx transport override (tests plug in httpx.MockTransport)
    GRAPHQL_TRANSPORT = None

    # Session token storage (Flask signed session cookie)
    AUTH_TOKEN_SESSION_KEY = "auth_token"

    # Login entry point used by forced logout redirects
    LOGIN_ENDPOINT = "auth.login"

    DEFAULT_PAGE_SIZE = int(os.environ.get("DEFAULT_PAGE_SIZE", "10"))

    # CSRF protection for form posts
    WTF_CSRF_ENABLED = True

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # App UI name (used by the presentation layer)
    APP_NAME = "Supplier Management"


class TestConfig(Config):
    """Configuration used by the test suite."""

    TESTING = True
    SECRET_KEY = "test-secret"
    WTF_CSRF_ENABLED = False
    GRAPHQL_API_URL = "http://api.test/graphql"
    GRAPHQL_TIMEOUT_SECONDS = 2.0
