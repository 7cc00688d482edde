"""
Central place for Flask extensions.

This avoids circular imports and keeps create_app clean.
Extensions are initialized in create_app() in __init__.py, where the app context is available.

There is no local database: persistence belongs to the GraphQL API.
"""

from flask_login import LoginManager
from flask_wtf import CSRFProtect

# Global extension instances - initialized in create_app() in __init__.py.
login_manager = LoginManager()
csrf = CSRFProtect()
