"""
Payments blueprint package.

This file just exposes the Blueprint object to be imported in supplier_portal.__init__.
The actual routes and logic are in routes.py.
"""

from .routes import payments_bp  # noqa: F401
