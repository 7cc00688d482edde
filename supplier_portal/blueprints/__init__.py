"""Blueprints of the Supplier Management portal (JSON views)."""
