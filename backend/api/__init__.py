"""
Varnaya API package.

Provides the FastAPI application for the storefront and blog backend.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
