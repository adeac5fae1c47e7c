"""
Shared infrastructure for the Varnaya backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- models: Identity and role types

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings, configure_logging
from .database import get_supabase_client, reset_client_cache
from .exceptions import (
    VarnayaError,
    ValidationError,
    MissingParameterError,
    NotFoundError,
    AuthenticationError,
    AuthorizationError,
    InternalFailureError,
    ExternalServiceError,
)
from .models import CamelModel, Identity, UserRole

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_supabase_client",
    "reset_client_cache",
    "VarnayaError",
    "ValidationError",
    "MissingParameterError",
    "NotFoundError",
    "AuthenticationError",
    "AuthorizationError",
    "InternalFailureError",
    "ExternalServiceError",
    "CamelModel",
    "Identity",
    "UserRole",
]
