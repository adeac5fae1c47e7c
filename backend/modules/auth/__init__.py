"""
Authentication module.

Resolves the session behind a request into an Identity.

Public API:
- ISessionResolver: Interface for session resolution
- SessionResolver: Cookie/bearer token resolver backed by the session store
- SessionRepository: Supabase access to session and user rows
- Auth exceptions: InvalidTokenError, ExpiredTokenError, etc.
"""

from .interfaces import ISessionResolver, ISessionRepository
from .models import JWTPayload, SessionRecord, UserRecord
from .repository import SessionRepository
from .service import SessionResolver, parse_role
from .exceptions import (
    InvalidTokenError,
    ExpiredTokenError,
    MissingTokenError,
    InsufficientPermissionsError,
)

__all__ = [
    # Interfaces
    "ISessionResolver",
    "ISessionRepository",
    # Implementations
    "SessionResolver",
    "SessionRepository",
    "parse_role",
    # Models
    "JWTPayload",
    "SessionRecord",
    "UserRecord",
    # Exceptions
    "InvalidTokenError",
    "ExpiredTokenError",
    "MissingTokenError",
    "InsufficientPermissionsError",
]
