"""
Identity dependencies for API routes.

Page requests on protected tiers already carry the identity resolved by
AccessControlMiddleware in request.state; other requests resolve it here.
"""

from fastapi import Depends, Request

from shared.models import Identity, UserRole
from modules.auth.exceptions import MissingTokenError, InsufficientPermissionsError
from modules.auth.interfaces import ISessionResolver

from ..dependencies import get_session_resolver


async def get_identity(
    request: Request,
    resolver: ISessionResolver = Depends(get_session_resolver),
) -> Identity:
    """
    Dependency that resolves the caller's identity, possibly anonymous.

    Use this for endpoints that work with or without authentication.

    Usage:
        @router.get("/public")
        async def public_route(identity: Identity = Depends(get_identity)):
            if identity.authenticated:
                return {"message": f"Hello, {identity.id}"}
            return {"message": "Hello, anonymous"}
    """
    identity = getattr(request.state, "identity", None)
    if identity is None:
        identity = await resolver.resolve(request.headers)
        request.state.identity = identity
    return identity


async def get_current_identity(
    identity: Identity = Depends(get_identity),
) -> Identity:
    """
    Dependency that requires authentication.

    Raises MissingTokenError (401) when there is no valid session.
    """
    if not identity.authenticated:
        raise MissingTokenError()
    return identity


def require_roles(*roles: UserRole):
    """
    Build a dependency that requires one of the given roles.

    Usage:
        @router.get("/admin-only")
        async def admin_route(identity: Identity = Depends(require_roles(UserRole.ADMIN))):
            ...
    """

    async def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        if not identity.has_role(list(roles)):
            raise InsufficientPermissionsError(
                [role.value for role in roles],
                identity.role.value if identity.role else "none",
            )
        return identity

    return dependency


# Type aliases for cleaner route definitions
RequireAuth = Depends(get_current_identity)
OptionalAuth = Depends(get_identity)
