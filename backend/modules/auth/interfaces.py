"""
Authentication module interfaces.

The access middleware and API dependencies depend on ISessionResolver,
not the concrete implementation. This enables testing with fakes.
"""

from typing import Mapping, Protocol, Optional, runtime_checkable

from shared.models import Identity

from .models import SessionRecord, UserRecord


@runtime_checkable
class ISessionRepository(Protocol):
    """Storage contract for session and user lookups."""

    def get_session(self, token: str) -> Optional[SessionRecord]:
        """Return the session row for a token, or None if absent."""
        ...

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        """Return the user row for an id, or None if absent."""
        ...


@runtime_checkable
class ISessionResolver(Protocol):
    """
    Interface for resolving the identity behind a request.
    """

    async def resolve(self, headers: Mapping[str, str]) -> Identity:
        """
        Resolve request headers to an identity.

        Args:
            headers: Inbound request headers (cookie and/or authorization)

        Returns:
            The authenticated identity, or Identity.anonymous() when there
            is no usable session. Never raises.
        """
        ...
