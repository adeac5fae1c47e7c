"""
Session repository for database access.

Reads the session and user tables written by the storefront's
authentication provider.
"""

from typing import Optional

from shared.repository import BaseRepository

from .models import SessionRecord, UserRecord


class SessionRepository(BaseRepository[SessionRecord]):
    """
    Repository for session lookups.

    Read-only: sessions are created and revoked by the sign-in flow.
    """

    def get_session(self, token: str) -> Optional[SessionRecord]:
        """
        Get a session by its token.

        Args:
            token: Opaque session token from the cookie or bearer header.

        Returns:
            SessionRecord, or None if no session has this token.
        """
        result = (
            self._db.table("session")
            .select("token, user_id, expires_at")
            .eq("token", token)
            .limit(1)
            .execute()
        )
        row = self._first(result.data)
        if row is None:
            return None
        return SessionRecord(**row)

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        """
        Get a user by ID.

        Args:
            user_id: The user's ID.

        Returns:
            UserRecord, or None if the user does not exist.
        """
        result = (
            self._db.table("user")
            .select("id, name, email, image, role")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        row = self._first(result.data)
        if row is None:
            return None
        return UserRecord(**row)
