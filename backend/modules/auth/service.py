"""
Session resolver implementation.

Turns the session cookie or bearer token of a request into an Identity.
Supports two token kinds:
- JWT access tokens, verified locally with the Supabase JWT secret
- Opaque session tokens, looked up in the session table
In both cases the role is read from the user record, never from the token.
"""

import logging
from typing import Mapping, Optional

import jwt
from starlette.requests import cookie_parser

from shared.config import Settings
from shared.models import Identity, UserRole

from .interfaces import ISessionRepository, ISessionResolver
from .models import JWTPayload
from .exceptions import InvalidTokenError, ExpiredTokenError

logger = logging.getLogger(__name__)


def parse_role(value: Optional[str]) -> UserRole:
    """
    Map a stored role string onto the closed role set.

    Missing roles default to USER, and unknown values are demoted to USER.
    """
    if value is None:
        return UserRole.USER
    try:
        return UserRole(value)
    except ValueError:
        logger.warning(f"Unknown user role {value!r}, treating as '{UserRole.USER.value}'")
        return UserRole.USER


class SessionResolver(ISessionResolver):
    """
    Implementation of the session resolver.

    Stateless: every call goes to the repository, nothing is cached.
    """

    def __init__(self, repository: ISessionRepository, settings: Settings):
        self._repository = repository
        self._settings = settings

    def extract_token(self, headers: Mapping[str, str]) -> Optional[str]:
        """
        Pull the session token out of request headers.

        The session cookie wins over an Authorization bearer header.
        """
        normalized = {key.lower(): value for key, value in headers.items()}

        cookie_header = normalized.get("cookie")
        if cookie_header:
            cookies = cookie_parser(cookie_header)
            token = cookies.get(self._settings.session_cookie_name, "").strip()
            if token:
                return token

        authorization = normalized.get("authorization", "")
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()

        return None

    async def resolve(self, headers: Mapping[str, str]) -> Identity:
        """Resolve headers to an identity; absence of a session is not an error."""
        token = self.extract_token(headers)
        if not token:
            return Identity.anonymous()

        try:
            user_id = self._user_id_for_token(token)
            if user_id is None:
                return Identity.anonymous()
            user = self._repository.get_user(user_id)
        except (InvalidTokenError, ExpiredTokenError) as e:
            logger.debug(f"Rejected session token: {e.code}")
            return Identity.anonymous()
        except Exception:
            logger.warning("Session lookup failed, treating request as anonymous", exc_info=True)
            return Identity.anonymous()

        if user is None:
            logger.debug(f"Session references missing user {user_id}")
            return Identity.anonymous()

        return Identity.for_user(user.id, parse_role(user.role))

    def _user_id_for_token(self, token: str) -> Optional[str]:
        if self._looks_like_jwt(token):
            return self._decode_jwt(token).sub

        session = self._repository.get_session(token)
        if session is None:
            return None
        if session.is_expired():
            raise ExpiredTokenError()
        return session.user_id

    def _looks_like_jwt(self, token: str) -> bool:
        return bool(self._settings.supabase_jwt_secret) and token.count(".") == 2

    def _decode_jwt(self, token: str) -> JWTPayload:
        try:
            payload = jwt.decode(
                token,
                self._settings.supabase_jwt_secret,
                algorithms=["HS256"],
                audience="authenticated",
            )
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e))
        return JWTPayload(**payload)
