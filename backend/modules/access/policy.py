"""
Route access policy.

Classifies request paths into protection tiers and decides whether a
request may proceed or must be redirected. Pure: no I/O, no state.
"""

from typing import Iterable
from urllib.parse import quote

from shared.config import Settings
from shared.models import Identity, UserRole

from .models import AccessDecision, RouteTier

# Characters encodeURIComponent leaves as-is beyond quote()'s defaults
_URI_COMPONENT_SAFE = "!*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode a value the way browsers' encodeURIComponent does."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def _matches(path: str, prefix: str) -> bool:
    """Whether path is prefix itself or nested below it."""
    prefix = prefix.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


class RouteAccessPolicy:
    """
    Decision table for route protection.

    Evaluated once per request, before any route handler:
    1. admin tier: no session -> login with return path,
       wrong role -> site root, else allow
    2. authenticated tier: no session -> login
    3. public tier: allow
    """

    def __init__(
        self,
        admin_prefix: str = "/admin",
        authenticated_paths: Iterable[str] = ("/checkout", "/orders", "/wishlist"),
        admin_roles: Iterable[UserRole | str] = (UserRole.ADMIN, UserRole.EDITOR),
        login_path: str = "/login",
        auth_redirect_includes_return_path: bool = False,
    ):
        self._admin_prefix = admin_prefix
        self._authenticated_paths = tuple(authenticated_paths)
        self._admin_roles = [UserRole(role) for role in admin_roles]
        self._login_path = login_path
        self._auth_redirect_includes_return_path = auth_redirect_includes_return_path

    @classmethod
    def from_settings(cls, settings: Settings) -> "RouteAccessPolicy":
        """Build the policy from application settings."""
        return cls(
            admin_prefix=settings.admin_prefix,
            authenticated_paths=settings.authenticated_paths,
            admin_roles=settings.admin_roles,
            login_path=settings.login_path,
            auth_redirect_includes_return_path=settings.auth_redirect_includes_return_path,
        )

    def classify(self, path: str) -> RouteTier:
        """Classify a path into its protection tier."""
        if _matches(path, self._admin_prefix):
            return RouteTier.ADMIN
        if any(_matches(path, protected) for protected in self._authenticated_paths):
            return RouteTier.AUTHENTICATED
        return RouteTier.PUBLIC

    def decide(self, path: str, identity: Identity) -> AccessDecision:
        """Decide whether a request for path by identity may proceed."""
        return self.decide_for_tier(self.classify(path), path, identity)

    def decide_for_tier(self, tier: RouteTier, path: str, identity: Identity) -> AccessDecision:
        """Decide for an already classified path."""
        if tier == RouteTier.ADMIN:
            if not identity.authenticated:
                return AccessDecision.redirect(self.login_url(path))
            if not identity.has_role(self._admin_roles):
                return AccessDecision.redirect("/")
            return AccessDecision.allow()

        if tier == RouteTier.AUTHENTICATED and not identity.authenticated:
            if self._auth_redirect_includes_return_path:
                return AccessDecision.redirect(self.login_url(path))
            return AccessDecision.redirect(self._login_path)

        return AccessDecision.allow()

    def login_url(self, return_path: str) -> str:
        """Login location carrying the percent-encoded return path."""
        return f"{self._login_path}?redirect={encode_uri_component(return_path)}"
