"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations with their
collaborators (Supabase client, settings) passed in explicitly.
"""

from typing import TYPE_CHECKING, Optional

from shared.config import Settings, get_settings

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.access.policy import RouteAccessPolicy
    from modules.auth.interfaces import ISessionResolver, ISessionRepository
    from modules.blog.interfaces import IBlogService, IBlogRepository


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached as singletons
    within the container. Use reset() to clear all cached services for
    testing.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings
        self._access_policy: "RouteAccessPolicy | None" = None
        self._session_repository: "ISessionRepository | None" = None
        self._session_resolver: "ISessionResolver | None" = None
        self._blog_repository: "IBlogRepository | None" = None
        self._blog_service: "IBlogService | None" = None

    @property
    def settings(self) -> Settings:
        """Get the settings the container wires services with."""
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def access_policy(self) -> "RouteAccessPolicy":
        """Get the route access policy."""
        if self._access_policy is None:
            from modules.access.policy import RouteAccessPolicy
            self._access_policy = RouteAccessPolicy.from_settings(self.settings)
        return self._access_policy

    @property
    def session_repository(self) -> "ISessionRepository":
        """Get the session repository instance."""
        if self._session_repository is None:
            from modules.auth.repository import SessionRepository
            from shared.database import get_supabase_client
            self._session_repository = SessionRepository(get_supabase_client(self.settings))
        return self._session_repository

    @property
    def session_resolver(self) -> "ISessionResolver":
        """Get the session resolver instance."""
        if self._session_resolver is None:
            from modules.auth.service import SessionResolver
            self._session_resolver = SessionResolver(
                repository=self.session_repository,
                settings=self.settings,
            )
        return self._session_resolver

    @property
    def blog_repository(self) -> "IBlogRepository":
        """Get the blog repository instance."""
        if self._blog_repository is None:
            from modules.blog.repository import BlogRepository
            from shared.database import get_supabase_client
            self._blog_repository = BlogRepository(
                get_supabase_client(self.settings),
                atomic_increment=self.settings.atomic_view_increment,
            )
        return self._blog_repository

    @property
    def blog(self) -> "IBlogService":
        """Get the blog service instance."""
        if self._blog_service is None:
            from modules.blog.service import BlogService
            self._blog_service = BlogService(
                repository=self.blog_repository,
                related_posts_limit=self.settings.related_posts_limit,
            )
        return self._blog_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._access_policy = None
        self._session_repository = None
        self._session_resolver = None
        self._blog_repository = None
        self._blog_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_access_policy() -> "RouteAccessPolicy":
    """Dependency for the route access policy."""
    return get_container().access_policy


def get_session_resolver() -> "ISessionResolver":
    """FastAPI dependency for the session resolver."""
    return get_container().session_resolver


def get_blog_service() -> "IBlogService":
    """FastAPI dependency for blog service."""
    return get_container().blog
