"""
Base repository class for database access.

Provides a common abstraction layer for all repositories, encapsulating
Supabase client access and providing shared utilities for data operations.
"""

from typing import Any, TypeVar, Generic
from supabase import Client


T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base class for all repositories.

    Provides common functionality for database operations:
    - Supabase client access via self._db
    - Generic type parameter for model type hints

    Subclasses should implement domain-specific data access methods
    and handle dict-to-Pydantic model mapping internally.

    Example:
        class BlogRepository(BaseRepository[Post]):
            def get_by_slug(self, slug: str) -> Optional[Post]:
                result = self._db.table("blog_posts").select("*").eq("slug", slug).execute()
                if not result.data:
                    return None
                return self._map_to_post(result.data[0])
    """

    def __init__(self, db: Client) -> None:
        """
        Initialize the repository with a Supabase client.

        Args:
            db: Supabase client instance for database operations.
        """
        self._db = db

    @staticmethod
    def _first(rows: Any) -> Any:
        """Return the first row of a query result, or None when empty."""
        if not rows:
            return None
        return rows[0]
