"""
Blog module interfaces.

The API layer depends on IBlogService; the service depends on
IBlogRepository so tests can swap storage for an in-memory fake.
"""

from datetime import datetime
from typing import Protocol, Optional, runtime_checkable

from shared.models import Identity

from .models import (
    AnalyticsAck,
    AnalyticsEvent,
    AnalyticsSummary,
    EngagementCounts,
    Post,
    PostDetail,
    PostSort,
    PostSummary,
    RecordEventRequest,
    RelatedPost,
)


@runtime_checkable
class IBlogRepository(Protocol):
    """Storage contract for the blog tables."""

    def get_published_post_by_slug(self, slug: str) -> Optional[Post]:
        """Return the published post with this slug, joined with author and category."""
        ...

    def increment_view_count(self, post_id: int, current_count: int) -> int:
        """Add one view to a post and return the new count."""
        ...

    def list_related_posts(
        self,
        category_id: int,
        exclude_post_id: int,
        limit: int,
    ) -> list[RelatedPost]:
        """Return published posts of a category, newest first, nulls last."""
        ...

    def list_published_posts(
        self,
        category_id: Optional[int],
        search: Optional[str],
        sort: PostSort,
        limit: int,
        offset: int,
    ) -> list[PostSummary]:
        """Return a page of published posts."""
        ...

    def insert_event(self, event: AnalyticsEvent) -> None:
        """Append one analytics event."""
        ...

    def count_events(
        self,
        post_slug: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> dict[str, int]:
        """Return exact event counts per event type in the date range."""
        ...

    def get_engagement(
        self,
        post_slug: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> EngagementCounts:
        """Return distinct sessions and readers per scroll milestone."""
        ...

    def list_events(
        self,
        post_slug: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[AnalyticsEvent]:
        """Return one page of a post's events in the date range, newest first."""
        ...


@runtime_checkable
class IBlogService(Protocol):
    """
    Interface for blog content serving and engagement tracking.
    """

    async def resolve_by_slug(self, slug: str) -> PostDetail:
        """
        Resolve a published post by slug and count the view.

        Not idempotent: every successful call adds one view.

        Args:
            slug: Human-readable post identifier

        Returns:
            The post with its post-increment view count and related posts

        Raises:
            MissingSlugError: If slug is empty
            PostNotFoundError: If no published post has this slug
            BlogStorageError: If the post could not be loaded
        """
        ...

    async def list_posts(
        self,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        sort: PostSort = PostSort.LATEST,
        limit: int = 10,
        offset: int = 0,
    ) -> list[PostSummary]:
        """
        List published posts.

        Raises:
            BlogStorageError: If the posts could not be loaded
        """
        ...

    async def record_event(
        self,
        slug: str,
        request: RecordEventRequest,
        identity: Optional[Identity] = None,
    ) -> AnalyticsAck:
        """
        Record an engagement event for a post.

        Storage failures are logged and reported as recorded=False,
        never raised.

        Raises:
            MissingSlugError: If slug is empty
            MissingEventTypeError: If no event type was given
            InvalidEventTypeError: If the event type is unknown
            UserIdNotAllowedError: If the body carries a user id
        """
        ...

    async def get_analytics_summary(
        self,
        slug: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        include_events: bool = False,
        limit: int = 10,
        offset: int = 0,
    ) -> AnalyticsSummary:
        """
        Aggregate a post's engagement events.

        Scroll percentages count each reader once per milestone and never
        exceed 100. The events page is capped at 100 events.

        Raises:
            MissingSlugError: If slug is empty
            BlogStorageError: If the events could not be loaded
        """
        ...
