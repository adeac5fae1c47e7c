"""
Blog service implementation.

Serves published posts by slug, counts views, picks related posts, and
ingests engagement events. View counting and event recording are best
effort: their failures are logged and never fail the reader's request.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Iterable, Optional

from shared.models import Identity

from .interfaces import IBlogRepository, IBlogService
from .models import (
    AnalyticsAck,
    AnalyticsEvent,
    AnalyticsEventType,
    AnalyticsSummary,
    Post,
    PostDetail,
    PostSort,
    PostStatus,
    PostSummary,
    RecordEventRequest,
    RelatedPost,
    ScrollEngagement,
)
from .exceptions import (
    BlogStorageError,
    InvalidEventTypeError,
    MissingEventTypeError,
    MissingSlugError,
    PostNotFoundError,
    UserIdNotAllowedError,
)

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
MAX_RELATED_POSTS = 4


def select_related_posts(
    candidates: Iterable[RelatedPost],
    post: Post,
    limit: int = MAX_RELATED_POSTS,
) -> list[RelatedPost]:
    """
    Pick the related posts shown under a post.

    Keeps published posts of the same category other than the post
    itself, newest publish date first, undated posts last, ties broken
    by descending id. Returns at most limit posts.
    """
    if post.category_id is None:
        return []

    eligible = [
        c for c in candidates
        if c.id != post.id
        and c.status == PostStatus.PUBLISHED
        and c.category_id == post.category_id
    ]
    eligible.sort(
        key=lambda c: (
            c.published_at is None,
            -c.published_at.timestamp() if c.published_at else 0.0,
            -c.id,
        )
    )
    return eligible[:limit]


def _percentage(part: int, whole: int) -> int:
    # Capped at 100: readers and pageviews come from separate counts
    if whole <= 0:
        return 0
    return min(100, math.floor(part / whole * 100 + 0.5))


class BlogService(IBlogService):
    """
    Blog service backed by an IBlogRepository.

    Implements IBlogService protocol.
    """

    def __init__(self, repository: IBlogRepository, related_posts_limit: int = MAX_RELATED_POSTS):
        self._repository = repository
        self._related_posts_limit = max(0, min(related_posts_limit, MAX_RELATED_POSTS))

    # -------------------------------------------------------------------------
    # Post resolution
    # -------------------------------------------------------------------------

    async def resolve_by_slug(self, slug: str) -> PostDetail:
        """Resolve a published post, count the view, attach related posts."""
        slug = (slug or "").strip()
        if not slug:
            raise MissingSlugError()

        try:
            post = self._repository.get_published_post_by_slug(slug)
        except Exception as e:
            logger.error(f"Failed to load blog post {slug!r}", exc_info=True)
            raise BlogStorageError(f"Failed to load blog post {slug!r}") from e

        if post is None:
            raise PostNotFoundError(slug)

        view_count = post.view_count
        try:
            view_count = self._repository.increment_view_count(post.id, post.view_count)
        except Exception:
            logger.warning(f"Failed to increment view count for post {post.id}", exc_info=True)

        related_posts = self._related_posts(post)

        return PostDetail(**{
            **post.model_dump(),
            "view_count": view_count,
            "related_posts": [r.model_dump() for r in related_posts],
        })

    def _related_posts(self, post: Post) -> list[RelatedPost]:
        if post.category_id is None:
            return []
        try:
            candidates = self._repository.list_related_posts(
                post.category_id,
                post.id,
                self._related_posts_limit,
            )
        except Exception:
            logger.warning(f"Failed to load related posts for post {post.id}", exc_info=True)
            return []
        return select_related_posts(candidates, post, self._related_posts_limit)

    async def list_posts(
        self,
        category_id: Optional[int] = None,
        search: Optional[str] = None,
        sort: PostSort = PostSort.LATEST,
        limit: int = 10,
        offset: int = 0,
    ) -> list[PostSummary]:
        """List published posts, clamping the page to sane bounds."""
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        offset = max(0, offset)
        try:
            return self._repository.list_published_posts(category_id, search, sort, limit, offset)
        except Exception as e:
            logger.error("Failed to list blog posts", exc_info=True)
            raise BlogStorageError("Failed to list blog posts") from e

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    @staticmethod
    def parse_event_type(value: Optional[str]) -> AnalyticsEventType:
        """Validate a client-supplied event type."""
        if value is None or not value.strip():
            raise MissingEventTypeError()
        try:
            return AnalyticsEventType(value.strip())
        except ValueError:
            raise InvalidEventTypeError(value, [t.value for t in AnalyticsEventType])

    async def record_event(
        self,
        slug: str,
        request: RecordEventRequest,
        identity: Optional[Identity] = None,
    ) -> AnalyticsAck:
        """Validate and append an event; storage failures only get logged."""
        slug = (slug or "").strip()
        if not slug:
            raise MissingSlugError()
        if request.carries_user_id():
            raise UserIdNotAllowedError()
        event_type = self.parse_event_type(request.event_type)

        event = AnalyticsEvent(
            post_slug=slug,
            event_type=event_type,
            event_data=request.event_data,
            user_id=identity.id if identity is not None and identity.authenticated else None,
            session_id=(request.session_id or "").strip() or None,
            occurred_at=datetime.now(timezone.utc),
        )

        try:
            self._repository.insert_event(event)
        except Exception:
            logger.warning(
                f"Failed to record {event_type.value} event for post {slug!r}",
                exc_info=True,
            )
            return AnalyticsAck(recorded=False)

        return AnalyticsAck(recorded=True)

    async def get_analytics_summary(
        self,
        slug: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        include_events: bool = False,
        limit: int = 10,
        offset: int = 0,
    ) -> AnalyticsSummary:
        """Aggregate a post's events into engagement metrics."""
        slug = (slug or "").strip()
        if not slug:
            raise MissingSlugError()

        try:
            counts = self._repository.count_events(slug, since, until)
            engagement = self._repository.get_engagement(slug, since, until)
            events = None
            if include_events:
                limit = max(1, min(limit, MAX_PAGE_SIZE))
                offset = max(0, offset)
                events = self._repository.list_events(slug, since, until, limit, offset)
        except Exception as e:
            logger.error(f"Failed to load analytics for post {slug!r}", exc_info=True)
            raise BlogStorageError(f"Failed to load analytics for post {slug!r}") from e

        pageviews = counts.get(AnalyticsEventType.PAGEVIEW.value, 0)

        return AnalyticsSummary(
            post_slug=slug,
            total_pageviews=pageviews,
            unique_sessions=engagement.unique_sessions,
            total_shares=counts.get(AnalyticsEventType.SHARE.value, 0),
            product_clicks=counts.get(AnalyticsEventType.PRODUCT_CLICK.value, 0),
            scroll_engagement=ScrollEngagement(
                scroll50_percentage=_percentage(engagement.scroll50_readers, pageviews),
                scroll100_percentage=_percentage(engagement.scroll100_readers, pageviews),
            ),
            event_breakdown={name: count for name, count in counts.items() if count},
            events=events,
        )
