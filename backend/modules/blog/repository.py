"""
Blog repository for database access.

Encapsulates all Supabase queries and data mapping for blog tables:
- blog_posts (joined with user, author_profiles, blog_categories)
- blog_analytics
"""

from datetime import datetime, timezone
from typing import Optional, Any

from supabase import Client

from shared.repository import BaseRepository
from .models import (
    AnalyticsEvent,
    AnalyticsEventType,
    Author,
    AuthorSummary,
    Category,
    EngagementCounts,
    Post,
    PostSort,
    PostSummary,
    RelatedPost,
)

POST_COLUMNS = (
    "*, "
    "author:user(id, name, email, image, author_profiles(bio, avatar, social_links)), "
    "category:blog_categories(id, name, slug, description)"
)

CARD_COLUMNS = (
    "id, title, slug, excerpt, featured_image, published_at, category_id, status, "
    "author:user(id, name, image)"
)

SUMMARY_COLUMNS = (
    "id, title, slug, excerpt, featured_image, featured_image_alt, published_at, "
    "category_id, status, read_time, view_count, share_count, "
    "author:user(id, name, image), "
    "category:blog_categories(id, name, slug, description)"
)

VIEW_COUNT_RPC = "increment_blog_post_view_count"
ENGAGEMENT_RPC = "blog_post_engagement"

# PostgREST or= filters are comma separated and parenthesised
_SEARCH_RESERVED = str.maketrans("", "", ",()")


class BlogRepository(BaseRepository[Post]):
    """
    Repository for blog data access.

    Note: This repository does NOT apply visibility rules beyond the
    published filter. The service layer decides what callers may see.
    """

    def __init__(self, db: Client, atomic_increment: bool = False) -> None:
        super().__init__(db)
        self._atomic_increment = atomic_increment

    # -------------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------------

    def get_published_post_by_slug(self, slug: str) -> Optional[Post]:
        """
        Get a published post with its author and category.

        Args:
            slug: The post slug.

        Returns:
            Post, or None if no published post has this slug.
        """
        result = (
            self._db.table("blog_posts")
            .select(POST_COLUMNS)
            .eq("slug", slug)
            .eq("status", "published")
            .limit(1)
            .execute()
        )
        row = self._first(result.data)
        if row is None:
            return None
        return self._map_to_post(row)

    def increment_view_count(self, post_id: int, current_count: int) -> int:
        """
        Add one view to a post.

        With atomic increments enabled the database function does the
        arithmetic and its result is returned. Otherwise the new value is
        computed from current_count, so concurrent views may be lost.

        Returns:
            The view count after this increment.
        """
        if self._atomic_increment:
            result = self._db.rpc(VIEW_COUNT_RPC, {"post_id": post_id}).execute()
            return int(result.data)

        new_count = current_count + 1
        self._db.table("blog_posts").update({
            "view_count": new_count,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }).eq("id", post_id).execute()
        return new_count

    def list_related_posts(
        self,
        category_id: int,
        exclude_post_id: int,
        limit: int,
    ) -> list[RelatedPost]:
        """
        List other published posts in a category.

        Posts with a publish date come first, newest first. Undated posts
        only fill the remaining slots.
        """
        dated = (
            self._related_query(category_id, exclude_post_id)
            .not_.is_("published_at", "null")
            .order("published_at", desc=True)
            .order("id", desc=True)
            .limit(limit)
            .execute()
        )
        posts = [self._map_to_related_post(row) for row in dated.data]

        if len(posts) < limit:
            undated = (
                self._related_query(category_id, exclude_post_id)
                .is_("published_at", "null")
                .order("id", desc=True)
                .limit(limit - len(posts))
                .execute()
            )
            posts.extend(self._map_to_related_post(row) for row in undated.data)

        return posts

    def list_published_posts(
        self,
        category_id: Optional[int],
        search: Optional[str],
        sort: PostSort,
        limit: int,
        offset: int,
    ) -> list[PostSummary]:
        """
        List published posts with optional filters.

        Args:
            category_id: Restrict to one category.
            search: Case-insensitive match on title or excerpt.
            sort: Ordering to apply.
            limit: Page size.
            offset: Number of posts to skip.
        """
        query = self._db.table("blog_posts").select(SUMMARY_COLUMNS).eq("status", "published")

        if category_id is not None:
            query = query.eq("category_id", category_id)

        if search:
            term = search.translate(_SEARCH_RESERVED).strip()
            if term:
                query = query.or_(f"title.ilike.%{term}%,excerpt.ilike.%{term}%")

        if sort == PostSort.MOST_READ:
            query = query.order("view_count", desc=True)
        elif sort == PostSort.OLDEST:
            query = query.order("published_at")
        else:
            query = query.order("published_at", desc=True)

        result = query.range(offset, offset + limit - 1).execute()
        return [self._map_to_summary(row) for row in result.data]

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    def insert_event(self, event: AnalyticsEvent) -> None:
        """
        Append an analytics event.

        Args:
            event: The event to store.
        """
        data = {
            "post_slug": event.post_slug,
            "event_type": event.event_type.value,
            "event_data": event.event_data,
            "user_id": event.user_id,
            "session_id": event.session_id,
            "occurred_at": event.occurred_at.isoformat(),
        }
        self._db.table("blog_analytics").insert(data).execute()

    def count_events(
        self,
        post_slug: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> dict[str, int]:
        """
        Count a post's analytics events per event type.

        Uses exact counts from the database, so the totals do not depend
        on how many rows a single read may return.
        """
        counts = {}
        for event_type in AnalyticsEventType:
            query = (
                self._db.table("blog_analytics")
                .select("id", count="exact")
                .eq("post_slug", post_slug)
                .eq("event_type", event_type.value)
            )
            result = self._in_range(query, since, until).limit(1).execute()
            counts[event_type.value] = result.count or 0
        return counts

    def get_engagement(
        self,
        post_slug: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
    ) -> EngagementCounts:
        """
        Count distinct sessions and distinct readers per scroll milestone.

        A reader is a session, or a single event when no session was sent.
        """
        result = self._db.rpc(ENGAGEMENT_RPC, {
            "p_post_slug": post_slug,
            "p_since": since.isoformat() if since else None,
            "p_until": until.isoformat() if until else None,
        }).execute()
        row = self._first(result.data) if isinstance(result.data, list) else result.data
        return EngagementCounts(**(row or {}))

    def list_events(
        self,
        post_slug: str,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: int = 10,
        offset: int = 0,
    ) -> list[AnalyticsEvent]:
        """
        List one page of a post's analytics events, newest first.

        Args:
            post_slug: The post slug.
            since: Inclusive lower bound on occurred_at.
            until: Inclusive upper bound on occurred_at.
            limit: Page size.
            offset: Number of events to skip.
        """
        query = self._db.table("blog_analytics").select("*").eq("post_slug", post_slug)
        result = (
            self._in_range(query, since, until)
            .order("occurred_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return [AnalyticsEvent(**row) for row in result.data]

    # -------------------------------------------------------------------------
    # Private helpers
    # -------------------------------------------------------------------------

    def _in_range(self, query, since: Optional[datetime], until: Optional[datetime]):
        if since is not None:
            query = query.gte("occurred_at", since.isoformat())
        if until is not None:
            query = query.lte("occurred_at", until.isoformat())
        return query

    def _related_query(self, category_id: int, exclude_post_id: int):
        return (
            self._db.table("blog_posts")
            .select(CARD_COLUMNS)
            .eq("category_id", category_id)
            .eq("status", "published")
            .neq("id", exclude_post_id)
        )

    def _map_to_post(self, data: dict[str, Any]) -> Post:
        """Map a joined blog_posts row to a Post model."""
        fields = {k: v for k, v in data.items() if k not in ("author", "category")}
        return Post(
            **fields,
            author=self._map_to_author(data.get("author")),
            category=self._map_to_category(data.get("category")),
        )

    def _map_to_author(self, data: Optional[dict[str, Any]]) -> Optional[Author]:
        """Flatten the user row and its author profile into an Author."""
        if not data:
            return None

        profile = data.get("author_profiles")
        if isinstance(profile, list):
            profile = profile[0] if profile else None
        profile = profile or {}

        return Author(
            id=data["id"],
            name=data.get("name"),
            email=data.get("email"),
            image=data.get("image"),
            bio=profile.get("bio"),
            avatar=profile.get("avatar"),
            social_links=profile.get("social_links"),
        )

    def _map_to_category(self, data: Optional[dict[str, Any]]) -> Optional[Category]:
        if not data:
            return None
        return Category(**data)

    def _map_to_related_post(self, data: dict[str, Any]) -> RelatedPost:
        author = data.get("author")
        return RelatedPost(
            id=data["id"],
            title=data["title"],
            slug=data["slug"],
            excerpt=data.get("excerpt"),
            featured_image=data.get("featured_image"),
            published_at=data.get("published_at"),
            category_id=data.get("category_id"),
            status=data.get("status", "published"),
            author=AuthorSummary(**author) if author else None,
        )

    def _map_to_summary(self, data: dict[str, Any]) -> PostSummary:
        author = data.get("author")
        return PostSummary(
            id=data["id"],
            title=data["title"],
            slug=data["slug"],
            excerpt=data.get("excerpt"),
            featured_image=data.get("featured_image"),
            featured_image_alt=data.get("featured_image_alt"),
            published_at=data.get("published_at"),
            category_id=data.get("category_id"),
            status=data.get("status", "published"),
            read_time=data.get("read_time"),
            view_count=data.get("view_count") or 0,
            share_count=data.get("share_count") or 0,
            author=AuthorSummary(**author) if author else None,
            category=self._map_to_category(data.get("category")),
        )
