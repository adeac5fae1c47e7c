"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules:
JWT helpers, in-memory repositories and a container reset between tests.
"""

import pytest
from datetime import datetime, timezone, timedelta
from typing import Optional
import jwt  # PyJWT

from api.dependencies import reset_container
from shared.config import Settings
from modules.auth.models import SessionRecord, UserRecord
from modules.blog.models import (
    AnalyticsEvent,
    AnalyticsEventType,
    Category,
    EngagementCounts,
    Post,
    PostSort,
    PostStatus,
    PostSummary,
    RelatedPost,
)


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    expired: bool = False,
    secret: str = TEST_JWT_SECRET,
    audience: str = "authenticated",
) -> str:
    """
    Create a test JWT token for authentication.

    Args:
        user_id: User ID to include in the token
        expired: If True, creates an expired token
        secret: Signing secret
        audience: Audience claim

    Returns:
        JWT token string
    """
    now = datetime.now(timezone.utc)
    exp = now - timedelta(hours=1) if expired else now + timedelta(hours=1)

    payload = {
        "sub": user_id,
        "aud": audience,
        "role": "authenticated",
        "exp": int(exp.timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm="HS256")


class FakeSessionRepository:
    """In-memory session store."""

    def __init__(self) -> None:
        self.sessions: dict[str, SessionRecord] = {}
        self.users: dict[str, UserRecord] = {}
        self.session_lookups = 0
        self.fail_with: Optional[Exception] = None

    def add_user(self, user_id: str, role: Optional[str] = "user") -> UserRecord:
        user = UserRecord(id=user_id, name=f"User {user_id}", email=f"{user_id}@example.com", role=role)
        self.users[user_id] = user
        return user

    def add_session(self, token: str, user_id: str, expires_in: timedelta = timedelta(days=7)) -> None:
        self.sessions[token] = SessionRecord(
            token=token,
            user_id=user_id,
            expires_at=datetime.now(timezone.utc) + expires_in,
        )

    def get_session(self, token: str) -> Optional[SessionRecord]:
        self.session_lookups += 1
        if self.fail_with:
            raise self.fail_with
        return self.sessions.get(token)

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        if self.fail_with:
            raise self.fail_with
        return self.users.get(user_id)


class FakeBlogRepository:
    """
    In-memory blog tables.

    list_related_posts deliberately returns every candidate in insertion
    order so that ranking is left to the service.
    """

    def __init__(self) -> None:
        self.posts: dict[int, Post] = {}
        self.events: list[AnalyticsEvent] = []
        self.lookup_error: Optional[Exception] = None
        self.increment_error: Optional[Exception] = None
        self.related_error: Optional[Exception] = None
        self.insert_error: Optional[Exception] = None
        self.list_calls: list[tuple] = []
        self.event_page_calls: list[tuple] = []

    def add_post(
        self,
        post_id: int,
        slug: str,
        status: PostStatus = PostStatus.PUBLISHED,
        category_id: Optional[int] = None,
        published_at: Optional[datetime] = None,
        view_count: int = 0,
    ) -> Post:
        category = None
        if category_id is not None:
            category = Category(id=category_id, name=f"Category {category_id}", slug=f"category-{category_id}")
        post = Post(
            id=post_id,
            title=slug.replace("-", " ").title(),
            slug=slug,
            content="Body",
            status=status,
            category_id=category_id,
            category=category,
            published_at=published_at,
            view_count=view_count,
        )
        self.posts[post_id] = post
        return post

    def get_published_post_by_slug(self, slug: str) -> Optional[Post]:
        if self.lookup_error:
            raise self.lookup_error
        for post in self.posts.values():
            if post.slug == slug and post.status == PostStatus.PUBLISHED:
                return post.model_copy()
        return None

    def increment_view_count(self, post_id: int, current_count: int) -> int:
        if self.increment_error:
            raise self.increment_error
        post = self.posts[post_id]
        self.posts[post_id] = post.model_copy(update={"view_count": post.view_count + 1})
        return post.view_count + 1

    def list_related_posts(self, category_id: int, exclude_post_id: int, limit: int) -> list[RelatedPost]:
        if self.related_error:
            raise self.related_error
        return [
            RelatedPost(
                id=p.id,
                title=p.title,
                slug=p.slug,
                published_at=p.published_at,
                category_id=p.category_id,
                status=p.status,
            )
            for p in self.posts.values()
            if p.category_id == category_id
        ]

    def list_published_posts(
        self,
        category_id: Optional[int],
        search: Optional[str],
        sort: PostSort,
        limit: int,
        offset: int,
    ) -> list[PostSummary]:
        self.list_calls.append((category_id, search, sort, limit, offset))
        published = [p for p in self.posts.values() if p.status == PostStatus.PUBLISHED]
        return [
            PostSummary(id=p.id, title=p.title, slug=p.slug, category_id=p.category_id)
            for p in published[offset:offset + limit]
        ]

    def insert_event(self, event: AnalyticsEvent) -> None:
        if self.insert_error:
            raise self.insert_error
        self.events.append(event)

    def _matching(self, post_slug, since, until) -> list[AnalyticsEvent]:
        events = [e for e in self.events if e.post_slug == post_slug]
        if since is not None:
            events = [e for e in events if e.occurred_at >= since]
        if until is not None:
            events = [e for e in events if e.occurred_at <= until]
        return events

    def count_events(self, post_slug, since=None, until=None) -> dict[str, int]:
        counts = {t.value: 0 for t in AnalyticsEventType}
        for event in self._matching(post_slug, since, until):
            counts[event.event_type.value] += 1
        return counts

    def get_engagement(self, post_slug, since=None, until=None) -> EngagementCounts:
        """Same counting rules as the blog_post_engagement database function."""
        events = self._matching(post_slug, since, until)

        def readers(min_depth: int) -> int:
            return len({
                e.session_id or f"event-{index}"
                for index, e in enumerate(events)
                if e.event_type == AnalyticsEventType.SCROLL
                and isinstance(e.event_data.get("depth"), (int, float))
                and not isinstance(e.event_data.get("depth"), bool)
                and e.event_data["depth"] >= min_depth
            })

        return EngagementCounts(
            unique_sessions=len({e.session_id for e in events if e.session_id}),
            scroll50_readers=readers(50),
            scroll100_readers=readers(100),
        )

    def list_events(self, post_slug, since=None, until=None, limit=10, offset=0) -> list[AnalyticsEvent]:
        self.event_page_calls.append((limit, offset))
        events = sorted(self._matching(post_slug, since, until), key=lambda e: e.occurred_at, reverse=True)
        return events[offset:offset + limit]


@pytest.fixture(autouse=True)
def reset_service_container():
    """Reset the service container before and after each test."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a known JWT secret and no Supabase connection."""
    return Settings(supabase_jwt_secret=TEST_JWT_SECRET, session_cookie_name="session_token")


@pytest.fixture
def session_repository() -> FakeSessionRepository:
    """Empty in-memory session store."""
    return FakeSessionRepository()


@pytest.fixture
def blog_repository() -> FakeBlogRepository:
    """Empty in-memory blog store."""
    return FakeBlogRepository()
