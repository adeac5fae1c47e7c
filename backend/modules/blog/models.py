"""
Blog module data models.

Posts, their authors and categories, related-post cards, and the
analytics events readers' browsers send while a post is open.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Optional, Any
from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shared.models import CamelModel


class PostStatus(str, Enum):
    """Publication status of a blog post."""

    DRAFT = "draft"
    PUBLISHED = "published"


class PostSort(str, Enum):
    """Orderings supported by the published post listing."""

    LATEST = "latest"
    OLDEST = "oldest"
    MOST_READ = "mostRead"


class SocialLinks(CamelModel):
    """Author social profiles. Every network is optional."""

    instagram: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    youtube: Optional[str] = None
    website: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class Author(CamelModel):
    """Post author with the public parts of their author profile."""

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    social_links: Optional[SocialLinks] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value)

    @field_validator("social_links", mode="before")
    @classmethod
    def _parse_social_links(cls, value):
        # Stored as a JSON string by the authoring UI
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                return None
        if not isinstance(value, dict):
            return None
        return value


class Category(CamelModel):
    """Blog category."""

    id: int
    name: str
    slug: str
    description: Optional[str] = None


class AuthorSummary(CamelModel):
    """Author fields shown on post cards."""

    id: str
    name: Optional[str] = None
    image: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value)


class RelatedPost(CamelModel):
    """Card-sized view of a post, used for related posts."""

    id: int
    title: str
    slug: str
    excerpt: Optional[str] = None
    featured_image: Optional[str] = None
    published_at: Optional[datetime] = None
    category_id: Optional[int] = None
    status: PostStatus = PostStatus.PUBLISHED
    author: Optional[AuthorSummary] = None


class PostSummary(RelatedPost):
    """Listing view of a published post."""

    featured_image_alt: Optional[str] = None
    read_time: Optional[int] = None
    view_count: int = 0
    share_count: int = 0
    category: Optional[Category] = None


class Post(CamelModel):
    """A blog post with its author and category."""

    id: int
    title: str
    slug: str
    excerpt: Optional[str] = None
    content: str = ""
    featured_image: Optional[str] = None
    featured_image_alt: Optional[str] = None
    status: PostStatus
    published_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    read_time: Optional[int] = None
    view_count: int = Field(default=0, ge=0)
    share_count: int = Field(default=0, ge=0)
    category_id: Optional[int] = None

    # SEO metadata, passed through untouched
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    canonical_url: Optional[str] = None
    robots_meta: Optional[str] = None
    og_title: Optional[str] = None
    og_description: Optional[str] = None
    og_image: Optional[str] = None
    twitter_title: Optional[str] = None
    twitter_description: Optional[str] = None
    twitter_image: Optional[str] = None
    focus_keyword: Optional[str] = None
    seo_score: Optional[int] = None

    author: Optional[Author] = None
    category: Optional[Category] = None

    @field_validator("view_count", "share_count", mode="before")
    @classmethod
    def _null_counts_are_zero(cls, value):
        return value or 0


class PostDetail(Post):
    """A resolved post together with its related posts."""

    related_posts: list[RelatedPost] = Field(default_factory=list)


# -----------------------------------------------------------------------------
# Analytics
# -----------------------------------------------------------------------------


class AnalyticsEventType(str, Enum):
    """Engagement events the post page emits."""

    PAGEVIEW = "pageview"
    SCROLL = "scroll"              # eventData.depth in 25% steps
    PRODUCT_CLICK = "product_click"
    SHARE = "share"


class RecordEventRequest(CamelModel):
    """Body of an analytics event submission."""

    event_type: Optional[str] = None
    event_data: dict[str, Any] = Field(default_factory=dict)
    session_id: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    @field_validator("event_data", mode="before")
    @classmethod
    def _null_data_is_empty(cls, value):
        return value or {}

    def carries_user_id(self) -> bool:
        """Whether the client tried to supply a user id."""
        return bool({"userId", "user_id"} & set(self.model_extra or {}))


class AnalyticsEvent(CamelModel):
    """A stored engagement event. Append-only."""

    id: Optional[int] = None
    post_slug: str
    event_type: AnalyticsEventType
    event_data: dict[str, Any] = Field(default_factory=dict)
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    occurred_at: datetime

    @field_validator("event_data", mode="before")
    @classmethod
    def _null_data_is_empty(cls, value):
        return value or {}


class AnalyticsAck(CamelModel):
    """Acknowledgement returned for every accepted event submission."""

    recorded: bool


class ScrollEngagement(CamelModel):
    """Share of pageviews that scrolled to half and full depth."""

    scroll50_percentage: int = 0
    scroll100_percentage: int = 0


class AnalyticsSummary(CamelModel):
    """Aggregated engagement for one post."""

    post_slug: str
    total_pageviews: int = 0
    unique_sessions: int = 0
    total_shares: int = 0
    product_clicks: int = 0
    scroll_engagement: ScrollEngagement = Field(default_factory=ScrollEngagement)
    event_breakdown: dict[str, int] = Field(default_factory=dict)
    events: Optional[list[AnalyticsEvent]] = None


class EngagementCounts(CamelModel):
    """Distinct-reader counts aggregated by the database."""

    unique_sessions: int = 0
    scroll50_readers: int = 0
    scroll100_readers: int = 0

    @field_validator("unique_sessions", "scroll50_readers", "scroll100_readers", mode="before")
    @classmethod
    def _null_counts_are_zero(cls, value):
        return value or 0
