"""
Blog module.

Serves published posts by slug with view counting and related posts,
and ingests reader engagement events.

Public API:
- IBlogService: Interface for blog operations
- BlogService: Implementation backed by IBlogRepository
- BlogRepository: Supabase access to blog tables
- PostDetail, RelatedPost, AnalyticsEvent: Core models
"""

from .interfaces import IBlogService, IBlogRepository
from .models import (
    AnalyticsAck,
    AnalyticsEvent,
    AnalyticsEventType,
    AnalyticsSummary,
    Author,
    EngagementCounts,
    Category,
    Post,
    PostDetail,
    PostSort,
    PostStatus,
    PostSummary,
    RecordEventRequest,
    RelatedPost,
    SocialLinks,
)
from .repository import BlogRepository
from .service import BlogService, select_related_posts
from .exceptions import (
    BlogStorageError,
    InvalidEventTypeError,
    MissingEventTypeError,
    MissingSlugError,
    PostNotFoundError,
    UserIdNotAllowedError,
)

__all__ = [
    # Interfaces
    "IBlogService",
    "IBlogRepository",
    # Implementations
    "BlogService",
    "BlogRepository",
    "select_related_posts",
    # Models
    "AnalyticsAck",
    "AnalyticsEvent",
    "AnalyticsEventType",
    "AnalyticsSummary",
    "Author",
    "EngagementCounts",
    "Category",
    "Post",
    "PostDetail",
    "PostSort",
    "PostStatus",
    "PostSummary",
    "RecordEventRequest",
    "RelatedPost",
    "SocialLinks",
    # Exceptions
    "BlogStorageError",
    "InvalidEventTypeError",
    "MissingEventTypeError",
    "MissingSlugError",
    "PostNotFoundError",
    "UserIdNotAllowedError",
]
