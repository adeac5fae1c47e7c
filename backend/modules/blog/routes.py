"""
Blog API endpoints.

Public post reads and analytics ingestion, plus the analytics summary
for the admin panel. Module exceptions propagate to the application's
error handlers, which render them as {"error", "code"} bodies.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_blog_service
from api.middleware.auth import get_identity, require_roles
from api.models.errors import ErrorResponse
from shared.models import Identity, UserRole

from .interfaces import IBlogService
from .models import (
    AnalyticsAck,
    AnalyticsSummary,
    PostDetail,
    PostSort,
    PostSummary,
    RecordEventRequest,
)

router = APIRouter()

require_admin_panel = require_roles(UserRole.ADMIN, UserRole.EDITOR)


@router.get("/posts", response_model=list[PostSummary])
async def list_posts(
    category_id: Optional[int] = Query(default=None, alias="categoryId"),
    search: Optional[str] = Query(default=None, max_length=200),
    sort: PostSort = Query(default=PostSort.LATEST),
    limit: int = Query(default=10, ge=1),
    offset: int = Query(default=0, ge=0),
    service: IBlogService = Depends(get_blog_service),
) -> list[PostSummary]:
    """
    List published posts.

    Optionally filter by category or a title/excerpt search term.
    Page sizes above 100 are capped at 100.
    """
    return await service.list_posts(category_id, search, sort, limit, offset)


@router.get(
    "/posts/{slug}",
    response_model=PostDetail,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_post(
    slug: str,
    service: IBlogService = Depends(get_blog_service),
) -> PostDetail:
    """
    Get a published post by slug.

    Every call counts as a view. Drafts are reported as not found.
    """
    return await service.resolve_by_slug(slug)


@router.post(
    "/posts/{slug}/analytics",
    response_model=AnalyticsAck,
    status_code=202,
    responses={400: {"model": ErrorResponse}},
)
async def record_event(
    slug: str,
    request: RecordEventRequest,
    identity: Identity = Depends(get_identity),
    service: IBlogService = Depends(get_blog_service),
) -> AnalyticsAck:
    """
    Record an engagement event for a post.

    Always acknowledged for a valid event type; recorded is false when
    storage failed.
    """
    return await service.record_event(slug, request, identity)


@router.get(
    "/posts/{slug}/analytics",
    response_model=AnalyticsSummary,
    response_model_exclude_none=True,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
    },
)
async def get_analytics_summary(
    slug: str,
    since: Optional[datetime] = Query(default=None, alias="from"),
    until: Optional[datetime] = Query(default=None, alias="to"),
    include_events: bool = Query(default=False, alias="includeEvents"),
    limit: int = Query(default=10, ge=1),
    offset: int = Query(default=0, ge=0),
    identity: Identity = Depends(require_admin_panel),
    service: IBlogService = Depends(get_blog_service),
) -> AnalyticsSummary:
    """
    Get engagement metrics for a post.

    Restricted to admins and editors.
    """
    return await service.get_analytics_summary(
        slug, since, until, include_events, limit, offset
    )
