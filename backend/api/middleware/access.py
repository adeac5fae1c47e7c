"""
Route protection middleware.

Runs the route access policy once per request, before any route handler.
Public paths pass straight through without a session lookup. For protected
paths the session is resolved, and a redirect short-circuits the request.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import RedirectResponse, Response

from modules.access.models import RouteTier

from ..dependencies import get_access_policy, get_session_resolver

logger = logging.getLogger(__name__)


class AccessControlMiddleware(BaseHTTPMiddleware):
    """Redirects visitors who may not see a protected page."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        policy = get_access_policy()
        path = request.url.path
        tier = policy.classify(path)

        if tier == RouteTier.PUBLIC:
            return await call_next(request)

        identity = await get_session_resolver().resolve(request.headers)
        decision = policy.decide_for_tier(tier, path, identity)

        if not decision.allowed:
            logger.info(f"Redirecting {tier.value} request for {path} to {decision.target}")
            return RedirectResponse(decision.target, status_code=307)

        request.state.identity = identity
        return await call_next(request)
