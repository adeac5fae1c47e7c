"""
Route access module.

Decides, per request path and identity, whether a page may be served
or the visitor must be redirected.

Public API:
- RouteAccessPolicy: Tier classification and decision table
- RouteTier, AccessDecision, AccessAction: Decision types
"""

from .models import AccessAction, AccessDecision, RouteTier
from .policy import RouteAccessPolicy, encode_uri_component

__all__ = [
    "RouteAccessPolicy",
    "encode_uri_component",
    "RouteTier",
    "AccessAction",
    "AccessDecision",
]
