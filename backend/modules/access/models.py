"""
Route access data models.

Both types are derived per request and never stored.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class RouteTier(str, Enum):
    """Authorization level a path requires."""

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"  # Any signed-in user
    ADMIN = "admin"                  # Admin or editor


class AccessAction(str, Enum):
    """Outcome of an access decision."""

    ALLOW = "allow"
    REDIRECT = "redirect"


class AccessDecision(BaseModel):
    """Result of evaluating the route access policy for one request."""

    action: AccessAction
    target: Optional[str] = Field(None, description="Redirect location, only set for REDIRECT")

    model_config = {"frozen": True}

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(action=AccessAction.ALLOW)

    @classmethod
    def redirect(cls, target: str) -> "AccessDecision":
        return cls(action=AccessAction.REDIRECT, target=target)

    @property
    def allowed(self) -> bool:
        return self.action == AccessAction.ALLOW
