"""
Authentication module data models.

Rows read from the session store and the decoded JWT payload.
"""

from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, Field, field_validator


class JWTPayload(BaseModel):
    """
    Decoded JWT access token payload.

    Only the subject is used; the role always comes from the user record.
    """

    sub: str = Field(..., description="Subject (user ID)")
    exp: int = Field(..., description="Expiration timestamp")
    iat: int = Field(..., description="Issued at timestamp")
    aud: str = Field(default="authenticated", description="Audience")

    model_config = {"extra": "ignore"}


class SessionRecord(BaseModel):
    """A row of the session table."""

    token: str
    user_id: str
    expires_at: datetime

    @field_validator("user_id", mode="before")
    @classmethod
    def _stringify_user_id(cls, value):
        return str(value)

    @field_validator("expires_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Whether the session has reached its expiry time."""
        now = now or datetime.now(timezone.utc)
        return self.expires_at <= now


class UserRecord(BaseModel):
    """A row of the user table."""

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None
    role: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return str(value)
