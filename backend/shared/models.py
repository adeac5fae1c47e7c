"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base model for payloads exchanged with the storefront frontend.

    Fields are snake_case in Python and camelCase on the wire.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class UserRole(str, Enum):
    """Closed set of roles a storefront user can hold."""

    ADMIN = "admin"
    EDITOR = "editor"
    USER = "user"


class Identity(CamelModel):
    """
    Resolved authentication context for one request.

    Produced fresh for every request by the session resolver and never
    persisted. An anonymous identity carries neither an id nor a role.
    """

    id: Optional[str] = Field(None, description="User ID when authenticated")
    role: Optional[UserRole] = Field(None, description="User role when authenticated")
    authenticated: bool = Field(default=False, description="Whether a valid session exists")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    @model_validator(mode="after")
    def _check_consistency(self) -> "Identity":
        if self.authenticated:
            if not self.id or self.role is None:
                raise ValueError("authenticated identity requires an id and a role")
        elif self.id is not None or self.role is not None:
            raise ValueError("anonymous identity cannot carry an id or a role")
        return self

    @classmethod
    def anonymous(cls) -> "Identity":
        """Identity for a request without a valid session."""
        return cls(authenticated=False)

    @classmethod
    def for_user(cls, user_id: str, role: UserRole) -> "Identity":
        """Identity for a request with a valid session."""
        return cls(id=user_id, role=role, authenticated=True)

    def has_role(self, roles: "list[UserRole] | list[str]") -> bool:
        """Whether the identity is authenticated with one of the given roles."""
        if not self.authenticated or self.role is None:
            return False
        return self.role.value in {UserRole(r).value for r in roles}
