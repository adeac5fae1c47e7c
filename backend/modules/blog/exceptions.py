"""
Blog module exceptions.
"""

from shared.exceptions import (
    ExternalServiceError,
    MissingParameterError,
    NotFoundError,
    ValidationError,
)


class MissingSlugError(MissingParameterError):
    """Raised when a post slug is empty or missing."""

    def __init__(self):
        super().__init__("Slug", code="MISSING_SLUG")


class PostNotFoundError(NotFoundError):
    """
    Raised when no published post has the requested slug.

    Drafts and unknown slugs produce the same error.
    """

    def __init__(self, slug: str):
        super().__init__(
            "Blog post not found or not published",
            code="POST_NOT_FOUND",
            details={"slug": slug},
        )


class MissingEventTypeError(MissingParameterError):
    """Raised when an analytics submission has no event type."""

    def __init__(self):
        super().__init__("eventType", code="MISSING_EVENT")


class InvalidEventTypeError(ValidationError):
    """Raised when an analytics submission has an unknown event type."""

    def __init__(self, event_type: str, allowed: list[str]):
        super().__init__(
            f"Event must be one of: {', '.join(allowed)}",
            code="INVALID_EVENT_TYPE",
            details={"event_type": event_type},
        )


class UserIdNotAllowedError(ValidationError):
    """Raised when a client tries to attribute an event to a user id."""

    def __init__(self):
        super().__init__(
            "User ID cannot be provided in request body",
            code="USER_ID_NOT_ALLOWED",
        )


class BlogStorageError(ExternalServiceError):
    """Raised when the blog tables cannot be read."""

    def __init__(self, message: str):
        super().__init__(message, service="supabase", code="INTERNAL_ERROR")
