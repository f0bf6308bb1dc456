"""
Quill Backend — Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the outcomes a post operation can have.
Why:   The store signals "not found", "invalid input" and "store fault" as
       distinct types; global handlers map each type to one HTTP status code.
How:   Each exception carries a user-facing message and an optional context dict.
       Handlers registered in main.py turn them into JSON error bodies.
Who:   Raised by the post stores and middleware; caught by global handlers.
When:  During request processing.

Exception Hierarchy:
    BlogError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests

Design Decision:
    Stores raise instead of returning result objects. Exceptions propagate
    through the route handler untouched, so handlers stay pass-through and
    the status-code mapping lives in exactly one place.
"""

from typing import Any, Dict, Optional


class BlogError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, and returned only where noted)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(BlogError):
    """
    Raised when client input fails validation.

    When:    title/content missing or blank, wrong field types, malformed JSON.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "title is required",
            "details": {"field": "title"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(BlogError):
    """
    Raised when a requested post does not exist.

    When:    read, update or delete of an id that was never issued, was
             already deleted, or is not a well-formed id at all.
    HTTP:    404 Not Found

    The message is "<Resource> not found"; the id goes into context for logs.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource_id = resource_id


class DatabaseError(BlogError):
    """
    Raised when the post store fails unexpectedly.

    What:    Connection refused, lost mid-query, serialization failure, etc.
    HTTP:    500 Internal Server Error

    The message describes the underlying fault so the client has something
    actionable to show; SQL text and parameters stay in the server log.
    """

    def __init__(
        self,
        message: str = "The post store is unavailable. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(BlogError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests
    Response carries a Retry-After header with the seconds until a slot frees.
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
