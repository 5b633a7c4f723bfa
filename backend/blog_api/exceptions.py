"""
Blog API - Custom Exception Hierarchy
=======================================

What:  Application-specific exceptions, each mapped to one HTTP status code.
How:   Every exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) turn them into JSON error
       responses; the authentication middleware renders AuthenticationError
       itself because it runs before routing.

Exception Hierarchy:
    BlogError (base)                  → 500 Internal Server Error
    ├── ValidationError               → 400 Bad Request
    │   └── InvalidIdentifierError    → 400 Bad Request ("Invalid ID!")
    ├── NotFoundError                 → 404 Not Found
    │   └── PostNotFoundError         → 404 Not Found ("Post does not exist")
    ├── AuthenticationError           → 401 Unauthorized (status carried)
    └── DatabaseError                 → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class BlogError(Exception):
    """
    Base exception for all Blog API errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, never returned to the client)
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
    Raised when client input fails a business-rule check.

    HTTP: 400 Bad Request. Schema-level body errors stay FastAPI's 422.
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


class InvalidIdentifierError(ValidationError):
    """
    Raised when a post identifier is not a syntactically valid store ID.

    Detected before any store access, so no query is ever issued for it.
    """

    def __init__(self, value: Any = None, field: str = "postID"):
        super().__init__(
            message="Invalid ID!",
            field=field,
            context={"value": repr(value)},
        )
        self.value = value


class NotFoundError(BlogError):
    """
    Raised when a requested resource does not exist.

    HTTP: 404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class PostNotFoundError(NotFoundError):
    """Raised by the post routes when the service returns an empty result."""

    def __init__(self, post_id: Optional[str] = None, message: str = "Post does not exist"):
        super().__init__(resource="post", resource_id=post_id, message=message)


class AuthenticationError(BlogError):
    """
    Raised when a bearer token is missing, malformed or fails verification.

    HTTP: status_code (401 unless the failure calls for something else)

    The message is the underlying verification failure, e.g.
    "No authorization token was found" or "Invalid issuer".
    """

    def __init__(
        self,
        message: str = "Invalid token",
        status_code: int = 401,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.status_code = status_code


class DatabaseError(BlogError):
    """
    Raised when a store operation fails (connection lost, timeout, constraint).

    HTTP: 500 Internal Server Error

    The client only ever sees a generic message; the underlying error type and
    operation are logged from context.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
