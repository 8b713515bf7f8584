"""
Grievance Portal Backend — Custom Exception Hierarchy
======================================================

What:  Application-specific exceptions for the error scenarios of the portal.
How:   Each exception carries a user-facing message and an optional context
       dict. Global exception handlers (registered in main.py) map them to
       HTTP status codes and structured JSON error bodies.
Who:   Raised by the auth adapter, services and middleware.

Exception Hierarchy:
    PortalError (base)
    ├── ValidationError          → 400 Bad Request
    ├── AuthenticationError      → 401 Unauthorized
    ├── AuthorizationError       → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    └── RateLimitExceededError   → 429 Too Many Requests

Database-layer exceptions have no subclass here: they propagate unchanged
and surface through the catch-all handler as a generic 500.
"""

from typing import Any, Dict, Optional


class PortalError(Exception):
    """
    Base exception for all portal application errors.

    Attributes:
        message:  User-facing error description (returned in the API response)
        context:  Additional debug info (logged, returned only where safe)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PortalError):
    """
    Raised when client input fails validation.

    When:    Missing required form fields, unknown share link, missing or
             malformed id/slug query parameters, bad person names.
    HTTP:    400 Bad Request
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


class AuthenticationError(PortalError):
    """No session, or a session token that fails verification. HTTP 401."""

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(PortalError):
    """
    Valid session, but the target record belongs to another user.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Forbidden",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(PortalError):
    """
    Raised when a requested resource does not exist.

    When:    Session user deleted since the token was issued, dangling
             message id, unknown person slug.
    HTTP:    404 Not Found

    The message reads "<Resource> not found", e.g. "Message not found".
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
        self.resource = resource


class RateLimitExceededError(PortalError):
    """
    Raised when a client exceeds the per-IP submission rate limit.

    HTTP:    429 Too Many Requests, with a Retry-After header.
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
