"""
Noteshelf — Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for every failure the API reports.
Why:   Each exception maps to exactly one HTTP status in the global handlers
       registered by `noteshelf.main`, so routes never build error responses.
How:   Each exception carries a client-safe message and a context dict that
       is logged but never returned.

Exception Hierarchy:
    NoteshelfError (base)
    ├── UnauthorizedError   → 401 Unauthorized (no or invalid session)
    ├── ValidationError     → 400 Bad Request (client can fix)
    ├── NotFoundError       → 404 Not Found (missing OR owned by someone else)
    └── DatabaseError       → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class NoteshelfError(Exception):
    """
    Base exception for all Noteshelf application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class UnauthorizedError(NoteshelfError):
    """
    Raised when a request carries no usable session.

    HTTP: 401 Unauthorized, with `WWW-Authenticate: Bearer`.
    The reason a token was rejected (expired, bad signature, missing claim)
    goes into `context` only.
    """

    def __init__(
        self,
        message: str = "Unauthorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ValidationError(NoteshelfError):
    """
    Raised when client input fails validation.

    When:    Missing or blank title/content, malformed query parameters.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Title and content are required",
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


class NotFoundError(NoteshelfError):
    """
    Raised when a requested resource does not exist for the caller.

    A note that exists but belongs to another owner raises exactly the same
    error with exactly the same message as a note that does not exist.
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


class DatabaseError(NoteshelfError):
    """
    Raised when database operations fail unexpectedly.

    HTTP: 500. The client only ever sees a generic message; SQL, constraint
    names and driver errors stay in the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
