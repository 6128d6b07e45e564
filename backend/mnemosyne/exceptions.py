"""
Mnemosyne Backend — Custom Exception Hierarchy
================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Services raise typed failures; global exception handlers (registered in
       main.py) map each type to an HTTP status and the uniform JSON envelope
       `{success: false, error, details?}`.
Who:   Raised by services, dependencies and middleware; caught by global handlers.

Exception Hierarchy:
    MnemosyneError (base)
    ├── ValidationError            → 400 Bad Request (field-level details)
    │   └── SelfFollowError
    ├── AuthenticationError        → 401 Unauthorized
    ├── AuthorizationError         → 404 Not Found (existence is not leaked)
    ├── NotFoundError              → 404 Not Found
    │   ├── NotLikedError
    │   └── NotFollowingError
    ├── ConflictError              → 400 Bad Request (duplicate relationship)
    │   ├── AlreadyLikedError
    │   ├── AlreadyFollowingError
    │   ├── AlreadyInCollectionError
    │   ├── EmailTakenError
    │   └── UsernameTakenError
    ├── DatabaseError              → 500 Internal Server Error
    └── RateLimitExceededError     → 429 Too Many Requests
"""

from typing import Any, Dict, List, Optional


class MnemosyneError(Exception):
    """
    Base exception for all Mnemosyne application errors.

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


class ValidationError(MnemosyneError):
    """
    Raised when client input fails validation.

    HTTP:    400 Bad Request

    `details` is the list of `{field, message}` pairs returned to the client.
    A single-field error can be raised with `field=` and the details list is
    built automatically.

    Example response:
        {
            "success": false,
            "error": "Validation failed",
            "details": [{"field": "text", "message": "Quote text is required"}]
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        details: Optional[List[Dict[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field
        if details is None and field:
            details = [{"field": field, "message": message}]
        self.details = details or []


class SelfFollowError(ValidationError):
    """A user tried to follow themselves."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="You cannot follow yourself", field="userId", context=context)


class AuthenticationError(MnemosyneError):
    """
    Raised when the caller's identity cannot be established.

    HTTP:    401 Unauthorized
    When:    Missing, malformed, expired or wrongly-signed token; bad credentials.

    Login deliberately raises the same message for "no such user" and
    "wrong password" so the endpoint cannot be used to enumerate accounts.
    """

    def __init__(
        self,
        message: str = "Authentication required.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(MnemosyneError):
    """
    Raised when the caller may not see a resource.

    HTTP:    404 Not Found

    Surfaced as 404 rather than 403 so that a private resource is
    indistinguishable from a missing one.
    """

    def __init__(
        self,
        message: str = "The requested resource was not found",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(MnemosyneError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found

    SQLAlchemy returns None for missing records (not an exception).
    Services convert None → NotFoundError to keep HTTP concerns out of
    the service logic while still producing the correct status code.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class NotLikedError(NotFoundError):
    """unlike() on a (user, quote) pair that is not currently liked."""

    def __init__(self, quote_id: Optional[str] = None):
        super().__init__(resource="like", resource_id=quote_id, message="Quote not liked")


class NotFollowingError(NotFoundError):
    """unfollow() without an existing follow relationship."""

    def __init__(self, user_id: Optional[str] = None):
        super().__init__(resource="follow", resource_id=user_id, message="Not following this user")


class ConflictError(MnemosyneError):
    """
    Raised when a write would duplicate a unique relationship.

    HTTP:    400 Bad Request

    Usually produced by translating a unique-constraint IntegrityError,
    so concurrent duplicate writes fail the same way as sequential ones.
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AlreadyLikedError(ConflictError):
    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Quote already liked", context=context)


class AlreadyFollowingError(ConflictError):
    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Already following this user", context=context)


class AlreadyInCollectionError(ConflictError):
    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Quote already in collection", context=context)


class EmailTakenError(ConflictError):
    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Email already registered.", context=context)


class UsernameTakenError(ConflictError):
    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Username already taken.", context=context)


class DatabaseError(MnemosyneError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Detailed error info (SQL, constraint name) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(MnemosyneError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests
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
