"""
GymCMS Backend — Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for every failure a request can hit.
Why:   Services raise typed failures; the boundary layers (router and
       function handlers) map each one to a status code and a terse message.
How:   Each exception carries a message, a machine-readable `code`, an HTTP
       `status_code` and an optional context dict. The context is logged
       server-side and never returned to the client.

Exception Hierarchy:
    GymCMSError (base)                  → 500
    ├── ValidationError                 → 400
    │   └── PasswordTooShortError       → 400
    ├── ConflictError                   → 400 (slug or key collision)
    ├── NotFoundError                   → 404
    ├── AuthError                       → 401
    │   ├── AuthRequiredError           → 401
    │   ├── InvalidCredentialsError     → 401
    │   ├── TokenExpiredError           → 401
    │   ├── UserNotFoundError           → 401
    │   └── TokenInvalidError           → 403
    ├── ForbiddenError                  → 403
    ├── DatabaseError                   → 500
    ├── FileStorageError                → 500
    ├── UpstreamTimeoutError            → 504
    └── RateLimitExceededError          → 429
"""

from typing import Any, Dict, Optional


class GymCMSError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500
    code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GymCMSError):
    """
    Raised when client input fails a business rule.

    When:    Missing required fields, malformed email, bad upload type or size.
    HTTP:    400 Bad Request
    """

    status_code = 400
    code = "validation_error"

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


class PasswordTooShortError(ValidationError):
    def __init__(self, min_length: int = 8):
        super().__init__(
            message=f"Password must be at least {min_length} characters",
            field="newPassword",
            context={"min_length": min_length},
        )


class ConflictError(GymCMSError):
    """
    Raised when a unique identifier (slug, setting key, email) is already taken.

    HTTP:    400 Bad Request, matching what existing admin clients expect.
    """

    status_code = 400
    code = "conflict"

    def __init__(
        self,
        message: str = "Slug already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(GymCMSError):
    """
    Raised when a requested resource does not exist or is hidden from the caller.

    Why one error for both:
        An anonymous caller asking for a draft post gets the same 404 as for
        a post that was never written, so unpublished slugs are not revealed.
    """

    status_code = 404
    code = "not_found"

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=f"{resource} not found", context=ctx)


# ── Authentication & Authorization ────────────────────────────────────────


class AuthError(GymCMSError):
    status_code = 401
    code = "auth_error"

    def __init__(
        self,
        message: str = "Authentication failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthRequiredError(AuthError):
    code = "auth_required"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message=message)


class InvalidCredentialsError(AuthError):
    """
    Same message for unknown email and wrong password, so that the login
    endpoint cannot be used to enumerate accounts.
    """

    code = "invalid_credentials"

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message=message)


class TokenExpiredError(AuthError):
    code = "token_expired"

    def __init__(self, message: str = "Token expired"):
        super().__init__(message=message)


class TokenInvalidError(AuthError):
    status_code = 403
    code = "token_invalid"

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message=message)


class UserNotFoundError(AuthError):
    code = "user_not_found"

    def __init__(self, user_id: Optional[Any] = None):
        super().__init__(message="User not found", context={"user_id": user_id})


class ForbiddenError(GymCMSError):
    status_code = 403
    code = "forbidden"

    def __init__(
        self,
        message: str = "Insufficient permissions",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


# ── Upstream Failures ─────────────────────────────────────────────────────


class DatabaseError(GymCMSError):
    """
    Raised when database operations fail unexpectedly.

    Security Note:
        The message returned to the client is always generic. The SQL error
        is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(GymCMSError):
    """Could not read, write, or delete a file on the storage volume."""

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamTimeoutError(GymCMSError):
    """
    Raised when a collaborator (image transcoding) exceeds its time budget.

    HTTP:    504 Gateway Timeout
    """

    status_code = 504
    code = "upstream_timeout"

    def __init__(
        self,
        operation: str = "operation",
        timeout: Optional[float] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["operation"] = operation
        if timeout is not None:
            ctx["timeout"] = timeout
        super().__init__(
            message="The request took too long to process. Please try again.",
            context=ctx,
        )
        self.timeout = timeout


class RateLimitExceededError(GymCMSError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    Response includes a Retry-After header for HTTP-compliant clients.
    """

    status_code = 429
    code = "rate_limit_exceeded"

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = "Too many requests, please try again later"
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


def error_payload(exc: GymCMSError, request_id: Optional[str] = None) -> Dict[str, Any]:
    """Wire body for a failed request. Context never leaves the server."""
    payload: Dict[str, Any] = {"error": exc.message, "code": exc.code}
    if isinstance(exc, ValidationError) and exc.field:
        payload["details"] = {"field": exc.field}
    if request_id is not None:
        payload["request_id"] = request_id
    return payload
