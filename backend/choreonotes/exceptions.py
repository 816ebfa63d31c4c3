"""
ChoreoNotes Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the failure kinds every service
       operation may end in.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers registered in main.py turn them into JSON error
       responses with the right HTTP status code.
Who:   Raised by services, the access control layer and auth dependencies.

Exception Hierarchy:
    ChoreoNotesError (base)
    ├── UnauthorizedError   → 401 Unauthorized
    ├── ForbiddenError      → 403 Forbidden
    ├── NotFoundError       → 404 Not Found
    └── ConflictError       → 409 Conflict

Every service operation either returns a result or raises exactly one of
these; nothing is retried or silently recovered.
"""

from typing import Any, Dict, Optional


class ChoreoNotesError(Exception):
    """
    Base exception for all ChoreoNotes application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned for 5xx errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class UnauthorizedError(ChoreoNotesError):
    """
    Raised when a credential is missing, malformed, forged or expired, and when
    a login attempt fails.

    HTTP: 401 Unauthorized (with `WWW-Authenticate: Bearer`)

    Login failures always use the same message whether the email is unknown or
    the password is wrong.
    """

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(ChoreoNotesError):
    """
    Raised when an authenticated user targets a resource that exists but is
    owned by someone else.

    HTTP: 403 Forbidden
    """

    def __init__(
        self,
        message: str = "Access denied",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(ChoreoNotesError):
    """
    Raised when a requested resource does not exist.

    HTTP: 404 Not Found

    SQLAlchemy returns None (or a zero rowcount) for missing records; the
    services convert that into this exception.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"{resource.capitalize()} not found"
            if resource_id is not None:
                message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class ConflictError(ChoreoNotesError):
    """
    Raised on uniqueness violations: duplicate email at registration, duplicate
    routine name for the same owner.

    HTTP: 409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
