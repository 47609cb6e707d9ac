"""Error types raised by the storefront core and rendered by the API layer.

Each error carries the user-facing message and the HTTP status it maps to, so
route handlers can simply raise and let the app-level handler build the
``{"success": false, "error": ...}`` body.
"""

from __future__ import annotations

from typing import Optional


class StorefrontError(Exception):
    """Base error with a user-facing message."""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationFailed(StorefrontError):
    """Missing or malformed input."""

    status_code = 400


class AuthenticationFailed(StorefrontError):
    """Bad credentials or a missing/expired token."""

    status_code = 401


class UserNotFound(StorefrontError):
    status_code = 404


class NotFound(StorefrontError):
    status_code = 404


class RateLimited(StorefrontError):
    """Too many requests from one client inside the current window."""

    status_code = 429

    def __init__(self, message: str, retry_after: int):
        super().__init__(message)
        self.retry_after = retry_after


class AuthServiceUnavailable(StorefrontError):
    """The auth API could not be reached; callers may retry."""

    status_code = 503
