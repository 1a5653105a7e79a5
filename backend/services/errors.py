"""Domain errors raised by services and translated at the HTTP boundary."""

from __future__ import annotations


class ServiceError(Exception):
    """Base class carrying a user-safe detail message."""

    default_detail = "Request failed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class ValidationError(ServiceError):
    default_detail = "Invalid input"


class NotFoundError(ServiceError):
    default_detail = "Post not found"


class ForbiddenError(ServiceError):
    default_detail = "You can only modify your own posts"


class UpstreamAuthError(ServiceError):
    default_detail = "Sign-in with the identity provider failed"


class PersistenceError(ServiceError):
    default_detail = "Database operation failed"


class AuthenticationRequired(ServiceError):
    default_detail = "Login required"


__all__ = [
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "ForbiddenError",
    "UpstreamAuthError",
    "PersistenceError",
    "AuthenticationRequired",
]
