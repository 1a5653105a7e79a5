"""Business logic services."""

from .errors import (
    AuthenticationRequired,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    ServiceError,
    UpstreamAuthError,
    ValidationError,
)

__all__ = [
    "ServiceError",
    "ValidationError",
    "NotFoundError",
    "ForbiddenError",
    "UpstreamAuthError",
    "PersistenceError",
    "AuthenticationRequired",
]
