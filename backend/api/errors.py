"""Translate service errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from services.errors import (
    AuthenticationRequired,
    ForbiddenError,
    NotFoundError,
    PersistenceError,
    UpstreamAuthError,
    ValidationError,
)

logger = logging.getLogger(__name__)

LANDING_PATH = "/"


def _detail(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": detail})


async def _redirect_to_landing(request: Request, exc: Exception) -> Response:
    return RedirectResponse(LANDING_PATH, status_code=status.HTTP_303_SEE_OTHER)


async def _validation_error(request: Request, exc: ValidationError) -> Response:
    return _detail(status.HTTP_400_BAD_REQUEST, exc.detail)


async def _not_found(request: Request, exc: NotFoundError) -> Response:
    return _detail(status.HTTP_404_NOT_FOUND, exc.detail)


async def _forbidden(request: Request, exc: ForbiddenError) -> Response:
    return _detail(status.HTTP_403_FORBIDDEN, exc.detail)


async def _persistence_error(request: Request, exc: PersistenceError) -> Response:
    logger.error(
        "Persistence failure",
        extra={"path": request.url.path, "method": request.method},
        exc_info=exc,
    )
    return _detail(status.HTTP_500_INTERNAL_SERVER_ERROR, exc.detail)


async def _unhandled(request: Request, exc: Exception) -> Response:
    logger.exception(
        "Unhandled error",
        extra={"path": request.url.path, "method": request.method},
        exc_info=exc,
    )
    return _detail(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthenticationRequired, _redirect_to_landing)
    app.add_exception_handler(UpstreamAuthError, _redirect_to_landing)
    app.add_exception_handler(ValidationError, _validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(NotFoundError, _not_found)  # type: ignore[arg-type]
    app.add_exception_handler(ForbiddenError, _forbidden)  # type: ignore[arg-type]
    app.add_exception_handler(PersistenceError, _persistence_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled)
