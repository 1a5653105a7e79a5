"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI

from api.errors import register_exception_handlers
from api.routes import auth_router, pages_router, posts_api_router, posts_router
from core import configure_logging, settings


def create_app() -> FastAPI:
    configure_logging(settings.log_level)

    application = FastAPI(
        title=settings.app_name,
        docs_url="/api/docs" if settings.debug else None,
        redoc_url=None,
    )
    register_exception_handlers(application)

    application.include_router(pages_router)
    application.include_router(auth_router)
    application.include_router(posts_router)
    application.include_router(posts_api_router)

    @application.get("/api/health")
    async def health_check() -> dict[str, str]:
        return {"status": "ok"}

    return application
