"""Application routers."""

from .auth import router as auth_router
from .pages import router as pages_router
from .posts import api_router as posts_api_router
from .posts import router as posts_router

__all__ = ["auth_router", "pages_router", "posts_router", "posts_api_router"]
