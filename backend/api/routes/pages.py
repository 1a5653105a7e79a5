"""Landing page, feed dashboard and profile summary."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_principal, get_db, get_optional_principal
from core import settings
from services.auth import Principal
from services.posts import summarize_author_activity
from .pagination import MAX_PAGE_SIZE, set_next_page_header
from .post_views import FeedPage, assemble_feed

router = APIRouter(tags=["pages"])

LOGIN_PATH = "/auth/google"


class PrincipalResponse(BaseModel):
    id: str
    display_name: str
    email: str | None = None
    profile_picture_url: str | None = None

    @classmethod
    def from_principal(cls, principal: Principal) -> "PrincipalResponse":
        return cls(
            id=principal.user_id,
            display_name=principal.display_name,
            email=principal.email,
            profile_picture_url=principal.profile_picture_url,
        )


class LandingResponse(BaseModel):
    app_name: str
    user: PrincipalResponse | None = None
    login_url: str = LOGIN_PATH


class DashboardResponse(FeedPage):
    user: PrincipalResponse


class ProfileResponse(BaseModel):
    user: PrincipalResponse
    post_count: int
    like_count: int


@router.get("/", response_model=LandingResponse)
async def landing(
    principal: Principal | None = Depends(get_optional_principal),
) -> LandingResponse:
    return LandingResponse(
        app_name=settings.app_name,
        user=PrincipalResponse.from_principal(principal) if principal else None,
    )


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    response: Response,
    page: Annotated[str | None, Query()] = None,
    page_size: Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE)] = settings.feed_page_size,
    session: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> DashboardResponse:
    feed = await assemble_feed(
        session,
        page=page,
        page_size=page_size,
        viewer_id=principal.user_id,
    )
    set_next_page_header(response, page=feed.page, has_more=feed.has_more)
    return DashboardResponse(
        **feed.model_dump(),
        user=PrincipalResponse.from_principal(principal),
    )


@router.get("/profile", response_model=ProfileResponse)
async def profile(
    session: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> ProfileResponse:
    activity = await summarize_author_activity(session, principal.user_id)
    return ProfileResponse(
        user=PrincipalResponse.from_principal(principal),
        post_count=activity.post_count,
        like_count=activity.like_count,
    )
