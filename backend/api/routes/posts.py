"""Post creation, editing, deletion, likes and comments."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import get_current_principal, get_db
from services.auth import Principal
from services.errors import ForbiddenError, NotFoundError, ValidationError
from services.interactions import add_comment, toggle_like
from services.post_policy import parse_post_id, require_post_owner
from services.posts import create_post, delete_post, update_post

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])
api_router = APIRouter(prefix="/api/posts", tags=["posts"])

DASHBOARD_PATH = "/dashboard"


def _back_to_dashboard() -> RedirectResponse:
    return RedirectResponse(DASHBOARD_PATH, status_code=status.HTTP_303_SEE_OTHER)


class PostFormResponse(BaseModel):
    action: str
    method: str = "post"
    post_id: int | None = None
    title: str = ""
    content: str = ""


class LikeToggleResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    liked: bool
    like_count: int = Field(serialization_alias="likeCount")


@router.get("/new", response_model=PostFormResponse)
async def new_post_form(
    principal: Principal = Depends(get_current_principal),
) -> PostFormResponse:
    return PostFormResponse(action="/posts")


@router.post("")
async def create_post_route(
    title: str = Form(default=""),
    content: str = Form(default=""),
    session: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> RedirectResponse:
    post = await create_post(
        session,
        author_id=principal.user_id,
        title=title,
        content=content,
    )
    logger.info("Created post", extra={"post_id": post.id, "author_id": principal.user_id})
    return _back_to_dashboard()


@router.get("/{post_id}/edit", response_model=PostFormResponse)
async def edit_post_form(
    post_id: str,
    session: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> PostFormResponse:
    post = await require_post_owner(
        session,
        post_id=parse_post_id(post_id),
        principal_id=principal.user_id,
    )
    return PostFormResponse(
        action=f"/posts/{post.id}/update",
        post_id=post.id,
        title=post.title,
        content=post.content,
    )


@router.post("/{post_id}/update")
async def update_post_route(
    post_id: str,
    title: str = Form(default=""),
    content: str = Form(default=""),
    session: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> RedirectResponse:
    try:
        await update_post(
            session,
            parse_post_id(post_id),
            principal_id=principal.user_id,
            title=title,
            content=content,
        )
    except (NotFoundError, ForbiddenError) as exc:
        logger.info("Post update skipped", extra={"post_id": post_id, "reason": exc.detail})
    return _back_to_dashboard()


@router.post("/{post_id}/delete")
async def delete_post_route(
    post_id: str,
    session: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> RedirectResponse:
    try:
        await delete_post(session, parse_post_id(post_id), principal_id=principal.user_id)
    except (NotFoundError, ForbiddenError) as exc:
        logger.info("Post delete skipped", extra={"post_id": post_id, "reason": exc.detail})
    return _back_to_dashboard()


@router.post("/{post_id}/like")
async def like_post_route(
    post_id: str,
    session: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> RedirectResponse:
    try:
        await toggle_like(
            session,
            post_id=parse_post_id(post_id),
            user_id=principal.user_id,
        )
    except NotFoundError:
        logger.info("Like skipped for missing post", extra={"post_id": post_id})
    return _back_to_dashboard()


@api_router.post("/{post_id}/like", response_model=LikeToggleResponse)
async def toggle_like_api(
    post_id: str,
    session: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> LikeToggleResponse:
    result = await toggle_like(
        session,
        post_id=parse_post_id(post_id),
        user_id=principal.user_id,
    )
    return LikeToggleResponse(liked=result.liked, like_count=result.like_count)


@router.post("/{post_id}/comments")
async def add_comment_route(
    post_id: str,
    comment: str = Form(default=""),
    session: AsyncSession = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
) -> RedirectResponse:
    try:
        await add_comment(
            session,
            post_id=parse_post_id(post_id),
            author_id=principal.user_id,
            text=comment,
        )
    except (ValidationError, NotFoundError) as exc:
        logger.info("Comment skipped", extra={"post_id": post_id, "reason": exc.detail})
    return _back_to_dashboard()
