"""Post existence and ownership checks shared by every mutating route."""

from __future__ import annotations

import logging
from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from db.session import MAX_SQL_INTEGER
from models import Post
from services.errors import ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def parse_post_id(raw_post_id: str) -> int:
    """Path ids that are not a storable integer name no post."""
    try:
        post_id = int(raw_post_id)
    except ValueError as exc:
        raise NotFoundError() from exc
    if not 1 <= post_id <= MAX_SQL_INTEGER:
        raise NotFoundError()
    return post_id


def can_mutate_post(principal_id: str, post: Post) -> bool:
    """Only the recorded author may edit or delete a post."""
    return post.author_id == principal_id


async def require_post_exists(
    session: AsyncSession,
    post_id: int,
) -> str:
    """Return the post author id or raise NotFoundError."""
    post_author_column = cast(ColumnElement[str], Post.author_id)
    result = await session.execute(
        select(post_author_column)
        .where(_eq(Post.id, post_id))
        .limit(1)
    )
    author_id = result.scalar_one_or_none()
    if author_id is None:
        raise NotFoundError()
    return author_id


async def require_post_owner(
    session: AsyncSession,
    *,
    post_id: int,
    principal_id: str,
) -> Post:
    """Load the post, then check ownership; a missing post is never a 403."""
    post = await session.get(Post, post_id)
    if post is None:
        raise NotFoundError()
    if not can_mutate_post(principal_id, post):
        logger.warning(
            "Rejected mutation by non-owner",
            extra={"post_id": post_id, "principal_id": principal_id},
        )
        raise ForbiddenError()
    return post
