"""Post persistence: create, read, update, delete, list and per-author totals."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, cast

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from models import Comment, Like, Post, User
from models.post import MAX_POST_TITLE_LENGTH
from services.errors import NotFoundError, PersistenceError, ValidationError
from services.post_policy import require_post_owner

logger = logging.getLogger(__name__)

PostRow = tuple[Post, str | None, str | None]


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def _desc(column: Any) -> Any:
    return cast(Any, column).desc()


@dataclass(frozen=True)
class AuthorActivity:
    post_count: int
    like_count: int


def normalize_post_fields(title: str | None, content: str | None) -> tuple[str, str]:
    """Trim title and content; both must be non-empty afterwards."""
    normalized_title = (title or "").strip()
    normalized_content = (content or "").strip()
    if not normalized_title or not normalized_content:
        raise ValidationError("Title and content are required")
    if len(normalized_title) > MAX_POST_TITLE_LENGTH:
        raise ValidationError(f"Title must be at most {MAX_POST_TITLE_LENGTH} characters")
    return normalized_title, normalized_content


async def _commit(session: AsyncSession, failure_detail: str) -> None:
    try:
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error(failure_detail, exc_info=exc)
        raise PersistenceError(failure_detail) from exc


async def create_post(
    session: AsyncSession,
    *,
    author_id: str,
    title: str | None,
    content: str | None,
) -> Post:
    normalized_title, normalized_content = normalize_post_fields(title, content)
    post = Post(author_id=author_id, title=normalized_title, content=normalized_content)
    session.add(post)
    await _commit(session, "Failed to create post")
    await session.refresh(post)
    return post


async def get_post(session: AsyncSession, post_id: int) -> Post:
    post = await session.get(Post, post_id)
    if post is None:
        raise NotFoundError()
    return post


async def update_post(
    session: AsyncSession,
    post_id: int,
    *,
    principal_id: str,
    title: str | None,
    content: str | None,
) -> Post:
    """Replace title and content; the author is never touched."""
    post = await require_post_owner(session, post_id=post_id, principal_id=principal_id)
    normalized_title, normalized_content = normalize_post_fields(title, content)
    post.title = normalized_title
    post.content = normalized_content
    session.add(post)
    await _commit(session, "Failed to update post")
    await session.refresh(post)
    return post


async def delete_post(
    session: AsyncSession,
    post_id: int,
    *,
    principal_id: str,
) -> None:
    post = await require_post_owner(session, post_id=post_id, principal_id=principal_id)
    await session.execute(delete(Like).where(_eq(Like.post_id, post_id)))
    await session.execute(delete(Comment).where(_eq(Comment.post_id, post_id)))
    await session.delete(post)
    await _commit(session, "Failed to delete post")


async def list_posts(
    session: AsyncSession,
    *,
    offset: int,
    limit: int,
) -> list[PostRow]:
    """Newest first, each row joined with its author's display fields."""
    post_entity = cast(Any, Post)
    author_name_column = cast(ColumnElement[str | None], User.display_name)
    author_picture_column = cast(ColumnElement[str | None], User.profile_picture_url)
    query = (
        select(post_entity, author_name_column, author_picture_column)
        .join(User, _eq(User.id, Post.author_id))
        .order_by(
            _desc(Post.created_at),
            _desc(Post.id),
        )
    )
    if offset > 0:
        query = query.offset(offset)
    query = query.limit(limit)

    result = await session.execute(query)
    return cast(list[PostRow], list(result.all()))


async def summarize_author_activity(session: AsyncSession, user_id: str) -> AuthorActivity:
    """Count the user's posts and the likes those posts received."""
    post_id_column = cast(ColumnElement[int], Post.id)
    post_count_result = await session.execute(
        select(func.count(post_id_column)).where(_eq(Post.author_id, user_id))
    )
    like_user_column = cast(ColumnElement[str], Like.user_id)
    like_count_result = await session.execute(
        select(func.count(like_user_column))
        .join(Post, _eq(Post.id, Like.post_id))
        .where(_eq(Post.author_id, user_id))
    )
    return AuthorActivity(
        post_count=int(post_count_result.scalar_one() or 0),
        like_count=int(like_count_result.scalar_one() or 0),
    )
