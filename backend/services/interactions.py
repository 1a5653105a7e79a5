"""Likes and comments: any authenticated user may toggle a like or append a comment."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, cast

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from db.errors import is_foreign_key_violation, is_unique_violation
from models import Comment, Like
from models.comment import MAX_COMMENT_LENGTH
from services.errors import NotFoundError, PersistenceError, ValidationError
from services.post_policy import require_post_exists

logger = logging.getLogger(__name__)


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


@dataclass(frozen=True)
class LikeToggleResult:
    liked: bool
    like_count: int


async def get_like_count(session: AsyncSession, post_id: int) -> int:
    user_id_column = cast(ColumnElement[str], Like.user_id)
    result = await session.execute(
        select(func.count(user_id_column)).where(_eq(Like.post_id, post_id))
    )
    return int(result.scalar_one() or 0)


async def toggle_like(
    session: AsyncSession,
    *,
    post_id: int,
    user_id: str,
) -> LikeToggleResult:
    """Remove the user's like if present, otherwise add it."""
    await require_post_exists(session, post_id)

    like_entity = cast(Any, Like)
    existing_like = await session.execute(
        select(like_entity).where(
            _eq(Like.user_id, user_id), _eq(Like.post_id, post_id)
        )
    )
    like_obj = existing_like.scalar_one_or_none()
    if like_obj is not None:
        await session.delete(like_obj)
        liked = False
    else:
        session.add(Like(user_id=user_id, post_id=post_id))
        liked = True

    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if is_foreign_key_violation(exc):
            raise NotFoundError() from exc
        if not is_unique_violation(exc):
            raise PersistenceError("Failed to update like") from exc
        # Lost a race with an identical like; the row exists exactly once.
        liked = True
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Failed to update like", exc_info=exc, extra={"post_id": post_id})
        raise PersistenceError("Failed to update like") from exc

    return LikeToggleResult(liked=liked, like_count=await get_like_count(session, post_id))


def normalize_comment_text(text: str | None) -> str:
    normalized = (text or "").strip()
    if not normalized:
        raise ValidationError("Comment text cannot be empty")
    if len(normalized) > MAX_COMMENT_LENGTH:
        raise ValidationError(f"Comment must be at most {MAX_COMMENT_LENGTH} characters")
    return normalized


async def add_comment(
    session: AsyncSession,
    *,
    post_id: int,
    author_id: str,
    text: str | None,
) -> Comment:
    normalized_text = normalize_comment_text(text)
    await require_post_exists(session, post_id)

    comment = Comment(post_id=post_id, author_id=author_id, text=normalized_text)
    session.add(comment)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        if is_foreign_key_violation(exc):
            raise NotFoundError() from exc
        raise PersistenceError("Failed to add comment") from exc
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Failed to add comment", exc_info=exc, extra={"post_id": post_id})
        raise PersistenceError("Failed to add comment") from exc
    await session.refresh(comment)
    return comment
