"""Feed view models and the feed assembly query helpers."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime
from typing import Any, cast

from pydantic import BaseModel, ConfigDict
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from db.session import MAX_SQL_INTEGER
from models import Comment, Like, Post, User
from services.posts import list_posts
from .pagination import DEFAULT_PAGE_SIZE, normalize_page, page_offset


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def _asc(column: Any) -> Any:
    return cast(Any, column).asc()


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    post_id: int
    author_id: str
    author_name: str | None = None
    author_picture_url: str | None = None
    text: str
    created_at: datetime

    @classmethod
    def from_comment(
        cls,
        comment: Comment,
        author_name: str | None = None,
        author_picture_url: str | None = None,
    ) -> "CommentResponse":
        if comment.id is None:
            raise ValueError("Comment record missing identifier")
        return cls(
            id=comment.id,
            post_id=comment.post_id,
            author_id=comment.author_id,
            author_name=author_name,
            author_picture_url=author_picture_url,
            text=comment.text,
            created_at=comment.created_at,
        )


class PostResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    author_id: str
    author_name: str | None = None
    author_picture_url: str | None = None
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    like_count: int = 0
    viewer_has_liked: bool = False
    comments: list[CommentResponse] = []

    @classmethod
    def from_post(
        cls,
        post: Post,
        author_name: str | None = None,
        author_picture_url: str | None = None,
        *,
        like_count: int = 0,
        viewer_has_liked: bool = False,
        comments: list[CommentResponse] | None = None,
    ) -> "PostResponse":
        if post.id is None:
            raise ValueError("Post record missing identifier")
        return cls(
            id=post.id,
            author_id=post.author_id,
            author_name=author_name,
            author_picture_url=author_picture_url,
            title=post.title,
            content=post.content,
            created_at=post.created_at,
            updated_at=post.updated_at,
            like_count=like_count,
            viewer_has_liked=viewer_has_liked,
            comments=comments or [],
        )


class FeedPage(BaseModel):
    posts: list[PostResponse]
    page: int
    page_size: int
    has_more: bool = False


async def collect_like_meta(
    session: AsyncSession,
    post_ids: list[int],
    viewer_id: str | None,
) -> tuple[dict[int, int], set[int]]:
    if not post_ids:
        return {}, set()

    post_id_column = cast(ColumnElement[int], Like.post_id)
    user_id_column = cast(ColumnElement[str], Like.user_id)
    count_column = cast(Any, func.count(user_id_column))
    count_result = await session.execute(
        select(post_id_column, count_column)
        .where(post_id_column.in_(post_ids))
        .group_by(post_id_column)
    )
    count_map = {post_id: int(total) for post_id, total in count_result.all()}

    if viewer_id is None:
        return count_map, set()

    viewer_result = await session.execute(
        select(post_id_column).where(
            _eq(user_id_column, viewer_id),
            post_id_column.in_(post_ids),
        )
    )
    liked_set = {row[0] for row in viewer_result.all()}
    return count_map, liked_set


async def collect_comments(
    session: AsyncSession,
    post_ids: list[int],
) -> dict[int, list[CommentResponse]]:
    """Comments per post in the order they were added, with author display fields."""
    if not post_ids:
        return {}

    comment_entity = cast(Any, Comment)
    comment_post_column = cast(ColumnElement[int], Comment.post_id)
    author_name_column = cast(ColumnElement[str | None], User.display_name)
    author_picture_column = cast(ColumnElement[str | None], User.profile_picture_url)
    result = await session.execute(
        select(comment_entity, author_name_column, author_picture_column)
        .join(User, _eq(User.id, Comment.author_id))
        .where(comment_post_column.in_(post_ids))
        .order_by(
            _asc(Comment.created_at),
            _asc(Comment.id),
        )
    )
    grouped: dict[int, list[CommentResponse]] = defaultdict(list)
    for comment, author_name, author_picture_url in result.all():
        grouped[comment.post_id].append(
            CommentResponse.from_comment(
                comment,
                author_name=author_name,
                author_picture_url=author_picture_url,
            )
        )
    return grouped


async def assemble_feed(
    session: AsyncSession,
    *,
    page: str | int | None,
    page_size: int = DEFAULT_PAGE_SIZE,
    viewer_id: str | None = None,
) -> FeedPage:
    """Return one page of posts, newest first, with likes and comments resolved."""
    current_page = normalize_page(page)
    offset = page_offset(current_page, page_size)
    if offset > MAX_SQL_INTEGER:
        return FeedPage(posts=[], page=current_page, page_size=page_size)
    rows = await list_posts(session, offset=offset, limit=page_size + 1)
    has_more = len(rows) > page_size
    if has_more:
        rows = rows[:page_size]

    post_ids = [post.id for post, _name, _picture in rows if post.id is not None]
    count_map, liked_set = await collect_like_meta(session, post_ids, viewer_id)
    comment_map = await collect_comments(session, post_ids)
    posts = [
        PostResponse.from_post(
            post,
            author_name=author_name,
            author_picture_url=author_picture_url,
            like_count=count_map.get(post.id, 0) if post.id is not None else 0,
            viewer_has_liked=post.id in liked_set if post.id is not None else False,
            comments=comment_map.get(post.id, []) if post.id is not None else [],
        )
        for post, author_name, author_picture_url in rows
    ]
    return FeedPage(
        posts=posts,
        page=current_page,
        page_size=page_size,
        has_more=has_more,
    )
