"""Tests for like toggling and comment appends."""

from typing import Any, cast

import pytest
from httpx import AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from models import Comment, Like, Post, User
from services.errors import NotFoundError, ValidationError
from services.interactions import add_comment, get_like_count, toggle_like


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


async def seed_post(db_session: AsyncSession, author: User) -> Post:
    post = Post(author_id=author.id, title="Liked post", content="Body")
    db_session.add(post)
    await db_session.commit()
    await db_session.refresh(post)
    return post


async def liker_ids(db_session: AsyncSession, post_id: int) -> set[str]:
    result = await db_session.execute(select(Like).where(_eq(Like.post_id, post_id)))
    return {like.user_id for like in result.scalars().all()}


@pytest.mark.asyncio
async def test_like_api_toggles_on_then_off(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user,
    login_as,
):
    author = await make_user("author")
    post = await seed_post(db_session, author)
    await login_as(await make_user("fan"))

    first = await async_client.post(f"/api/posts/{post.id}/like")
    assert first.status_code == 200
    assert first.json() == {"liked": True, "likeCount": 1}

    second = await async_client.post(f"/api/posts/{post.id}/like")
    assert second.status_code == 200
    assert second.json() == {"liked": False, "likeCount": 0}


@pytest.mark.asyncio
async def test_like_counts_each_user_once(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user,
    login_as,
):
    author = await make_user("author")
    post = await seed_post(db_session, author)
    db_session.add(Like(user_id=author.id, post_id=post.id))
    await db_session.commit()

    await login_as(await make_user("fan"))
    response = await async_client.post(f"/api/posts/{post.id}/like")

    assert response.json() == {"liked": True, "likeCount": 2}


@pytest.mark.asyncio
async def test_double_toggle_restores_likes(db_session: AsyncSession, make_user):
    author = await make_user("author")
    fan = await make_user("fan")
    post = await seed_post(db_session, author)
    db_session.add(Like(user_id=author.id, post_id=post.id))
    await db_session.commit()
    before = await liker_ids(db_session, post.id)

    for user in (author, fan):
        await toggle_like(db_session, post_id=post.id, user_id=user.id)
        await toggle_like(db_session, post_id=post.id, user_id=user.id)
        assert await liker_ids(db_session, post.id) == before

    assert await get_like_count(db_session, post.id) == 1


@pytest.mark.asyncio
async def test_toggle_like_missing_post(db_session: AsyncSession, make_user):
    fan = await make_user("fan")

    with pytest.raises(NotFoundError):
        await toggle_like(db_session, post_id=55_555, user_id=fan.id)


@pytest.mark.asyncio
async def test_like_api_missing_post_is_not_found(
    async_client: AsyncClient,
    make_user,
    login_as,
):
    await login_as(await make_user("fan"))

    response = await async_client.post("/api/posts/55555/like")

    assert response.status_code == 404
    assert response.json() == {"detail": "Post not found"}


@pytest.mark.asyncio
async def test_like_form_redirects_to_dashboard(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user,
    login_as,
):
    author = await make_user("author")
    post = await seed_post(db_session, author)
    fan = await make_user("fan")
    await login_as(fan)

    response = await async_client.post(f"/posts/{post.id}/like")
    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"
    assert await liker_ids(db_session, post.id) == {fan.id}

    missing = await async_client.post("/posts/55555/like")
    assert missing.status_code == 303
    assert missing.headers["location"] == "/dashboard"


@pytest.mark.asyncio
async def test_like_requires_login(async_client: AsyncClient, db_session: AsyncSession, make_user):
    post = await seed_post(db_session, await make_user("author"))

    response = await async_client.post(f"/api/posts/{post.id}/like")

    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert await liker_ids(db_session, post.id) == set()


@pytest.mark.asyncio
async def test_comment_is_appended(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user,
    login_as,
):
    author = await make_user("author")
    post = await seed_post(db_session, author)
    commenter = await make_user("commenter")
    await login_as(commenter)

    response = await async_client.post(
        f"/posts/{post.id}/comments",
        data={"comment": "  Great read  "},
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"
    result = await db_session.execute(select(Comment).where(_eq(Comment.post_id, post.id)))
    comments = result.scalars().all()
    assert [(comment.author_id, comment.text) for comment in comments] == [
        (commenter.id, "Great read")
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["", "   "])
async def test_empty_comment_is_ignored(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user,
    login_as,
    text: str,
):
    author = await make_user("author")
    post = await seed_post(db_session, author)
    await login_as(author)

    response = await async_client.post(f"/posts/{post.id}/comments", data={"comment": text})

    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"
    result = await db_session.execute(select(Comment).where(_eq(Comment.post_id, post.id)))
    assert result.scalars().all() == []


@pytest.mark.asyncio
async def test_add_comment_validates_text(db_session: AsyncSession, make_user):
    author = await make_user("author")
    post = await seed_post(db_session, author)

    with pytest.raises(ValidationError):
        await add_comment(db_session, post_id=post.id, author_id=author.id, text=" ")
    with pytest.raises(ValidationError):
        await add_comment(db_session, post_id=post.id, author_id=author.id, text="x" * 1001)
    with pytest.raises(NotFoundError):
        await add_comment(db_session, post_id=77_777, author_id=author.id, text="hello")

    comment = await add_comment(db_session, post_id=post.id, author_id=author.id, text=" hi ")
    assert comment.text == "hi"
    assert comment.id is not None


@pytest.mark.asyncio
async def test_feed_marks_likes_per_viewer(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user,
    login_as,
):
    author = await make_user("author")
    fan = await make_user("fan")
    post = await seed_post(db_session, author)
    db_session.add(Like(user_id=fan.id, post_id=post.id))
    await db_session.commit()

    await login_as(fan)
    fan_view = (await async_client.get("/dashboard")).json()["posts"][0]
    assert fan_view["like_count"] == 1
    assert fan_view["viewer_has_liked"] is True

    await login_as(author)
    author_view = (await async_client.get("/dashboard")).json()["posts"][0]
    assert author_view["like_count"] == 1
    assert author_view["viewer_has_liked"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/posts/abc/like", "/posts/abc/comments"])
async def test_form_routes_with_non_numeric_id_redirect(
    async_client: AsyncClient,
    make_user,
    login_as,
    path: str,
):
    await login_as(await make_user("fan"))

    response = await async_client.post(path, data={"comment": "hello"})

    assert response.status_code == 303
    assert response.headers["location"] == "/dashboard"


@pytest.mark.asyncio
async def test_like_api_with_non_numeric_id_is_not_found(
    async_client: AsyncClient,
    make_user,
    login_as,
):
    await login_as(await make_user("fan"))

    response = await async_client.post("/api/posts/abc/like")

    assert response.status_code == 404
    assert response.json() == {"detail": "Post not found"}
