"""Tests for the paginated dashboard feed."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from api.routes.pagination import normalize_page, page_offset
from api.routes.post_views import assemble_feed
from models import Comment, Like, Post, User

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


async def seed_posts(db_session: AsyncSession, author: User, count: int) -> list[Post]:
    """Insert ``count`` posts one minute apart; index 0 is the oldest."""
    posts = [
        Post(
            author_id=author.id,
            title=f"Post {index}",
            content=f"Content {index}",
            created_at=BASE_TIME + timedelta(minutes=index),
            updated_at=BASE_TIME + timedelta(minutes=index),
        )
        for index in range(count)
    ]
    db_session.add_all(posts)
    await db_session.commit()
    for post in posts:
        await db_session.refresh(post)
    return posts


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, 1),
        ("", 1),
        ("abc", 1),
        ("0", 1),
        ("-1", 1),
        (-3, 1),
        ("2", 2),
        (" 3 ", 3),
        (7, 7),
    ],
)
def test_normalize_page(raw, expected):
    assert normalize_page(raw) == expected


def test_page_offset():
    assert page_offset(1, 10) == 0
    assert page_offset(3, 10) == 20


@pytest.mark.asyncio
async def test_feed_is_newest_first(db_session: AsyncSession, make_user):
    author = await make_user("author")
    await seed_posts(db_session, author, 3)

    feed = await assemble_feed(db_session, page=1)

    assert [post.title for post in feed.posts] == ["Post 2", "Post 1", "Post 0"]
    assert feed.page == 1
    assert feed.has_more is False


@pytest.mark.asyncio
async def test_feed_pages_are_disjoint_and_end_empty(db_session: AsyncSession, make_user):
    author = await make_user("author")
    posts = await seed_posts(db_session, author, 11)

    first = await assemble_feed(db_session, page=1, page_size=10)
    second = await assemble_feed(db_session, page=2, page_size=10)
    third = await assemble_feed(db_session, page=3, page_size=10)

    assert len(first.posts) == 10
    assert first.has_more is True
    assert [post.id for post in second.posts] == [posts[0].id]
    assert second.has_more is False
    assert {post.id for post in first.posts}.isdisjoint({post.id for post in second.posts})
    assert third.posts == []
    assert third.page == 3


@pytest.mark.asyncio
async def test_feed_enriches_authors_likes_and_comments(db_session: AsyncSession, make_user):
    author = await make_user("author")
    commenter = await make_user("commenter")
    [post] = await seed_posts(db_session, author, 1)
    db_session.add_all(
        [
            Like(user_id=commenter.id, post_id=post.id),
            Comment(
                post_id=post.id,
                author_id=commenter.id,
                text="First",
                created_at=BASE_TIME + timedelta(minutes=5),
            ),
            Comment(
                post_id=post.id,
                author_id=author.id,
                text="Second",
                created_at=BASE_TIME + timedelta(minutes=6),
            ),
        ]
    )
    await db_session.commit()

    feed = await assemble_feed(db_session, page="1", viewer_id=commenter.id)

    [entry] = feed.posts
    assert entry.author_name == author.display_name
    assert entry.author_picture_url == author.profile_picture_url
    assert entry.like_count == 1
    assert entry.viewer_has_liked is True
    assert [comment.text for comment in entry.comments] == ["First", "Second"]
    assert [comment.author_name for comment in entry.comments] == [
        commenter.display_name,
        author.display_name,
    ]
    assert entry.comments[0].author_picture_url == commenter.profile_picture_url


@pytest.mark.asyncio
async def test_dashboard_paginates_with_next_page_header(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user,
    login_as,
):
    author = await make_user("author")
    await seed_posts(db_session, author, 11)
    await login_as(author)

    first = await async_client.get("/dashboard")
    assert first.status_code == 200
    body = first.json()
    assert len(body["posts"]) == 10
    assert body["posts"][0]["title"] == "Post 10"
    assert body["has_more"] is True
    assert body["user"]["id"] == author.id
    assert first.headers["X-Next-Page"] == "2"

    second = await async_client.get("/dashboard", params={"page": "2"})
    assert [post["title"] for post in second.json()["posts"]] == ["Post 0"]
    assert "X-Next-Page" not in second.headers

    beyond = await async_client.get("/dashboard", params={"page": "3"})
    assert beyond.status_code == 200
    assert beyond.json()["posts"] == []


@pytest.mark.asyncio
@pytest.mark.parametrize("raw_page", ["-1", "0", "abc"])
async def test_dashboard_treats_bad_page_as_first(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user,
    login_as,
    raw_page: str,
):
    author = await make_user("author")
    await seed_posts(db_session, author, 2)
    await login_as(author)

    response = await async_client.get("/dashboard", params={"page": raw_page})

    assert response.status_code == 200
    body = response.json()
    assert body["page"] == 1
    assert [post["title"] for post in body["posts"]] == ["Post 1", "Post 0"]


@pytest.mark.asyncio
async def test_dashboard_honours_page_size(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user,
    login_as,
):
    author = await make_user("author")
    await seed_posts(db_session, author, 3)
    await login_as(author)

    response = await async_client.get("/dashboard", params={"page_size": 2})

    body = response.json()
    assert body["page_size"] == 2
    assert [post["title"] for post in body["posts"]] == ["Post 2", "Post 1"]
    assert response.headers["X-Next-Page"] == "2"


@pytest.mark.asyncio
async def test_dashboard_huge_page_is_empty(
    async_client: AsyncClient,
    db_session: AsyncSession,
    make_user,
    login_as,
):
    author = await make_user("author")
    await seed_posts(db_session, author, 2)
    await login_as(author)

    response = await async_client.get("/dashboard", params={"page": "99999999999999999999"})

    assert response.status_code == 200
    body = response.json()
    assert body["posts"] == []
    assert body["has_more"] is False
    assert "X-Next-Page" not in response.headers


@pytest.mark.asyncio
async def test_assemble_feed_offset_beyond_integer_range(db_session: AsyncSession, make_user):
    author = await make_user("author")
    await seed_posts(db_session, author, 1)

    feed = await assemble_feed(db_session, page=2**62, page_size=10)

    assert feed.posts == []
    assert feed.page == 2**62
