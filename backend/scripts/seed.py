"""Database seed script for local development.

Usage:
    python scripts/seed.py

Creates demo users as if each had already signed in with Google once, a few
posts per user, and a ring of likes and comments between them. Running it
again is a no-op for rows that already exist.
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.sql import ColumnElement

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from core import configure_logging, settings  # noqa: E402
from db.session import AsyncSessionMaker  # noqa: E402
from models import Comment, Like, Post, User  # noqa: E402


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


@dataclass(frozen=True)
class SeedUser:
    google_id: str
    display_name: str
    email: str


@dataclass(frozen=True)
class SeedPost:
    google_id: str
    title: str
    content: str


BASE_USERS: Sequence[SeedUser] = [
    SeedUser(google_id="seed-alex", display_name="Alex Demo", email="alex@example.com"),
    SeedUser(google_id="seed-bella", display_name="Bella Demo", email="bella@example.com"),
    SeedUser(google_id="seed-cara", display_name="Cara Demo", email="cara@example.com"),
    SeedUser(google_id="seed-dan", display_name="Dan Demo", email="dan@example.com"),
]

BASE_POSTS: Sequence[SeedPost] = [
    SeedPost(
        google_id="seed-alex",
        title="Hello, blog",
        content="First post on the new blog. More soon.",
    ),
    SeedPost(
        google_id="seed-alex",
        title="Morning routines",
        content="A run, a coffee and a short list of things to write about.",
    ),
    SeedPost(
        google_id="seed-bella",
        title="Latte art, attempt one",
        content="It was supposed to be a leaf. It was not a leaf.",
    ),
    SeedPost(
        google_id="seed-cara",
        title="Golden hour",
        content="Notes on shooting into the sun without losing the subject.",
    ),
    SeedPost(
        google_id="seed-dan",
        title="Hill climb log",
        content="Twelve kilometres, four hundred metres up, one flat tyre.",
    ),
]

SEED_COMMENTS: Sequence[str] = [
    "Great post!",
    "Thanks for sharing.",
    "Looking forward to the next one.",
]


def _avatar_url(google_id: str) -> str:
    return f"https://example.com/avatars/{google_id}.png"


def build_seed_interactions(
    google_ids: Sequence[str],
    posts: Sequence[SeedPost],
) -> list[tuple[str, int]]:
    """Pair each post with the next user in the ring who did not write it."""
    pairs: list[tuple[str, int]] = []
    if len(google_ids) < 2:
        return pairs
    for index, post in enumerate(posts):
        author_index = google_ids.index(post.google_id)
        reader = google_ids[(author_index + 1 + index) % len(google_ids)]
        if reader == post.google_id:
            reader = google_ids[(author_index + 1) % len(google_ids)]
        pairs.append((reader, index))
    return pairs


async def get_or_create_user(session, payload: SeedUser) -> User:
    result = await session.execute(select(User).where(_eq(User.google_id, payload.google_id)))
    user = result.scalar_one_or_none()
    if user:
        return user

    user = User(
        google_id=payload.google_id,
        display_name=payload.display_name,
        email=payload.email,
        profile_picture_url=_avatar_url(payload.google_id),
    )
    session.add(user)
    await session.flush()
    return user


async def ensure_posts(
    session,
    users: dict[str, User],
    posts: Sequence[SeedPost],
) -> list[Post]:
    ensured: list[Post] = []
    for payload in posts:
        author = users[payload.google_id]
        result = await session.execute(
            select(Post).where(
                _eq(Post.author_id, author.id),
                _eq(Post.title, payload.title),
            )
        )
        post = result.scalar_one_or_none()
        if post is None:
            post = Post(author_id=author.id, title=payload.title, content=payload.content)
            session.add(post)
            await session.flush()
        ensured.append(post)
    return ensured


async def ensure_interactions(
    session,
    users: dict[str, User],
    posts: Sequence[Post],
    pairs: Sequence[tuple[str, int]],
) -> int:
    created = 0
    for pair_index, (google_id, post_index) in enumerate(pairs):
        reader = users[google_id]
        post = posts[post_index]
        if post.id is None:
            raise ValueError("Seed post missing identifier")

        existing_like = await session.get(Like, (reader.id, post.id))
        if existing_like is None:
            session.add(Like(user_id=reader.id, post_id=post.id))
            created += 1

        result = await session.execute(
            select(Comment).where(
                _eq(Comment.post_id, post.id),
                _eq(Comment.author_id, reader.id),
            )
        )
        if result.scalar_one_or_none() is None:
            session.add(
                Comment(
                    post_id=post.id,
                    author_id=reader.id,
                    text=SEED_COMMENTS[pair_index % len(SEED_COMMENTS)],
                )
            )
    return created


async def seed() -> None:
    configure_logging(settings.log_level)
    google_ids = [user.google_id for user in BASE_USERS]
    pairs = build_seed_interactions(google_ids, BASE_POSTS)

    async with AsyncSessionMaker() as session:
        users: dict[str, User] = {}
        for payload in BASE_USERS:
            users[payload.google_id] = await get_or_create_user(session, payload)

        posts = await ensure_posts(session, users, BASE_POSTS)
        new_likes = await ensure_interactions(session, users, posts, pairs)
        await session.commit()

    print("Seed data inserted.")
    print("   Users:", ", ".join(user.display_name for user in BASE_USERS))
    print("   Posts:", len(BASE_POSTS))
    print("   New likes:", new_likes)


if __name__ == "__main__":
    asyncio.run(seed())
