"""SQLModel models package."""

from .comment import Comment
from .like import Like
from .login_session import LoginSession
from .post import Post
from .user import User

__all__ = [
    "User",
    "Post",
    "Like",
    "Comment",
    "LoginSession",
]
