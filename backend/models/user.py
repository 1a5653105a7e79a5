"""User domain model."""

from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from sqlalchemy import Column, DateTime, String, func
from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    """Account created from a Google profile on first login."""

    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid4()), sa_column=Column(String(36), primary_key=True))
    google_id: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True)
    )
    display_name: str = Field(
        sa_column=Column(String(255), nullable=False)
    )
    # Google may omit email when the scope was not granted.
    email: str | None = Field(
        default=None, sa_column=Column(String(255), nullable=True)
    )
    profile_picture_url: str | None = Field(
        default=None, sa_column=Column(String(2048), nullable=True)
    )
    created_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )
    )
    updated_at: datetime = Field(
        sa_column=Column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )
    )
