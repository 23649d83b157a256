"""User and session models backing the identity provider."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .action import Action


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """Registered account identified by email."""

    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(nullable=False, unique=True, index=True, max_length=255)
    password_hash: str = Field(nullable=False, max_length=255)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    last_sign_in: Optional[datetime] = Field(default=None)

    actions: list["Action"] = Relationship(
        back_populates="user",
        sa_relationship=relationship("Action", back_populates="user"),
    )


class AuthSession(SQLModel, table=True):
    """Opaque bearer token issued on sign-in."""

    __tablename__: ClassVar[str] = "auth_session"

    token: str = Field(primary_key=True, max_length=128)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)
    expires_at: datetime = Field(nullable=False, index=True)
