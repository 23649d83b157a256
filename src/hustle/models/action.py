"""Habit ("action") tracking data structures."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from .user import utcnow

if TYPE_CHECKING:  # pragma: no cover
    from .user import User


class Action(SQLModel, table=True):
    """A user-defined habit tracked once per calendar day."""

    __tablename__: ClassVar[str] = "action"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    title: str = Field(nullable=False, max_length=100)
    created_at: datetime = Field(default_factory=utcnow, nullable=False, index=True)

    completions: list["ActionCompletion"] = Relationship(
        back_populates="action",
        sa_relationship=relationship("ActionCompletion", back_populates="action"),
    )

    user: "User" = Relationship(sa_relationship=relationship("User", back_populates="actions"))


class ActionCompletion(SQLModel, table=True):
    """Completion flag for one action on one calendar day."""

    __tablename__: ClassVar[str] = "action_completion"
    __table_args__ = (
        UniqueConstraint("action_id", "year", "month", "day", name="uq_action_completion_day"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    action_id: int = Field(foreign_key="action.id", nullable=False, index=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    year: int = Field(nullable=False, index=True)
    month: int = Field(nullable=False, ge=1, le=12, index=True)
    day: int = Field(nullable=False, ge=1, le=31)
    completed: bool = Field(default=True, nullable=False)
    notes: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=utcnow, nullable=False)

    action: "Action" = Relationship(
        back_populates="completions",
        sa_relationship=relationship("Action", back_populates="completions"),
    )
