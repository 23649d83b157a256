"""Onboarding profile stored per user."""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class UserProfile(SQLModel, table=True):
    """Answers collected by the onboarding flow."""

    __tablename__: ClassVar[str] = "user_profile"

    user_id: int = Field(foreign_key="user.id", primary_key=True)
    role: Optional[str] = Field(default=None, max_length=32)
    activities: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    platforms: Optional[dict[str, str]] = Field(default=None, sa_column=Column(JSON))
    onboarding_completed: bool = Field(default=False, nullable=False)
    onboarding_completed_at: Optional[datetime] = Field(default=None)
