"""SQLModel implementation of the onboarding profile repository."""

from __future__ import annotations

from typing import Optional

from ...models.profile import UserProfile
from ..database import SessionFactory


class SQLModelProfileRepository:
    """Stores one ``UserProfile`` row per user."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get(self, *, user_id: int) -> Optional[UserProfile]:
        with self.session_factory() as session:
            obj = session.get(UserProfile, user_id)
            if obj:
                session.expunge(obj)
            return obj

    def upsert(self, profile: UserProfile) -> UserProfile:
        """Insert or replace the profile for ``profile.user_id``."""
        with self.session_factory() as session:
            existing = session.get(UserProfile, profile.user_id)
            if existing is None:
                existing = profile
            else:
                existing.role = profile.role
                existing.activities = list(profile.activities)
                existing.platforms = dict(profile.platforms) if profile.platforms else None
                existing.onboarding_completed = profile.onboarding_completed
                existing.onboarding_completed_at = profile.onboarding_completed_at
            session.add(existing)
            session.commit()
            session.refresh(existing)
            session.expunge(existing)
            return existing
