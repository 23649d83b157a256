"""Onboarding profile helpers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Iterable, Mapping, Optional

from ..infra.database import store_errors
from ..infra.repositories.profile import SQLModelProfileRepository
from ..logging_config import get_logger
from ..models.profile import UserProfile

logger = get_logger("services.profile")

ROLES = ("student", "professional", "freelancer")
ACTIVITIES = ("coding", "designing", "content", "learning")
PLATFORMS = ("leetcode", "gfg", "codechef")


def clean_platforms(activities: Iterable[str], platforms: Mapping[str, str] | None) -> dict[str, str] | None:
    """Keep known, non-empty platform handles, and only for users who code."""

    if "coding" not in set(activities) or not platforms:
        return None
    cleaned = {
        name: value.strip()
        for name, value in platforms.items()
        if name in PLATFORMS and value and value.strip()
    }
    return cleaned or None


class ProfileService:
    def __init__(
        self,
        repo: SQLModelProfileRepository,
        *,
        clock: Callable[[], datetime] | None = None,
    ):
        self.repo = repo
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def get_profile(self, user_id: int) -> Optional[UserProfile]:
        with store_errors("load profile", logger):
            return self.repo.get(user_id=user_id)

    def needs_onboarding(self, user_id: int) -> bool:
        profile = self.get_profile(user_id)
        return profile is None or not profile.onboarding_completed

    def save_onboarding(
        self,
        user_id: int,
        *,
        role: str,
        activities: Iterable[str],
        platforms: Mapping[str, str] | None = None,
    ) -> UserProfile:
        """Store onboarding answers and mark onboarding as completed."""

        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        selected = list(dict.fromkeys(activities))
        if not selected:
            raise ValueError("Pick at least one activity.")
        unknown = [name for name in selected if name not in ACTIVITIES]
        if unknown:
            raise ValueError(f"Unknown activities: {', '.join(unknown)}")

        profile = UserProfile(
            user_id=user_id,
            role=role,
            activities=selected,
            platforms=clean_platforms(selected, platforms),
            onboarding_completed=True,
            onboarding_completed_at=self._clock(),
        )
        with store_errors("save profile", logger):
            saved = self.repo.upsert(profile)
        logger.info("Onboarding saved", extra={"user_id": user_id, "role": role})
        return saved


__all__ = ["ACTIVITIES", "PLATFORMS", "ROLES", "ProfileService", "clean_platforms"]
