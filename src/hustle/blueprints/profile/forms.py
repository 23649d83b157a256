"""Onboarding form definitions."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

Role = Literal["student", "professional", "freelancer"]
Activity = Literal["coding", "designing", "content", "learning"]


class Platforms(BaseModel):
    leetcode: str = ""
    gfg: str = ""
    codechef: str = ""


class OnboardingForm(BaseModel):
    """Answers submitted at the end of onboarding."""

    role: Role
    activities: list[Activity] = Field(min_length=1)
    platforms: Optional[Platforms] = None

    @field_validator("activities")
    @classmethod
    def dedupe_activities(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    @model_validator(mode="after")
    def drop_platforms_unless_coding(self) -> "OnboardingForm":
        if "coding" not in self.activities:
            self.platforms = None
        return self


__all__ = ["OnboardingForm", "Platforms"]
