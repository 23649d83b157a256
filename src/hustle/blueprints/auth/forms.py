"""Sign-up and sign-in payloads."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1)


class SignupForm(LoginForm):
    """Password rules are enforced by the identity provider."""

    confirm_password: Optional[str] = None


__all__ = ["LoginForm", "SignupForm"]
