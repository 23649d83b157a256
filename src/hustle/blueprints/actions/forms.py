"""Action form definitions."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...services.tracker import MAX_NOTE_LENGTH, MAX_TITLE_LENGTH


class ActionForm(BaseModel):
    """Payload for creating an action."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(default="", max_length=MAX_TITLE_LENGTH)
    # month being viewed when the habit was added; additions are locked for future months
    year: Optional[int] = Field(default=None, ge=1)
    month: Optional[int] = Field(default=None, ge=1, le=12)

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        if not value:
            raise ValueError("Please provide a habit title.")
        return value

    @model_validator(mode="after")
    def year_and_month_together(self) -> "ActionForm":
        if (self.year is None) != (self.month is None):
            raise ValueError("Send both year and month, or neither.")
        return self


class DayForm(BaseModel):
    """Identifies one calendar day of a month."""

    year: int = Field(ge=1)
    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)


class NoteForm(DayForm):
    note: Optional[str] = Field(default=None, max_length=MAX_NOTE_LENGTH)


__all__ = ["ActionForm", "DayForm", "NoteForm"]
