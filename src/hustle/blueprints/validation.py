"""Helpers turning request payloads into validated pydantic forms."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

FormT = TypeVar("FormT", bound=BaseModel)


class FormError(ValueError):
    """Payload failed validation; ``fields`` maps field names to messages."""

    def __init__(self, fields: dict[str, list[str]]):
        first = next(iter(fields.values()), ["Invalid request"])[0]
        super().__init__(first)
        self.fields = fields


def structured_errors(exc: ValidationError) -> dict[str, list[str]]:
    structured: dict[str, list[str]] = {}
    for error in exc.errors(include_url=False):
        loc = error.get("loc", ())
        key = str(loc[0]) if loc else "__root__"
        message = error.get("msg", "Invalid value")
        # pydantic prefixes messages raised from validators
        structured.setdefault(key, []).append(message.removeprefix("Value error, "))
    return structured


def load_form(form_cls: type[FormT], data: Mapping[str, Any] | None) -> FormT:
    """Validate ``data`` against ``form_cls`` or raise ``FormError``."""

    try:
        return form_cls.model_validate(dict(data or {}))
    except ValidationError as exc:
        raise FormError(structured_errors(exc)) from exc
