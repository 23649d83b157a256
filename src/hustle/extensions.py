"""Flask wiring for the application context and the signed-in user."""

from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

from flask import Flask, current_app, g, request, session

from .context import AppContext
from .errors import AuthError
from .models.user import User

EXTENSION_KEY = "hustle"
SESSION_TOKEN_KEY = "access_token"

F = TypeVar("F", bound=Callable[..., Any])


def init_app(app: Flask, ctx: AppContext) -> None:
    """Attach ``ctx`` to the app and resolve the caller on every request."""

    app.extensions[EXTENSION_KEY] = ctx

    @app.before_request
    def _load_user() -> None:
        token = request_token()
        g.access_token = token
        g.user = ctx.identity.get_user(token) if token else None


def get_context() -> AppContext:
    """Return the ``AppContext`` bound to the running Flask app."""

    return current_app.extensions[EXTENSION_KEY]


def request_token() -> Optional[str]:
    """Bearer token from the Authorization header, else from the cookie session."""

    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return session.get(SESSION_TOKEN_KEY)


def current_user() -> Optional[User]:
    return g.get("user")


def login_required(view: F) -> F:
    """Reject anonymous callers with ``AuthError`` (rendered as 401)."""

    @wraps(view)
    def wrapped(*args: Any, **kwargs: Any):
        if current_user() is None:
            raise AuthError("Authentication required")
        return view(*args, **kwargs)

    return wrapped  # type: ignore[return-value]


def month_from_request(today: date) -> tuple[int, int]:
    """Read ``year``/``month`` query arguments, defaulting to ``today``'s month."""

    try:
        year = int(request.args.get("year", today.year))
        month = int(request.args.get("month", today.month))
    except ValueError as exc:
        raise ValueError("year and month must be integers") from exc
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12.")
    return year, month
