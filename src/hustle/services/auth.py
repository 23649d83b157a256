"""Identity provider: accounts, bearer sessions and session-change events."""

from __future__ import annotations

import re
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ..errors import AuthError
from ..infra.database import SessionFactory, store_errors
from ..logging_config import get_logger
from ..models.user import AuthSession, User

logger = get_logger("services.auth")

_hasher = PasswordHasher()
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
DEFAULT_SESSION_TTL = timedelta(days=7)


class AuthEventKind(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True, slots=True)
class AuthEvent:
    """Delivered to subscribers whenever a session starts or ends."""

    kind: AuthEventKind
    user: Optional[User]


@dataclass(frozen=True, slots=True)
class ActiveSession:
    """Result of a successful sign-up or sign-in."""

    token: str
    user: User
    expires_at: datetime


AuthHandler = Callable[[AuthEvent], None]


class Subscription:
    """Handle returned by ``on_auth_state_change``; call ``unsubscribe`` on teardown."""

    def __init__(self, provider: "IdentityProvider", handler: AuthHandler):
        self._provider = provider
        self._handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._provider._remove_handler(self._handler)
            self.active = False


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class IdentityProvider:
    """Email/password accounts with opaque, expiring bearer tokens."""

    def __init__(
        self,
        session_factory: SessionFactory,
        *,
        session_ttl: timedelta = DEFAULT_SESSION_TTL,
        min_password_length: int = 6,
        clock: Callable[[], datetime] | None = None,
    ):
        self.session_factory = session_factory
        self.session_ttl = session_ttl
        self.min_password_length = min_password_length
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._handlers: list[AuthHandler] = []
        self._lock = threading.Lock()

    # Subscriptions

    def on_auth_state_change(self, handler: AuthHandler) -> Subscription:
        with self._lock:
            self._handlers.append(handler)
        return Subscription(self, handler)

    def _remove_handler(self, handler: AuthHandler) -> None:
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)

    def close(self) -> None:
        """Drop every registered handler."""
        with self._lock:
            self._handlers.clear()

    def _emit(self, kind: AuthEventKind, user: Optional[User]) -> None:
        event = AuthEvent(kind=kind, user=user)
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(event)
            except Exception:
                # one broken subscriber must not starve the rest
                logger.exception("Auth state handler failed", extra={"event": kind.value})

    # Accounts

    def sign_up(
        self, email: str, password: str, confirm_password: str | None = None
    ) -> ActiveSession:
        """Register a new account and sign it in."""

        email = normalize_email(email)
        if not _EMAIL_RE.match(email):
            raise ValueError("Please enter a valid email address.")
        if confirm_password is not None and password != confirm_password:
            raise ValueError("Passwords do not match")
        if len(password or "") < self.min_password_length:
            raise ValueError(
                f"Password must be at least {self.min_password_length} characters"
            )

        password_hash = _hasher.hash(password)
        with store_errors("sign up", logger):
            try:
                with self.session_factory() as session:
                    existing = session.exec(select(User).where(User.email == email)).first()
                    if existing:
                        raise ValueError("User already registered")
                    user = User(email=email, password_hash=password_hash)
                    session.add(user)
                    session.commit()
                    session.refresh(user)
                    session.expunge(user)
            except IntegrityError as exc:
                # a concurrent sign-up for the same email won the unique index
                raise ValueError("User already registered") from exc

        logger.info("User signed up", extra={"user_id": user.id})
        return self._start_session(user)

    def sign_in(self, email: str, password: str) -> ActiveSession:
        email = normalize_email(email)
        if not email or not password:
            raise AuthError("Invalid login credentials")
        with store_errors("sign in", logger), self.session_factory() as session:
            user = session.exec(select(User).where(User.email == email)).first()
            if user is None:
                raise AuthError("Invalid login credentials")
            try:
                _hasher.verify(user.password_hash, password)
            except (VerifyMismatchError, InvalidHash, VerificationError) as exc:
                logger.info("Rejected sign-in", extra={"user_id": user.id})
                raise AuthError("Invalid login credentials") from exc

            if _hasher.check_needs_rehash(user.password_hash):
                user.password_hash = _hasher.hash(password)
            user.last_sign_in = self._clock()
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)

        return self._start_session(user)

    def sign_out(self, token: str | None) -> None:
        """End the session behind ``token``; unknown tokens are ignored."""

        if not token:
            return
        with store_errors("sign out", logger), self.session_factory() as session:
            row = session.get(AuthSession, token)
            if row is None:
                return
            user = session.get(User, row.user_id)
            session.delete(row)
            session.commit()
            if user:
                session.expunge(user)

        logger.info("User signed out", extra={"user_id": user.id if user else None})
        self._emit(AuthEventKind.SIGNED_OUT, user)

    def get_user(self, token: str | None) -> Optional[User]:
        """Return the user behind a live session token, purging it once expired."""

        if not token:
            return None
        with store_errors("load session", logger), self.session_factory() as session:
            row = session.get(AuthSession, token)
            if row is None:
                return None
            if _as_utc(row.expires_at) <= self._clock():
                session.delete(row)
                session.commit()
                return None
            user = session.get(User, row.user_id)
            if user:
                session.expunge(user)
            return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        with store_errors("look up user", logger), self.session_factory() as session:
            user = session.exec(select(User).where(User.email == normalize_email(email))).first()
            if user:
                session.expunge(user)
            return user

    def _start_session(self, user: User) -> ActiveSession:
        now = self._clock()
        token = secrets.token_urlsafe(32)
        expires_at = now + self.session_ttl
        with store_errors("start session", logger), self.session_factory() as session:
            session.add(
                AuthSession(token=token, user_id=user.id, created_at=now, expires_at=expires_at)
            )
            session.commit()
        self._emit(AuthEventKind.SIGNED_IN, user)
        return ActiveSession(token=token, user=user, expires_at=expires_at)


__all__ = [
    "ActiveSession",
    "AuthEvent",
    "AuthEventKind",
    "IdentityProvider",
    "Subscription",
    "normalize_email",
]
