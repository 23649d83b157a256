"""Application context for dependency injection.

One ``AppContext`` is built at startup and handed to every surface (Flask app,
CLI, tests). Nothing here is a module-level singleton: call ``close()`` at
shutdown to release subscriptions and pooled connections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional

from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, create_db_engine, create_session_factory, init_database
from .infra.repositories import SQLModelActionRepository, SQLModelProfileRepository
from .logging_config import get_logger
from .services.auth import IdentityProvider, Subscription
from .services.profile import ProfileService
from .services.tracker import ActionTracker

logger = get_logger("context")


@dataclass
class AppContext:
    """Centralized application context with services and their resources."""

    config: BaseConfig
    engine: Engine
    session_factory: SessionFactory

    action_repo: SQLModelActionRepository
    profile_repo: SQLModelProfileRepository

    tracker: ActionTracker
    identity: IdentityProvider
    profiles: ProfileService

    subscriptions: list[Subscription] = field(default_factory=list)
    closed: bool = False

    def subscribe(self, handler) -> Subscription:
        """Register an auth handler that is released together with the context."""
        subscription = self.identity.on_auth_state_change(handler)
        self.subscriptions.append(subscription)
        return subscription

    def close(self) -> None:
        if self.closed:
            return
        for subscription in self.subscriptions:
            subscription.unsubscribe()
        self.subscriptions.clear()
        self.identity.close()
        self.engine.dispose()
        self.closed = True
        logger.info("Application context closed")

    def __enter__(self) -> "AppContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    today: Callable[[], date] = date.today,
) -> AppContext:
    """Create the engine, schema, repositories and services."""

    if config is None:
        config = BaseConfig()

    engine = create_db_engine(config)
    init_database(engine)
    session_factory = create_session_factory(engine)

    action_repo = SQLModelActionRepository(session_factory)
    profile_repo = SQLModelProfileRepository(session_factory)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        action_repo=action_repo,
        profile_repo=profile_repo,
        tracker=ActionTracker(action_repo, clock=today),
        identity=IdentityProvider(
            session_factory,
            session_ttl=config.session_ttl,
            min_password_length=config.MIN_PASSWORD_LENGTH,
        ),
        profiles=ProfileService(profile_repo),
    )
