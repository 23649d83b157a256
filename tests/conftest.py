"""Pytest configuration and shared fixtures for Hustle tests.

Database fixtures run against a throwaway SQLite file per test; factories
build users, actions and completion records without going through the HTTP
layer.
"""

from __future__ import annotations

import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from hustle import TestConfig, create_app, create_app_context
from hustle.infra.database import create_session_factory
from hustle.infra.repositories import SQLModelActionRepository
from hustle.models import Action, ActionCompletion, User
from hustle.services.tracker import ActionTracker

# A Monday in the middle of a 31-day month
FIXED_TODAY = date(2025, 3, 10)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine with every table created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Session for arranging test data directly."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Transactional session factory, the same shape repositories get in production."""
    return create_session_factory(db_engine)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(db_session):
    """Factory for persisted users."""

    def _create_user(email: str = "tester@example.com") -> User:
        user = User(email=email, password_hash="dummy-hash")
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default user for scoping data."""
    return user_factory()


@pytest.fixture
def action_factory(db_session, user):
    """Factory for persisted actions owned by ``user`` unless told otherwise."""

    def _create_action(title: str = "Read 20 pages", owner: User | None = None) -> Action:
        owner = owner or user
        action = Action(user_id=owner.id, title=title)
        db_session.add(action)
        db_session.commit()
        db_session.refresh(action)
        return action

    return _create_action


@pytest.fixture
def completion_factory(db_session):
    """Factory for completion records of an action."""

    def _create_completion(
        action: Action,
        day: int,
        *,
        year: int = FIXED_TODAY.year,
        month: int = FIXED_TODAY.month,
        completed: bool = True,
    ) -> ActionCompletion:
        record = ActionCompletion(
            action_id=action.id,
            user_id=action.user_id,
            year=year,
            month=month,
            day=day,
            completed=completed,
        )
        db_session.add(record)
        db_session.commit()
        db_session.refresh(record)
        return record

    return _create_completion


@pytest.fixture
def action_repo(session_factory) -> SQLModelActionRepository:
    return SQLModelActionRepository(session_factory)


@pytest.fixture
def tracker(action_repo) -> ActionTracker:
    """Tracker whose clock is pinned to ``FIXED_TODAY``."""
    return ActionTracker(action_repo, clock=lambda: FIXED_TODAY)


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture
def test_config(tmp_path) -> TestConfig:
    return TestConfig(data_dir=tmp_path)


@pytest.fixture
def app_context(test_config):
    ctx = create_app_context(test_config, today=lambda: FIXED_TODAY)
    yield ctx
    ctx.close()


@pytest.fixture
def app(test_config, app_context):
    return create_app(test_config, context=app_context)


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def signed_in_client(client):
    """Test client with a freshly registered account; the token is on ``client.token``."""
    response = client.post(
        "/auth/signup",
        json={"email": "maker@example.com", "password": "hunter22", "confirm_password": "hunter22"},
    )
    assert response.status_code == 201
    client.token = response.get_json()["token"]  # type: ignore[attr-defined]
    return client
