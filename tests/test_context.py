"""Tests for the application context lifecycle."""

from __future__ import annotations

from datetime import date

from hustle import TestConfig, create_app_context
from hustle.config import BaseConfig


def test_context_wires_services(test_config):
    with create_app_context(test_config, today=lambda: date(2025, 3, 10)) as ctx:
        session = ctx.identity.sign_up("maker@example.com", "hunter22")
        action = ctx.tracker.add_action(session.user.id, "Read")

        assert ctx.tracker.toggle_day(session.user.id, action.id, 2025, 3, 10) is True
        assert ctx.tracker.get_user_stats(session.user.id).current_streak == 1
        assert ctx.profiles.needs_onboarding(session.user.id) is True

    assert ctx.closed is True


def test_close_releases_subscriptions(test_config):
    ctx = create_app_context(test_config)
    received = []
    subscription = ctx.subscribe(received.append)

    ctx.close()
    ctx.close()

    assert subscription.active is False
    assert ctx.subscriptions == []

    ctx.identity.sign_up("maker@example.com", "hunter22")
    assert received == []
    ctx.engine.dispose()


def test_contexts_are_independent(tmp_path):
    first = create_app_context(TestConfig(data_dir=tmp_path / "one"))
    second = create_app_context(TestConfig(data_dir=tmp_path / "two"))
    try:
        first.identity.sign_up("maker@example.com", "hunter22")

        assert second.identity.get_user_by_email("maker@example.com") is None
    finally:
        first.close()
        second.close()


def test_in_memory_database_serves_worker_threads(tmp_path, monkeypatch):
    monkeypatch.setenv("HUSTLE_DATABASE_URL", "sqlite://")
    monkeypatch.setenv("HUSTLE_DEV_MODE", "true")

    with create_app_context(BaseConfig(data_dir=tmp_path), today=lambda: date(2025, 3, 10)) as ctx:
        session = ctx.identity.sign_up("maker@example.com", "hunter22")
        action = ctx.tracker.add_action(session.user.id, "Read")
        ctx.tracker.toggle_day(session.user.id, action.id, 2025, 3, 10)

        view = ctx.tracker.load_month(session.user.id, 2025, 3)

    assert [entry.completions for entry in view.actions] == [(10,)]
    assert view.daily_stats[9].completed == 1
