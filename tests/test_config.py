"""Tests for environment-driven configuration."""

from __future__ import annotations

from datetime import timedelta

import pytest

from sqlalchemy.pool import StaticPool

from hustle.config import BaseConfig, DevConfig, TestConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "HUSTLE_SECRET_KEY",
        "HUSTLE_DEV_MODE",
        "HUSTLE_DATABASE_URL",
        "HUSTLE_SESSION_TTL_HOURS",
        "HUSTLE_MIN_PASSWORD_LENGTH",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults(tmp_path):
    config = BaseConfig(data_dir=tmp_path)

    assert config.DEV_MODE is True
    assert config.DATA_DIR == tmp_path.resolve()
    assert config.DATABASE_URL == f"sqlite:///{tmp_path.resolve() / 'hustle.db'}"
    assert config.session_ttl == timedelta(days=7)
    assert config.MIN_PASSWORD_LENGTH == 6


def test_data_dir_from_environment(tmp_path, monkeypatch):
    target = tmp_path / "nested" / "data"
    monkeypatch.setenv("HUSTLE_DATA_DIR", str(target))

    config = BaseConfig()

    assert config.DATA_DIR == target.resolve()
    assert target.is_dir()


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("HUSTLE_DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("HUSTLE_SESSION_TTL_HOURS", "1")
    monkeypatch.setenv("HUSTLE_MIN_PASSWORD_LENGTH", "10")
    monkeypatch.setenv("HUSTLE_DEV_MODE", "no")
    monkeypatch.setenv("HUSTLE_SECRET_KEY", "s3cret")

    config = DevConfig(data_dir=tmp_path)

    assert config.DATABASE_URL == "sqlite:///:memory:"
    assert config.session_ttl == timedelta(hours=1)
    assert config.MIN_PASSWORD_LENGTH == 10
    assert config.DEV_MODE is False


@pytest.mark.parametrize("value", ["0", "-3"])
def test_session_ttl_must_be_positive(tmp_path, monkeypatch, value):
    monkeypatch.setenv("HUSTLE_SESSION_TTL_HOURS", value)

    with pytest.raises(ValueError, match="HUSTLE_SESSION_TTL_HOURS"):
        BaseConfig(data_dir=tmp_path)


def test_non_integer_setting(tmp_path, monkeypatch):
    monkeypatch.setenv("HUSTLE_MIN_PASSWORD_LENGTH", "six")

    with pytest.raises(ValueError, match="must be an integer"):
        BaseConfig(data_dir=tmp_path)


def test_secret_required_outside_dev_mode(tmp_path, monkeypatch):
    monkeypatch.setenv("HUSTLE_DEV_MODE", "0")

    with pytest.raises(ValueError, match="HUSTLE_SECRET_KEY"):
        BaseConfig(data_dir=tmp_path)


def test_sqlite_engine_options(tmp_path, monkeypatch):
    assert BaseConfig(data_dir=tmp_path).sqlalchemy_engine_options() == {
        "connect_args": {"check_same_thread": False}
    }

    monkeypatch.setenv("HUSTLE_DATABASE_URL", "postgresql://localhost/hustle")
    assert BaseConfig(data_dir=tmp_path).sqlalchemy_engine_options() == {}


def test_test_config_ignores_database_url(tmp_path, monkeypatch):
    monkeypatch.setenv("HUSTLE_DATABASE_URL", "postgresql://localhost/hustle")

    config = TestConfig(data_dir=tmp_path)

    assert config.TESTING is True
    assert config.DATABASE_URL.startswith("sqlite:///")
    assert config.SECRET_KEY == "test-secret"


@pytest.mark.parametrize(
    "url", ["sqlite://", "sqlite:///:memory:", "sqlite:///file:hustle?mode=memory&uri=true"]
)
def test_memory_database_shares_one_connection(tmp_path, monkeypatch, url):
    monkeypatch.setenv("HUSTLE_DATABASE_URL", url)

    config = BaseConfig(data_dir=tmp_path)

    assert config.is_memory_database is True
    assert config.sqlalchemy_engine_options() == {
        "connect_args": {"check_same_thread": False},
        "poolclass": StaticPool,
    }


def test_file_database_is_not_in_memory(tmp_path, monkeypatch):
    assert BaseConfig(data_dir=tmp_path).is_memory_database is False

    monkeypatch.setenv("HUSTLE_DATABASE_URL", "postgresql://localhost/hustle")
    assert BaseConfig(data_dir=tmp_path).is_memory_database is False
