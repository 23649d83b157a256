"""Engine, schema and per-operation sessions for the habit store.

Every repository call opens its own session through a ``SessionFactory``;
services wrap those calls in ``store_errors`` so a failing database reaches
callers as ``StoreError`` instead of a driver exception.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, ContextManager, Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..errors import StoreError
from ..logging_config import get_logger

logger = get_logger("infra.database")

SessionFactory = Callable[[], ContextManager[Session]]


def create_db_engine(config: BaseConfig) -> Engine:
    engine = create_engine(config.DATABASE_URL, **config.sqlalchemy_engine_options())
    logger.debug(
        "Database engine created",
        extra={"database_url": engine.url.render_as_string(hide_password=True)},
    )
    return engine


def init_database(engine: Engine) -> None:
    """Create missing tables; existing ones are left untouched."""
    from .. import models  # noqa: F401  registers the tables

    SQLModel.metadata.create_all(engine)


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """One transaction: committed on success, rolled back on any error."""
    session = Session(engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def create_session_factory(engine: Engine) -> SessionFactory:
    def factory() -> ContextManager[Session]:
        return session_scope(engine)

    return factory


@contextmanager
def store_errors(operation: str, log: logging.Logger = logger) -> Iterator[None]:
    """Re-raise ``SQLAlchemyError`` as ``StoreError("Failed to <operation>: ...")``."""
    try:
        yield
    except SQLAlchemyError as exc:
        log.exception("Record store call failed", extra={"operation": operation})
        detail = getattr(exc, "orig", None) or exc
        raise StoreError(f"Failed to {operation}: {detail}") from exc


__all__ = [
    "SessionFactory",
    "create_db_engine",
    "create_session_factory",
    "init_database",
    "session_scope",
    "store_errors",
]
