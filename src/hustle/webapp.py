"""Flask application factory."""

from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify

from . import cli, extensions
from .blueprints import register_blueprints
from .blueprints.validation import FormError
from .config import BaseConfig, DevConfig
from .context import AppContext, create_app_context
from .errors import AuthError, FutureDateError, HustleError, NotFoundError, StoreError
from .logging_config import get_logger, setup_logging

logger = get_logger("webapp")

_STATUS_BY_ERROR: tuple[tuple[type[HustleError], int], ...] = (
    (AuthError, 401),
    (FutureDateError, 403),
    (NotFoundError, 404),
    (StoreError, 500),
)


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(FormError)
    def _form_error(exc: FormError):
        return jsonify({"error": str(exc), "fields": exc.fields}), 400

    @app.errorhandler(HustleError)
    def _hustle_error(exc: HustleError):
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(exc, cls)), 400)
        if status >= 500:
            logger.error("Request failed", extra={"error": exc.message})
        return jsonify({"error": exc.message}), status

    @app.errorhandler(ValueError)
    def _value_error(exc: ValueError):
        return jsonify({"error": str(exc)}), 400


def create_app(
    config: Optional[BaseConfig] = None, *, context: Optional[AppContext] = None
) -> Flask:
    """Build the Flask app around an explicitly constructed ``AppContext``.

    The context is owned by the caller when passed in; otherwise it is created
    here and reachable as ``app.extensions["hustle"]`` for ``close()``.
    """

    if config is None:
        config = context.config if context is not None else DevConfig()
    setup_logging(config)
    ctx = context or create_app_context(config)

    app = Flask(__name__)
    app.config.update(
        SECRET_KEY=config.SECRET_KEY,
        TESTING=config.TESTING,
        HUSTLE_CONFIG=config,
    )

    extensions.init_app(app, ctx)
    register_blueprints(app)
    _register_error_handlers(app)
    cli.init_app(app)

    logger.info("Application created", extra={"database_url": config.DATABASE_URL})
    return app


__all__ = ["create_app"]
