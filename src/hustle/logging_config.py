"""Logging for Hustle: readable console lines plus a rotating JSON log file.

JSON lines lift the identifiers the services pass through ``extra=``
(``user_id``, ``action_id``, ``operation``, ``date``) to top-level keys so a
habit's history can be grepped straight out of ``hustle.log``. Records logged
while a Flask request is active also carry its method and path.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
from datetime import datetime, timezone
from pathlib import Path

from flask import has_request_context, request

from .config import BaseConfig

LOGGER_NAME = "hustle"
LOG_FILENAME = "hustle.log"

CONTEXT_FIELDS = ("user_id", "action_id", "operation", "date")

# attributes every LogRecord has, plus what Formatter.format() adds
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None))
) | {"message", "asctime", "request_method", "request_path"}


class RequestContextFilter(logging.Filter):
    """Stamp records with the active request's method and path, if any."""

    def filter(self, record: logging.LogRecord) -> bool:
        if has_request_context():
            record.request_method = request.method
            record.request_path = request.path
        else:
            record.request_method = None
            record.request_path = None
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value

        if getattr(record, "request_path", None):
            entry["request"] = f"{record.request_method} {record.request_path}"

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and key not in CONTEXT_FIELDS
        }
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str)


def setup_logging(config: BaseConfig) -> logging.Logger:
    """(Re)configure the ``hustle`` logger for ``config``.

    Calling it again replaces the previous handlers, so each app or test gets
    its own log file under ``DATA_DIR/logs``.
    """

    logs_dir = Path(config.DATA_DIR) / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(logging.DEBUG if config.DEV_MODE else logging.INFO)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    request_filter = RequestContextFilter()

    console = logging.StreamHandler()
    console.setLevel(logging.INFO if config.DEV_MODE else logging.WARNING)
    console.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s", "%H:%M:%S")
    )
    console.addFilter(request_filter)
    app_logger.addHandler(console)

    log_file = logs_dir / LOG_FILENAME
    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(JSONFormatter())
    file_handler.addFilter(request_filter)
    app_logger.addHandler(file_handler)

    app_logger.info(
        "Logging initialized",
        extra={"log_file": str(log_file), "dev_mode": config.DEV_MODE},
    )
    return app_logger


def get_logger(name: str) -> logging.Logger:
    """Logger below ``hustle``, e.g. ``get_logger("services.tracker")``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")
