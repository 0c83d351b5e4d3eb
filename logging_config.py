"""
Logging for the BookAlchemy app, driven by ``LOG_LEVEL``, ``LOG_FILE`` and
``LOG_SQL`` in the Flask config.

Records go to Flask's ``wsgi_errors_stream`` (the server's error stream
during a request, stderr otherwise) and optionally to a file.
"""

import logging
from logging.config import dictConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(app) -> None:
    """
    Configure the root logger from ``app.config``.

    Left untouched when the root logger already has handlers (a host
    server, the test runner, or a previous ``create_app`` call).
    """
    if logging.getLogger().handlers:
        return

    level = app.config["LOG_LEVEL"].upper()
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"

    handlers = {
        "wsgi": {
            "class": "logging.StreamHandler",
            "stream": "ext://flask.logging.wsgi_errors_stream",
            "formatter": "default",
        },
    }
    if app.config["LOG_FILE"]:
        handlers["file"] = {
            "class": "logging.FileHandler",
            "filename": app.config["LOG_FILE"],
            "encoding": "utf-8",
            "formatter": "default",
        }

    dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT, "datefmt": "%Y-%m-%d %H:%M:%S"},
        },
        "handlers": handlers,
        "loggers": {
            # Echo every statement when LOG_SQL is on.
            "sqlalchemy.engine": {"level": "INFO" if app.config["LOG_SQL"] else "WARNING"},
        },
        "root": {"level": level, "handlers": list(handlers)},
    })
