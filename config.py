"""
Flask settings for BookAlchemy.

Each value can be overridden with a ``BOOKALCHEMY_*`` environment variable.
Values are read when this module is imported, so set the environment first.
"""

import os

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "BOOKALCHEMY_DATABASE_URI",
        f"sqlite:///{os.path.join(basedir, 'data/library.sqlite')}",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv("BOOKALCHEMY_SECRET_KEY", "dev-secret-key")     # dev only
    LOG_LEVEL = os.getenv("BOOKALCHEMY_LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("BOOKALCHEMY_LOG_FILE") or None
    LOG_SQL = os.getenv("BOOKALCHEMY_LOG_SQL", "false").lower() in {"1", "true", "yes"}
