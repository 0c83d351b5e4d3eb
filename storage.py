"""
Persistence adapter over the Flask-SQLAlchemy session.

The services receive a ``Storage`` instance instead of touching ``db.session``
directly, so every write goes through one transactional scope:

- ``transaction()`` serializes writers with a re-entrant lock, commits when
  the outermost scope exits cleanly and rolls everything back otherwise.
- ``read()`` holds the same lock for reads spanning several statements, so
  they never see a half-applied cascade.
- Lookups always refresh from the database; nothing is cached between calls.
- ``touch()`` keeps ``updated_at`` strictly increasing per record.

Must be used inside a Flask application context.
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone

from sqlalchemy import event, exc as sa_exc, func, select
from sqlalchemy.engine import Engine

from errors import IntegrityError

logger = logging.getLogger(__name__)

# SQLite INTEGER is a signed 64-bit value.
MIN_ID = -2 ** 63
MAX_ID = 2 ** 63 - 1


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES clauses unless enabled per connection.
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def utcnow() -> datetime:
    """Naive UTC timestamp, the form SQLite DateTime columns round-trip."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Storage:
    """Thin wrapper around a Flask-SQLAlchemy ``db`` handle."""

    def __init__(self, database):
        self._db = database
        self._lock = threading.RLock()
        self._depth = 0

    @property
    def session(self):
        return self._db.session

    def create_all(self) -> None:
        """
        Create the authors and books tables if they are missing.
        """
        self._db.create_all()

    def drop_all(self) -> None:
        self._db.drop_all()

    @contextmanager
    def transaction(self):
        """
        Open a write scope. Nested scopes join the enclosing one; only the
        outermost commits or rolls back.
        """
        with self._lock:
            outermost = self._depth == 0
            self._depth += 1
            try:
                yield self.session
                if outermost:
                    self.session.commit()
            except sa_exc.IntegrityError as exc:
                if outermost:
                    self.session.rollback()
                logger.error("Rolled back transaction after integrity failure: %s", exc.orig)
                raise IntegrityError(str(exc.orig)) from exc
            except Exception:
                if outermost:
                    self.session.rollback()
                raise
            finally:
                self._depth -= 1

    @contextmanager
    def read(self):
        """
        Open a consistent read scope: no write commits while it is held.

        Outside a transaction every loaded record is expired first, so
        relationships are reloaded instead of served from the identity map.
        """
        with self._lock:
            if self._depth == 0:
                self.session.expire_all()
            yield self.session

    def get(self, model, record_id):
        """
        Fetch one record by primary key, or None if there is no such row.
        """
        if not MIN_ID <= record_id <= MAX_ID:
            return None
        return self.session.get(model, record_id, populate_existing=True)

    def list(self, model, **filters):
        """
        All records matching ``filters``, ordered by ascending id.
        """
        stmt = (
            select(model)
            .filter_by(**filters)
            .order_by(model.id.asc())
            .execution_options(populate_existing=True)
        )
        return list(self.session.scalars(stmt))

    def count(self, model, **filters) -> int:
        stmt = select(func.count(model.id)).where(
            *[getattr(model, column) == value for column, value in filters.items()]
        )
        return self.session.scalar(stmt)

    def add(self, record):
        """
        Stage a new record and flush it so the id is assigned.
        """
        self.session.add(record)
        self.session.flush()
        return record

    def delete(self, record) -> None:
        """
        Stage the deletion of a record and flush it.
        """
        self.session.delete(record)
        self.session.flush()

    @staticmethod
    def touch(record) -> None:
        """
        Stamp ``updated_at``, one microsecond past the previous value if the
        clock has not moved beyond it.
        """
        now = utcnow()
        previous = record.updated_at
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        record.updated_at = now
