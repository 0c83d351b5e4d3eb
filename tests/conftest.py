from datetime import date

import pytest

from app import create_app
from data_models import db


@pytest.fixture
def app():
    # In-memory SQLite; Flask-SQLAlchemy keeps one shared connection for it.
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
    })
    with app.app_context():
        app.extensions["bookalchemy"]["storage"].create_all()
        yield app
        app.extensions["bookalchemy"]["storage"].session.remove()
        app.extensions["bookalchemy"]["storage"].drop_all()


@pytest.fixture
def storage(app):
    return app.extensions["bookalchemy"]["storage"]


@pytest.fixture
def authors(app):
    return app.extensions["bookalchemy"]["authors"]


@pytest.fixture
def books(app):
    return app.extensions["bookalchemy"]["books"]


@pytest.fixture
def collection(app):
    return app.extensions["bookalchemy"]["collection"]


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def ada(authors):
    return authors.create_author("Ada Lovelace", date(1815, 12, 10))


@pytest.fixture
def file_app(tmp_path):
    # A real file, so every thread gets its own connection.
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'library.sqlite'}",
    })
    with app.app_context():
        app.extensions["bookalchemy"]["storage"].create_all()
    yield app
    with app.app_context():
        db.engine.dispose()
