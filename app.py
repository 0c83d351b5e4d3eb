"""
BookAlchemy - a personal digital library built with Flask and SQLAlchemy.

Features:
- Add, edit and delete authors and books (with validation)
- Every book must belong to an existing author
- Deleting an author deletes all of their books
- Collection view listing every book with its author's name

This module is the thin HTTP layer: it reads request payloads, calls the
services and turns their failures into JSON error responses.
"""

import logging

import click
from flask import Blueprint, Flask, current_app, jsonify, request

from author_service import AuthorService
from book_service import BookService
from collection import CollectionBuilder
from config import Config
from data_models import db
from errors import IntegrityError, NotFound, ValidationError
from logging_config import configure_logging
from storage import Storage

logger = logging.getLogger(__name__)

bp = Blueprint("library", __name__)


def create_app(test_config=None):
    """
    Application factory. ``test_config`` overrides the settings from Config.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.from_mapping(test_config)

    configure_logging(app)
    db.init_app(app)

    storage = Storage(db)
    books = BookService(storage)
    authors = AuthorService(storage, books)
    app.extensions["bookalchemy"] = {
        "storage": storage,
        "books": books,
        "authors": authors,
        "collection": CollectionBuilder(storage, authors, books),
    }

    app.register_blueprint(bp)
    app.register_error_handler(ValidationError, handle_validation_error)
    app.register_error_handler(NotFound, handle_not_found)
    app.register_error_handler(IntegrityError, handle_integrity_error)

    @app.cli.command("init-db")
    def init_db_command():
        """Create the authors and books tables."""
        storage.create_all()
        click.echo("Initialized the database.")

    logger.debug("BookAlchemy app created with %s", app.config["SQLALCHEMY_DATABASE_URI"])
    return app


def service(name):
    return current_app.extensions["bookalchemy"][name]


def read_payload():
    """
    Form fields or a JSON object, whichever the client sent.
    """
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form


def handle_validation_error(error):
    return jsonify(error="validation_error", field=error.field, message=error.message), 400


def handle_not_found(error):
    return jsonify(error="not_found", message=str(error)), 404


def handle_integrity_error(error):
    logger.error("Integrity error: %s", error)
    return jsonify(error="integrity_error", message=str(error)), 409


@bp.route("/")
def home():
    """
    Homepage: every book with its author's name, ordered by book id.
    """
    entries = service("collection").build_collection()
    return jsonify([entry.to_dict() for entry in entries])


@bp.route("/authors", methods=["GET", "POST"])
def authors_index():
    authors = service("authors")

    if request.method == "POST":
        data = read_payload()
        author = authors.create_author(data.get("name"), data.get("birthdate"))
        return jsonify(author.to_dict()), 201

    return jsonify([author.to_dict() for author in authors.list_authors()])


@bp.route("/authors/<author_id>", methods=["GET", "PUT", "DELETE"])
def author_detail(author_id):
    """
    Show, replace or delete one author. Deleting also removes their books.
    """
    authors = service("authors")

    if request.method == "PUT":
        data = read_payload()
        author = authors.update_author(author_id, data.get("name"), data.get("birthdate"))
        return jsonify(author.to_dict())

    if request.method == "DELETE":
        authors.delete_author(author_id)
        return "", 204

    return jsonify(authors.get_author(author_id).to_dict())


@bp.route("/authors/<author_id>/books")
def author_books(author_id):
    books = service("authors").list_author_books(author_id)
    return jsonify([book.to_dict() for book in books])


@bp.route("/books", methods=["GET", "POST"])
def books_index():
    books = service("books")

    if request.method == "POST":
        data = read_payload()
        book = books.create_book(
            data.get("title"),
            data.get("author_id"),
            description=data.get("description"),
            release_date=data.get("release_date"),
        )
        return jsonify(book.to_dict()), 201

    return jsonify([book.to_dict() for book in books.list_books()])


@bp.route("/books/<book_id>", methods=["GET", "PUT", "DELETE"])
def book_detail(book_id):
    books = service("books")

    if request.method == "PUT":
        data = read_payload()
        book = books.update_book(
            book_id,
            data.get("title"),
            data.get("author_id"),
            description=data.get("description"),
            release_date=data.get("release_date"),
        )
        return jsonify(book.to_dict())

    if request.method == "DELETE":
        books.delete_book(book_id)
        return "", 204

    return jsonify(books.get_book(book_id).to_dict())


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()

    app.run(debug=True)
