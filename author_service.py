import logging

from data_models import Author, NAME_MAX_LENGTH
from errors import NotFound
from validation import parse_date, parse_id, require_text

logger = logging.getLogger(__name__)


class AuthorService:
    """
    Author CRUD. Deleting an author cascades to its books through the
    injected BookService, inside one transaction.
    """

    def __init__(self, storage, books):
        self._storage = storage
        self._books = books

    def list_authors(self) -> list[Author]:
        """
        Return every author ordered by id.
        """
        return self._storage.list(Author)

    def get_author(self, author_id) -> Author:
        """
        Fetch one author, raising NotFound if it does not exist.
        """
        author = self._storage.get(Author, parse_id(author_id, "author_id"))
        if author is None:
            raise NotFound("Author", author_id)
        return author

    def create_author(self, name, birthdate) -> Author:
        """
        Validate name and birthdate and store a new author.
        """
        name = require_text(name, "name", NAME_MAX_LENGTH)
        birthdate = parse_date(birthdate, "birthdate", required=True)

        with self._storage.transaction():
            author = Author(name=name, birthdate=birthdate)
            self._storage.touch(author)
            self._storage.add(author)
            logger.info("Created author %s '%s'", author.id, author.name)

        return author

    def update_author(self, author_id, name, birthdate) -> Author:
        name = require_text(name, "name", NAME_MAX_LENGTH)
        birthdate = parse_date(birthdate, "birthdate", required=True)

        with self._storage.transaction():
            author = self.get_author(author_id)
            author.name = name
            author.birthdate = birthdate
            self._storage.touch(author)
            self._storage.session.flush()
            logger.info("Updated author %s", author.id)

        return author

    def delete_author(self, author_id) -> None:
        """
        Delete an author and all related books. Either both go or, on any
        failure, neither does.
        """
        with self._storage.transaction():
            author = self.get_author(author_id)
            removed = self._books.delete_all_by_author(author.id)
            self._storage.delete(author)

        logger.info("Deleted author %s and %d related book(s)", author_id, removed)

    def list_author_books(self, author_id):
        """Books of one author ordered by id (author detail page)."""
        with self._storage.read():
            author = self.get_author(author_id)
            return self._books.list_books_by_author(author.id)
