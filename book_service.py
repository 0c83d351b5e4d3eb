"""
Book CRUD with referential integrity against the authors table.

A Book is never staged until its author has been looked up inside the same
write scope, so no Book can be stored with a dangling ``author_id``.
"""

import logging

from data_models import Author, Book, TITLE_MAX_LENGTH
from errors import IntegrityError, NotFound
from validation import optional_text, parse_date, parse_id, require_text

logger = logging.getLogger(__name__)


class BookService:
    def __init__(self, storage):
        self._storage = storage

    def list_books(self, resolve_authors: bool = False) -> list[Book]:
        """
        Return every book ordered by id.

        With ``resolve_authors`` each book's author is loaded as well, under
        one read scope; a book whose author is missing raises IntegrityError.
        """
        if not resolve_authors:
            return self._storage.list(Book)

        with self._storage.read():
            books = self._storage.list(Book)
            for book in books:
                if book.author is None:
                    logger.error("Book %s references missing author %s", book.id, book.author_id)
                    raise IntegrityError(
                        f"Book {book.id} references missing author {book.author_id}"
                    )
        return books

    def count_books(self) -> int:
        return self._storage.count(Book)

    def get_book(self, book_id) -> Book:
        """
        Fetch one book, raising NotFound if it does not exist.
        """
        book = self._storage.get(Book, parse_id(book_id, "book_id"))
        if book is None:
            raise NotFound("Book", book_id)
        return book

    def create_book(self, title, author_id, description=None, release_date=None) -> Book:
        """
        Validate the fields, check the author exists and store the new book.
        """
        fields = self._clean_fields(title, author_id, description, release_date)

        with self._storage.transaction():
            self._require_author(fields["author_id"])
            book = Book(**fields)
            self._storage.touch(book)
            self._storage.add(book)
            logger.info("Created book %s '%s' for author %s", book.id, book.title, book.author_id)

        return book

    def update_book(self, book_id, title, author_id, description=None, release_date=None) -> Book:
        """Replace every mutable field of an existing book."""
        fields = self._clean_fields(title, author_id, description, release_date)

        with self._storage.transaction():
            book = self.get_book(book_id)
            self._require_author(fields["author_id"])
            for name, value in fields.items():
                setattr(book, name, value)
            self._storage.touch(book)
            self._storage.session.flush()
            logger.info("Updated book %s", book.id)

        return book

    def delete_book(self, book_id) -> None:
        """
        Delete one book. Its author is left alone.
        """
        with self._storage.transaction():
            book = self.get_book(book_id)
            self._storage.delete(book)

        logger.info("Deleted book %s", book_id)

    def delete_all_by_author(self, author_id: int) -> int:
        """
        Delete every book written by ``author_id`` and return how many went.

        Only meant to run inside the author cascade; joins the caller's
        transaction. Zero matching books is not an error.
        """
        with self._storage.transaction():
            books = self._storage.list(Book, author_id=author_id)
            for book in books:
                self._storage.delete(book)

        logger.debug("Removed %d book(s) of author %s", len(books), author_id)
        return len(books)

    def list_books_by_author(self, author_id: int) -> list[Book]:
        return self._storage.list(Book, author_id=author_id)

    def _require_author(self, author_id: int) -> Author:
        author = self._storage.get(Author, author_id)
        if author is None:
            raise NotFound("Author", author_id)
        return author

    @staticmethod
    def _clean_fields(title, author_id, description, release_date) -> dict:
        return {
            "title": require_text(title, "title", TITLE_MAX_LENGTH),
            "author_id": parse_id(author_id, "author_id"),
            "description": optional_text(description, "description"),
            "release_date": parse_date(release_date, "release_date"),
        }
