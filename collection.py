"""
Denormalized "collection" view: every book next to its author's name.

Built on demand from the services on each call, so it always reflects the
latest committed state. Author fields are looked up by id rather than copied
into the books table.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import date

from errors import IntegrityError, NotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionEntry:
    book_id: int
    title: str
    author_id: int
    author_name: str
    description: str | None
    release_date: date | None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["release_date"] = self.release_date.isoformat() if self.release_date else None
        return data


class CollectionBuilder:
    def __init__(self, storage, authors, books):
        self._storage = storage
        self._authors = authors
        self._books = books

    def build_collection(self) -> list[CollectionEntry]:
        """
        One entry per book, ordered by book id.

        Books and authors are read under a single read scope, so an author
        deleted meanwhile is seen either with all its books or with none.
        """
        # Memoised for this call only.
        author_names: dict[int, str] = {}
        entries = []

        with self._storage.read():
            for book in self._books.list_books():
                if book.author_id not in author_names:
                    try:
                        author = self._authors.get_author(book.author_id)
                    except NotFound:
                        logger.error("Book %s references missing author %s", book.id, book.author_id)
                        raise IntegrityError(
                            f"Book {book.id} references missing author {book.author_id}"
                        ) from None
                    author_names[book.author_id] = author.name

                entries.append(CollectionEntry(
                    book_id=book.id,
                    title=book.title,
                    author_id=book.author_id,
                    author_name=author_names[book.author_id],
                    description=book.description,
                    release_date=book.release_date,
                ))

        return entries
