from datetime import date

import pytest
from sqlalchemy import text

from errors import IntegrityError, NotFound


def test_empty_collection(collection):
    assert collection.build_collection() == []


def test_ada_lovelace_scenario(authors, books, collection):
    ada = authors.create_author("Ada Lovelace", "1815-12-10")
    assert ada.id == 1

    notes = books.create_book("Notes", 1)
    assert notes.id == 1

    [entry] = collection.build_collection()
    assert entry.title == "Notes"
    assert entry.author_name == "Ada Lovelace"
    assert entry.description is None
    assert entry.release_date is None

    authors.delete_author(1)
    with pytest.raises(NotFound):
        books.get_book(1)
    assert collection.build_collection() == []


def test_collection_matches_current_state(authors, books, collection, ada):
    babbage = authors.create_author("Charles Babbage", "1791-12-26")
    books.create_book("Notes", ada.id, release_date="1843-10-01")
    books.create_book("Economy of Machinery", babbage.id)
    books.create_book("Sketch", ada.id, description="Translation with notes")

    entries = collection.build_collection()

    assert len(entries) == books.count_books()
    assert [e.book_id for e in entries] == sorted(e.book_id for e in entries)
    for entry in entries:
        assert entry.author_name == authors.get_author(entry.author_id).name


def test_collection_is_not_cached(authors, books, collection, ada):
    books.create_book("Notes", ada.id)
    assert collection.build_collection()[0].author_name == "Ada Lovelace"

    authors.update_author(ada.id, "Augusta Ada King", "1815-12-10")
    books.create_book("Sketch", ada.id)

    entries = collection.build_collection()
    assert len(entries) == 2
    assert {e.author_name for e in entries} == {"Augusta Ada King"}


def test_entry_to_dict(books, collection, ada):
    book = books.create_book("Notes", ada.id, description="On the engine", release_date=date(1843, 10, 1))

    assert collection.build_collection()[0].to_dict() == {
        "book_id": book.id,
        "title": "Notes",
        "author_id": ada.id,
        "author_name": "Ada Lovelace",
        "description": "On the engine",
        "release_date": "1843-10-01",
    }


def test_missing_author_is_an_integrity_error(books, storage, collection, ada):
    books.create_book("Notes", ada.id)
    storage.session.execute(text("PRAGMA foreign_keys=OFF"))
    storage.session.execute(text("DELETE FROM authors"))
    storage.session.commit()

    with pytest.raises(IntegrityError):
        collection.build_collection()
