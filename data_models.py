from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

NAME_MAX_LENGTH = 128
TITLE_MAX_LENGTH = 128


class Author(db.Model):
    """
    Author model storing name, birthdate and related books.
    """
    __tablename__ = 'authors'
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(NAME_MAX_LENGTH), nullable=False)
    birthdate = db.Column(db.Date, nullable=False)
    updated_at = db.Column(db.DateTime, nullable=False)

    # Books are removed explicitly by BookService.delete_all_by_author,
    # the ON DELETE CASCADE on books.author_id is only the backstop.
    books = db.relationship(
        "Book",
        back_populates="author",
        order_by="Book.id",
        passive_deletes="all",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "birthdate": self.birthdate.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    def __repr__(self):
        return f"Author(id = {self.id}, name = {self.name})"

    def __str__(self):
        return f"{self.name}"


class Book(db.Model):
    """
    Book model storing title, optional description and release date, and author link.
    """
    __tablename__ = 'books'
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    title = db.Column(db.String(TITLE_MAX_LENGTH), nullable=False)
    description = db.Column(db.Text, nullable=True)
    release_date = db.Column(db.Date, nullable=True)
    updated_at = db.Column(db.DateTime, nullable=False)

    author_id = db.Column(
        db.Integer,
        db.ForeignKey("authors.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author = db.relationship("Author", back_populates="books")

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "author_id": self.author_id,
            "description": self.description,
            "release_date": self.release_date.isoformat() if self.release_date else None,
            "updated_at": self.updated_at.isoformat(),
        }

    def __repr__(self):
        return f"<Book id={self.id} title='{self.title}'>"

    def __str__(self):
        return f"{self.title} ({self.release_date.year})" if self.release_date else self.title
