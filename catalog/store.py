"""
catalog/store.py -- SQLAlchemy-backed persistence layer for books.

Pattern: Repository + Data Mapper. BookStore is the repository; _row_to_book
is the mapper. Route handlers never touch SQL directly.

Lookups by id raise NotFoundError rather than returning None so the API layer
maps a miss to 404 through the shared exception handler.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = BookStore("sqlite:///:memory:")
    book_id = store.create_book(Book(title="Dune", author="Frank Herbert", genre="Science Fiction", price=9.99))
    store.update_book(book_id, price=7.5)
    store.delete_book(book_id)
    store.close()
"""

import logging

from sqlalchemy import Boolean, Column, Float, Integer, MetaData, String, Table, select
from sqlalchemy.engine import Engine

from catalog.models import Book
from core.database import make_engine, now_iso
from core.errors import NotFoundError

logger = logging.getLogger("bookcatalog.catalog")

# Columns an update may touch. Anything else passed to update_book() is a
# programming error, not user input.
_UPDATABLE = frozenset({"title", "author", "genre", "price", "in_stock"})

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_books = Table(
    "books",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(100), nullable=False),
    Column("author", String(50), nullable=False),
    Column("genre", String(30), nullable=False),
    Column("price", Float, nullable=False),
    Column("in_stock", Boolean, nullable=False, default=True),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
)


class BookStore:
    """Repository for Book entities."""

    def __init__(self, db_url: str) -> None:
        self.engine: Engine = make_engine(db_url)
        metadata.create_all(self.engine)

    def create_book(self, book: Book) -> int:
        """Insert a book and return its assigned ID."""
        now = now_iso()
        with self.engine.connect() as conn:
            result = conn.execute(
                _books.insert().values(
                    title=book.title,
                    author=book.author,
                    genre=book.genre,
                    price=book.price,
                    in_stock=book.in_stock,
                    created_at=now,
                    updated_at=now,
                )
            )
            conn.commit()
        book_id = result.inserted_primary_key[0]
        logger.info("Created book id=%s", book_id)
        return book_id

    def list_books(self) -> list[Book]:
        """Return all books, oldest first."""
        with self.engine.connect() as conn:
            rows = conn.execute(select(_books).order_by(_books.c.id)).fetchall()
        return [_row_to_book(r) for r in rows]

    def get_book(self, book_id: int) -> Book:
        with self.engine.connect() as conn:
            row = conn.execute(select(_books).where(_books.c.id == book_id)).fetchone()
        if row is None:
            raise NotFoundError("Book not found")
        return _row_to_book(row)

    def update_book(self, book_id: int, **fields) -> Book:
        """Apply a partial update and return the stored book.

        Only the supplied fields change; updated_at is always refreshed.
        Raises NotFoundError if book_id does not exist.
        """
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unknown book fields: {unknown!r}")
        with self.engine.connect() as conn:
            result = conn.execute(
                _books.update().where(_books.c.id == book_id).values(**fields, updated_at=now_iso())
            )
            conn.commit()
        if result.rowcount == 0:
            raise NotFoundError("Book not found")
        logger.info("Updated book id=%s fields=%s", book_id, sorted(fields))
        return self.get_book(book_id)

    def delete_book(self, book_id: int) -> Book:
        """Delete a book and return the record as it was before deletion."""
        book = self.get_book(book_id)
        with self.engine.connect() as conn:
            result = conn.execute(_books.delete().where(_books.c.id == book_id))
            conn.commit()
        if result.rowcount == 0:
            raise NotFoundError("Book not found")
        logger.info("Deleted book id=%s", book_id)
        return book

    def close(self) -> None:
        self.engine.dispose()


def _row_to_book(row) -> Book:
    return Book(
        id=row.id,
        title=row.title,
        author=row.author,
        genre=row.genre,
        price=row.price,
        in_stock=bool(row.in_stock),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
