"""Unit tests for catalog/store.py -- BookStore CRUD.

Covers:
- create/get round trip with store-managed timestamps
- list ordering
- partial update touches only supplied fields and refreshes updated_at
- delete returns the removed record
- NotFoundError for unknown ids; ValueError for unknown update columns
"""

import pytest

from catalog.models import Book
from catalog.store import BookStore
from core.errors import NotFoundError


def _dune() -> Book:
    return Book(title="Dune", author="Frank Herbert", genre="Science Fiction", price=9.99)


class TestBookStore:
    def test_create_and_get(self, book_store: BookStore) -> None:
        book_id = book_store.create_book(_dune())
        book = book_store.get_book(book_id)
        assert book.id == book_id
        assert book.title == "Dune"
        assert book.in_stock is True
        assert book.created_at
        assert book.created_at == book.updated_at

    def test_list_oldest_first(self, book_store: BookStore) -> None:
        first = book_store.create_book(_dune())
        second = book_store.create_book(Book(title="Emma", author="Jane Austen", genre="Romance", price=4.0))
        assert [b.id for b in book_store.list_books()] == [first, second]

    def test_partial_update(self, book_store: BookStore) -> None:
        book_id = book_store.create_book(_dune())
        original = book_store.get_book(book_id)
        updated = book_store.update_book(book_id, price=3.5, in_stock=False)
        assert updated.price == 3.5
        assert updated.in_stock is False
        assert updated.title == original.title
        assert updated.created_at == original.created_at
        assert updated.updated_at >= original.updated_at

    def test_update_unknown_column(self, book_store: BookStore) -> None:
        book_id = book_store.create_book(_dune())
        with pytest.raises(ValueError):
            book_store.update_book(book_id, id=5)

    def test_delete_returns_record(self, book_store: BookStore) -> None:
        book_id = book_store.create_book(_dune())
        deleted = book_store.delete_book(book_id)
        assert deleted.id == book_id
        with pytest.raises(NotFoundError):
            book_store.get_book(book_id)

    @pytest.mark.parametrize("op", ["get", "update", "delete"])
    def test_missing_book(self, book_store: BookStore, op: str) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            if op == "get":
                book_store.get_book(404)
            elif op == "update":
                book_store.update_book(404, price=1.0)
            else:
                book_store.delete_book(404)
        assert exc_info.value.status_code == 404
